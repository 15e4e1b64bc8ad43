"""
WPVite Backend — Page Renderer Unit Tests
===========================================

What we test:
    ✅ Home, post and not-found pages render with the right titles
    ✅ Editor blocks (paragraph, heading, image, links) and HTML escaping
    ✅ Unsafe link schemes are neutralized
    ✅ Initial data embedded for hydration
    ✅ Sitemap XML
"""

import json
import re
from datetime import datetime, timezone

import pytest

from wpvite.rendering.renderer import (
    format_date,
    heading_level,
    page_meta,
    render_access_denied,
    render_error_page,
    render_page,
    render_sitemap,
    safe_url,
)
from wpvite.routing.resolver import RouteType

SITE = {"site_title": "My Blog", "tagline": "Notes", "site_logo": ""}


def _initial_data(html):
    match = re.search(r"window\.__INITIAL_DATA__ = (.*);", html)
    return json.loads(match.group(1))


class TestFilters:

    def test_format_date_iso(self):
        assert format_date("2025-03-14T09:26:53Z") == "March 14, 2025"

    def test_format_date_datetime(self):
        assert format_date(datetime(2025, 1, 2, tzinfo=timezone.utc)) == "January 2, 2025"

    def test_format_date_passthrough(self):
        assert format_date("yesterday") == "yesterday"
        assert format_date(None) == ""

    @pytest.mark.parametrize("url, expected", [
        ("https://example.com", "https://example.com"),
        ("/p/hello", "/p/hello"),
        ("mailto:a@example.com", "mailto:a@example.com"),
        ("javascript:alert(1)", "#"),
        ("JavaScript:alert(1)", "#"),
        ("data:text/html;base64,xx", "#"),
        ("", "#"),
        (None, "#"),
    ])
    def test_safe_url(self, url, expected):
        assert safe_url(url) == expected

    @pytest.mark.parametrize("value, expected", [(1, 1), (2, 2), (3, 3), (6, 3), (0, 1), ("x", 1), (None, 1)])
    def test_heading_level(self, value, expected):
        assert heading_level(value) == expected


class TestPageMeta:

    def test_home_title_with_tagline(self):
        assert page_meta(RouteType.HOME, {}, SITE)["title"] == "My Blog - Notes"

    def test_home_without_options(self):
        meta = page_meta(RouteType.HOME, {}, {})
        assert meta["title"] == "WPVite"
        assert meta["description"] == "A WPVite Site"
        assert meta["og_type"] == "website"

    def test_post_meta(self):
        post = {"title": "Hello", "excerpt": "", "featuredImage": "/uploads/x.png"}
        meta = page_meta(RouteType.POST, {"post": post}, SITE)
        assert meta == {
            "title": "Hello",
            "description": "Hello",
            "og_type": "article",
            "image": "/uploads/x.png",
        }

    def test_not_found_title(self):
        assert page_meta(RouteType.NOT_FOUND, {}, SITE)["title"] == "Page not found - My Blog"


class TestRenderPage:

    def test_home_lists_posts(self):
        posts = [{
            "title": "Hello",
            "slug": "hello world",
            "excerpt": "First",
            "updatedAt": "2025-03-14T09:26:53Z",
            "authorName": "Owner",
        }]
        html = render_page("/", RouteType.HOME, {"posts": posts}, SITE)

        assert "<title>My Blog - Notes</title>" in html
        assert 'href="/p/hello%20world"' in html
        assert "March 14, 2025" in html
        assert _initial_data(html) == {"type": "home", "data": {"posts": posts}, "siteOptions": SITE}

    def test_home_empty(self):
        assert "No posts found." in render_page("/", RouteType.HOME, {"posts": []}, {})

    def test_post_blocks(self):
        post = {
            "title": "Blocks",
            "updatedAt": "2025-03-14T00:00:00Z",
            "content": [
                {"type": "heading", "props": {"level": 5}, "content": [{"type": "text", "text": "Big"}]},
                {"type": "paragraph", "content": [
                    {"type": "text", "text": "bold", "styles": {"bold": True}},
                    {"type": "link", "href": "javascript:alert(1)", "content": [{"type": "text", "text": "x"}]},
                ]},
                {"type": "image", "props": {"url": "/uploads/a.png", "caption": "A cat", "name": "cat"}},
                {"type": "video", "props": {"url": "/v.mp4"}},
            ],
        }
        html = render_page("/p/blocks", RouteType.POST, {"post": post}, SITE)

        assert "<h3><span>Big</span></h3>" in html
        assert "<strong><span>bold</span></strong>" in html
        assert '<a href="#">x</a>' in html
        assert '<img src="/uploads/a.png" alt="cat" />' in html
        assert "<figcaption>A cat</figcaption>" in html
        assert "/v.mp4" not in html.split("window.__INITIAL_DATA__")[0]
        assert 'property="og:type" content="article"' in html

    def test_post_content_is_escaped(self):
        post = {
            "title": "<script>alert(1)</script>",
            "content": [{"type": "paragraph", "content": [{"type": "text", "text": "<b>hi</b>"}]}],
        }
        html = render_page("/p/x", RouteType.POST, {"post": post}, SITE)
        body = html.split("window.__INITIAL_DATA__")[0]

        assert "<script>alert(1)</script>" not in body
        assert "&lt;b&gt;hi&lt;/b&gt;" in body

    def test_initial_data_cannot_close_script(self):
        post = {"title": "</script><script>alert(1)</script>", "content": []}
        html = render_page("/p/x", RouteType.POST, {"post": post}, SITE)
        script = html.split("window.__INITIAL_DATA__")[1]
        assert "</script><script>" not in script.split("</script>")[0]

    def test_not_found_page(self):
        html = render_page("/nope", RouteType.NOT_FOUND, {}, {})
        assert "Page not found." in html
        assert "<title>Page not found - WPVite</title>" in html
        assert _initial_data(html)["type"] == "not-found"


class TestOtherDocuments:

    def test_sitemap(self):
        xml = render_sitemap(
            "https://blog.example.com/",
            [("hello", datetime(2025, 3, 14, tzinfo=timezone.utc)), ("draft-less", None)],
        )
        assert xml.startswith('<?xml version="1.0" encoding="UTF-8"?>')
        assert "<loc>https://blog.example.com/</loc>" in xml
        assert "<loc>https://blog.example.com/p/hello</loc>" in xml
        assert "<lastmod>2025-03-14T00:00:00+00:00</lastmod>" in xml
        assert xml.count("<url>") == 3

    def test_access_denied_escapes_email(self):
        html = render_access_denied("<x>@example.com")
        assert "Access Denied" in html
        assert "&lt;x&gt;@example.com" in html

    def test_error_page(self):
        assert "<h1>Internal Server Error</h1>" in render_error_page(500, "Internal Server Error")
