"""
WPVite Backend — Public Page Renderer
=======================================

What:  Turns a classified route plus fetched data into a full HTML document.
How:   Jinja2 templates in rendering/templates, autoescaped. The page also
       embeds `window.__INITIAL_DATA__` ({type, data, siteOptions}) so the
       client theme can hydrate without refetching.
Who:   routes/public.py (pages, sitemap) and the OAuth callback (access denied).

Template per route type:
    home       → home.html       latest published posts
    post       → post.html       one post, editor blocks rendered
    page       → post.html       (reserved; classify() never produces it)
    not-found  → not_found.html

Editor Blocks (post content):
    paragraph  → <p>, inline spans
    heading    → <h1>..<h3>; levels above 3 are capped at h3
    image      → <figure><img><figcaption>
    inline     → text spans with bold/italic styles, links
    anything else is skipped
"""

import logging
from datetime import datetime
from pathlib import Path
from typing import Any, Dict, Iterable, Mapping, Optional, Tuple
from urllib.parse import urlparse

from jinja2 import Environment, FileSystemLoader, select_autoescape

from wpvite.routing.resolver import RouteType

logger = logging.getLogger(__name__)

TEMPLATES_DIR = Path(__file__).resolve().parent / "templates"

DEFAULT_SITE_TITLE = "WPVite"
DEFAULT_DESCRIPTION = "A WPVite Site"

_TEMPLATES = {
    RouteType.HOME: "home.html",
    RouteType.POST: "post.html",
    RouteType.PAGE: "post.html",
    RouteType.NOT_FOUND: "not_found.html",
}


# ══════════════════════════════════════════════════════════════════════════
# Template Filters
# ══════════════════════════════════════════════════════════════════════════


def format_date(value: Any) -> str:
    """ISO string or datetime → 'March 14, 2025'. Unparseable values pass through."""
    if isinstance(value, str):
        try:
            value = datetime.fromisoformat(value.replace("Z", "+00:00"))
        except ValueError:
            return value
    if isinstance(value, datetime):
        return f"{value:%B} {value.day}, {value.year}"
    return "" if value is None else str(value)


def safe_url(value: Any) -> str:
    """Only http(s), mailto and site-relative URLs survive; anything else becomes '#'."""
    if not isinstance(value, str) or not value.strip():
        return "#"
    scheme = urlparse(value.strip()).scheme.lower()
    if scheme in ("", "http", "https", "mailto"):
        return value.strip()
    return "#"


def heading_level(value: Any) -> int:
    try:
        level = int(value)
    except (TypeError, ValueError):
        return 1
    return min(max(level, 1), 3)


def _build_environment() -> Environment:
    env = Environment(
        loader=FileSystemLoader(str(TEMPLATES_DIR)),
        autoescape=select_autoescape(["html", "xml"]),
        trim_blocks=True,
        lstrip_blocks=True,
    )
    env.filters["format_date"] = format_date
    env.filters["safe_url"] = safe_url
    env.filters["heading_level"] = heading_level
    return env


_env = _build_environment()


# ══════════════════════════════════════════════════════════════════════════
# Page Metadata
# ══════════════════════════════════════════════════════════════════════════


def page_meta(route_type: RouteType, data: Mapping[str, Any], site_options: Mapping[str, Any]) -> Dict[str, Any]:
    """
    <title>, description and OpenGraph/Twitter values for a page.

    Site pages use the site title and tagline; a post page uses the post's
    title, excerpt and featured image.
    """
    site_title = site_options.get("site_title") or ""
    tagline = site_options.get("tagline") or ""
    site_logo = site_options.get("site_logo") or None

    post = data.get("post") if route_type in (RouteType.POST, RouteType.PAGE) else None
    if post:
        return {
            "title": post.get("title") or DEFAULT_SITE_TITLE,
            "description": post.get("excerpt") or post.get("title") or DEFAULT_DESCRIPTION,
            "og_type": "article",
            "image": post.get("featuredImage") or None,
        }

    if site_title:
        title = f"{site_title} - {tagline}" if tagline else site_title
    else:
        title = DEFAULT_SITE_TITLE
    if route_type is RouteType.NOT_FOUND:
        title = f"Page not found - {site_title or DEFAULT_SITE_TITLE}"

    return {
        "title": title,
        "description": tagline or DEFAULT_DESCRIPTION,
        "og_type": "website",
        "image": site_logo,
    }


# ══════════════════════════════════════════════════════════════════════════
# Public API
# ══════════════════════════════════════════════════════════════════════════


def render_page(
    path: str,
    route_type: RouteType,
    data: Optional[Mapping[str, Any]],
    site_options: Optional[Mapping[str, Any]],
) -> str:
    """
    Render a complete public page.

    Args:
        path:         Request path, exposed to templates as `current_path`
        route_type:   Result of classify()
        data:         JSON-ready dict: {"posts": [...]} or {"post": {...}}
        site_options: {key: value} from the options table

    Returns:
        HTML document as a string
    """
    data = dict(data or {})
    site_options = dict(site_options or {})
    template = _env.get_template(_TEMPLATES[route_type])

    html = template.render(
        current_path=path,
        route_type=route_type.value,
        data=data,
        site=site_options,
        site_title=site_options.get("site_title") or DEFAULT_SITE_TITLE,
        meta=page_meta(route_type, data, site_options),
        year=datetime.now().year,
        initial_data={"type": route_type.value, "data": data, "siteOptions": site_options},
    )
    logger.debug("Rendered %s page for %s (%d bytes)", route_type.value, path, len(html))
    return html


def render_sitemap(base_url: str, entries: Iterable[Tuple[str, datetime]]) -> str:
    """
    sitemaps.org XML: the home page, then one <url> per published post.

    Args:
        base_url: Scheme and host, e.g. "https://blog.example.com"
        entries:  (slug, updated_at) pairs
    """
    template = _env.get_template("sitemap.xml")
    return template.render(
        base_url=base_url.rstrip("/"),
        entries=[
            {"slug": slug, "lastmod": updated_at.isoformat() if updated_at else None}
            for slug, updated_at in entries
        ],
    ).strip()


def render_access_denied(email: str) -> str:
    return _env.get_template("access_denied.html").render(email=email)


def render_error_page(status_code: int, message: str) -> str:
    return _env.get_template("error.html").render(status_code=status_code, message=message)
