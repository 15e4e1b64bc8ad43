"""
WPVite Backend — Path Pattern Unit Tests
==========================================
"""

import pytest

from wpvite.exceptions import ConfigurationError
from wpvite.routing.patterns import PathPattern, normalize_path, path_from_raw, split_path
from wpvite.routing.resolver import classify


class TestNormalizePath:

    @pytest.mark.parametrize("raw, expected", [
        ("", "/"),
        ("/", "/"),
        ("/posts", "/posts"),
        ("/posts/", "/posts"),
        ("/posts?x=1", "/posts"),
        ("/posts/?x=1", "/posts"),
        ("posts", "/posts"),
    ])
    def test_normalize(self, raw, expected):
        assert normalize_path(raw) == expected

    def test_only_one_trailing_slash_removed(self):
        assert normalize_path("/posts//") == "/posts/"

    def test_split_root(self):
        assert split_path("/") == []
        assert split_path("/a/b") == ["a", "b"]


class TestPathFromRaw:

    @pytest.mark.parametrize("raw, expected", [
        (b"/p/hello", "/p/hello"),
        (b"/p/hello?x=1", "/p/hello"),
        (b"/p/hello%20world", "/p/hello%20world"),
        (b"/api/posts/a%2Fb", "/api/posts/a%2Fb"),
        (b"/p/caf\xc3\xa9", "/p/caf%C3%A9"),
    ])
    def test_path_from_raw(self, raw, expected):
        assert path_from_raw(raw) == expected

    def test_unescaped_utf8_slug_decodes_once(self):
        assert classify(path_from_raw("/p/café".encode("utf-8"))).params == {"slug": "café"}

    def test_escaped_and_unescaped_forms_agree(self):
        assert (
            PathPattern("/p/{slug}").match(path_from_raw(b"/p/caf\xc3\xa9"))
            == PathPattern("/p/{slug}").match("/p/caf%C3%A9")
        )


class TestPathPattern:

    def test_literal_match(self):
        assert PathPattern("/api/posts").match("/api/posts") == {}

    def test_param_capture(self):
        assert PathPattern("/p/{slug}").match("/p/hello") == {"slug": "hello"}

    def test_root_pattern(self):
        assert PathPattern("/").match("") == {}
        assert PathPattern("/").match("/x") is None

    def test_param_names(self):
        assert PathPattern("/a/{x}/b/{y}").param_names == ("x", "y")

    def test_duplicate_param_names_rejected(self):
        with pytest.raises(ConfigurationError, match="Duplicate parameter"):
            PathPattern("/a/{id}/b/{id}")

    @pytest.mark.parametrize("template", ["/a/{}", "/a/{1x}", "/a/x{id}", "/a/{id"])
    def test_malformed_segments_rejected(self, template):
        with pytest.raises(ConfigurationError):
            PathPattern(template)

    def test_trailing_slash_normalized_in_template(self):
        assert PathPattern("/api/posts/").template == "/api/posts"

    def test_equality_uses_normalized_template(self):
        assert PathPattern("/a/") == PathPattern("/a")
        assert len({PathPattern("/a/"), PathPattern("/a")}) == 1

    def test_unicode_param_decoded(self):
        assert PathPattern("/p/{slug}").match("/p/caf%C3%A9") == {"slug": "café"}
