"""
WPVite Backend — Path Patterns
================================

What:  Path normalization and single-segment pattern matching shared by the
       API router and the public route resolver.

Pattern syntax:
    /api/posts            literal segments only
    /api/posts/{id}       `{id}` captures exactly one non-empty segment
    /p/{slug}

Matching rules:
    - Query strings are ignored ("/a?x=1" is "/a")
    - Exactly one trailing slash is stripped; "" and "/" are the root
    - Segment counts must be equal (no catch-all segments)
    - Segments are percent-decoded before comparison; literal segments are
      compared case-sensitively, captured values are returned decoded

Examples:
    >>> PathPattern("/p/{slug}").match("/p/hello%20world/")
    {'slug': 'hello world'}
    >>> PathPattern("/p/{slug}").match("/P/hello") is None
    True
"""

from typing import Dict, List, Optional, Tuple
from urllib.parse import quote_from_bytes, unquote

from wpvite.exceptions import ConfigurationError


def normalize_path(path: str) -> str:
    """
    Canonical form used for both registration and lookup.

    "/posts/" → "/posts", "/" → "/", "" → "/", "/posts?x=1" → "/posts"
    """
    path = path.split("?", 1)[0]
    if path.endswith("/"):
        path = path[:-1]
    if not path:
        return "/"
    if not path.startswith("/"):
        path = "/" + path
    return path


def path_from_raw(raw_path: bytes) -> str:
    """
    Text form of an ASGI `raw_path`, query string dropped.

    Existing escapes are kept as-is; any other non-ASCII or reserved byte is
    percent-encoded, so segment decoding later reads it back as UTF-8:
    b"/p/caf\\xc3\\xa9" → "/p/caf%C3%A9".
    """
    return quote_from_bytes(raw_path.split(b"?", 1)[0], safe="/%!$&'()*+,;=:@~")


def split_path(path: str) -> List[str]:
    """Raw (still percent-encoded) segments of an already-normalized path."""
    if path == "/":
        return []
    return path[1:].split("/")


class PathPattern:
    """
    A compiled route template.

    Each segment is stored as a (name, literal) pair: capture segments have
    a name and no literal; literal segments have a decoded literal and no name.
    """

    __slots__ = ("template", "_segments", "param_names")

    def __init__(self, template: str):
        if not template.startswith("/"):
            raise ConfigurationError(
                message=f"Route pattern must start with '/': {template!r}",
                context={"pattern": template},
            )
        self.template = normalize_path(template)
        self._segments: Tuple[Tuple[Optional[str], Optional[str]], ...] = tuple(
            self._compile_segment(raw) for raw in split_path(self.template)
        )
        self.param_names: Tuple[str, ...] = tuple(
            name for name, _ in self._segments if name is not None
        )
        if len(set(self.param_names)) != len(self.param_names):
            raise ConfigurationError(
                message=f"Duplicate parameter name in route pattern {template!r}",
                context={"pattern": template, "params": list(self.param_names)},
            )

    def _compile_segment(self, raw: str) -> Tuple[Optional[str], Optional[str]]:
        if raw.startswith("{") and raw.endswith("}"):
            name = raw[1:-1]
            if not name.isidentifier():
                raise ConfigurationError(
                    message=f"Invalid parameter segment {raw!r} in {self.template!r}",
                    context={"pattern": self.template, "segment": raw},
                )
            return name, None
        if "{" in raw or "}" in raw:
            raise ConfigurationError(
                message=f"Malformed segment {raw!r} in {self.template!r}",
                context={"pattern": self.template, "segment": raw},
            )
        return None, unquote(raw)

    def match(self, path: str) -> Optional[Dict[str, str]]:
        """
        Match a request path against this pattern.

        Returns:
            Mapping of parameter name → decoded segment, or None on no match.
        """
        segments = split_path(normalize_path(path))
        if len(segments) != len(self._segments):
            return None

        params: Dict[str, str] = {}
        for raw, (name, literal) in zip(segments, self._segments):
            value = unquote(raw)
            if name is None:
                if value != literal:
                    return None
            else:
                if not raw:
                    return None
                params[name] = value
        return params

    def __eq__(self, other: object) -> bool:
        return isinstance(other, PathPattern) and other.template == self.template

    def __hash__(self) -> int:
        return hash(self.template)

    def __repr__(self) -> str:
        return f"PathPattern({self.template!r})"
