"""
WPVite Backend — Public Route Type Resolver
=============================================

What:  Classifies a public URL path into the kind of page to render.
Who:   Called by the SSR entry point (routes/public.py) before any database
       access, so obviously invalid paths never cost a query.

Classification:
    /              → home       {}
    /p/{slug}      → post       {"slug": <decoded segment>}
    anything else  → not-found  {}

RouteType.PAGE is declared for static pages but nothing produces it yet;
every non-home, non-post path is not-found.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Dict

from wpvite.routing.patterns import PathPattern, normalize_path


class RouteType(str, Enum):
    HOME = "home"
    POST = "post"
    PAGE = "page"
    NOT_FOUND = "not-found"


@dataclass(frozen=True)
class RouteMatch:
    type: RouteType
    params: Dict[str, str] = field(default_factory=dict)

    def as_dict(self) -> dict:
        """Plain {"type": ..., "params": ...} structure, e.g. for the page's initial data."""
        return {"type": self.type.value, "params": dict(self.params)}


_POST_PATTERN = PathPattern("/p/{slug}")


def classify(path: str) -> RouteMatch:
    """
    Never raises; an unrecognized or malformed path is simply not-found.

    Examples:
        >>> classify("/p/hello%20world/").as_dict()
        {'type': 'post', 'params': {'slug': 'hello world'}}
    """
    path = normalize_path(path)
    if path == "/":
        return RouteMatch(RouteType.HOME)

    params = _POST_PATTERN.match(path)
    if params is not None:
        return RouteMatch(RouteType.POST, params)

    return RouteMatch(RouteType.NOT_FOUND)
