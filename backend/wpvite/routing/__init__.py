from wpvite.routing.context import RequestContext
from wpvite.routing.patterns import PathPattern, normalize_path
from wpvite.routing.resolver import RouteMatch, RouteType, classify
from wpvite.routing.router import ANY_METHOD, Route, Router, not_found_response

__all__ = [
    "ANY_METHOD",
    "PathPattern",
    "RequestContext",
    "Route",
    "RouteMatch",
    "RouteType",
    "Router",
    "classify",
    "normalize_path",
    "not_found_response",
]
