"""
WPVite Backend — API Path Router
==================================

What:  Maps (HTTP method, path) to a registered handler and injects the
       captured path parameters into the handler's RequestContext.
How:   Ordered route table, linear scan, first match wins. Registration
       order is the only precedence rule: a literal route registered before
       a parameterized one at the same position shadows it.
Who:   Built once by routes.api.build_api_router() at application start and
       stored on app.state; the /api entry point calls dispatch() per request.

Dispatch Flow:
    ┌──────────┐    ┌──────────────┐    ┌──────────────────┐    ┌─────────┐
    │ method + │───▶│ normalize,   │───▶│ first route with │───▶│ handler │
    │ path     │    │ strip query  │    │ method + shape   │    │ (ctx)   │
    └──────────┘    └──────────────┘    └──────────────────┘    └─────────┘
                                               │ none
                                               ▼
                                    404 {"error": "Not Found"}

Method Handling:
    A route registered with ANY_METHOD matches every method. A path that
    matches some route under a different method is still a plain 404;
    there is no 405 Method Not Allowed.

Failure Semantics:
    - Duplicate (method, pattern) registration → ConfigurationError
    - No match → 404 response (a return value, not an exception)
    - Handler exceptions propagate untouched to the app's exception handlers
"""

import inspect
import logging
from dataclasses import dataclass
from typing import Any, Awaitable, Callable, Dict, List, Optional, Tuple, Union

from starlette.responses import JSONResponse, Response

from wpvite.exceptions import ConfigurationError
from wpvite.routing.context import RequestContext
from wpvite.routing.patterns import PathPattern, normalize_path

logger = logging.getLogger(__name__)

ANY_METHOD = "ANY"
HTTP_METHODS = frozenset({"GET", "POST", "PUT", "DELETE"})

Handler = Callable[[RequestContext], Union[Response, Awaitable[Response]]]


def not_found_response() -> JSONResponse:
    return JSONResponse(status_code=404, content={"error": "Not Found"})


@dataclass(frozen=True)
class Route:
    """One immutable registration in the route table."""
    method: str
    pattern: PathPattern
    handler: Handler

    def accepts(self, method: str) -> bool:
        return self.method == ANY_METHOD or self.method == method


class Router:
    """
    Ordered route table with first-match dispatch.

    The table is written during start-up and only read afterwards, so a
    single Router is safe to share between concurrent requests.

    Usage:
        router = Router()
        router.get("/api/posts/new", new_post_form)
        router.get("/api/posts/{id}", get_post)
        response = await router.dispatch("GET", "/api/posts/42", ctx)
    """

    def __init__(self) -> None:
        self._routes: List[Route] = []
        self._keys: set = set()

    # ── Registration ──────────────────────────────────────────────────────

    def register(self, method: str, pattern: str, handler: Handler) -> Route:
        """
        Append a route to the table.

        Args:
            method:  GET, POST, PUT, DELETE (any case) or ANY_METHOD
            pattern: Template such as "/api/posts/{id}"; one trailing slash
                     is ignored, so "/api/posts/" registers "/api/posts"
            handler: Callable taking a RequestContext and returning a
                     Response or an awaitable of one

        Raises:
            ConfigurationError: Unknown method, malformed pattern, or the
                same (method, normalized pattern) already registered
        """
        method = method.upper()
        if method != ANY_METHOD and method not in HTTP_METHODS:
            raise ConfigurationError(
                message=f"Unsupported HTTP method {method!r} for route {pattern!r}",
                context={"method": method, "pattern": pattern},
            )

        compiled = PathPattern(pattern)
        key = (method, compiled.template)
        if key in self._keys:
            raise ConfigurationError(
                message=f"Route already registered: {method} {compiled.template}",
                context={"method": method, "pattern": compiled.template},
            )

        route = Route(method=method, pattern=compiled, handler=handler)
        self._routes.append(route)
        self._keys.add(key)
        logger.debug("Registered route %s %s", method, compiled.template)
        return route

    def get(self, pattern: str, handler: Handler) -> Route:
        return self.register("GET", pattern, handler)

    def post(self, pattern: str, handler: Handler) -> Route:
        return self.register("POST", pattern, handler)

    def put(self, pattern: str, handler: Handler) -> Route:
        return self.register("PUT", pattern, handler)

    def delete(self, pattern: str, handler: Handler) -> Route:
        return self.register("DELETE", pattern, handler)

    def any(self, pattern: str, handler: Handler) -> Route:
        return self.register(ANY_METHOD, pattern, handler)

    @property
    def routes(self) -> Tuple[Route, ...]:
        return tuple(self._routes)

    # ── Matching ──────────────────────────────────────────────────────────

    def match(self, method: str, path: str) -> Optional[Tuple[Route, Dict[str, str]]]:
        """
        Find the first route accepting this method whose pattern matches the path.

        Pure lookup: no handler is called and no state changes.
        """
        method = method.upper()
        path = normalize_path(path)
        for route in self._routes:
            if not route.accepts(method):
                continue
            params = route.pattern.match(path)
            if params is not None:
                return route, params
        return None

    async def dispatch(self, method: str, path: str, ctx: RequestContext) -> Any:
        """
        Invoke the matching handler with captured parameters merged into ctx.query.

        Path parameters take precedence over same-named query parameters.
        At most one handler runs per call.

        Returns:
            The handler's response, or a 404 JSON response when nothing matches.
        """
        found = self.match(method, path)
        if found is None:
            logger.info("No route for %s %s", method.upper(), normalize_path(path))
            return not_found_response()

        route, params = found
        logger.debug(
            "Dispatching %s %s → %s %s",
            method.upper(), path, route.method, route.pattern.template,
        )
        result = route.handler(ctx.with_params(params))
        if inspect.isawaitable(result):
            result = await result
        return result

    def __len__(self) -> int:
        return len(self._routes)
