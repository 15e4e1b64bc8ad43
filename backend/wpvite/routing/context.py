"""
WPVite Backend — Request Context
==================================

What:  The value every API handler receives instead of a framework request.
How:   A frozen dataclass. The router and the auth guard never mutate it;
       they derive a new context with `with_params()` / `with_user()`.
Who:   Built once per request by the /api entry point (routes/api.py).

Fields:
    method, path   HTTP method and raw (percent-encoded) request path
    query          Query-string parameters merged with captured path parameters
    headers        Lower-cased request headers
    cookies        Request cookies
    body           Raw request body
    db             The request's AsyncSession (None in pure unit tests)
    user           Verified identity, set by require_auth
    base_url       Scheme + host the request arrived on, no trailing slash
"""

import json
import uuid
from dataclasses import dataclass, field, replace
from typing import Any, Dict, Mapping, Optional, Type, TypeVar

from pydantic import BaseModel
from pydantic import ValidationError as PydanticValidationError
from sqlalchemy.ext.asyncio import AsyncSession
from starlette.requests import Request

from wpvite.exceptions import ValidationError
from wpvite.routing.patterns import path_from_raw
from wpvite.schemas.auth import AuthUser

ModelT = TypeVar("ModelT", bound=BaseModel)


@dataclass(frozen=True)
class RequestContext:
    method: str
    path: str
    query: Mapping[str, str] = field(default_factory=dict)
    headers: Mapping[str, str] = field(default_factory=dict)
    cookies: Mapping[str, str] = field(default_factory=dict)
    body: bytes = b""
    db: Optional[AsyncSession] = None
    user: Optional[AuthUser] = None
    base_url: str = ""

    # ── Construction ──────────────────────────────────────────────────────

    @classmethod
    async def from_request(cls, request: Request, db: Optional[AsyncSession] = None) -> "RequestContext":
        """
        Snapshot a Starlette request.

        The path comes from the ASGI `raw_path` when the server provides
        it, so percent-encoded segments (e.g. `%2F`) reach the router intact
        and are decoded exactly once, per segment.
        """
        raw_path = request.scope.get("raw_path")
        path = path_from_raw(raw_path) if raw_path else request.url.path
        return cls(
            method=request.method.upper(),
            path=path.split("?", 1)[0],
            query=dict(request.query_params),
            headers={k.lower(): v for k, v in request.headers.items()},
            cookies=dict(request.cookies),
            body=await request.body(),
            db=db,
            base_url=str(request.base_url).rstrip("/"),
        )

    def with_params(self, params: Mapping[str, str]) -> "RequestContext":
        """
        New context whose query bag also holds the captured path parameters.

        Precedence: path parameters override query-string parameters of the
        same name, so `/api/posts/{id}?id=other` gives the handler the path id.
        """
        if not params:
            return self
        return replace(self, query={**self.query, **params})

    def with_user(self, user: AuthUser) -> "RequestContext":
        return replace(self, user=user)

    # ── Body Helpers ──────────────────────────────────────────────────────

    def json(self) -> Dict[str, Any]:
        """Decode the body as a JSON object; an empty body is an empty object."""
        if not self.body or not self.body.strip():
            return {}
        try:
            data = json.loads(self.body)
        except ValueError:
            raise ValidationError(message="Request body must be valid JSON", field="body")
        if not isinstance(data, dict):
            raise ValidationError(message="Request body must be a JSON object", field="body")
        return data

    def parse_body(self, model: Type[ModelT]) -> ModelT:
        """Validate the JSON body against a Pydantic model, reporting the first bad field."""
        try:
            return model.model_validate(self.json())
        except PydanticValidationError as e:
            first = e.errors()[0]
            location = ".".join(str(part) for part in first.get("loc", ())) or None
            raise ValidationError(
                message=f"Invalid value for '{location}': {first.get('msg')}" if location else str(first.get("msg")),
                field=location,
                context={"errors": len(e.errors())},
            )

    # ── Query Helpers ─────────────────────────────────────────────────────

    def query_int(
        self,
        name: str,
        default: int,
        minimum: Optional[int] = None,
        maximum: Optional[int] = None,
    ) -> int:
        raw = self.query.get(name)
        if raw is None or raw == "":
            return default
        try:
            value = int(raw)
        except ValueError:
            raise ValidationError(message=f"'{name}' must be an integer", field=name)
        if minimum is not None and value < minimum:
            raise ValidationError(message=f"'{name}' must be at least {minimum}", field=name)
        if maximum is not None and value > maximum:
            raise ValidationError(message=f"'{name}' must be at most {maximum}", field=name)
        return value

    def query_uuid(self, name: str, resource: str) -> uuid.UUID:
        """
        Read an id parameter (usually captured from the path).

        Raises:
            ValidationError: "<Resource> ID is required" when missing or not a UUID
        """
        raw = self.query.get(name)
        if not raw:
            raise ValidationError(message=f"{resource} ID is required", field=name)
        try:
            return uuid.UUID(raw)
        except ValueError:
            raise ValidationError(
                message=f"{resource} ID '{raw}' is not a valid identifier",
                field=name,
            )
