"""API middleware for cross-cutting concerns."""

import logging
import uuid
from collections.abc import Callable
from contextvars import ContextVar
from urllib.parse import quote

from fastapi import Request, Response, status
from fastapi.responses import JSONResponse, RedirectResponse
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.types import ASGIApp

from greenlife.config import settings
from greenlife.services.guard import (
    ROUTE_RULES,
    Access,
    AuthResult,
    RouteRule,
    authenticate,
    match_route,
    wants_html,
)

logger = logging.getLogger(__name__)

# Context variable for request ID - accessible from anywhere in the request
request_id_var: ContextVar[str | None] = ContextVar("request_id", default=None)


def get_request_id() -> str | None:
    """Get the current request ID from context."""
    return request_id_var.get()


class RequestIDMiddleware(BaseHTTPMiddleware):
    """Middleware that adds a unique request ID to each request.

    - Checks for incoming X-Request-ID header (for distributed tracing)
    - Generates a new UUID if not present
    - Adds the request ID to the response headers
    - Stores it in a context variable for logging
    """

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        request_id = request.headers.get("X-Request-ID") or str(uuid.uuid4())
        token = request_id_var.set(request_id)

        try:
            response = await call_next(request)
            response.headers["X-Request-ID"] = request_id
            return response
        finally:
            request_id_var.reset(token)


class AccessGuardMiddleware(BaseHTTPMiddleware):
    """Gates requests by the route table before they reach any endpoint.

    Public prefixes and unmatched paths pass straight through. Gated paths
    need a valid token (and the rule's role); on success the identity is
    attached as ``request.state.identity`` and as x-user-id / x-user-role
    request headers.
    """

    def __init__(self, app: ASGIApp, rules: tuple[RouteRule, ...] = ROUTE_RULES) -> None:
        super().__init__(app)
        self.rules = rules

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        rule = match_route(request.url.path, self.rules)
        if rule is None or rule.access == Access.PUBLIC or request.method == "OPTIONS":
            return await call_next(request)

        result = authenticate(request, rule.role if rule.access == Access.ROLE else None)
        if not result.ok:
            logger.info(
                f"[{get_request_id() or '-'}] {request.method} {request.url.path} "
                f"rejected with {result.status_code}"
            )
            return self.reject(request, result)

        identity = result.identity
        assert identity is not None
        request.state.identity = identity
        # Headers are read-only on Request; rewrite the ASGI scope so
        # downstream handlers see the injected values.
        headers = [
            (k, v)
            for k, v in request.scope["headers"]
            if k not in (b"x-user-id", b"x-user-role")
        ]
        headers.append((b"x-user-id", identity.id.encode()))
        headers.append((b"x-user-role", identity.role.value.encode()))
        request.scope["headers"] = headers

        return await call_next(request)

    def reject(self, request: Request, result: AuthResult) -> Response:
        """Render a failed check: browsers go to the login page, API clients get JSON."""
        if result.status_code == status.HTTP_401_UNAUTHORIZED and wants_html(request):
            next_path = request.url.path
            if request.url.query:
                next_path = f"{next_path}?{request.url.query}"
            target = f"{settings.login_path}?next={quote(next_path, safe='/')}"
            return RedirectResponse(target, status_code=status.HTTP_303_SEE_OTHER)

        headers = {}
        if result.status_code == status.HTTP_401_UNAUTHORIZED:
            headers["WWW-Authenticate"] = "Bearer"
        return JSONResponse(
            {"detail": result.error},
            status_code=result.status_code,
            headers=headers,
        )


class RequestContextFilter(logging.Filter):
    """Logging filter that adds request_id to all log records."""

    def filter(self, record: logging.LogRecord) -> bool:
        record.request_id = get_request_id() or "-"
        return True
