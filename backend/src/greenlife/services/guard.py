"""Request gating by identity and role.

The guard never mutates anything; it reads settings and the incoming
request, so it is safe to call any number of times per request.
"""

import logging
from dataclasses import dataclass
from enum import Enum

from fastapi import status
from starlette.requests import HTTPConnection

from greenlife.config import settings
from greenlife.models.user import Role
from greenlife.services.auth import (
    AuthorizationError,
    ConfigurationError,
    InvalidTokenError,
    TokenPayload,
    verify_token,
)

logger = logging.getLogger(__name__)


class Access(str, Enum):
    """Access level for a route prefix."""

    PUBLIC = "public"
    AUTHENTICATED = "authenticated"
    ROLE = "role"


@dataclass(frozen=True)
class RouteRule:
    """Maps a path prefix to the access it requires."""

    prefix: str
    access: Access
    role: Role | None = None

    def matches(self, path: str) -> bool:
        if path == self.prefix:
            return True
        return path.startswith(self.prefix.rstrip("/") + "/")


# First match wins
ROUTE_RULES: tuple[RouteRule, ...] = (
    RouteRule("/api/auth", Access.PUBLIC),
    RouteRule("/api/health", Access.PUBLIC),
    RouteRule("/login", Access.PUBLIC),
    RouteRule("/api/admin", Access.ROLE, Role.ADMIN),
    RouteRule("/admin", Access.ROLE, Role.ADMIN),
)


def match_route(path: str, rules: tuple[RouteRule, ...] = ROUTE_RULES) -> RouteRule | None:
    """Return the first rule whose prefix matches the path."""
    for rule in rules:
        if rule.matches(path):
            return rule
    return None


def is_public(path: str, rules: tuple[RouteRule, ...] = ROUTE_RULES) -> bool:
    rule = match_route(path, rules)
    return rule is not None and rule.access == Access.PUBLIC


@dataclass(frozen=True)
class AuthResult:
    """Outcome of an authorization check.

    identity is set for successful checks on gated paths; public paths
    succeed with no identity.
    """

    status_code: int
    identity: TokenPayload | None = None
    error: str | None = None

    @property
    def ok(self) -> bool:
        return self.status_code == status.HTTP_200_OK

    def raise_for_status(self) -> TokenPayload | None:
        """Raise the matching AuthError for failed checks."""
        if self.status_code == status.HTTP_401_UNAUTHORIZED:
            raise InvalidTokenError(self.error or "Unauthorized")
        if self.status_code == status.HTTP_403_FORBIDDEN:
            raise AuthorizationError(self.error or "Forbidden")
        return self.identity


def extract_token(request: HTTPConnection) -> str | None:
    """Find the candidate token: the cookie first, then the bearer header."""
    cookie = request.cookies.get(settings.auth_cookie_name)
    if cookie:
        return cookie

    authorization = request.headers.get("authorization")
    if authorization:
        scheme, _, credentials = authorization.partition(" ")
        if scheme.lower() == "bearer" and credentials.strip():
            return credentials.strip()

    return None


def authenticate(request: HTTPConnection, required_role: Role | None = None) -> AuthResult:
    """Verify the request's token and optional role, ignoring public prefixes."""
    token = extract_token(request)
    if not token:
        return AuthResult(status.HTTP_401_UNAUTHORIZED, error="Unauthorized")

    try:
        payload = verify_token(token)
    except InvalidTokenError as e:
        logger.debug(f"Token verification failed: {e}")
        return AuthResult(status.HTTP_401_UNAUTHORIZED, error="Invalid token")
    except ConfigurationError:
        logger.error("Token verification attempted without JWT_SECRET configured")
        raise

    if required_role is not None and payload.role != required_role:
        return AuthResult(status.HTTP_403_FORBIDDEN, identity=payload, error="Forbidden")

    return AuthResult(status.HTTP_200_OK, identity=payload)


def authorize(request: HTTPConnection, required_role: Role | None = None) -> AuthResult:
    """Gate a request by identity and role.

    Public prefixes pass through without touching the token at all, so a
    stale or malformed cookie never blocks the login page.
    """
    if is_public(request.url.path):
        return AuthResult(status.HTTP_200_OK)
    return authenticate(request, required_role)


def wants_html(request: HTTPConnection) -> bool:
    """Browsers navigating to a page send text/html in Accept."""
    return "text/html" in request.headers.get("accept", "")
