"""Authentication service for identity token management.

Tokens are compact HS256 JWTs whose payload is exactly
``{id, email, role, iat, exp}``. They are never refreshed: once ``exp`` is
reached the holder has to log in again.
"""

from datetime import UTC, datetime, timedelta
from typing import Protocol

from jose import JWTError, jwt
from pydantic import BaseModel, ConfigDict, ValidationError

from greenlife.config import settings
from greenlife.models.user import Role


class ConfigurationError(Exception):
    """Required configuration (the signing secret) is missing."""

    pass


class AuthError(Exception):
    """Authentication error."""

    pass


class InvalidTokenError(AuthError):
    """Token is malformed, has a bad signature or has expired."""

    pass


class AuthorizationError(AuthError):
    """Authenticated identity lacks the role a route requires."""

    pass


class Identity(Protocol):
    """Anything carrying the fields a token asserts (e.g. a User row)."""

    id: str
    email: str
    role: Role


class TokenPayload(BaseModel):
    """Decoded token claims."""

    model_config = ConfigDict(extra="forbid", frozen=True)

    id: str
    email: str
    role: Role
    iat: int
    exp: int

    @property
    def expires_at(self) -> datetime:
        return datetime.fromtimestamp(self.exp, UTC)


def _secret() -> str:
    if not settings.jwt_secret:
        raise ConfigurationError("JWT_SECRET not configured")
    return settings.jwt_secret


def token_lifetime() -> timedelta:
    return timedelta(hours=settings.jwt_expiration_hours)


def create_token(identity: Identity, now: datetime | None = None) -> str:
    """Create a signed token for an identity."""
    secret = _secret()

    for field in ("id", "email", "role"):
        if not getattr(identity, field, None):
            raise ValueError(f"Identity is missing {field}")

    issued = now or datetime.now(UTC)
    iat = int(issued.timestamp())
    payload = {
        "id": str(identity.id),
        "email": identity.email,
        "role": Role(identity.role).value,
        "iat": iat,
        "exp": iat + int(token_lifetime().total_seconds()),
    }
    return jwt.encode(payload, secret, algorithm=settings.jwt_algorithm)


def verify_token(token: str, now: datetime | None = None) -> TokenPayload:
    """Verify signature and expiry of a token and return its claims.

    A token is expired from the instant ``now >= exp``. Only the configured
    algorithm is accepted.
    """
    secret = _secret()

    try:
        claims = jwt.decode(
            token,
            secret,
            algorithms=[settings.jwt_algorithm],
            # Expiry is checked below so that the boundary is exclusive
            options={"verify_exp": False},
        )
    except JWTError as e:
        raise InvalidTokenError(f"Invalid token: {e}") from e

    try:
        payload = TokenPayload.model_validate(claims)
    except ValidationError as e:
        raise InvalidTokenError("Invalid token: unexpected payload") from e

    current = int((now or datetime.now(UTC)).timestamp())
    if current >= payload.exp:
        raise InvalidTokenError("Invalid token: expired")

    return payload


def decode_token(token: str) -> TokenPayload | None:
    """Decode a token without checking its signature.

    Only for non-security-critical inspection; returns None for anything
    that does not look like one of our tokens.
    """
    try:
        claims = jwt.get_unverified_claims(token)
        return TokenPayload.model_validate(claims)
    except (JWTError, ValidationError, AttributeError, TypeError, ValueError):
        return None
