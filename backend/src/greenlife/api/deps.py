"""FastAPI dependencies for dependency injection."""

import logging
from typing import Annotated

from fastapi import Depends, HTTPException, Request, status
from sqlalchemy.ext.asyncio import AsyncSession

from greenlife.database import get_session
from greenlife.models.user import Role
from greenlife.services.auth import AuthorizationError, InvalidTokenError, TokenPayload
from greenlife.services.guard import authenticate
from greenlife.services.rate_limit import (
    RateLimitType,
    check_rate_limit,
    rate_limit_headers,
)

logger = logging.getLogger(__name__)

# Type alias for database session dependency
SessionDep = Annotated[AsyncSession, Depends(get_session)]


def _require(request: Request, role: Role | None) -> TokenPayload:
    result = authenticate(request, role)
    try:
        identity = result.raise_for_status()
    except AuthorizationError as e:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail=str(e),
        ) from e
    except InvalidTokenError as e:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail=str(e),
            headers={"WWW-Authenticate": "Bearer"},
        ) from e
    assert identity is not None
    return identity


async def get_current_identity_optional(request: Request) -> TokenPayload | None:
    """Get the caller's identity if they sent a valid token, None otherwise."""
    result = authenticate(request)
    return result.identity if result.ok else None


async def get_current_identity(request: Request) -> TokenPayload:
    """Get the caller's identity or raise 401."""
    return _require(request, None)


async def get_admin_identity(request: Request) -> TokenPayload:
    """Get the caller's identity and verify they are an admin (401/403)."""
    return _require(request, Role.ADMIN)


# Type aliases for common dependencies
CurrentIdentity = Annotated[TokenPayload, Depends(get_current_identity)]
CurrentIdentityOptional = Annotated[TokenPayload | None, Depends(get_current_identity_optional)]
AdminIdentity = Annotated[TokenPayload, Depends(get_admin_identity)]


class RateLimitDependency:
    """Dependency class for rate limiting endpoints.

    Usage:
        @router.post("/endpoint")
        async def endpoint(
            rate_limit: Annotated[None, Depends(RateLimitDependency(RateLimitType.AUTH))]
        ):
            ...
    """

    def __init__(self, limit_type: RateLimitType) -> None:
        self.limit_type = limit_type

    async def __call__(self, request: Request) -> None:
        """Check rate limit and raise 429 if exceeded."""
        result = await check_rate_limit(request, self.limit_type)

        if not result.success:
            headers = rate_limit_headers(result)
            retry_after = headers.get("Retry-After", "60")
            logger.warning(f"Rate limit exceeded for {self.limit_type.value} on {request.url.path}")
            raise HTTPException(
                status_code=status.HTTP_429_TOO_MANY_REQUESTS,
                detail=f"Rate limit exceeded. Please try again in {retry_after} seconds.",
                headers=headers,
            )


# Pre-configured rate limit dependencies
AuthRateLimit = Annotated[None, Depends(RateLimitDependency(RateLimitType.AUTH))]
FormsRateLimit = Annotated[None, Depends(RateLimitDependency(RateLimitType.FORMS))]
