"""Authentication endpoints."""

import logging

from fastapi import APIRouter, HTTPException, Response, status
from pydantic import BaseModel, EmailStr, Field
from sqlmodel import select

from greenlife.api.deps import AuthRateLimit, CurrentIdentity, SessionDep
from greenlife.config import settings
from greenlife.models import Role, User
from greenlife.models.user import UserRead
from greenlife.services.auth import create_token, token_lifetime
from greenlife.services.passwords import hash_password, verify_password
from greenlife.services.sanitize import strip_markup

logger = logging.getLogger(__name__)

router = APIRouter()


class LoginRequest(BaseModel):
    """Request body for login."""

    email: EmailStr
    password: str = Field(min_length=8)


class RegisterRequest(BaseModel):
    """Request body for registration."""

    username: str = Field(min_length=2, max_length=50)
    email: EmailStr
    password: str = Field(min_length=8)


class TokenResponse(BaseModel):
    """Response containing the identity token."""

    token: str
    user: UserRead


class SessionUser(BaseModel):
    """Identity asserted by the caller's token."""

    id: str
    email: str
    role: Role


class CheckResponse(BaseModel):
    """Response for the session check."""

    authenticated: bool
    user: SessionUser


def set_auth_cookie(response: Response, token: str) -> None:
    response.set_cookie(
        key=settings.auth_cookie_name,
        value=token,
        max_age=int(token_lifetime().total_seconds()),
        httponly=True,
        secure=settings.is_production,
        samesite="lax",
        path="/",
    )


@router.post("/register", response_model=TokenResponse)
async def register(
    request: RegisterRequest,
    response: Response,
    session: SessionDep,
    _rate_limit: AuthRateLimit,
):
    """Create a USER account and sign it in."""
    email = request.email.lower()

    stmt = select(User).where(User.email == email)
    result = await session.execute(stmt)
    if result.scalar_one_or_none():
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Email already registered",
        )

    user = User(
        username=strip_markup(request.username),
        email=email,
        password_hash=hash_password(request.password),
        role=Role.USER,
    )
    session.add(user)
    await session.commit()
    await session.refresh(user)

    logger.info(f"Registered user {user.id}")

    token = create_token(user)
    set_auth_cookie(response, token)
    return TokenResponse(token=token, user=UserRead.model_validate(user))


@router.post("/login", response_model=TokenResponse)
async def login(
    request: LoginRequest,
    response: Response,
    session: SessionDep,
    _rate_limit: AuthRateLimit,
):
    """Exchange email and password for a token."""
    stmt = select(User).where(User.email == request.email.lower())
    result = await session.execute(stmt)
    user = result.scalar_one_or_none()

    if not user or not verify_password(request.password, user.password_hash):
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid credentials",
        )

    token = create_token(user)
    set_auth_cookie(response, token)
    return TokenResponse(token=token, user=UserRead.model_validate(user))


@router.get("/check", response_model=CheckResponse)
async def check(identity: CurrentIdentity):
    """Report whether the caller holds a valid token."""
    return CheckResponse(
        authenticated=True,
        user=SessionUser(id=identity.id, email=identity.email, role=identity.role),
    )


@router.get("/me", response_model=UserRead)
async def get_current_user_info(identity: CurrentIdentity, session: SessionDep):
    """Get the stored account of the current identity."""
    stmt = select(User).where(User.id == identity.id)
    result = await session.execute(stmt)
    user = result.scalar_one_or_none()

    if not user:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="User not found",
        )

    return UserRead.model_validate(user)


@router.post("/logout")
async def logout(response: Response):
    """Clear the auth cookie.

    Tokens are stateless, so a copy held elsewhere stays valid until it expires.
    """
    response.delete_cookie(key=settings.auth_cookie_name, path="/")
    return {"message": "Logged out successfully"}
