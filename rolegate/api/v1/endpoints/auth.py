"""Auth API: register, login, refresh, and the caller's own profile.

Register/login/refresh are public; the rest require a bearer access token.
Tokens are stateless, so logout only acknowledges; the client discards its
tokens and they lapse at expiry.
"""

import logging
from typing import Annotated

from fastapi import APIRouter, Depends, Request

from rolegate.api.v1.dependencies import CurrentClaims, get_auth_service
from rolegate.application.dtos.token import AuthResult
from rolegate.application.services.auth_service import AuthService
from rolegate.core.limiter import (
    limit_auth,
    limit_password_change,
    limit_refresh,
    limit_register,
    limit_writes,
)
from rolegate.schemas.auth import (
    AuthResponse,
    ChangePasswordRequest,
    LoginRequest,
    MessageResponse,
    ProfileUpdate,
    RefreshTokenRequest,
    RegisterRequest,
    TokenResponse,
)
from rolegate.schemas.user import UserDetailResponse

logger = logging.getLogger(__name__)

router = APIRouter()


def _to_response(result: AuthResult) -> AuthResponse:
    return AuthResponse(
        user=UserDetailResponse.from_detail(result.user),
        tokens=TokenResponse(
            access_token=result.tokens.access_token,
            refresh_token=result.tokens.refresh_token,
            token_type=result.tokens.token_type,
        ),
    )


@router.post("/register", response_model=AuthResponse, status_code=201)
@limit_register
async def register(
    request: Request,
    body: RegisterRequest,
    auth_service: Annotated[AuthService, Depends(get_auth_service)],
):
    """Register a new identity with the default 'user' role and return a token pair."""
    result = await auth_service.register(
        email=body.email,
        password=body.password,
        first_name=body.first_name,
        last_name=body.last_name,
    )
    return _to_response(result)


@router.post("/login", response_model=AuthResponse)
@limit_auth
async def login(
    request: Request,
    body: LoginRequest,
    auth_service: Annotated[AuthService, Depends(get_auth_service)],
):
    """Authenticate with email and password; return the identity and a token pair."""
    result = await auth_service.login(body.email, body.password)
    return _to_response(result)


@router.post("/refresh-token", response_model=AuthResponse)
@limit_refresh
async def refresh_token(
    request: Request,
    body: RefreshTokenRequest,
    auth_service: Annotated[AuthService, Depends(get_auth_service)],
):
    """Exchange a refresh token for a new pair carrying the current roles and permissions."""
    result = await auth_service.refresh(body.refresh_token)
    return _to_response(result)


@router.get("/profile", response_model=UserDetailResponse)
async def get_profile(
    claims: CurrentClaims,
    auth_service: Annotated[AuthService, Depends(get_auth_service)],
):
    """Return the authenticated identity with live roles and permissions."""
    detail = await auth_service.get_profile(claims.identity_id)
    return UserDetailResponse.from_detail(detail)


@router.patch("/profile", response_model=UserDetailResponse)
@limit_writes
async def update_profile(
    request: Request,
    body: ProfileUpdate,
    claims: CurrentClaims,
    auth_service: Annotated[AuthService, Depends(get_auth_service)],
):
    """Update the caller's name and avatar. Absent fields are left unchanged."""
    detail = await auth_service.update_profile(
        claims.identity_id,
        first_name=body.first_name,
        last_name=body.last_name,
        avatar_url=str(body.avatar_url) if body.avatar_url is not None else None,
    )
    return UserDetailResponse.from_detail(detail)


@router.post("/change-password", response_model=MessageResponse)
@limit_password_change
async def change_password(
    request: Request,
    body: ChangePasswordRequest,
    claims: CurrentClaims,
    auth_service: Annotated[AuthService, Depends(get_auth_service)],
):
    """Change the caller's password after verifying the current one."""
    await auth_service.change_password(
        claims.identity_id, body.current_password, body.new_password
    )
    return MessageResponse(message="Password changed successfully")


@router.post("/logout", response_model=MessageResponse)
async def logout(claims: CurrentClaims):
    """Acknowledge logout. Issued tokens stay valid until they expire."""
    logger.info("User logged out: %s", claims.identity_id)
    return MessageResponse(message="Logged out successfully")
