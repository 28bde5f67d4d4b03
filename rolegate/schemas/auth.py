"""Auth API schemas."""

from pydantic import BaseModel, EmailStr, Field, HttpUrl

from rolegate.schemas.user import UserDetailResponse


class LoginRequest(BaseModel):
    """Request body for login."""

    email: EmailStr
    password: str = Field(..., min_length=1)


class RegisterRequest(BaseModel):
    """Request body for public registration. New identities get the 'user' role."""

    email: EmailStr
    password: str = Field(..., min_length=8, description="Password (min 8 characters)")
    first_name: str = Field(default="", max_length=100)
    last_name: str = Field(default="", max_length=100)


class RefreshTokenRequest(BaseModel):
    """Request body for POST /auth/refresh-token."""

    refresh_token: str = Field(..., min_length=1)


class ProfileUpdate(BaseModel):
    """Request body for PATCH /auth/profile (self-service fields only)."""

    first_name: str | None = Field(default=None, max_length=100)
    last_name: str | None = Field(default=None, max_length=100)
    avatar_url: HttpUrl | None = None


class ChangePasswordRequest(BaseModel):
    """Request body for POST /auth/change-password."""

    current_password: str = Field(..., min_length=1)
    new_password: str = Field(..., min_length=8, description="New password (min 8 characters)")


class TokenResponse(BaseModel):
    """JWT token pair."""

    access_token: str
    refresh_token: str
    token_type: str = "bearer"


class AuthResponse(BaseModel):
    """Response for register, login and refresh: the identity plus a token pair."""

    user: UserDetailResponse
    tokens: TokenResponse


class MessageResponse(BaseModel):
    """Plain acknowledgement."""

    message: str
