"""Pydantic request/response schemas for the API."""

from rolegate.schemas.auth import AuthResponse, LoginRequest, TokenResponse
from rolegate.schemas.health import HealthResponse
from rolegate.schemas.permission import PermissionResponse
from rolegate.schemas.role import RoleResponse
from rolegate.schemas.user import UserCreateRequest, UserResponse

__all__ = [
    "AuthResponse",
    "HealthResponse",
    "LoginRequest",
    "PermissionResponse",
    "RoleResponse",
    "TokenResponse",
    "UserCreateRequest",
    "UserResponse",
]
