"""Application DTOs (no ORM dependency)."""

from rolegate.application.dtos.permission import (
    PermissionDetail,
    PermissionGrant,
    PermissionResult,
    PermissionUpdate,
)
from rolegate.application.dtos.role import RoleDetail, RoleHolder, RoleResult, RoleUpdate
from rolegate.application.dtos.token import AuthResult, TokenPair
from rolegate.application.dtos.user import (
    RoleAssignmentResult,
    UserCredentials,
    UserDetail,
    UserResult,
    UserUpdate,
)

__all__ = [
    "AuthResult",
    "PermissionDetail",
    "PermissionGrant",
    "PermissionResult",
    "PermissionUpdate",
    "RoleAssignmentResult",
    "RoleDetail",
    "RoleHolder",
    "RoleResult",
    "RoleUpdate",
    "TokenPair",
    "UserCredentials",
    "UserDetail",
    "UserResult",
    "UserUpdate",
]
