"""Repositories: data access for users, roles, permissions and their junctions."""

from rolegate.infrastructure.persistence.repositories.base import BaseRepository
from rolegate.infrastructure.persistence.repositories.permission_repo import (
    PermissionRepository,
)
from rolegate.infrastructure.persistence.repositories.role_permission_repo import (
    RolePermissionRepository,
)
from rolegate.infrastructure.persistence.repositories.role_repo import RoleRepository
from rolegate.infrastructure.persistence.repositories.user_repo import UserRepository
from rolegate.infrastructure.persistence.repositories.user_role_repo import (
    UserRoleRepository,
)

__all__ = [
    "BaseRepository",
    "PermissionRepository",
    "RolePermissionRepository",
    "RoleRepository",
    "UserRepository",
    "UserRoleRepository",
]
