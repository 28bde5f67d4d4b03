"""Persistence models: ORM entities and mixins."""

from rolegate.infrastructure.persistence.models.mixins import (
    CuidMixin,
    IdentifiedModel,
    TimestampMixin,
)
from rolegate.infrastructure.persistence.models.permission import (
    Permission,
    RolePermission,
    UserRole,
)
from rolegate.infrastructure.persistence.models.role import Role
from rolegate.infrastructure.persistence.models.user import User

__all__ = [
    "User",
    "Role",
    "Permission",
    "RolePermission",
    "UserRole",
    "CuidMixin",
    "TimestampMixin",
    "IdentifiedModel",
]
