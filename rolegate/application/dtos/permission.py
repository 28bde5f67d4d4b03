"""DTOs for permission use cases (no dependency on ORM)."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from rolegate.application.dtos.role import RoleResult


@dataclass(frozen=True)
class PermissionResult:
    """Permission read-model. name is always f"{resource}:{action}"."""

    id: str
    name: str
    resource: str
    action: str
    description: str | None
    created_at: datetime | None = None
    updated_at: datetime | None = None


@dataclass(frozen=True)
class PermissionDetail:
    """Permission with the roles that reference it."""

    permission: PermissionResult
    roles: tuple[RoleResult, ...]


@dataclass(frozen=True)
class PermissionUpdate:
    """Partial permission update. None means absent (leave unchanged)."""

    resource: str | None = None
    action: str | None = None
    description: str | None = None

    def is_empty(self) -> bool:
        return self.resource is None and self.action is None and self.description is None


@dataclass(frozen=True)
class PermissionGrant:
    """A permission held by an identity and the role that first granted it."""

    permission: PermissionResult
    granted_by: str
