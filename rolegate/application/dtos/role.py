"""DTOs for role use cases (no dependency on ORM)."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from rolegate.application.dtos.permission import PermissionResult


@dataclass(frozen=True)
class RoleResult:
    """Role read-model (result of get_by_id, get_by_name, create_role, etc.)."""

    id: str
    name: str
    description: str | None
    is_system: bool
    created_at: datetime | None = None
    updated_at: datetime | None = None


@dataclass(frozen=True)
class RoleHolder:
    """Identity holding a role, with when it was assigned."""

    user_id: str
    email: str
    first_name: str
    last_name: str
    is_active: bool
    assigned_at: datetime | None = None


@dataclass(frozen=True)
class RoleDetail:
    """Role with its attached permissions and the identities holding it.

    List reads fill user_count but leave holders empty.
    """

    role: RoleResult
    permissions: tuple[PermissionResult, ...]
    user_count: int = 0
    holders: tuple[RoleHolder, ...] = ()

    @property
    def permission_count(self) -> int:
        return len(self.permissions)


@dataclass(frozen=True)
class RoleUpdate:
    """Partial role update. None means absent (leave unchanged)."""

    name: str | None = None
    description: str | None = None

    def is_empty(self) -> bool:
        return self.name is None and self.description is None
