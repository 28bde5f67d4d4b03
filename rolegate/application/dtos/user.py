"""DTOs for user use cases (no dependency on ORM)."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from rolegate.application.dtos.role import RoleResult


@dataclass(frozen=True)
class UserResult:
    """User read-model (result of get_by_id, create_user, etc.). No password."""

    id: str
    email: str
    first_name: str
    last_name: str
    is_active: bool
    email_verified: bool = False
    avatar_url: str | None = None
    created_at: datetime | None = None
    updated_at: datetime | None = None


@dataclass(frozen=True)
class UserCredentials:
    """User plus stored password hash; only the credential check reads this."""

    user: UserResult
    hashed_password: str


@dataclass(frozen=True)
class RoleAssignmentResult:
    """A role held by an identity with its assignment metadata."""

    role: RoleResult
    assigned_at: datetime | None = None
    assigned_by: str | None = None


@dataclass(frozen=True)
class UserDetail:
    """User with held roles and the deduplicated permission names they grant."""

    user: UserResult
    roles: tuple[RoleAssignmentResult, ...]
    permissions: tuple[str, ...]

    @property
    def role_names(self) -> list[str]:
        return [assignment.role.name for assignment in self.roles]


@dataclass(frozen=True)
class UserUpdate:
    """Partial user update. None means absent (leave unchanged)."""

    email: str | None = None
    first_name: str | None = None
    last_name: str | None = None
    avatar_url: str | None = None
    is_active: bool | None = None

    def is_empty(self) -> bool:
        return all(
            value is None
            for value in (
                self.email,
                self.first_name,
                self.last_name,
                self.avatar_url,
                self.is_active,
            )
        )

    def changes(self) -> dict[str, object]:
        """Return only the present fields."""
        return {
            key: value
            for key, value in (
                ("email", self.email),
                ("first_name", self.first_name),
                ("last_name", self.last_name),
                ("avatar_url", self.avatar_url),
                ("is_active", self.is_active),
            )
            if value is not None
        }
