"""Repository interfaces (ports) for the application layer.

Protocols define contracts that infrastructure implementations must fulfill (DIP).
All types reference application DTOs only; no infrastructure imports.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Protocol

if TYPE_CHECKING:
    from rolegate.application.dtos.permission import PermissionResult, PermissionUpdate
    from rolegate.application.dtos.role import RoleHolder, RoleResult, RoleUpdate
    from rolegate.application.dtos.user import (
        RoleAssignmentResult,
        UserCredentials,
        UserResult,
        UserUpdate,
    )


# User repository interface
class IUserRepository(Protocol):
    """Protocol for user repository (DIP)."""

    async def get_by_id(self, user_id: str) -> UserResult | None:
        """Return user by ID."""

    async def get_by_email(self, email: str) -> UserResult | None:
        """Return user by email."""

    async def get_credentials_by_email(self, email: str) -> UserCredentials | None:
        """Return user and stored password hash by email."""

    async def get_credentials_by_id(self, user_id: str) -> UserCredentials | None:
        """Return user and stored password hash by ID."""

    async def create_user(
        self,
        email: str,
        hashed_password: str,
        first_name: str,
        last_name: str,
    ) -> UserResult:
        """Create user. Raises UserAlreadyExistsException on duplicate email."""

    async def update_user(self, user_id: str, changes: UserUpdate) -> UserResult | None:
        """Apply present fields; None if not found. Raises DuplicateEmailException."""

    async def set_password(self, user_id: str, hashed_password: str) -> bool:
        """Replace the stored hash; False if the user does not exist."""

    async def lock_for_update(self, user_id: str) -> bool:
        """Row-lock the user until the transaction ends; False if not found.

        Serializes concurrent changes to one identity's role set.
        """

    async def delete_user(self, user_id: str) -> bool:
        """Delete user (edges cascade); False if not found."""

    async def list_users(
        self, skip: int = 0, limit: int = 100, search: str | None = None
    ) -> list[UserResult]:
        """Return users ordered by created_at desc, filtered by email/name search."""

    async def count_users(self, search: str | None = None) -> int:
        """Return the number of users matching search."""


# Role repository interface
class IRoleRepository(Protocol):
    """Protocol for role repository (DIP)."""

    async def get_by_id(self, role_id: str) -> RoleResult | None:
        """Return role by ID."""

    async def get_by_name(self, name: str) -> RoleResult | None:
        """Return role by unique name."""

    async def get_by_ids(self, role_ids: list[str]) -> list[RoleResult]:
        """Return the roles that exist among role_ids."""

    async def create_role(self, name: str, description: str | None = None) -> RoleResult:
        """Create a role. Raises ConflictException on duplicate name."""

    async def update_role(self, role_id: str, changes: RoleUpdate) -> RoleResult | None:
        """Apply present fields; None if not found. Raises ConflictException."""

    async def delete_role(self, role_id: str) -> bool:
        """Delete role (permission edges cascade); False if not found."""

    async def list_roles(
        self, skip: int = 0, limit: int = 100, search: str | None = None
    ) -> list[RoleResult]:
        """Return roles filtered by name/description search."""

    async def count_roles(self, search: str | None = None) -> int:
        """Return the number of roles matching search."""


# Permission repository interface
class IPermissionRepository(Protocol):
    """Protocol for permission repository (DIP)."""

    async def get_by_id(self, permission_id: str) -> PermissionResult | None:
        """Return permission by ID."""

    async def get_by_name(self, name: str) -> PermissionResult | None:
        """Return permission by derived name (resource:action)."""

    async def get_by_ids(self, permission_ids: list[str]) -> list[PermissionResult]:
        """Return the permissions that exist among permission_ids."""

    async def create_permission(
        self,
        resource: str,
        action: str,
        description: str | None = None,
    ) -> PermissionResult:
        """Create permission with name f"{resource}:{action}". Raises ConflictException."""

    async def update_permission(
        self, permission_id: str, changes: PermissionUpdate
    ) -> PermissionResult | None:
        """Apply present fields and recompute name; None if not found."""

    async def delete_permission(self, permission_id: str) -> bool:
        """Delete permission; False if not found."""

    async def list_permissions(
        self, skip: int = 0, limit: int = 100, search: str | None = None
    ) -> list[PermissionResult]:
        """Return permissions ordered by resource, action."""

    async def count_permissions(self, search: str | None = None) -> int:
        """Return the number of permissions matching search."""

    async def list_all_ordered(self) -> list[PermissionResult]:
        """Return every permission ordered by resource then action."""

    async def get_by_resource(self, resource: str) -> list[PermissionResult]:
        """Return permissions of one resource ordered by action."""


# Role permission repository interface
class IRolePermissionRepository(Protocol):
    """Protocol for role-permission assignment repository (DIP)."""

    async def get_permissions_for_role(self, role_id: str) -> list[PermissionResult]:
        """Return permissions attached to the role, ordered by name."""

    async def get_permissions_for_roles(
        self, role_ids: list[str]
    ) -> dict[str, list[PermissionResult]]:
        """Return each role's permissions ordered by name (roles without any map to [])."""

    async def get_roles_for_permission(self, permission_id: str) -> list[RoleResult]:
        """Return roles referencing the permission, ordered by name."""

    async def has_assignment(self, role_id: str, permission_id: str) -> bool:
        """Return True if the edge exists."""

    async def assign_permission_to_role(self, role_id: str, permission_id: str) -> None:
        """Create the edge. Raises DuplicateAssignmentException if already assigned."""

    async def remove_permission_from_role(self, role_id: str, permission_id: str) -> bool:
        """Delete the edge; False if absent."""

    async def replace_role_permissions(
        self, role_id: str, permission_ids: list[str]
    ) -> None:
        """Clear every edge of the role and insert the given set (same transaction)."""

    async def count_for_permission(self, permission_id: str) -> int:
        """Return how many roles reference the permission."""


# User role repository interface
class IUserRoleRepository(Protocol):
    """Protocol for user-role assignment repository (DIP)."""

    async def get_user_roles(self, user_id: str) -> list[RoleAssignmentResult]:
        """Return roles held by the user with assignment metadata."""

    async def get_assignment(self, user_id: str, role_id: str) -> RoleAssignmentResult | None:
        """Return one edge, or None if absent."""

    async def count_for_user(self, user_id: str) -> int:
        """Return how many roles the user holds."""

    async def count_for_role(self, role_id: str) -> int:
        """Return how many users hold the role."""

    async def count_for_roles(self, role_ids: list[str]) -> dict[str, int]:
        """Return holder counts per role (roles without holders map to 0)."""

    async def get_role_holders(self, role_id: str) -> list[RoleHolder]:
        """Return identities holding the role, in assignment order."""

    async def get_roles_for_users(
        self, user_ids: list[str]
    ) -> dict[str, list[RoleAssignmentResult]]:
        """Return each user's roles with assignment metadata (users without roles map to [])."""

    async def remove_role_from_user(self, user_id: str, role_id: str) -> bool:
        """Delete the edge; False if absent."""

    async def replace_user_roles(
        self, user_id: str, role_ids: list[str], assigned_by: str | None = None
    ) -> None:
        """Clear every edge of the user and insert the given set (same transaction)."""
