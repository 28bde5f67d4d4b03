"""Role application service: role lifecycle and role-permission edges.

Every mutation runs in the caller's transaction (one session per request),
so a failure part-way leaves no change behind.
"""

from __future__ import annotations

import logging

from rolegate.application.dtos.role import RoleDetail, RoleResult, RoleUpdate
from rolegate.application.interfaces.repositories import (
    IPermissionRepository,
    IRolePermissionRepository,
    IRoleRepository,
    IUserRoleRepository,
)
from rolegate.domain.exceptions import (
    AuthorizationException,
    ConflictException,
    DuplicateAssignmentException,
    InvalidReferenceException,
    ResourceNotFoundException,
    ValidationException,
)
from rolegate.domain.value_objects import RoleName

logger = logging.getLogger(__name__)

_MSG_ROLE_NOT_FOUND = "Role not found"
_MSG_INVALID_PERMISSIONS = "One or more permission IDs are invalid"


def _checked_name(name: str) -> str:
    try:
        return RoleName(name).value
    except ValueError as exc:
        raise ValidationException(str(exc), field="name") from None


class RoleService:
    """Create, update and delete roles and manage their permission sets."""

    def __init__(
        self,
        role_repo: IRoleRepository,
        permission_repo: IPermissionRepository,
        role_permission_repo: IRolePermissionRepository,
        user_role_repo: IUserRoleRepository,
    ) -> None:
        self._role_repo = role_repo
        self._permission_repo = permission_repo
        self._role_permission_repo = role_permission_repo
        self._user_role_repo = user_role_repo

    async def _get_or_404(self, role_id: str) -> RoleResult:
        role = await self._role_repo.get_by_id(role_id)
        if not role:
            raise ResourceNotFoundException("role", role_id, _MSG_ROLE_NOT_FOUND)
        return role

    async def _validate_permission_ids(self, permission_ids: list[str]) -> list[str]:
        """Return ids deduplicated in order; raise naming every id that does not resolve."""
        unique_ids = list(dict.fromkeys(permission_ids))
        found = {p.id for p in await self._permission_repo.get_by_ids(unique_ids)}
        invalid = [pid for pid in unique_ids if pid not in found]
        if invalid:
            raise InvalidReferenceException(
                _MSG_INVALID_PERMISSIONS, field="permission_ids", invalid_ids=invalid
            )
        return unique_ids

    async def get_role(self, role_id: str) -> RoleDetail:
        """Return role with its permissions and the identities holding it."""
        role = await self._get_or_404(role_id)
        permissions = await self._role_permission_repo.get_permissions_for_role(role_id)
        holders = await self._user_role_repo.get_role_holders(role_id)
        return RoleDetail(
            role=role,
            permissions=tuple(permissions),
            user_count=len(holders),
            holders=tuple(holders),
        )

    async def list_roles(
        self, skip: int = 0, limit: int = 100, search: str | None = None
    ) -> tuple[list[RoleDetail], int]:
        """Return a page of roles (with permissions and holder counts) and the total."""
        roles = await self._role_repo.list_roles(skip=skip, limit=limit, search=search)
        total = await self._role_repo.count_roles(search=search)
        role_ids = [r.id for r in roles]
        permissions = await self._role_permission_repo.get_permissions_for_roles(role_ids)
        counts = await self._user_role_repo.count_for_roles(role_ids)
        items = [
            RoleDetail(
                role=role,
                permissions=tuple(permissions.get(role.id, [])),
                user_count=counts.get(role.id, 0),
            )
            for role in roles
        ]
        return items, total

    async def create_role(
        self,
        name: str,
        description: str | None = None,
        permission_ids: list[str] | None = None,
    ) -> RoleDetail:
        """Create role and optionally attach permissions.

        Raises:
            ValidationException: Bad name pattern or unknown permission ids.
            ConflictException: Name already taken.
        """
        name = _checked_name(name)
        if await self._role_repo.get_by_name(name):
            raise ConflictException(
                "Role with this name already exists", "ROLE_ALREADY_EXISTS"
            )
        unique_ids: list[str] = []
        if permission_ids:
            unique_ids = await self._validate_permission_ids(permission_ids)
        created = await self._role_repo.create_role(name=name, description=description)
        if unique_ids:
            await self._role_permission_repo.replace_role_permissions(created.id, unique_ids)
        logger.info("Role created: %s (%d permissions)", created.name, len(unique_ids))
        return await self.get_role(created.id)

    async def update_role(self, role_id: str, changes: RoleUpdate) -> RoleDetail:
        """Rename or redescribe a non-system role.

        Raises:
            AuthorizationException: If the role is a system role.
        """
        existing = await self._get_or_404(role_id)
        if existing.is_system:
            raise AuthorizationException("Cannot update system roles")
        if changes.name is not None and changes.name != existing.name:
            _checked_name(changes.name)
            if await self._role_repo.get_by_name(changes.name):
                raise ConflictException("Role name already exists", "ROLE_ALREADY_EXISTS")
        updated = await self._role_repo.update_role(role_id, changes)
        if updated is None:
            raise ResourceNotFoundException("role", role_id, _MSG_ROLE_NOT_FOUND)
        logger.info("Role updated: %s", updated.name)
        return await self.get_role(role_id)

    async def delete_role(self, role_id: str) -> None:
        """Delete a non-system role that no identity holds.

        Raises:
            AuthorizationException: System role, or still assigned (count in details).
        """
        role = await self._get_or_404(role_id)
        if role.is_system:
            raise AuthorizationException("Cannot delete system roles")
        user_count = await self._user_role_repo.count_for_role(role_id)
        if user_count > 0:
            raise AuthorizationException(
                f"Cannot delete role. It is assigned to {user_count} user(s)",
                details={"dependent_count": user_count, "dependent_type": "user"},
            )
        await self._role_repo.delete_role(role_id)
        logger.info("Role deleted: %s", role.name)

    async def replace_role_permissions(
        self, role_id: str, permission_ids: list[str]
    ) -> RoleDetail:
        """Replace the role's whole permission set in one transaction.

        An empty list clears the set.
        Calling twice with the same ids yields the same edge set as once.
        """
        await self._get_or_404(role_id)
        unique_ids = await self._validate_permission_ids(permission_ids)
        await self._role_permission_repo.replace_role_permissions(role_id, unique_ids)
        logger.info("Role %s permissions replaced (%d)", role_id, len(unique_ids))
        return await self.get_role(role_id)

    async def add_permission_to_role(self, role_id: str, permission_id: str) -> None:
        """Attach one permission.

        Raises:
            ResourceNotFoundException: Role or permission missing.
            DuplicateAssignmentException: Edge already present (Conflict).
        """
        await self._get_or_404(role_id)
        if not await self._permission_repo.get_by_id(permission_id):
            raise ResourceNotFoundException(
                "permission", permission_id, "Permission not found"
            )
        if await self._role_permission_repo.has_assignment(role_id, permission_id):
            raise DuplicateAssignmentException(
                "Permission already assigned to this role",
                assignment_type="role_permission",
                details_extra={"role_id": role_id, "permission_id": permission_id},
            )
        await self._role_permission_repo.assign_permission_to_role(role_id, permission_id)
        logger.info("Permission %s added to role %s", permission_id, role_id)

    async def remove_permission_from_role(self, role_id: str, permission_id: str) -> None:
        """Detach one permission; an absent edge is NotFound."""
        removed = await self._role_permission_repo.remove_permission_from_role(
            role_id, permission_id
        )
        if not removed:
            raise ResourceNotFoundException(
                "role_permission",
                f"{role_id}:{permission_id}",
                "Role does not have this permission",
            )
        logger.info("Permission %s removed from role %s", permission_id, role_id)
