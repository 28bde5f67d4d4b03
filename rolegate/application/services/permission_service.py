"""Permission application service: create, update, delete and discovery reads."""

from __future__ import annotations

import logging

from rolegate.application.dtos.permission import (
    PermissionDetail,
    PermissionResult,
    PermissionUpdate,
)
from rolegate.application.interfaces.repositories import (
    IPermissionRepository,
    IRolePermissionRepository,
)
from rolegate.domain.exceptions import (
    AuthorizationException,
    ConflictException,
    ResourceNotFoundException,
    ValidationException,
)
from rolegate.domain.value_objects import PermissionName, is_valid_identifier

logger = logging.getLogger(__name__)

_MSG_DUPLICATE_PERMISSION = "Permission with this name already exists"
_MSG_NOT_FOUND = "Permission not found"


def _validate_segment(value: str, label: str) -> None:
    if not is_valid_identifier(value):
        raise ValidationException(
            f"{label} must be lowercase and can only contain letters and underscores",
            field=label.lower(),
        )


class PermissionService:
    """Permissions are flat resource:action capabilities; name is always derived."""

    def __init__(
        self,
        permission_repo: IPermissionRepository,
        role_permission_repo: IRolePermissionRepository,
    ) -> None:
        self._repo = permission_repo
        self._role_permission_repo = role_permission_repo

    async def _get_or_404(self, permission_id: str) -> PermissionResult:
        permission = await self._repo.get_by_id(permission_id)
        if not permission:
            raise ResourceNotFoundException("permission", permission_id, _MSG_NOT_FOUND)
        return permission

    async def get_permission(self, permission_id: str) -> PermissionDetail:
        """Return permission with the roles that reference it."""
        permission = await self._get_or_404(permission_id)
        roles = await self._role_permission_repo.get_roles_for_permission(permission_id)
        return PermissionDetail(permission=permission, roles=tuple(roles))

    async def list_permissions(
        self, skip: int = 0, limit: int = 100, search: str | None = None
    ) -> tuple[list[PermissionResult], int]:
        """Return a page of permissions and the total matching search."""
        items = await self._repo.list_permissions(skip=skip, limit=limit, search=search)
        total = await self._repo.count_permissions(search=search)
        return items, total

    async def create_permission(
        self,
        resource: str,
        action: str,
        description: str | None = None,
    ) -> PermissionResult:
        """Create permission named f"{resource}:{action}".

        Raises:
            ValidationException: If resource or action does not match ^[a-z_]+$.
            ConflictException: If the derived name already exists.
        """
        _validate_segment(resource, "Resource")
        _validate_segment(action, "Action")
        name = PermissionName(resource=resource, action=action).value
        # Pre-check for a clear message; the unique constraint still backs it up.
        if await self._repo.get_by_name(name):
            raise ConflictException(_MSG_DUPLICATE_PERMISSION, "PERMISSION_ALREADY_EXISTS")
        created = await self._repo.create_permission(
            resource=resource,
            action=action,
            description=description,
        )
        logger.info("Permission created: %s", created.name)
        return created

    async def update_permission(
        self, permission_id: str, changes: PermissionUpdate
    ) -> PermissionResult:
        """Apply present fields. Uniqueness is rechecked only when the derived name changes."""
        existing = await self._get_or_404(permission_id)
        if changes.resource is not None:
            _validate_segment(changes.resource, "Resource")
        if changes.action is not None:
            _validate_segment(changes.action, "Action")
        new_name = PermissionName(
            resource=changes.resource if changes.resource is not None else existing.resource,
            action=changes.action if changes.action is not None else existing.action,
        ).value
        if new_name != existing.name and await self._repo.get_by_name(new_name):
            raise ConflictException(_MSG_DUPLICATE_PERMISSION, "PERMISSION_ALREADY_EXISTS")
        updated = await self._repo.update_permission(permission_id, changes)
        if updated is None:
            raise ResourceNotFoundException("permission", permission_id, _MSG_NOT_FOUND)
        if updated.name != existing.name:
            logger.info("Permission renamed: %s -> %s", existing.name, updated.name)
        return updated

    async def delete_permission(self, permission_id: str) -> None:
        """Delete an unreferenced permission.

        Raises:
            AuthorizationException: If any role still references it (count in details).
        """
        permission = await self._get_or_404(permission_id)
        role_count = await self._role_permission_repo.count_for_permission(permission_id)
        if role_count > 0:
            raise AuthorizationException(
                f"Cannot delete permission. It is assigned to {role_count} role(s)",
                details={"dependent_count": role_count, "dependent_type": "role"},
            )
        await self._repo.delete_permission(permission_id)
        logger.info("Permission deleted: %s", permission.name)

    async def list_permissions_by_resource(self) -> dict[str, list[PermissionResult]]:
        """Group every permission by resource, ordered by resource then action."""
        grouped: dict[str, list[PermissionResult]] = {}
        for permission in await self._repo.list_all_ordered():
            grouped.setdefault(permission.resource, []).append(permission)
        return grouped

    async def get_resource_actions(self, resource: str) -> list[PermissionResult]:
        """Return the permissions defined for one resource, ordered by action."""
        return await self._repo.get_by_resource(resource)
