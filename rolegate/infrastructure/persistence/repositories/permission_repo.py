"""Permission repository. name is always derived from resource and action."""

from __future__ import annotations

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from rolegate.application.dtos.permission import PermissionResult, PermissionUpdate
from rolegate.domain.exceptions import ConflictException
from rolegate.domain.value_objects import PermissionName
from rolegate.infrastructure.persistence.models.permission import Permission
from rolegate.infrastructure.persistence.repositories.base import BaseRepository

_MSG_DUPLICATE_PERMISSION = "Permission with this name already exists"


def permission_to_result(p: Permission) -> PermissionResult:
    """Map ORM Permission to application PermissionResult."""
    return PermissionResult(
        id=p.id,
        name=p.name,
        resource=p.resource,
        action=p.action,
        description=p.description,
        created_at=p.created_at,
        updated_at=p.updated_at,
    )


class PermissionRepository(BaseRepository[Permission]):
    """Permission repository. Reads are ordered by resource then action."""

    search_columns = ("name", "resource", "action", "description")

    def __init__(self, db: AsyncSession) -> None:
        super().__init__(db, Permission)

    async def get_by_id(self, permission_id: str) -> PermissionResult | None:
        permission = await self.get_entity_by_id(permission_id)
        return permission_to_result(permission) if permission else None

    async def get_by_name(self, name: str) -> PermissionResult | None:
        result = await self.db.execute(select(Permission).where(Permission.name == name))
        row = result.scalar_one_or_none()
        return permission_to_result(row) if row else None

    async def get_by_ids(self, permission_ids: list[str]) -> list[PermissionResult]:
        return [
            permission_to_result(p) for p in await self.get_entities_by_ids(permission_ids)
        ]

    async def create_permission(
        self,
        resource: str,
        action: str,
        description: str | None = None,
    ) -> PermissionResult:
        """Create permission; raise ConflictException on duplicate derived name."""
        name = PermissionName(resource=resource, action=action).value
        permission = Permission(
            name=name,
            resource=resource,
            action=action,
            description=description,
        )
        try:
            created = await self.create(permission)
        except IntegrityError:
            raise ConflictException(_MSG_DUPLICATE_PERMISSION, "PERMISSION_ALREADY_EXISTS") from None
        return permission_to_result(created)

    async def update_permission(
        self, permission_id: str, changes: PermissionUpdate
    ) -> PermissionResult | None:
        """Apply present fields; name is recomputed from the resulting resource/action."""
        permission = await self.get_entity_by_id(permission_id)
        if not permission:
            return None
        if changes.resource is not None:
            permission.resource = changes.resource
        if changes.action is not None:
            permission.action = changes.action
        if changes.description is not None:
            permission.description = changes.description
        permission.name = PermissionName(
            resource=permission.resource, action=permission.action
        ).value
        try:
            updated = await self.save(permission)
        except IntegrityError:
            raise ConflictException(_MSG_DUPLICATE_PERMISSION, "PERMISSION_ALREADY_EXISTS") from None
        return permission_to_result(updated)

    async def delete_permission(self, permission_id: str) -> bool:
        permission = await self.get_entity_by_id(permission_id)
        if not permission:
            return False
        await self.delete(permission)
        return True

    async def list_permissions(
        self, skip: int = 0, limit: int = 100, search: str | None = None
    ) -> list[PermissionResult]:
        query = self._apply_search(select(Permission), search)
        result = await self.db.execute(
            query.order_by(Permission.resource, Permission.action)
            .offset(skip)
            .limit(limit)
        )
        return [permission_to_result(p) for p in result.scalars().all()]

    async def count_permissions(self, search: str | None = None) -> int:
        return await self._count(search)

    async def list_all_ordered(self) -> list[PermissionResult]:
        result = await self.db.execute(
            select(Permission).order_by(Permission.resource, Permission.action)
        )
        return [permission_to_result(p) for p in result.scalars().all()]

    async def get_by_resource(self, resource: str) -> list[PermissionResult]:
        result = await self.db.execute(
            select(Permission)
            .where(Permission.resource == resource)
            .order_by(Permission.action)
        )
        return [permission_to_result(p) for p in result.scalars().all()]
