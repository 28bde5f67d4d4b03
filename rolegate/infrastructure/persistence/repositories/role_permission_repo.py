"""RolePermission repository: role-permission assignments (single entity responsibility)."""

from __future__ import annotations

from sqlalchemy import delete, func, insert, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from rolegate.application.dtos.permission import PermissionResult
from rolegate.application.dtos.role import RoleResult
from rolegate.domain.exceptions import DuplicateAssignmentException
from rolegate.infrastructure.persistence.models.permission import (
    Permission,
    RolePermission,
)
from rolegate.infrastructure.persistence.models.role import Role
from rolegate.infrastructure.persistence.repositories.permission_repo import (
    permission_to_result,
)
from rolegate.infrastructure.persistence.repositories.role_repo import role_to_result
from rolegate.shared.utils.generators import generate_cuid


class RolePermissionRepository:
    """Role-permission link table only. Assign/remove/replace and query edges."""

    def __init__(self, db: AsyncSession) -> None:
        self.db = db

    async def _get_edge(self, role_id: str, permission_id: str) -> RolePermission | None:
        result = await self.db.execute(
            select(RolePermission).where(
                RolePermission.role_id == role_id,
                RolePermission.permission_id == permission_id,
            )
        )
        return result.scalar_one_or_none()

    async def get_permissions_for_role(self, role_id: str) -> list[PermissionResult]:
        result = await self.db.execute(
            select(Permission)
            .join(RolePermission, RolePermission.permission_id == Permission.id)
            .where(RolePermission.role_id == role_id)
            .order_by(Permission.name)
        )
        return [permission_to_result(p) for p in result.scalars().all()]

    async def get_permissions_for_roles(
        self, role_ids: list[str]
    ) -> dict[str, list[PermissionResult]]:
        permissions: dict[str, list[PermissionResult]] = {rid: [] for rid in role_ids}
        if not role_ids:
            return permissions
        result = await self.db.execute(
            select(RolePermission.role_id, Permission)
            .join(Permission, Permission.id == RolePermission.permission_id)
            .where(RolePermission.role_id.in_(role_ids))
            .order_by(Permission.name)
        )
        for role_id, permission in result.all():
            permissions[role_id].append(permission_to_result(permission))
        return permissions

    async def get_roles_for_permission(self, permission_id: str) -> list[RoleResult]:
        result = await self.db.execute(
            select(Role)
            .join(RolePermission, RolePermission.role_id == Role.id)
            .where(RolePermission.permission_id == permission_id)
            .order_by(Role.name)
        )
        return [role_to_result(r) for r in result.scalars().all()]

    async def has_assignment(self, role_id: str, permission_id: str) -> bool:
        return await self._get_edge(role_id, permission_id) is not None

    async def assign_permission_to_role(self, role_id: str, permission_id: str) -> None:
        rp = RolePermission(role_id=role_id, permission_id=permission_id)
        try:
            self.db.add(rp)
            await self.db.flush()
        except IntegrityError:
            raise DuplicateAssignmentException(
                "Permission already assigned to this role",
                assignment_type="role_permission",
                details_extra={"role_id": role_id, "permission_id": permission_id},
            ) from None

    async def remove_permission_from_role(self, role_id: str, permission_id: str) -> bool:
        rp = await self._get_edge(role_id, permission_id)
        if not rp:
            return False
        await self.db.delete(rp)
        await self.db.flush()
        return True

    async def replace_role_permissions(
        self, role_id: str, permission_ids: list[str]
    ) -> None:
        """Delete all edges of the role then bulk insert; caller owns the transaction."""
        await self.db.execute(delete(RolePermission).where(RolePermission.role_id == role_id))
        unique_ids = list(dict.fromkeys(permission_ids))
        if unique_ids:
            await self.db.execute(
                insert(RolePermission),
                [
                    {"id": generate_cuid(), "role_id": role_id, "permission_id": pid}
                    for pid in unique_ids
                ],
            )
        await self.db.flush()

    async def count_for_permission(self, permission_id: str) -> int:
        result = await self.db.execute(
            select(func.count())
            .select_from(RolePermission)
            .where(RolePermission.permission_id == permission_id)
        )
        return int(result.scalar_one())
