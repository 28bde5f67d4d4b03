"""Resolves an identity's role and permission closure from DB (implements IPermissionResolver)."""

from __future__ import annotations

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from rolegate.application.dtos.permission import PermissionGrant
from rolegate.infrastructure.persistence.models.permission import (
    Permission,
    RolePermission,
    UserRole,
)
from rolegate.infrastructure.persistence.models.role import Role
from rolegate.infrastructure.persistence.repositories.permission_repo import (
    permission_to_result,
)


class PermissionResolver:
    """Resolves user roles and permissions by querying user_role and role_permission.

    The closure is a set union across held roles; a permission reachable
    through several roles appears once.
    """

    def __init__(self, db: AsyncSession) -> None:
        self.db = db

    async def get_user_role_names(self, user_id: str) -> set[str]:
        """Return names of every role the user holds."""
        result = await self.db.execute(
            select(Role.name)
            .join(UserRole, UserRole.role_id == Role.id)
            .where(UserRole.user_id == user_id)
        )
        return {row[0] for row in result.fetchall()}

    async def get_user_permissions(self, user_id: str) -> set[str]:
        """Return set of permission names for user (e.g. {'users:read', 'roles:create'})."""
        query = (
            select(Permission.name)
            .select_from(UserRole)
            .join(RolePermission, RolePermission.role_id == UserRole.role_id)
            .join(Permission, Permission.id == RolePermission.permission_id)
            .where(UserRole.user_id == user_id)
        )
        result = await self.db.execute(query)
        return {row[0] for row in result.fetchall()}

    async def get_permissions_for_users(self, user_ids: list[str]) -> dict[str, set[str]]:
        """Return the closure of every user in one query (for list pages)."""
        closures: dict[str, set[str]] = {uid: set() for uid in user_ids}
        if not user_ids:
            return closures
        result = await self.db.execute(
            select(UserRole.user_id, Permission.name)
            .select_from(UserRole)
            .join(RolePermission, RolePermission.role_id == UserRole.role_id)
            .join(Permission, Permission.id == RolePermission.permission_id)
            .where(UserRole.user_id.in_(user_ids))
        )
        for user_id, name in result.all():
            closures[user_id].add(name)
        return closures

    async def get_permission_grants(self, user_id: str) -> list[PermissionGrant]:
        """Return held permissions, one per permission id, with the first granting role.

        Roles are visited in assignment order, so grants follow the order in
        which the identity acquired them.
        """
        query = (
            select(Permission, Role.name)
            .select_from(UserRole)
            .join(Role, Role.id == UserRole.role_id)
            .join(RolePermission, RolePermission.role_id == UserRole.role_id)
            .join(Permission, Permission.id == RolePermission.permission_id)
            .where(UserRole.user_id == user_id)
            .order_by(UserRole.assigned_at, Role.name, Permission.name)
        )
        result = await self.db.execute(query)
        grants: dict[str, PermissionGrant] = {}
        for permission, role_name in result.all():
            if permission.id not in grants:
                grants[permission.id] = PermissionGrant(
                    permission=permission_to_result(permission),
                    granted_by=role_name,
                )
        return list(grants.values())
