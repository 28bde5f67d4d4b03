"""UserRole repository: user-role assignments (single entity responsibility)."""

from __future__ import annotations

from collections import defaultdict

from sqlalchemy import delete, func, insert, select
from sqlalchemy.ext.asyncio import AsyncSession

from rolegate.application.dtos.role import RoleHolder
from rolegate.application.dtos.user import RoleAssignmentResult
from rolegate.infrastructure.persistence.models.permission import UserRole
from rolegate.infrastructure.persistence.models.role import Role
from rolegate.infrastructure.persistence.models.user import User
from rolegate.infrastructure.persistence.repositories.role_repo import role_to_result
from rolegate.shared.utils.datetime import utc_now
from rolegate.shared.utils.generators import generate_cuid


def _assignment_to_result(role: Role, edge: UserRole) -> RoleAssignmentResult:
    return RoleAssignmentResult(
        role=role_to_result(role),
        assigned_at=edge.assigned_at,
        assigned_by=edge.assigned_by,
    )


class UserRoleRepository:
    """User-role link table only. Remove/replace edges and read them per user or role."""

    def __init__(self, db: AsyncSession) -> None:
        self.db = db

    async def get_user_roles(self, user_id: str) -> list[RoleAssignmentResult]:
        result = await self.db.execute(
            select(Role, UserRole)
            .join(UserRole, UserRole.role_id == Role.id)
            .where(UserRole.user_id == user_id)
            .order_by(UserRole.assigned_at, Role.name)
        )
        return [_assignment_to_result(role, edge) for role, edge in result.all()]

    async def get_roles_for_users(
        self, user_ids: list[str]
    ) -> dict[str, list[RoleAssignmentResult]]:
        roles: dict[str, list[RoleAssignmentResult]] = {uid: [] for uid in user_ids}
        if not user_ids:
            return roles
        result = await self.db.execute(
            select(Role, UserRole)
            .join(UserRole, UserRole.role_id == Role.id)
            .where(UserRole.user_id.in_(user_ids))
            .order_by(UserRole.assigned_at, Role.name)
        )
        for role, edge in result.all():
            roles[edge.user_id].append(_assignment_to_result(role, edge))
        return roles

    async def get_assignment(self, user_id: str, role_id: str) -> RoleAssignmentResult | None:
        result = await self.db.execute(
            select(Role, UserRole)
            .join(UserRole, UserRole.role_id == Role.id)
            .where(UserRole.user_id == user_id, UserRole.role_id == role_id)
        )
        row = result.first()
        return _assignment_to_result(row[0], row[1]) if row else None

    async def get_role_holders(self, role_id: str) -> list[RoleHolder]:
        result = await self.db.execute(
            select(User, UserRole.assigned_at)
            .join(UserRole, UserRole.user_id == User.id)
            .where(UserRole.role_id == role_id)
            .order_by(UserRole.assigned_at, User.email)
        )
        return [
            RoleHolder(
                user_id=user.id,
                email=user.email,
                first_name=user.first_name,
                last_name=user.last_name,
                is_active=user.is_active,
                assigned_at=assigned_at,
            )
            for user, assigned_at in result.all()
        ]

    async def count_for_user(self, user_id: str) -> int:
        result = await self.db.execute(
            select(func.count()).select_from(UserRole).where(UserRole.user_id == user_id)
        )
        return int(result.scalar_one())

    async def count_for_role(self, role_id: str) -> int:
        result = await self.db.execute(
            select(func.count()).select_from(UserRole).where(UserRole.role_id == role_id)
        )
        return int(result.scalar_one())

    async def count_for_roles(self, role_ids: list[str]) -> dict[str, int]:
        counts: dict[str, int] = defaultdict(int)
        if role_ids:
            result = await self.db.execute(
                select(UserRole.role_id, func.count())
                .where(UserRole.role_id.in_(role_ids))
                .group_by(UserRole.role_id)
            )
            counts.update({role_id: int(n) for role_id, n in result.all()})
        return {rid: counts[rid] for rid in role_ids}

    async def remove_role_from_user(self, user_id: str, role_id: str) -> bool:
        result = await self.db.execute(
            select(UserRole).where(
                UserRole.user_id == user_id,
                UserRole.role_id == role_id,
            )
        )
        ur = result.scalar_one_or_none()
        if not ur:
            return False
        await self.db.delete(ur)
        await self.db.flush()
        return True

    async def replace_user_roles(
        self, user_id: str, role_ids: list[str], assigned_by: str | None = None
    ) -> None:
        """Delete all edges of the user then bulk insert; caller owns the transaction."""
        now = utc_now()
        await self.db.execute(delete(UserRole).where(UserRole.user_id == user_id))
        unique_ids = list(dict.fromkeys(role_ids))
        if unique_ids:
            await self.db.execute(
                insert(UserRole),
                [
                    {
                        "id": generate_cuid(),
                        "user_id": user_id,
                        "role_id": rid,
                        "assigned_by": assigned_by,
                        "assigned_at": now,
                    }
                    for rid in unique_ids
                ],
            )
        await self.db.flush()
