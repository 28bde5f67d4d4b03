"""Role repository. Read methods return RoleResult (DTO)."""

from __future__ import annotations

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from rolegate.application.dtos.role import RoleResult, RoleUpdate
from rolegate.domain.exceptions import ConflictException
from rolegate.infrastructure.persistence.models.role import Role
from rolegate.infrastructure.persistence.repositories.base import BaseRepository


def role_to_result(r: Role) -> RoleResult:
    """Map ORM Role to application RoleResult."""
    return RoleResult(
        id=r.id,
        name=r.name,
        description=r.description,
        is_system=r.is_system,
        created_at=r.created_at,
        updated_at=r.updated_at,
    )


class RoleRepository(BaseRepository[Role]):
    """Role repository. Uniqueness of name is backed by the store constraint."""

    search_columns = ("name", "description")

    def __init__(self, db: AsyncSession) -> None:
        super().__init__(db, Role)

    async def get_by_id(self, role_id: str) -> RoleResult | None:
        role = await self.get_entity_by_id(role_id)
        return role_to_result(role) if role else None

    async def get_by_name(self, name: str) -> RoleResult | None:
        result = await self.db.execute(select(Role).where(Role.name == name))
        row = result.scalar_one_or_none()
        return role_to_result(row) if row else None

    async def get_by_ids(self, role_ids: list[str]) -> list[RoleResult]:
        return [role_to_result(r) for r in await self.get_entities_by_ids(role_ids)]

    async def create_role(self, name: str, description: str | None = None) -> RoleResult:
        """Create a role; raise ConflictException on duplicate name."""
        try:
            created = await self.create(Role(name=name, description=description))
        except IntegrityError:
            raise ConflictException(
                "Role with this name already exists", "ROLE_ALREADY_EXISTS"
            ) from None
        return role_to_result(created)

    async def update_role(self, role_id: str, changes: RoleUpdate) -> RoleResult | None:
        role = await self.get_entity_by_id(role_id)
        if not role:
            return None
        if changes.name is not None:
            role.name = changes.name
        if changes.description is not None:
            role.description = changes.description
        try:
            updated = await self.save(role)
        except IntegrityError:
            raise ConflictException("Role name already exists", "ROLE_ALREADY_EXISTS") from None
        return role_to_result(updated)

    async def delete_role(self, role_id: str) -> bool:
        role = await self.get_entity_by_id(role_id)
        if not role:
            return False
        await self.delete(role)
        return True

    async def list_roles(
        self, skip: int = 0, limit: int = 100, search: str | None = None
    ) -> list[RoleResult]:
        query = self._apply_search(select(Role), search)
        result = await self.db.execute(
            query.order_by(Role.name).offset(skip).limit(limit)
        )
        return [role_to_result(r) for r in result.scalars().all()]

    async def count_roles(self, search: str | None = None) -> int:
        return await self._count(search)
