"""Base repository: generic lookup, create, delete and search helpers."""

from typing import Any, Generic, TypeVar

from sqlalchemy import ColumnElement, Select, func, or_, select
from sqlalchemy.ext.asyncio import AsyncSession

from rolegate.infrastructure.persistence.database import Base

ModelType = TypeVar("ModelType", bound=Base)


class BaseRepository(Generic[ModelType]):
    """Base repository with get_entity_by_id, get_entities_by_ids, create, delete.

    Subclasses expose DTO-returning methods; ORM instances never leave the
    infrastructure layer.
    """

    search_columns: tuple[str, ...] = ()

    def __init__(self, db: AsyncSession, model: type[ModelType]) -> None:
        self.db = db
        self.model = model

    async def get_entity_by_id(self, entity_id: str) -> ModelType | None:
        """Return a single record by primary key, or None."""
        model: Any = self.model
        result = await self.db.execute(select(self.model).where(model.id == entity_id))
        return result.scalar_one_or_none()

    async def get_entities_by_ids(self, entity_ids: list[str]) -> list[ModelType]:
        """Return the records that exist among entity_ids (order not guaranteed)."""
        if not entity_ids:
            return []
        model: Any = self.model
        result = await self.db.execute(
            select(self.model).where(model.id.in_(set(entity_ids)))
        )
        return list(result.scalars().all())

    async def create(self, obj: ModelType) -> ModelType:
        """Persist a new record and refresh server defaults."""
        self.db.add(obj)
        await self.db.flush()
        await self.db.refresh(obj)
        return obj

    async def save(self, obj: ModelType) -> ModelType:
        """Flush pending changes on an attached record and refresh it."""
        await self.db.flush()
        await self.db.refresh(obj)
        return obj

    async def delete(self, obj: ModelType) -> None:
        """Delete the record."""
        await self.db.delete(obj)
        await self.db.flush()

    def _search_clause(self, search: str | None) -> ColumnElement[bool] | None:
        """Case-insensitive contains over search_columns; None when search is empty."""
        if not search or not self.search_columns:
            return None
        pattern = f"%{search.strip()}%"
        return or_(
            *(getattr(self.model, column).ilike(pattern) for column in self.search_columns)
        )

    def _apply_search(self, query: Select[Any], search: str | None) -> Select[Any]:
        clause = self._search_clause(search)
        return query.where(clause) if clause is not None else query

    async def _count(self, search: str | None = None) -> int:
        query = self._apply_search(select(func.count()).select_from(self.model), search)
        result = await self.db.execute(query)
        return int(result.scalar_one())
