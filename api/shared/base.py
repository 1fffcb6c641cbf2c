"""Base repository with the common CRUD operations."""
from abc import ABC
from typing import Any, Generic, List, Optional, Type, TypeVar

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import DeclarativeBase

T = TypeVar("T", bound=DeclarativeBase)


class BaseRepository(ABC, Generic[T]):
    """Enhanced base repository with common CRUD operations."""

    model: Type[T]

    def __init__(self, session: AsyncSession):
        self.session = session

    def _apply_filters(self, stmt, filters: dict):
        for field_name, value in filters.items():
            field = getattr(self.model, field_name)
            # None is matched as SQL NULL, not skipped
            if value is None:
                stmt = stmt.where(field.is_(None))
            elif isinstance(value, (list, tuple)):
                stmt = stmt.where(field.in_(value))
            else:
                stmt = stmt.where(field == value)
        return stmt

    async def create(self, entity: T) -> T:
        """Create new entity."""
        self.session.add(entity)
        await self.session.flush()
        return entity

    async def get_by_fields(self, limit: Optional[int] = None, **filters: Any) -> List[T]:
        """Get entities by multiple field values."""
        stmt = self._apply_filters(select(self.model), filters)
        if limit:
            stmt = stmt.limit(limit)
        result = await self.session.execute(stmt)
        return list(result.scalars().all())

    async def get_one_by_fields(self, **filters: Any) -> Optional[T]:
        """Get the single entity matching all field values, if any."""
        entities = await self.get_by_fields(limit=1, **filters)
        return entities[0] if entities else None

    async def update(self, entity: T) -> T:
        """Flush pending changes on an entity already in the session."""
        self.session.add(entity)
        await self.session.flush()
        return entity

    async def count(self, **filters: Any) -> int:
        """Count entities with filters."""
        stmt = self._apply_filters(
            select(func.count(self.model.id)), filters  # type: ignore[attr-defined]
        )
        result = await self.session.execute(stmt)
        return int(result.scalar() or 0)
