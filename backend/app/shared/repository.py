"""
Base repository with common data-access operations.

Provides generic database operations for all feature repositories.
Uses SQLAlchemy async session for non-blocking database access.

Usage:
    class ActivityRepository(BaseRepository[Activity]):
        def __init__(self, db: AsyncSession):
            super().__init__(db, Activity)

        async def get_by_activity_id(self, activity_id: str) -> Activity | None:
            return await self.get_by(activity_id=activity_id)
"""

from typing import AsyncIterator, Generic, Type, TypeVar

from sqlalchemy import Select, func, select
from sqlalchemy.ext.asyncio import AsyncSession

from app.shared.constants import HISTORY_PAGE_SIZE

T = TypeVar("T")


class BaseRepository(Generic[T]):
    """
    Base repository for database operations.

    Feature repositories inherit lookups, updates and paginated reads.
    All methods are async for use with AsyncSession.
    """

    def __init__(self, db: AsyncSession, model: Type[T]):
        """
        Initialize repository.

        Args:
            db: Async database session
            model: SQLAlchemy model class
        """
        self.db = db
        self.model = model

    async def get_by_id(self, id: str | int) -> T | None:
        """Get entity by primary key ID."""
        result = await self.db.execute(
            select(self.model).where(self.model.id == id)
        )
        return result.scalar_one_or_none()

    async def get_by(self, **kwargs) -> T | None:
        """
        Get single entity by arbitrary field values.

        Args:
            **kwargs: Field name-value pairs to filter by

        Returns:
            First matching entity or None
        """
        query = select(self.model)
        for key, value in kwargs.items():
            query = query.where(getattr(self.model, key) == value)
        result = await self.db.execute(query.limit(1))
        return result.scalars().first()

    async def update(self, entity: T, **kwargs) -> T:
        """
        Update entity fields and flush.

        Args:
            entity: Entity to update
            **kwargs: Field values to update

        Returns:
            Updated entity
        """
        for key, value in kwargs.items():
            setattr(entity, key, value)
        await self.db.flush()
        return entity

    async def commit(self) -> None:
        """Commit the unit of work shared by this session."""
        await self.db.commit()

    async def rollback(self) -> None:
        """Discard the unit of work shared by this session."""
        await self.db.rollback()

    async def count_where(self, *conditions) -> int:
        """Count entities matching SQLAlchemy conditions."""
        query = select(func.count()).select_from(self.model)
        for condition in conditions:
            query = query.where(condition)
        result = await self.db.execute(query)
        return result.scalar() or 0

    async def iter_pages(
        self,
        query: Select,
        page_size: int = HISTORY_PAGE_SIZE
    ) -> AsyncIterator[list]:
        """
        Yield query results in fixed-size pages.

        The query must carry a deterministic ORDER BY. Iteration stops on
        the first short page.

        Args:
            query: Ordered select statement
            page_size: Rows per page

        Yields:
            Lists of scalars, at most page_size long
        """
        offset = 0
        while True:
            result = await self.db.execute(query.offset(offset).limit(page_size))
            page = list(result.scalars().all())
            if not page:
                return
            yield page
            if len(page) < page_size:
                return
            offset += page_size
