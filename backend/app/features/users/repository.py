"""
User repositories.

Data access layer for the User model.
"""

from datetime import date

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from app.shared.repository import BaseRepository
from .models import User


class UserRepository(BaseRepository[User]):
    """Repository for User operations."""

    def __init__(self, db: AsyncSession):
        super().__init__(db, User)

    async def get_birth_date(self, user_id: str) -> date | None:
        """
        Get user's birth date.

        Args:
            user_id: User's ID

        Returns:
            Birth date, or None for unknown users / missing dates
        """
        result = await self.db.execute(
            select(User.birth_date).where(User.id == user_id)
        )
        return result.scalar_one_or_none()
