"""
Activity repositories.

Data access layer for the activity history and variation stores. Every
read that can grow with history size goes through BaseRepository.iter_pages.
"""

from datetime import date
from typing import Sequence

from sqlalchemy import select, update, func, and_
from sqlalchemy.ext.asyncio import AsyncSession

from app.shared.calculator_types import ActivityRecord, VariationRow, safe_number
from app.shared.constants import HISTORY_PAGE_SIZE, RUN_TYPE_MARKER
from app.shared.repository import BaseRepository
from .models import Activity, VariationAnalysis


# History paces above this are treated as stopped watches / bad data
MAX_HISTORY_PACE_MIN_KM = 60.0
MIN_HISTORY_DISTANCE_M = 1000.0


def _is_run_condition():
    return func.lower(Activity.activity_type).contains(RUN_TYPE_MARKER)


class ActivityRepository(BaseRepository[Activity]):
    """Repository for the activity history store."""

    def __init__(self, db: AsyncSession, page_size: int = HISTORY_PAGE_SIZE):
        super().__init__(db, Activity)
        self.page_size = page_size

    async def list_classification_targets(
        self,
        user_id: str | None = None,
        reclassify: bool = False
    ) -> list[ActivityRecord]:
        """
        Load activities selected for classification.

        Args:
            user_id: Restrict to a single user
            reclassify: Include already-labeled activities

        Returns:
            Records ordered by insertion time
        """
        query = select(Activity).order_by(Activity.created_at, Activity.id)
        if user_id:
            query = query.where(Activity.user_id == user_id)
        if not reclassify:
            query = query.where(Activity.detected_workout_type.is_(None))

        records: list[ActivityRecord] = []
        async for page in self.iter_pages(query, self.page_size):
            records.extend(row.to_record() for row in page)
        return records

    async def get_history_paces(self, user_id: str) -> list[float]:
        """
        All valid paces from a user's full history.

        Valid: 0 < pace < 60 min/km over more than 1 km.
        """
        query = (
            select(Activity)
            .where(Activity.user_id == user_id)
            .where(Activity.pace_min_per_km.is_not(None))
            .order_by(Activity.id)
        )

        paces: list[float] = []
        async for page in self.iter_pages(query, self.page_size):
            for row in page:
                pace = safe_number(row.pace_min_per_km)
                distance = safe_number(row.distance_m)
                if pace is None or distance is None:
                    continue
                if 0 < pace < MAX_HISTORY_PACE_MIN_KM and distance > MIN_HISTORY_DISTANCE_M:
                    paces.append(pace)
        return paces

    async def set_workout_type(self, user_id: str, activity_id: str, label: str) -> bool:
        """
        Write the detected workout label.

        Returns:
            True if a row was updated
        """
        result = await self.db.execute(
            update(Activity)
            .where(and_(Activity.user_id == user_id, Activity.activity_id == activity_id))
            .values(detected_workout_type=label)
        )
        return (result.rowcount or 0) > 0

    async def count_user_runs(self, user_id: str, since: date) -> int:
        """Count a user's running activities on or after `since`."""
        return await self.count_where(
            Activity.user_id == user_id,
            Activity.activity_date >= since,
            _is_run_condition(),
        )

    async def get_runs_since(self, since: date) -> list[ActivityRecord]:
        """Running activities of every user on or after `since`."""
        query = (
            select(Activity)
            .where(Activity.activity_date >= since)
            .where(_is_run_condition())
            .order_by(Activity.user_id, Activity.activity_date, Activity.id)
        )
        records: list[ActivityRecord] = []
        async for page in self.iter_pages(query, self.page_size):
            records.extend(row.to_record() for row in page)
        return records

    async def get_user_runs_since(self, user_id: str, since: date) -> list[ActivityRecord]:
        """One user's running activities on or after `since`, newest first."""
        query = (
            select(Activity)
            .where(Activity.user_id == user_id)
            .where(Activity.activity_date >= since)
            .where(_is_run_condition())
            .order_by(Activity.activity_date.desc(), Activity.id)
        )
        records: list[ActivityRecord] = []
        async for page in self.iter_pages(query, self.page_size):
            records.extend(row.to_record() for row in page)
        return records


class VariationRepository(BaseRepository[VariationAnalysis]):
    """Repository for per-activity coefficients of variation."""

    def __init__(self, db: AsyncSession):
        super().__init__(db, VariationAnalysis)

    async def get_for_activities(
        self,
        user_id: str,
        activity_ids: Sequence[str],
        chunk_size: int = HISTORY_PAGE_SIZE
    ) -> dict[str, VariationRow]:
        """
        Load variation rows keyed by activity id.

        Ids are queried in chunks to keep IN-lists bounded.
        """
        rows: dict[str, VariationRow] = {}
        for start in range(0, len(activity_ids), chunk_size):
            chunk = list(activity_ids[start:start + chunk_size])
            result = await self.db.execute(
                select(VariationAnalysis)
                .where(VariationAnalysis.user_id == user_id)
                .where(VariationAnalysis.activity_id.in_(chunk))
            )
            for entity in result.scalars().all():
                rows[entity.activity_id] = entity.to_row()
        return rows

    async def upsert(self, row: VariationRow) -> VariationAnalysis:
        """Insert or update the CVs for one activity."""
        entity = await self.get_by(user_id=row.user_id, activity_id=row.activity_id)
        if entity is None:
            entity = VariationAnalysis(
                user_id=row.user_id,
                activity_id=row.activity_id,
                cv_pace=row.cv_pace,
                cv_hr=row.cv_hr,
            )
            self.db.add(entity)
            await self.db.flush()
            return entity
        return await self.update(entity, cv_pace=row.cv_pace, cv_hr=row.cv_hr)
