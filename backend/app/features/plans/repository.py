"""
Training plan repositories.

Data access layer for TrainingPlan and TrainingPlanWorkout models.
"""

from datetime import datetime

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from app.shared.repository import BaseRepository
from app.features.users.models import User
from .models import TrainingPlan, TrainingPlanWorkout


class PlanRepository(BaseRepository[TrainingPlan]):
    """Repository for training plans and their workouts."""

    def __init__(self, db: AsyncSession):
        super().__init__(db, TrainingPlan)

    async def get_active_plan_for_email(self, email: str) -> TrainingPlan | None:
        """
        Find the active plan of the user with this email.

        Args:
            email: User's email

        Returns:
            Active plan, None if user or plan is missing
        """
        result = await self.db.execute(
            select(TrainingPlan)
            .join(User, User.id == TrainingPlan.user_id)
            .where(User.email == email)
            .where(TrainingPlan.status == "active")
            .order_by(TrainingPlan.created_at.desc())
            .limit(1)
        )
        return result.scalars().first()

    async def get_workouts(self, plan_id: str) -> list[TrainingPlanWorkout]:
        """Plan workouts ordered by week."""
        result = await self.db.execute(
            select(TrainingPlanWorkout)
            .where(TrainingPlanWorkout.plan_id == plan_id)
            .order_by(TrainingPlanWorkout.week_number, TrainingPlanWorkout.id)
        )
        return list(result.scalars().all())

    async def update_workout(
        self,
        workout: TrainingPlanWorkout,
        target_pace_min_per_km: float,
        duration_minutes: float | None,
        description: str | None
    ) -> TrainingPlanWorkout:
        """Rewrite the safety-relevant fields of one workout."""
        return await self.update(
            workout,
            target_pace_min_per_km=target_pace_min_per_km,
            duration_minutes=duration_minutes,
            description=description,
            updated_at=datetime.utcnow(),
        )

    async def stamp_notes(self, plan: TrainingPlan, notes: str) -> TrainingPlan:
        return await self.update(plan, notes=notes, updated_at=datetime.utcnow())
