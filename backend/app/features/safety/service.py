"""
Plan Recalibration Service

Batch safety pass over an existing training plan: recomputes the
owner's safe baseline, rewrites unsafe paces, caps tempo duration and
stamps the plan notes.
"""

import logging
from dataclasses import dataclass, field
from datetime import date, datetime, timedelta
from typing import List, Optional

from app.config import settings
from app.shared.exceptions import EmptyPlanError, HistoryUnavailableError, PlanNotFoundError
from app.shared.formatters import format_pace
from app.features.safety.calculators import (
    SafeBaseline,
    SafetyCalibrationConfig,
    SafetyCalibrator,
    WorkoutCorrection,
    WorkoutPrescription,
)

logger = logging.getLogger(__name__)


@dataclass
class RecalibrationResult:
    """Outcome of one plan recalibration."""
    plan_id: str
    critical_issues_fixed: int
    total_workouts_processed: int
    safe_paces: SafeBaseline
    corrections: List[WorkoutCorrection] = field(default_factory=list)

    @property
    def warnings(self) -> List[str]:
        return [w for c in self.corrections for w in c.warnings]

    def to_dict(self) -> dict:
        return {
            "plan_id": self.plan_id,
            "critical_issues_fixed": self.critical_issues_fixed,
            "total_workouts_processed": self.total_workouts_processed,
            "safe_paces": self.safe_paces.to_dict(),
            "per_workout_corrections": [c.to_dict() for c in self.corrections],
            "warnings": self.warnings,
        }


class PlanRecalibrationService:
    """
    Recalibrate a stored training plan.

    Args:
        plan_repo: PlanRepository
        activity_repo: ActivityRepository
        user_repo: UserRepository
        config: Calibrator thresholds
    """

    def __init__(
        self,
        plan_repo,
        activity_repo,
        user_repo,
        config: Optional[SafetyCalibrationConfig] = None
    ):
        self.plan_repo = plan_repo
        self.activity_repo = activity_repo
        self.user_repo = user_repo
        self.config = config or SafetyCalibrationConfig(
            window_days=settings.calibration_window_days
        )

    async def build_calibrator(self, user_id: str, today: Optional[date] = None) -> SafetyCalibrator:
        """Load a user's recent runs and birth date into a calibrator."""
        today = today or date.today()
        since = today - timedelta(days=self.config.window_days)
        try:
            runs = await self.activity_repo.get_user_runs_since(user_id, since)
        except Exception as e:
            logger.error(f"Failed to load runs for user {user_id}: {e}")
            raise HistoryUnavailableError(f"Activity history unavailable: {e}") from e

        birth_date = await self.user_repo.get_birth_date(user_id)
        return SafetyCalibrator(runs, birth_date=birth_date, today=today, config=self.config)

    async def _resolve_plan(self, plan_id: Optional[str], user_email: Optional[str]):
        if plan_id:
            plan = await self.plan_repo.get_by_id(plan_id)
        elif user_email:
            plan = await self.plan_repo.get_active_plan_for_email(user_email)
        else:
            raise PlanNotFoundError("plan_id or user_email required")

        if plan is None:
            raise PlanNotFoundError(f"Plan not found: {plan_id or user_email}")
        return plan

    async def recalibrate(
        self,
        plan_id: Optional[str] = None,
        user_email: Optional[str] = None,
        today: Optional[date] = None
    ) -> RecalibrationResult:
        """
        Scan every workout of a plan and fix unsafe prescriptions.

        Raises:
            PlanNotFoundError: no such plan (or no active plan for the email)
            EmptyPlanError: plan has no workouts
            HistoryUnavailableError: run history could not be read
        """
        plan = await self._resolve_plan(plan_id, user_email)
        calibrator = await self.build_calibrator(plan.user_id, today)
        baseline = calibrator.baseline

        logger.info(
            f"Safe paces for user {plan.user_id} ({baseline.source}): "
            f"10K {format_pace(baseline.pace_10k)}, easy {format_pace(baseline.pace_easy)}"
        )

        workouts = await self.plan_repo.get_workouts(plan.id)
        if not workouts:
            raise EmptyPlanError(f"No workouts found for plan {plan.id}")

        corrections = []
        critical = 0
        for workout in workouts:
            correction = calibrator.apply(WorkoutPrescription(
                workout_type=workout.workout_type,
                target_pace_min_per_km=workout.target_pace_min_per_km,
                duration_minutes=workout.duration_minutes,
                description=workout.description,
                title=workout.title,
                workout_id=workout.id,
            ), cap_tempo_duration=True)
            corrections.append(correction)

            if correction.skipped:
                continue
            if correction.has_critical_issue:
                critical += 1
                logger.warning(f"Critical issue fixed in '{workout.title}': {correction.warnings}")

            await self.plan_repo.update_workout(
                workout,
                target_pace_min_per_km=correction.safe_pace,
                duration_minutes=correction.safe_duration,
                description=correction.description,
            )

        await self.plan_repo.stamp_notes(
            plan,
            f"Safety recalibrated on {datetime.utcnow().isoformat()} - "
            f"{critical} critical issues fixed",
        )
        await self.plan_repo.commit()

        logger.info(f"Recalibration of plan {plan.id} complete: {critical} critical issues fixed")

        return RecalibrationResult(
            plan_id=plan.id,
            critical_issues_fixed=critical,
            total_workouts_processed=len(corrections),
            safe_paces=baseline,
            corrections=corrections,
        )
