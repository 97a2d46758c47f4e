"""
Skill Level Service

Resolves the adaptive lookback window for the target user, loads the
population's runs for that window and fits a fresh population model.
"""

import logging
from datetime import date, timedelta
from typing import Optional

from app.config import settings
from app.shared.exceptions import HistoryUnavailableError
from app.features.skill_level.calculators import (
    MIN_QUALIFYING_RUNS,
    SkillLevelEstimator,
    SkillLevelResult,
    XorShiftRandom,
    build_feature_vectors,
    lookback_candidates,
)

logger = logging.getLogger(__name__)


class SkillLevelService:
    """
    Estimate a user's skill tier against the active population.

    Args:
        activity_repo: ActivityRepository
        seed: k-means++ seed (settings.kmeans_seed if omitted)
    """

    def __init__(self, activity_repo, seed: Optional[int] = None):
        self.activity_repo = activity_repo
        self.seed = settings.kmeans_seed if seed is None else seed

    async def resolve_lookback(self, user_id: str, requested_days: int, today: date) -> tuple[int, int]:
        """
        Widen the window until the user has enough runs.

        Returns:
            (lookback days, user's run count in that window)
        """
        lookback = requested_days
        runs = 0
        for lookback in lookback_candidates(requested_days):
            runs = await self.activity_repo.count_user_runs(user_id, today - timedelta(days=lookback))
            if runs >= MIN_QUALIFYING_RUNS:
                break
        return lookback, runs

    async def estimate(
        self,
        user_id: str,
        lookback_days: Optional[int] = None,
        today: Optional[date] = None
    ) -> SkillLevelResult:
        """
        Compute the tier report for one user.

        A user without runs even at the widest window gets Beginner
        with a no-data reason.

        Raises:
            HistoryUnavailableError: activity history could not be read
        """
        today = today or date.today()
        requested = lookback_days or settings.default_lookback_days

        try:
            lookback, user_runs = await self.resolve_lookback(user_id, requested, today)
            if user_runs == 0:
                logger.info(f"No runs for user {user_id} within {lookback} days")
                return SkillLevelResult.no_data(lookback_days_used=lookback)

            records = await self.activity_repo.get_runs_since(today - timedelta(days=lookback))
        except Exception as e:
            logger.error(f"Failed to load population history: {e}")
            raise HistoryUnavailableError(f"Activity history unavailable: {e}") from e

        vectors = build_feature_vectors(records, lookback)
        model = SkillLevelEstimator(XorShiftRandom(self.seed)).fit(vectors)
        if model is None:
            return SkillLevelResult.no_data(lookback_days_used=lookback)

        result = model.result_for(user_id, lookback_days_used=lookback)
        logger.info(
            f"Skill level for {user_id}: {result.tier.value} "
            f"(percentile tier {result.alternate_tier_percentile}, "
            f"population={result.population_size}, lookback={lookback}d)"
        )
        return result
