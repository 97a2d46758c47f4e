"""
Variation Analysis Service

Runs the feature extractor over one activity's stream and stores the
resulting coefficients of variation for the workout classifier.
"""

import logging
from typing import Iterable, Optional

from app.shared.calculator_types import VariationRow
from app.features.variation.calculators import (
    ActivityFeatureExtractor,
    StreamSample,
    VariationStats,
)

logger = logging.getLogger(__name__)


class VariationAnalysisService:
    """
    Analyze and persist per-activity variability.

    Args:
        variation_repo: VariationRepository (or any object with async upsert/commit)
        extractor: Feature extractor, default thresholds if omitted
    """

    def __init__(
        self,
        variation_repo,
        extractor: Optional[ActivityFeatureExtractor] = None
    ):
        self.variation_repo = variation_repo
        self.extractor = extractor or ActivityFeatureExtractor()

    async def analyze(
        self,
        user_id: str,
        activity_id: str,
        samples: Iterable[StreamSample],
        persist: bool = True
    ) -> VariationStats:
        """
        Compute pace / HR variability and upsert it.

        Insufficient series are stored as NULL CVs so the classifier
        treats the matching rules as non-matching.
        """
        stats = self.extractor.extract(samples)
        category = stats.categorize()

        logger.info(
            f"Variation for {user_id}/{activity_id}: "
            f"cv_pace={stats.cv_pace} cv_hr={stats.cv_hr} ({category.diagnosis})"
        )

        if persist:
            await self.variation_repo.upsert(VariationRow(
                user_id=user_id,
                activity_id=activity_id,
                cv_pace=stats.cv_pace,
                cv_hr=stats.cv_hr,
            ))
            await self.variation_repo.commit()

        return stats
