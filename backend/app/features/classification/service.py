"""
Workout Classification Service

Batch entry point for the workout classifier:
- selects unlabeled activities (or all of them with reclassify)
- computes each user's pace baseline once per batch
- loads precomputed CVs from the variation store
- writes back labels that changed

Each user's labels are one unit of work. Any failure rolls that user
back, reports their activities as not updated and records the error;
the batch then moves on. Failing to read the target list aborts the
whole batch with HistoryUnavailableError.
"""

import json
import logging
from collections import defaultdict
from dataclasses import dataclass, field
from typing import List, Optional

from app.config import settings
from app.shared.calculator_types import ActivityRecord, BatchError
from app.shared.exceptions import HistoryUnavailableError
from app.features.classification.calculators import (
    WorkoutTypeClassifier,
    UserHistoryBaseline,
)

logger = logging.getLogger(__name__)


@dataclass
class ClassificationBatchResult:
    """Aggregate outcome of one batch run."""
    processed: int = 0
    updated: int = 0
    results: List[dict] = field(default_factory=list)
    errors: List[BatchError] = field(default_factory=list)

    def to_dict(self) -> dict:
        return {
            "processed": self.processed,
            "updated": self.updated,
            "results": self.results,
            "errors": [e.to_dict() for e in self.errors],
        }


class WorkoutClassificationService:
    """
    Classify activities and write labels back.

    Args:
        activity_repo: ActivityRepository
        variation_repo: VariationRepository
        classifier: Rule cascade, default thresholds if omitted
        variation_chunk_size: Activity ids per variation lookup
    """

    def __init__(
        self,
        activity_repo,
        variation_repo,
        classifier: Optional[WorkoutTypeClassifier] = None,
        variation_chunk_size: Optional[int] = None
    ):
        self.activity_repo = activity_repo
        self.variation_repo = variation_repo
        self.classifier = classifier or WorkoutTypeClassifier()
        self.variation_chunk_size = variation_chunk_size or settings.variation_chunk_size

    async def run(
        self,
        user_id: Optional[str] = None,
        reclassify: bool = False
    ) -> ClassificationBatchResult:
        """
        Run one classification batch.

        Args:
            user_id: Only classify this user's activities
            reclassify: Re-derive and overwrite existing labels

        Returns:
            ClassificationBatchResult

        Raises:
            HistoryUnavailableError: target activities could not be read
        """
        result = ClassificationBatchResult()

        try:
            targets = await self.activity_repo.list_classification_targets(
                user_id=user_id,
                reclassify=reclassify,
            )
        except Exception as e:
            logger.error(f"Failed to load activities for classification: {e}")
            raise HistoryUnavailableError(f"Activity history unavailable: {e}") from e

        if not targets:
            logger.info("Nothing to classify")
            return result

        by_user: dict[str, list[ActivityRecord]] = defaultdict(list)
        for activity in targets:
            if activity.user_id:
                by_user[activity.user_id].append(activity)

        result.processed = sum(len(acts) for acts in by_user.values())

        for uid, activities in by_user.items():
            await self._classify_user(uid, activities, reclassify, result)

        logger.info(
            f"Classification batch done: processed={result.processed} "
            f"updated={result.updated} errors={len(result.errors)}"
        )
        return result

    async def _classify_user(
        self,
        user_id: str,
        activities: list[ActivityRecord],
        reclassify: bool,
        result: ClassificationBatchResult
    ) -> None:
        user_results: list[dict] = []
        user_updated = 0
        current = None
        label = None
        stage = "baseline"
        try:
            paces = await self.activity_repo.get_history_paces(user_id)
            baseline = UserHistoryBaseline.from_paces(paces)

            stage = "variation"
            activity_ids = [a.activity_id for a in activities if a.activity_id]
            variations = await self.variation_repo.get_for_activities(
                user_id, activity_ids, self.variation_chunk_size
            )

            for activity in activities:
                stage = "classify"
                current = activity.activity_id
                label = None
                decision = self.classifier.classify_record(
                    activity,
                    variations.get(activity.activity_id),
                    baseline,
                )
                label = decision.workout_type.value

                logger.info(json.dumps({
                    "user_id": user_id,
                    "activity_id": activity.activity_id,
                    "detected_type": label,
                    "reason": decision.reason,
                    "metrics": decision.metrics.to_log_dict(baseline),
                }))

                written = False
                if reclassify or activity.detected_workout_type != label:
                    stage = "write_back"
                    written = bool(await self.activity_repo.set_workout_type(
                        user_id, activity.activity_id, label
                    ))

                user_results.append({
                    "user_id": user_id,
                    "activity_id": activity.activity_id,
                    "type": label,
                    "updated": written,
                })
                if written:
                    user_updated += 1

            current = None
            stage = "commit"
            await self.activity_repo.commit()

        except Exception as e:
            logger.exception(f"Classification failed for user {user_id} at stage {stage}")
            result.errors.append(BatchError(
                user_id=user_id,
                stage=stage,
                message=str(e),
                activity_id=current,
            ))
            if stage == "write_back":
                user_results.append({
                    "user_id": user_id,
                    "activity_id": current,
                    "type": label,
                    "updated": False,
                })
            await self._rollback(user_id, result)
            for item in user_results:
                item["updated"] = False
            user_updated = 0

        result.results.extend(user_results)
        result.updated += user_updated

    async def _rollback(self, user_id: str, result: ClassificationBatchResult) -> None:
        try:
            await self.activity_repo.rollback()
        except Exception as e:
            logger.error(f"Rollback failed for user {user_id}: {e}")
            result.errors.append(BatchError(user_id=user_id, stage="rollback", message=str(e)))
