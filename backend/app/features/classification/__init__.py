"""
Workout classification module.

Usage:
    from app.features.classification import WorkoutTypeClassifier, ActivityMetrics
    from app.features.classification import WorkoutClassificationService

Components:
- WorkoutTypeClassifier: labels one activity
- WorkoutClassificationService: paginated batch with write-back
"""

from .calculators import (
    WorkoutTypeClassifier,
    WorkoutType,
    WorkoutClassification,
    ClassifierThresholds,
    DEFAULT_THRESHOLDS,
    ActivityMetrics,
    UserHistoryBaseline,
)
from .service import WorkoutClassificationService, ClassificationBatchResult

__all__ = [
    "WorkoutTypeClassifier",
    "WorkoutType",
    "WorkoutClassification",
    "ClassifierThresholds",
    "DEFAULT_THRESHOLDS",
    "ActivityMetrics",
    "UserHistoryBaseline",
    "WorkoutClassificationService",
    "ClassificationBatchResult",
]
