"""
Classification calculators.

Components:
- WorkoutTypeClassifier: ordered rule cascade over activity metrics
- UserHistoryBaseline: best / p75 pace of a user's history
"""

from .classifier import (
    WorkoutTypeClassifier,
    WorkoutType,
    WorkoutClassification,
    ClassifierThresholds,
    DEFAULT_THRESHOLDS,
    ActivityMetrics,
    UserHistoryBaseline,
)

__all__ = [
    "WorkoutTypeClassifier",
    "WorkoutType",
    "WorkoutClassification",
    "ClassifierThresholds",
    "DEFAULT_THRESHOLDS",
    "ActivityMetrics",
    "UserHistoryBaseline",
]
