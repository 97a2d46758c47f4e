"""
Variation calculators.

Components:
- ActivityFeatureExtractor: Pace / heart-rate variability of one activity
"""

from .extractor import (
    ActivityFeatureExtractor,
    StreamSample,
    SeriesStats,
    VariationStats,
    VariationCategory,
    STATUS_OK,
    STATUS_INSUFFICIENT,
    LOW_HR_CV,
    LOW_PACE_CV,
)

__all__ = [
    "ActivityFeatureExtractor",
    "StreamSample",
    "SeriesStats",
    "VariationStats",
    "VariationCategory",
    "STATUS_OK",
    "STATUS_INSUFFICIENT",
    "LOW_HR_CV",
    "LOW_PACE_CV",
]
