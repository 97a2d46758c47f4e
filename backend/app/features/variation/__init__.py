"""
Activity variation module.

Usage:
    from app.features.variation import ActivityFeatureExtractor, StreamSample
    from app.features.variation import VariationAnalysisService

Components:
- ActivityFeatureExtractor: mean / std / CV for pace and heart rate
- VariationAnalysisService: extract + persist CVs for the classifier
"""

from .calculators import (
    ActivityFeatureExtractor,
    StreamSample,
    SeriesStats,
    VariationStats,
    VariationCategory,
    STATUS_OK,
    STATUS_INSUFFICIENT,
)
from .service import VariationAnalysisService

__all__ = [
    "ActivityFeatureExtractor",
    "StreamSample",
    "SeriesStats",
    "VariationStats",
    "VariationCategory",
    "STATUS_OK",
    "STATUS_INSUFFICIENT",
    "VariationAnalysisService",
]
