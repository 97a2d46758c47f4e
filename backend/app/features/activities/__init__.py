"""
Activity history module.

Usage:
    from app.features.activities import ActivityRepository, VariationRepository

Models:
- Activity: Activity summary history (all vendors)
- VariationAnalysis: Per-activity CVs consumed by the classifier
"""

from .models import Activity, VariationAnalysis
from .repository import ActivityRepository, VariationRepository

__all__ = [
    "Activity",
    "VariationAnalysis",
    "ActivityRepository",
    "VariationRepository",
]
