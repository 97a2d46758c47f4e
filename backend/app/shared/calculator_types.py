"""
Base types for calculators.

This module contains only dataclasses and helpers with NO app imports
to avoid circular dependencies. Repositories convert ORM rows into these
types; calculators never see SQLAlchemy objects.
"""

from dataclasses import dataclass
from datetime import date
from typing import Any, Optional
import math


def safe_number(value: Any) -> Optional[float]:
    """Coerce value to a finite float, or None."""
    if value is None or isinstance(value, bool):
        return None
    try:
        number = float(value)
    except (TypeError, ValueError, OverflowError):
        return None
    return number if math.isfinite(number) else None


@dataclass
class ActivityRecord:
    """
    One activity summary from the history store.

    Duration may arrive as seconds or minutes depending on the vendor;
    `duration_seconds` / `duration_minutes` normalise it.
    """
    user_id: str
    activity_id: str
    activity_date: Optional[date] = None
    distance_m: Optional[float] = None
    duration_s: Optional[float] = None
    duration_min: Optional[float] = None
    pace_min_per_km: Optional[float] = None
    avg_hr: Optional[float] = None
    max_hr: Optional[float] = None
    activity_type: Optional[str] = None
    detected_workout_type: Optional[str] = None

    @property
    def distance_km(self) -> Optional[float]:
        """Distance in kilometers (None if missing or non-finite)."""
        distance = safe_number(self.distance_m)
        if distance is None:
            return None
        return distance / 1000

    @property
    def duration_minutes(self) -> Optional[float]:
        """Explicit duration in minutes, preferring the minutes field."""
        minutes = safe_number(self.duration_min)
        if minutes is not None and minutes > 0:
            return minutes
        seconds = safe_number(self.duration_s)
        if seconds is not None and seconds > 0:
            return seconds / 60
        return None

    @property
    def duration_seconds(self) -> Optional[float]:
        """Explicit duration in seconds."""
        minutes = self.duration_minutes
        return minutes * 60 if minutes is not None else None

    @property
    def is_run(self) -> bool:
        """Running activity (Run, TrailRun, VirtualRun, treadmill_running...)."""
        return "run" in (self.activity_type or "").lower()


@dataclass
class VariationRow:
    """Precomputed per-activity coefficients of variation."""
    user_id: str
    activity_id: str
    cv_pace: Optional[float] = None
    cv_hr: Optional[float] = None


@dataclass
class BatchError:
    """Failure captured while processing one user inside a batch."""
    user_id: str
    stage: str
    message: str
    activity_id: Optional[str] = None

    def to_dict(self) -> dict:
        return {
            "user_id": self.user_id,
            "activity_id": self.activity_id,
            "stage": self.stage,
            "message": self.message,
        }
