"""
Activity history models.

Models:
- Activity: Vendor-agnostic activity summary (one row per synced activity)
- VariationAnalysis: Per-activity pace / heart-rate coefficients of variation
"""

from datetime import datetime
from sqlalchemy import (
    Column, String, DateTime, Date, Integer, Float, UniqueConstraint, Index
)

from app.models.base import Base
from app.shared.calculator_types import ActivityRecord, VariationRow


class Activity(Base):
    """
    Activity summary aggregated from every connected wearable vendor.

    Only summary metrics live here; raw streams are consumed by the
    variation analysis and never stored.
    """

    __tablename__ = "all_activities"
    __table_args__ = (
        UniqueConstraint("user_id", "activity_id", name="uq_activity_user_activity"),
        Index("ix_activity_user_date", "user_id", "activity_date"),
    )

    id = Column(Integer, primary_key=True, autoincrement=True)
    user_id = Column(String(36), nullable=False, index=True)

    # Vendor identifiers
    activity_id = Column(String(64), nullable=False)
    activity_source = Column(String(32), nullable=True)  # garmin, strava, polar...

    # Activity info
    activity_date = Column(Date, nullable=True)
    activity_type = Column(String(50), nullable=True)  # Run, TrailRun, Walk...

    # Core metrics
    distance_m = Column(Float, nullable=True)
    duration_s = Column(Float, nullable=True)
    duration_min = Column(Float, nullable=True)
    pace_min_per_km = Column(Float, nullable=True)

    # Heart rate
    avg_hr = Column(Float, nullable=True)
    max_hr = Column(Float, nullable=True)

    # Derived label (written back by the classifier)
    detected_workout_type = Column(String(32), nullable=True, index=True)

    created_at = Column(DateTime, default=datetime.utcnow)

    def __repr__(self):
        return f"<Activity {self.activity_id} {self.activity_type} {self.distance_m}m>"

    def to_record(self) -> ActivityRecord:
        """Convert ORM row into the calculator-facing record."""
        return ActivityRecord(
            user_id=self.user_id,
            activity_id=self.activity_id,
            activity_date=self.activity_date,
            distance_m=self.distance_m,
            duration_s=self.duration_s,
            duration_min=self.duration_min,
            pace_min_per_km=self.pace_min_per_km,
            avg_hr=self.avg_hr,
            max_hr=self.max_hr,
            activity_type=self.activity_type,
            detected_workout_type=self.detected_workout_type,
        )


class VariationAnalysis(Base):
    """Coefficients of variation for one activity's pace and heart rate."""

    __tablename__ = "variation_analysis"
    __table_args__ = (
        UniqueConstraint("user_id", "activity_id", name="uq_variation_user_activity"),
    )

    id = Column(Integer, primary_key=True, autoincrement=True)
    user_id = Column(String(36), nullable=False, index=True)
    activity_id = Column(String(64), nullable=False, index=True)

    cv_pace = Column(Float, nullable=True)
    cv_hr = Column(Float, nullable=True)

    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    def __repr__(self):
        return f"<VariationAnalysis {self.activity_id} pace={self.cv_pace} hr={self.cv_hr}>"

    def to_row(self) -> VariationRow:
        return VariationRow(
            user_id=self.user_id,
            activity_id=self.activity_id,
            cv_pace=self.cv_pace,
            cv_hr=self.cv_hr,
        )
