"""
Safety calibration schemas.

Pydantic schemas for API request/response serialization.
"""

from pydantic import BaseModel, Field, model_validator
from typing import Optional, List


class SafePaces(BaseModel):
    """Safe personal paces in min/km."""
    pace_5k: float
    pace_10k: float
    pace_half_marathon: float
    pace_easy: float
    pace_tempo: float
    source: str
    valid_runs: int


class WorkoutCorrectionOut(BaseModel):
    workout_id: Optional[int] = None
    title: Optional[str] = None
    workout_type: str
    original_pace: Optional[float] = None
    safe_pace: Optional[float] = None
    original_duration: Optional[float] = None
    safe_duration: Optional[float] = None
    description: Optional[str] = None
    warnings: List[str] = Field(default_factory=list)
    skipped: bool = False


class RecalibrateRequest(BaseModel):
    """Recalibrate by plan id, or the active plan of a user email."""
    plan_id: Optional[str] = None
    user_email: Optional[str] = None

    @model_validator(mode="after")
    def require_target(self):
        if not self.plan_id and not self.user_email:
            raise ValueError("plan_id or user_email required")
        return self


class RecalibrateResponse(BaseModel):
    plan_id: str
    critical_issues_fixed: int
    total_workouts_processed: int
    safe_paces: SafePaces
    per_workout_corrections: List[WorkoutCorrectionOut]
    warnings: List[str]


class ClampRequest(BaseModel):
    """Clamp a single proposed pace for a user."""
    user_id: str
    workout_type: str
    pace_min_km: float = Field(..., gt=0)
    duration_minutes: Optional[float] = Field(default=None, ge=0)


class ClampResponse(BaseModel):
    pace_min_km: float
    original_pace_min_km: float
    changed: bool
    warnings: List[str]
    safe_paces: SafePaces


class PrescriptionIn(BaseModel):
    workout_type: str
    target_pace_min_per_km: Optional[float] = None
    duration_minutes: Optional[float] = None
    description: Optional[str] = None
    title: Optional[str] = None


class SanitizeRequest(BaseModel):
    """Freshly generated workouts to clamp before storing."""
    user_id: str
    workouts: List[PrescriptionIn]
    cap_tempo_duration: bool = False


class SanitizeResponse(BaseModel):
    safe_paces: SafePaces
    workouts: List[WorkoutCorrectionOut]
    critical_issues_fixed: int
