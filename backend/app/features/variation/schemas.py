"""
Variation analysis schemas.

Pydantic schemas for API request/response serialization.
"""

from pydantic import BaseModel, Field
from typing import Optional, List


class StreamSampleIn(BaseModel):
    """One stream point. Pace wins over speed when both are sent."""
    heart_rate: Optional[float] = None
    pace_min_km: Optional[float] = None
    speed_m_s: Optional[float] = None


class VariationAnalyzeRequest(BaseModel):
    """Request to analyze one activity's stream."""
    user_id: str
    activity_id: str
    samples: List[StreamSampleIn] = Field(default_factory=list)
    persist: bool = True


class SeriesStatsOut(BaseModel):
    status: str
    count: int
    mean: Optional[float] = None
    std: Optional[float] = None
    cv: Optional[float] = None


class VariationAnalyzeResponse(BaseModel):
    """Variation statistics for one activity."""
    user_id: str
    activity_id: str
    pace: SeriesStatsOut
    heart_rate: SeriesStatsOut
    cv_pace: Optional[float] = None
    cv_hr: Optional[float] = None
    hr_category: Optional[str] = None
    pace_category: Optional[str] = None
    diagnosis: Optional[str] = None
    persisted: bool = False
