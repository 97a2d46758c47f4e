"""
Skill level schemas.

Pydantic schemas for API request/response serialization.
"""

from pydantic import BaseModel, Field
from typing import Optional, Dict


class SkillLevelRequest(BaseModel):
    """Request for a user's skill tier."""
    user_id: str
    lookback_days: Optional[int] = Field(default=None, ge=1)


class SkillLevelResponse(BaseModel):
    """Cluster tier, percentile tier and the features behind them."""
    tier: str
    alternate_tier_percentile: Optional[str] = None
    feature_values: Dict[str, Optional[float]] = Field(default_factory=dict)
    feature_percentiles: Dict[str, Optional[int]] = Field(default_factory=dict)
    composite_percentile: Optional[int] = None
    method: str
    reason_if_no_data: Optional[str] = None
    lookback_days_used: Optional[int] = None
    population_size: int = 0
