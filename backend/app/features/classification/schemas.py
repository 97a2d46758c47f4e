"""
Workout classification schemas.

Pydantic schemas for API request/response serialization.
"""

from pydantic import BaseModel
from typing import Optional, List


class ClassificationRunRequest(BaseModel):
    """Request to run a classification batch."""
    user_id: Optional[str] = None
    reclassify: bool = False


class ClassifiedActivity(BaseModel):
    user_id: str
    activity_id: str
    type: str
    updated: bool = False


class BatchErrorOut(BaseModel):
    user_id: str
    activity_id: Optional[str] = None
    stage: str
    message: str


class ClassificationRunResponse(BaseModel):
    """Batch outcome."""
    processed: int
    updated: int
    results: List[ClassifiedActivity]
    errors: List[BatchErrorOut]
