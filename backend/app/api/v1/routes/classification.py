"""
Workout classification endpoints.

Endpoints:
- POST /classification/run - Classify unlabeled (or all) activities
"""

import logging

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.ext.asyncio import AsyncSession

from app.config import settings
from app.db.session import get_async_db
from app.shared.exceptions import HistoryUnavailableError
from app.features.activities import ActivityRepository, VariationRepository
from app.features.classification import WorkoutClassificationService
from app.features.classification.schemas import (
    ClassificationRunRequest,
    ClassificationRunResponse,
)

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/classification", tags=["Classification"])


@router.post("/run", response_model=ClassificationRunResponse)
async def run_classification(
    request: ClassificationRunRequest,
    db: AsyncSession = Depends(get_async_db)
):
    """
    Run a workout classification batch.

    Without `reclassify` only activities lacking a label are touched.
    """
    service = WorkoutClassificationService(
        ActivityRepository(db, page_size=settings.history_page_size),
        VariationRepository(db),
    )
    try:
        result = await service.run(user_id=request.user_id, reclassify=request.reclassify)
    except HistoryUnavailableError as e:
        raise HTTPException(status_code=503, detail=str(e))

    return ClassificationRunResponse(**result.to_dict())
