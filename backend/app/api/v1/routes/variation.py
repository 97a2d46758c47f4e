"""
Variation analysis endpoints.

Endpoints:
- POST /variation/analyze - CVs of one activity's stream (optionally stored)
"""

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from app.db.session import get_async_db
from app.features.activities import VariationRepository
from app.features.variation import StreamSample, VariationAnalysisService
from app.features.variation.schemas import (
    VariationAnalyzeRequest,
    VariationAnalyzeResponse,
)

router = APIRouter(prefix="/variation", tags=["Variation"])


@router.post("/analyze", response_model=VariationAnalyzeResponse)
async def analyze_variation(
    request: VariationAnalyzeRequest,
    db: AsyncSession = Depends(get_async_db)
):
    """Compute pace / heart-rate variability for one activity."""
    service = VariationAnalysisService(VariationRepository(db))
    samples = [StreamSample(**s.model_dump()) for s in request.samples]
    stats = await service.analyze(
        request.user_id,
        request.activity_id,
        samples,
        persist=request.persist,
    )
    return VariationAnalyzeResponse(
        user_id=request.user_id,
        activity_id=request.activity_id,
        persisted=request.persist,
        **stats.to_dict(),
    )
