"""
Skill level endpoints.

Endpoints:
- POST /skill-level - Tier estimate for one user against the population
"""

import logging

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.ext.asyncio import AsyncSession

from app.config import settings
from app.db.session import get_async_db
from app.shared.exceptions import HistoryUnavailableError
from app.features.activities import ActivityRepository
from app.features.skill_level import SkillLevelService
from app.features.skill_level.schemas import SkillLevelRequest, SkillLevelResponse

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/skill-level", tags=["Skill Level"])


@router.post("", response_model=SkillLevelResponse)
async def estimate_skill_level(
    request: SkillLevelRequest,
    db: AsyncSession = Depends(get_async_db)
):
    """
    Estimate a user's skill tier.

    Users without runs get tier Beginner with `reason_if_no_data`.
    """
    service = SkillLevelService(ActivityRepository(db, page_size=settings.history_page_size))
    try:
        result = await service.estimate(request.user_id, lookback_days=request.lookback_days)
    except HistoryUnavailableError as e:
        raise HTTPException(status_code=503, detail=str(e))

    return SkillLevelResponse(**result.to_dict())
