"""
Training safety endpoints.

Endpoints:
- POST /safety/recalibrate - Fix unsafe workouts of a stored plan
- POST /safety/clamp       - Clamp one proposed pace for a user
- POST /safety/sanitize    - Clamp freshly generated workouts (not stored)
"""

import logging

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.ext.asyncio import AsyncSession

from app.config import settings
from app.db.session import get_async_db
from app.shared.exceptions import (
    EmptyPlanError,
    HistoryUnavailableError,
    PlanNotFoundError,
)
from app.features.activities import ActivityRepository
from app.features.plans import PlanRepository
from app.features.users import UserRepository
from app.features.safety import PlanRecalibrationService, WorkoutPrescription
from app.features.safety.schemas import (
    ClampRequest,
    ClampResponse,
    RecalibrateRequest,
    RecalibrateResponse,
    SanitizeRequest,
    SanitizeResponse,
)

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/safety", tags=["Safety"])


def _service(db: AsyncSession) -> PlanRecalibrationService:
    return PlanRecalibrationService(
        plan_repo=PlanRepository(db),
        activity_repo=ActivityRepository(db, page_size=settings.history_page_size),
        user_repo=UserRepository(db),
    )


@router.post("/recalibrate", response_model=RecalibrateResponse)
async def recalibrate_plan(
    request: RecalibrateRequest,
    db: AsyncSession = Depends(get_async_db)
):
    """
    Recalibrate every workout of a plan against the owner's safe paces.

    Target the plan by id, or the active plan of a user by email.
    """
    try:
        result = await _service(db).recalibrate(
            plan_id=request.plan_id,
            user_email=request.user_email,
        )
    except PlanNotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))
    except EmptyPlanError as e:
        raise HTTPException(status_code=422, detail=str(e))
    except HistoryUnavailableError as e:
        raise HTTPException(status_code=503, detail=str(e))

    return RecalibrateResponse(**result.to_dict())


@router.post("/clamp", response_model=ClampResponse)
async def clamp_pace(
    request: ClampRequest,
    db: AsyncSession = Depends(get_async_db)
):
    """Clamp one proposed pace into the user's safe bounds."""
    try:
        calibrator = await _service(db).build_calibrator(request.user_id)
    except HistoryUnavailableError as e:
        raise HTTPException(status_code=503, detail=str(e))

    result = calibrator.clamp(request.workout_type, request.pace_min_km, request.duration_minutes)
    return ClampResponse(
        pace_min_km=round(result.pace, 2),
        original_pace_min_km=result.original_pace,
        changed=result.changed,
        warnings=result.warnings,
        safe_paces=calibrator.baseline.to_dict(),
    )


@router.post("/sanitize", response_model=SanitizeResponse)
async def sanitize_workouts(
    request: SanitizeRequest,
    db: AsyncSession = Depends(get_async_db)
):
    """Clamp a batch of freshly generated workouts without storing them."""
    try:
        calibrator = await _service(db).build_calibrator(request.user_id)
    except HistoryUnavailableError as e:
        raise HTTPException(status_code=503, detail=str(e))

    corrections = calibrator.sanitize(
        [WorkoutPrescription(**w.model_dump()) for w in request.workouts],
        cap_tempo_duration=request.cap_tempo_duration,
    )
    return SanitizeResponse(
        safe_paces=calibrator.baseline.to_dict(),
        workouts=[c.to_dict() for c in corrections],
        critical_issues_fixed=sum(1 for c in corrections if c.has_critical_issue),
    )
