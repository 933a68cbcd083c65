"""
Schedule API Routes - Lighting schedules for stored and inline profiles

Schedules are generated on every request and never stored.
"""
from datetime import datetime, timedelta
from typing import Optional

import structlog
from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy.ext.asyncio import AsyncSession

from luma.api.schemas import LightingScheduleResponse, SchedulePreviewRequest
from luma.config import Settings, get_settings
from luma.database import get_session
from luma.exceptions import ScheduleConfigurationError, ScheduleRequestError
from luma.logic.profile import ProfileSnapshot
from luma.logic.schedule import generate_schedule
from luma.models.profiles import Profile

logger = structlog.get_logger(__name__)

router = APIRouter()


def build_schedule(
    profile: ProfileSnapshot,
    settings: Settings,
    points: Optional[int] = None,
    spacing_seconds: Optional[int] = None,
    start: Optional[datetime] = None,
) -> LightingScheduleResponse:
    """Generate a schedule, mapping engine errors to HTTP errors"""
    num_points = points if points is not None else settings.schedule_default_points
    if spacing_seconds is None:
        spacing_seconds = settings.schedule_default_spacing_seconds
    max_spacing = settings.schedule_max_spacing_seconds

    try:
        # Checked before building the timedelta, which overflows on huge values
        if not 0 < spacing_seconds <= max_spacing:
            raise ScheduleRequestError(
                f"spacing_seconds ({spacing_seconds}) must be between 1 and {max_spacing}"
            )

        schedule = generate_schedule(
            profile,
            num_points=num_points,
            spacing=timedelta(seconds=spacing_seconds),
            now=start,
            max_points=settings.schedule_max_points,
            max_spacing=timedelta(seconds=max_spacing),
        )
    except ScheduleRequestError as e:
        logger.warning("schedule_request_rejected", profile_id=profile.id, error=str(e))
        raise HTTPException(status_code=400, detail={"code": e.code, "message": str(e)})
    except ScheduleConfigurationError as e:
        logger.warning("schedule_configuration_error", profile_id=profile.id, code=e.code, error=str(e))
        raise HTTPException(status_code=422, detail={"code": e.code, "message": str(e)})

    return LightingScheduleResponse.from_schedule(schedule)


@router.get("/profiles/{profile_id}/schedule", response_model=LightingScheduleResponse)
async def get_profile_schedule(
    profile_id: int,
    points: Optional[int] = Query(None, description="Number of points"),
    spacing_seconds: Optional[int] = Query(None, description="Seconds between points"),
    session: AsyncSession = Depends(get_session),
    settings: Settings = Depends(get_settings),
):
    """Generate the lighting schedule for a stored profile, starting now"""
    profile = await session.get(Profile, profile_id)
    if not profile:
        raise HTTPException(status_code=404, detail="Profile not found")

    return build_schedule(profile.to_snapshot(), settings, points, spacing_seconds)


@router.post("/schedule/preview", response_model=LightingScheduleResponse)
async def preview_schedule(
    request: SchedulePreviewRequest,
    settings: Settings = Depends(get_settings),
):
    """Generate a lighting schedule for unsaved profile settings"""
    snapshot = ProfileSnapshot.from_attributes(request.profile, profile_id=0)
    return build_schedule(
        snapshot,
        settings,
        request.points,
        request.spacing_seconds,
        request.start,
    )
