"""
Profile API Routes - CRUD operations for circadian lighting profiles
"""
from typing import List

import structlog
from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from luma.api.schemas import ProfileCreate, ProfileResponse, ProfileUpdate
from luma.database import get_session
from luma.models.profiles import Profile

logger = structlog.get_logger(__name__)

router = APIRouter()


async def _ensure_name_available(session: AsyncSession, name: str, profile_id: int = None):
    result = await session.execute(select(Profile).where(Profile.name == name))
    existing = result.scalar_one_or_none()
    if existing and existing.id != profile_id:
        raise HTTPException(status_code=409, detail="Profile name already exists")


@router.get("/", response_model=List[ProfileResponse])
async def list_profiles(
    session: AsyncSession = Depends(get_session)
):
    """List all profiles"""
    result = await session.execute(select(Profile).order_by(Profile.id))
    return result.scalars().all()


@router.post("/", response_model=ProfileResponse, status_code=201)
async def create_profile(
    profile_data: ProfileCreate,
    session: AsyncSession = Depends(get_session)
):
    """Create a new profile"""
    await _ensure_name_available(session, profile_data.name)

    profile = Profile(**profile_data.model_dump())

    session.add(profile)
    await session.commit()
    await session.refresh(profile)

    logger.info("profile_created", profile_id=profile.id, timezone=profile.timezone)
    return profile


@router.get("/{profile_id}", response_model=ProfileResponse)
async def get_profile(
    profile_id: int,
    session: AsyncSession = Depends(get_session)
):
    """Get a specific profile"""
    profile = await session.get(Profile, profile_id)
    if not profile:
        raise HTTPException(status_code=404, detail="Profile not found")
    return profile


@router.patch("/{profile_id}", response_model=ProfileResponse)
async def update_profile(
    profile_id: int,
    profile_data: ProfileUpdate,
    session: AsyncSession = Depends(get_session)
):
    """Update a profile"""
    profile = await session.get(Profile, profile_id)
    if not profile:
        raise HTTPException(status_code=404, detail="Profile not found")

    # Only the coordinates may be cleared
    update_data = {
        field: value
        for field, value in profile_data.model_dump(exclude_unset=True).items()
        if value is not None or field in ("latitude", "longitude")
    }

    if "name" in update_data:
        await _ensure_name_available(session, update_data["name"], profile_id)

    # Limits are checked against the stored value of whichever side is unchanged
    min_temp = update_data.get("min_color_temp", profile.min_color_temp)
    max_temp = update_data.get("max_color_temp", profile.max_color_temp)
    if min_temp > max_temp:
        raise HTTPException(
            status_code=422,
            detail="min_color_temp must not exceed max_color_temp",
        )

    for field, value in update_data.items():
        setattr(profile, field, value)

    await session.commit()
    await session.refresh(profile)

    logger.info("profile_updated", profile_id=profile_id, fields=sorted(update_data))
    return profile


@router.delete("/{profile_id}", status_code=204)
async def delete_profile(
    profile_id: int,
    session: AsyncSession = Depends(get_session)
):
    """Delete a profile"""
    profile = await session.get(Profile, profile_id)
    if not profile:
        raise HTTPException(status_code=404, detail="Profile not found")

    await session.delete(profile)
    await session.commit()

    logger.info("profile_deleted", profile_id=profile_id)
