"""
API Schemas - Pydantic models for request/response validation
"""
from datetime import datetime, time
from typing import List, Optional

from pydantic import BaseModel, Field, field_validator, model_validator

from luma.exceptions import InvalidTimezoneError
from luma.logic.schedule import LightingSchedule
from luma.logic.timezones import resolve_timezone


def _check_timezone(value: Optional[str]) -> Optional[str]:
    if value is None:
        return value
    try:
        resolve_timezone(value)
    except InvalidTimezoneError as e:
        raise ValueError(str(e)) from e
    return value


# Profile Schemas
class ProfileSettings(BaseModel):
    """Circadian settings shared by stored and inline profiles"""
    latitude: Optional[float] = Field(default=None, ge=-90.0, le=90.0)
    longitude: Optional[float] = Field(default=None, ge=-180.0, le=180.0)
    timezone: str = Field(default="UTC", max_length=64, description="IANA timezone name")
    sleep_start: time = Field(default=time(22, 0), description="Local bedtime")
    sleep_end: time = Field(default=time(7, 0), description="Local wake time")
    night_mode_enabled: bool = True
    min_color_temp: int = Field(default=2000, ge=1800, le=10000)
    max_color_temp: int = Field(default=6500, ge=1800, le=10000)
    motion_timeout_seconds: int = Field(default=300, ge=0)

    @field_validator("timezone")
    @classmethod
    def timezone_must_exist(cls, v):
        return _check_timezone(v)

    @model_validator(mode="after")
    def color_temps_ordered(self):
        if self.min_color_temp > self.max_color_temp:
            raise ValueError("min_color_temp must not exceed max_color_temp")
        return self


class ProfileCreate(ProfileSettings):
    name: str = Field(..., min_length=1, max_length=200)


class ProfileUpdate(BaseModel):
    name: Optional[str] = Field(None, min_length=1, max_length=200)
    latitude: Optional[float] = Field(None, ge=-90.0, le=90.0)
    longitude: Optional[float] = Field(None, ge=-180.0, le=180.0)
    timezone: Optional[str] = Field(None, max_length=64)
    sleep_start: Optional[time] = None
    sleep_end: Optional[time] = None
    night_mode_enabled: Optional[bool] = None
    min_color_temp: Optional[int] = Field(None, ge=1800, le=10000)
    max_color_temp: Optional[int] = Field(None, ge=1800, le=10000)
    motion_timeout_seconds: Optional[int] = Field(None, ge=0)

    @field_validator("timezone")
    @classmethod
    def timezone_must_exist(cls, v):
        return _check_timezone(v)


class ProfileResponse(ProfileCreate):
    id: int
    created_at: datetime

    class Config:
        from_attributes = True


# Schedule Schemas
class LightingPointResponse(BaseModel):
    utc: datetime
    temp: int = Field(..., description="Color temperature in Kelvin")


class LightingScheduleResponse(BaseModel):
    profile_id: int
    sleep_start_utc_seconds: int = Field(..., ge=0, lt=86400)
    sleep_end_utc_seconds: int = Field(..., ge=0, lt=86400)
    min_color_temp: int
    max_color_temp: int
    night_mode_enabled: bool
    motion_timeout_seconds: int
    generated_at: datetime
    valid_until: datetime
    schedule: List[LightingPointResponse]

    @classmethod
    def from_schedule(cls, schedule: LightingSchedule) -> "LightingScheduleResponse":
        return cls(
            profile_id=schedule.profile_id,
            sleep_start_utc_seconds=schedule.sleep_start_utc_seconds,
            sleep_end_utc_seconds=schedule.sleep_end_utc_seconds,
            min_color_temp=schedule.min_color_temp,
            max_color_temp=schedule.max_color_temp,
            night_mode_enabled=schedule.night_mode_enabled,
            motion_timeout_seconds=schedule.motion_timeout_seconds,
            generated_at=schedule.generated_at,
            valid_until=schedule.valid_until,
            schedule=[
                LightingPointResponse(utc=point.timestamp, temp=point.color_temp)
                for point in schedule.schedule
            ],
        )


class SchedulePreviewRequest(BaseModel):
    """Generate a schedule for settings that are not stored"""
    profile: ProfileSettings
    points: Optional[int] = Field(None, description="Number of points (server default if omitted)")
    spacing_seconds: Optional[int] = Field(None, description="Seconds between points")
    start: Optional[datetime] = Field(None, description="First timestamp (defaults to now)")
