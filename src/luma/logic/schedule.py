"""
Schedule Generator

Builds a LightingSchedule: a table of (UTC timestamp, color temperature)
points a device can follow without asking the server for every update.
Each point depends only on its own timestamp, so the table can be cut,
resumed or computed in any order.
"""
from dataclasses import dataclass
from datetime import date, datetime, timedelta
from typing import Callable, Dict, Optional, Tuple
from zoneinfo import ZoneInfo

import structlog

from luma.exceptions import ScheduleRequestError
from luma.logic.circadian import color_temp_at
from luma.logic.profile import ProfileSnapshot
from luma.logic.solar import SolarTimes, estimate_solar_times, solar_times, validate_coordinates
from luma.logic.timezones import ensure_utc, resolve_timezone, to_utc_seconds_from_midnight

logger = structlog.get_logger(__name__)

DEFAULT_POINTS = 96
DEFAULT_SPACING = timedelta(minutes=15)
MAX_POINTS = 10000
MAX_SPACING = timedelta(days=1)
DATE_MARGIN = timedelta(days=2)


@dataclass(frozen=True)
class LightingPoint:
    """Target color temperature at an absolute instant"""
    timestamp: datetime  # UTC
    color_temp: int  # Kelvin


@dataclass(frozen=True)
class LightingSchedule:
    """Precomputed lighting table for one profile (never persisted)"""
    profile_id: int

    # Seconds since midnight UTC
    sleep_start_utc_seconds: int
    sleep_end_utc_seconds: int

    min_color_temp: int
    max_color_temp: int

    night_mode_enabled: bool
    motion_timeout_seconds: int

    generated_at: datetime
    valid_until: datetime

    schedule: Tuple[LightingPoint, ...]


def _solar_lookup(profile: ProfileSnapshot, tz: ZoneInfo) -> Callable[[date], SolarTimes]:
    """Per-date solar times for the profile, computed once per local date"""
    if not profile.has_location:
        estimated = estimate_solar_times(profile)
        return lambda day: estimated

    cache: Dict[date, SolarTimes] = {}

    def lookup(day: date) -> SolarTimes:
        if day not in cache:
            cache[day] = solar_times(day, profile.latitude, profile.longitude, tz)
        return cache[day]

    return lookup


def validate_schedule_request(
    num_points: int,
    spacing: timedelta,
    max_points: int = MAX_POINTS,
    now: Optional[datetime] = None,
    max_spacing: timedelta = MAX_SPACING,
) -> None:
    """
    Check the requested table size

    Raises:
        ScheduleRequestError: If num_points is outside [1, max_points],
            spacing is outside (0, max_spacing], or the table would run
            past the representable date range
    """
    if num_points < 1 or num_points > max_points:
        raise ScheduleRequestError(
            f"num_points ({num_points}) must be between 1 and {max_points}"
        )
    if spacing <= timedelta(0):
        raise ScheduleRequestError(f"spacing ({spacing}) must be positive")
    if spacing > max_spacing:
        raise ScheduleRequestError(f"spacing ({spacing}) must not exceed {max_spacing}")

    try:
        start = ensure_utc(now)
        # Local dates may sit up to a day either side of the UTC ones
        start - DATE_MARGIN
        start + spacing * num_points + DATE_MARGIN
    except OverflowError as e:
        raise ScheduleRequestError(
            f"schedule starting at {now} runs out of the date range"
        ) from e


def generate_schedule(
    profile: ProfileSnapshot,
    num_points: int = DEFAULT_POINTS,
    spacing: timedelta = DEFAULT_SPACING,
    now: Optional[datetime] = None,
    max_points: int = MAX_POINTS,
    max_spacing: timedelta = MAX_SPACING,
) -> LightingSchedule:
    """
    Generate a lighting schedule for a profile

    Args:
        profile: Profile settings
        num_points: Number of points in the table
        spacing: Time between consecutive points
        now: Start of the table (defaults to the current time; naive
            values are taken as UTC)
        max_points: Upper bound on num_points
        max_spacing: Upper bound on spacing

    Returns:
        LightingSchedule starting at now, valid for num_points * spacing

    Raises:
        ScheduleRequestError: If num_points or spacing are unusable
        InvalidTimezoneError: If the profile's timezone is unknown
        InvalidCoordinatesError: If the profile's coordinates are out of range
    """
    validate_schedule_request(num_points, spacing, max_points, now, max_spacing)
    generated_at = ensure_utc(now)

    tz = resolve_timezone(profile.timezone)
    if profile.has_location:
        validate_coordinates(profile.latitude, profile.longitude)

    solar_for = _solar_lookup(profile, tz)

    points = []
    for i in range(num_points):
        timestamp = generated_at + spacing * i
        local = timestamp.astimezone(tz)
        sunset = solar_for(local.date()).sunset
        points.append(
            LightingPoint(timestamp=timestamp, color_temp=color_temp_at(profile, local, sunset))
        )

    schedule = LightingSchedule(
        profile_id=profile.id,
        sleep_start_utc_seconds=to_utc_seconds_from_midnight(profile.sleep_start, tz, generated_at),
        sleep_end_utc_seconds=to_utc_seconds_from_midnight(profile.sleep_end, tz, generated_at),
        min_color_temp=profile.min_color_temp,
        max_color_temp=profile.max_color_temp,
        night_mode_enabled=profile.night_mode_enabled,
        motion_timeout_seconds=profile.motion_timeout_seconds,
        generated_at=generated_at,
        valid_until=generated_at + spacing * num_points,
        schedule=tuple(points),
    )

    logger.info(
        "schedule_generated",
        profile_id=profile.id,
        points=num_points,
        spacing_seconds=int(spacing.total_seconds()),
        solar_source="astral" if profile.has_location else "estimated",
    )

    return schedule
