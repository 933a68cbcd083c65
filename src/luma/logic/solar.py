"""
Solar Time Provider

Sunrise and sunset for a date and location, computed with astral. When a
profile has no location the solar day is estimated from the sleep schedule
instead.
"""
import math
from datetime import date, time, timedelta, timezone as dt_timezone, tzinfo
from typing import NamedTuple, Optional

import structlog
from astral import Observer
from astral.sun import elevation, noon, sunrise, sunset

from luma.exceptions import InvalidCoordinatesError
from luma.logic.profile import ProfileSnapshot
from luma.logic.timezones import SECONDS_PER_DAY, seconds_since_midnight

logger = structlog.get_logger(__name__)

START_OF_DAY = time(0, 0, 0)
END_OF_DAY = time(23, 59, 59)

# Estimated sunset precedes bedtime by this much, leaving room for the
# evening relaxation phase
ESTIMATED_SUNSET_LEAD = timedelta(hours=2)


class SolarTimes(NamedTuple):
    """Local sunrise and sunset times of day"""

    sunrise: time
    sunset: time


def validate_coordinates(latitude: Optional[float], longitude: Optional[float]) -> None:
    """
    Check latitude/longitude ranges

    Raises:
        InvalidCoordinatesError: If either value is missing, non-finite
            or out of range
    """
    if latitude is None or longitude is None:
        raise InvalidCoordinatesError(latitude, longitude)
    if not (math.isfinite(latitude) and math.isfinite(longitude)):
        raise InvalidCoordinatesError(latitude, longitude)
    if not -90.0 <= latitude <= 90.0 or not -180.0 <= longitude <= 180.0:
        raise InvalidCoordinatesError(latitude, longitude)


def solar_times(
    day: date,
    latitude: float,
    longitude: float,
    tz: tzinfo = dt_timezone.utc,
) -> SolarTimes:
    """
    Calculate sunrise and sunset for a date and location

    Args:
        day: Local calendar date
        latitude: Degrees north, -90 to 90
        longitude: Degrees east, -180 to 180
        tz: Zone the returned times of day are expressed in

    Returns:
        SolarTimes in local time. During polar day the sun is treated as up
        all day (00:00 to 23:59:59); during polar night sunrise and sunset
        both collapse to 00:00.

    Raises:
        InvalidCoordinatesError: If the coordinates are out of range
    """
    validate_coordinates(latitude, longitude)
    observer = Observer(latitude=latitude, longitude=longitude)

    try:
        rise = sunrise(observer, date=day, tzinfo=tz)
        fall = sunset(observer, date=day, tzinfo=tz)
    except ValueError:
        # astral raises when the sun never crosses the horizon on this date
        return _polar_solar_times(observer, day, tz)

    return SolarTimes(
        sunrise=rise.time().replace(microsecond=0),
        sunset=fall.time().replace(microsecond=0),
    )


def _polar_solar_times(observer: Observer, day: date, tz: tzinfo) -> SolarTimes:
    """Pick always-day or always-night from the sun's height at solar noon"""
    solar_noon = noon(observer, date=day, tzinfo=tz)
    noon_elevation = elevation(observer, solar_noon)

    if noon_elevation > 0:
        logger.debug(
            "solar_polar_day",
            date=day.isoformat(),
            latitude=observer.latitude,
            elevation=round(noon_elevation, 2),
        )
        return SolarTimes(sunrise=START_OF_DAY, sunset=END_OF_DAY)

    logger.debug(
        "solar_polar_night",
        date=day.isoformat(),
        latitude=observer.latitude,
        elevation=round(noon_elevation, 2),
    )
    return SolarTimes(sunrise=START_OF_DAY, sunset=START_OF_DAY)


def estimate_solar_times(profile: ProfileSnapshot) -> SolarTimes:
    """
    Estimate a solar day from the sleep schedule

    Sunrise is the wake time (sleep end). Sunset is two hours before
    sleep start, wrapping past midnight when needed (sleep at 01:00 gives
    sunset at 23:00).
    """
    lead = int(ESTIMATED_SUNSET_LEAD.total_seconds())
    sunset_seconds = (seconds_since_midnight(profile.sleep_start) - lead) % SECONDS_PER_DAY

    estimated_sunset = time(
        sunset_seconds // 3600,
        (sunset_seconds % 3600) // 60,
        sunset_seconds % 60,
    )
    return SolarTimes(sunrise=profile.sleep_end, sunset=estimated_sunset)
