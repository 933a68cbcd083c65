"""
Timezone Conversion

Maps a local time of day in an IANA timezone to seconds since midnight UTC.
Daylight-saving transitions are resolved deterministically:

- Repeated wall times (fall back) resolve to the earlier instant
- Skipped wall times (spring forward) use the zone's currently observed
  offset, since no real instant exists for them
"""
from datetime import datetime, time, timezone as dt_timezone
from typing import Optional, Union
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

import structlog

from luma.exceptions import InvalidTimezoneError

logger = structlog.get_logger(__name__)

SECONDS_PER_DAY = 86400


def resolve_timezone(name: str) -> ZoneInfo:
    """
    Look up an IANA timezone by name

    Args:
        name: Timezone name such as "Europe/Kyiv" or "UTC"

    Returns:
        ZoneInfo for the name

    Raises:
        InvalidTimezoneError: If the name is empty or not in the tz database
    """
    if not name or not isinstance(name, str):
        raise InvalidTimezoneError(name)

    try:
        return ZoneInfo(name)
    except (ZoneInfoNotFoundError, ValueError, OSError) as e:
        # OSError covers names that resolve to a tzdata directory ("America")
        raise InvalidTimezoneError(name) from e


def ensure_utc(instant: Optional[datetime] = None) -> datetime:
    """Return an aware UTC datetime; naive values are taken to be UTC already"""
    if instant is None:
        return datetime.now(dt_timezone.utc)
    if instant.tzinfo is None:
        return instant.replace(tzinfo=dt_timezone.utc)
    return instant.astimezone(dt_timezone.utc)


def seconds_since_midnight(value: Union[datetime, time]) -> int:
    """Whole seconds elapsed since midnight of the value's own clock"""
    return value.hour * 3600 + value.minute * 60 + value.second


def localize_earliest(naive: datetime, tz: ZoneInfo) -> Optional[datetime]:
    """
    Resolve a naive local datetime against the zone's transition rules

    Args:
        naive: Wall-clock datetime without tzinfo
        tz: Zone to interpret it in

    Returns:
        The UTC instant, the earlier one when the wall time is repeated,
        or None when the wall time falls in a daylight-saving gap
    """
    instant = naive.replace(tzinfo=tz, fold=0).astimezone(dt_timezone.utc)

    # A skipped wall time does not survive the round trip
    if instant.astimezone(tz).replace(tzinfo=None) != naive:
        return None

    return instant


def to_utc_seconds_from_midnight(
    local_time: time,
    timezone: Union[str, ZoneInfo],
    now: Optional[datetime] = None,
) -> int:
    """
    Convert a local time of day to seconds since midnight UTC

    "Today" is the current date in the given zone, so the result follows
    whichever offset (standard or daylight) applies on that date.

    Args:
        local_time: Local time of day (any tzinfo is ignored)
        timezone: IANA name or ZoneInfo
        now: Reference instant (defaults to the current time)

    Returns:
        Seconds since midnight UTC, in [0, 86400)

    Raises:
        InvalidTimezoneError: If the timezone name is unknown
    """
    tz = timezone if isinstance(timezone, ZoneInfo) else resolve_timezone(timezone)

    now_local = ensure_utc(now).astimezone(tz)
    naive = datetime.combine(now_local.date(), local_time.replace(tzinfo=None))

    instant = localize_earliest(naive, tz)
    if instant is None:
        offset = now_local.utcoffset()
        logger.debug(
            "timezone_gap_fallback",
            timezone=str(tz),
            local_time=local_time.isoformat(),
            offset_seconds=int(offset.total_seconds()),
        )
        instant = naive - offset

    return seconds_since_midnight(instant) % SECONDS_PER_DAY
