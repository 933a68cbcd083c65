"""
Circadian Curve Evaluator

Maps a local time of day to a target color temperature (Kelvin) for a
profile's sleep schedule and the day's sunset. The day is split into
phases, checked in a fixed priority order; the first phase whose window
contains the time wins:

1. Sleep (checked by color_temp_at before the curve): min temperature
2. Morning Boost, wake -> wake+1h: ease-out rise from min to max
3. Final Wind-down, sleep-1h -> sleep: ease-in drop from relax to min
4. Evening Relaxation, sunset -> sleep-1h: linear drop from max to relax
5. Daylight, everything else: max temperature

Wind-down is checked before evening relaxation so a declared bedtime always
overrides solar timing. All windows are half-open [start, end) on a 1440
minute circle and may wrap past midnight.
"""
from dataclasses import dataclass
from datetime import datetime, time
from enum import Enum
from typing import Union

import structlog

from luma.logic.easing import clamp_progress, ease_in_quadratic, ease_linear, ease_out_quadratic
from luma.logic.profile import ProfileSnapshot

logger = structlog.get_logger(__name__)

MINUTES_PER_DAY = 24 * 60
MORNING_BOOST_MINUTES = 60
WIND_DOWN_MINUTES = 60


class CircadianPhase(Enum):
    """Phases of the circadian curve, in evaluation order"""
    SLEEP = "sleep"
    MORNING_BOOST = "morning_boost"
    WIND_DOWN = "wind_down"
    EVENING_RELAXATION = "evening_relaxation"
    DAYLIGHT = "daylight"


def minutes_since_midnight(value: Union[datetime, time]) -> int:
    """Whole minutes since midnight of the value's own clock"""
    return value.hour * 60 + value.minute


def in_window(current: int, start: int, end: int) -> bool:
    """
    Check whether a minute lies in the half-open window [start, end)

    A window whose end is before its start wraps past midnight
    (22:00-06:00). A zero-length window contains nothing.
    """
    if start <= end:
        return start <= current < end
    return current >= start or current < end


def window_progress(current: int, start: int, end: int) -> float:
    """
    Fraction of the window [start, end) elapsed at current

    Measured around the circle, so wrapping windows work. A zero-length
    window counts as already complete.

    Returns:
        Progress in [0.0, 1.0]
    """
    total = (end - start) % MINUTES_PER_DAY
    if total == 0:
        return 1.0

    elapsed = (current - start) % MINUTES_PER_DAY
    return clamp_progress(elapsed / total)


def relaxation_temp(min_temp: int, max_temp: int) -> int:
    """Evening temperature, one third of the way from min to max"""
    return min_temp + (max_temp - min_temp) // 3


@dataclass(frozen=True)
class CurveBoundaries:
    """Phase boundaries in minutes since local midnight"""

    wake: int
    sleep: int
    sunset: int

    @property
    def pre_sleep(self) -> int:
        """Start of the final wind-down"""
        return (self.sleep - WIND_DOWN_MINUTES) % MINUTES_PER_DAY

    @property
    def morning_end(self) -> int:
        """End of the morning boost"""
        return (self.wake + MORNING_BOOST_MINUTES) % MINUTES_PER_DAY

    @classmethod
    def from_times(cls, wake: time, sleep: time, sunset: time) -> "CurveBoundaries":
        return cls(
            wake=minutes_since_midnight(wake),
            sleep=minutes_since_midnight(sleep),
            sunset=minutes_since_midnight(sunset),
        )

    def shifted(self, minutes: int) -> "CurveBoundaries":
        """Same boundaries moved around the clock by a fixed amount"""
        return CurveBoundaries(
            wake=(self.wake + minutes) % MINUTES_PER_DAY,
            sleep=(self.sleep + minutes) % MINUTES_PER_DAY,
            sunset=(self.sunset + minutes) % MINUTES_PER_DAY,
        )


def classify_phase(current_minutes: int, boundaries: CurveBoundaries) -> CircadianPhase:
    """
    Find the curve phase for a minute of the day

    Sleep is not considered here; callers check it first. The order of the
    checks below resolves overlapping windows and must not change.
    """
    current = current_minutes % MINUTES_PER_DAY

    if in_window(current, boundaries.wake, boundaries.morning_end):
        return CircadianPhase.MORNING_BOOST

    if in_window(current, boundaries.pre_sleep, boundaries.sleep):
        return CircadianPhase.WIND_DOWN

    if in_window(current, boundaries.sunset, boundaries.pre_sleep):
        return CircadianPhase.EVENING_RELAXATION

    return CircadianPhase.DAYLIGHT


def evaluate_curve(
    current_minutes: int,
    boundaries: CurveBoundaries,
    min_temp: int,
    max_temp: int,
) -> int:
    """
    Calculate the curve's color temperature for a minute of the day

    Eased deltas are truncated toward zero before being applied, not
    rounded.

    Args:
        current_minutes: Minutes since local midnight
        boundaries: Wake, sleep and sunset minutes
        min_temp: Warmest temperature (Kelvin)
        max_temp: Coolest temperature (Kelvin)

    Returns:
        Color temperature in Kelvin, always within [min_temp, max_temp]

    Raises:
        ValueError: If min_temp is greater than max_temp
    """
    if min_temp > max_temp:
        raise ValueError(f"min_temp ({min_temp}) must not exceed max_temp ({max_temp})")

    current = current_minutes % MINUTES_PER_DAY
    relax = relaxation_temp(min_temp, max_temp)
    phase = classify_phase(current, boundaries)

    if phase == CircadianPhase.MORNING_BOOST:
        t = window_progress(current, boundaries.wake, boundaries.morning_end)
        temp = min_temp + int((max_temp - min_temp) * ease_out_quadratic(t))

    elif phase == CircadianPhase.WIND_DOWN:
        t = window_progress(current, boundaries.pre_sleep, boundaries.sleep)
        temp = relax - int((relax - min_temp) * ease_in_quadratic(t))

    elif phase == CircadianPhase.EVENING_RELAXATION:
        t = window_progress(current, boundaries.sunset, boundaries.pre_sleep)
        temp = max_temp - int((max_temp - relax) * ease_linear(t))

    else:
        temp = max_temp

    return max(min_temp, min(max_temp, temp))


def is_sleeping(current_minutes: int, sleep_start: time, sleep_end: time) -> bool:
    """Check whether a minute of the day falls in [sleep_start, sleep_end)"""
    return in_window(
        current_minutes % MINUTES_PER_DAY,
        minutes_since_midnight(sleep_start),
        minutes_since_midnight(sleep_end),
    )


def color_temp_at(
    profile: ProfileSnapshot,
    local_time: Union[datetime, time],
    sunset: time,
) -> int:
    """
    Calculate the profile's color temperature at a local time of day

    Args:
        profile: Profile settings
        local_time: Time in the profile's own timezone
        sunset: That day's local sunset (real or estimated)

    Returns:
        Color temperature in Kelvin
    """
    current = minutes_since_midnight(local_time)

    if is_sleeping(current, profile.sleep_start, profile.sleep_end):
        return profile.min_color_temp

    boundaries = CurveBoundaries.from_times(
        wake=profile.sleep_end,
        sleep=profile.sleep_start,
        sunset=sunset,
    )
    return evaluate_curve(current, boundaries, profile.min_color_temp, profile.max_color_temp)
