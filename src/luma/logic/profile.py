"""
Profile Snapshot

Immutable view of a stored profile: the only input the schedule engine
reads. Built from an ORM row or an API payload.
"""
from dataclasses import dataclass
from datetime import time
from typing import Any, Optional


@dataclass(frozen=True)
class ProfileSnapshot:
    """Read-only circadian settings for one profile"""

    id: int
    timezone: str
    sleep_start: time  # Local time of day
    sleep_end: time  # Local time of day, also the wake time
    min_color_temp: int  # Kelvin
    max_color_temp: int  # Kelvin
    latitude: Optional[float] = None
    longitude: Optional[float] = None
    night_mode_enabled: bool = True
    motion_timeout_seconds: int = 300

    @property
    def has_location(self) -> bool:
        """True only when both coordinates are present"""
        return self.latitude is not None and self.longitude is not None

    @classmethod
    def from_attributes(cls, obj: Any, profile_id: Optional[int] = None) -> "ProfileSnapshot":
        """
        Copy profile fields off any object that carries them

        Args:
            obj: ORM row, pydantic model or similar
            profile_id: Overrides obj.id (payloads that were never stored have none)
        """
        return cls(
            id=profile_id if profile_id is not None else getattr(obj, "id", 0),
            timezone=obj.timezone,
            sleep_start=obj.sleep_start,
            sleep_end=obj.sleep_end,
            min_color_temp=obj.min_color_temp,
            max_color_temp=obj.max_color_temp,
            latitude=obj.latitude,
            longitude=obj.longitude,
            night_mode_enabled=obj.night_mode_enabled,
            motion_timeout_seconds=obj.motion_timeout_seconds,
        )
