"""
Luma Exceptions

Configuration errors raised while turning a profile into a lighting schedule.
"""
from typing import Optional


class LumaError(Exception):
    """Base exception for luma errors"""

    code = "LumaError"


class ScheduleConfigurationError(LumaError):
    """Raised when the profile data cannot produce a schedule"""

    code = "InvalidConfiguration"


class InvalidTimezoneError(ScheduleConfigurationError):
    """Raised when a timezone name is not in the IANA database"""

    code = "InvalidTimezone"

    def __init__(self, timezone: str):
        self.timezone = timezone
        super().__init__(f"invalid timezone: {timezone!r}")


class InvalidCoordinatesError(ScheduleConfigurationError):
    """Raised when latitude/longitude are outside the valid range"""

    code = "InvalidCoordinates"

    def __init__(self, latitude: Optional[float], longitude: Optional[float]):
        self.latitude = latitude
        self.longitude = longitude
        super().__init__(f"invalid coordinates: {latitude}, {longitude}")


class ScheduleRequestError(LumaError):
    """Raised when the requested point count or spacing is unusable"""

    code = "InvalidScheduleRequest"
