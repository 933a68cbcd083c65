"""
Luma Schedule Logic

Pure computation behind the lighting schedule:
- Timezone conversion with daylight-saving resolution
- Solar day calculation (or estimation from the sleep schedule)
- The circadian color temperature curve
- Schedule generation over evenly spaced timestamps
"""

from luma.logic.profile import ProfileSnapshot
from luma.logic.schedule import LightingPoint, LightingSchedule, generate_schedule

__all__ = [
    "ProfileSnapshot",
    "LightingPoint",
    "LightingSchedule",
    "generate_schedule",
]
