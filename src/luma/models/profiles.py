"""
Profile Model - Circadian lighting settings for a home or room
"""
from datetime import datetime, time
from typing import Optional

from sqlalchemy import (
    TIMESTAMP,
    BigInteger,
    Boolean,
    CheckConstraint,
    Float,
    Integer,
    String,
    Text,
    Time,
)
from sqlalchemy.orm import Mapped, mapped_column
from sqlalchemy.sql import func

from luma.database import Base
from luma.logic.profile import ProfileSnapshot


class Profile(Base):
    """
    Profile - Sleep schedule, location and color temperature limits

    Devices assigned to a profile fetch a lighting schedule generated from
    these settings. Sleep times are local to the profile's timezone.
    """

    __tablename__ = "profiles"

    # Primary Key
    id: Mapped[int] = mapped_column(BigInteger().with_variant(Integer, "sqlite"), primary_key=True)

    # Identification
    name: Mapped[str] = mapped_column(String(200), nullable=False, unique=True)

    # Location, for solar cycle calculation
    latitude: Mapped[Optional[float]] = mapped_column(Float, nullable=True)
    longitude: Mapped[Optional[float]] = mapped_column(Float, nullable=True)

    # IANA name, e.g. 'Europe/Kyiv'
    timezone: Mapped[str] = mapped_column(Text, nullable=False, server_default="UTC")

    # Local time in the profile's timezone
    sleep_start: Mapped[time] = mapped_column(Time, nullable=False, server_default="22:00")
    sleep_end: Mapped[time] = mapped_column(Time, nullable=False, server_default="07:00")

    night_mode_enabled: Mapped[bool] = mapped_column(
        Boolean, nullable=False, server_default="true"
    )

    # Color temperature limits (Kelvin)
    min_color_temp: Mapped[int] = mapped_column(Integer, nullable=False, server_default="2000")
    max_color_temp: Mapped[int] = mapped_column(Integer, nullable=False, server_default="6500")

    motion_timeout_seconds: Mapped[int] = mapped_column(
        Integer, nullable=False, server_default="300"
    )

    # Timestamps
    created_at: Mapped[datetime] = mapped_column(
        TIMESTAMP(timezone=True),
        nullable=False,
        server_default=func.current_timestamp(),
    )

    # Constraints
    __table_args__ = (
        CheckConstraint("length(name) > 0", name="profiles_name_check"),
        CheckConstraint("latitude BETWEEN -90 AND 90", name="profiles_latitude_check"),
        CheckConstraint("longitude BETWEEN -180 AND 180", name="profiles_longitude_check"),
        CheckConstraint(
            "min_color_temp BETWEEN 1800 AND 10000", name="profiles_min_color_temp_check"
        ),
        CheckConstraint(
            "max_color_temp BETWEEN 1800 AND 10000", name="profiles_max_color_temp_check"
        ),
        CheckConstraint(
            "min_color_temp <= max_color_temp", name="profiles_color_temp_order_check"
        ),
    )

    def to_snapshot(self) -> ProfileSnapshot:
        """Freeze the row into the schedule engine's input"""
        return ProfileSnapshot.from_attributes(self)

    def __repr__(self) -> str:
        return f"<Profile(id={self.id}, name={self.name}, timezone={self.timezone})>"
