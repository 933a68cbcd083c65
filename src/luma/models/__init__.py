"""
Luma - SQLAlchemy ORM Models
"""

from luma.database import Base
from luma.models.profiles import Profile

__all__ = [
    "Base",
    "Profile",
]
