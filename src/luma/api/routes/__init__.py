"""
API Routes Package
"""
from luma.api.routes import profiles, schedule

__all__ = [
    "profiles",
    "schedule",
]
