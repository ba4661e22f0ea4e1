# app/models/__init__.py

from app.core.config import Base

# Import all models here so metadata.create_all and app-wide imports work
from .profile import Profile
from .sleep_record import SleepRecord
from .commit_record import CommitRecord
from .activity_insight import ActivityInsight

__all__ = [
    "Base",
    "Profile",
    "SleepRecord",
    "CommitRecord",
    "ActivityInsight",
]
