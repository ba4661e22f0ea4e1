# schemas/profile.py
from pydantic import BaseModel, Field, ConfigDict
from typing import Optional
from datetime import datetime
from uuid import UUID


class ProfileBase(BaseModel):
    """Editable profile fields."""
    github_username: Optional[str] = Field(None, max_length=255)
    display_name: Optional[str] = Field(None, max_length=255)
    avatar_url: Optional[str] = Field(None, max_length=1024)
    sleep_goal_hours: Optional[float] = Field(None, ge=0, le=24)
    commit_goal_daily: Optional[int] = Field(None, ge=0)


class ProfileCreate(ProfileBase):
    """Profile seeded on first sign-in."""
    id: UUID
    sleep_goal_hours: float = Field(8.0, ge=0, le=24)
    commit_goal_daily: int = Field(5, ge=0)


class ProfileUpdate(ProfileBase):
    """Schema for updating a profile (all fields optional)."""
    pass


class ProfileOut(ProfileBase):
    model_config = ConfigDict(from_attributes=True)

    id: UUID
    sleep_goal_hours: float
    commit_goal_daily: int
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None
