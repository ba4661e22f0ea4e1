# schemas/activity_insight.py
from pydantic import BaseModel, Field, ConfigDict
from typing import Optional, List
from datetime import date as date_type, datetime
from uuid import UUID


# =====================================================================
# A. BASE SCHEMAS
# =====================================================================

class ScoresBase(BaseModel):
    """Scores produced by the external analysis process."""
    productivity_score: Optional[int] = Field(None, ge=0, le=100)
    sleep_score: Optional[int] = Field(None, ge=0, le=100)


class ActivityBase(BaseModel):
    """Activity counters for the day."""
    commit_count: int = Field(0, ge=0)
    active_hours: float = Field(0, ge=0)


class RecommendationsBase(BaseModel):
    recommendations: List[str] = Field(default_factory=list)


# =====================================================================
# B. CREATE / UPSERT SCHEMAS
# =====================================================================

class ActivityInsightUpsert(ScoresBase, ActivityBase, RecommendationsBase):
    """Insert-or-update payload keyed by (user_id, date)."""
    user_id: UUID
    date: date_type


class ActivityInsightWrite(ScoresBase, ActivityBase, RecommendationsBase):
    """Upsert body submitted over HTTP; the user comes from the session."""
    date: date_type


# =====================================================================
# C. UPDATE SCHEMAS
# =====================================================================

class ActivityInsightUpdate(ScoresBase):
    """Schema for updating an insight (all fields optional)."""
    commit_count: Optional[int] = Field(None, ge=0)
    active_hours: Optional[float] = Field(None, ge=0)
    recommendations: Optional[List[str]] = None


# =====================================================================
# D. READ SCHEMAS
# =====================================================================

class ActivityInsightOut(ScoresBase, ActivityBase):
    model_config = ConfigDict(from_attributes=True)

    id: UUID
    user_id: UUID
    date: date_type
    recommendations: Optional[List[str]] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None
