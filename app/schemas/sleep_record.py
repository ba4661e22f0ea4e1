# schemas/sleep_record.py
from pydantic import BaseModel, Field, ConfigDict, model_validator
from typing import Optional, List
from datetime import date as date_type, datetime, time
from uuid import UUID


# =====================================================================
# A. BASE SCHEMAS
# =====================================================================

class SleepRecordBase(BaseModel):
    """Stored sleep record fields."""
    date: date_type
    start_time: datetime
    end_time: datetime
    duration_hours: float = Field(..., ge=0)
    quality_score: Optional[int] = Field(None, ge=0, le=100)
    notes: Optional[str] = None


# =====================================================================
# B. CREATE SCHEMAS
# =====================================================================

class SleepRecordCreate(SleepRecordBase):
    """Internal insert payload (duration already derived)."""
    user_id: UUID


class SleepEntryRequest(BaseModel):
    """
    Sleep form submission: a night's date plus bed and wake clock times.

    A wake time earlier than the bed time is taken to be on the next day.
    """
    date: date_type
    start_time: time = time(22, 0)
    end_time: time = time(6, 0)
    quality_score: int = Field(75, ge=0, le=100)
    notes: Optional[str] = None


# =====================================================================
# C. UPDATE SCHEMAS
# =====================================================================

class SleepRecordUpdate(BaseModel):
    """Schema for updating a sleep record (all fields optional)."""
    start_time: Optional[datetime] = None
    end_time: Optional[datetime] = None
    quality_score: Optional[int] = Field(None, ge=0, le=100)
    notes: Optional[str] = None

    @model_validator(mode="after")
    def check_times(self):
        if self.start_time and self.end_time and self.end_time < self.start_time:
            raise ValueError("end_time must not be before start_time")
        return self


# =====================================================================
# D. READ SCHEMAS
# =====================================================================

class SleepRecordOut(SleepRecordBase):
    model_config = ConfigDict(from_attributes=True)

    id: UUID
    user_id: UUID
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


class SleepSummary(BaseModel):
    """Sleep page payload."""
    records: List[SleepRecordOut]
    average_duration_hours: float
    average_quality: float
