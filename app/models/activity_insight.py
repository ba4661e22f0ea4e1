# models/activity_insight.py

import uuid
from datetime import datetime, timezone
from sqlalchemy import (
    Column, Date, DateTime, Float, Integer, JSON, ForeignKey, CheckConstraint, UniqueConstraint, Index
)
from sqlalchemy.dialects.postgresql import UUID
from sqlalchemy.orm import relationship
from app.core.config import Base


class ActivityInsight(Base):
    """Daily scores produced by the external analysis process."""

    __tablename__ = "activity_insights"
    __table_args__ = (
        UniqueConstraint("user_id", "date", name="uq_activity_insights_user_date"),
        CheckConstraint("productivity_score BETWEEN 0 AND 100", name="ck_activity_insights_productivity"),
        CheckConstraint("sleep_score BETWEEN 0 AND 100", name="ck_activity_insights_sleep"),
        Index("idx_activity_insights_user_date", "user_id", "date"),
    )

    id = Column(UUID(as_uuid=True), primary_key=True, default=uuid.uuid4, index=True)
    user_id = Column(UUID(as_uuid=True), ForeignKey("profiles.id", ondelete="CASCADE"), nullable=False)
    date = Column(Date, nullable=False)

    # ---- Scores ----
    productivity_score = Column(Integer, nullable=True)
    sleep_score = Column(Integer, nullable=True)
    commit_count = Column(Integer, default=0, nullable=False)
    active_hours = Column(Float, default=0, nullable=False)

    # Ordered list of recommendation strings
    recommendations = Column(JSON, nullable=True)

    created_at = Column(DateTime(timezone=True), default=lambda: datetime.now(timezone.utc))
    updated_at = Column(DateTime(timezone=True), default=lambda: datetime.now(timezone.utc),
                        onupdate=lambda: datetime.now(timezone.utc))

    user = relationship("Profile", back_populates="activity_insights")
