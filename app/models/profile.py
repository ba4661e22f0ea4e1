# models/profile.py

from datetime import datetime, timezone
from sqlalchemy import Column, String, Integer, Float, DateTime
from sqlalchemy.dialects.postgresql import UUID
from sqlalchemy.orm import relationship
from app.core.config import Base


class Profile(Base):
    __tablename__ = "profiles"

    # Same id as the auth provider identity
    id = Column(UUID(as_uuid=True), primary_key=True, index=True)

    # ---- GitHub identity ----
    github_username = Column(String(255), nullable=True)
    display_name = Column(String(255), nullable=True)
    avatar_url = Column(String(1024), nullable=True)

    # ---- Goals ----
    sleep_goal_hours = Column(Float, default=8.0, nullable=False)
    commit_goal_daily = Column(Integer, default=5, nullable=False)

    # ---- Metadata ----
    created_at = Column(DateTime(timezone=True), default=lambda: datetime.now(timezone.utc))
    updated_at = Column(DateTime(timezone=True), default=lambda: datetime.now(timezone.utc),
                        onupdate=lambda: datetime.now(timezone.utc))

    # ---- Relationships ----
    sleep_records = relationship("SleepRecord", back_populates="user", cascade="all, delete-orphan")
    commit_records = relationship("CommitRecord", back_populates="user", cascade="all, delete-orphan")
    activity_insights = relationship("ActivityInsight", back_populates="user", cascade="all, delete-orphan")
