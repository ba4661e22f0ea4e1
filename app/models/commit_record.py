# models/commit_record.py

import uuid
from datetime import datetime, timezone
from sqlalchemy import Column, String, Text, DateTime, ForeignKey, UniqueConstraint, Index
from sqlalchemy.dialects.postgresql import UUID
from sqlalchemy.orm import relationship
from app.core.config import Base


class CommitRecord(Base):
    """
    One row per synced commit. Rows are only ever inserted by the commit
    sync; (user_id, commit_hash) is the natural dedup key.
    """

    __tablename__ = "commit_records"
    __table_args__ = (
        UniqueConstraint("user_id", "commit_hash", name="uq_commit_records_user_hash"),
        Index("idx_commit_records_user_timestamp", "user_id", "commit_timestamp"),
    )

    id = Column(UUID(as_uuid=True), primary_key=True, default=uuid.uuid4, index=True)
    user_id = Column(UUID(as_uuid=True), ForeignKey("profiles.id", ondelete="CASCADE"), nullable=False)

    repository = Column(String(255), nullable=False)
    commit_hash = Column(String(64), nullable=False)
    commit_message = Column(Text, nullable=True)
    commit_timestamp = Column(DateTime(timezone=True), nullable=False)

    created_at = Column(DateTime(timezone=True), default=lambda: datetime.now(timezone.utc))

    user = relationship("Profile", back_populates="commit_records")
