# crud/profile.py
from typing import Optional
from uuid import UUID
from datetime import datetime, timezone
from sqlalchemy.orm import Session

from app.models.profile import Profile
from app.schemas.profile import ProfileCreate, ProfileUpdate


class CRUDProfile:
    """CRUD operations for Profile model."""

    def get(self, db: Session, id: UUID) -> Optional[Profile]:
        """Get profile by identity id."""
        return db.query(Profile).filter(Profile.id == id).first()

    def create(self, db: Session, *, obj_in: ProfileCreate) -> Profile:
        """
        Create a profile.

        Args:
            db: Database session
            obj_in: ProfileCreate schema

        Returns:
            Created Profile instance
        """
        db_obj = Profile(**obj_in.model_dump(exclude_unset=False))
        db.add(db_obj)
        db.commit()
        db.refresh(db_obj)
        return db_obj

    def update(self, db: Session, *, db_obj: Profile, obj_in: ProfileUpdate) -> Profile:
        """
        Update profile (only provided fields).

        Args:
            db: Database session
            db_obj: Existing Profile instance
            obj_in: ProfileUpdate schema with updated data

        Returns:
            Updated Profile instance
        """
        update_data = obj_in.model_dump(exclude_unset=True)

        for field, value in update_data.items():
            if value is not None:
                setattr(db_obj, field, value)

        db_obj.updated_at = datetime.now(timezone.utc)
        db.commit()
        db.refresh(db_obj)
        return db_obj


# Create singleton instance
crud_profile = CRUDProfile()
