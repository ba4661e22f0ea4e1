# services/profile.py
import logging
from typing import Optional
from uuid import UUID
from sqlalchemy.orm import Session

from app.core.exceptions import FetchError, NotFoundError
from app.crud.profile import crud_profile
from app.models.profile import Profile
from app.schemas.profile import ProfileCreate, ProfileUpdate
from app.services.github_client import GitHubClient

logger = logging.getLogger(__name__)


class ProfileService:
    """Service layer for user profiles."""

    def __init__(self):
        self.crud = crud_profile

    async def ensure_profile(
        self, db: Session, *, user_id: UUID, client: Optional[GitHubClient] = None
    ) -> Profile:
        """
        Get the profile, creating it on first sign-in.

        A new profile is seeded from the GitHub profile when a client is
        given; a failed fetch still creates the profile with defaults.
        """
        profile = self.crud.get(db, id=user_id)
        if profile:
            return profile

        create_data = ProfileCreate(id=user_id)
        if client is not None:
            try:
                github_profile = await client.get_authenticated_profile()
                create_data = ProfileCreate(
                    id=user_id,
                    github_username=github_profile.login,
                    display_name=github_profile.name,
                    avatar_url=github_profile.avatar_url,
                )
            except FetchError as e:
                logger.warning(f"Creating profile for {user_id} without GitHub details: {e}")

        logger.info(f"Creating profile for user {user_id}")
        return self.crud.create(db, obj_in=create_data)

    def get_profile(self, db: Session, *, user_id: UUID) -> Profile:
        """
        Raises:
            NotFoundError: If the identity has no profile yet
        """
        profile = self.crud.get(db, id=user_id)
        if not profile:
            raise NotFoundError("Profile not found")
        return profile

    def update_profile(self, db: Session, *, user_id: UUID, update_data: ProfileUpdate) -> Profile:
        profile = self.get_profile(db, user_id=user_id)
        return self.crud.update(db, db_obj=profile, obj_in=update_data)


# =====================================================================
# SINGLETON INSTANCE
# =====================================================================

profile_service = ProfileService()
