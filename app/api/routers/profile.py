# app/api/routers/profile.py
from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from app.core.config import get_db
from app.core.security import get_current_identity
from app.schemas.profile import ProfileOut, ProfileUpdate
from app.schemas.session import Identity
from app.services.profile import profile_service

router = APIRouter(prefix="/profile", tags=["Profile"])


@router.get("", response_model=ProfileOut, summary="Get my profile")
def get_profile(
    identity: Identity = Depends(get_current_identity),
    db: Session = Depends(get_db),
):
    """The profile is created on the first session sign-in."""
    return profile_service.get_profile(db, user_id=identity.user_id)


@router.put("", response_model=ProfileOut, summary="Update my profile")
def update_profile(
    update_data: ProfileUpdate,
    identity: Identity = Depends(get_current_identity),
    db: Session = Depends(get_db),
):
    """
    Update display details and goals.

    - **sleep_goal_hours**: nightly sleep goal
    - **commit_goal_daily**: commits per day goal
    """
    return profile_service.update_profile(db, user_id=identity.user_id, update_data=update_data)
