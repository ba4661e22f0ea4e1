# schemas/session.py
from pydantic import BaseModel, Field, ConfigDict
from typing import Optional
from datetime import datetime
from uuid import UUID


class Identity(BaseModel):
    """Identity carried by a verified auth provider access token."""
    user_id: UUID
    email: Optional[str] = None


class SessionCreate(BaseModel):
    """Session handed over by the client after the OAuth sign-in."""
    provider_token: Optional[str] = Field(
        None, description="GitHub access token embedded in the auth provider session"
    )


class ProviderTokenUpdate(BaseModel):
    """Rotated GitHub access token."""
    provider_token: str = Field(..., min_length=1)


class SessionOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    user_id: UUID
    email: Optional[str] = None
    github_connected: bool = False
    last_sync_ok: Optional[bool] = None
    last_synced_at: Optional[datetime] = None
    created_at: datetime


class SyncResult(BaseModel):
    success: bool
    synced_at: datetime


class SuccessResponse(BaseModel):
    success: bool = True
    message: str
