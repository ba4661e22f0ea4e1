# schemas/github.py
from pydantic import BaseModel, ConfigDict, Field
from typing import Optional, List
from datetime import datetime


class PushCommit(BaseModel):
    model_config = ConfigDict(extra="ignore")

    sha: str
    message: Optional[str] = None


class PushPayload(BaseModel):
    model_config = ConfigDict(extra="ignore")

    commits: List[PushCommit] = Field(default_factory=list)


class EventRepo(BaseModel):
    model_config = ConfigDict(extra="ignore")

    id: Optional[int] = None
    name: str
    url: Optional[str] = None


class PushEvent(BaseModel):
    """A push activity record carrying one or more commits."""
    model_config = ConfigDict(extra="ignore")

    id: str
    type: Optional[str] = None
    created_at: Optional[datetime] = None
    repo: EventRepo
    payload: PushPayload = Field(default_factory=PushPayload)


class GitHubProfile(BaseModel):
    model_config = ConfigDict(extra="ignore")

    login: str
    id: int
    avatar_url: Optional[str] = None
    name: Optional[str] = None
    email: Optional[str] = None
    bio: Optional[str] = None
    public_repos: int = 0
    followers: int = 0
    following: int = 0
