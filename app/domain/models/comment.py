from pydantic import BaseModel, ConfigDict
from datetime import datetime
from typing import Optional


class Comment(BaseModel):
    model_config = ConfigDict(extra="ignore")

    id: str
    content: str
    video: str
    owner: str
    createdAt: Optional[datetime] = None
    updatedAt: Optional[datetime] = None


class OwnerSummary(BaseModel):
    """Projeção pública do autor: só username, fullName e avatar."""
    model_config = ConfigDict(extra="ignore")

    username: Optional[str] = None
    fullName: Optional[str] = None
    avatar: Optional[str] = None


class CommentWithOwner(BaseModel):
    id: str
    content: str
    video: str
    owner: Optional[OwnerSummary] = None
    createdAt: Optional[datetime] = None
    updatedAt: Optional[datetime] = None


class CommentIn(BaseModel):
    content: Optional[str] = None
