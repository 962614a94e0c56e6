from datetime import datetime
from typing import Optional
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field

from vidshare.models.reactions import ReactionType
from vidshare.schemas.user import UserSummary


class CommentCreate(BaseModel):
    video_id: UUID
    content: str = Field(..., min_length=1, max_length=2000)
    parent_id: Optional[UUID] = None

    model_config = ConfigDict(str_strip_whitespace=True)


class CommentResponse(BaseModel):
    id: UUID
    video_id: UUID
    user_id: UUID
    parent_id: Optional[UUID] = None
    content: str
    created_at: datetime
    updated_at: datetime

    model_config = ConfigDict(from_attributes=True)


class CommentItem(CommentResponse):
    user: UserSummary
    viewer_reaction: Optional[ReactionType] = None
    reply_count: int = 0
    like_count: int = 0
    dislike_count: int = 0


class ReactionResult(BaseModel):
    reaction: Optional[ReactionType] = Field(
        default=None, description="The caller's reaction after the toggle, null when removed"
    )
