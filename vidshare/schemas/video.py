from datetime import datetime
from typing import Optional
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field

from vidshare.models.reactions import ReactionType
from vidshare.models.videos import VideoVisibility
from vidshare.schemas.user import UserSummary


class VideoResponse(BaseModel):
    id: UUID
    title: str
    description: Optional[str] = None
    mux_status: Optional[str] = None
    mux_playback_id: Optional[str] = None
    mux_track_state: Optional[str] = None
    thumbnail_url: Optional[str] = None
    preview_url: Optional[str] = None
    duration: int = 0
    visibility: VideoVisibility
    uploader_id: UUID
    category_id: Optional[UUID] = None
    created_at: datetime
    updated_at: datetime

    model_config = ConfigDict(from_attributes=True)


class VideoUpdate(BaseModel):
    title: Optional[str] = Field(default=None, min_length=1, max_length=100)
    description: Optional[str] = Field(default=None, max_length=5000)
    category_id: Optional[UUID] = None
    visibility: Optional[VideoVisibility] = None


class VideoCreateResponse(BaseModel):
    video: VideoResponse
    upload_url: str


class VideoCard(VideoResponse):
    user: UserSummary
    view_count: int = 0
    like_count: int = 0
    dislike_count: int = 0


class VideoDetail(VideoCard):
    viewer_reaction: Optional[ReactionType] = None
    subscriber_count: int = 0
    viewer_subscribed: bool = False


class GenerationJobResponse(BaseModel):
    job_id: str
    video_id: UUID
