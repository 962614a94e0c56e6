from enum import Enum
from typing import Optional
from uuid import UUID

from aiogram.filters.callback_data import CallbackData


class ListKind(str, Enum):
    COMMENTS = "comments"
    REPLIES = "replies"
    SUGGESTIONS = "suggestions"
    STUDIO = "studio"


class VideoAction(str, Enum):
    LIKE = "like"
    DISLIKE = "dislike"
    SUBSCRIBE = "subscribe"


class ListCallback(CallbackData, prefix="list"):
    kind: ListKind
    target: Optional[UUID] = None


class MoreCallback(CallbackData, prefix="more"):
    kind: ListKind
    target: Optional[UUID] = None


class VideoCallback(CallbackData, prefix="video"):
    action: VideoAction
    video_id: UUID


class OpenVideoCallback(CallbackData, prefix="open"):
    video_id: UUID
