from typing import Optional
from uuid import UUID

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from vidshare.models.users import Users
from vidshare.models.videos import Video
from vidshare.pagination.cursor import Cursor
from vidshare.pagination.keyset import KeysetPage, count_matching, fetch_page
from vidshare.schemas.video import VideoResponse
from vidshare.services.video_service import VideoService


class StudioService:
    """The owner's own videos. Every query is scoped by the caller's identity."""

    def __init__(self, db: AsyncSession):
        self.db = db

    async def get_one(self, user: Users, video_id: UUID) -> Video:
        return await VideoService(self.db).get_owned(user.id, video_id)

    async def get_many(
        self,
        user: Users,
        cursor: Optional[Cursor] = None,
        limit: int = 10,
    ) -> KeysetPage[VideoResponse]:
        criteria = (Video.uploader_id == user.id,)
        stmt = select(Video).where(*criteria)

        page = await fetch_page(self.db, stmt, Video, cursor, limit)
        page.total_count = await count_matching(self.db, Video, *criteria)
        return page.map(lambda row: VideoResponse.model_validate(row[0]))
