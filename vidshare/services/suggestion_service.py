from typing import Optional
from uuid import UUID

from loguru import logger
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from vidshare.core.exceptions import NotFoundError
from vidshare.models.videos import Video, VideoVisibility
from vidshare.pagination.cursor import Cursor
from vidshare.pagination.keyset import KeysetPage, fetch_page
from vidshare.schemas.video import VideoCard
from vidshare.services.video_service import card_select, to_card


class SuggestionService:
    def __init__(self, db: AsyncSession):
        self.db = db

    async def get_many(
        self,
        video_id: UUID,
        cursor: Optional[Cursor] = None,
        limit: int = 10,
    ) -> KeysetPage[VideoCard]:
        """Public videos to watch next, from the reference video's category when it has one."""
        result = await self.db.execute(select(Video).where(Video.id == video_id))
        reference = result.scalar_one_or_none()
        if reference is None:
            raise NotFoundError("The referenced video does not exist.")

        criteria = [Video.visibility == VideoVisibility.PUBLIC, Video.id != video_id]
        if reference.category_id is not None:
            criteria.append(Video.category_id == reference.category_id)
        else:
            logger.debug(f"Video {video_id} has no category, suggesting from all public videos")

        page = await fetch_page(self.db, card_select().where(*criteria), Video, cursor, limit)
        return page.map(to_card)
