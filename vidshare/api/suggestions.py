from typing import Optional
from uuid import UUID

from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from vidshare.api.deps import decode_cursor, pagination_settings, to_page
from vidshare.db.database import get_db
from vidshare.pagination.keyset import MAX_PAGE_SIZE, MIN_PAGE_SIZE
from vidshare.schemas.pagination import Page
from vidshare.schemas.video import VideoCard
from vidshare.services.suggestion_service import SuggestionService

suggestions_router = APIRouter()


@suggestions_router.get("", response_model=Page[VideoCard])
async def get_suggestions(
    video_id: UUID,
    cursor: Optional[str] = None,
    limit: int = Query(pagination_settings.videos_page_size, ge=MIN_PAGE_SIZE, le=MAX_PAGE_SIZE),
    db: AsyncSession = Depends(get_db),
):
    filters = {"listing": "suggestions", "video_id": video_id}
    page = await SuggestionService(db).get_many(
        video_id, cursor=decode_cursor(cursor, filters), limit=limit
    )
    return to_page(page, filters)
