from typing import Optional
from uuid import UUID

from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from vidshare.api.deps import decode_cursor, pagination_settings, to_page
from vidshare.db.database import get_db
from vidshare.models.users import Users
from vidshare.pagination.keyset import MAX_PAGE_SIZE, MIN_PAGE_SIZE
from vidshare.schemas.pagination import Page
from vidshare.schemas.video import VideoResponse
from vidshare.services.studio_service import StudioService
from vidshare.utils.security import get_user

studio_router = APIRouter()


@studio_router.get("/videos", response_model=Page[VideoResponse])
async def get_studio_videos(
    cursor: Optional[str] = None,
    limit: int = Query(pagination_settings.videos_page_size, ge=MIN_PAGE_SIZE, le=MAX_PAGE_SIZE),
    db: AsyncSession = Depends(get_db),
    user: Users = Depends(get_user),
):
    filters = {"listing": "studio", "uploader_id": user.id}
    page = await StudioService(db).get_many(user, cursor=decode_cursor(cursor, filters), limit=limit)
    return to_page(page, filters)


@studio_router.get("/videos/{video_id}", response_model=VideoResponse)
async def get_studio_video(
    video_id: UUID,
    db: AsyncSession = Depends(get_db),
    user: Users = Depends(get_user),
):
    return await StudioService(db).get_one(user, video_id)
