from typing import Optional
from uuid import UUID

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from vidshare.api.deps import decode_cursor, pagination_settings, to_page
from vidshare.db.database import get_db
from vidshare.models.users import Users
from vidshare.pagination.keyset import MAX_PAGE_SIZE, MIN_PAGE_SIZE
from vidshare.schemas.comment import CommentCreate, CommentItem, CommentResponse, ReactionResult
from vidshare.schemas.pagination import Page
from vidshare.services.comment_service import CommentService
from vidshare.utils.security import get_optional_user, get_user

comments_router = APIRouter()


@comments_router.get("", response_model=Page[CommentItem])
async def get_comments(
    video_id: UUID,
    parent_id: Optional[UUID] = None,
    cursor: Optional[str] = None,
    limit: int = Query(pagination_settings.comments_page_size, ge=MIN_PAGE_SIZE, le=MAX_PAGE_SIZE),
    db: AsyncSession = Depends(get_db),
    viewer: Optional[Users] = Depends(get_optional_user),
):
    filters = {"listing": "comments", "video_id": video_id, "parent_id": parent_id}
    page = await CommentService(db).get_many(
        video_id=video_id,
        parent_id=parent_id,
        cursor=decode_cursor(cursor, filters),
        limit=limit,
        viewer=viewer,
    )
    return to_page(page, filters)


@comments_router.post("", response_model=CommentResponse, status_code=status.HTTP_201_CREATED)
async def create_comment(
    payload: CommentCreate,
    db: AsyncSession = Depends(get_db),
    user: Users = Depends(get_user),
):
    return await CommentService(db).create(
        user, video_id=payload.video_id, content=payload.content, parent_id=payload.parent_id
    )


@comments_router.delete("/{comment_id}", response_model=CommentResponse)
async def remove_comment(
    comment_id: UUID,
    db: AsyncSession = Depends(get_db),
    user: Users = Depends(get_user),
):
    return await CommentService(db).remove(user, comment_id)


@comments_router.post("/{comment_id}/like", response_model=ReactionResult)
async def like_comment(
    comment_id: UUID,
    db: AsyncSession = Depends(get_db),
    user: Users = Depends(get_user),
):
    return ReactionResult(reaction=await CommentService(db).like(user, comment_id))


@comments_router.post("/{comment_id}/dislike", response_model=ReactionResult)
async def dislike_comment(
    comment_id: UUID,
    db: AsyncSession = Depends(get_db),
    user: Users = Depends(get_user),
):
    return ReactionResult(reaction=await CommentService(db).dislike(user, comment_id))
