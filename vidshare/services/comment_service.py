from typing import Optional
from uuid import UUID

from loguru import logger
from sqlalchemy import func, null, select
from sqlalchemy.orm import aliased
from sqlalchemy.ext.asyncio import AsyncSession

from vidshare.core.exceptions import NotFoundError, ValidationError
from vidshare.models.comments import Comment
from vidshare.models.reactions import CommentReaction, ReactionType
from vidshare.models.users import Users
from vidshare.models.videos import Video
from vidshare.pagination.cursor import Cursor
from vidshare.pagination.keyset import KeysetPage, count_matching, fetch_page
from vidshare.schemas.comment import CommentItem, CommentResponse
from vidshare.schemas.user import UserSummary
from vidshare.services.reactions import toggle_reaction


def _reaction_count(reaction_type: ReactionType):
    return (
        select(func.count())
        .select_from(CommentReaction)
        .where(
            CommentReaction.comment_id == Comment.id,
            CommentReaction.type == reaction_type,
        )
        .correlate(Comment)
        .scalar_subquery()
    )


def _level_criterion(parent_id: Optional[UUID]):
    if parent_id is not None:
        return Comment.parent_id == parent_id
    return Comment.parent_id.is_(None)


class CommentService:
    def __init__(self, db: AsyncSession):
        self.db = db

    async def _get_comment(self, comment_id: UUID) -> Optional[Comment]:
        result = await self.db.execute(select(Comment).where(Comment.id == comment_id))
        return result.scalar_one_or_none()

    async def _ensure_video(self, video_id: UUID) -> None:
        result = await self.db.execute(select(Video.id).where(Video.id == video_id))
        if result.scalar_one_or_none() is None:
            raise NotFoundError("Video not found")

    async def create(
        self,
        user: Users,
        video_id: UUID,
        content: str,
        parent_id: Optional[UUID] = None,
    ) -> Comment:
        await self._ensure_video(video_id)

        if parent_id is not None:
            parent = await self._get_comment(parent_id)
            if parent is None:
                raise NotFoundError(
                    "Parent comment not found. You cannot reply to a comment that does not exist."
                )
            if parent.parent_id is not None:
                logger.warning(f"User {user.id} tried to reply to reply {parent_id}")
                raise ValidationError("Replies to replies are not allowed.")
            if parent.video_id != video_id:
                raise ValidationError("Parent comment belongs to a different video.")

        comment = Comment(
            user_id=user.id,
            video_id=video_id,
            content=content,
            parent_id=parent_id,
        )
        self.db.add(comment)
        await self.db.commit()
        await self.db.refresh(comment)

        logger.info(f"User {user.id} commented {comment.id} on video {video_id} (parent={parent_id})")
        return comment

    async def remove(self, user: Users, comment_id: UUID) -> CommentResponse:
        result = await self.db.execute(
            select(Comment).where(Comment.id == comment_id, Comment.user_id == user.id)
        )
        comment = result.scalar_one_or_none()
        if comment is None:
            raise NotFoundError("Comment not found or you are not authorized to delete it.")

        removed = CommentResponse.model_validate(comment)
        await self.db.delete(comment)
        await self.db.commit()

        logger.info(f"User {user.id} removed comment {comment_id}")
        return removed

    async def like(self, user: Users, comment_id: UUID) -> Optional[ReactionType]:
        return await self._react(user, comment_id, ReactionType.LIKE)

    async def dislike(self, user: Users, comment_id: UUID) -> Optional[ReactionType]:
        return await self._react(user, comment_id, ReactionType.DISLIKE)

    async def _react(self, user: Users, comment_id: UUID, reaction_type: ReactionType) -> Optional[ReactionType]:
        if await self._get_comment(comment_id) is None:
            raise NotFoundError("Comment not found")
        return await toggle_reaction(
            self.db, CommentReaction, reaction_type, user_id=user.id, comment_id=comment_id
        )

    async def get_many(
        self,
        video_id: UUID,
        parent_id: Optional[UUID] = None,
        cursor: Optional[Cursor] = None,
        limit: int = 5,
        viewer: Optional[Users] = None,
    ) -> KeysetPage[CommentItem]:
        """One page of a video's top-level comments, or of one comment's replies."""
        await self._ensure_video(video_id)
        if parent_id is not None:
            parent = await self._get_comment(parent_id)
            if parent is None or parent.video_id != video_id:
                raise NotFoundError("Parent comment not found")

        reply = aliased(Comment)
        reply_count = (
            select(func.count(reply.id))
            .where(reply.parent_id == Comment.id)
            .correlate(Comment)
            .scalar_subquery()
        )
        if viewer is not None:
            viewer_reaction = (
                select(CommentReaction.type)
                .where(
                    CommentReaction.comment_id == Comment.id,
                    CommentReaction.user_id == viewer.id,
                )
                .correlate(Comment)
                .scalar_subquery()
            )
        else:
            viewer_reaction = null()

        criteria = (Comment.video_id == video_id, _level_criterion(parent_id))
        stmt = (
            select(
                Comment,
                Users,
                reply_count.label("reply_count"),
                _reaction_count(ReactionType.LIKE).label("like_count"),
                _reaction_count(ReactionType.DISLIKE).label("dislike_count"),
                viewer_reaction.label("viewer_reaction"),
            )
            .join(Users, Users.id == Comment.user_id)
            .where(*criteria)
        )

        page = await fetch_page(self.db, stmt, Comment, cursor, limit)
        page.total_count = await count_matching(self.db, Comment, *criteria)
        return page.map(_to_item)


def _to_item(row) -> CommentItem:
    comment, user, reply_count, like_count, dislike_count, viewer_reaction = row
    return CommentItem(
        **CommentResponse.model_validate(comment).model_dump(),
        user=UserSummary.model_validate(user),
        viewer_reaction=ReactionType(viewer_reaction) if viewer_reaction else None,
        reply_count=reply_count or 0,
        like_count=like_count or 0,
        dislike_count=dislike_count or 0,
    )
