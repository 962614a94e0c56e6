from typing import Optional, Tuple
from uuid import UUID

from loguru import logger
from sqlalchemy import exists, func, or_, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from vidshare.core.exceptions import ExternalServiceError, NotFoundError, ValidationError
from vidshare.db.database import utcnow
from vidshare.models.categories import Category
from vidshare.models.reactions import ReactionType, VideoReaction
from vidshare.models.subscriptions import Subscription
from vidshare.models.users import Users
from vidshare.models.video_views import VideoView
from vidshare.models.videos import Video, VideoVisibility
from vidshare.schemas.user import UserSummary
from vidshare.schemas.video import VideoCard, VideoDetail, VideoResponse, VideoUpdate
from vidshare.services.mux_client import MuxClient
from vidshare.services.reactions import toggle_reaction

NON_NULLABLE_UPDATE_FIELDS = ("title", "visibility")


def view_count_column():
    return (
        select(func.count())
        .select_from(VideoView)
        .where(VideoView.video_id == Video.id)
        .correlate(Video)
        .scalar_subquery()
    )


def reaction_count_column(reaction_type: ReactionType):
    return (
        select(func.count())
        .select_from(VideoReaction)
        .where(VideoReaction.video_id == Video.id, VideoReaction.type == reaction_type)
        .correlate(Video)
        .scalar_subquery()
    )


def card_select():
    """Video, uploader and public counters; the video stays the first column."""
    return (
        select(
            Video,
            Users,
            view_count_column().label("view_count"),
            reaction_count_column(ReactionType.LIKE).label("like_count"),
            reaction_count_column(ReactionType.DISLIKE).label("dislike_count"),
        )
        .join(Users, Users.id == Video.uploader_id)
    )


def to_card(row) -> VideoCard:
    video, user, view_count, like_count, dislike_count = row[:5]
    return VideoCard(
        **VideoResponse.model_validate(video).model_dump(),
        user=UserSummary.model_validate(user),
        view_count=view_count or 0,
        like_count=like_count or 0,
        dislike_count=dislike_count or 0,
    )


class VideoService:
    def __init__(self, db: AsyncSession, mux: Optional[MuxClient] = None):
        self.db = db
        self.mux = mux

    async def get_owned(self, user_id: UUID, video_id: UUID) -> Video:
        result = await self.db.execute(
            select(Video).where(Video.id == video_id, Video.uploader_id == user_id)
        )
        video = result.scalar_one_or_none()
        if video is None:
            raise NotFoundError("Video not found")
        return video

    async def _ensure_video(self, video_id: UUID) -> None:
        result = await self.db.execute(select(Video.id).where(Video.id == video_id))
        if result.scalar_one_or_none() is None:
            raise NotFoundError("Video not found")

    async def create(self, user: Users) -> Tuple[Video, str]:
        if self.mux is None:
            raise ExternalServiceError("Media pipeline is not configured")
        upload = await self.mux.create_upload(passthrough=str(user.id))

        video = Video(
            uploader_id=user.id,
            title="Untitled",
            mux_status="waiting",
            mux_upload_id=upload.id,
        )
        self.db.add(video)
        await self.db.commit()
        await self.db.refresh(video)

        logger.info(f"User {user.id} created video {video.id} (upload {upload.id})")
        return video, upload.url

    async def update(self, user: Users, video_id: UUID, payload: VideoUpdate) -> Video:
        video = await self.get_owned(user.id, video_id)
        changes = payload.model_dump(exclude_unset=True)

        if changes.get("category_id") is not None:
            result = await self.db.execute(select(Category.id).where(Category.id == changes["category_id"]))
            if result.scalar_one_or_none() is None:
                raise NotFoundError("Category not found")
        for field in NON_NULLABLE_UPDATE_FIELDS:
            if field in changes and changes[field] is None:
                raise ValidationError(f"{field.capitalize()} cannot be empty")

        for field, value in changes.items():
            setattr(video, field, value)
        video.updated_at = utcnow()

        await self.db.commit()
        await self.db.refresh(video)

        logger.info(f"User {user.id} updated video {video_id}: {sorted(changes)}")
        return video

    async def apply_generated(self, user_id: UUID, video_id: UUID, **fields) -> Video:
        video = await self.get_owned(user_id, video_id)
        for field, value in fields.items():
            setattr(video, field, value)
        video.updated_at = utcnow()
        await self.db.commit()
        await self.db.refresh(video)
        return video

    async def remove(self, user: Users, video_id: UUID) -> VideoResponse:
        video = await self.get_owned(user.id, video_id)

        if video.mux_asset_id and self.mux is not None:
            try:
                await self.mux.delete_asset(video.mux_asset_id)
                logger.info(f"Deleted media asset {video.mux_asset_id}")
            except ExternalServiceError as e:
                logger.error(f"Failed to delete media asset {video.mux_asset_id}: {e}")

        removed = VideoResponse.model_validate(video)
        await self.db.delete(video)
        await self.db.commit()

        logger.info(f"User {user.id} removed video {video_id}")
        return removed

    async def restore_thumbnail(self, user: Users, video_id: UUID) -> Video:
        video = await self.get_owned(user.id, video_id)
        if not video.mux_playback_id:
            raise ValidationError("No playback id found to restore the thumbnail")
        if self.mux is None:
            raise ExternalServiceError("Media pipeline is not configured")

        video.thumbnail_url = self.mux.thumbnail_url(video.mux_playback_id)
        video.updated_at = utcnow()
        await self.db.commit()
        await self.db.refresh(video)

        logger.info(f"Restored thumbnail of video {video_id}")
        return video

    async def get_one(self, video_id: UUID, viewer: Optional[Users] = None) -> VideoDetail:
        subscriber_count = (
            select(func.count())
            .select_from(Subscription)
            .where(Subscription.channel_id == Video.uploader_id)
            .correlate(Video)
            .scalar_subquery()
        )
        stmt = card_select().add_columns(subscriber_count.label("subscriber_count")).where(Video.id == video_id)
        if viewer is not None:
            stmt = stmt.where(
                or_(Video.visibility == VideoVisibility.PUBLIC, Video.uploader_id == viewer.id)
            )
        else:
            stmt = stmt.where(Video.visibility == VideoVisibility.PUBLIC)

        result = await self.db.execute(stmt)
        row = result.one_or_none()
        if row is None:
            raise NotFoundError("Video not found")

        card = to_card(row)
        viewer_reaction = None
        viewer_subscribed = False
        if viewer is not None:
            reaction = await self.db.execute(
                select(VideoReaction.type).where(
                    VideoReaction.video_id == video_id, VideoReaction.user_id == viewer.id
                )
            )
            viewer_reaction = reaction.scalar_one_or_none()
            subscribed = await self.db.execute(
                select(
                    exists().where(
                        Subscription.subscriber_id == viewer.id,
                        Subscription.channel_id == card.uploader_id,
                    )
                )
            )
            viewer_subscribed = bool(subscribed.scalar())

        return VideoDetail(
            **card.model_dump(),
            viewer_reaction=viewer_reaction,
            subscriber_count=row.subscriber_count or 0,
            viewer_subscribed=viewer_subscribed,
        )

    async def like(self, user: Users, video_id: UUID) -> Optional[ReactionType]:
        await self._ensure_video(video_id)
        return await toggle_reaction(self.db, VideoReaction, ReactionType.LIKE, user_id=user.id, video_id=video_id)

    async def dislike(self, user: Users, video_id: UUID) -> Optional[ReactionType]:
        await self._ensure_video(video_id)
        return await toggle_reaction(self.db, VideoReaction, ReactionType.DISLIKE, user_id=user.id, video_id=video_id)

    async def add_view(self, user: Users, video_id: UUID) -> bool:
        """Record a view once per user; returns False when it was already counted."""
        await self._ensure_video(video_id)
        result = await self.db.execute(
            select(VideoView).where(VideoView.user_id == user.id, VideoView.video_id == video_id)
        )
        if result.scalar_one_or_none() is not None:
            return False

        self.db.add(VideoView(user_id=user.id, video_id=video_id))
        try:
            await self.db.commit()
        except IntegrityError:
            await self.db.rollback()
            return False
        return True
