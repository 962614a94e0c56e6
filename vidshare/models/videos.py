import enum
import uuid

from sqlalchemy import Column, DateTime, Enum, ForeignKey, Index, Integer, String, Text, Uuid

from vidshare.db.database import Base, utcnow


class VideoVisibility(str, enum.Enum):
    PUBLIC = "public"
    PRIVATE = "private"


class Video(Base):
    __tablename__ = "videos"

    id = Column(Uuid(as_uuid=True), primary_key=True, default=uuid.uuid4)

    title = Column(String, nullable=False)
    description = Column(Text, nullable=True, default="")

    # media pipeline state, written by the webhook
    mux_status = Column(String, nullable=True)
    mux_asset_id = Column(String, unique=True, nullable=True)
    mux_playback_id = Column(String, unique=True, nullable=True)
    mux_upload_id = Column(String, unique=True, nullable=True)
    mux_track_id = Column(String, unique=True, nullable=True)
    mux_track_state = Column(String, nullable=True)

    thumbnail_url = Column(String, nullable=True)
    preview_url = Column(String, nullable=True)

    # milliseconds
    duration = Column(Integer, nullable=False, default=0)

    visibility = Column(
        Enum(VideoVisibility, name="video_visibility", values_callable=lambda e: [m.value for m in e]),
        nullable=False,
        default=VideoVisibility.PRIVATE,
    )

    uploader_id = Column(Uuid(as_uuid=True), ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    category_id = Column(Uuid(as_uuid=True), ForeignKey("categories.id", ondelete="SET NULL"), nullable=True, index=True)

    created_at = Column(DateTime(timezone=True), default=utcnow, nullable=False)
    updated_at = Column(DateTime(timezone=True), default=utcnow, nullable=False)

    __table_args__ = (
        Index("ix_videos_updated_at_id", "updated_at", "id"),
    )
