from sqlalchemy import Column, DateTime, ForeignKey, Uuid

from vidshare.db.database import Base, utcnow


class VideoView(Base):
    __tablename__ = "video_views"

    user_id = Column(Uuid(as_uuid=True), ForeignKey("users.id", ondelete="CASCADE"), primary_key=True)
    video_id = Column(Uuid(as_uuid=True), ForeignKey("videos.id", ondelete="CASCADE"), primary_key=True, index=True)

    created_at = Column(DateTime(timezone=True), default=utcnow, nullable=False)
