import enum

from sqlalchemy import Column, DateTime, Enum, ForeignKey, Uuid

from vidshare.db.database import Base, utcnow


class ReactionType(str, enum.Enum):
    LIKE = "like"
    DISLIKE = "dislike"


def _reaction_enum() -> Enum:
    return Enum(ReactionType, name="reaction_type", values_callable=lambda e: [m.value for m in e])


class VideoReaction(Base):
    __tablename__ = "video_reactions"

    user_id = Column(Uuid(as_uuid=True), ForeignKey("users.id", ondelete="CASCADE"), primary_key=True)
    video_id = Column(Uuid(as_uuid=True), ForeignKey("videos.id", ondelete="CASCADE"), primary_key=True, index=True)

    type = Column(_reaction_enum(), nullable=False)

    created_at = Column(DateTime(timezone=True), default=utcnow, nullable=False)
    updated_at = Column(DateTime(timezone=True), default=utcnow, onupdate=utcnow, nullable=False)


class CommentReaction(Base):
    __tablename__ = "comment_reactions"

    user_id = Column(Uuid(as_uuid=True), ForeignKey("users.id", ondelete="CASCADE"), primary_key=True)
    comment_id = Column(Uuid(as_uuid=True), ForeignKey("comments.id", ondelete="CASCADE"), primary_key=True, index=True)

    type = Column(_reaction_enum(), nullable=False)

    created_at = Column(DateTime(timezone=True), default=utcnow, nullable=False)
    updated_at = Column(DateTime(timezone=True), default=utcnow, onupdate=utcnow, nullable=False)
