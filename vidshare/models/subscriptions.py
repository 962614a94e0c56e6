from sqlalchemy import Column, DateTime, ForeignKey, Uuid

from vidshare.db.database import Base, utcnow


class Subscription(Base):
    __tablename__ = "subscriptions"

    subscriber_id = Column(Uuid(as_uuid=True), ForeignKey("users.id", ondelete="CASCADE"), primary_key=True)
    channel_id = Column(Uuid(as_uuid=True), ForeignKey("users.id", ondelete="CASCADE"), primary_key=True, index=True)

    created_at = Column(DateTime(timezone=True), default=utcnow, nullable=False)
