import uuid

from sqlalchemy import BigInteger, Boolean, Column, DateTime, String, Uuid

from vidshare.db.database import Base, utcnow


class Users(Base):
    __tablename__ = "users"

    id = Column(Uuid(as_uuid=True), primary_key=True, default=uuid.uuid4)

    telegram_chat_id = Column(BigInteger, unique=True, index=True, nullable=False)

    name = Column(String, nullable=False, default="")
    image_url = Column(String, nullable=True)

    is_active = Column(Boolean, default=True)

    created_at = Column(DateTime(timezone=True), default=utcnow, nullable=False)
    updated_at = Column(DateTime(timezone=True), default=utcnow, onupdate=utcnow, nullable=False)
