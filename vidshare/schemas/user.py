from datetime import datetime
from typing import Optional
from uuid import UUID

from pydantic import BaseModel, Field, ConfigDict


class UserBase(BaseModel):
    telegram_chat_id: int = Field(..., description="Telegram chat ID")
    name: str = Field(default="", max_length=200, description="Display name")
    image_url: Optional[str] = Field(default=None, description="Avatar URL")


class UserCreate(UserBase):
    pass


class UserResponse(UserBase):
    id: UUID
    is_active: bool
    created_at: datetime
    updated_at: datetime

    model_config = ConfigDict(from_attributes=True)


class UserSummary(BaseModel):
    id: UUID
    name: str
    image_url: Optional[str] = None

    model_config = ConfigDict(from_attributes=True)
