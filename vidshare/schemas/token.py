from typing import Optional

from pydantic import BaseModel

from vidshare.schemas.user import UserResponse


class Token(BaseModel):
    access_token: str
    refresh_token: Optional[str] = None
    token_type: str = "bearer"


class TelegramAuthResponse(BaseModel):
    user: UserResponse
    token: Token
    is_new: bool
