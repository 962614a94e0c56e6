from fastapi import APIRouter, Depends, HTTPException, status
from loguru import logger
from pydantic import BaseModel
from sqlalchemy.ext.asyncio import AsyncSession

from vidshare.db.database import get_db
from vidshare.schemas.token import TelegramAuthResponse, Token
from vidshare.schemas.user import UserCreate, UserResponse
from vidshare.services.telegram_service import TelegramService
from vidshare.utils.security import issue_tokens, refresh_access_token, verify_bot_token

auth_router = APIRouter()


class RefreshRequest(BaseModel):
    refresh_token: str


@auth_router.post("/telegram/create", response_model=TelegramAuthResponse)
async def create_telegram_user(
    payload: UserCreate,
    db: AsyncSession = Depends(get_db),
    bot_token: str = Depends(verify_bot_token),
):
    telegram_service = TelegramService(db)

    user, is_new = await telegram_service.create_or_get_telegram_user(
        telegram_chat_id=payload.telegram_chat_id,
        name=payload.name,
        image_url=payload.image_url,
    )
    if not user.is_active:
        logger.warning(f"Inactive user {user.id} tried to sign in from chat {payload.telegram_chat_id}")
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="User is deactivated")

    return TelegramAuthResponse(
        user=UserResponse.model_validate(user),
        token=await issue_tokens(user),
        is_new=is_new,
    )


@auth_router.post("/refresh", response_model=Token)
async def refresh(payload: RefreshRequest):
    access_token = await refresh_access_token(payload.refresh_token)
    return Token(access_token=access_token, refresh_token=payload.refresh_token)
