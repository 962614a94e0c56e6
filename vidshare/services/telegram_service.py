from typing import Optional, Tuple
from uuid import UUID

from loguru import logger
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from vidshare.models.users import Users


class TelegramService:
    def __init__(self, db: AsyncSession):
        self.db = db

    async def get_user_by_chat_id(self, telegram_chat_id: int) -> Optional[Users]:
        result = await self.db.execute(
            select(Users).where(Users.telegram_chat_id == telegram_chat_id)
        )
        return result.scalar_one_or_none()

    async def get_user_by_id(self, user_id: UUID) -> Optional[Users]:
        result = await self.db.execute(select(Users).where(Users.id == user_id))
        return result.scalar_one_or_none()

    async def create_or_get_telegram_user(
        self,
        telegram_chat_id: int,
        name: str = "",
        image_url: Optional[str] = None,
    ) -> Tuple[Users, bool]:
        user = await self.get_user_by_chat_id(telegram_chat_id)

        if user:
            if name and (user.name != name or user.image_url != image_url):
                user.name = name
                user.image_url = image_url
                await self.db.commit()
                await self.db.refresh(user)
                logger.info(f"Updated profile of user {user.id} for chat {telegram_chat_id}")
            else:
                logger.info(f"Found existing user {user.id} for chat {telegram_chat_id}")
            return user, False

        logger.info(f"Creating new user for chat {telegram_chat_id}")

        new_user = Users(
            telegram_chat_id=telegram_chat_id,
            name=name,
            image_url=image_url,
            is_active=True,
        )

        self.db.add(new_user)
        await self.db.commit()
        await self.db.refresh(new_user)

        logger.info(f"Created new user {new_user.id} for chat {telegram_chat_id}")

        return new_user, True
