from typing import List
from uuid import UUID

from loguru import logger
from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from vidshare.core.exceptions import ConflictError, NotFoundError, ValidationError
from vidshare.models.categories import Category
from vidshare.models.subscriptions import Subscription
from vidshare.models.users import Users


class CategoryService:
    def __init__(self, db: AsyncSession):
        self.db = db

    async def get_many(self) -> List[Category]:
        result = await self.db.execute(select(Category).order_by(Category.name))
        return list(result.scalars().all())


class SubscriptionService:
    def __init__(self, db: AsyncSession):
        self.db = db

    async def toggle(self, user: Users, channel_id: UUID) -> bool:
        """Subscribe to or unsubscribe from a channel; returns the new state."""
        subscriber_id = user.id
        if subscriber_id == channel_id:
            raise ValidationError("You cannot subscribe to yourself.")

        channel = await self.db.execute(select(Users.id).where(Users.id == channel_id))
        if channel.scalar_one_or_none() is None:
            raise NotFoundError("Channel not found")

        result = await self.db.execute(
            select(Subscription).where(
                Subscription.subscriber_id == subscriber_id,
                Subscription.channel_id == channel_id,
            )
        )
        existing = result.scalar_one_or_none()

        if existing is not None:
            await self.db.delete(existing)
            await self.db.commit()
            logger.info(f"User {subscriber_id} unsubscribed from {channel_id}")
            return False

        self.db.add(Subscription(subscriber_id=subscriber_id, channel_id=channel_id))
        try:
            await self.db.commit()
        except IntegrityError as e:
            await self.db.rollback()
            logger.warning(f"Concurrent subscription write {subscriber_id} -> {channel_id}: {e}")
            raise ConflictError("Subscription was changed concurrently, retry the request")
        logger.info(f"User {subscriber_id} subscribed to {channel_id}")
        return True
