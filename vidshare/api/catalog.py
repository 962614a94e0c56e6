from typing import List

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from vidshare.db.database import get_db
from vidshare.models.users import Users
from vidshare.schemas.category import CategoryResponse
from vidshare.schemas.subscription import SubscriptionResult, SubscriptionToggle
from vidshare.services.catalog_service import CategoryService, SubscriptionService
from vidshare.utils.security import get_user

categories_router = APIRouter()
subscriptions_router = APIRouter()


@categories_router.get("", response_model=List[CategoryResponse])
async def get_categories(db: AsyncSession = Depends(get_db)):
    return await CategoryService(db).get_many()


@subscriptions_router.post("/toggle", response_model=SubscriptionResult)
async def toggle_subscription(
    payload: SubscriptionToggle,
    db: AsyncSession = Depends(get_db),
    user: Users = Depends(get_user),
):
    subscribed = await SubscriptionService(db).toggle(user, payload.channel_id)
    return SubscriptionResult(subscribed=subscribed)
