from uuid import UUID

from pydantic import BaseModel


class SubscriptionToggle(BaseModel):
    channel_id: UUID


class SubscriptionResult(BaseModel):
    subscribed: bool
