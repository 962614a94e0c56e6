from typing import Callable, Dict, Any, Awaitable

from aiogram import BaseMiddleware
from aiogram.types import TelegramObject

from vidshare_bot.clients.api_client import APIClient
from vidshare_bot.core.config import BotSettings
from vidshare_bot.pagination.sessions import SessionRegistry


class BotContextMiddleware(BaseMiddleware):
    def __init__(self, api_client: APIClient, sessions: SessionRegistry, settings: BotSettings):
        self.api_client = api_client
        self.sessions = sessions
        self.settings = settings

    async def __call__(
        self,
        handler: Callable[[TelegramObject, Dict[str, Any]], Awaitable[Any]],
        event: TelegramObject,
        data: Dict[str, Any]
    ) -> Any:
        data["api_client"] = self.api_client
        data["sessions"] = self.sessions
        data["settings"] = self.settings
        return await handler(event, data)
