from typing import Any, Dict, Optional
from uuid import UUID

import httpx
from loguru import logger

from vidshare_bot.core.config import BotSettings
from vidshare_bot.core.exceptions import APIError


def _error_detail(response: httpx.Response) -> str:
    try:
        detail = response.json().get("detail")
    except ValueError:
        return response.text
    return detail if isinstance(detail, str) else str(detail)


class APIClient:
    def __init__(self, settings: BotSettings, transport: Optional[httpx.AsyncBaseTransport] = None):
        self.settings = settings
        self.bot_token = settings.bot_token
        self.client = httpx.AsyncClient(
            base_url=settings.backend_api_url,
            timeout=settings.request_timeout,
            transport=transport,
        )

    def _headers(self, chat_id: Optional[int] = None) -> Dict[str, str]:
        headers = {"X-Bot-Token": self.bot_token}
        if chat_id is not None:
            headers["X-Telegram-Chat-Id"] = str(chat_id)
        return headers

    async def _request(
        self,
        method: str,
        path: str,
        chat_id: Optional[int] = None,
        params: Optional[Dict[str, Any]] = None,
        json: Optional[Dict[str, Any]] = None,
    ) -> Any:
        if params:
            params = {key: str(value) for key, value in params.items() if value is not None}
        try:
            response = await self.client.request(
                method, path, params=params, json=json, headers=self._headers(chat_id)
            )
            response.raise_for_status()
        except httpx.HTTPStatusError as e:
            detail = _error_detail(e.response)
            logger.error(f"API error {method} {path}: {e.response.status_code} - {detail}")
            raise APIError(detail, status_code=e.response.status_code) from e
        except httpx.HTTPError as e:
            logger.error(f"API request {method} {path} failed: {e}")
            raise APIError("Backend is unavailable") from e

        if response.status_code == httpx.codes.NO_CONTENT:
            return None
        return response.json()

    async def register_user(self, telegram_chat_id: int, name: str) -> Optional[Dict[str, Any]]:
        try:
            return await self._request(
                "POST",
                "/auth/telegram/create",
                json={"telegram_chat_id": telegram_chat_id, "name": name},
            )
        except APIError:
            return None

    async def get_video(self, chat_id: int, video_id: UUID) -> Dict[str, Any]:
        return await self._request("GET", f"/videos/{video_id}", chat_id=chat_id)

    async def get_comments(
        self,
        chat_id: int,
        video_id: UUID,
        cursor: Optional[str] = None,
        limit: int = 5,
        parent_id: Optional[UUID] = None,
    ) -> Dict[str, Any]:
        return await self._request(
            "GET",
            "/comments",
            chat_id=chat_id,
            params={"video_id": video_id, "parent_id": parent_id, "cursor": cursor, "limit": limit},
        )

    async def get_suggestions(
        self,
        chat_id: int,
        video_id: UUID,
        cursor: Optional[str] = None,
        limit: int = 10,
    ) -> Dict[str, Any]:
        return await self._request(
            "GET",
            "/suggestions",
            chat_id=chat_id,
            params={"video_id": video_id, "cursor": cursor, "limit": limit},
        )

    async def get_studio_videos(
        self,
        chat_id: int,
        cursor: Optional[str] = None,
        limit: int = 10,
    ) -> Dict[str, Any]:
        return await self._request(
            "GET",
            "/studio/videos",
            chat_id=chat_id,
            params={"cursor": cursor, "limit": limit},
        )

    async def react_to_video(self, chat_id: int, video_id: UUID, reaction: str) -> Optional[str]:
        data = await self._request("POST", f"/videos/{video_id}/{reaction}", chat_id=chat_id)
        return data.get("reaction")

    async def toggle_subscription(self, chat_id: int, channel_id: UUID) -> bool:
        data = await self._request(
            "POST",
            "/subscriptions/toggle",
            chat_id=chat_id,
            json={"channel_id": str(channel_id)},
        )
        return data["subscribed"]

    async def create_comment(
        self,
        chat_id: int,
        video_id: UUID,
        content: str,
        parent_id: Optional[UUID] = None,
    ) -> Dict[str, Any]:
        payload = {"video_id": str(video_id), "content": content}
        if parent_id is not None:
            payload["parent_id"] = str(parent_id)
        return await self._request("POST", "/comments", chat_id=chat_id, json=payload)

    async def close(self):
        await self.client.aclose()
