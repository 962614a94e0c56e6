import hashlib
import hmac
import os
import time
import uuid
from datetime import datetime, timedelta

from vidshare_bot.core.exceptions import APIError

BOT_TOKEN = os.environ.get("TELEGRAM_BOT_TOKEN", "test-bot-token")
WEBHOOK_SECRET = "test-webhook-secret"
BASE_TIME = datetime(2024, 5, 1, 12, 0, 0)


def at(minutes: int) -> datetime:
    """A fixed naive UTC timestamp, ``minutes`` after the base time."""
    return BASE_TIME + timedelta(minutes=minutes)


def uid(n: int) -> uuid.UUID:
    """Deterministic ids whose ordering follows ``n``."""
    return uuid.UUID(int=n)


def bot_headers(user) -> dict:
    return {"X-Bot-Token": BOT_TOKEN, "X-Telegram-Chat-Id": str(user.telegram_chat_id)}


def mux_signature(body: bytes, secret: str = WEBHOOK_SECRET, timestamp: int = None) -> str:
    timestamp = int(time.time()) if timestamp is None else timestamp
    digest = hmac.new(secret.encode(), f"{timestamp}.".encode() + body, hashlib.sha256).hexdigest()
    return f"t={timestamp},v1={digest}"


class FakeListing:
    """A paged backend listing that uses the index of the next item as its cursor."""

    def __init__(self, items, fail_at=None):
        self.items = items
        self.calls = []
        self.fail_at = set(fail_at or [])
        self.gate = None

    async def __call__(self, cursor, limit):
        self.calls.append(cursor)
        if self.gate is not None:
            await self.gate.wait()
        if len(self.calls) in self.fail_at:
            raise APIError("Backend is unavailable")
        start = int(cursor) if cursor else 0
        end = start + limit
        return {
            "items": self.items[start:end],
            "next_cursor": str(end) if end < len(self.items) else None,
            "has_more": end < len(self.items),
            "total_count": len(self.items),
        }


def items(*ids):
    return [{"id": str(i)} for i in ids]
