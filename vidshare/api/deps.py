from typing import Any, AsyncIterator, Dict, Optional

from arq import ArqRedis, create_pool
from arq.connections import RedisSettings as ArqRedisSettings

from vidshare.core.config import MuxSettings, PaginationSettings, RedisSettings
from vidshare.pagination.cursor import Cursor, CursorCodec
from vidshare.pagination.keyset import KeysetPage
from vidshare.schemas.pagination import Page
from vidshare.services.mux_client import MuxClient

pagination_settings = PaginationSettings()

_mux_client = None


def get_mux_client() -> MuxClient:
    global _mux_client
    if _mux_client is None:
        _mux_client = MuxClient(MuxSettings())
    return _mux_client


def get_mux_settings() -> MuxSettings:
    return MuxSettings()


async def get_arq_pool() -> AsyncIterator[ArqRedis]:
    redis_config = RedisSettings()
    redis_settings = ArqRedisSettings(
        host=redis_config.redis_host,
        port=redis_config.redis_port,
        password=redis_config.redis_password,
    )
    pool = await create_pool(redis_settings)
    try:
        yield pool
    finally:
        await pool.close()


def decode_cursor(token: Optional[str], filters: Dict[str, Any]) -> Optional[Cursor]:
    if not token:
        return None
    return CursorCodec.decode(token, filters)


def to_page(page: KeysetPage, filters: Dict[str, Any]) -> Page:
    next_cursor = CursorCodec.encode(page.next_cursor, filters) if page.next_cursor else None
    return Page(
        items=page.items,
        next_cursor=next_cursor,
        has_more=page.has_more,
        total_count=page.total_count,
    )
