from datetime import datetime, timezone
from typing import AsyncIterator

from sqlalchemy.ext.asyncio import AsyncSession, create_async_engine, async_sessionmaker
from sqlalchemy.orm import declarative_base
from sqlalchemy.pool import NullPool

from vidshare.core.config import DatabaseSettings

Base = declarative_base()

_engine = None
_AsyncSessionLocal = None

def get_engine():
    global _engine
    if _engine is None:
        db_settings = DatabaseSettings()
        _engine = create_async_engine(
            db_settings.database_url,
            echo=db_settings.debug_sql,
            poolclass=NullPool,
        )
    return _engine

def get_async_sessionmaker():
    global _AsyncSessionLocal
    if _AsyncSessionLocal is None:
        _AsyncSessionLocal = async_sessionmaker(
            bind=get_engine(),
            class_=AsyncSession,
            expire_on_commit=False,
            autoflush=False,
        )
    return _AsyncSessionLocal

async def get_db() -> AsyncIterator[AsyncSession]:
    async with get_async_sessionmaker()() as session:
        yield session

def load_models() -> None:
    from vidshare.models import categories, comments, reactions, subscriptions, users, video_views, videos  # noqa: F401


async def create_tables() -> None:
    load_models()
    async with get_engine().begin() as conn:
        await conn.run_sync(Base.metadata.create_all)


def utcnow() -> datetime:
    return datetime.now(timezone.utc)
