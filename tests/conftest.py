"""Shared fixtures: an in-memory database, seeded rows and an API client."""

import os
from itertools import count

os.environ.setdefault("SECRET_KEY", "test-secret-key-with-at-least-32-characters")
os.environ.setdefault("REFRESH_TOKEN_SECRET_KEY", "test-refresh-secret-key-with-32-characters")
os.environ.setdefault("TELEGRAM_BOT_TOKEN", "test-bot-token")
os.environ.setdefault("GIGA_AUTH_KEY", "test-giga-key")
os.environ.setdefault("POSTGRES_USER", "test")
os.environ.setdefault("POSTGRES_PASSWORD", "test")
os.environ.setdefault("POSTGRES_DB", "test")
os.environ.setdefault("LOG_FILE", "logs/test.log")

import httpx
import pytest
from sqlalchemy import event
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

from vidshare.api.deps import get_arq_pool, get_mux_client, get_mux_settings
from vidshare.core.config import MuxSettings
from vidshare.db.database import Base, get_db, load_models
from vidshare.main import app
from vidshare.models.comments import Comment
from vidshare.models.users import Users
from vidshare.models.videos import Video, VideoVisibility
from vidshare.services.mux_client import MuxClient

from helpers import WEBHOOK_SECRET

_chat_ids = count(1000)


class MuxRecorder:
    """httpx transport handler standing in for the media pipeline API."""

    def __init__(self):
        self.requests = []
        self.fail_deletes = False
        self.transcript = "A walkthrough of keyset pagination in a video app."

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        if request.method == "POST" and request.url.path == "/video/v1/uploads":
            return httpx.Response(
                201, json={"data": {"id": f"upload-{len(self.requests)}", "url": "https://uploads.test/put"}}
            )
        if request.method == "DELETE":
            return httpx.Response(500 if self.fail_deletes else 204)
        if request.url.path.endswith(".txt"):
            return httpx.Response(200, text=self.transcript)
        return httpx.Response(404)


class FakeJob:
    def __init__(self, job_id: str):
        self.job_id = job_id


class FakeArqPool:
    def __init__(self):
        self.jobs = []

    async def enqueue_job(self, function: str, *args):
        self.jobs.append((function, args))
        return FakeJob(f"job-{len(self.jobs)}")


@pytest.fixture
async def engine():
    engine = create_async_engine(
        "sqlite+aiosqlite://",
        poolclass=StaticPool,
        connect_args={"check_same_thread": False},
    )

    @event.listens_for(engine.sync_engine, "connect")
    def _enable_foreign_keys(dbapi_connection, connection_record):
        cursor = dbapi_connection.cursor()
        cursor.execute("PRAGMA foreign_keys=ON")
        cursor.close()

    load_models()
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    await engine.dispose()


@pytest.fixture
async def db_session(engine):
    sessionmaker = async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False, autoflush=False)
    async with sessionmaker() as session:
        yield session


@pytest.fixture
def session_factory(engine):
    return async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False, autoflush=False)


@pytest.fixture
def make_user(db_session):
    async def _make_user(name: str = "viewer", **kwargs) -> Users:
        user = Users(telegram_chat_id=next(_chat_ids), name=name, **kwargs)
        db_session.add(user)
        await db_session.commit()
        await db_session.refresh(user)
        return user

    return _make_user


@pytest.fixture
def make_video(db_session):
    async def _make_video(uploader: Users, **kwargs) -> Video:
        kwargs.setdefault("title", "A video")
        kwargs.setdefault("visibility", VideoVisibility.PUBLIC)
        video = Video(uploader_id=uploader.id, **kwargs)
        db_session.add(video)
        await db_session.commit()
        await db_session.refresh(video)
        return video

    return _make_video


@pytest.fixture
def make_comment(db_session):
    async def _make_comment(video: Video, user: Users, **kwargs) -> Comment:
        kwargs.setdefault("content", "Nice one")
        comment = Comment(video_id=video.id, user_id=user.id, **kwargs)
        db_session.add(comment)
        await db_session.commit()
        await db_session.refresh(comment)
        return comment

    return _make_comment


@pytest.fixture
async def alice(make_user):
    return await make_user("Alice")


@pytest.fixture
async def bob(make_user):
    return await make_user("Bob")


@pytest.fixture
def mux_recorder():
    return MuxRecorder()


@pytest.fixture
async def mux_client(mux_recorder):
    client = MuxClient(MuxSettings(), transport=httpx.MockTransport(mux_recorder))
    yield client
    await client.close()


@pytest.fixture
def arq_pool():
    return FakeArqPool()


@pytest.fixture
async def client(db_session, mux_client, arq_pool):
    async def _override_get_db():
        yield db_session

    async def _override_get_arq_pool():
        yield arq_pool

    app.dependency_overrides[get_db] = _override_get_db
    app.dependency_overrides[get_mux_client] = lambda: mux_client
    app.dependency_overrides[get_mux_settings] = lambda: MuxSettings(
        mux_webhook_signing_secret=WEBHOOK_SECRET
    )
    app.dependency_overrides[get_arq_pool] = _override_get_arq_pool

    transport = httpx.ASGITransport(app=app)
    async with httpx.AsyncClient(transport=transport, base_url="http://test") as http_client:
        yield http_client

    app.dependency_overrides.clear()
