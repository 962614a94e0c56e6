"""End-to-end tests: the bot's API client and accumulator against the app."""

import httpx
import pytest

from vidshare.main import app
from vidshare.models.comments import Comment
from vidshare_bot.clients.api_client import APIClient
from vidshare_bot.core.callbacks import ListKind
from vidshare_bot.core.config import BotSettings
from vidshare_bot.core.exceptions import APIError
from vidshare_bot.pagination.accumulator import PageAccumulator
from vidshare_bot.pagination.sessions import SessionRegistry

from helpers import BOT_TOKEN, at, uid


@pytest.fixture
async def api_client(client):
    settings = BotSettings(bot_token=BOT_TOKEN, backend_api_url="http://test", comments_page_size=5)
    api = APIClient(settings, transport=httpx.ASGITransport(app=app))
    yield api
    await api.close()


@pytest.fixture
async def commented_video(db_session, make_video, alice, bob):
    video = await make_video(alice)
    db_session.add_all(
        Comment(id=uid(n), video_id=video.id, user_id=bob.id, content=f"c{n}", updated_at=at(n))
        for n in range(1, 8)
    )
    await db_session.commit()
    return video


async def test_register_user(api_client):
    registration = await api_client.register_user(telegram_chat_id=4242, name="Dana")

    assert registration["is_new"] is True
    assert registration["user"]["name"] == "Dana"


async def test_register_with_wrong_token_returns_none(client):
    settings = BotSettings(bot_token="wrong", backend_api_url="http://test")
    api = APIClient(settings, transport=httpx.ASGITransport(app=app))

    assert await api.register_user(telegram_chat_id=1, name="Eve") is None
    await api.close()


async def test_accumulator_walks_comment_pages(api_client, commented_video, alice):
    registry = SessionRegistry()
    session = registry.open(
        alice.telegram_chat_id,
        ListKind.COMMENTS,
        commented_video.id,
        lambda cursor, limit: api_client.get_comments(alice.telegram_chat_id, commented_video.id, cursor, limit),
        limit=5,
    )

    await session.trigger.request()
    await session.trigger.request()

    assert [item["content"] for item in session.accumulator.items] == ["c7", "c6", "c5", "c4", "c3", "c2", "c1"]
    assert session.accumulator.total_count == 7
    assert session.trigger.state.value == "exhausted"
    assert registry.find_item(alice.telegram_chat_id, ListKind.COMMENTS, uid(3))["content"] == "c3"


async def test_reopening_a_list_closes_the_old_one(api_client, commented_video, alice):
    registry = SessionRegistry()

    def fetch(cursor, limit):
        return api_client.get_comments(alice.telegram_chat_id, commented_video.id, cursor, limit)

    old = registry.open(alice.telegram_chat_id, ListKind.COMMENTS, commented_video.id, fetch, limit=5)
    new = registry.open(alice.telegram_chat_id, ListKind.COMMENTS, commented_video.id, fetch, limit=5)

    assert old.accumulator.closed is True
    assert registry.get(alice.telegram_chat_id, ListKind.COMMENTS, commented_video.id) is new


async def test_missing_video_surfaces_as_non_transient_error(api_client, alice):
    accumulator = PageAccumulator(
        lambda cursor, limit: api_client.get_suggestions(alice.telegram_chat_id, uid(404), cursor, limit),
        limit=5,
    )

    assert await accumulator.fetch_next_page() is False
    assert accumulator.error.status_code == 404
    assert accumulator.error.is_transient is False


async def test_reaction_and_subscription(api_client, make_video, alice, bob):
    video = await make_video(alice)

    assert await api_client.react_to_video(bob.telegram_chat_id, video.id, "like") == "like"
    assert await api_client.toggle_subscription(bob.telegram_chat_id, alice.id) is True

    card = await api_client.get_video(bob.telegram_chat_id, video.id)
    assert card["like_count"] == 1
    assert card["viewer_subscribed"] is True


async def test_nested_reply_error_detail(api_client, make_video, make_comment, alice, bob):
    video = await make_video(alice)
    top = await make_comment(video, alice)
    reply = await api_client.create_comment(bob.telegram_chat_id, video.id, "reply", parent_id=top.id)

    with pytest.raises(APIError) as excinfo:
        await api_client.create_comment(alice.telegram_chat_id, video.id, "nested", parent_id=reply["id"])

    assert excinfo.value.status_code == 400
    assert excinfo.value.detail == "Replies to replies are not allowed."
