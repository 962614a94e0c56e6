"""Tests for the bot's per-chat list and card registry."""

from vidshare_bot.core.callbacks import ListKind
from vidshare_bot.pagination.sessions import SessionRegistry

from helpers import FakeListing, items, uid


def open_comments(registry, chat_id, video_id):
    return registry.open(chat_id, ListKind.COMMENTS, video_id, FakeListing(items(2, 1)), limit=1)


class TestLists:
    async def test_opening_another_videos_comments_closes_the_first(self):
        registry = SessionRegistry()
        first = open_comments(registry, 1, uid(10))
        await first.trigger.request()

        second = open_comments(registry, 1, uid(20))

        assert first.accumulator.closed is True
        assert second.accumulator.closed is False
        assert registry.get(1, ListKind.COMMENTS, uid(10)) is None
        assert registry.get(1, ListKind.COMMENTS, uid(20)) is second
        assert registry.find_item(1, ListKind.COMMENTS, "2") is None

    def test_many_lists_keep_one_per_kind(self):
        registry = SessionRegistry()
        sessions = [open_comments(registry, 1, uid(n)) for n in range(1, 501)]

        assert sum(not session.accumulator.closed for session in sessions) == 1

    def test_kinds_and_chats_are_independent(self):
        registry = SessionRegistry()
        comments = open_comments(registry, 1, uid(10))
        replies = registry.open(1, ListKind.REPLIES, uid(99), FakeListing([]), limit=5)
        other_chat = open_comments(registry, 2, uid(10))

        assert not comments.accumulator.closed
        assert not replies.accumulator.closed
        assert registry.get(2, ListKind.COMMENTS, uid(10)) is other_chat

    def test_close_chat(self):
        registry = SessionRegistry()
        session = open_comments(registry, 1, uid(10))
        registry.set_card(1, 100, {"id": "card"})

        registry.close_chat(1)

        assert session.accumulator.closed is True
        assert registry.get(1, ListKind.COMMENTS, uid(10)) is None
        assert registry.get_card(1, 100) is None


class TestCards:
    def test_only_recent_cards_are_kept(self):
        registry = SessionRegistry(max_cards_per_chat=3)
        for message_id in range(1, 6):
            registry.set_card(1, message_id, {"id": message_id})

        assert registry.get_card(1, 1) is None
        assert registry.get_card(1, 2) is None
        assert [registry.get_card(1, m)["id"] for m in (3, 4, 5)] == [3, 4, 5]

    def test_rewriting_a_card_refreshes_it(self):
        registry = SessionRegistry(max_cards_per_chat=2)
        registry.set_card(1, 1, {"likes": 0})
        registry.set_card(1, 2, {"likes": 0})
        registry.set_card(1, 1, {"likes": 1})
        registry.set_card(1, 3, {"likes": 0})

        assert registry.get_card(1, 1) == {"likes": 1}
        assert registry.get_card(1, 2) is None

    def test_cards_are_per_chat(self):
        registry = SessionRegistry(max_cards_per_chat=1)
        registry.set_card(1, 1, {"chat": 1})
        registry.set_card(2, 1, {"chat": 2})

        assert registry.get_card(1, 1) == {"chat": 1}
        assert registry.get_card(2, 1) == {"chat": 2}
