from collections import OrderedDict
from dataclasses import dataclass
from typing import Any, Dict, Optional, Tuple
from uuid import UUID

from loguru import logger

from vidshare_bot.core.callbacks import ListKind
from vidshare_bot.pagination.accumulator import Item, PageAccumulator, PageFetcher
from vidshare_bot.pagination.trigger import FetchTrigger, TriggerMode

ListKey = Tuple[int, ListKind]

MAX_CARDS_PER_CHAT = 20


@dataclass
class ListSession:
    kind: ListKind
    target: Optional[UUID]
    accumulator: PageAccumulator
    trigger: FetchTrigger


class SessionRegistry:
    """Per-chat list and card state.

    A chat holds at most one open list of each kind; opening another one
    closes the previous accumulator. Only the most recent cards of a chat
    are remembered.
    """

    def __init__(self, max_cards_per_chat: int = MAX_CARDS_PER_CHAT):
        self.max_cards_per_chat = max_cards_per_chat
        self._lists: Dict[ListKey, ListSession] = {}
        self._cards: Dict[int, "OrderedDict[int, Dict[str, Any]]"] = {}

    def open(
        self,
        chat_id: int,
        kind: ListKind,
        target: Optional[UUID],
        fetch: PageFetcher,
        limit: int,
    ) -> ListSession:
        key = (chat_id, kind)
        previous = self._lists.pop(key, None)
        if previous is not None:
            previous.accumulator.close()
            logger.debug(f"Closed previous {kind.value} list for chat {chat_id}")

        accumulator = PageAccumulator(fetch, limit)
        session = ListSession(
            kind=kind,
            target=target,
            accumulator=accumulator,
            trigger=FetchTrigger(accumulator, TriggerMode.MANUAL),
        )
        self._lists[key] = session
        return session

    def get(self, chat_id: int, kind: ListKind, target: Optional[UUID]) -> Optional[ListSession]:
        session = self._lists.get((chat_id, kind))
        if session is None or session.target != target:
            return None
        return session

    def find_item(self, chat_id: int, kind: ListKind, item_id: UUID) -> Optional[Item]:
        session = self._lists.get((chat_id, kind))
        if session is None:
            return None
        return session.accumulator.find(str(item_id))

    def close_chat(self, chat_id: int) -> None:
        for key in [key for key in self._lists if key[0] == chat_id]:
            self._lists.pop(key).accumulator.close()
        self._cards.pop(chat_id, None)

    def get_card(self, chat_id: int, message_id: int) -> Optional[Dict[str, Any]]:
        return self._cards.get(chat_id, {}).get(message_id)

    def set_card(self, chat_id: int, message_id: int, card: Dict[str, Any]) -> None:
        cards = self._cards.setdefault(chat_id, OrderedDict())
        cards[message_id] = card
        cards.move_to_end(message_id)
        while len(cards) > self.max_cards_per_chat:
            cards.popitem(last=False)
