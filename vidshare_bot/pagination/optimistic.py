from copy import deepcopy
from typing import Any, Awaitable, Callable, Dict, Generic, Optional, TypeVar

from loguru import logger

from vidshare_bot.core.exceptions import APIError

T = TypeVar("T")
R = TypeVar("R")


class OptimisticUpdate(Generic[T]):
    """Shows a speculative change right away and reconciles it with the server.

    ``run`` snapshots the current state, writes ``apply(state)`` and then awaits
    ``commit``. If the commit fails the snapshot is written back and the error
    re-raised. Either way ``refetch`` is awaited afterwards and its result
    replaces the local state.
    """

    def __init__(
        self,
        read: Callable[[], T],
        write: Callable[[T], Awaitable[None]],
        refetch: Optional[Callable[[], Awaitable[T]]] = None,
    ):
        self.read = read
        self.write = write
        self.refetch = refetch

    async def run(self, apply: Callable[[T], T], commit: Callable[[], Awaitable[R]]) -> R:
        snapshot = deepcopy(self.read())
        await self.write(apply(deepcopy(snapshot)))

        try:
            result = await commit()
        except Exception:
            logger.info("Optimistic update rejected, restoring previous state")
            await self.write(snapshot)
            raise
        finally:
            await self._settle()

        return result

    async def _settle(self) -> None:
        if self.refetch is None:
            return
        try:
            fresh = await self.refetch()
        except APIError as e:
            logger.warning(f"Could not refresh state after optimistic update: {e.detail}")
            return
        await self.write(fresh)


def toggle_reaction_counts(card: Dict[str, Any], reaction: str) -> Dict[str, Any]:
    current = card.get("viewer_reaction")
    count_field = {"like": "like_count", "dislike": "dislike_count"}

    if current in count_field:
        card[count_field[current]] = max(0, card.get(count_field[current], 0) - 1)

    if current == reaction:
        card["viewer_reaction"] = None
    else:
        card[count_field[reaction]] = card.get(count_field[reaction], 0) + 1
        card["viewer_reaction"] = reaction
    return card


def toggle_subscription_counts(card: Dict[str, Any]) -> Dict[str, Any]:
    subscribed = not card.get("viewer_subscribed", False)
    delta = 1 if subscribed else -1
    card["viewer_subscribed"] = subscribed
    card["subscriber_count"] = max(0, card.get("subscriber_count", 0) + delta)
    return card
