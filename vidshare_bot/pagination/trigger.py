from enum import Enum

from vidshare_bot.pagination.accumulator import PageAccumulator


class TriggerMode(str, Enum):
    MANUAL = "manual"
    AUTOMATIC = "automatic"


class TriggerState(str, Enum):
    IDLE = "idle"
    FETCHING = "fetching"
    EXHAUSTED = "exhausted"


class FetchTrigger:
    """Decides when an accumulator may load its next page.

    Manual triggers fire on ``request()``. Automatic triggers fire when the
    end-of-list marker goes from hidden to visible, once per transition.
    """

    def __init__(
        self,
        accumulator: PageAccumulator,
        mode: TriggerMode = TriggerMode.MANUAL,
        lookahead: int = 0,
    ):
        self.accumulator = accumulator
        self.mode = mode
        self.lookahead = lookahead
        self._visible = False

    @property
    def state(self) -> TriggerState:
        if self.accumulator.is_fetching:
            return TriggerState.FETCHING
        if not self.accumulator.has_next_page:
            return TriggerState.EXHAUSTED
        return TriggerState.IDLE

    @property
    def enabled(self) -> bool:
        return self.state == TriggerState.IDLE

    async def request(self) -> bool:
        if not self.enabled:
            return False
        return await self.accumulator.fetch_next_page()

    async def observe(self, visible: bool) -> bool:
        if self.mode != TriggerMode.AUTOMATIC:
            return False

        became_visible = visible and not self._visible
        self._visible = visible
        if not became_visible:
            return False
        return await self.request()

    async def observe_remaining(self, remaining: int) -> bool:
        """Treat the marker as visible once at most ``lookahead`` items are left to show."""
        return await self.observe(remaining <= self.lookahead)
