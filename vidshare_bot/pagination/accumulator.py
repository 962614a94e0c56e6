from dataclasses import dataclass, field
from typing import Any, Awaitable, Callable, Dict, List, Optional

from loguru import logger

from vidshare_bot.core.exceptions import APIError

Item = Dict[str, Any]
PageFetcher = Callable[[Optional[str], int], Awaitable[Dict[str, Any]]]


@dataclass
class FetchedPage:
    cursor: Optional[str]
    items: List[Item] = field(default_factory=list)
    next_cursor: Optional[str] = None
    total_count: Optional[int] = None


class PageAccumulator:
    """Grows one list out of sequential cursor page fetches.

    Pages are requested strictly one after another: a call made while a fetch
    is in flight does nothing. A failed fetch leaves the pages untouched so
    the same cursor can simply be requested again.
    """

    def __init__(self, fetch: PageFetcher, limit: int, key: Callable[[Item], Any] = None):
        self.fetch = fetch
        self.limit = limit
        self.key = key or (lambda item: item["id"])
        self.pages: List[FetchedPage] = []
        self.error: Optional[APIError] = None
        self.closed = False
        self._fetching = False

    @property
    def next_cursor(self) -> Optional[str]:
        return self.pages[-1].next_cursor if self.pages else None

    @property
    def has_next_page(self) -> bool:
        if self.closed:
            return False
        return not self.pages or self.pages[-1].next_cursor is not None

    @property
    def is_fetching(self) -> bool:
        return self._fetching

    @property
    def total_count(self) -> Optional[int]:
        return self.pages[-1].total_count if self.pages else None

    @property
    def items(self) -> List[Item]:
        seen = set()
        flattened = []
        for page in self.pages:
            for item in page.items:
                item_key = self.key(item)
                if item_key in seen:
                    continue
                seen.add(item_key)
                flattened.append(item)
        return flattened

    async def fetch_next_page(self) -> bool:
        """Fetch and append the next page. Returns True when a page was appended."""
        if self._fetching or not self.has_next_page:
            return False

        cursor = self.next_cursor
        self._fetching = True
        try:
            data = await self.fetch(cursor, self.limit)
        except APIError as e:
            if not self.closed:
                self.error = e
            logger.warning(f"Page fetch failed at cursor {cursor}: {e.detail}")
            return False
        finally:
            self._fetching = False

        if self.closed:
            logger.debug(f"Discarding page fetched at cursor {cursor} for a closed list")
            return False

        self.error = None
        self.pages.append(
            FetchedPage(
                cursor=cursor,
                items=list(data.get("items", [])),
                next_cursor=data.get("next_cursor"),
                total_count=data.get("total_count"),
            )
        )
        return True

    def find(self, item_key: Any) -> Optional[Item]:
        for item in self.items:
            if self.key(item) == item_key:
                return item
        return None

    def close(self) -> None:
        self.closed = True
