"""Keyset pagination over ``(updated_at DESC, id DESC)``.

Every paginated model exposes ``id`` and ``updated_at`` columns. The pair is
unique, so "strictly after the cursor" is well defined even when several rows
share a timestamp.
"""

from dataclasses import dataclass, replace
from typing import Any, Callable, Generic, List, Optional, TypeVar

from loguru import logger
from sqlalchemy import Select, and_, func, or_, select
from sqlalchemy.ext.asyncio import AsyncSession

from vidshare.core.exceptions import ValidationError
from vidshare.pagination.cursor import Cursor

MIN_PAGE_SIZE = 1
MAX_PAGE_SIZE = 100

T = TypeVar("T")
U = TypeVar("U")


@dataclass
class KeysetPage(Generic[T]):
    items: List[T]
    has_more: bool
    next_cursor: Optional[Cursor]
    total_count: Optional[int] = None

    def map(self, fn: Callable[[T], U]) -> "KeysetPage[U]":
        return replace(self, items=[fn(item) for item in self.items])


def keyset_predicate(model, cursor: Cursor):
    return or_(
        model.updated_at < cursor.updated_at,
        and_(model.updated_at == cursor.updated_at, model.id < cursor.id),
    )


def newest_first(stmt: Select, model) -> Select:
    return stmt.order_by(model.updated_at.desc(), model.id.desc())


async def fetch_page(
    db: AsyncSession,
    stmt: Select,
    model,
    cursor: Optional[Cursor],
    limit: int,
) -> KeysetPage[Any]:
    """Run ``stmt`` as one page of a keyset traversal.

    ``stmt`` must select ``model`` as its first column and already carry the
    listing's own filters. The returned items are the result rows; the next
    cursor is taken from the entity in the last returned row.
    """
    if not MIN_PAGE_SIZE <= limit <= MAX_PAGE_SIZE:
        raise ValidationError(f"limit must be between {MIN_PAGE_SIZE} and {MAX_PAGE_SIZE}")

    if cursor is not None:
        stmt = stmt.where(keyset_predicate(model, cursor))
    # one extra row tells us whether another page exists
    stmt = newest_first(stmt, model).limit(limit + 1)

    result = await db.execute(stmt)
    rows = list(result.all())

    has_more = len(rows) > limit
    items = rows[:limit]
    next_cursor = Cursor.from_entity(items[-1][0]) if has_more else None

    logger.debug(
        f"Fetched {len(items)} {model.__tablename__} rows "
        f"(cursor={cursor.id if cursor else None}, limit={limit}, has_more={has_more})"
    )
    return KeysetPage(items=items, has_more=has_more, next_cursor=next_cursor)


async def count_matching(db: AsyncSession, model, *criteria) -> int:
    stmt = select(func.count()).select_from(model).where(*criteria)
    result = await db.execute(stmt)
    count = result.scalar_one()
    return int(count) if count is not None else 0
