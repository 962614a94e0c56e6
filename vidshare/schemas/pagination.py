from typing import Generic, List, Optional, TypeVar

from pydantic import BaseModel, Field

T = TypeVar("T")


class Page(BaseModel, Generic[T]):
    items: List[T]
    next_cursor: Optional[str] = Field(
        default=None, description="Opaque token for the next page, null on the last page"
    )
    has_more: bool = Field(default=False)
    total_count: Optional[int] = Field(
        default=None, description="Size of the whole filtered collection, computed independently of the page"
    )
