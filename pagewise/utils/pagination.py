from __future__ import annotations

from dataclasses import dataclass
from typing import Generic, TypeVar

T = TypeVar("T")


@dataclass(frozen=True)
class Page(Generic[T]):
    """Offset-based pagination result.

    ``total_items`` and ``total_pages`` are ``None`` when the data source
    was not asked for a count.
    """

    items: tuple[T, ...]
    current_page: int
    page_size: int
    total_items: int | None
    total_pages: int | None
    has_next: bool
    has_prev: bool


@dataclass(frozen=True)
class CursorPage(Generic[T]):
    """Cursor-based pagination result.

    Items are always in the ordering policy's canonical order, whichever
    direction was used to fetch them.
    """

    items: tuple[T, ...]
    page_size: int
    next_cursor: str | None
    prev_cursor: str | None
    has_next: bool
    has_prev: bool
