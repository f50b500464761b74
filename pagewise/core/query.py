from __future__ import annotations

from dataclasses import dataclass

from pagewise.core.ordering import Direction, SortKey
from pagewise.utils.exceptions import InvalidRequest


@dataclass(frozen=True)
class RangeQuery:
    """Bounded range scan handed to a data source.

    Rows must be returned in the scan order of ``direction``, strictly past
    ``boundary`` (or at it when ``inclusive``), at most ``limit`` of them.
    """

    boundary: SortKey | None
    direction: Direction
    limit: int
    inclusive: bool = False

    def __post_init__(self) -> None:
        if self.limit < 1:
            raise InvalidRequest("limit must be >= 1")


@dataclass(frozen=True)
class OffsetPlan:
    """Offset request resolved into a skip/limit pair."""

    page: int
    page_size: int
    skip: int
    query: RangeQuery


@dataclass(frozen=True)
class CursorPlan:
    """Cursor request resolved into a keyset range scan."""

    page_size: int
    direction: Direction
    query: RangeQuery
    has_cursor: bool
