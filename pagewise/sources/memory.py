from __future__ import annotations

from typing import Iterable

from pagewise.core.ordering import Direction, OrderingPolicy
from pagewise.core.query import RangeQuery
from pagewise.utils.types import Row


class InMemoryDataSource:
    """Range scans over an in-memory snapshot of rows.

    Rows are ordered once at construction; every row must carry both
    ordering fields.
    """

    def __init__(self, rows: Iterable[Row], policy: OrderingPolicy) -> None:
        self.policy = policy
        self._rows = sorted(
            rows,
            key=policy.sort_key_of,
            reverse=policy.scan_descending(Direction.FORWARD),
        )

    async def fetch_range(self, query: RangeQuery, *, skip: int = 0) -> list[Row]:
        rows = self._rows if query.direction is Direction.FORWARD else self._rows[::-1]
        if query.boundary is not None:
            rows = [
                row
                for row in rows
                if self.policy.follows(
                    self.policy.sort_key_of(row), query.boundary, query.direction, query.inclusive
                )
            ]
        return list(rows[skip : skip + query.limit])

    async def count_total(self) -> int:
        return len(self._rows)
