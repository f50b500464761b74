from __future__ import annotations

from typing import Protocol, Sequence, runtime_checkable

from pagewise.core.query import RangeQuery
from pagewise.utils.types import Row


@runtime_checkable
class DataSource(Protocol):
    """Ordered data source with range-scan semantics.

    ``fetch_range`` must return rows ordered by the ordering policy in the
    scan order of ``query.direction``, skip ``skip`` matching rows, return at
    most ``query.limit`` rows, and honour ``query.boundary``/``inclusive`` as
    a filter on the ordering fields. Failures should be raised as
    ``DataSourceError``.
    """

    async def fetch_range(self, query: RangeQuery, *, skip: int = 0) -> Sequence[Row]: ...


@runtime_checkable
class CountableDataSource(DataSource, Protocol):
    """Data source that can also report the total number of rows."""

    async def count_total(self) -> int: ...
