from __future__ import annotations

import logging
from typing import Sequence

from pagewise.core.ordering import OrderingPolicy
from pagewise.core.query import RangeQuery
from pagewise.lifecycle.observability import track_fetch
from pagewise.utils.exceptions import DataSourceError, InvalidRequest
from pagewise.utils.types import DEFAULT_PAGE_SIZE, MAX_PAGE_SIZE, Row

logger = logging.getLogger(__name__)


class BasePaginator:
    """Shared validation and fetching for both pagination strategies.

    Paginators hold read-only configuration only; every call is computed
    from its arguments, so one instance can serve concurrent requests.
    """

    strategy = ""

    def __init__(
        self,
        policy: OrderingPolicy,
        *,
        default_page_size: int | None = None,
        max_page_size: int = MAX_PAGE_SIZE,
    ) -> None:
        if default_page_size is None:
            default_page_size = min(DEFAULT_PAGE_SIZE, max_page_size)
        if not 1 <= default_page_size <= max_page_size:
            raise ValueError("default_page_size must be between 1 and max_page_size")
        self.policy = policy
        self.default_page_size = default_page_size
        self.max_page_size = max_page_size

    def _check_page_size(self, page_size: int | None) -> int:
        if page_size is None:
            return self.default_page_size
        if page_size < 1:
            raise InvalidRequest("page_size must be >= 1")
        if page_size > self.max_page_size:
            raise InvalidRequest(f"page_size must be <= {self.max_page_size}")
        return page_size

    async def _fetch(self, source, query: RangeQuery, skip: int = 0) -> Sequence[Row]:
        """Run exactly one range scan and enforce the row limit.

        Errors raised by the source propagate unchanged.
        """
        async with track_fetch(
            "fetch_range",
            source,
            strategy=self.strategy,
            direction=query.direction.value,
            limit=query.limit,
            skip=skip,
        ) as ctx:
            rows = await source.fetch_range(query, skip=skip)
            ctx["result_count"] = len(rows)
        if len(rows) > query.limit:
            raise DataSourceError(
                f"{type(source).__name__} returned {len(rows)} rows for a limit of {query.limit}"
            )
        return rows

    async def _count(self, source) -> int:
        async with track_fetch("count_total", source, strategy=self.strategy) as ctx:
            total = await source.count_total()
            ctx["result_count"] = total
        return total
