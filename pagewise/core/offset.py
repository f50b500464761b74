from __future__ import annotations

import logging
import math

from pagewise.core.assembler import OffsetMetadata, PageAssembler
from pagewise.core.base import BasePaginator
from pagewise.core.ordering import Direction, OrderingPolicy
from pagewise.core.query import OffsetPlan, RangeQuery
from pagewise.utils.exceptions import InvalidRequest
from pagewise.utils.pagination import Page
from pagewise.utils.settings import SettingsResolver

logger = logging.getLogger(__name__)


class OffsetPaginator(BasePaginator):
    """Page-number pagination: skips ``(page - 1) * page_size`` rows.

    The mapping from ``(page, page_size)`` to skip/limit is deterministic,
    but pages are not stable while the dataset changes: inserts or deletes
    ahead of the offset shift rows, so a client may see a row twice or not
    at all. Use CursorPaginator where that matters.
    """

    strategy = "offset"

    @classmethod
    def for_model(cls, model: type) -> OffsetPaginator:
        """Build a paginator from a model's inner Settings class."""
        settings = SettingsResolver.get_pagination_settings(model)
        return cls(
            OrderingPolicy.for_model(model),
            default_page_size=settings.default_page_size,
            max_page_size=settings.max_page_size,
        )

    def plan(self, page: int = 1, page_size: int | None = None) -> OffsetPlan:
        """Validate an offset request and compute its skip/limit pair.

        One row past the page is requested so ``has_next`` is known even
        without a total count.

        Raises:
            InvalidRequest: If ``page < 1`` or ``page_size`` is out of bounds
        """
        if page < 1:
            raise InvalidRequest("page must be >= 1")
        page_size = self._check_page_size(page_size)
        skip = (page - 1) * page_size
        query = RangeQuery(boundary=None, direction=Direction.FORWARD, limit=page_size + 1)
        logger.debug(f"Offset plan: page={page} page_size={page_size} skip={skip}")
        return OffsetPlan(page=page, page_size=page_size, skip=skip, query=query)

    @staticmethod
    def metadata(
        page: int,
        page_size: int,
        total_items: int | None = None,
        *,
        has_more: bool = False,
    ) -> OffsetMetadata:
        """Compute navigation metadata.

        With ``total_items`` the totals decide ``has_next``; without it,
        ``has_more`` (whether a row past the page was fetched) does.
        """
        if total_items is None:
            return OffsetMetadata(None, None, has_more, page > 1)
        total_pages = math.ceil(total_items / page_size)
        return OffsetMetadata(total_items, total_pages, page < total_pages, page > 1)

    async def paginate(
        self,
        source,
        page: int = 1,
        page_size: int | None = None,
        *,
        with_total: bool = True,
    ) -> Page:
        """Fetch one offset page from ``source``.

        ``count_total`` is only called when ``with_total`` is set and the
        source provides it; otherwise the totals are ``None``.
        """
        plan = self.plan(page, page_size)
        total = None
        if with_total and hasattr(source, "count_total"):
            total = await self._count(source)
        rows = await self._fetch(source, plan.query, skip=plan.skip)
        metadata = self.metadata(
            plan.page, plan.page_size, total, has_more=len(rows) > plan.page_size
        )
        return PageAssembler.offset_page(plan, rows, metadata)
