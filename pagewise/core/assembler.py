from __future__ import annotations

from typing import NamedTuple, Sequence

from pagewise.core.query import CursorPlan, OffsetPlan
from pagewise.utils.pagination import CursorPage, Page
from pagewise.utils.types import Row


class OffsetMetadata(NamedTuple):
    """Navigation metadata of an offset page."""

    total_items: int | None
    total_pages: int | None
    has_next: bool
    has_prev: bool


class PageAssembler:
    """Builds client-facing page values from fetched rows.

    Pure transformation; rows passed in must already be in the ordering
    policy's canonical (forward) order, apart from the trailing sentinel row
    of an offset fetch, which is dropped here.
    """

    @staticmethod
    def offset_page(plan: OffsetPlan, rows: Sequence[Row], metadata: OffsetMetadata) -> Page:
        """Build an offset Page, keeping at most ``plan.page_size`` items."""
        return Page(
            items=tuple(rows[: plan.page_size]),
            current_page=plan.page,
            page_size=plan.page_size,
            total_items=metadata.total_items,
            total_pages=metadata.total_pages,
            has_next=metadata.has_next,
            has_prev=metadata.has_prev,
        )

    @staticmethod
    def cursor_page(
        plan: CursorPlan,
        items: Sequence[Row],
        *,
        next_cursor: str | None = None,
        prev_cursor: str | None = None,
    ) -> CursorPage:
        """Build a CursorPage. Navigation flags follow the issued cursors.

        An empty page never carries cursors.
        """
        if not items:
            next_cursor = prev_cursor = None
        return CursorPage(
            items=tuple(items),
            page_size=plan.page_size,
            next_cursor=next_cursor,
            prev_cursor=prev_cursor,
            has_next=next_cursor is not None,
            has_prev=prev_cursor is not None,
        )
