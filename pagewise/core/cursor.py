from __future__ import annotations

import logging
from datetime import date, datetime
from decimal import Decimal
from typing import Sequence
from uuid import UUID

from bson import ObjectId

from pagewise.core.assembler import PageAssembler
from pagewise.core.base import BasePaginator
from pagewise.core.codec import CursorCodec
from pagewise.core.ordering import Direction, OrderingPolicy
from pagewise.core.query import CursorPlan, RangeQuery
from pagewise.utils.exceptions import CursorError, InvalidCursor, InvalidRequest
from pagewise.utils.pagination import CursorPage
from pagewise.utils.settings import SettingsResolver
from pagewise.utils.types import MAX_PAGE_SIZE, Row

logger = logging.getLogger(__name__)

_CURSOR_TYPES = (bool, int, float, str, datetime, date, Decimal, UUID, ObjectId)


class CursorPaginator(BasePaginator):
    """Keyset pagination: each page resumes after the last key of the previous one.

    Pages fetched in sequence by one client never skip or repeat a row as
    long as rows already returned are not deleted and tie-breaker values
    never change. Rows inserted during the session may or may not show up.

    One range scan is issued per page, asking for ``page_size + 1`` rows; the
    extra row only tells whether another page exists and is never returned.
    """

    strategy = "cursor"

    def __init__(
        self,
        policy: OrderingPolicy,
        codec: CursorCodec | None = None,
        *,
        default_page_size: int | None = None,
        max_page_size: int = MAX_PAGE_SIZE,
    ) -> None:
        super().__init__(policy, default_page_size=default_page_size, max_page_size=max_page_size)
        self.codec = codec or CursorCodec(policy)

    @classmethod
    def for_model(cls, model: type) -> CursorPaginator:
        """Build a paginator and codec from a model's inner Settings class.

        Cursor values are checked against the model's annotations when those
        are plain cursor-encodable types.
        """
        settings = SettingsResolver.get_pagination_settings(model)
        policy = OrderingPolicy.for_model(model)
        codec = CursorCodec(
            policy,
            version=settings.cursor_version,
            secret=settings.cursor_secret,
            field_types=_field_types(model, policy),
        )
        return cls(
            policy,
            codec,
            default_page_size=settings.default_page_size,
            max_page_size=settings.max_page_size,
        )

    def plan(
        self,
        cursor: str | None = None,
        direction: Direction = Direction.FORWARD,
        page_size: int | None = None,
    ) -> CursorPlan:
        """Validate a cursor request and build its range scan.

        Raises:
            InvalidRequest: If ``page_size`` is out of bounds
            InvalidCursor: If the cursor cannot be decoded
        """
        page_size = self._check_page_size(page_size)
        try:
            direction = Direction(direction)
        except ValueError as e:
            raise InvalidRequest("direction must be one of: forward, backward") from e
        boundary = None
        if cursor is not None:
            try:
                boundary = self.codec.decode(cursor)
            except CursorError as e:
                logger.debug(f"Rejected cursor ({type(e).__name__}): {e}")
                raise InvalidCursor(f"Invalid cursor: {e}", reason=e) from e

        query = RangeQuery(
            boundary=boundary,
            direction=direction,
            limit=page_size + 1,
            inclusive=False,
        )
        return CursorPlan(
            page_size=page_size,
            direction=direction,
            query=query,
            has_cursor=boundary is not None,
        )

    def resolve(self, plan: CursorPlan, rows: Sequence[Row]) -> CursorPage:
        """Turn the rows of a range scan into a page.

        Rows arrive in scan order; backward pages are reversed so items are
        always in canonical order. A page has a successor in the scan
        direction when the sentinel row came back, and one in the opposite
        direction when the request resumed from a cursor.
        """
        has_more = len(rows) > plan.page_size
        items = list(rows[: plan.page_size])

        if plan.direction is Direction.BACKWARD:
            items.reverse()
            has_next, has_prev = plan.has_cursor, has_more
        else:
            has_next, has_prev = has_more, plan.has_cursor

        next_cursor = prev_cursor = None
        if items:
            if has_next:
                next_cursor = self.codec.encode(self.policy.sort_key_of(items[-1]))
            if has_prev:
                prev_cursor = self.codec.encode(self.policy.sort_key_of(items[0]))
        return PageAssembler.cursor_page(
            plan, items, next_cursor=next_cursor, prev_cursor=prev_cursor
        )

    async def paginate(
        self,
        source,
        cursor: str | None = None,
        direction: Direction = Direction.FORWARD,
        page_size: int | None = None,
    ) -> CursorPage:
        """Fetch one page from ``source``, resuming from ``cursor`` if given."""
        plan = self.plan(cursor, direction, page_size)
        rows = await self._fetch(source, plan.query)
        return self.resolve(plan, rows)


def _field_types(model: type, policy: OrderingPolicy) -> tuple[type | None, type | None] | None:
    model_fields = getattr(model, "model_fields", None)
    if not model_fields:
        return None
    types = []
    for name in (policy.primary_field, policy.tie_breaker_field):
        annotation = model_fields[name].annotation
        types.append(annotation if annotation in _CURSOR_TYPES else None)
    return tuple(types)
