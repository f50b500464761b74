from __future__ import annotations

import json
from datetime import date, datetime
from decimal import Decimal
from typing import Any, Generic, TypeVar
from uuid import UUID

from bson import ObjectId
from fastapi.responses import JSONResponse
from pydantic import BaseModel

from pagewise.core.ordering import Direction
from pagewise.utils.exceptions import InvalidCursor, InvalidRequest, PaginationError
from pagewise.utils.pagination import CursorPage, Page

T = TypeVar("T")


class BSONJSONResponse(JSONResponse):
    """JSONResponse that serializes ObjectId, datetime, UUID and Decimal values.

    Lets endpoints return raw MongoDB rows straight from MongoDataSource.
    """

    def render(self, content: Any) -> bytes:
        """Render content to JSON, handling BSON and temporal values."""
        def default_handler(obj: Any) -> Any:
            if isinstance(obj, (ObjectId, UUID, Decimal)):
                return str(obj)
            if isinstance(obj, (datetime, date)):
                return obj.isoformat()
            if isinstance(obj, BaseModel):
                return obj.model_dump(mode="json")
            raise TypeError(f"Object of type {type(obj).__name__} is not JSON serializable")

        return json.dumps(content, default=default_handler, separators=(",", ":")).encode("utf-8")


def register_exception_handlers(app: Any) -> None:
    """Register pagewise exception handlers on a FastAPI app.

    Request and cursor errors are client errors (400); data-source failures
    and any other pagination error are server errors (500).
    """
    @app.exception_handler(InvalidRequest)
    async def invalid_request_handler(request: Any, exc: InvalidRequest):
        return JSONResponse(status_code=400, content={"detail": str(exc)})

    @app.exception_handler(InvalidCursor)
    async def invalid_cursor_handler(request: Any, exc: InvalidCursor):
        return JSONResponse(status_code=400, content={"detail": str(exc)})

    @app.exception_handler(PaginationError)
    async def pagination_error_handler(request: Any, exc: PaginationError):
        return JSONResponse(status_code=500, content={"detail": str(exc)})


class OffsetParams:
    """FastAPI dependency for offset pagination parameters.

    Bounds are checked by OffsetPaginator, which raises InvalidRequest.
    """

    def __init__(self, page: int = 1, page_size: int | None = None):
        self.page = page
        self.page_size = page_size


class CursorParams:
    """FastAPI dependency for cursor pagination parameters.

    ``direction`` is taken as a plain string so an unknown value reaches
    CursorPaginator.plan and is answered with 400 like other bad requests.
    """

    def __init__(
        self,
        cursor: str | None = None,
        direction: str = Direction.FORWARD.value,
        page_size: int | None = None,
    ):
        self.cursor = cursor
        self.direction = direction
        self.page_size = page_size


class PageResponse(BaseModel, Generic[T]):
    """Offset-paginated response model for API endpoints."""

    items: list[T]
    current_page: int
    page_size: int
    total_items: int | None = None
    total_pages: int | None = None
    has_next: bool
    has_prev: bool

    @classmethod
    def from_page(cls, page_obj: Page) -> PageResponse:
        return cls(
            items=list(page_obj.items),
            current_page=page_obj.current_page,
            page_size=page_obj.page_size,
            total_items=page_obj.total_items,
            total_pages=page_obj.total_pages,
            has_next=page_obj.has_next,
            has_prev=page_obj.has_prev,
        )


class CursorPageResponse(BaseModel, Generic[T]):
    """Cursor-paginated response model for API endpoints."""

    items: list[T]
    page_size: int
    next_cursor: str | None = None
    prev_cursor: str | None = None
    has_next: bool
    has_prev: bool

    @classmethod
    def from_page(cls, page_obj: CursorPage) -> CursorPageResponse:
        return cls(
            items=list(page_obj.items),
            page_size=page_obj.page_size,
            next_cursor=page_obj.next_cursor,
            prev_cursor=page_obj.prev_cursor,
            has_next=page_obj.has_next,
            has_prev=page_obj.has_prev,
        )
