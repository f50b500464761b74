from pagewise.utils.exceptions import (
    PaginationError,
    InvalidRequest,
    InvalidCursor,
    OrderingError,
    DataSourceError,
    CursorError,
    MalformedCursor,
    CursorVersionMismatch,
    CursorTypeMismatch,
)
from pagewise.utils.pagination import Page, CursorPage
from pagewise.utils.settings import PaginationSettings, SettingsResolver
from pagewise.utils.types import (
    Row,
    SortSpec,
    FilterSpec,
    get_field,
    DEFAULT_PAGE_SIZE,
    MAX_PAGE_SIZE,
    CURSOR_VERSION,
)

__all__ = [
    "PaginationError",
    "InvalidRequest",
    "InvalidCursor",
    "OrderingError",
    "DataSourceError",
    "CursorError",
    "MalformedCursor",
    "CursorVersionMismatch",
    "CursorTypeMismatch",
    "Page",
    "CursorPage",
    "PaginationSettings",
    "SettingsResolver",
    "Row",
    "SortSpec",
    "FilterSpec",
    "get_field",
    "DEFAULT_PAGE_SIZE",
    "MAX_PAGE_SIZE",
    "CURSOR_VERSION",
]
