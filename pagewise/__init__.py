from pagewise.core import (
    Direction,
    OrderingPolicy,
    SortKey,
    RangeQuery,
    CursorCodec,
    PageAssembler,
    OffsetPaginator,
    CursorPaginator,
)
from pagewise.sources import (
    DataSource,
    CountableDataSource,
    InMemoryDataSource,
    MongoDataSource,
)
from pagewise.lifecycle import (
    enable_tracing,
    disable_tracing,
    PageEvent,
    add_listener,
)
from pagewise.utils import (
    PaginationError,
    InvalidRequest,
    InvalidCursor,
    OrderingError,
    DataSourceError,
    CursorError,
    MalformedCursor,
    CursorVersionMismatch,
    CursorTypeMismatch,
    Page,
    CursorPage,
    PaginationSettings,
)

__all__ = [
    # Core
    "Direction",
    "OrderingPolicy",
    "SortKey",
    "RangeQuery",
    "CursorCodec",
    "PageAssembler",
    "OffsetPaginator",
    "CursorPaginator",
    # Sources
    "DataSource",
    "CountableDataSource",
    "InMemoryDataSource",
    "MongoDataSource",
    # Lifecycle
    "enable_tracing",
    "disable_tracing",
    "PageEvent",
    "add_listener",
    # Utils
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
]
