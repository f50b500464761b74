from pagewise.core.ordering import Direction, OrderingPolicy, SortKey
from pagewise.core.query import CursorPlan, OffsetPlan, RangeQuery
from pagewise.core.codec import CursorCodec
from pagewise.core.assembler import OffsetMetadata, PageAssembler
from pagewise.core.offset import OffsetPaginator
from pagewise.core.cursor import CursorPaginator

__all__ = [
    "Direction",
    "OrderingPolicy",
    "SortKey",
    "CursorPlan",
    "OffsetPlan",
    "RangeQuery",
    "CursorCodec",
    "OffsetMetadata",
    "PageAssembler",
    "OffsetPaginator",
    "CursorPaginator",
]
