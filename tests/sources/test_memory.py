from pagewise import (
    CountableDataSource,
    DataSource,
    Direction,
    InMemoryDataSource,
    OrderingPolicy,
    RangeQuery,
    SortKey,
)


def _ids(rows):
    return [row["id"] for row in rows]


class TestInMemoryDataSource:
    async def test_implements_protocols(self, five_rows):
        assert isinstance(five_rows, DataSource)
        assert isinstance(five_rows, CountableDataSource)

    async def test_rows_sorted_on_construction(self, policy, make_rows):
        source = InMemoryDataSource(reversed(make_rows(4)), policy)
        rows = await source.fetch_range(RangeQuery(None, Direction.FORWARD, limit=10))
        assert _ids(rows) == [1, 2, 3, 4]

    async def test_exclusive_boundary_forward(self, five_rows):
        rows = await five_rows.fetch_range(RangeQuery(SortKey(2, 2), Direction.FORWARD, limit=10))
        assert _ids(rows) == [3, 4, 5]

    async def test_inclusive_boundary(self, five_rows):
        query = RangeQuery(SortKey(2, 2), Direction.FORWARD, limit=2, inclusive=True)
        rows = await five_rows.fetch_range(query)
        assert _ids(rows) == [2, 3]

    async def test_backward_scan_is_reversed(self, five_rows):
        rows = await five_rows.fetch_range(RangeQuery(SortKey(4, 4), Direction.BACKWARD, limit=2))
        assert _ids(rows) == [3, 2]

    async def test_skip(self, five_rows):
        rows = await five_rows.fetch_range(RangeQuery(None, Direction.FORWARD, limit=2), skip=3)
        assert _ids(rows) == [4, 5]

    async def test_tie_breaker_orders_equal_primaries(self):
        policy = OrderingPolicy.parse("-score")
        rows = [{"id": 1, "score": 5}, {"id": 3, "score": 5}, {"id": 2, "score": 7}]
        source = InMemoryDataSource(rows, policy)
        fetched = await source.fetch_range(RangeQuery(None, Direction.FORWARD, limit=5))
        assert _ids(fetched) == [2, 3, 1]

    async def test_count_total(self, five_rows):
        assert await five_rows.count_total() == 5
