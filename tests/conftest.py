import pytest
import pytest_asyncio
from pymongo import AsyncMongoClient
from pymongo.errors import PyMongoError

from pagewise import InMemoryDataSource, OrderingPolicy, disable_tracing


@pytest.fixture(autouse=True)
def reset_tracing():
    """Reset observability state between tests."""
    yield
    disable_tracing()


@pytest.fixture
def policy():
    """Rows ordered by rank ascending, ties broken by id."""
    return OrderingPolicy("rank", "id")


def _rows(n: int) -> list[dict]:
    return [{"id": i, "rank": i, "name": f"item_{i:03d}"} for i in range(1, n + 1)]


@pytest.fixture
def make_rows():
    """Factory for rows with ids and ranks 1..n."""
    return _rows


@pytest.fixture
def five_rows(policy):
    return InMemoryDataSource(_rows(5), policy)


@pytest_asyncio.fixture
async def mongo_db():
    """Connect to localhost MongoDB, skip if unavailable, drop the DB after."""
    client = AsyncMongoClient("mongodb://localhost:27017", serverSelectionTimeoutMS=500)
    try:
        await client.admin.command("ping")
    except PyMongoError:
        await client.close()
        pytest.skip("MongoDB is not available on localhost:27017")
    db = client["pagewise_test"]
    yield db
    await client.drop_database("pagewise_test")
    await client.close()
