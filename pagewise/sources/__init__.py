from pagewise.sources.base import CountableDataSource, DataSource
from pagewise.sources.memory import InMemoryDataSource
from pagewise.sources.mongo import MongoDataSource

__all__ = [
    "CountableDataSource",
    "DataSource",
    "InMemoryDataSource",
    "MongoDataSource",
]
