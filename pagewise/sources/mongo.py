from __future__ import annotations

import logging
from typing import Any

from pymongo.asynchronous.collection import AsyncCollection
from pymongo.errors import PyMongoError

from pagewise.core.ordering import OrderingPolicy
from pagewise.core.query import RangeQuery
from pagewise.utils.exceptions import DataSourceError, OrderingError
from pagewise.utils.types import FilterSpec, Row, SortSpec

logger = logging.getLogger(__name__)


class MongoDataSource:
    """Keyset range scans over a MongoDB collection.

    Args:
        collection: pymongo AsyncCollection to read from
        policy: Ordering policy, in terms of row field names
        filter: Base filter applied to every scan (and count)
        projection: Optional field projection; ordering fields are always kept
        model: Optional pydantic model used to validate raw documents. Policy
            fields are mapped to their aliases (e.g. ``id`` -> ``_id``).

    Example:
        source = MongoDataSource(db["articles"], OrderingPolicy.parse("-published_at"),
                                 filter={"status": "live"}, model=Article)
    """

    def __init__(
        self,
        collection: AsyncCollection,
        policy: OrderingPolicy,
        filter: FilterSpec | None = None,
        projection: dict[str, int] | None = None,
        model: type | None = None,
    ) -> None:
        self.collection = collection
        self.policy = policy
        self.model = model
        self._filter: FilterSpec = filter or {}
        self._primary_key = self._mongo_key(policy.primary_field)
        self._tie_key = self._mongo_key(policy.tie_breaker_field)
        self._projection = None
        if projection:
            self._projection = {**projection, self._primary_key: 1, self._tie_key: 1}

    # --- Query building ---

    def build_filter(self, query: RangeQuery) -> FilterSpec:
        """Compose the base filter with the keyset condition of ``query``."""
        if query.boundary is None:
            return self._filter.copy()

        op = "$lt" if self.policy.scan_descending(query.direction) else "$gt"
        tie_op = f"{op}e" if query.inclusive else op
        primary, tie_breaker = query.boundary
        keyset = {
            "$or": [
                {self._primary_key: {op: primary}},
                {self._primary_key: primary, self._tie_key: {tie_op: tie_breaker}},
            ]
        }
        if not self._filter:
            return keyset
        return {"$and": [self._filter, keyset]}

    def build_sort(self, query: RangeQuery) -> SortSpec:
        """pymongo sort list for the scan direction of ``query``."""
        return [
            (self._mongo_key(field), order)
            for field, order in self.policy.sort_spec(query.direction)
        ]

    # --- DataSource protocol ---

    async def fetch_range(self, query: RangeQuery, *, skip: int = 0) -> list[Row]:
        filter_spec = self.build_filter(query)
        logger.debug(f"Range scan on '{self.collection.name}': filter={filter_spec} skip={skip} limit={query.limit}")
        try:
            cursor = self.collection.find(filter_spec, self._projection)
            cursor = cursor.sort(self.build_sort(query))
            if skip:
                cursor = cursor.skip(skip)
            cursor = cursor.limit(query.limit)
            rows = []
            async for raw in cursor:
                rows.append(self._from_mongo(raw))
            return rows
        except PyMongoError as e:
            raise DataSourceError(f"Range scan on '{self.collection.name}' failed: {e}") from e

    async def count_total(self) -> int:
        try:
            return await self.collection.count_documents(self._filter)
        except PyMongoError as e:
            raise DataSourceError(f"Count on '{self.collection.name}' failed: {e}") from e

    # --- Setup checks ---

    async def verify_ordering(self) -> None:
        """Check that the tie-breaker is backed by a unique index.

        Call once at setup; ``_id`` is always unique.

        Raises:
            OrderingError: If no single-field unique index covers the tie-breaker
            DataSourceError: If the index information cannot be read
        """
        if self._tie_key == "_id":
            return
        try:
            indexes = await self.collection.index_information()
        except PyMongoError as e:
            raise DataSourceError(f"Cannot read indexes of '{self.collection.name}': {e}") from e

        for info in indexes.values():
            keys = [name for name, _ in info.get("key", [])]
            if info.get("unique") and keys == [self._tie_key]:
                return
        raise OrderingError(
            f"Tie-breaker '{self._tie_key}' on '{self.collection.name}' has no unique index"
        )

    # --- Internal ---

    def _mongo_key(self, field: str) -> str:
        model_fields = getattr(self.model, "model_fields", None) if self.model else None
        if model_fields and field in model_fields:
            return model_fields[field].alias or field
        return field

    def _from_mongo(self, raw: dict[str, Any]) -> Row:
        if self.model is None:
            return raw
        return self.model.model_validate(raw)
