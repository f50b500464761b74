from __future__ import annotations

import hashlib
import types
from dataclasses import dataclass
from enum import Enum
from typing import Any, NamedTuple, Union, get_args, get_origin

from pymongo import ASCENDING, DESCENDING

from pagewise.utils.exceptions import OrderingError
from pagewise.utils.settings import SettingsResolver
from pagewise.utils.types import Row, SortSpec, get_field

_MISSING = object()


class Direction(str, Enum):
    """Traversal direction relative to the configured sort order."""

    FORWARD = "forward"
    BACKWARD = "backward"


class SortKey(NamedTuple):
    """Ordering key of a single row: primary value plus unique tie-breaker."""

    primary: Any
    tie_breaker: Any


@dataclass(frozen=True)
class OrderingPolicy:
    """Total order used to paginate a dataset.

    Rows are ordered by ``primary_field`` and then by ``tie_breaker_field``,
    both in ``primary_direction``. The tie-breaker must be unique, immutable
    and never null; it is what keeps pages stable when primary values repeat.
    """

    primary_field: str
    tie_breaker_field: str = "id"
    primary_direction: int = ASCENDING

    def __post_init__(self) -> None:
        for name in (self.primary_field, self.tie_breaker_field):
            if not isinstance(name, str) or not name:
                raise OrderingError("Ordering fields must be non-empty strings")
        if self.primary_field == self.tie_breaker_field:
            raise OrderingError(
                f"Tie-breaker '{self.tie_breaker_field}' must differ from the primary field"
            )
        if self.primary_direction not in (ASCENDING, DESCENDING):
            raise OrderingError(
                f"primary_direction must be ASCENDING or DESCENDING, got {self.primary_direction!r}"
            )

    @classmethod
    def parse(cls, ordering: str, *, tie_breaker: str = "id") -> OrderingPolicy:
        """Build a policy from a sort string. Prefix with '-' for descending.

        Example: OrderingPolicy.parse("-created_at", tie_breaker="id")
        """
        if ordering.startswith("-"):
            return cls(ordering[1:], tie_breaker, DESCENDING)
        return cls(ordering, tie_breaker, ASCENDING)

    @classmethod
    def for_model(cls, model: type) -> OrderingPolicy:
        """Resolve the policy from a model's inner Settings class.

        For pydantic models both fields must be declared, and the
        tie-breaker must not be nullable.

        Raises:
            OrderingError: If the configuration cannot guarantee a total order
        """
        policy = cls.parse(
            SettingsResolver.get_ordering(model),
            tie_breaker=SettingsResolver.get_tie_breaker(model),
        )
        model_fields = getattr(model, "model_fields", None)
        if model_fields is not None:
            for name in (policy.primary_field, policy.tie_breaker_field):
                if name not in model_fields:
                    raise OrderingError(f"{model.__name__} has no field '{name}'")
            if _is_nullable(model_fields[policy.tie_breaker_field].annotation):
                raise OrderingError(
                    f"Tie-breaker '{model.__name__}.{policy.tie_breaker_field}' must not be nullable"
                )
        return policy

    @property
    def fingerprint(self) -> str:
        """Short stable digest identifying this ordering."""
        raw = f"{self.primary_field}|{self.tie_breaker_field}|{self.primary_direction}"
        return hashlib.sha256(raw.encode()).hexdigest()[:12]

    def sort_key_of(self, row: Row) -> SortKey:
        """Extract the SortKey of a row (mapping or attribute object)."""
        values = []
        for name in (self.primary_field, self.tie_breaker_field):
            value = get_field(row, name, _MISSING)
            if value is _MISSING:
                raise OrderingError(f"Row has no ordering field '{name}'")
            if value is None:
                raise OrderingError(f"Row has a null value for ordering field '{name}'")
            values.append(value)
        return SortKey(*values)

    def scan_descending(self, direction: Direction) -> bool:
        """Whether a scan in ``direction`` visits keys in descending order."""
        return (self.primary_direction == DESCENDING) != (direction is Direction.BACKWARD)

    def sort_spec(self, direction: Direction) -> SortSpec:
        """pymongo sort specification for a scan in ``direction``."""
        order = DESCENDING if self.scan_descending(direction) else ASCENDING
        return [(self.primary_field, order), (self.tie_breaker_field, order)]

    def follows(
        self,
        key: SortKey,
        boundary: SortKey,
        direction: Direction,
        inclusive: bool = False,
    ) -> bool:
        """Whether ``key`` lies past ``boundary`` when scanning in ``direction``."""
        if key == boundary:
            return inclusive
        if self.scan_descending(direction):
            return key < boundary
        return key > boundary


def _is_nullable(annotation: Any) -> bool:
    if annotation is None or annotation is type(None):
        return True
    if get_origin(annotation) in (Union, types.UnionType):
        return type(None) in get_args(annotation)
    return False
