"""Opaque, versioned continuation tokens.

A cursor is the URL-safe base64 form (padding stripped) of a compact JSON
envelope::

    {"k": [["dt", "2025-01-15T10:30:00+00:00"], ["i", 42]], "p": "3f1c9a0b7e21", "v": 1}

``v`` is the codec version, ``p`` the fingerprint of the ordering policy and
``k`` the tagged sort key. When a secret is configured an HMAC-SHA256 tag is
appended after a ``.`` so clients cannot forge or edit cursors.
"""

from __future__ import annotations

import base64
import binascii
import json
from datetime import date, datetime
from decimal import Decimal, InvalidOperation
from typing import Any, Callable
from uuid import UUID

from bson import ObjectId
from bson.errors import InvalidId
from cryptography.exceptions import InvalidSignature
from cryptography.hazmat.primitives import hashes, hmac

from pagewise.core.ordering import OrderingPolicy, SortKey
from pagewise.utils.exceptions import (
    CursorTypeMismatch,
    CursorVersionMismatch,
    MalformedCursor,
)
from pagewise.utils.types import CURSOR_VERSION


def _expect(kind: type | tuple[type, ...]) -> Callable[[Any], Any]:
    def check(raw: Any) -> Any:
        if not isinstance(raw, kind) or isinstance(raw, bool) and kind is not bool:
            raise TypeError(f"expected {kind}, got {type(raw).__name__}")
        return raw

    return check


def _from_str(parse: Callable[[str], Any]) -> Callable[[Any], Any]:
    def convert(raw: Any) -> Any:
        if not isinstance(raw, str):
            raise TypeError(f"expected str, got {type(raw).__name__}")
        return parse(raw)

    return convert


# tag -> (python type, serializer, deserializer); order matters for encoding
# (bool before int, datetime before date)
_TAGS: dict[str, tuple[type, Callable[[Any], Any], Callable[[Any], Any]]] = {
    "b": (bool, lambda v: v, _expect(bool)),
    "i": (int, lambda v: v, _expect(int)),
    "f": (float, lambda v: v, _expect(float)),
    "s": (str, lambda v: v, _expect(str)),
    "dt": (datetime, lambda v: v.isoformat(), _from_str(datetime.fromisoformat)),
    "d": (date, lambda v: v.isoformat(), _from_str(date.fromisoformat)),
    "dec": (Decimal, str, _from_str(Decimal)),
    "u": (UUID, str, _from_str(UUID)),
    "oid": (ObjectId, str, _from_str(ObjectId)),
}


def _b64encode(data: bytes) -> str:
    return base64.urlsafe_b64encode(data).decode("ascii").rstrip("=")


def _b64decode(text: str) -> bytes:
    # Restore the padding stripped by _b64encode
    padded = text + "=" * (-len(text) % 4)
    return base64.b64decode(padded.encode("ascii"), altchars=b"-_", validate=True)


class CursorCodec:
    """Encode and decode pagination cursors.

    Usage:
        codec = CursorCodec(OrderingPolicy.parse("-created_at"), secret="s3cret")
        token = codec.encode(SortKey(created_at, 42))
        codec.decode(token)  # SortKey(primary=created_at, tie_breaker=42)

    Args:
        policy: Ordering the cursors belong to; cursors issued under another
            ordering fail with CursorVersionMismatch
        version: Payload version tag
        secret: Optional HMAC key; when set, unsigned or altered cursors are
            rejected as malformed
        field_types: Optional expected (primary, tie_breaker) python types
    """

    def __init__(
        self,
        policy: OrderingPolicy | None = None,
        *,
        version: int = CURSOR_VERSION,
        secret: str | bytes | None = None,
        field_types: tuple[type | None, type | None] | None = None,
    ) -> None:
        self.policy = policy
        self.version = version
        self._secret = secret.encode() if isinstance(secret, str) else secret
        self.field_types = field_types

    @property
    def fingerprint(self) -> str:
        return self.policy.fingerprint if self.policy else ""

    def encode(self, key: SortKey | tuple[Any, Any]) -> str:
        """Encode a sort key into an opaque cursor string.

        Raises:
            CursorTypeMismatch: If a key value has no cursor representation
        """
        if len(key) != 2:
            raise CursorTypeMismatch("Sort key must hold exactly two values")
        payload = {
            "v": self.version,
            "p": self.fingerprint,
            "k": [self._tag(value) for value in key],
        }
        try:
            raw = json.dumps(payload, sort_keys=True, separators=(",", ":"), allow_nan=False)
        except ValueError as e:
            raise CursorTypeMismatch(f"Sort key cannot be encoded: {e}") from e
        token = _b64encode(raw.encode())
        if self._secret is not None:
            token = f"{token}.{_b64encode(self._sign(token.encode()))}"
        return token

    def decode(self, cursor: str) -> SortKey:
        """Decode a cursor string back into a sort key.

        Raises:
            MalformedCursor: If the token is not a valid (signed) encoding
            CursorVersionMismatch: If the version or ordering differs
            CursorTypeMismatch: If the key does not have the expected shape
        """
        if not isinstance(cursor, str) or not cursor:
            raise MalformedCursor("Cursor must be a non-empty string")

        body = cursor
        if self._secret is not None:
            body, _, signature = cursor.partition(".")
            self._verify(body, signature)

        try:
            payload = json.loads(_b64decode(body))
        except (binascii.Error, ValueError, UnicodeError, RecursionError) as e:
            raise MalformedCursor(f"Cursor is not validly encoded: {e}") from e

        if not isinstance(payload, dict) or not {"v", "p", "k"} <= payload.keys():
            raise MalformedCursor("Cursor payload has an unexpected layout")
        if payload["v"] != self.version:
            raise CursorVersionMismatch(
                f"Cursor version {payload['v']!r} does not match codec version {self.version}"
            )
        if payload["p"] != self.fingerprint:
            raise CursorVersionMismatch("Cursor was issued for a different ordering")

        key = payload["k"]
        if not isinstance(key, list) or len(key) != 2:
            raise CursorTypeMismatch("Cursor key must hold exactly two values")
        return SortKey(*(self._untag(item, i) for i, item in enumerate(key)))

    # --- Internal ---

    @staticmethod
    def _tag(value: Any) -> list[Any]:
        for tag, (kind, serialize, _) in _TAGS.items():
            if isinstance(value, kind):
                return [tag, serialize(value)]
        raise CursorTypeMismatch(
            f"Values of type {type(value).__name__} cannot be stored in a cursor"
        )

    def _untag(self, item: Any, position: int) -> Any:
        if not isinstance(item, list) or len(item) != 2 or not isinstance(item[0], str) or item[0] not in _TAGS:
            raise CursorTypeMismatch(f"Cursor value #{position} is not a tagged value")
        tag, raw = item
        try:
            value = _TAGS[tag][2](raw)
        except (TypeError, ValueError, InvalidOperation, InvalidId) as e:
            raise CursorTypeMismatch(f"Cursor value #{position} is invalid: {e}") from e

        if self.field_types is not None:
            expected = self.field_types[position]
            if expected is not None and not isinstance(value, expected):
                raise CursorTypeMismatch(
                    f"Cursor value #{position} is {type(value).__name__}, "
                    f"expected {expected.__name__}"
                )
        return value

    def _sign(self, data: bytes) -> bytes:
        h = hmac.HMAC(self._secret, hashes.SHA256())
        h.update(data)
        return h.finalize()

    def _verify(self, body: str, signature: str) -> None:
        if not body or not signature:
            raise MalformedCursor("Cursor is not signed")
        h = hmac.HMAC(self._secret, hashes.SHA256())
        h.update(body.encode("ascii", errors="replace"))
        try:
            h.verify(_b64decode(signature))
        except (binascii.Error, ValueError, UnicodeError, InvalidSignature) as e:
            raise MalformedCursor("Cursor signature is invalid") from e
