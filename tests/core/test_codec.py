import base64
import json
from datetime import date, datetime, timezone
from decimal import Decimal
from uuid import UUID

import pytest
from bson import ObjectId

from pagewise import (
    CursorCodec,
    CursorTypeMismatch,
    CursorVersionMismatch,
    MalformedCursor,
    OrderingPolicy,
    SortKey,
)


def _raw_cursor(payload) -> str:
    raw = json.dumps(payload, separators=(",", ":")).encode()
    return base64.urlsafe_b64encode(raw).decode().rstrip("=")


class TestRoundTrip:
    @pytest.mark.parametrize(
        "key",
        [
            SortKey(1, 2),
            SortKey("alpha", 7),
            SortKey(3.25, "x"),
            SortKey(True, 0),
            SortKey(datetime(2025, 1, 15, 10, 30, tzinfo=timezone.utc), 42),
            SortKey(date(2024, 2, 29), 1),
            SortKey(Decimal("19.99"), UUID("12345678-1234-5678-1234-567812345678")),
            SortKey("", ObjectId("507f1f77bcf86cd799439011")),
            SortKey("naïve ünïcode", -5),
        ],
    )
    def test_decode_inverts_encode(self, key):
        codec = CursorCodec(OrderingPolicy("rank"))
        decoded = codec.decode(codec.encode(key))
        assert decoded == key
        assert [type(v) for v in decoded] == [type(v) for v in key]

    def test_plain_tuple_is_accepted(self):
        codec = CursorCodec()
        assert codec.decode(codec.encode((5, 6))) == SortKey(5, 6)

    def test_encoding_is_deterministic(self):
        codec = CursorCodec(OrderingPolicy("rank"))
        assert codec.encode(SortKey(2, 2)) == codec.encode(SortKey(2, 2))

    def test_cursor_is_url_safe(self):
        codec = CursorCodec(OrderingPolicy("rank"))
        token = codec.encode(SortKey("???>>>~~~", 10**12))
        assert "=" not in token
        assert all(c.isalnum() or c in "-_" for c in token)

    def test_cursor_only_holds_the_sort_key(self):
        codec = CursorCodec(OrderingPolicy("rank"))
        token = codec.encode(SortKey(2, 9))
        payload = json.loads(base64.urlsafe_b64decode(token + "=" * (-len(token) % 4)))
        assert set(payload) == {"v", "p", "k"}
        assert payload["k"] == [["i", 2], ["i", 9]]

    def test_unsupported_type_rejected_on_encode(self):
        with pytest.raises(CursorTypeMismatch):
            CursorCodec().encode(SortKey(object(), 1))

    def test_nan_rejected_on_encode(self):
        with pytest.raises(CursorTypeMismatch):
            CursorCodec().encode(SortKey(float("nan"), 1))


class TestDecodeErrors:
    def test_not_base64(self):
        with pytest.raises(MalformedCursor):
            CursorCodec().decode("not-base64!!")

    def test_empty_string(self):
        with pytest.raises(MalformedCursor):
            CursorCodec().decode("")

    def test_base64_but_not_json(self):
        token = base64.urlsafe_b64encode(b"hello world").decode()
        with pytest.raises(MalformedCursor):
            CursorCodec().decode(token)

    def test_deeply_nested_json(self):
        token = base64.urlsafe_b64encode(b"[" * 100_000).decode().rstrip("=")
        with pytest.raises(MalformedCursor):
            CursorCodec().decode(token)

    def test_json_without_envelope(self):
        with pytest.raises(MalformedCursor):
            CursorCodec().decode(_raw_cursor([1, 2]))

    def test_version_mismatch(self):
        old = CursorCodec(version=1).encode(SortKey(1, 1))
        with pytest.raises(CursorVersionMismatch):
            CursorCodec(version=2).decode(old)

    def test_other_ordering_is_a_version_mismatch(self):
        token = CursorCodec(OrderingPolicy("rank")).encode(SortKey(1, 1))
        with pytest.raises(CursorVersionMismatch):
            CursorCodec(OrderingPolicy.parse("-rank")).decode(token)

    def test_key_with_wrong_arity(self):
        token = _raw_cursor({"v": 1, "p": "", "k": [["i", 1]]})
        with pytest.raises(CursorTypeMismatch):
            CursorCodec().decode(token)

    def test_unknown_tag(self):
        token = _raw_cursor({"v": 1, "p": "", "k": [["zz", 1], ["i", 2]]})
        with pytest.raises(CursorTypeMismatch):
            CursorCodec().decode(token)

    def test_tag_value_disagreement(self):
        token = _raw_cursor({"v": 1, "p": "", "k": [["i", "one"], ["i", 2]]})
        with pytest.raises(CursorTypeMismatch):
            CursorCodec().decode(token)

    def test_unparseable_datetime(self):
        token = _raw_cursor({"v": 1, "p": "", "k": [["dt", "yesterday"], ["i", 2]]})
        with pytest.raises(CursorTypeMismatch):
            CursorCodec().decode(token)

    def test_expected_field_types(self):
        token = CursorCodec().encode(SortKey("2025-01-01", 3))
        codec = CursorCodec(field_types=(datetime, int))
        with pytest.raises(CursorTypeMismatch):
            codec.decode(token)


class TestSignedCursors:
    def test_signed_round_trip(self):
        codec = CursorCodec(OrderingPolicy("rank"), secret="s3cret")
        token = codec.encode(SortKey(4, 4))
        assert "." in token
        assert codec.decode(token) == SortKey(4, 4)

    def test_tampered_body_rejected(self):
        codec = CursorCodec(secret="s3cret")
        signature = codec.encode(SortKey(4, 4)).partition(".")[2]
        forged = CursorCodec().encode(SortKey(400, 400))
        with pytest.raises(MalformedCursor):
            codec.decode(f"{forged}.{signature}")

    def test_unsigned_cursor_rejected(self):
        token = CursorCodec().encode(SortKey(4, 4))
        with pytest.raises(MalformedCursor):
            CursorCodec(secret="s3cret").decode(token)

    def test_other_secret_rejected(self):
        token = CursorCodec(secret="one").encode(SortKey(4, 4))
        with pytest.raises(MalformedCursor):
            CursorCodec(secret="two").decode(token)
