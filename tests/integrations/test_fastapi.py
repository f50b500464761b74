from __future__ import annotations

import base64
import json
from datetime import datetime

from bson import ObjectId
from fastapi import Depends, FastAPI
from fastapi.testclient import TestClient

from pagewise import (
    CursorPaginator,
    DataSourceError,
    InMemoryDataSource,
    OffsetPaginator,
    OrderingPolicy,
    Page,
)
from pagewise.integrations.fastapi import (
    BSONJSONResponse,
    CursorPageResponse,
    CursorParams,
    OffsetParams,
    PageResponse,
    register_exception_handlers,
)

POLICY = OrderingPolicy("rank", "id")
ROWS = [{"id": i, "rank": i} for i in range(1, 6)]


def _app() -> FastAPI:
    app = FastAPI()
    register_exception_handlers(app)
    source = InMemoryDataSource(ROWS, POLICY)
    offset = OffsetPaginator(POLICY, max_page_size=10)
    cursor = CursorPaginator(POLICY, max_page_size=10)

    @app.get("/items")
    async def list_items(params: OffsetParams = Depends()):
        page = await offset.paginate(source, params.page, params.page_size)
        return PageResponse[dict].from_page(page)

    @app.get("/feed")
    async def feed(params: CursorParams = Depends()):
        page = await cursor.paginate(source, params.cursor, params.direction, params.page_size)
        return CursorPageResponse[dict].from_page(page)

    @app.get("/broken")
    async def broken():
        raise DataSourceError("replica set unavailable")

    return app


def test_page_response_from_page():
    page = Page(
        items=({"name": "Alice"}, {"name": "Bob"}),
        current_page=1,
        page_size=10,
        total_items=2,
        total_pages=1,
        has_next=False,
        has_prev=False,
    )
    resp = PageResponse[dict].from_page(page)
    assert resp.items == [{"name": "Alice"}, {"name": "Bob"}]
    assert resp.current_page == 1
    assert resp.total_items == 2
    assert resp.has_next is False


def test_offset_endpoint():
    client = TestClient(_app())
    resp = client.get("/items", params={"page": 2, "page_size": 2})
    assert resp.status_code == 200
    body = resp.json()
    assert [row["id"] for row in body["items"]] == [3, 4]
    assert body["total_pages"] == 3
    assert body["has_next"] is True
    assert body["has_prev"] is True


def test_cursor_endpoint_walk():
    client = TestClient(_app())
    first = client.get("/feed", params={"page_size": 2}).json()
    second = client.get("/feed", params={"page_size": 2, "cursor": first["next_cursor"]}).json()
    back = client.get(
        "/feed",
        params={"page_size": 2, "cursor": second["prev_cursor"], "direction": "backward"},
    ).json()
    assert [row["id"] for row in second["items"]] == [3, 4]
    assert back["items"] == first["items"]


def test_invalid_request_is_400():
    client = TestClient(_app())
    resp = client.get("/items", params={"page": 0})
    assert resp.status_code == 400
    assert "page must be >= 1" in resp.json()["detail"]


def test_page_size_over_max_is_400():
    client = TestClient(_app())
    resp = client.get("/feed", params={"page_size": 11})
    assert resp.status_code == 400


def test_unknown_direction_is_400():
    client = TestClient(_app())
    resp = client.get("/feed", params={"direction": "sideways"})
    assert resp.status_code == 400
    assert "direction must be one of" in resp.json()["detail"]


def test_deeply_nested_cursor_is_400():
    client = TestClient(_app())
    cursor = base64.urlsafe_b64encode(b"[" * 10_000).decode().rstrip("=")
    resp = client.get("/feed", params={"cursor": cursor})
    assert resp.status_code == 400


def test_invalid_cursor_is_400():
    client = TestClient(_app())
    resp = client.get("/feed", params={"cursor": "not-base64!!"})
    assert resp.status_code == 400
    assert "Invalid cursor" in resp.json()["detail"]


def test_data_source_error_is_500():
    client = TestClient(_app(), raise_server_exceptions=False)
    resp = client.get("/broken")
    assert resp.status_code == 500
    assert "replica set unavailable" in resp.json()["detail"]


def test_bson_json_response():
    oid = ObjectId("507f1f77bcf86cd799439011")
    response = BSONJSONResponse({"_id": oid, "at": datetime(2025, 1, 15, 10, 30)})
    assert json.loads(response.body) == {
        "_id": "507f1f77bcf86cd799439011",
        "at": "2025-01-15T10:30:00",
    }
