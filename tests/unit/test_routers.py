# tests/unit/test_routers.py
"""HTTP-level tests for the product and reorder routers with services mocked."""
from unittest.mock import AsyncMock, MagicMock

import pytest

from src.fm_catalog.api.router import get_catalog_service
from src.fm_catalog.application.schemas import BulkUpdateResponse, ProductListResponse, ProductOut
from src.fm_common.errors import InvalidUpdateDataError, NothingToReorderError, OrderNotFoundError
from src.fm_order.api.router import get_reorder_service
from src.fm_order.application.schemas import PlaceReorderResponse
from src.main import app


def _make_product_out(**kwargs) -> ProductOut:
    defaults = dict(
        id="p1", name="Goat Cheese", price=1200, price_display="12.00", stock=6, unit="unit",
        status="active", farmer_id="f1", farmer_name="Hilltop", image=None, category="dairy",
        description=None, featured=False, updated_at=None,
    )
    defaults.update(kwargs)
    return ProductOut(**defaults)


@pytest.fixture
def catalog_service() -> MagicMock:
    svc = MagicMock()
    app.dependency_overrides[get_catalog_service] = lambda: svc
    return svc


@pytest.fixture
def reorder_service() -> MagicMock:
    svc = MagicMock()
    app.dependency_overrides[get_reorder_service] = lambda: svc
    return svc


class TestProductRoutes:
    @pytest.mark.asyncio
    async def test_list(self, client, catalog_service):
        catalog_service.list_products = AsyncMock(
            return_value=ProductListResponse(items=[_make_product_out()], cached=True)
        )

        resp = await client.get("/api/v1/products", params={"farmer_id": "f1"})

        assert resp.status_code == 200
        body = resp.json()
        assert body["code"] == 0
        assert body["data"]["cached"] is True
        assert body["data"]["items"][0]["id"] == "p1"
        args = catalog_service.list_products.call_args[0]
        assert args[1:] == (None, "f1", None, 50)

    @pytest.mark.asyncio
    async def test_bulk_update_message(self, client, catalog_service):
        catalog_service.bulk_update = AsyncMock(
            return_value=BulkUpdateResponse(
                updated_count=2, matched_count=2, requested_count=3, updated_fields=["stock"],
                updated_products=[_make_product_out(), _make_product_out(id="p2")],
                cache_cleared=True,
            )
        )

        resp = await client.put(
            "/api/v1/products/bulk-update",
            json={"product_ids": ["p1", "p2", "p3"], "update_data": {"stock": 0}},
        )

        assert resp.status_code == 200
        assert resp.json()["message"] == "Successfully updated 2 of 3 products"

    @pytest.mark.asyncio
    async def test_validation_errors_reported(self, client, catalog_service):
        catalog_service.update_product = AsyncMock(
            side_effect=InvalidUpdateDataError(["Price must be a non-negative integer amount of cents"])
        )

        resp = await client.put("/api/v1/products/p1", json={"update_data": {"price": -1}})

        assert resp.status_code == 400
        body = resp.json()
        assert body["code"] == 2003
        assert body["data"] == ["Price must be a non-negative integer amount of cents"]

    @pytest.mark.asyncio
    async def test_empty_id_list_rejected_by_schema(self, client, catalog_service):
        resp = await client.put(
            "/api/v1/products/bulk-update", json={"product_ids": [], "update_data": {"stock": 1}}
        )
        assert resp.status_code == 422

    @pytest.mark.asyncio
    async def test_request_id_header(self, client, catalog_service):
        catalog_service.get_product = AsyncMock(return_value=_make_product_out())
        resp = await client.get("/api/v1/products/p1")
        assert resp.headers["X-Request-ID"] == resp.json()["request_id"]


class TestReorderRoutes:
    @pytest.mark.asyncio
    async def test_order_not_found(self, client, reorder_service):
        reorder_service.validate_reorder = AsyncMock(side_effect=OrderNotFoundError("ord-x"))

        resp = await client.post("/api/v1/orders/ord-x/reorder", json={"user_id": "u1"})

        assert resp.status_code == 404
        assert resp.json()["code"] == 4004

    @pytest.mark.asyncio
    async def test_blank_user_rejected(self, client, reorder_service):
        resp = await client.post("/api/v1/orders/ord-1/reorder", json={"user_id": "  "})
        assert resp.status_code == 422

    @pytest.mark.asyncio
    async def test_place(self, client, reorder_service):
        reorder_service.place_reorder = AsyncMock(
            return_value=PlaceReorderResponse(
                order_id="new", reordered_from="ord-1", item_count=1, subtotal=660,
                delivery_fee=100, total=760, skipped_count=1,
            )
        )

        resp = await client.post("/api/v1/orders/ord-1/reorder/place", json={"user_id": "u1"})

        assert resp.status_code == 201
        assert resp.json()["data"]["total"] == 760
        reorder_service.place_reorder.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_place_with_nothing_available(self, client, reorder_service):
        reorder_service.place_reorder = AsyncMock(side_effect=NothingToReorderError("ord-1"))
        resp = await client.post("/api/v1/orders/ord-1/reorder/place", json={"user_id": "u1"})
        assert resp.status_code == 422
        assert resp.json()["code"] == 4012


class TestRequestId:
    @pytest.mark.asyncio
    async def test_caller_request_id_is_reused(self, client, catalog_service):
        catalog_service.get_product = AsyncMock(return_value=_make_product_out())
        resp = await client.get("/api/v1/products/p1", headers={"X-Request-ID": "client-42"})
        assert resp.headers["X-Request-ID"] == "client-42"
        assert resp.json()["request_id"] == "client-42"

    @pytest.mark.asyncio
    async def test_malformed_request_id_replaced(self, client):
        resp = await client.get("/health", headers={"X-Request-ID": "bad id!"})
        assert resp.headers["X-Request-ID"].startswith("req_")

    @pytest.mark.asyncio
    async def test_error_envelope_carries_request_id(self, client, reorder_service):
        reorder_service.validate_reorder = AsyncMock(side_effect=OrderNotFoundError("ord-x"))
        resp = await client.post(
            "/api/v1/orders/ord-x/reorder", json={"user_id": "u1"}, headers={"X-Request-ID": "r-1"}
        )
        assert resp.json()["request_id"] == "r-1"
