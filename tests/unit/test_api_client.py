# tests/unit/test_api_client.py
"""Unit tests for MarketplaceClient against httpx.MockTransport."""
import json

import httpx
import pytest

from src.fm_client.api_client import MarketplaceClient
from src.fm_common.errors import MutationRejectedError


def _envelope(data=None, code=0, message="success") -> dict:
    return {"code": code, "message": message, "data": data, "timestamp": "t", "request_id": "r"}


def _make_client(handler) -> MarketplaceClient:
    return MarketplaceClient(
        base_url="http://test/api/v1", timeout=1.0, transport=httpx.MockTransport(handler)
    )


class TestSuccess:
    @pytest.mark.asyncio
    async def test_list_products_drops_empty_filters(self):
        seen: list[httpx.Request] = []

        def handler(request: httpx.Request) -> httpx.Response:
            seen.append(request)
            return httpx.Response(200, json=_envelope({"items": [{"id": "p1"}], "cached": False}))

        async with _make_client(handler) as client:
            products = await client.list_products(farmer_id="f1")

        assert products == [{"id": "p1"}]
        assert seen[0].url.path == "/api/v1/products"
        assert dict(seen[0].url.params) == {"farmer_id": "f1", "limit": "50"}

    @pytest.mark.asyncio
    async def test_update_product_sends_update_data(self):
        def handler(request: httpx.Request) -> httpx.Response:
            assert request.method == "PUT"
            assert request.url.path == "/api/v1/products/p1"
            assert json.loads(request.content) == {"update_data": {"price": 500}}
            return httpx.Response(200, json=_envelope({"id": "p1", "price": 500}))

        async with _make_client(handler) as client:
            assert await client.update_product("p1", {"price": 500}) == {"id": "p1", "price": 500}

    @pytest.mark.asyncio
    async def test_place_reorder(self):
        def handler(request: httpx.Request) -> httpx.Response:
            assert request.url.path == "/api/v1/orders/ord-1/reorder/place"
            assert json.loads(request.content) == {"user_id": "u1"}
            return httpx.Response(201, json=_envelope({"order_id": "new"}))

        async with _make_client(handler) as client:
            assert (await client.place_reorder("ord-1", "u1"))["order_id"] == "new"


class TestErrors:
    @pytest.mark.asyncio
    async def test_error_envelope_becomes_rejection(self):
        def handler(request: httpx.Request) -> httpx.Response:
            return httpx.Response(400, json=_envelope(code=2003, message="Validation failed"))

        async with _make_client(handler) as client:
            with pytest.raises(MutationRejectedError) as exc_info:
                await client.update_product("p1", {"price": -1})

        assert exc_info.value.kind == 2003
        assert exc_info.value.http_status == 400
        assert "Validation failed" in exc_info.value.message

    @pytest.mark.asyncio
    async def test_non_json_error_uses_status(self):
        def handler(request: httpx.Request) -> httpx.Response:
            return httpx.Response(502, text="bad gateway")

        async with _make_client(handler) as client:
            with pytest.raises(MutationRejectedError) as exc_info:
                await client.get_product("p1")

        assert exc_info.value.kind == 502

    @pytest.mark.asyncio
    async def test_non_zero_code_on_2xx(self):
        def handler(request: httpx.Request) -> httpx.Response:
            return httpx.Response(200, json=_envelope(code=9002, message="oops"))

        async with _make_client(handler) as client:
            with pytest.raises(MutationRejectedError) as exc_info:
                await client.bulk_update_products(["p1"], {"stock": 1})

        assert exc_info.value.kind == 9002


class TestDashboard:
    @pytest.mark.asyncio
    async def test_shapes_farmer_products(self):
        def handler(request: httpx.Request) -> httpx.Response:
            assert request.url.params["farmer_id"] == "f1"
            return httpx.Response(200, json=_envelope({"items": [{"id": "p1"}], "cached": False}))

        async with _make_client(handler) as client:
            dashboard = await client.get_dashboard("f1")

        assert dashboard == {"farmer_id": "f1", "products": [{"id": "p1"}]}
