"""Async HTTP client for the marketplace API.

Unwraps the ApiResponse envelope and returns ``data``. Any non-2xx response,
or an envelope with a non-zero code, raises MutationRejectedError carrying the
server's machine-readable error code as ``kind``.
"""

import logging
from types import TracebackType
from typing import Any

import httpx

from config.settings import settings
from src.fm_common.errors import MutationRejectedError

logger = logging.getLogger("fm.client")


def _error_from_response(resp: httpx.Response) -> MutationRejectedError:
    try:
        body = resp.json()
    except ValueError:
        body = {}
    if not isinstance(body, dict):
        body = {}
    kind = body.get("code") or resp.status_code
    message = body.get("message") or body.get("detail") or resp.reason_phrase
    return MutationRejectedError(int(kind), str(message), resp.status_code)


class MarketplaceClient:
    def __init__(
        self,
        base_url: str | None = None,
        timeout: float | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self._http = httpx.AsyncClient(
            base_url=base_url or settings.API_BASE_URL,
            timeout=timeout or settings.API_TIMEOUT_SECONDS,
            transport=transport,
        )

    async def __aenter__(self) -> "MarketplaceClient":
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        await self._http.aclose()

    async def _request(self, method: str, path: str, **kwargs: Any) -> Any:
        resp = await self._http.request(method, path, **kwargs)
        if resp.is_error:
            err = _error_from_response(resp)
            logger.info("%s %s -> %d (%d)", method, path, resp.status_code, err.kind)
            raise err
        body = resp.json()
        if body.get("code", 0) != 0:
            raise MutationRejectedError(body["code"], body.get("message", ""), resp.status_code)
        return body.get("data")

    # --- products ---

    async def get_dashboard(self, farmer_id: str, limit: int = 200) -> dict[str, Any]:
        """A farmer's own product list, shaped as the dashboard cache entry."""
        products = await self.list_products(farmer_id=farmer_id, limit=limit)
        return {"farmer_id": farmer_id, "products": products}

    async def list_products(
        self,
        status: str | None = None,
        farmer_id: str | None = None,
        category: str | None = None,
        limit: int = 50,
    ) -> list[dict[str, Any]]:
        params = {"status": status, "farmer_id": farmer_id, "category": category, "limit": limit}
        data = await self._request(
            "GET", "/products", params={k: v for k, v in params.items() if v is not None}
        )
        return list(data["items"])

    async def get_product(self, product_id: str) -> dict[str, Any]:
        return await self._request("GET", f"/products/{product_id}")

    async def update_product(
        self, product_id: str, update_data: dict[str, Any]
    ) -> dict[str, Any]:
        return await self._request(
            "PUT", f"/products/{product_id}", json={"update_data": update_data}
        )

    async def bulk_update_products(
        self, product_ids: list[str], update_data: dict[str, Any]
    ) -> dict[str, Any]:
        return await self._request(
            "PUT",
            "/products/bulk-update",
            json={"product_ids": product_ids, "update_data": update_data},
        )

    # --- reorder ---

    async def validate_reorder(self, order_id: str, user_id: str) -> dict[str, Any]:
        return await self._request(
            "POST", f"/orders/{order_id}/reorder", json={"user_id": user_id}
        )

    async def place_reorder(self, order_id: str, user_id: str) -> dict[str, Any]:
        return await self._request(
            "POST", f"/orders/{order_id}/reorder/place", json={"user_id": user_id}
        )
