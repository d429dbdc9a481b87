"""ProductCacheSync — product views in a client cache, kept in step with edits.

The same product shows up in the farmer's dashboard entry and in any number
of product listing entries. Edits patch all of them optimistically and are
reverted together if the server rejects the change.

Cache layout:
  ("dashboard", farmer_id)           -> {"farmer_id": ..., "products": [...]}
  ("products", (("category", ...),)) -> {"products": [...]}
"""

from typing import Any

from src.fm_cache.application.query_cache import KeyTarget, QueryCache
from src.fm_cache.application.reconciler import OptimisticCacheReconciler
from src.fm_cache.domain.entry import CacheKey, KeyPattern, make_key
from src.fm_cache.domain.patch import EntityPatch
from src.fm_catalog.application.update_rules import VALID_UPDATE_FIELDS
from src.fm_client.api_client import MarketplaceClient


def dashboard_key(farmer_id: str) -> CacheKey:
    return make_key("dashboard", farmer_id)


def products_key(filters: dict[str, Any]) -> CacheKey:
    return make_key("products", filters)


def optimistic_fields(update_data: dict[str, Any]) -> dict[str, Any]:
    """Fields the server would keep, trimmed the way it trims them.

    Values are not validated here; the server rejects bad ones and the patch
    is reverted.
    """
    return {
        name: update_data[name].strip() if isinstance(update_data[name], str) else update_data[name]
        for name in VALID_UPDATE_FIELDS
        if name in update_data
    }


class ProductCacheSync:
    def __init__(
        self,
        client: MarketplaceClient,
        reconciler: OptimisticCacheReconciler,
    ) -> None:
        self._client = client
        self._reconciler = reconciler

    @property
    def cache(self) -> QueryCache:
        return self._reconciler.cache

    async def load_dashboard(self, farmer_id: str, force: bool = False) -> dict[str, Any]:
        return await self.cache.fetch(
            dashboard_key(farmer_id), lambda: self._client.get_dashboard(farmer_id), force=force
        )

    async def load_products(self, force: bool = False, **filters: Any) -> dict[str, Any]:
        async def _fetch() -> dict[str, Any]:
            return {"products": await self._client.list_products(**filters)}

        return await self.cache.fetch(products_key(filters), _fetch, force=force)

    def _targets(self, farmer_id: str) -> list[KeyTarget]:
        return [
            KeyPattern(dashboard_key(farmer_id), exact=True),
            KeyPattern(make_key("products")),
        ]

    async def update_product(
        self, farmer_id: str, product_id: str, update_data: dict[str, Any]
    ) -> dict[str, Any]:
        patch = EntityPatch.for_entities([product_id], optimistic_fields(update_data))
        return await self._reconciler.apply(
            self._targets(farmer_id),
            lambda: self._client.update_product(product_id, update_data),
            patch,
            extract_entities=lambda product: [product],
        )

    async def bulk_update(
        self, farmer_id: str, product_ids: list[str], update_data: dict[str, Any]
    ) -> dict[str, Any]:
        patch = EntityPatch.for_entities(product_ids, optimistic_fields(update_data))
        return await self._reconciler.apply(
            self._targets(farmer_id),
            lambda: self._client.bulk_update_products(product_ids, update_data),
            patch,
            extract_entities=lambda result: result.get("updated_products"),
        )
