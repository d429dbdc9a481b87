# src/fm_order/application/service.py
"""ReorderApplicationService — load, normalize, validate, optionally place.

Stock and price may move between validation and placement; place_reorder
re-validates immediately before inserting, but does not lock products.
"""
import logging
import uuid

from sqlalchemy.ext.asyncio import AsyncSession

from src.fm_catalog.application.lookup import BatchedProductLookup
from src.fm_catalog.domain.repository import ProductRepositoryProtocol
from src.fm_catalog.infrastructure.persistence import ProductRepository
from src.fm_common.datetime_utils import utc_now
from src.fm_common.enums import OrderStatus
from src.fm_common.errors import NothingToReorderError, OrderNotFoundError
from src.fm_order.application.normalizer import normalize_order
from src.fm_order.application.schemas import PlaceReorderResponse, ReorderResponse
from src.fm_order.domain.models import OrderLineItem, OrderSnapshot, ValidationReport
from src.fm_order.domain.pricing import policy_from_settings
from src.fm_order.domain.reorder import ReorderValidator
from src.fm_order.domain.repository import OrderRepositoryProtocol
from src.fm_order.infrastructure.persistence import OrderRepository

logger = logging.getLogger("fm.reorder")


class ReorderApplicationService:
    def __init__(
        self,
        order_repo: OrderRepositoryProtocol | None = None,
        product_repo: ProductRepositoryProtocol | None = None,
        validator: ReorderValidator | None = None,
    ) -> None:
        self._orders: OrderRepositoryProtocol = order_repo or OrderRepository()
        self._products: ProductRepositoryProtocol = product_repo or ProductRepository()
        self._validator = validator or ReorderValidator(policy_from_settings())

    async def _load_order(self, db: AsyncSession, order_id: str, user_id: str) -> OrderSnapshot:
        doc = await self._orders.get_order_document(db, order_id, user_id)
        if doc is None:
            raise OrderNotFoundError(order_id)
        return normalize_order(doc)

    async def _validate(self, db: AsyncSession, order: OrderSnapshot) -> ValidationReport:
        catalog = BatchedProductLookup(self._products, db)
        await catalog.prefetch([item.product_id for item in order.items])
        return await self._validator.validate(order, catalog)

    async def validate_reorder(
        self, db: AsyncSession, order_id: str, user_id: str
    ) -> ReorderResponse:
        order = await self._load_order(db, order_id, user_id)
        report = await self._validate(db, order)
        return ReorderResponse.build(order, report, validated_at=utc_now())

    async def place_reorder(
        self, db: AsyncSession, order_id: str, user_id: str
    ) -> PlaceReorderResponse:
        """Create a new pending order from the currently available items only."""
        order = await self._load_order(db, order_id, user_id)
        report = await self._validate(db, order)
        if not report.summary.reorder_success:
            raise NothingToReorderError(order_id)

        new_order = OrderSnapshot(
            order_id=uuid.uuid4().hex,
            user_id=user_id,
            order_date=utc_now(),
            items=tuple(
                OrderLineItem(
                    product_id=a.product_id,
                    product_name=a.product_name,
                    quantity=a.quantity,
                    price_at_order_time=a.price,
                    image=a.image,
                )
                for a in report.available_items
            ),
            subtotal=report.pricing.estimated_subtotal,
            delivery_fee=report.pricing.estimated_delivery_fee,
            service_fee=report.pricing.estimated_service_fee,
            total=report.pricing.estimated_total,
            status=OrderStatus.PENDING.value,
        )
        try:
            await self._orders.save(db, new_order, reordered_from=order.order_id)
            await db.commit()
        except Exception:
            await db.rollback()
            raise

        logger.info(
            "Reorder placed: %s from %s (%d of %d items)",
            new_order.order_id, order.order_id, len(new_order.items), len(order.items),
        )
        return PlaceReorderResponse(
            order_id=new_order.order_id,
            reordered_from=order.order_id,
            item_count=len(new_order.items),
            subtotal=new_order.subtotal,
            delivery_fee=new_order.delivery_fee,
            total=new_order.total,
            skipped_count=len(order.items) - len(new_order.items),
        )
