"""fm_catalog REST endpoints.

GET /products                    — listing (Redis response cache)
GET /products/{product_id}       — single product
PUT /products/bulk-update        — partial update of many products
PUT /products/{product_id}       — partial update of one product
"""

from typing import Annotated

from fastapi import APIRouter, Depends, Query, Request
from sqlalchemy.ext.asyncio import AsyncSession

from src.fm_catalog.application.schemas import BulkUpdateRequest, ProductUpdateRequest
from src.fm_catalog.application.service import CatalogApplicationService
from src.fm_catalog.infrastructure.response_cache import ProductResponseCache
from src.fm_common.database import get_db_session
from src.fm_common.redis_client import get_redis
from src.fm_common.response import ApiResponse, request_id_of, success_response

router = APIRouter(prefix="/products", tags=["products"])


async def get_catalog_service() -> CatalogApplicationService:
    redis = await get_redis()
    return CatalogApplicationService(cache=ProductResponseCache(redis))


@router.get("")
async def list_products(
    request: Request,
    service: Annotated[CatalogApplicationService, Depends(get_catalog_service)],
    db: Annotated[AsyncSession, Depends(get_db_session)],
    status: str | None = Query(None, description="active | inactive. Default: all non-deleted"),
    farmer_id: str | None = Query(None),
    category: str | None = Query(None),
    limit: int = Query(50, ge=1, le=200),
) -> ApiResponse:
    result = await service.list_products(db, status, farmer_id, category, limit)
    return success_response(result.model_dump(), request_id=request_id_of(request))


@router.put("/bulk-update")
async def bulk_update_products(
    req: BulkUpdateRequest,
    request: Request,
    service: Annotated[CatalogApplicationService, Depends(get_catalog_service)],
    db: Annotated[AsyncSession, Depends(get_db_session)],
) -> ApiResponse:
    result = await service.bulk_update(db, req.product_ids, req.update_data)
    message = f"Successfully updated {result.updated_count} of {result.requested_count} products"
    return success_response(
        result.model_dump(), message=message, request_id=request_id_of(request)
    )


@router.get("/{product_id}")
async def get_product(
    product_id: str,
    request: Request,
    service: Annotated[CatalogApplicationService, Depends(get_catalog_service)],
    db: Annotated[AsyncSession, Depends(get_db_session)],
) -> ApiResponse:
    result = await service.get_product(db, product_id)
    return success_response(result.model_dump(), request_id=request_id_of(request))


@router.put("/{product_id}")
async def update_product(
    product_id: str,
    req: ProductUpdateRequest,
    request: Request,
    service: Annotated[CatalogApplicationService, Depends(get_catalog_service)],
    db: Annotated[AsyncSession, Depends(get_db_session)],
) -> ApiResponse:
    result = await service.update_product(db, product_id, req.update_data)
    return success_response(result.model_dump(), request_id=request_id_of(request))
