# src/fm_order/api/router.py
"""fm_order REST endpoints.

POST /orders/{order_id}/reorder          — validate a past order against the live catalog
POST /orders/{order_id}/reorder/place    — create a new order from the available items
"""
from typing import Annotated

from fastapi import APIRouter, Depends, Request
from sqlalchemy.ext.asyncio import AsyncSession

from src.fm_common.database import get_db_session
from src.fm_common.response import ApiResponse, request_id_of, success_response
from src.fm_order.application.schemas import ReorderRequest
from src.fm_order.application.service import ReorderApplicationService

router = APIRouter(prefix="/orders", tags=["orders"])


def get_reorder_service() -> ReorderApplicationService:
    return ReorderApplicationService()


@router.post("/{order_id}/reorder")
async def validate_reorder(
    order_id: str,
    req: ReorderRequest,
    request: Request,
    service: Annotated[ReorderApplicationService, Depends(get_reorder_service)],
    db: Annotated[AsyncSession, Depends(get_db_session)],
) -> ApiResponse:
    result = await service.validate_reorder(db, order_id, req.user_id)
    return success_response(result.model_dump(mode="json"), request_id=request_id_of(request))


@router.post("/{order_id}/reorder/place", status_code=201)
async def place_reorder(
    order_id: str,
    req: ReorderRequest,
    request: Request,
    service: Annotated[ReorderApplicationService, Depends(get_reorder_service)],
    db: Annotated[AsyncSession, Depends(get_db_session)],
) -> ApiResponse:
    result = await service.place_reorder(db, order_id, req.user_id)
    return success_response(result.model_dump(), request_id=request_id_of(request))
