"""
Order API endpoints.

Creating or editing an order runs it through inventory reconciliation:
confirming reserves stock, cancelling a confirmed order releases it.
"""

import math
from typing import Optional
from uuid import UUID

from fastapi import APIRouter, HTTPException, Query, status

from stockroom.api.deps import OrderServiceDep, http_error
from stockroom.core.exceptions import (
    InvalidOperationError,
    InventoryServiceError,
    NotFoundError,
    StoreConstraintError,
)
from stockroom.core.logging import get_logger
from stockroom.schemas.orders import (
    OrderHistoryResponse,
    OrderListResponse,
    OrderRequest,
    OrderResponse,
)
from stockroom.services.orders.service import OrderService

logger = get_logger(__name__)

router = APIRouter(prefix="/orders", tags=["orders"])


@router.get(
    "",
    response_model=OrderListResponse,
    summary="List orders",
    description="Paginated order list sorted by order date, quantity, status or total price",
)
async def list_orders(
    service: OrderServiceDep,
    page: int = Query(0, ge=0, description="Zero based page index"),
    size: int = Query(10, ge=1, le=100, description="Page size"),
    sort_field: str = Query("order_date", alias="sortField"),
    sort_dir: str = Query("desc", alias="sortDir", description="asc or desc"),
) -> OrderListResponse:
    try:
        items, total = await service.list_orders_page(
            page=page, size=size, sort_field=sort_field, sort_dir=sort_dir
        )
    except InvalidOperationError as e:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST, detail=e.message
        ) from e

    return OrderListResponse(
        items=[OrderResponse.model_validate(o) for o in items],
        total=total,
        page=page,
        size=size,
        pages=math.ceil(total / size) if total else 0,
    )


@router.get(
    "/{order_id}",
    response_model=OrderResponse,
    summary="Get order",
)
async def get_order(order_id: UUID, service: OrderServiceDep) -> OrderResponse:
    try:
        order = await service.get_order(order_id)
    except NotFoundError as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=e.message) from e
    return OrderResponse.model_validate(order)


async def _save(
    service: OrderService, request: OrderRequest, order_id: Optional[UUID] = None
) -> OrderResponse:
    try:
        saved = await service.save_order(request.to_record(order_id))
    except InvalidOperationError as e:
        logger.warning(
            "Order rejected",
            order_id=str(order_id) if order_id else None,
            product_id=str(request.product_id),
            error=e.message,
            context=e.context,
        )
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST, detail=e.message
        ) from e
    except NotFoundError as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=e.message) from e
    except StoreConstraintError as e:
        logger.error(
            "Order write failed on constraint",
            product_id=str(request.product_id),
            supplier_id=str(request.supplier_id) if request.supplier_id else None,
        )
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail=e.message) from e
    except InventoryServiceError as e:
        raise http_error(e) from e

    return OrderResponse.model_validate(saved)


@router.post(
    "",
    response_model=OrderResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Create order",
    description="Create an order. A CONFIRMED order takes its quantity out of stock.",
)
async def create_order(request: OrderRequest, service: OrderServiceDep) -> OrderResponse:
    logger.info(
        "Creating order",
        product_id=str(request.product_id),
        quantity=request.quantity,
        status=request.status.value if request.status else None,
    )
    return await _save(service, request)


@router.put(
    "/{order_id}",
    response_model=OrderResponse,
    summary="Update order",
    description=(
        "Replace an order. Moving it into CONFIRMED reserves stock; moving a "
        "CONFIRMED order to CANCELLED releases it."
    ),
)
async def update_order(
    order_id: UUID, request: OrderRequest, service: OrderServiceDep
) -> OrderResponse:
    try:
        await service.get_order(order_id)
    except NotFoundError as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=e.message) from e

    logger.info(
        "Updating order",
        order_id=str(order_id),
        status=request.status.value if request.status else None,
    )
    return await _save(service, request, order_id)


@router.delete(
    "/{order_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Delete order",
    description="Delete an order and its history. Stock is not adjusted.",
)
async def delete_order(order_id: UUID, service: OrderServiceDep) -> None:
    try:
        await service.delete_order(order_id)
    except NotFoundError as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=e.message) from e


@router.get(
    "/{order_id}/history",
    response_model=list[OrderHistoryResponse],
    summary="Order status history",
    description="Status changes of one order, newest first",
)
async def get_order_history(
    order_id: UUID, service: OrderServiceDep
) -> list[OrderHistoryResponse]:
    try:
        history = await service.get_order_history(order_id)
    except NotFoundError as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=e.message) from e
    return [OrderHistoryResponse.model_validate(h) for h in history]
