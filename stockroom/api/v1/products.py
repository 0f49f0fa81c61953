"""
Product API endpoints.

Quantity set through these endpoints changes stock directly; order
reconciliation is not involved.
"""

from uuid import UUID

from fastapi import APIRouter, status

from stockroom.api.deps import ProductServiceDep, http_error
from stockroom.core.exceptions import InventoryServiceError
from stockroom.core.logging import get_logger
from stockroom.schemas.catalog import ProductRequest, ProductResponse

logger = get_logger(__name__)

router = APIRouter(prefix="/products", tags=["products"])


@router.get("", response_model=list[ProductResponse], summary="List products")
async def list_products(service: ProductServiceDep) -> list[ProductResponse]:
    return [ProductResponse.model_validate(p) for p in await service.list_products()]


@router.get("/{product_id}", response_model=ProductResponse, summary="Get product")
async def get_product(product_id: UUID, service: ProductServiceDep) -> ProductResponse:
    try:
        return ProductResponse.model_validate(await service.get_product(product_id))
    except InventoryServiceError as e:
        raise http_error(e) from e


@router.post(
    "",
    response_model=ProductResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Create product",
)
async def create_product(
    request: ProductRequest, service: ProductServiceDep
) -> ProductResponse:
    try:
        saved = await service.create_product(request.to_record())
    except InventoryServiceError as e:
        logger.warning("Product create rejected", name=request.name, error=e.message)
        raise http_error(e) from e
    return ProductResponse.model_validate(saved)


@router.put("/{product_id}", response_model=ProductResponse, summary="Update product")
async def update_product(
    product_id: UUID, request: ProductRequest, service: ProductServiceDep
) -> ProductResponse:
    try:
        saved = await service.update_product(product_id, request.to_record())
    except InventoryServiceError as e:
        raise http_error(e) from e
    return ProductResponse.model_validate(saved)


@router.delete(
    "/{product_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Delete product",
    description="Delete a product that no order references.",
)
async def delete_product(product_id: UUID, service: ProductServiceDep) -> None:
    try:
        await service.delete_product(product_id)
    except InventoryServiceError as e:
        raise http_error(e) from e
