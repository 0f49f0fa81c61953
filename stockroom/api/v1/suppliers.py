"""
Supplier API endpoints.
"""

from uuid import UUID

from fastapi import APIRouter, status

from stockroom.api.deps import SupplierServiceDep, http_error
from stockroom.core.exceptions import InventoryServiceError
from stockroom.schemas.catalog import SupplierRequest, SupplierResponse

router = APIRouter(prefix="/suppliers", tags=["suppliers"])


@router.get("", response_model=list[SupplierResponse], summary="List suppliers")
async def list_suppliers(service: SupplierServiceDep) -> list[SupplierResponse]:
    return [SupplierResponse.model_validate(s) for s in await service.list_suppliers()]


@router.get("/{supplier_id}", response_model=SupplierResponse, summary="Get supplier")
async def get_supplier(supplier_id: UUID, service: SupplierServiceDep) -> SupplierResponse:
    try:
        return SupplierResponse.model_validate(await service.get_supplier(supplier_id))
    except InventoryServiceError as e:
        raise http_error(e) from e


@router.post(
    "",
    response_model=SupplierResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Create supplier",
)
async def create_supplier(
    request: SupplierRequest, service: SupplierServiceDep
) -> SupplierResponse:
    try:
        saved = await service.create_supplier(request.to_record())
    except InventoryServiceError as e:
        raise http_error(e) from e
    return SupplierResponse.model_validate(saved)


@router.put("/{supplier_id}", response_model=SupplierResponse, summary="Update supplier")
async def update_supplier(
    supplier_id: UUID, request: SupplierRequest, service: SupplierServiceDep
) -> SupplierResponse:
    try:
        saved = await service.update_supplier(supplier_id, request.to_record())
    except InventoryServiceError as e:
        raise http_error(e) from e
    return SupplierResponse.model_validate(saved)


@router.delete(
    "/{supplier_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Delete supplier",
    description="Delete a supplier. Orders placed with it keep no supplier.",
)
async def delete_supplier(supplier_id: UUID, service: SupplierServiceDep) -> None:
    try:
        await service.delete_supplier(supplier_id)
    except InventoryServiceError as e:
        raise http_error(e) from e
