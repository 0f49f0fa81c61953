"""
Category API endpoints.
"""

from uuid import UUID

from fastapi import APIRouter, status

from stockroom.api.deps import CategoryServiceDep, http_error
from stockroom.core.exceptions import InventoryServiceError
from stockroom.schemas.catalog import CategoryRequest, CategoryResponse

router = APIRouter(prefix="/categories", tags=["categories"])


@router.get("", response_model=list[CategoryResponse], summary="List categories")
async def list_categories(service: CategoryServiceDep) -> list[CategoryResponse]:
    return [CategoryResponse.model_validate(c) for c in await service.list_categories()]


@router.get("/{category_id}", response_model=CategoryResponse, summary="Get category")
async def get_category(category_id: UUID, service: CategoryServiceDep) -> CategoryResponse:
    try:
        return CategoryResponse.model_validate(await service.get_category(category_id))
    except InventoryServiceError as e:
        raise http_error(e) from e


@router.post(
    "",
    response_model=CategoryResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Create category",
    description="Create a category. Names must be unique.",
)
async def create_category(
    request: CategoryRequest, service: CategoryServiceDep
) -> CategoryResponse:
    try:
        saved = await service.create_category(request.to_record())
    except InventoryServiceError as e:
        raise http_error(e) from e
    return CategoryResponse.model_validate(saved)


@router.put("/{category_id}", response_model=CategoryResponse, summary="Update category")
async def update_category(
    category_id: UUID, request: CategoryRequest, service: CategoryServiceDep
) -> CategoryResponse:
    try:
        saved = await service.update_category(category_id, request.to_record())
    except InventoryServiceError as e:
        raise http_error(e) from e
    return CategoryResponse.model_validate(saved)


@router.delete(
    "/{category_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Delete category",
    description="Delete a category that no product uses.",
)
async def delete_category(category_id: UUID, service: CategoryServiceDep) -> None:
    try:
        await service.delete_category(category_id)
    except InventoryServiceError as e:
        raise http_error(e) from e
