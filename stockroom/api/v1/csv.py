"""
CSV export and import endpoints for products and orders.

Exports stream back as ``text/csv`` attachments. Imports accept a multipart
upload, report per-row failures in the response body and reject the whole
file only when it cannot be read as CSV.
"""

from datetime import datetime, timezone
from typing import Annotated

from fastapi import APIRouter, File, HTTPException, Request, Response, UploadFile, status

from stockroom.api.deps import OrderCsvServiceDep, ProductCsvServiceDep, http_error
from stockroom.core.config import get_settings
from stockroom.core.exceptions import InventoryServiceError
from stockroom.core.logging import get_logger
from stockroom.core.rate_limit import limiter
from stockroom.schemas.csv_transfer import CsvImportResult

logger = get_logger(__name__)
settings = get_settings()

router = APIRouter(prefix="/csv", tags=["csv"])

CSV_MEDIA_TYPE = "text/csv"


def _attachment(content: str, prefix: str) -> Response:
    stamp = datetime.now(timezone.utc).strftime("%Y%m%d_%H%M%S")
    return Response(
        content=content,
        media_type=CSV_MEDIA_TYPE,
        headers={"Content-Disposition": f'attachment; filename="{prefix}_{stamp}.csv"'},
    )


async def _read_upload(file: UploadFile) -> bytes:
    if not file.filename:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="No file provided",
        )
    if not file.filename.lower().endswith(".csv"):
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Invalid file format. Only CSV files are supported",
        )
    return await file.read()


@router.get(
    "/products/export",
    response_class=Response,
    summary="Export products as CSV",
)
async def export_products(service: ProductCsvServiceDep) -> Response:
    return _attachment(await service.export_products(), "products")


@router.get(
    "/orders/export",
    response_class=Response,
    summary="Export orders as CSV",
)
async def export_orders(service: OrderCsvServiceDep) -> Response:
    return _attachment(await service.export_orders(), "orders")


@router.post(
    "/products/import",
    response_model=CsvImportResult,
    summary="Import products from CSV",
    description="Create one product per row. Required columns: Name, Quantity, Price",
)
@limiter.limit(settings.csv_import_rate_limit)
async def import_products(
    request: Request,
    service: ProductCsvServiceDep,
    file: Annotated[UploadFile, File(description="CSV file with product rows")],
) -> CsvImportResult:
    content = await _read_upload(file)
    logger.info("Importing products", filename=file.filename, size=len(content))

    try:
        return await service.import_products(content)
    except InventoryServiceError as e:
        logger.warning("Product CSV rejected", filename=file.filename, error=e.message)
        raise http_error(e) from e


@router.post(
    "/orders/import",
    response_model=CsvImportResult,
    summary="Import orders from CSV",
    description=(
        "Save one order per row through inventory reconciliation. "
        "Required columns: Product, Quantity"
    ),
)
@limiter.limit(settings.csv_import_rate_limit)
async def import_orders(
    request: Request,
    service: OrderCsvServiceDep,
    file: Annotated[UploadFile, File(description="CSV file with order rows")],
) -> CsvImportResult:
    content = await _read_upload(file)
    logger.info("Importing orders", filename=file.filename, size=len(content))

    try:
        return await service.import_orders(content)
    except InventoryServiceError as e:
        logger.warning("Order CSV rejected", filename=file.filename, error=e.message)
        raise http_error(e) from e
