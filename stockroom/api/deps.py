"""
FastAPI dependencies: database session and service providers.
"""

from typing import Annotated

from fastapi import Depends, HTTPException, status
from sqlalchemy.ext.asyncio import AsyncSession

from stockroom.core.exceptions import (
    CsvFormatError,
    InvalidOperationError,
    InventoryServiceError,
    NotFoundError,
    StoreConstraintError,
)
from stockroom.core.logging import get_logger
from stockroom.database.connection import get_db
from stockroom.services.catalog.service import (
    CategoryService,
    ProductService,
    SupplierService,
)
from stockroom.services.csv_transfer.orders import OrderCsvService
from stockroom.services.csv_transfer.products import ProductCsvService
from stockroom.services.orders.service import OrderService, get_order_service
from stockroom.services.reports.service import ReportingService
from stockroom.services.unit_of_work import SqlAlchemyUnitOfWork

logger = get_logger(__name__)

DatabaseSession = Annotated[AsyncSession, Depends(get_db)]


def provide_order_service(db: DatabaseSession) -> OrderService:
    return get_order_service(db)


def provide_product_service(db: DatabaseSession) -> ProductService:
    return ProductService(SqlAlchemyUnitOfWork(db))


def provide_category_service(db: DatabaseSession) -> CategoryService:
    return CategoryService(SqlAlchemyUnitOfWork(db))


def provide_supplier_service(db: DatabaseSession) -> SupplierService:
    return SupplierService(SqlAlchemyUnitOfWork(db))


def provide_reporting_service(db: DatabaseSession) -> ReportingService:
    return ReportingService(SqlAlchemyUnitOfWork(db))


def provide_product_csv_service(db: DatabaseSession) -> ProductCsvService:
    return ProductCsvService(SqlAlchemyUnitOfWork(db))


def provide_order_csv_service(db: DatabaseSession) -> OrderCsvService:
    return OrderCsvService(SqlAlchemyUnitOfWork(db))


OrderServiceDep = Annotated[OrderService, Depends(provide_order_service)]
ProductServiceDep = Annotated[ProductService, Depends(provide_product_service)]
CategoryServiceDep = Annotated[CategoryService, Depends(provide_category_service)]
SupplierServiceDep = Annotated[SupplierService, Depends(provide_supplier_service)]
ReportingServiceDep = Annotated[ReportingService, Depends(provide_reporting_service)]
ProductCsvServiceDep = Annotated[ProductCsvService, Depends(provide_product_csv_service)]
OrderCsvServiceDep = Annotated[OrderCsvService, Depends(provide_order_csv_service)]


_STATUS_BY_ERROR: tuple[tuple[type[InventoryServiceError], int], ...] = (
    (NotFoundError, status.HTTP_404_NOT_FOUND),
    (InvalidOperationError, status.HTTP_400_BAD_REQUEST),
    (CsvFormatError, status.HTTP_400_BAD_REQUEST),
    (StoreConstraintError, status.HTTP_409_CONFLICT),
)


def http_error(error: InventoryServiceError) -> HTTPException:
    """
    Translate a domain error into the HTTPException returned to clients.

    Unknown subclasses map to 500 with a generic message.
    """
    for error_type, status_code in _STATUS_BY_ERROR:
        if isinstance(error, error_type):
            return HTTPException(status_code=status_code, detail=error.message)

    logger.error(
        "Unmapped service error",
        error=error.message,
        error_type=type(error).__name__,
        context=error.context,
    )
    return HTTPException(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        detail="An unexpected error occurred",
    )
