"""
Report API endpoints.

Chart data for sales, order status, monthly trends and stock levels. Every
call scans the current products and orders.
"""

from typing import Optional

from fastapi import APIRouter, Query

from stockroom.api.deps import ReportingServiceDep
from stockroom.schemas.reports import (
    DashboardSummary,
    InventoryReport,
    InventoryValueSummary,
    LowStockReport,
    SalesChart,
    StatusDistribution,
)

router = APIRouter(prefix="/reports", tags=["reports"])


@router.get(
    "/sales-by-product",
    response_model=SalesChart,
    summary="Top products by completed sales",
    description="Top 10 products; totalSales covers the listed products only",
)
async def sales_by_product(service: ReportingServiceDep) -> SalesChart:
    return await service.sales_by_product()


@router.get(
    "/sales-by-category",
    response_model=SalesChart,
    summary="Completed sales by category",
)
async def sales_by_category(service: ReportingServiceDep) -> SalesChart:
    return await service.sales_by_category()


@router.get(
    "/order-status",
    response_model=StatusDistribution,
    summary="Order count per status",
)
async def order_status(service: ReportingServiceDep) -> StatusDistribution:
    return await service.order_status_distribution()


@router.get(
    "/monthly-sales",
    response_model=SalesChart,
    summary="Completed sales per month",
)
async def monthly_sales(
    service: ReportingServiceDep,
    months: Optional[int] = Query(
        None, ge=0, le=120, description="Window size in months, current month last"
    ),
) -> SalesChart:
    return await service.monthly_sales_summary(months)


@router.get(
    "/low-stock",
    response_model=LowStockReport,
    summary="Products below a stock threshold",
)
async def low_stock(
    service: ReportingServiceDep,
    threshold: Optional[int] = Query(None, ge=0, description="Quantity threshold"),
) -> LowStockReport:
    return await service.low_stock_report(threshold)


@router.get(
    "/inventory-value",
    response_model=InventoryValueSummary,
    summary="Stock value in total and per category",
)
async def inventory_value(service: ReportingServiceDep) -> InventoryValueSummary:
    return await service.inventory_value_summary()


@router.get(
    "/dashboard-summary",
    response_model=DashboardSummary,
    summary="Headline product and order counts",
)
async def dashboard_summary(service: ReportingServiceDep) -> DashboardSummary:
    return await service.dashboard_summary()


@router.get(
    "/inventory",
    response_model=InventoryReport,
    summary="Inventory value with category shares",
)
async def inventory(service: ReportingServiceDep) -> InventoryReport:
    return await service.inventory_report()
