"""
Reporting service.

Pulls fresh product and order snapshots from the stores on every call and
hands them to the pure aggregators in ``stockroom.services.reports.aggregator``.
Nothing is cached.
"""

from typing import Optional

from stockroom.core.config import get_settings
from stockroom.core.logging import get_logger, log_performance
from stockroom.domain.records import OrderRecord, ProductRecord
from stockroom.domain.stores import UnitOfWork
from stockroom.schemas.reports import (
    DashboardOverview,
    DashboardSummary,
    InventoryReport,
    InventoryValueSummary,
    LowStockItem,
    LowStockReport,
    SalesChart,
    StatusDistribution,
)
from stockroom.services.reports import aggregator

logger = get_logger(__name__)


class ReportingService:
    """
    Report and dashboard queries.

    Attributes:
        uow: Unit of work providing the product and order stores
    """

    def __init__(self, uow: UnitOfWork):
        self.uow = uow
        self.settings = get_settings()

    async def _products(self) -> list[ProductRecord]:
        return await self.uow.products.find_all()

    async def _orders(self) -> list[OrderRecord]:
        return await self.uow.orders.find_all()

    async def sales_by_product(self) -> SalesChart:
        products, orders = await self._products(), await self._orders()
        with log_performance(logger, "report.sales_by_product", orders=len(orders)):
            return aggregator.sales_by_product(orders, products)

    async def sales_by_category(self) -> SalesChart:
        products, orders = await self._products(), await self._orders()
        with log_performance(logger, "report.sales_by_category", orders=len(orders)):
            return aggregator.sales_by_category(orders, products)

    async def low_stock_products(self, threshold: Optional[int] = None) -> list[LowStockItem]:
        if threshold is None:
            threshold = self.settings.low_stock_threshold
        return aggregator.low_stock_products(await self._products(), threshold)

    async def low_stock_report(self, threshold: Optional[int] = None) -> LowStockReport:
        if threshold is None:
            threshold = self.settings.low_stock_threshold
        return aggregator.low_stock_report(await self._products(), threshold)

    async def order_status_distribution(self) -> StatusDistribution:
        return aggregator.order_status_distribution(await self._orders())

    async def monthly_sales_summary(self, months: Optional[int] = None) -> SalesChart:
        if months is None:
            months = self.settings.monthly_sales_months
        orders = await self._orders()
        with log_performance(logger, "report.monthly_sales", months=months):
            return aggregator.monthly_sales_summary(orders, months)

    async def inventory_value_summary(self) -> InventoryValueSummary:
        return aggregator.inventory_value_summary(await self._products())

    async def dashboard_summary(self) -> DashboardSummary:
        products, orders = await self._products(), await self._orders()
        return aggregator.dashboard_summary(products, orders)

    async def inventory_report(self) -> InventoryReport:
        products, orders = await self._products(), await self._orders()
        return aggregator.inventory_report(products, orders)

    async def dashboard(self) -> DashboardOverview:
        """
        Landing page data: summary, stock value, products under the dashboard
        threshold and catalog counts, computed from one pair of snapshots.
        """
        products, orders = await self._products(), await self._orders()
        categories = await self.uow.categories.find_all()
        suppliers = await self.uow.suppliers.find_all()
        threshold = self.settings.dashboard_low_stock_threshold

        with log_performance(logger, "report.dashboard", products=len(products)):
            return DashboardOverview(
                summary=aggregator.dashboard_summary(products, orders),
                inventory_value=aggregator.inventory_value_summary(products),
                low_stock_products=aggregator.low_stock_products(products, threshold),
                low_stock_threshold=threshold,
                product_count=len(products),
                order_count=len(orders),
                category_count=len(categories),
                supplier_count=len(suppliers),
            )
