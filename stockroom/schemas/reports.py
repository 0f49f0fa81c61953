"""
Report payload schemas.

Chart clients read these payloads directly, so the JSON keys are camelCase
(``labels``, ``data``, ``totalSales``, ``categoryValues`` ...). Monetary
values are kept as ``Decimal`` in Python and rendered as JSON numbers.
"""

from decimal import Decimal
from typing import Annotated, Optional
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field, PlainSerializer
from pydantic.alias_generators import to_camel

Money = Annotated[
    Decimal,
    PlainSerializer(lambda v: float(v), return_type=float, when_used="json"),
]


class ReportPayload(BaseModel):
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        frozen=True,
    )


class SalesChart(ReportPayload):
    """Labelled sales series, used by the product, category and monthly charts."""

    labels: list[str] = Field(default_factory=list)
    data: list[Money] = Field(default_factory=list)
    total_sales: Money = Decimal("0")


class StatusDistribution(ReportPayload):
    labels: list[str]
    data: list[int]
    total_orders: int


class LowStockItem(ReportPayload):
    id: Optional[UUID] = None
    name: str
    quantity: int
    category_name: str


class LowStockReport(ReportPayload):
    """Low stock listing with out-of-stock and critical counts."""

    threshold: int
    low_stock_products: list[LowStockItem]
    low_stock_total: int
    out_of_stock_count: int
    critical_count: int


class InventoryValueSummary(ReportPayload):
    total_value: Money
    category_values: dict[str, Money]
    total_products: int
    average_value: Money


class DashboardSummary(ReportPayload):
    total_products: int
    total_orders: int
    completed_orders: int
    pending_orders: int
    low_stock_count: int
    total_completed_sales: Money


class InventoryReport(ReportPayload):
    inventory_value: InventoryValueSummary
    summary: DashboardSummary
    category_percentages: dict[str, float] = Field(
        description="Share of total inventory value per category, 0.0 to 1.0",
    )


class DashboardOverview(ReportPayload):
    """Everything the landing dashboard shows in one response."""

    summary: DashboardSummary
    inventory_value: InventoryValueSummary
    low_stock_products: list[LowStockItem]
    low_stock_threshold: int
    product_count: int
    order_count: int
    category_count: int
    supplier_count: int
