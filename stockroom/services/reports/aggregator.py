"""
Report aggregation over product and order snapshots.

Every function here is pure: it receives full snapshots of products and
orders, scans them and returns a payload. Missing prices, totals and
quantities count as zero, and empty snapshots produce zero-valued payloads.
Grouped series are sorted with Python's stable sort, so groups with equal
totals keep the order in which they were first seen.
"""

from collections.abc import Iterable, Sequence
from datetime import datetime, timezone
from decimal import Decimal
from typing import Optional
from uuid import UUID

from stockroom.domain.enums import OrderStatus
from stockroom.domain.records import OrderRecord, ProductRecord
from stockroom.schemas.reports import (
    DashboardSummary,
    InventoryReport,
    InventoryValueSummary,
    LowStockItem,
    LowStockReport,
    SalesChart,
    StatusDistribution,
)

TOP_PRODUCTS_LIMIT = 10
DASHBOARD_LOW_STOCK_THRESHOLD = 10
CRITICAL_STOCK_LEVEL = 5

UNKNOWN_PRODUCT = "Unknown"
UNCATEGORIZED = "Uncategorized"
NO_CATEGORY = "N/A"

ZERO = Decimal("0")


def _index(products: Iterable[ProductRecord]) -> dict[UUID, ProductRecord]:
    return {p.id: p for p in products if p.id is not None}


def _completed(orders: Iterable[OrderRecord]) -> list[OrderRecord]:
    return [o for o in orders if o.status == OrderStatus.COMPLETED]


def _order_value(order: OrderRecord) -> Decimal:
    return order.total_price if order.total_price is not None else ZERO


def _stock_value(product: ProductRecord) -> Decimal:
    quantity = product.quantity or 0
    price = product.price if product.price is not None else ZERO
    return price * quantity


def _ranked(groups: dict[str, Decimal]) -> list[tuple[str, Decimal]]:
    return sorted(groups.items(), key=lambda item: item[1], reverse=True)


def sales_by_product(
    orders: Sequence[OrderRecord],
    products: Sequence[ProductRecord],
    limit: int = TOP_PRODUCTS_LIMIT,
) -> SalesChart:
    """
    Completed sales per product name, best sellers first, top ``limit`` only.

    ``total_sales`` sums the returned top entries only, not every completed
    order.
    """
    by_id = _index(products)
    groups: dict[str, Decimal] = {}
    for order in _completed(orders):
        product = by_id.get(order.product_id) if order.product_id else None
        name = product.name if product else UNKNOWN_PRODUCT
        groups[name] = groups.get(name, ZERO) + _order_value(order)

    top = _ranked(groups)[:limit]
    return SalesChart(
        labels=[name for name, _ in top],
        data=[value for _, value in top],
        total_sales=sum((value for _, value in top), ZERO),
    )


def sales_by_category(
    orders: Sequence[OrderRecord],
    products: Sequence[ProductRecord],
) -> SalesChart:
    """
    Completed sales per product category, highest first.

    Orders whose product is missing or has no category are left out.
    """
    by_id = _index(products)
    groups: dict[str, Decimal] = {}
    for order in _completed(orders):
        product = by_id.get(order.product_id) if order.product_id else None
        if product is None or not product.category_name:
            continue
        category = product.category_name
        groups[category] = groups.get(category, ZERO) + _order_value(order)

    ranked = _ranked(groups)
    return SalesChart(
        labels=[name for name, _ in ranked],
        data=[value for _, value in ranked],
        total_sales=sum((value for _, value in ranked), ZERO),
    )


def low_stock_products(
    products: Sequence[ProductRecord], threshold: int
) -> list[LowStockItem]:
    """Products with a known quantity below ``threshold``, lowest stock first."""
    low = [p for p in products if p.quantity is not None and p.quantity < threshold]
    low.sort(key=lambda p: p.quantity)
    return [
        LowStockItem(
            id=p.id,
            name=p.name,
            quantity=p.quantity,
            category_name=p.category_name or NO_CATEGORY,
        )
        for p in low
    ]


def low_stock_report(products: Sequence[ProductRecord], threshold: int) -> LowStockReport:
    items = low_stock_products(products, threshold)
    return LowStockReport(
        threshold=threshold,
        low_stock_products=items,
        low_stock_total=len(items),
        out_of_stock_count=sum(1 for item in items if item.quantity == 0),
        critical_count=sum(
            1 for item in items if 0 < item.quantity < CRITICAL_STOCK_LEVEL
        ),
    )


def order_status_distribution(orders: Sequence[OrderRecord]) -> StatusDistribution:
    """Order count per status. Every status is present; unset status counts as PENDING."""
    counts = {status: 0 for status in OrderStatus}
    for order in orders:
        counts[order.status or OrderStatus.PENDING] += 1

    return StatusDistribution(
        labels=[status.value for status in counts],
        data=list(counts.values()),
        total_orders=sum(counts.values()),
    )


def _as_utc(value: datetime) -> datetime:
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


def _month_key(year: int, month: int, offset: int) -> tuple[int, int]:
    index = year * 12 + (month - 1) + offset
    return index // 12, index % 12 + 1


def monthly_sales_summary(
    orders: Sequence[OrderRecord],
    months: int,
    now: Optional[datetime] = None,
) -> SalesChart:
    """
    Completed sales per calendar month for the last ``months`` months.

    The window ends with the current month and is returned oldest first with
    ``YYYY-MM`` labels. Order dates are compared in UTC; orders outside the
    window or without a date are ignored.
    """
    if months <= 0:
        return SalesChart()

    current = _as_utc(now or datetime.now(timezone.utc))
    buckets: dict[tuple[int, int], Decimal] = {
        _month_key(current.year, current.month, -offset): ZERO
        for offset in range(months - 1, -1, -1)
    }

    for order in _completed(orders):
        if order.order_date is None:
            continue
        ordered = _as_utc(order.order_date)
        key = (ordered.year, ordered.month)
        if key in buckets:
            buckets[key] += _order_value(order)

    return SalesChart(
        labels=[f"{year:04d}-{month:02d}" for year, month in buckets],
        data=list(buckets.values()),
        total_sales=sum(buckets.values(), ZERO),
    )


def inventory_value_summary(products: Sequence[ProductRecord]) -> InventoryValueSummary:
    """Stock value (quantity x price) in total, per category and on average."""
    total = ZERO
    by_category: dict[str, Decimal] = {}
    for product in products:
        value = _stock_value(product)
        total += value
        category = product.category_name or UNCATEGORIZED
        by_category[category] = by_category.get(category, ZERO) + value

    count = len(products)
    return InventoryValueSummary(
        total_value=total,
        category_values=by_category,
        total_products=count,
        average_value=total / count if count else ZERO,
    )


def dashboard_summary(
    products: Sequence[ProductRecord],
    orders: Sequence[OrderRecord],
    low_stock_threshold: int = DASHBOARD_LOW_STOCK_THRESHOLD,
) -> DashboardSummary:
    completed = _completed(orders)
    return DashboardSummary(
        total_products=len(products),
        total_orders=len(orders),
        completed_orders=len(completed),
        pending_orders=sum(1 for o in orders if o.status == OrderStatus.PENDING),
        low_stock_count=sum(
            1
            for p in products
            if p.quantity is not None and p.quantity < low_stock_threshold
        ),
        total_completed_sales=sum((_order_value(o) for o in completed), ZERO),
    )


def inventory_report(
    products: Sequence[ProductRecord],
    orders: Sequence[OrderRecord],
) -> InventoryReport:
    """Inventory value summary plus each category's share of the total value."""
    value = inventory_value_summary(products)
    total = value.total_value
    percentages = {
        category: float(amount / total) if total > 0 else 0.0
        for category, amount in value.category_values.items()
    }
    return InventoryReport(
        inventory_value=value,
        summary=dashboard_summary(products, orders),
        category_percentages=percentages,
    )
