"""
Order CSV export and import.

Imported rows go through ``InventoryReconciler`` one at a time, each in its
own unit of work: a CONFIRMED row takes its quantity out of stock, and a row
rejected by the reconciler is reported without undoing earlier rows.
"""

from typing import Optional

from stockroom.core.config import get_settings
from stockroom.core.exceptions import InventoryServiceError
from stockroom.core.logging import get_logger, log_performance
from stockroom.domain.enums import OrderStatus
from stockroom.domain.records import OrderRecord
from stockroom.domain.stores import UnitOfWork
from stockroom.schemas.csv_transfer import CsvImportResult
from stockroom.services.csv_transfer.reader import RowError, parse_csv, render_csv
from stockroom.services.orders.locks import ProductLockRegistry
from stockroom.services.orders.service import OrderService

logger = get_logger(__name__)

ORDER_EXPORT_HEADER = (
    "ID",
    "Product",
    "Quantity",
    "Status",
    "Total Price",
    "Supplier",
    "Order Date",
)
ORDER_REQUIRED_COLUMNS = ("Product", "Quantity")


class OrderCsvService:
    def __init__(self, uow: UnitOfWork, locks: Optional[ProductLockRegistry] = None):
        self.uow = uow
        self.orders = OrderService(uow, locks)
        self.settings = get_settings()

    async def export_orders(self) -> str:
        orders = await self.uow.orders.find_all()
        return render_csv(
            ORDER_EXPORT_HEADER,
            (
                (
                    o.id,
                    o.product_name or "",
                    o.quantity if o.quantity is not None else 0,
                    o.status.value if o.status else "",
                    o.total_price if o.total_price is not None else 0,
                    o.supplier_name or "",
                    o.order_date.isoformat() if o.order_date else "",
                )
                for o in orders
            ),
        )

    async def import_orders(self, content: bytes) -> CsvImportResult:
        """
        Create one order per valid row.

        Product and supplier are matched by name, ignoring case. Status is
        optional and defaults to PENDING.

        Raises:
            CsvFormatError: The file as a whole cannot be processed
        """
        rows = parse_csv(
            content,
            ORDER_REQUIRED_COLUMNS,
            max_rows=self.settings.csv_max_rows,
            max_bytes=self.settings.csv_max_file_size_bytes,
        )
        result = CsvImportResult()

        with log_performance(logger, "csv.import_orders", rows=len(rows)):
            for line_number, row in rows:
                try:
                    order = await self._parse_row(row)
                    await self.orders.save_order(order)
                    result.imported += 1
                except RowError as e:
                    result.errors.append(f"Row {line_number}: {e}")
                except InventoryServiceError as e:
                    logger.info(
                        "Order CSV row rejected",
                        line_number=line_number,
                        error=e.message,
                    )
                    result.errors.append(f"Row {line_number}: {e.message}")

        logger.info(
            "Order CSV imported",
            imported=result.imported,
            rejected=len(result.errors),
        )
        return result

    async def _parse_row(self, row: dict[str, str]) -> OrderRecord:
        product_name = row.get("product", "").strip()
        quantity_text = row.get("quantity", "").strip()
        status_text = row.get("status", "").strip()
        supplier_name = row.get("supplier", "").strip()

        if not product_name:
            raise RowError("Product name is required")
        if not quantity_text:
            raise RowError("Quantity is required")

        try:
            quantity = int(quantity_text)
        except ValueError:
            raise RowError("Invalid quantity format")
        if quantity <= 0:
            raise RowError("Quantity must be greater than 0")

        product = await self.uow.products.find_by_name(product_name)
        if product is None:
            raise RowError(f"Product '{product_name}' not found")

        supplier = (
            await self.uow.suppliers.find_by_name(supplier_name)
            if supplier_name
            else None
        )

        status = OrderStatus.PENDING
        if status_text:
            try:
                status = OrderStatus.from_string(status_text)
            except ValueError:
                raise RowError(f"Invalid status '{status_text}'")

        return OrderRecord(
            product_id=product.id,
            supplier_id=supplier.id if supplier else None,
            quantity=quantity,
            status=status,
        )
