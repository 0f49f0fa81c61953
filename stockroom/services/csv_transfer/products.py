"""
Product CSV export and import.

Export columns: ID, Name, Description, Quantity, Price, Category, Created At.
Import requires Name, Quantity and Price columns; Description and Category
are optional. Each valid row creates a new product.
"""

import uuid
from decimal import Decimal, InvalidOperation
from typing import Optional

from stockroom.core.config import get_settings
from stockroom.core.exceptions import InventoryServiceError
from stockroom.core.logging import get_logger, log_performance
from stockroom.domain.records import ProductRecord
from stockroom.domain.stores import UnitOfWork
from stockroom.schemas.csv_transfer import CsvImportResult
from stockroom.services.catalog.service import ProductService
from stockroom.services.csv_transfer.reader import RowError, parse_csv, render_csv

logger = get_logger(__name__)

PRODUCT_EXPORT_HEADER = (
    "ID",
    "Name",
    "Description",
    "Quantity",
    "Price",
    "Category",
    "Created At",
)
PRODUCT_REQUIRED_COLUMNS = ("Name", "Quantity", "Price")


class ProductCsvService:
    def __init__(self, uow: UnitOfWork):
        self.uow = uow
        self.products = ProductService(uow)
        self.settings = get_settings()

    async def export_products(self) -> str:
        products = await self.uow.products.find_all()
        return render_csv(
            PRODUCT_EXPORT_HEADER,
            (
                (
                    p.id,
                    p.name,
                    p.description or "",
                    p.quantity if p.quantity is not None else 0,
                    p.price if p.price is not None else 0,
                    p.category_name or "",
                    p.created_at.isoformat() if p.created_at else "",
                )
                for p in products
            ),
        )

    async def import_products(self, content: bytes) -> CsvImportResult:
        """
        Create one product per valid row.

        Invalid rows are reported as ``Row N: message`` and skipped; the
        remaining rows are still imported.

        Raises:
            CsvFormatError: The file as a whole cannot be processed
        """
        rows = parse_csv(
            content,
            PRODUCT_REQUIRED_COLUMNS,
            max_rows=self.settings.csv_max_rows,
            max_bytes=self.settings.csv_max_file_size_bytes,
        )
        result = CsvImportResult()

        with log_performance(logger, "csv.import_products", rows=len(rows)):
            for line_number, row in rows:
                try:
                    product = await self._parse_row(row)
                    await self.products.create_product(product)
                    result.imported += 1
                except RowError as e:
                    result.errors.append(f"Row {line_number}: {e}")
                except InventoryServiceError as e:
                    result.errors.append(f"Row {line_number}: {e.message}")

        logger.info(
            "Product CSV imported",
            imported=result.imported,
            rejected=len(result.errors),
        )
        return result

    async def _parse_row(self, row: dict[str, str]) -> ProductRecord:
        name = row.get("name", "").strip()
        quantity_text = row.get("quantity", "").strip()
        price_text = row.get("price", "").strip()

        if not name:
            raise RowError("Product name is required")
        if not quantity_text:
            raise RowError("Quantity is required")
        if not price_text:
            raise RowError("Price is required")

        try:
            quantity = int(quantity_text)
            price = Decimal(price_text)
        except (ValueError, InvalidOperation):
            raise RowError("Invalid quantity or price format")
        if not price.is_finite():
            raise RowError("Invalid quantity or price format")

        if quantity < 0:
            raise RowError("Quantity cannot be negative")
        if price < 0:
            raise RowError("Price cannot be negative")

        category_id = await self._category_id(row.get("category", ""))
        description = row.get("description", "").strip()

        return ProductRecord(
            name=name,
            description=description or None,
            quantity=quantity,
            price=price,
            category_id=category_id,
        )

    async def _category_id(self, name: str) -> Optional[uuid.UUID]:
        if not name.strip():
            return None
        category = await self.uow.categories.find_by_name(name.strip())
        return category.id if category else None
