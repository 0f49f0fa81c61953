"""
Store and unit-of-work contracts.

Services depend on these protocols only. ``stockroom.services.unit_of_work``
implements them on SQLAlchemy; tests implement them in memory.
"""

from typing import Optional, Protocol
from uuid import UUID

from stockroom.domain.records import (
    CategoryRecord,
    OrderHistoryRecord,
    OrderRecord,
    ProductRecord,
    SupplierRecord,
)

ORDER_SORT_FIELDS = ("order_date", "quantity", "status", "total_price")


class ProductStore(Protocol):
    async def find_all(self) -> list[ProductRecord]: ...

    async def find_by_id(
        self, product_id: UUID, for_update: bool = False
    ) -> Optional[ProductRecord]:
        """Fetch one product; ``for_update`` locks the row until commit."""
        ...

    async def find_by_name(self, name: str) -> Optional[ProductRecord]: ...

    async def save(self, product: ProductRecord) -> ProductRecord: ...

    async def delete_by_id(self, product_id: UUID) -> bool: ...


class OrderStore(Protocol):
    async def find_all(self) -> list[OrderRecord]: ...

    async def find_page(
        self,
        offset: int,
        limit: int,
        sort_field: str = "order_date",
        descending: bool = True,
    ) -> tuple[list[OrderRecord], int]:
        """Return one page of orders and the total order count."""
        ...

    async def find_by_id(self, order_id: UUID) -> Optional[OrderRecord]: ...

    async def save(self, order: OrderRecord) -> OrderRecord: ...

    async def delete_by_id(self, order_id: UUID) -> bool: ...


class OrderHistoryStore(Protocol):
    async def save(self, entry: OrderHistoryRecord) -> OrderHistoryRecord: ...

    async def find_by_order(self, order_id: UUID) -> list[OrderHistoryRecord]:
        """History of one order, newest first."""
        ...


class CategoryStore(Protocol):
    async def find_all(self) -> list[CategoryRecord]: ...

    async def find_by_id(self, category_id: UUID) -> Optional[CategoryRecord]: ...

    async def find_by_name(self, name: str) -> Optional[CategoryRecord]: ...

    async def save(self, category: CategoryRecord) -> CategoryRecord: ...

    async def delete_by_id(self, category_id: UUID) -> bool: ...


class SupplierStore(Protocol):
    async def find_all(self) -> list[SupplierRecord]: ...

    async def find_by_id(self, supplier_id: UUID) -> Optional[SupplierRecord]: ...

    async def find_by_name(self, name: str) -> Optional[SupplierRecord]: ...

    async def save(self, supplier: SupplierRecord) -> SupplierRecord: ...

    async def delete_by_id(self, supplier_id: UUID) -> bool: ...


class UnitOfWork(Protocol):
    """
    Transactional boundary over all stores.

    ``async with uow:`` commits when the block exits normally and rolls
    back every write made inside it when the block raises.
    """

    products: ProductStore
    orders: OrderStore
    history: OrderHistoryStore
    categories: CategoryStore
    suppliers: SupplierStore

    async def __aenter__(self) -> "UnitOfWork": ...

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None: ...

    async def commit(self) -> None: ...

    async def rollback(self) -> None: ...
