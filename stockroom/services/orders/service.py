"""
Order service: listing, lookup, deletion and saving through the reconciler.
"""

import uuid
from typing import Optional

from sqlalchemy.ext.asyncio import AsyncSession

from stockroom.core.exceptions import InvalidOperationError, NotFoundError
from stockroom.core.logging import get_logger
from stockroom.domain.records import OrderHistoryRecord, OrderRecord
from stockroom.domain.stores import ORDER_SORT_FIELDS, UnitOfWork
from stockroom.services.orders.locks import ProductLockRegistry
from stockroom.services.orders.reconciler import InventoryReconciler
from stockroom.services.unit_of_work import SqlAlchemyUnitOfWork

logger = get_logger(__name__)


class OrderService:
    """
    Order operations exposed to the API and CSV import.

    Attributes:
        uow: Unit of work giving access to the order stores
        reconciler: Applies stock side effects when orders are saved
    """

    def __init__(
        self,
        uow: UnitOfWork,
        locks: Optional[ProductLockRegistry] = None,
    ):
        self.uow = uow
        self.reconciler = InventoryReconciler(uow, locks)

    async def list_orders(self) -> list[OrderRecord]:
        return await self.uow.orders.find_all()

    async def list_orders_page(
        self,
        page: int = 0,
        size: int = 10,
        sort_field: str = "order_date",
        sort_dir: str = "desc",
    ) -> tuple[list[OrderRecord], int]:
        """
        Return one page of orders and the total count.

        Args:
            page: Zero based page index
            size: Page size
            sort_field: One of ``ORDER_SORT_FIELDS``
            sort_dir: ``asc`` or ``desc``

        Raises:
            InvalidOperationError: If the paging or sort arguments are invalid
        """
        if page < 0 or size < 1:
            raise InvalidOperationError(
                "page must be >= 0 and size must be >= 1", page=page, size=size
            )
        if sort_field not in ORDER_SORT_FIELDS:
            raise InvalidOperationError(
                f"Cannot sort orders by '{sort_field}'",
                allowed=list(ORDER_SORT_FIELDS),
            )
        if sort_dir.lower() not in ("asc", "desc"):
            raise InvalidOperationError(
                "sort direction must be 'asc' or 'desc'", sort_dir=sort_dir
            )

        return await self.uow.orders.find_page(
            offset=page * size,
            limit=size,
            sort_field=sort_field,
            descending=sort_dir.lower() == "desc",
        )

    async def get_order(self, order_id: uuid.UUID) -> OrderRecord:
        """
        Raises:
            NotFoundError: If the order does not exist
        """
        order = await self.uow.orders.find_by_id(order_id)
        if order is None:
            raise NotFoundError("Order not found", order_id=str(order_id))
        return order

    async def save_order(self, order: OrderRecord) -> OrderRecord:
        return await self.reconciler.reconcile_and_save(order)

    async def delete_order(self, order_id: uuid.UUID) -> None:
        """
        Delete an order and its history. Stock is not adjusted.

        Raises:
            NotFoundError: If the order does not exist
        """
        async with self.uow:
            deleted = await self.uow.orders.delete_by_id(order_id)
            if not deleted:
                raise NotFoundError("Order not found", order_id=str(order_id))

        logger.info("Order deleted", order_id=str(order_id))

    async def get_order_history(self, order_id: uuid.UUID) -> list[OrderHistoryRecord]:
        await self.get_order(order_id)
        return await self.uow.history.find_by_order(order_id)


def get_order_service(
    session: AsyncSession, locks: Optional[ProductLockRegistry] = None
) -> OrderService:
    """Build an ``OrderService`` over a request scoped session."""
    return OrderService(SqlAlchemyUnitOfWork(session), locks)
