"""
Order and order history data access.

Implements the ``OrderStore`` and ``OrderHistoryStore`` contracts on an
``AsyncSession``. Writes are flushed, never committed.
"""

import uuid
from datetime import datetime, timezone
from typing import Optional

from sqlalchemy import delete, func, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from stockroom.core.exceptions import StoreConstraintError
from stockroom.core.logging import get_logger
from stockroom.database.models import Order, OrderHistory
from stockroom.domain.records import OrderHistoryRecord, OrderRecord

logger = get_logger(__name__)

_SORT_COLUMNS = {
    "order_date": Order.order_date,
    "quantity": Order.quantity,
    "status": Order.status,
    "total_price": Order.total_price,
}


class OrderRepository:
    """
    Repository for order rows.

    Product and supplier names are loaded eagerly so records can be built
    without further round trips.
    """

    def __init__(self, session: AsyncSession):
        self.session = session

    @staticmethod
    def _to_record(model: Order) -> OrderRecord:
        return OrderRecord(
            id=model.id,
            product_id=model.product_id,
            product_name=model.product.name if model.product else None,
            supplier_id=model.supplier_id,
            supplier_name=model.supplier.name if model.supplier else None,
            quantity=model.quantity,
            order_date=model.order_date,
            status=model.status,
            total_price=model.total_price,
        )

    async def find_all(self) -> list[OrderRecord]:
        result = await self.session.execute(
            select(Order).order_by(Order.order_date.desc(), Order.id)
        )
        return [self._to_record(o) for o in result.scalars().all()]

    async def find_page(
        self,
        offset: int,
        limit: int,
        sort_field: str = "order_date",
        descending: bool = True,
    ) -> tuple[list[OrderRecord], int]:
        """
        Fetch one page of orders.

        Raises:
            ValueError: If sort_field is not sortable
        """
        column = _SORT_COLUMNS.get(sort_field)
        if column is None:
            raise ValueError(f"Cannot sort orders by '{sort_field}'")

        total = await self.session.scalar(select(func.count()).select_from(Order))

        stmt = (
            select(Order)
            .order_by(column.desc() if descending else column.asc(), Order.id)
            .offset(offset)
            .limit(limit)
        )
        result = await self.session.execute(stmt)
        items = [self._to_record(o) for o in result.scalars().all()]

        logger.debug(
            "Order page retrieved",
            offset=offset,
            limit=limit,
            sort_field=sort_field,
            returned=len(items),
            total=total,
        )
        return items, total or 0

    async def find_by_id(self, order_id: uuid.UUID) -> Optional[OrderRecord]:
        # Always re-read: status decides stock movements and may be stale
        model = await self.session.get(Order, order_id, populate_existing=True)
        return self._to_record(model) if model else None

    async def save(self, order: OrderRecord) -> OrderRecord:
        model = await self.session.get(Order, order.id) if order.id else None
        if model is None:
            model = Order(id=order.id or uuid.uuid4())
            self.session.add(model)

        order_id = model.id

        model.product_id = order.product_id
        model.supplier_id = order.supplier_id
        model.quantity = order.quantity
        model.status = order.status
        model.total_price = order.total_price
        model.order_date = (
            order.order_date or model.order_date or datetime.now(timezone.utc)
        )

        try:
            await self.session.flush()
        except IntegrityError as e:
            logger.error(
                "Order write rejected by database",
                order_id=str(order_id),
                product_id=str(order.product_id),
                supplier_id=str(order.supplier_id),
                error=str(e.orig),
            )
            raise StoreConstraintError(
                "Database constraint error: please ensure selected supplier "
                "and product exist.",
                order_id=str(order_id),
            ) from e

        await self.session.refresh(model, ["product", "supplier"])
        return self._to_record(model)

    async def delete_by_id(self, order_id: uuid.UUID) -> bool:
        model = await self.session.get(Order, order_id)
        if model is None:
            return False

        await self.session.execute(
            delete(OrderHistory).where(OrderHistory.order_id == order_id)
        )
        await self.session.delete(model)
        await self.session.flush()
        return True


class OrderHistoryRepository:
    """Append-only store of order status changes."""

    def __init__(self, session: AsyncSession):
        self.session = session

    @staticmethod
    def _to_record(model: OrderHistory) -> OrderHistoryRecord:
        return OrderHistoryRecord(
            id=model.id,
            order_id=model.order_id,
            previous_status=model.previous_status,
            new_status=model.new_status,
            actor=model.actor,
            note=model.note,
            changed_at=model.changed_at,
        )

    async def save(self, entry: OrderHistoryRecord) -> OrderHistoryRecord:
        model = OrderHistory(
            id=entry.id or uuid.uuid4(),
            order_id=entry.order_id,
            previous_status=entry.previous_status,
            new_status=entry.new_status,
            actor=entry.actor,
            note=entry.note,
            changed_at=entry.changed_at or datetime.now(timezone.utc),
        )
        self.session.add(model)

        try:
            await self.session.flush()
        except IntegrityError as e:
            raise StoreConstraintError(
                "Order history references a missing order",
                order_id=str(entry.order_id),
            ) from e
        return self._to_record(model)

    async def find_by_order(self, order_id: uuid.UUID) -> list[OrderHistoryRecord]:
        stmt = (
            select(OrderHistory)
            .where(OrderHistory.order_id == order_id)
            .order_by(OrderHistory.changed_at.desc())
        )
        result = await self.session.execute(stmt)
        return [self._to_record(h) for h in result.scalars().all()]
