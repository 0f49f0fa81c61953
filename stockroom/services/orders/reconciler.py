"""
Order status driven inventory reconciliation.

Saving an order couples its status change to stock movements on the ordered
product. Exactly two edges move stock:

- into CONFIRMED from any other status (or from no previous save):
  the ordered quantity is taken out of stock;
- from CONFIRMED to CANCELLED: the ordered quantity is put back, uncapped.

Every other transition, including PENDING -> COMPLETED and PENDING ->
CANCELLED, leaves stock untouched. A save whose effective status differs
from the persisted one appends an order history entry.
"""

from dataclasses import dataclass
from typing import Optional

from stockroom.core.exceptions import (
    InvalidOperationError,
    NotFoundError,
)
from stockroom.core.logging import get_logger
from stockroom.domain.enums import OrderStatus
from stockroom.domain.records import OrderHistoryRecord, OrderRecord, ProductRecord
from stockroom.domain.stores import UnitOfWork
from stockroom.services.orders.locks import ProductLockRegistry, product_locks

logger = get_logger(__name__)

STATUS_CHANGE_NOTE = "Status changed"


@dataclass(frozen=True)
class StatusTransition:
    """Previous and effective status of one save. ``previous`` is None for new orders."""

    previous: Optional[OrderStatus]
    new: OrderStatus

    @property
    def is_confirmation(self) -> bool:
        return self.new == OrderStatus.CONFIRMED and self.previous != OrderStatus.CONFIRMED

    @property
    def is_cancellation_of_confirmed(self) -> bool:
        return self.previous == OrderStatus.CONFIRMED and self.new == OrderStatus.CANCELLED

    @property
    def is_change(self) -> bool:
        return self.previous != self.new


class InventoryReconciler:
    """
    Saves orders and keeps product stock consistent with their status.

    All reads and writes of one ``reconcile_and_save`` call run inside a
    single unit of work, so a rejected confirmation leaves no partial stock
    change, order write or history entry behind. Calls for the same product
    are serialized by ``locks``.
    """

    def __init__(
        self,
        uow: UnitOfWork,
        locks: Optional[ProductLockRegistry] = None,
    ):
        self.uow = uow
        self.locks = locks if locks is not None else product_locks

    async def reconcile_and_save(self, order: OrderRecord) -> OrderRecord:
        """
        Persist a new or edited order and apply its stock side effects.

        Args:
            order: Submitted order. ``status`` may be None (saved as PENDING).

        Returns:
            The persisted order with derived total price and effective status

        Raises:
            NotFoundError: The order's product does not exist
            InvalidOperationError: Confirmation without a positive quantity,
                or with more quantity than is in stock
            StoreConstraintError: The store rejected one of the writes
        """
        async with self.locks.hold(order.product_id):
            async with self.uow:
                return await self._reconcile(order)

    async def _reconcile(self, order: OrderRecord) -> OrderRecord:
        # Row lock first: the previous status must be read under it
        product = (
            await self.uow.products.find_by_id(order.product_id, for_update=True)
            if order.product_id
            else None
        )
        order = self._with_total_price(order, product)

        previous_status = None
        if order.id is not None:
            existing = await self.uow.orders.find_by_id(order.id)
            if existing is not None:
                previous_status = existing.status

        transition = StatusTransition(
            previous=previous_status,
            new=order.status or OrderStatus.PENDING,
        )
        order = order.model_copy(update={"status": transition.new})

        if transition.is_confirmation:
            await self._reserve_stock(order, product)
        elif transition.is_cancellation_of_confirmed:
            await self._restore_stock(order, product)

        saved = await self.uow.orders.save(order)

        if transition.is_change:
            await self.uow.history.save(
                OrderHistoryRecord(
                    order_id=saved.id,
                    previous_status=transition.previous,
                    new_status=transition.new,
                    actor=None,
                    note=STATUS_CHANGE_NOTE,
                )
            )

        logger.info(
            "Order saved",
            order_id=str(saved.id),
            product_id=str(saved.product_id),
            previous_status=transition.previous.value if transition.previous else None,
            new_status=transition.new.value,
            status_changed=transition.is_change,
        )
        return saved

    @staticmethod
    def _with_total_price(
        order: OrderRecord, product: Optional[ProductRecord]
    ) -> OrderRecord:
        if product is None or product.price is None or order.quantity is None:
            return order
        return order.model_copy(update={"total_price": product.price * order.quantity})

    @staticmethod
    def _require_product(
        order: OrderRecord, product: Optional[ProductRecord]
    ) -> ProductRecord:
        if product is None:
            logger.warning(
                "Product not found for order",
                order_id=str(order.id) if order.id else None,
                product_id=str(order.product_id) if order.product_id else None,
            )
            raise NotFoundError(
                "Product not found for this order",
                product_id=str(order.product_id) if order.product_id else None,
            )
        return product

    async def _reserve_stock(
        self, order: OrderRecord, product: Optional[ProductRecord]
    ) -> None:
        product = self._require_product(order, product)

        if order.quantity is None or order.quantity <= 0:
            raise InvalidOperationError(
                "quantity must be provided and greater than zero",
                quantity=order.quantity,
            )

        available = product.quantity or 0
        if available < order.quantity:
            logger.warning(
                "Insufficient inventory for confirmation",
                product_id=str(product.id),
                available=available,
                requested=order.quantity,
            )
            raise InvalidOperationError(
                f"insufficient inventory for product {product.name}",
                product_id=str(product.id),
                available=available,
                requested=order.quantity,
            )

        await self.uow.products.save(
            product.model_copy(update={"quantity": available - order.quantity})
        )
        logger.info(
            "Stock reserved",
            product_id=str(product.id),
            quantity=order.quantity,
            remaining=available - order.quantity,
        )

    async def _restore_stock(
        self, order: OrderRecord, product: Optional[ProductRecord]
    ) -> None:
        product = self._require_product(order, product)
        restored = order.quantity or 0

        await self.uow.products.save(
            product.model_copy(update={"quantity": (product.quantity or 0) + restored})
        )
        logger.info(
            "Stock restored",
            product_id=str(product.id),
            quantity=restored,
            on_hand=(product.quantity or 0) + restored,
        )
