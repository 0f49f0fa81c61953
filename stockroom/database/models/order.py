"""
Order and order history models.

Orders reference a product and optionally a supplier. Every effective status
change appends an ``OrderHistory`` row; the order repository removes history
rows together with their order.
"""

import uuid
from datetime import datetime, timezone
from decimal import Decimal
from typing import Optional

from sqlalchemy import (
    CheckConstraint,
    DateTime,
    Enum as SQLEnum,
    ForeignKey,
    Index,
    Integer,
    Numeric,
    String,
    Uuid,
)
from sqlalchemy.orm import Mapped, mapped_column, relationship

from stockroom.database.base import BaseModel, create_table_args
from stockroom.database.models.category import Supplier
from stockroom.database.models.product import Product
from stockroom.domain.enums import OrderStatus

order_status_type = SQLEnum(OrderStatus, name="order_status")


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class Order(BaseModel):
    """
    Stock order for a single product.

    Attributes:
        id: Unique order identifier (UUID)
        product_id: Ordered product
        supplier_id: Optional supplier
        quantity: Units requested
        order_date: When the order was placed
        status: Current order status
        total_price: ``product.price * quantity`` at the last save
    """

    __tablename__ = "orders"

    product_id: Mapped[uuid.UUID] = mapped_column(
        Uuid(as_uuid=True),
        ForeignKey("products.id", ondelete="RESTRICT"),
        nullable=False,
        index=True,
    )

    supplier_id: Mapped[Optional[uuid.UUID]] = mapped_column(
        Uuid(as_uuid=True),
        ForeignKey("suppliers.id", ondelete="SET NULL"),
        nullable=True,
        index=True,
    )

    quantity: Mapped[int] = mapped_column(
        Integer,
        nullable=False,
        comment="Units requested",
    )

    order_date: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=_utcnow,
    )

    status: Mapped[OrderStatus] = mapped_column(
        order_status_type,
        nullable=False,
        default=OrderStatus.PENDING,
        index=True,
    )

    total_price: Mapped[Optional[Decimal]] = mapped_column(
        Numeric(precision=14, scale=2),
        nullable=True,
    )

    product: Mapped[Product] = relationship(Product, lazy="selectin")

    supplier: Mapped[Optional[Supplier]] = relationship(Supplier, lazy="selectin")

    __table_args__ = create_table_args(
        Index("ix_orders_status_order_date", "status", "order_date"),
        CheckConstraint("quantity > 0", name="ck_orders_quantity_positive"),
        comment="Stock orders",
    )


class OrderHistory(BaseModel):
    """
    Append-only audit row written when an order's status changes.

    ``previous_status`` is NULL for the first save of an order.
    """

    __tablename__ = "order_history"

    order_id: Mapped[uuid.UUID] = mapped_column(
        Uuid(as_uuid=True),
        ForeignKey("orders.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )

    previous_status: Mapped[Optional[OrderStatus]] = mapped_column(
        order_status_type,
        nullable=True,
    )

    new_status: Mapped[OrderStatus] = mapped_column(
        order_status_type,
        nullable=False,
    )

    actor: Mapped[Optional[str]] = mapped_column(String(255), nullable=True)

    note: Mapped[Optional[str]] = mapped_column(String(500), nullable=True)

    changed_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=_utcnow,
    )

    __table_args__ = create_table_args(comment="Order status change audit trail")
