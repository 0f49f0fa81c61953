"""
Product model for stock tracking.

``quantity`` is the on-hand stock level. Order confirmation decrements it
and cancelling a confirmed order restores it.
"""

import uuid
from decimal import Decimal
from typing import Optional

from sqlalchemy import CheckConstraint, ForeignKey, Integer, Numeric, String, Uuid
from sqlalchemy.orm import Mapped, mapped_column, relationship

from stockroom.database.base import TimestampedModel, create_table_args
from stockroom.database.models.category import Category


class Product(TimestampedModel):
    """
    Product with on-hand quantity and unit price.

    Attributes:
        id: Unique product identifier (UUID)
        name: Product name, matched case-insensitively by CSV imports
        description: Free text description
        quantity: Units in stock, never negative
        price: Unit price
        category_id: Optional category reference
        created_at: Creation timestamp
    """

    __tablename__ = "products"

    name: Mapped[str] = mapped_column(
        String(255),
        nullable=False,
        index=True,
    )

    description: Mapped[Optional[str]] = mapped_column(
        String(2000),
        nullable=True,
    )

    quantity: Mapped[int] = mapped_column(
        Integer,
        nullable=False,
        default=0,
        comment="Units in stock",
    )

    price: Mapped[Optional[Decimal]] = mapped_column(
        Numeric(precision=12, scale=2),
        nullable=True,
        comment="Unit price",
    )

    category_id: Mapped[Optional[uuid.UUID]] = mapped_column(
        Uuid(as_uuid=True),
        ForeignKey("categories.id", ondelete="RESTRICT"),
        nullable=True,
        index=True,
    )

    category: Mapped[Optional[Category]] = relationship(
        Category,
        lazy="selectin",
    )

    __table_args__ = create_table_args(
        CheckConstraint("quantity >= 0", name="ck_products_quantity_non_negative"),
        CheckConstraint(
            "price IS NULL OR price >= 0", name="ck_products_price_non_negative"
        ),
        comment="Product catalog with stock levels",
    )
