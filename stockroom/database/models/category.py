"""
Category and supplier catalog models.
"""

from typing import Optional

from sqlalchemy import String
from sqlalchemy.orm import Mapped, mapped_column

from stockroom.database.base import BaseModel, create_table_args


class Category(BaseModel):
    """Product category. Names are unique."""

    __tablename__ = "categories"

    name: Mapped[str] = mapped_column(
        String(100),
        nullable=False,
        unique=True,
        comment="Category display name",
    )

    description: Mapped[Optional[str]] = mapped_column(
        String(500),
        nullable=True,
    )

    __table_args__ = create_table_args(comment="Product categories")


class Supplier(BaseModel):
    """Supplier an order can optionally be placed with."""

    __tablename__ = "suppliers"

    name: Mapped[str] = mapped_column(
        String(255),
        nullable=False,
        index=True,
    )

    contact_info: Mapped[Optional[str]] = mapped_column(
        String(255),
        nullable=True,
        comment="Phone number, email or contact person",
    )

    address: Mapped[Optional[str]] = mapped_column(
        String(500),
        nullable=True,
    )

    __table_args__ = create_table_args(comment="Suppliers")
