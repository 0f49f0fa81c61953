"""
SQLAlchemy declarative base and common model mixins.

Models use the portable ``Uuid`` type so the same metadata works against
PostgreSQL in production and SQLite in tests.
"""

import uuid
from datetime import datetime
from typing import Any, Dict, Optional

from sqlalchemy import DateTime, Uuid, func
from sqlalchemy.ext.asyncio import AsyncAttrs
from sqlalchemy.orm import DeclarativeBase, Mapped, declared_attr, mapped_column


class Base(AsyncAttrs, DeclarativeBase):
    """
    Base class for all SQLAlchemy models with async support.
    """

    __abstract__ = True

    def __repr__(self) -> str:
        pk_values = []
        for column in self.__table__.primary_key.columns:
            value = getattr(self, column.name, None)
            if value is not None:
                pk_values.append(f"{column.name}={value!r}")

        pk_str = ", ".join(pk_values) if pk_values else "transient"
        return f"<{self.__class__.__name__}({pk_str})>"


class TimestampMixin:
    """
    Adds a ``created_at`` column populated by the database on insert.
    """

    @declared_attr
    def created_at(cls) -> Mapped[datetime]:
        return mapped_column(
            DateTime(timezone=True),
            nullable=False,
            server_default=func.now(),
            comment="Timestamp when record was created",
        )


class UUIDMixin:
    """
    Mixin for UUID primary key generated client side with uuid4.
    """

    @declared_attr
    def id(cls) -> Mapped[uuid.UUID]:
        return mapped_column(
            Uuid(as_uuid=True),
            primary_key=True,
            default=uuid.uuid4,
            nullable=False,
            comment="Unique identifier for the record",
        )


class BaseModel(Base, UUIDMixin):
    """
    Base model with a UUID primary key.

    Example:
        class Supplier(BaseModel):
            __tablename__ = "suppliers"

            name: Mapped[str] = mapped_column(String(255))
    """

    __abstract__ = True


class TimestampedModel(BaseModel, TimestampMixin):
    """Base model with a UUID primary key and a creation timestamp."""

    __abstract__ = True


def create_table_args(
    *constraints: Any,
    comment: Optional[str] = None,
    **kwargs: Any,
) -> tuple:
    """
    Build a ``__table_args__`` tuple from constraints plus table options.

    Example:
        __table_args__ = create_table_args(
            CheckConstraint("quantity >= 0", name="ck_products_quantity"),
            comment="Product catalog",
        )
    """
    options: Dict[str, Any] = dict(kwargs)
    if comment:
        options["comment"] = comment
    return (*constraints, options)
