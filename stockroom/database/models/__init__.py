"""
Database models package.

Importing this package registers every model with ``Base.metadata``.
"""

from stockroom.database.base import Base, BaseModel, TimestampedModel
from stockroom.database.models.category import Category, Supplier
from stockroom.database.models.order import Order, OrderHistory
from stockroom.database.models.product import Product

__all__ = [
    "Base",
    "BaseModel",
    "TimestampedModel",
    "Category",
    "Supplier",
    "Product",
    "Order",
    "OrderHistory",
]
