"""
Immutable value records passed between stores, services and reports.

Records never hold live references to other records. Relationships are
carried as ids; the display names that reports and exports need
(``category_name``, ``product_name``, ``supplier_name``) are resolved by the
store when the record is read and ignored when it is written.
"""

from datetime import datetime
from decimal import Decimal
from typing import Optional
from uuid import UUID

from pydantic import BaseModel, ConfigDict

from stockroom.domain.enums import OrderStatus


class Record(BaseModel):
    model_config = ConfigDict(frozen=True)


class CategoryRecord(Record):
    id: Optional[UUID] = None
    name: str
    description: Optional[str] = None


class SupplierRecord(Record):
    id: Optional[UUID] = None
    name: str
    contact_info: Optional[str] = None
    address: Optional[str] = None


class ProductRecord(Record):
    id: Optional[UUID] = None
    name: str
    description: Optional[str] = None
    quantity: Optional[int] = None
    price: Optional[Decimal] = None
    category_id: Optional[UUID] = None
    category_name: Optional[str] = None
    created_at: Optional[datetime] = None


class OrderRecord(Record):
    """
    A submitted or persisted order.

    ``status`` may be None on submission; it is normalized to PENDING when
    the order is saved.
    """

    id: Optional[UUID] = None
    product_id: Optional[UUID] = None
    product_name: Optional[str] = None
    supplier_id: Optional[UUID] = None
    supplier_name: Optional[str] = None
    quantity: Optional[int] = None
    order_date: Optional[datetime] = None
    status: Optional[OrderStatus] = None
    total_price: Optional[Decimal] = None


class OrderHistoryRecord(Record):
    id: Optional[UUID] = None
    order_id: UUID
    previous_status: Optional[OrderStatus] = None
    new_status: OrderStatus
    actor: Optional[str] = None
    note: Optional[str] = None
    changed_at: Optional[datetime] = None
