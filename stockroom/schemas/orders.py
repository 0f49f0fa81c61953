"""
Order request/response schemas.
"""

from datetime import datetime
from decimal import Decimal
from typing import Optional
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field, field_validator

from stockroom.domain.enums import OrderStatus
from stockroom.domain.records import OrderRecord


class OrderRequest(BaseModel):
    """
    Create or replace an order.

    ``status`` is optional and read case-insensitively; a missing status is
    saved as PENDING. ``total_price`` is only kept when the product has no
    price to derive it from.
    """

    model_config = ConfigDict(str_strip_whitespace=True)

    product_id: UUID = Field(..., description="Ordered product")
    quantity: int = Field(..., ge=1, description="Units requested")
    status: Optional[OrderStatus] = Field(None, description="Order status")
    supplier_id: Optional[UUID] = Field(None, description="Optional supplier")
    order_date: Optional[datetime] = Field(
        None, description="Order date, defaults to now for new orders"
    )
    total_price: Optional[Decimal] = Field(None, ge=0, max_digits=14, decimal_places=2)

    @field_validator("status", mode="before")
    @classmethod
    def parse_status(cls, v):
        if isinstance(v, str):
            return OrderStatus.from_string(v)
        return v

    def to_record(self, order_id: Optional[UUID] = None) -> OrderRecord:
        return OrderRecord(
            id=order_id,
            product_id=self.product_id,
            supplier_id=self.supplier_id,
            quantity=self.quantity,
            status=self.status,
            order_date=self.order_date,
            total_price=self.total_price,
        )


class OrderResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: UUID
    product_id: Optional[UUID] = None
    product_name: Optional[str] = None
    supplier_id: Optional[UUID] = None
    supplier_name: Optional[str] = None
    quantity: Optional[int] = None
    order_date: Optional[datetime] = None
    status: OrderStatus
    total_price: Optional[Decimal] = None


class OrderListResponse(BaseModel):
    """One page of orders."""

    items: list[OrderResponse]
    total: int = Field(..., ge=0, description="Total number of orders")
    page: int = Field(..., ge=0, description="Zero based page index")
    size: int = Field(..., ge=1)
    pages: int = Field(..., ge=0, description="Total number of pages")


class OrderHistoryResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: UUID
    order_id: UUID
    previous_status: Optional[OrderStatus] = None
    new_status: OrderStatus
    actor: Optional[str] = None
    note: Optional[str] = None
    changed_at: Optional[datetime] = None
