"""
Category, supplier and product request/response schemas.
"""

from datetime import datetime
from decimal import Decimal
from typing import Optional
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field

from stockroom.domain.records import CategoryRecord, ProductRecord, SupplierRecord


class CategoryRequest(BaseModel):
    """Create or replace a category."""

    model_config = ConfigDict(str_strip_whitespace=True)

    name: str = Field(..., min_length=1, max_length=100, description="Category name")
    description: Optional[str] = Field(None, max_length=500)

    def to_record(self) -> CategoryRecord:
        return CategoryRecord(name=self.name, description=self.description)


class CategoryResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: UUID
    name: str
    description: Optional[str] = None


class SupplierRequest(BaseModel):
    """Create or replace a supplier."""

    model_config = ConfigDict(str_strip_whitespace=True)

    name: str = Field(..., min_length=1, max_length=255, description="Supplier name")
    contact_info: Optional[str] = Field(
        None, max_length=255, description="Phone, email or contact person"
    )
    address: Optional[str] = Field(None, max_length=500)

    def to_record(self) -> SupplierRecord:
        return SupplierRecord(
            name=self.name, contact_info=self.contact_info, address=self.address
        )


class SupplierResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: UUID
    name: str
    contact_info: Optional[str] = None
    address: Optional[str] = None


class ProductRequest(BaseModel):
    """
    Create or replace a product.

    Setting ``quantity`` here adjusts stock directly, outside of order
    reconciliation.
    """

    model_config = ConfigDict(str_strip_whitespace=True)

    name: str = Field(..., min_length=1, max_length=255, description="Product name")
    description: Optional[str] = Field(None, max_length=2000)
    quantity: int = Field(0, ge=0, description="Units in stock")
    price: Optional[Decimal] = Field(
        None, ge=0, max_digits=12, decimal_places=2, description="Unit price"
    )
    category_id: Optional[UUID] = Field(None, description="Category reference")

    def to_record(self) -> ProductRecord:
        return ProductRecord(
            name=self.name,
            description=self.description,
            quantity=self.quantity,
            price=self.price,
            category_id=self.category_id,
        )


class ProductResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: UUID
    name: str
    description: Optional[str] = None
    quantity: Optional[int] = None
    price: Optional[Decimal] = None
    category_id: Optional[UUID] = None
    category_name: Optional[str] = None
    created_at: Optional[datetime] = None
