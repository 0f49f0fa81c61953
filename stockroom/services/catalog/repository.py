"""
Catalog data access: products, categories and suppliers.

Repositories translate between ORM models and immutable records. Writes are
flushed but never committed; the unit of work owns the transaction.
"""

import uuid
from typing import Optional

from sqlalchemy import func, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from stockroom.core.exceptions import StoreConstraintError
from stockroom.core.logging import get_logger
from stockroom.database.models import Category, Product, Supplier
from stockroom.domain.records import CategoryRecord, ProductRecord, SupplierRecord

logger = get_logger(__name__)


class ProductRepository:
    """SQLAlchemy implementation of ``ProductStore``."""

    def __init__(self, session: AsyncSession):
        self.session = session

    @staticmethod
    def _to_record(model: Product) -> ProductRecord:
        return ProductRecord(
            id=model.id,
            name=model.name,
            description=model.description,
            quantity=model.quantity,
            price=model.price,
            category_id=model.category_id,
            category_name=model.category.name if model.category else None,
            created_at=model.created_at,
        )

    async def find_all(self) -> list[ProductRecord]:
        result = await self.session.execute(select(Product).order_by(Product.name))
        return [self._to_record(p) for p in result.scalars().all()]

    async def find_by_id(
        self, product_id: uuid.UUID, for_update: bool = False
    ) -> Optional[ProductRecord]:
        """
        Fetch a product by id.

        With ``for_update`` the row is locked (``SELECT ... FOR UPDATE``) until
        the surrounding transaction ends and the identity map is refreshed,
        so the caller always sees the committed stock level.
        """
        stmt = select(Product).where(Product.id == product_id)
        if for_update:
            stmt = stmt.with_for_update().execution_options(populate_existing=True)

        result = await self.session.execute(stmt)
        model = result.scalar_one_or_none()
        return self._to_record(model) if model else None

    async def find_by_name(self, name: str) -> Optional[ProductRecord]:
        stmt = (
            select(Product)
            .where(func.lower(Product.name) == name.strip().lower())
            .order_by(Product.created_at)
            .limit(1)
        )
        result = await self.session.execute(stmt)
        model = result.scalar_one_or_none()
        return self._to_record(model) if model else None

    async def save(self, product: ProductRecord) -> ProductRecord:
        model = await self.session.get(Product, product.id) if product.id else None
        if model is None:
            model = Product(id=product.id or uuid.uuid4())
            self.session.add(model)

        product_id = model.id

        model.name = product.name
        model.description = product.description
        model.quantity = product.quantity if product.quantity is not None else 0
        model.price = product.price
        model.category_id = product.category_id

        try:
            await self.session.flush()
        except IntegrityError as e:
            logger.error(
                "Product write rejected by database",
                product_id=str(product_id),
                error=str(e.orig),
            )
            raise StoreConstraintError(
                "Product violates a database constraint",
                product_id=str(product_id),
            ) from e

        await self.session.refresh(model, ["created_at", "category"])
        return self._to_record(model)

    async def delete_by_id(self, product_id: uuid.UUID) -> bool:
        model = await self.session.get(Product, product_id)
        if model is None:
            return False

        try:
            await self.session.delete(model)
            await self.session.flush()
        except IntegrityError as e:
            logger.warning(
                "Product delete rejected by database",
                product_id=str(product_id),
                error=str(e.orig),
            )
            raise StoreConstraintError(
                "Product is still referenced by orders",
                product_id=str(product_id),
            ) from e
        return True


class CategoryRepository:
    """SQLAlchemy implementation of ``CategoryStore``."""

    def __init__(self, session: AsyncSession):
        self.session = session

    @staticmethod
    def _to_record(model: Category) -> CategoryRecord:
        return CategoryRecord(
            id=model.id, name=model.name, description=model.description
        )

    async def find_all(self) -> list[CategoryRecord]:
        result = await self.session.execute(select(Category).order_by(Category.name))
        return [self._to_record(c) for c in result.scalars().all()]

    async def find_by_id(self, category_id: uuid.UUID) -> Optional[CategoryRecord]:
        model = await self.session.get(Category, category_id)
        return self._to_record(model) if model else None

    async def find_by_name(self, name: str) -> Optional[CategoryRecord]:
        stmt = select(Category).where(func.lower(Category.name) == name.strip().lower())
        result = await self.session.execute(stmt.limit(1))
        model = result.scalar_one_or_none()
        return self._to_record(model) if model else None

    async def save(self, category: CategoryRecord) -> CategoryRecord:
        model = await self.session.get(Category, category.id) if category.id else None
        if model is None:
            model = Category(id=category.id or uuid.uuid4())
            self.session.add(model)

        category_id = model.id

        model.name = category.name
        model.description = category.description

        try:
            await self.session.flush()
        except IntegrityError as e:
            logger.warning(
                "Category write rejected by database",
                name=category.name,
                error=str(e.orig),
            )
            raise StoreConstraintError(
                f"Category name '{category.name}' already exists",
                category_id=str(category_id),
            ) from e
        return self._to_record(model)

    async def delete_by_id(self, category_id: uuid.UUID) -> bool:
        model = await self.session.get(Category, category_id)
        if model is None:
            return False

        try:
            await self.session.delete(model)
            await self.session.flush()
        except IntegrityError as e:
            raise StoreConstraintError(
                "Category is still assigned to products",
                category_id=str(category_id),
            ) from e
        return True


class SupplierRepository:
    """SQLAlchemy implementation of ``SupplierStore``."""

    def __init__(self, session: AsyncSession):
        self.session = session

    @staticmethod
    def _to_record(model: Supplier) -> SupplierRecord:
        return SupplierRecord(
            id=model.id,
            name=model.name,
            contact_info=model.contact_info,
            address=model.address,
        )

    async def find_all(self) -> list[SupplierRecord]:
        result = await self.session.execute(select(Supplier).order_by(Supplier.name))
        return [self._to_record(s) for s in result.scalars().all()]

    async def find_by_id(self, supplier_id: uuid.UUID) -> Optional[SupplierRecord]:
        model = await self.session.get(Supplier, supplier_id)
        return self._to_record(model) if model else None

    async def find_by_name(self, name: str) -> Optional[SupplierRecord]:
        stmt = select(Supplier).where(func.lower(Supplier.name) == name.strip().lower())
        result = await self.session.execute(stmt.limit(1))
        model = result.scalar_one_or_none()
        return self._to_record(model) if model else None

    async def save(self, supplier: SupplierRecord) -> SupplierRecord:
        model = await self.session.get(Supplier, supplier.id) if supplier.id else None
        if model is None:
            model = Supplier(id=supplier.id or uuid.uuid4())
            self.session.add(model)

        supplier_id = model.id

        model.name = supplier.name
        model.contact_info = supplier.contact_info
        model.address = supplier.address

        try:
            await self.session.flush()
        except IntegrityError as e:
            raise StoreConstraintError(
                "Supplier violates a database constraint",
                supplier_id=str(supplier_id),
            ) from e
        return self._to_record(model)

    async def delete_by_id(self, supplier_id: uuid.UUID) -> bool:
        model = await self.session.get(Supplier, supplier_id)
        if model is None:
            return False

        await self.session.delete(model)
        await self.session.flush()
        return True
