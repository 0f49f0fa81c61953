"""
Catalog services for categories, suppliers and products.

Thin CRUD over the stores. Each write runs in its own unit of work. Product
quantity edits made here bypass order reconciliation.
"""

import uuid

from stockroom.core.exceptions import InvalidOperationError, NotFoundError
from stockroom.core.logging import get_logger
from stockroom.domain.records import CategoryRecord, ProductRecord, SupplierRecord
from stockroom.domain.stores import UnitOfWork

logger = get_logger(__name__)


class CategoryService:
    def __init__(self, uow: UnitOfWork):
        self.uow = uow

    async def list_categories(self) -> list[CategoryRecord]:
        return await self.uow.categories.find_all()

    async def get_category(self, category_id: uuid.UUID) -> CategoryRecord:
        category = await self.uow.categories.find_by_id(category_id)
        if category is None:
            raise NotFoundError("Category not found", category_id=str(category_id))
        return category

    async def create_category(self, category: CategoryRecord) -> CategoryRecord:
        async with self.uow:
            saved = await self.uow.categories.save(category.model_copy(update={"id": None}))
        logger.info("Category created", category_id=str(saved.id), name=saved.name)
        return saved

    async def update_category(
        self, category_id: uuid.UUID, category: CategoryRecord
    ) -> CategoryRecord:
        async with self.uow:
            await self.get_category(category_id)
            saved = await self.uow.categories.save(
                category.model_copy(update={"id": category_id})
            )
        logger.info("Category updated", category_id=str(category_id))
        return saved

    async def delete_category(self, category_id: uuid.UUID) -> None:
        async with self.uow:
            if not await self.uow.categories.delete_by_id(category_id):
                raise NotFoundError("Category not found", category_id=str(category_id))
        logger.info("Category deleted", category_id=str(category_id))


class SupplierService:
    def __init__(self, uow: UnitOfWork):
        self.uow = uow

    async def list_suppliers(self) -> list[SupplierRecord]:
        return await self.uow.suppliers.find_all()

    async def get_supplier(self, supplier_id: uuid.UUID) -> SupplierRecord:
        supplier = await self.uow.suppliers.find_by_id(supplier_id)
        if supplier is None:
            raise NotFoundError("Supplier not found", supplier_id=str(supplier_id))
        return supplier

    async def create_supplier(self, supplier: SupplierRecord) -> SupplierRecord:
        async with self.uow:
            saved = await self.uow.suppliers.save(supplier.model_copy(update={"id": None}))
        logger.info("Supplier created", supplier_id=str(saved.id), name=saved.name)
        return saved

    async def update_supplier(
        self, supplier_id: uuid.UUID, supplier: SupplierRecord
    ) -> SupplierRecord:
        """
        Overwrite name, contact info and address of an existing supplier.

        Raises:
            NotFoundError: If the supplier does not exist
        """
        async with self.uow:
            await self.get_supplier(supplier_id)
            saved = await self.uow.suppliers.save(
                supplier.model_copy(update={"id": supplier_id})
            )
        logger.info("Supplier updated", supplier_id=str(supplier_id))
        return saved

    async def delete_supplier(self, supplier_id: uuid.UUID) -> None:
        """Delete a supplier; orders that referenced it keep no supplier."""
        async with self.uow:
            if not await self.uow.suppliers.delete_by_id(supplier_id):
                raise NotFoundError("Supplier not found", supplier_id=str(supplier_id))
        logger.info("Supplier deleted", supplier_id=str(supplier_id))


class ProductService:
    def __init__(self, uow: UnitOfWork):
        self.uow = uow

    async def list_products(self) -> list[ProductRecord]:
        return await self.uow.products.find_all()

    async def get_product(self, product_id: uuid.UUID) -> ProductRecord:
        product = await self.uow.products.find_by_id(product_id)
        if product is None:
            raise NotFoundError("Product not found", product_id=str(product_id))
        return product

    async def _check_product(self, product: ProductRecord) -> None:
        if product.quantity is not None and product.quantity < 0:
            raise InvalidOperationError(
                "quantity cannot be negative", quantity=product.quantity
            )
        if product.price is not None and product.price < 0:
            raise InvalidOperationError("price cannot be negative", price=str(product.price))
        if product.category_id is not None:
            if await self.uow.categories.find_by_id(product.category_id) is None:
                raise NotFoundError(
                    "Category not found", category_id=str(product.category_id)
                )

    async def create_product(self, product: ProductRecord) -> ProductRecord:
        """
        Raises:
            InvalidOperationError: Negative quantity or price
            NotFoundError: The referenced category does not exist
        """
        async with self.uow:
            await self._check_product(product)
            saved = await self.uow.products.save(product.model_copy(update={"id": None}))
        logger.info("Product created", product_id=str(saved.id), name=saved.name)
        return saved

    async def update_product(
        self, product_id: uuid.UUID, product: ProductRecord
    ) -> ProductRecord:
        async with self.uow:
            await self.get_product(product_id)
            await self._check_product(product)
            saved = await self.uow.products.save(
                product.model_copy(update={"id": product_id})
            )
        logger.info(
            "Product updated",
            product_id=str(product_id),
            quantity=saved.quantity,
        )
        return saved

    async def delete_product(self, product_id: uuid.UUID) -> None:
        async with self.uow:
            if not await self.uow.products.delete_by_id(product_id):
                raise NotFoundError("Product not found", product_id=str(product_id))
        logger.info("Product deleted", product_id=str(product_id))
