"""
Tests for the SQLAlchemy repositories and unit of work on aiosqlite.
"""

import uuid
from decimal import Decimal

import pytest
from sqlalchemy.ext.asyncio import AsyncSession

from stockroom.core.exceptions import StoreConstraintError
from stockroom.database.connection import WRITE_LOCK_KEY
from stockroom.domain.enums import OrderStatus
from stockroom.domain.records import (
    CategoryRecord,
    OrderHistoryRecord,
    OrderRecord,
    ProductRecord,
    SupplierRecord,
)
from stockroom.services.unit_of_work import SqlAlchemyUnitOfWork


# ============================================================================
# Test Fixtures
# ============================================================================


@pytest.fixture
def sql_uow(db_session: AsyncSession) -> SqlAlchemyUnitOfWork:
    return SqlAlchemyUnitOfWork(db_session)


async def seed_product(uow: SqlAlchemyUnitOfWork, name="Bolt", quantity=10, price="1.50"):
    async with uow:
        category = await uow.categories.save(CategoryRecord(name=f"{name} parts"))
        return await uow.products.save(
            ProductRecord(
                name=name,
                quantity=quantity,
                price=Decimal(price),
                category_id=category.id,
            )
        )


# ============================================================================
# Products
# ============================================================================


class TestProductRepository:
    """Test suite for product persistence."""

    @pytest.mark.asyncio
    async def test_save_resolves_category_and_timestamp(self, sql_uow):
        saved = await seed_product(sql_uow)

        assert saved.category_name == "Bolt parts"
        assert saved.created_at is not None
        assert saved.price == Decimal("1.50")

    @pytest.mark.asyncio
    async def test_find_by_name_ignores_case(self, sql_uow):
        saved = await seed_product(sql_uow, name="Hex Bolt")

        found = await sql_uow.products.find_by_name("  hex BOLT ")

        assert found is not None and found.id == saved.id

    @pytest.mark.asyncio
    async def test_find_for_update_sees_latest_quantity(self, sql_uow):
        saved = await seed_product(sql_uow)
        async with sql_uow:
            await sql_uow.products.save(saved.model_copy(update={"quantity": 3}))

        locked = await sql_uow.products.find_by_id(saved.id, for_update=True)

        assert locked.quantity == 3

    @pytest.mark.asyncio
    async def test_negative_quantity_violates_check(self, sql_uow):
        saved = await seed_product(sql_uow)

        with pytest.raises(StoreConstraintError) as exc_info:
            async with sql_uow:
                await sql_uow.products.save(saved.model_copy(update={"quantity": -1}))

        assert exc_info.value.context["product_id"] == str(saved.id)
        assert (await sql_uow.products.find_by_id(saved.id)).quantity == 10

    @pytest.mark.asyncio
    async def test_delete_missing_returns_false(self, sql_uow):
        async with sql_uow:
            assert await sql_uow.products.delete_by_id(uuid.uuid4()) is False


# ============================================================================
# Orders and History
# ============================================================================


class TestOrderRepository:
    """Test suite for order and history persistence."""

    @pytest.mark.asyncio
    async def test_save_assigns_date_and_names(self, sql_uow):
        product = await seed_product(sql_uow)
        async with sql_uow:
            supplier = await sql_uow.suppliers.save(SupplierRecord(name="Acme"))
            order = await sql_uow.orders.save(
                OrderRecord(
                    product_id=product.id,
                    supplier_id=supplier.id,
                    quantity=2,
                    status=OrderStatus.PENDING,
                )
            )

        assert order.order_date is not None
        assert order.product_name == "Bolt"
        assert order.supplier_name == "Acme"

    @pytest.mark.asyncio
    async def test_missing_product_raises_constraint_error(self, sql_uow):
        with pytest.raises(StoreConstraintError) as exc_info:
            async with sql_uow:
                await sql_uow.orders.save(
                    OrderRecord(product_id=uuid.uuid4(), quantity=1, status=OrderStatus.PENDING)
                )

        assert "ensure selected supplier and product exist" in exc_info.value.message
        assert await sql_uow.orders.find_all() == []

    @pytest.mark.asyncio
    async def test_update_with_unknown_supplier_raises_constraint_error(self, sql_uow):
        product = await seed_product(sql_uow)
        async with sql_uow:
            order = await sql_uow.orders.save(
                OrderRecord(product_id=product.id, quantity=1, status=OrderStatus.PENDING)
            )

        with pytest.raises(StoreConstraintError) as exc_info:
            async with sql_uow:
                await sql_uow.orders.save(
                    order.model_copy(update={"supplier_id": uuid.uuid4()})
                )

        assert exc_info.value.context["order_id"] == str(order.id)
        assert (await sql_uow.orders.find_by_id(order.id)).supplier_id is None

    @pytest.mark.asyncio
    async def test_page_sorting_and_count(self, sql_uow):
        product = await seed_product(sql_uow)
        async with sql_uow:
            for quantity, order_status in (
                (5, OrderStatus.SHIPPED),
                (1, OrderStatus.CANCELLED),
                (3, OrderStatus.PENDING),
            ):
                await sql_uow.orders.save(
                    OrderRecord(product_id=product.id, quantity=quantity, status=order_status)
                )

        page, total = await sql_uow.orders.find_page(
            offset=0, limit=2, sort_field="quantity", descending=True
        )

        assert total == 3
        assert [o.quantity for o in page] == [5, 3]

    @pytest.mark.asyncio
    async def test_delete_removes_history(self, sql_uow):
        product = await seed_product(sql_uow)
        async with sql_uow:
            order = await sql_uow.orders.save(
                OrderRecord(product_id=product.id, quantity=1, status=OrderStatus.PENDING)
            )
            await sql_uow.history.save(
                OrderHistoryRecord(order_id=order.id, new_status=OrderStatus.PENDING)
            )

        async with sql_uow:
            assert await sql_uow.orders.delete_by_id(order.id) is True

        assert await sql_uow.history.find_by_order(order.id) == []
        assert await sql_uow.orders.find_by_id(order.id) is None

    @pytest.mark.asyncio
    async def test_product_with_orders_cannot_be_deleted(self, sql_uow):
        product = await seed_product(sql_uow)
        async with sql_uow:
            await sql_uow.orders.save(
                OrderRecord(product_id=product.id, quantity=1, status=OrderStatus.PENDING)
            )

        with pytest.raises(StoreConstraintError):
            async with sql_uow:
                await sql_uow.products.delete_by_id(product.id)


# ============================================================================
# Catalog
# ============================================================================


class TestCatalogRepositories:
    """Test suite for category and supplier persistence."""

    @pytest.mark.asyncio
    async def test_duplicate_category_name(self, sql_uow):
        async with sql_uow:
            await sql_uow.categories.save(CategoryRecord(name="Tools"))

        with pytest.raises(StoreConstraintError):
            async with sql_uow:
                await sql_uow.categories.save(CategoryRecord(name="Tools"))

        assert len(await sql_uow.categories.find_all()) == 1

    @pytest.mark.asyncio
    async def test_rename_to_existing_category_name(self, sql_uow):
        async with sql_uow:
            await sql_uow.categories.save(CategoryRecord(name="Tools"))
            paint = await sql_uow.categories.save(CategoryRecord(name="Paint"))

        with pytest.raises(StoreConstraintError) as exc_info:
            async with sql_uow:
                await sql_uow.categories.save(paint.model_copy(update={"name": "Tools"}))

        assert exc_info.value.context["category_id"] == str(paint.id)
        assert (await sql_uow.categories.find_by_id(paint.id)).name == "Paint"

    @pytest.mark.asyncio
    async def test_supplier_update_keeps_id(self, sql_uow):
        async with sql_uow:
            acme = await sql_uow.suppliers.save(SupplierRecord(name="Acme"))
        async with sql_uow:
            renamed = await sql_uow.suppliers.save(acme.model_copy(update={"name": "Acme Ltd"}))

        assert renamed.id == acme.id
        assert [s.name for s in await sql_uow.suppliers.find_all()] == ["Acme Ltd"]

    @pytest.mark.asyncio
    async def test_category_lookup_by_name(self, sql_uow):
        async with sql_uow:
            saved = await sql_uow.categories.save(CategoryRecord(name="Tools"))

        found = await sql_uow.categories.find_by_name("tools")

        assert found == saved


# ============================================================================
# Unit of Work
# ============================================================================


class TestUnitOfWork:
    """Test suite for the SQLite write lock held by units of work."""

    def test_sessions_share_write_lock(self, session_factory):
        first, second = session_factory(), session_factory()
        assert first.info[WRITE_LOCK_KEY] is second.info[WRITE_LOCK_KEY]

    @pytest.mark.asyncio
    async def test_write_lock_held_only_inside_block(self, sql_uow):
        lock = sql_uow.session.info[WRITE_LOCK_KEY]

        with pytest.raises(StoreConstraintError):
            async with sql_uow:
                assert lock.locked()
                await sql_uow.orders.save(
                    OrderRecord(product_id=uuid.uuid4(), quantity=1, status=OrderStatus.PENDING)
                )

        assert not lock.locked()
