"""
SQLAlchemy unit of work.

Bundles every repository over one ``AsyncSession`` so a service can commit
or roll back all of its writes together. On SQLite the session factory
shares a write lock that serializes units of work within the process.
"""

import asyncio
from typing import Optional

from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from stockroom.core.exceptions import StoreConstraintError
from stockroom.core.logging import get_logger
from stockroom.database.connection import WRITE_LOCK_KEY
from stockroom.services.catalog.repository import (
    CategoryRepository,
    ProductRepository,
    SupplierRepository,
)
from stockroom.services.orders.repository import (
    OrderHistoryRepository,
    OrderRepository,
)

logger = get_logger(__name__)


class SqlAlchemyUnitOfWork:
    """
    Unit of work over a request scoped session.

    Example:
        async with uow:
            product = await uow.products.find_by_id(product_id, for_update=True)
            await uow.products.save(product.model_copy(update={"quantity": 0}))
    """

    def __init__(self, session: AsyncSession):
        self.session = session
        self.products = ProductRepository(session)
        self.categories = CategoryRepository(session)
        self.suppliers = SupplierRepository(session)
        self.orders = OrderRepository(session)
        self.history = OrderHistoryRepository(session)
        self._write_lock: Optional[asyncio.Lock] = session.info.get(WRITE_LOCK_KEY)

    async def __aenter__(self) -> "SqlAlchemyUnitOfWork":
        if self._write_lock is not None:
            await self._write_lock.acquire()
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        try:
            if exc_type is None:
                await self.commit()
            else:
                await self.rollback()
                logger.debug(
                    "Unit of work rolled back",
                    error_type=exc_type.__name__,
                )
        finally:
            if self._write_lock is not None:
                self._write_lock.release()

    async def commit(self) -> None:
        try:
            await self.session.commit()
        except IntegrityError as e:
            await self.session.rollback()
            logger.error("Commit rejected by database", error=str(e.orig))
            raise StoreConstraintError(
                "Database constraint error: the change conflicts with existing data"
            ) from e

    async def rollback(self) -> None:
        await self.session.rollback()
