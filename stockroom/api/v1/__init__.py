"""
API v1 package initialization.

Collects the v1 routers mounted by the application.
"""

from stockroom.api.v1.categories import router as categories_router
from stockroom.api.v1.csv import router as csv_router
from stockroom.api.v1.dashboard import router as dashboard_router
from stockroom.api.v1.orders import router as orders_router
from stockroom.api.v1.products import router as products_router
from stockroom.api.v1.reports import router as reports_router
from stockroom.api.v1.suppliers import router as suppliers_router

routers = (
    categories_router,
    suppliers_router,
    products_router,
    orders_router,
    reports_router,
    dashboard_router,
    csv_router,
)

__all__ = [
    "categories_router",
    "csv_router",
    "dashboard_router",
    "orders_router",
    "products_router",
    "reports_router",
    "routers",
    "suppliers_router",
]
