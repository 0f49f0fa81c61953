"""
Integration tests for order API endpoints.

Runs the FastAPI application against a temporary SQLite database and
checks order creation, reconciliation through status updates, paging,
history and error responses.
"""

from datetime import datetime
from decimal import Decimal
from uuid import uuid4

import pytest
from fastapi import status
from httpx import AsyncClient


# ============================================================================
# Helpers
# ============================================================================


async def create_product(
    client: AsyncClient, name: str = "Widget", quantity: int = 100, price: str = "2.50"
) -> dict:
    response = await client.post(
        "/api/v1/products",
        json={"name": name, "quantity": quantity, "price": price},
    )
    assert response.status_code == status.HTTP_201_CREATED, response.text
    return response.json()


async def create_order(client: AsyncClient, product_id: str, **fields) -> dict:
    payload = {"product_id": product_id, "quantity": 5, **fields}
    response = await client.post("/api/v1/orders", json=payload)
    assert response.status_code == status.HTTP_201_CREATED, response.text
    return response.json()


async def stock_of(client: AsyncClient, product_id: str) -> int:
    response = await client.get(f"/api/v1/products/{product_id}")
    return response.json()["quantity"]


# ============================================================================
# Order Creation
# ============================================================================


class TestCreateOrder:
    """Test suite for POST /api/v1/orders."""

    @pytest.mark.asyncio
    async def test_create_pending_order(self, async_client):
        product = await create_product(async_client)

        order = await create_order(async_client, product["id"], quantity=4)

        assert order["status"] == "PENDING"
        assert order["product_name"] == "Widget"
        assert Decimal(order["total_price"]) == Decimal("10.00")
        assert order["order_date"] is not None
        assert await stock_of(async_client, product["id"]) == 100

    @pytest.mark.asyncio
    async def test_create_confirmed_order_reserves_stock(self, async_client):
        product = await create_product(async_client)

        await create_order(async_client, product["id"], quantity=5, status="confirmed")

        assert await stock_of(async_client, product["id"]) == 95

    @pytest.mark.asyncio
    async def test_insufficient_inventory_returns_400(self, async_client):
        product = await create_product(async_client, quantity=3)

        response = await async_client.post(
            "/api/v1/orders",
            json={"product_id": product["id"], "quantity": 4, "status": "CONFIRMED"},
        )

        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert response.json()["detail"] == "insufficient inventory for product Widget"
        assert await stock_of(async_client, product["id"]) == 3

        listing = await async_client.get("/api/v1/orders")
        assert listing.json()["total"] == 0

    @pytest.mark.asyncio
    async def test_unknown_product_pending_returns_409(self, async_client):
        response = await async_client.post(
            "/api/v1/orders", json={"product_id": str(uuid4()), "quantity": 1}
        )
        assert response.status_code == status.HTTP_409_CONFLICT

    @pytest.mark.asyncio
    async def test_unknown_product_confirmed_returns_404(self, async_client):
        response = await async_client.post(
            "/api/v1/orders",
            json={"product_id": str(uuid4()), "quantity": 1, "status": "CONFIRMED"},
        )
        assert response.status_code == status.HTTP_404_NOT_FOUND
        assert response.json()["detail"] == "Product not found for this order"

    @pytest.mark.parametrize(
        "overrides",
        [
            {"product_id": None},
            {"quantity": 0},
            {"status": "LOST"},
        ],
    )
    @pytest.mark.asyncio
    async def test_invalid_payload_returns_422(self, async_client, overrides):
        product = await create_product(async_client)
        payload = {"product_id": product["id"], "quantity": 1, **overrides}

        response = await async_client.post("/api/v1/orders", json=payload)

        assert response.status_code == status.HTTP_422_UNPROCESSABLE_ENTITY
        assert response.json()["error"] == "Validation Error"


# ============================================================================
# Order Updates
# ============================================================================


class TestUpdateOrder:
    """Test suite for PUT /api/v1/orders/{id}."""

    @pytest.mark.asyncio
    async def test_confirm_then_cancel_round_trip(self, async_client):
        product = await create_product(async_client)
        order = await create_order(async_client, product["id"], quantity=5)

        confirm = await async_client.put(
            f"/api/v1/orders/{order['id']}",
            json={"product_id": product["id"], "quantity": 5, "status": "CONFIRMED"},
        )
        assert confirm.status_code == status.HTTP_200_OK
        assert await stock_of(async_client, product["id"]) == 95

        cancel = await async_client.put(
            f"/api/v1/orders/{order['id']}",
            json={"product_id": product["id"], "quantity": 5, "status": "CANCELLED"},
        )
        assert cancel.status_code == status.HTTP_200_OK
        assert cancel.json()["status"] == "CANCELLED"
        assert await stock_of(async_client, product["id"]) == 100

        history = await async_client.get(f"/api/v1/orders/{order['id']}/history")
        assert [(h["previous_status"], h["new_status"]) for h in history.json()] == [
            ("CONFIRMED", "CANCELLED"),
            ("PENDING", "CONFIRMED"),
            (None, "PENDING"),
        ]

    @pytest.mark.asyncio
    async def test_resave_same_status_writes_no_history(self, async_client):
        product = await create_product(async_client)
        order = await create_order(async_client, product["id"], status="CONFIRMED")

        response = await async_client.put(
            f"/api/v1/orders/{order['id']}",
            json={"product_id": product["id"], "quantity": 5, "status": "CONFIRMED"},
        )

        assert response.status_code == status.HTTP_200_OK
        assert await stock_of(async_client, product["id"]) == 95
        history = await async_client.get(f"/api/v1/orders/{order['id']}/history")
        assert len(history.json()) == 1

    @pytest.mark.asyncio
    async def test_update_keeps_order_date(self, async_client):
        product = await create_product(async_client)
        order = await create_order(async_client, product["id"])

        response = await async_client.put(
            f"/api/v1/orders/{order['id']}",
            json={"product_id": product["id"], "quantity": 6},
        )

        # SQLite drops the UTC offset on the way back
        updated = datetime.fromisoformat(response.json()["order_date"])
        created = datetime.fromisoformat(order["order_date"])
        assert updated.replace(tzinfo=None) == created.replace(tzinfo=None)

    @pytest.mark.asyncio
    async def test_update_missing_order_returns_404(self, async_client):
        product = await create_product(async_client)

        response = await async_client.put(
            f"/api/v1/orders/{uuid4()}",
            json={"product_id": product["id"], "quantity": 1},
        )

        assert response.status_code == status.HTTP_404_NOT_FOUND

    @pytest.mark.parametrize("new_status", [None, "CONFIRMED"])
    @pytest.mark.asyncio
    async def test_update_with_unknown_supplier_returns_409(self, async_client, new_status):
        """
        A rejected order write rolls back the whole save, including a stock
        reservation made earlier in the same call.
        """
        product = await create_product(async_client, quantity=10)
        order = await create_order(async_client, product["id"], quantity=4)

        payload = {"product_id": product["id"], "quantity": 4, "supplier_id": str(uuid4())}
        if new_status:
            payload["status"] = new_status
        response = await async_client.put(f"/api/v1/orders/{order['id']}", json=payload)

        assert response.status_code == status.HTTP_409_CONFLICT
        assert await stock_of(async_client, product["id"]) == 10
        kept = (await async_client.get(f"/api/v1/orders/{order['id']}")).json()
        assert kept["status"] == "PENDING"
        assert kept["supplier_id"] is None
        history = await async_client.get(f"/api/v1/orders/{order['id']}/history")
        assert len(history.json()) == 1


# ============================================================================
# Listing, Lookup and Deletion
# ============================================================================


class TestOrderQueries:
    """Test suite for order reads and deletes."""

    @pytest.mark.asyncio
    async def test_paginated_listing(self, async_client):
        product = await create_product(async_client)
        for quantity in (3, 1, 2):
            await create_order(async_client, product["id"], quantity=quantity)

        response = await async_client.get(
            "/api/v1/orders",
            params={"page": 0, "size": 2, "sortField": "quantity", "sortDir": "asc"},
        )

        body = response.json()
        assert response.status_code == status.HTTP_200_OK
        assert [o["quantity"] for o in body["items"]] == [1, 2]
        assert body["total"] == 3
        assert body["pages"] == 2

    @pytest.mark.asyncio
    async def test_invalid_sort_field_returns_400(self, async_client):
        response = await async_client.get("/api/v1/orders", params={"sortField": "name"})
        assert response.status_code == status.HTTP_400_BAD_REQUEST

    @pytest.mark.asyncio
    async def test_get_missing_order_returns_404(self, async_client):
        response = await async_client.get(f"/api/v1/orders/{uuid4()}")
        assert response.status_code == status.HTTP_404_NOT_FOUND

    @pytest.mark.asyncio
    async def test_delete_order(self, async_client):
        product = await create_product(async_client)
        order = await create_order(async_client, product["id"], status="CONFIRMED")

        response = await async_client.delete(f"/api/v1/orders/{order['id']}")

        assert response.status_code == status.HTTP_204_NO_CONTENT
        missing = await async_client.get(f"/api/v1/orders/{order['id']}")
        assert missing.status_code == status.HTTP_404_NOT_FOUND
        assert await stock_of(async_client, product["id"]) == 95

    @pytest.mark.asyncio
    async def test_delete_missing_order_returns_404(self, async_client):
        response = await async_client.delete(f"/api/v1/orders/{uuid4()}")
        assert response.status_code == status.HTTP_404_NOT_FOUND
