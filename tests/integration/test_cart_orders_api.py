"""
Integration tests for the cart and orders service endpoints.
"""

import uuid

import pytest

pytestmark = pytest.mark.asyncio


@pytest.fixture
def user_id() -> str:
    return str(uuid.uuid4())


@pytest.fixture
def cart_item() -> dict:
    return {
        "book_id": str(uuid.uuid4()),
        "title": "Dune",
        "price": 9.99,
        "quantity": 2,
    }


class TestCart:

    async def test_empty_cart(self, client, user_id):
        response = await client.get(f"/api/cart/{user_id}")

        assert response.status_code == 200
        assert response.json() == {
            "user_id": user_id,
            "items": [],
            "total_items": 0,
            "total_price": 0,
        }

    async def test_add_item(self, client, user_id, cart_item):
        response = await client.post(f"/api/cart/{user_id}/items", json=cart_item)

        assert response.status_code == 201
        data = response.json()
        assert data["items"] == [cart_item]
        assert data["total_items"] == 2
        assert data["total_price"] == 19.98

    async def test_adding_same_book_increments_quantity(self, client, user_id, cart_item):
        await client.post(f"/api/cart/{user_id}/items", json=cart_item)

        response = await client.post(
            f"/api/cart/{user_id}/items",
            json={**cart_item, "quantity": 1, "price": 8.0},
        )

        items = response.json()["items"]
        assert len(items) == 1
        assert items[0]["quantity"] == 3
        assert items[0]["price"] == 8.0

    async def test_add_item_accepts_camel_case_book_id(self, client, user_id, cart_item):
        cart_item["bookId"] = cart_item.pop("book_id")
        del cart_item["quantity"]

        response = await client.post(f"/api/cart/{user_id}/items", json=cart_item)

        assert response.status_code == 201
        assert response.json()["items"][0]["book_id"] == cart_item["bookId"]
        assert response.json()["items"][0]["quantity"] == 1

    @pytest.mark.parametrize(
        "changes",
        [{"book_id": "not-a-uuid"}, {"quantity": 0}, {"price": -1}],
    )
    async def test_add_invalid_item(self, client, user_id, cart_item, changes):
        cart_item.update(changes)

        response = await client.post(f"/api/cart/{user_id}/items", json=cart_item)

        assert response.status_code == 400

    async def test_malformed_user_id(self, client, cart_item):
        response = await client.get("/api/cart/user-1")

        assert response.status_code == 400
        assert response.json()["error"] == "Invalid user ID format"

    async def test_update_quantity(self, client, user_id, cart_item):
        await client.post(f"/api/cart/{user_id}/items", json=cart_item)

        response = await client.put(
            f"/api/cart/{user_id}/items/{cart_item['book_id']}",
            json={"quantity": 5},
        )

        assert response.status_code == 200
        assert response.json()["items"][0]["quantity"] == 5
        assert response.json()["total_price"] == 49.95

    async def test_update_missing_item(self, client, user_id):
        response = await client.put(
            f"/api/cart/{user_id}/items/{uuid.uuid4()}",
            json={"quantity": 1},
        )

        assert response.status_code == 404

    async def test_remove_item(self, client, user_id, cart_item):
        await client.post(f"/api/cart/{user_id}/items", json=cart_item)

        response = await client.delete(f"/api/cart/{user_id}/items/{cart_item['book_id']}")

        assert response.status_code == 200
        assert response.json()["items"] == []

    async def test_remove_missing_item(self, client, user_id):
        response = await client.delete(f"/api/cart/{user_id}/items/{uuid.uuid4()}")

        assert response.status_code == 404

    async def test_carts_are_per_user(self, client, user_id, cart_item):
        await client.post(f"/api/cart/{user_id}/items", json=cart_item)

        response = await client.get(f"/api/cart/{uuid.uuid4()}")

        assert response.json()["items"] == []


class TestCheckoutAndOrders:

    async def test_checkout_creates_order_and_empties_cart(self, client, user_id, cart_item):
        await client.post(f"/api/cart/{user_id}/items", json=cart_item)

        response = await client.post(f"/api/cart/{user_id}/checkout")

        assert response.status_code == 201
        order = response.json()
        assert order["user_id"] == user_id
        assert order["status"] == "pending"
        assert order["total"] == 19.98
        assert order["items"] == [cart_item]

        cart = await client.get(f"/api/cart/{user_id}")
        assert cart.json()["items"] == []

        fetched = await client.get(f"/api/orders/{order['id']}")
        assert fetched.status_code == 200
        assert fetched.json()["id"] == order["id"]

    async def test_checkout_empty_cart(self, client, user_id):
        response = await client.post(f"/api/cart/{user_id}/checkout")

        assert response.status_code == 400
        assert response.json()["error"] == "Cart is empty"

        orders = await client.get(f"/api/orders/user/{user_id}")
        assert orders.json() == []

    async def test_list_user_orders_newest_first(self, client, user_id, cart_item):
        order_ids = []
        for _ in range(2):
            await client.post(f"/api/cart/{user_id}/items", json=cart_item)
            response = await client.post(f"/api/cart/{user_id}/checkout")
            order_ids.append(response.json()["id"])

        response = await client.get(f"/api/orders/user/{user_id}")

        assert response.status_code == 200
        assert [o["id"] for o in response.json()] == list(reversed(order_ids))

    async def test_get_missing_order(self, client):
        response = await client.get(f"/api/orders/{uuid.uuid4()}")

        assert response.status_code == 404
        assert response.json()["error"] == "Order not found"

    async def test_get_order_malformed_id(self, client):
        response = await client.get("/api/orders/42")

        assert response.status_code == 400
