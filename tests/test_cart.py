import pytest

from sqlalchemy import select

from services.cart_service.models import CartEntry
from services.cart_service.repository import CartRepository
from services.cart_service.schemas import CartItemAdd
from services.cart_service.service import CartService

from conftest import auth_headers


async def test_add_and_view_cart(storefront_client, seed):
    user = await seed.account()
    cable = await seed.product("Cable", "4.50", stock=10)
    charger = await seed.product("Charger", "19.99", stock=2)

    for product, quantity in ((cable, 3), (charger, 1)):
        response = await storefront_client.post(
            "/cart/add", json={"product_id": product, "quantity": quantity}, headers=auth_headers(user)
        )
        assert response.status_code == 200
        assert response.json()["message"] == "Item added to cart"

    body = (await storefront_client.get("/cart/", headers=auth_headers(user))).json()

    assert body["itemCount"] == 2
    assert body["subtotal"] == 33.49
    names = [item["name"] for item in body["cart"]]
    assert names == ["Cable", "Charger"]
    assert body["cart"][1]["available"] is True


async def test_repeated_add_merges_into_one_line(storefront_client, seed):
    user = await seed.account()
    product = await seed.product("Socks", "3.00", stock=5)

    for _ in range(2):
        await storefront_client.post("/cart/add", json={"product_id": product, "quantity": 2}, headers=auth_headers(user))

    cart = (await storefront_client.get("/cart/", headers=auth_headers(user))).json()["cart"]
    assert len(cart) == 1
    assert cart[0]["quantity"] == 4


async def test_add_beyond_stock(storefront_client, seed):
    user = await seed.account()
    product = await seed.product("Hat", "12.00", stock=2)

    response = await storefront_client.post(
        "/cart/add", json={"product_id": product, "quantity": 3}, headers=auth_headers(user)
    )

    assert response.status_code == 400
    assert response.json()["message"] == "Only 2 items available in stock"
    assert await seed.cart_size(user) == 0


async def test_merge_beyond_stock(storefront_client, seed):
    user = await seed.account()
    product = await seed.product("Scarf", "15.00", stock=3)
    await seed.cart_entry(user, product, 2)

    response = await storefront_client.post(
        "/cart/add", json={"product_id": product, "quantity": 2}, headers=auth_headers(user)
    )

    assert response.status_code == 400
    assert response.json()["message"] == "Cannot add more. Only 3 items available"


async def test_add_unknown_product(storefront_client, seed):
    user = await seed.account()

    response = await storefront_client.post("/cart/add", json={"product_id": 404, "quantity": 1}, headers=auth_headers(user))

    assert response.status_code == 404
    assert response.json()["message"] == "Product not found"


@pytest.mark.parametrize("quantity", [0, -1, 100])
async def test_quantity_bounds(storefront_client, seed, quantity):
    user = await seed.account()
    product = await seed.product("Bulk", "1.00", stock=500)

    response = await storefront_client.post(
        "/cart/add", json={"product_id": product, "quantity": quantity}, headers=auth_headers(user)
    )

    assert response.status_code == 400
    assert response.json()["error"] == "validation_error"


async def test_update_quantity(storefront_client, seed):
    user = await seed.account()
    product = await seed.product("Book", "9.00", stock=4)
    entry = await seed.cart_entry(user, product, 1)

    ok = await storefront_client.put(f"/cart/update/{entry}", json={"quantity": 4}, headers=auth_headers(user))
    too_many = await storefront_client.put(f"/cart/update/{entry}", json={"quantity": 5}, headers=auth_headers(user))

    assert ok.status_code == 200
    assert too_many.status_code == 400
    assert too_many.json()["message"] == "Only 4 items available"
    cart = (await storefront_client.get("/cart/", headers=auth_headers(user))).json()["cart"]
    assert cart[0]["quantity"] == 4


async def test_cannot_touch_another_accounts_cart_line(storefront_client, seed):
    owner = await seed.account("owner@example.com")
    other = await seed.account("other@example.com")
    product = await seed.product("Ring", "50.00", stock=3)
    entry = await seed.cart_entry(owner, product, 1)

    update = await storefront_client.put(f"/cart/update/{entry}", json={"quantity": 2}, headers=auth_headers(other))
    remove = await storefront_client.delete(f"/cart/remove/{entry}", headers=auth_headers(other))

    assert update.status_code == 404
    assert update.json()["message"] == "Cart item not found"
    assert remove.status_code == 404
    assert await seed.cart_size(owner) == 1


async def test_remove_and_clear(storefront_client, seed):
    user = await seed.account()
    first = await seed.product("One", "1.00", stock=5)
    second = await seed.product("Two", "2.00", stock=5)
    third = await seed.product("Three", "3.00", stock=5)
    entry = await seed.cart_entry(user, first, 1)
    await seed.cart_entry(user, second, 1)
    await seed.cart_entry(user, third, 1)

    removed = await storefront_client.delete(f"/cart/remove/{entry}", headers=auth_headers(user))
    assert removed.status_code == 200
    assert await seed.cart_size(user) == 2

    cleared = await storefront_client.delete("/cart/clear", headers=auth_headers(user))
    assert cleared.status_code == 200
    assert cleared.json()["message"] == "Cart cleared"
    assert await seed.cart_size(user) == 0


async def test_cart_requires_login(storefront_client):
    response = await storefront_client.get("/cart/")

    assert response.status_code == 401
    assert response.json()["success"] is False


async def test_rejects_garbage_token(storefront_client):
    response = await storefront_client.get("/cart/", headers={"Authorization": "Bearer not-a-jwt"})

    assert response.status_code == 401


async def test_add_merges_into_a_line_created_concurrently(storefront_db, seed, monkeypatch):
    user = await seed.account()
    product = await seed.product("Lamp", "20.00", stock=5)
    # Another request inserts the line after this one has looked for it
    await seed.cart_entry(user, product, 1)

    lookup = CartRepository.get_entry
    missed = []

    async def get_entry_missing_once(db, user_id, product_id):
        if not missed:
            missed.append(product_id)
            return None
        return await lookup(db, user_id, product_id)

    monkeypatch.setattr(CartRepository, "get_entry", staticmethod(get_entry_missing_once))

    async with storefront_db.session() as db:
        await CartService.add_item(db, user, CartItemAdd(product_id=product, quantity=2))

    async with storefront_db.session() as db:
        entries = (await db.execute(select(CartEntry).where(CartEntry.user_id == user))).scalars().all()
    assert [entry.quantity for entry in entries] == [3]
