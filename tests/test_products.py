from conftest import INTERNAL_HEADERS, auth_headers

CHECKOUT = {"shipping_address": "1 Main St", "payment_method": "card"}


async def test_list_is_paginated_newest_first(storefront_client, seed):
    for index in range(5):
        await seed.product(f"Item {index}", "1.00", stock=1)

    first = (await storefront_client.get("/products/", params={"page": 1, "limit": 2})).json()
    last = (await storefront_client.get("/products/", params={"page": 3, "limit": 2})).json()

    assert [p["name"] for p in first["products"]] == ["Item 4", "Item 3"]
    assert first["pagination"] == {"page": 1, "limit": 2, "total": 5, "totalPages": 3, "hasMore": True}
    assert [p["name"] for p in last["products"]] == ["Item 0"]
    assert last["pagination"]["hasMore"] is False


async def test_search_matches_name_case_insensitively(storefront_client, seed):
    await seed.product("Blue Kettle", "30.00", stock=1)
    await seed.product("Red Toaster", "25.00", stock=1)

    body = (await storefront_client.get("/products/", params={"search": "kettle"})).json()

    assert [p["name"] for p in body["products"]] == ["Blue Kettle"]
    assert body["pagination"]["total"] == 1


async def test_get_product(storefront_client, seed):
    product = await seed.product("Teapot", "18.75", stock=6)

    found = await storefront_client.get(f"/products/{product}")
    missing = await storefront_client.get("/products/9999")

    assert found.status_code == 200
    assert found.json()["price"] == 18.75
    assert found.json()["stock_quantity"] == 6
    assert missing.status_code == 404
    assert missing.json()["message"] == "Product not found"


async def test_admin_routes_require_internal_key(storefront_client):
    payload = {"name": "Vase", "price": 10, "stock_quantity": 1}

    anonymous = await storefront_client.post("/products/", json=payload)
    wrong_key = await storefront_client.post("/products/", json=payload, headers={"X-Internal-API-Key": "nope"})

    assert anonymous.status_code == 403
    assert wrong_key.status_code == 403


async def test_create_update_and_delete(storefront_client):
    created = await storefront_client.post(
        "/products/",
        json={"name": "Vase", "description": "Glass", "price": "10.50", "stock_quantity": 4},
        headers=INTERNAL_HEADERS,
    )
    assert created.status_code == 201
    product_id = created.json()["id"]

    updated = await storefront_client.put(
        f"/products/{product_id}", json={"price": 12}, headers=INTERNAL_HEADERS
    )
    assert updated.status_code == 200
    assert updated.json()["price"] == 12.0
    assert updated.json()["name"] == "Vase"
    assert updated.json()["stock_quantity"] == 4

    deleted = await storefront_client.delete(f"/products/{product_id}", headers=INTERNAL_HEADERS)
    assert deleted.status_code == 204
    assert (await storefront_client.get(f"/products/{product_id}")).status_code == 404


async def test_invalid_product_payloads(storefront_client, seed):
    product = await seed.product("Bowl", "5.00", stock=1)

    negative_price = await storefront_client.post(
        "/products/", json={"name": "Bowl", "price": -1, "stock_quantity": 1}, headers=INTERNAL_HEADERS
    )
    empty_update = await storefront_client.put(f"/products/{product}", json={}, headers=INTERNAL_HEADERS)

    assert negative_price.status_code == 400
    assert empty_update.status_code == 400


async def test_product_referenced_by_an_order_cannot_be_deleted(storefront_client, seed):
    user = await seed.account()
    product = await seed.product("Clock", "40.00", stock=2)
    await seed.cart_entry(user, product, 1)
    await storefront_client.post("/orders/create", json=CHECKOUT, headers=auth_headers(user))

    response = await storefront_client.delete(f"/products/{product}", headers=INTERNAL_HEADERS)

    assert response.status_code == 409
    assert response.json()["message"] == "Product is referenced by existing orders"
    assert await seed.stock_of(product) == 1


async def test_delete_unknown_product(storefront_client):
    response = await storefront_client.delete("/products/12345", headers=INTERNAL_HEADERS)

    assert response.status_code == 404
