from decimal import Decimal


async def test_post_twice_keeps_one_row(client, catalog):
    rice = catalog["products"]["rice"]
    body = {"productId": rice.id, "quantity": 2, "sessionId": "guest-session"}

    first = await client.post("/api/cart", json=body)
    second = await client.post("/api/cart", json=body)

    assert first.status_code == 200
    assert second.json()["id"] == first.json()["id"]
    assert second.json()["quantity"] == 4

    cart = (await client.get("/api/cart", params={"sessionId": "guest-session"})).json()
    assert len(cart) == 1
    assert cart[0]["quantity"] == 4
    assert cart[0]["product"]["name"] == "Basmati Rice"
    assert Decimal(cart[0]["product"]["price"]) == Decimal("100")


async def test_post_defaults_quantity_to_one(client, catalog):
    resp = await client.post("/api/cart", json={"productId": catalog["products"]["dal"].id, "userId": 5})
    assert resp.status_code == 200
    assert resp.json()["quantity"] == 1
    assert resp.json()["userId"] == 5
    assert resp.json()["sessionId"] is None


async def test_user_id_wins_when_both_given(client, catalog):
    body = {"productId": catalog["products"]["dal"].id, "userId": 5, "sessionId": "guest-session"}
    await client.post("/api/cart", json=body)

    assert len((await client.get("/api/cart", params={"userId": 5})).json()) == 1
    assert (await client.get("/api/cart", params={"sessionId": "guest-session"})).json() == []


async def test_post_validation_errors_are_400(client, catalog):
    rice_id = catalog["products"]["rice"].id

    missing_owner = await client.post("/api/cart", json={"productId": rice_id})
    bad_quantity = await client.post("/api/cart", json={"productId": rice_id, "quantity": 0, "sessionId": "s"})
    missing_product = await client.post("/api/cart", json={"sessionId": "s"})

    assert missing_owner.status_code == 400
    assert bad_quantity.status_code == 400
    assert missing_product.status_code == 400


async def test_post_unknown_product_is_404(client, catalog):
    resp = await client.post("/api/cart", json={"productId": 999, "sessionId": "s"})
    assert resp.status_code == 404


async def test_get_cart_requires_owner(client):
    resp = await client.get("/api/cart")
    assert resp.status_code == 400


async def test_put_updates_and_zero_removes(client, catalog):
    created = (await client.post("/api/cart", json={"productId": catalog["products"]["rice"].id, "sessionId": "s"})).json()

    updated = await client.put(f"/api/cart/{created['id']}", json={"quantity": 3})
    assert updated.status_code == 200
    assert updated.json()["quantity"] == 3

    removed = await client.put(f"/api/cart/{created['id']}", json={"quantity": 0})
    assert removed.status_code == 200
    assert removed.json() is None
    assert (await client.get("/api/cart", params={"sessionId": "s"})).json() == []


async def test_put_negative_removes(client, catalog):
    created = (await client.post("/api/cart", json={"productId": catalog["products"]["rice"].id, "sessionId": "s"})).json()
    resp = await client.put(f"/api/cart/{created['id']}", json={"quantity": -2})
    assert resp.status_code == 200
    assert (await client.get("/api/cart", params={"sessionId": "s"})).json() == []


async def test_put_unknown_item_is_404(client):
    resp = await client.put("/api/cart/999", json={"quantity": 2})
    assert resp.status_code == 404
    assert resp.json()["detail"] == "Cart item not found"


async def test_put_requires_integer_quantity(client, catalog):
    created = (await client.post("/api/cart", json={"productId": catalog["products"]["rice"].id, "sessionId": "s"})).json()
    resp = await client.put(f"/api/cart/{created['id']}", json={"quantity": "lots"})
    assert resp.status_code == 400


async def test_delete_item_is_scoped(client, catalog):
    rice = (await client.post("/api/cart", json={"productId": catalog["products"]["rice"].id, "sessionId": "a"})).json()
    await client.post("/api/cart", json={"productId": catalog["products"]["dal"].id, "sessionId": "a"})
    await client.post("/api/cart", json={"productId": catalog["products"]["rice"].id, "sessionId": "b"})

    resp = await client.delete(f"/api/cart/{rice['id']}")
    assert resp.status_code == 200
    assert resp.json() == {"message": "Item removed from cart"}

    assert [line["productId"] for line in (await client.get("/api/cart", params={"sessionId": "a"})).json()] == [
        catalog["products"]["dal"].id
    ]
    assert len((await client.get("/api/cart", params={"sessionId": "b"})).json()) == 1

    again = await client.delete(f"/api/cart/{rice['id']}")
    assert again.status_code == 404


async def test_clear_cart_only_clears_owner(client, catalog):
    await client.post("/api/cart", json={"productId": catalog["products"]["rice"].id, "sessionId": "a"})
    await client.post("/api/cart", json={"productId": catalog["products"]["dal"].id, "sessionId": "a"})
    await client.post("/api/cart", json={"productId": catalog["products"]["rice"].id, "userId": 9})

    resp = await client.delete("/api/cart", params={"sessionId": "a"})

    assert resp.status_code == 200
    assert resp.json() == {"message": "Cart cleared", "success": True, "removed": 2}
    assert (await client.get("/api/cart", params={"sessionId": "a"})).json() == []
    assert len((await client.get("/api/cart", params={"userId": 9})).json()) == 1


async def test_cart_hides_deleted_products(client, storage, catalog):
    await client.post("/api/cart", json={"productId": catalog["products"]["rice"].id, "sessionId": "s"})
    await client.post("/api/cart", json={"productId": catalog["products"]["dal"].id, "sessionId": "s"})
    await storage.delete_product(catalog["products"]["dal"].id)

    cart = (await client.get("/api/cart", params={"sessionId": "s"})).json()
    assert [line["product"]["name"] for line in cart] == ["Basmati Rice"]
