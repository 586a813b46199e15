def _add(client, headers, product_id, quantity):
    return client.post(
        "/api/Cart/AddToCart",
        json={"productId": product_id, "quantity": quantity},
        headers=headers,
    )


def test_empty_cart_shape(client, user_headers):
    resp = client.get("/api/Cart/GetCart", headers=user_headers)
    assert resp.status_code == 200
    cart = resp.json()["data"]
    assert cart["cartItems"] == []
    assert cart["totalItems"] == 0
    assert cart["totalPrice"] == 0
    assert client.get("/api/Cart/CartItemCount", headers=user_headers).json()["data"] == 0


def test_cart_requires_login(client):
    assert client.get("/api/Cart/GetCart").status_code == 401


def test_add_to_cart_creates_line(client, user_headers, product):
    resp = _add(client, user_headers, product["id"], 2)
    assert resp.status_code == 200, resp.text
    assert resp.json()["message"] == "Product added to cart successfully"
    cart = resp.json()["data"]
    assert cart["totalItems"] == 2
    assert cart["totalPrice"] == 99.98
    item = cart["cartItems"][0]
    assert item["productId"] == product["id"]
    assert item["productName"] == "Headphones"
    assert item["priceAtAddTime"] == 49.99
    assert item["totalPrice"] == 99.98


def test_adding_same_product_increases_quantity(client, user_headers, product):
    _add(client, user_headers, product["id"], 1)
    cart = _add(client, user_headers, product["id"], 2).json()["data"]
    assert len(cart["cartItems"]) == 1
    assert cart["cartItems"][0]["quantity"] == 3


def test_add_more_than_stock(client, user_headers, product):
    resp = _add(client, user_headers, product["id"], 6)
    assert resp.status_code == 400
    assert resp.json()["message"] == "Not enough stock available. Available: 5"


def test_add_zero_quantity(client, user_headers, product):
    resp = _add(client, user_headers, product["id"], 0)
    assert resp.status_code == 400
    assert resp.json()["message"] == "Quantity must be greater than 0"


def test_add_unknown_or_deleted_product(client, admin_headers, user_headers, product):
    assert _add(client, user_headers, 999, 1).status_code == 404

    client.delete(f"/api/Product/Delete/{product['id']}", headers=admin_headers)
    resp = _add(client, user_headers, product["id"], 1)
    assert resp.status_code == 404
    assert resp.json()["message"] == "Product not found"


def test_update_cart_item(client, user_headers, product):
    item = _add(client, user_headers, product["id"], 1).json()["data"]["cartItems"][0]

    resp = client.put(
        "/api/Cart/UpdateCartItem",
        json={"cartItemId": item["id"], "quantity": 4},
        headers=user_headers,
    )
    assert resp.status_code == 200
    assert resp.json()["data"]["cartItems"][0]["quantity"] == 4

    resp = client.put(
        "/api/Cart/UpdateCartItem",
        json={"cartItemId": item["id"], "quantity": 9},
        headers=user_headers,
    )
    assert resp.status_code == 400
    assert resp.json()["message"].startswith("Not enough stock available")


def test_update_without_cart_or_item(client, user_headers, product):
    resp = client.put("/api/Cart/UpdateCartItem", json={"cartItemId": 1, "quantity": 1}, headers=user_headers)
    assert resp.status_code == 404
    assert resp.json()["message"] == "Cart not found"

    _add(client, user_headers, product["id"], 1)
    resp = client.put("/api/Cart/UpdateCartItem", json={"cartItemId": 99, "quantity": 1}, headers=user_headers)
    assert resp.status_code == 404
    assert resp.json()["message"] == "Cart item not found"


def test_remove_cart_item(client, user_headers, product):
    item = _add(client, user_headers, product["id"], 2).json()["data"]["cartItems"][0]

    resp = client.delete(f"/api/Cart/RemoveCartItem/{item['id']}", headers=user_headers)
    assert resp.status_code == 200
    assert resp.json()["data"]["cartItems"] == []

    resp = client.delete(f"/api/Cart/RemoveCartItem/{item['id']}", headers=user_headers)
    assert resp.status_code == 404
    assert resp.json()["message"] == "Failed to remove cart item"


def test_removed_line_is_not_reused(client, user_headers, product):
    first = _add(client, user_headers, product["id"], 2).json()["data"]["cartItems"][0]
    client.delete(f"/api/Cart/RemoveCartItem/{first['id']}", headers=user_headers)

    cart = _add(client, user_headers, product["id"], 1).json()["data"]
    assert len(cart["cartItems"]) == 1
    assert cart["cartItems"][0]["id"] != first["id"]
    assert cart["cartItems"][0]["quantity"] == 1


def test_clear_cart(client, admin_headers, user_headers, category, product):
    other = client.post(
        "/api/Product/Add",
        json={
            "name": "Cable",
            "description": "USB-C cable",
            "imageUrl": "https://img.example.com/cable.png",
            "price": 9.5,
            "stock": 100,
            "categoryId": category["id"],
        },
        headers=admin_headers,
    ).json()["data"]
    _add(client, user_headers, product["id"], 1)
    _add(client, user_headers, other["id"], 3)
    assert client.get("/api/Cart/CartItemCount", headers=user_headers).json()["data"] == 4

    resp = client.delete("/api/Cart/ClearCart", headers=user_headers)
    assert resp.status_code == 200
    assert resp.json()["data"]["cartItems"] == []
    assert client.get("/api/Cart/CartItemCount", headers=user_headers).json()["data"] == 0


def test_clear_without_cart(client, user_headers):
    resp = client.delete("/api/Cart/ClearCart", headers=user_headers)
    assert resp.status_code == 404
    assert resp.json()["message"] == "Failed to clear cart"


def test_carts_are_per_user(client, admin_headers, user_headers, product):
    _add(client, user_headers, product["id"], 2)
    assert client.get("/api/Cart/CartItemCount", headers=admin_headers).json()["data"] == 0
