from uuid import uuid4

from conftest import signup


def _cart(client, headers):
    res = client.get("/api/cart", headers=headers)
    assert res.status_code == 200
    return res.json()["cart"]


def test_get_cart_creates_empty_cart(client, auth_headers):
    cart = _cart(client, auth_headers)
    assert cart["items"] == []
    assert cart["totalAmount"] == 0
    assert "userId" in cart


def test_cart_requires_bearer_token(client):
    res = client.get("/api/cart")
    assert res.status_code == 401
    assert res.headers.get("www-authenticate") == "Bearer"


def test_add_then_overcommit_leaves_cart_unchanged(client, auth_headers, make_product):
    p1 = make_product(price=10, stock=5)

    res = client.post("/api/cart/add", json={"productId": p1["id"], "quantity": 2}, headers=auth_headers)
    assert res.status_code == 200
    cart = res.json()["cart"]
    assert cart["totalAmount"] == 20.0
    assert [(it["product"]["id"], it["quantity"]) for it in cart["items"]] == [(p1["id"], 2)]

    res = client.post("/api/cart/add", json={"productId": p1["id"], "quantity": 4}, headers=auth_headers)
    assert res.status_code == 400
    assert res.json()["error"] == "insufficient_stock"
    assert "Only 5 items" in res.json()["message"]

    cart = _cart(client, auth_headers)
    assert cart["items"][0]["quantity"] == 2
    assert cart["totalAmount"] == 20.0


def test_add_same_product_twice_merges_lines(client, auth_headers, make_product):
    p = make_product(price=3.5, stock=10)
    client.post("/api/cart/add", json={"productId": p["id"], "quantity": 1}, headers=auth_headers)
    res = client.post("/api/cart/add", json={"productId": p["id"], "quantity": 3}, headers=auth_headers)
    assert res.status_code == 200
    items = res.json()["cart"]["items"]
    assert len(items) == 1
    assert items[0]["quantity"] == 4
    assert res.json()["cart"]["totalAmount"] == 14.0


def test_add_line_resolves_product_details(client, auth_headers, make_product):
    p = make_product(name="Desk Lamp", price=25, stock=3, category="home", imageUrl="http://img/lamp.png")
    res = client.post("/api/cart/add", json={"itemId": p["id"]}, headers=auth_headers)
    assert res.status_code == 200
    line = res.json()["cart"]["items"][0]
    assert line["quantity"] == 1
    assert line["product"] == {
        "id": p["id"],
        "name": "Desk Lamp",
        "price": 25.0,
        "imageUrl": "http://img/lamp.png",
        "category": "home",
        "stock": 3,
    }


def test_add_rejects_bad_requests(client, auth_headers, make_product):
    p = make_product()
    res = client.post("/api/cart/add", json={"productId": p["id"], "quantity": 0}, headers=auth_headers)
    assert res.status_code == 400
    res = client.post("/api/cart/add", json={"quantity": 1}, headers=auth_headers)
    assert res.status_code == 400
    res = client.post("/api/cart/add", json={"productId": "not-an-id"}, headers=auth_headers)
    assert res.status_code == 400
    assert res.json()["error"] == "invalid_input"
    res = client.post("/api/cart/add", json={"productId": uuid4().hex}, headers=auth_headers)
    assert res.status_code == 404


def test_add_inactive_product_is_not_found(client, auth_headers, make_product):
    p = make_product()
    client.delete(f"/api/items/{p['id']}", headers=make_product.headers)
    res = client.post("/api/cart/add", json={"productId": p["id"]}, headers=auth_headers)
    assert res.status_code == 404


def test_update_sets_absolute_quantity(client, auth_headers, make_product):
    p = make_product(price=2, stock=10)
    client.post("/api/cart/add", json={"productId": p["id"], "quantity": 5}, headers=auth_headers)
    res = client.put("/api/cart/update", json={"productId": p["id"], "quantity": 3}, headers=auth_headers)
    assert res.status_code == 200
    cart = res.json()["cart"]
    assert cart["items"][0]["quantity"] == 3
    assert cart["totalAmount"] == 6.0


def test_update_to_zero_removes_line(client, auth_headers, make_product):
    keep = make_product(price=1, stock=10)
    drop = make_product(price=100, stock=10)
    client.post("/api/cart/add", json={"productId": keep["id"]}, headers=auth_headers)
    client.post("/api/cart/add", json={"productId": drop["id"]}, headers=auth_headers)

    res = client.put("/api/cart/update", json={"productId": drop["id"], "quantity": 0}, headers=auth_headers)
    assert res.status_code == 200
    cart = res.json()["cart"]
    assert [it["product"]["id"] for it in cart["items"]] == [keep["id"]]
    assert cart["totalAmount"] == 1.0


def test_update_beyond_stock_fails_and_keeps_cart(client, auth_headers, make_product):
    p = make_product(price=10, stock=4)
    client.post("/api/cart/add", json={"productId": p["id"], "quantity": 2}, headers=auth_headers)
    res = client.put("/api/cart/update", json={"productId": p["id"], "quantity": 5}, headers=auth_headers)
    assert res.status_code == 400
    assert res.json()["error"] == "insufficient_stock"
    cart = _cart(client, auth_headers)
    assert cart["items"][0]["quantity"] == 2
    assert cart["totalAmount"] == 20.0


def test_update_error_paths(client, make_product):
    headers = signup(client)
    p = make_product()
    # no cart yet
    res = client.put("/api/cart/update", json={"productId": p["id"], "quantity": 1}, headers=headers)
    assert res.status_code == 404
    assert res.json()["message"] == "Cart not found"

    _cart(client, headers)
    res = client.put("/api/cart/update", json={"productId": p["id"], "quantity": 1}, headers=headers)
    assert res.status_code == 404
    assert res.json()["message"] == "Item not found in cart"

    res = client.put("/api/cart/update", json={"productId": p["id"], "quantity": -1}, headers=headers)
    assert res.status_code == 400
    res = client.put("/api/cart/update", json={"productId": p["id"]}, headers=headers)
    assert res.status_code == 400


def test_remove_line(client, auth_headers, make_product):
    p = make_product(price=7, stock=10)
    client.post("/api/cart/add", json={"productId": p["id"], "quantity": 2}, headers=auth_headers)
    res = client.delete(f"/api/cart/remove/{p['id']}", headers=auth_headers)
    assert res.status_code == 200
    assert res.json()["cart"]["items"] == []
    assert res.json()["cart"]["totalAmount"] == 0


def test_remove_missing_line_is_not_found(client, auth_headers, make_product):
    p = make_product(price=7, stock=10)
    other = make_product()
    client.post("/api/cart/add", json={"productId": p["id"], "quantity": 2}, headers=auth_headers)
    res = client.delete(f"/api/cart/remove/{other['id']}", headers=auth_headers)
    assert res.status_code == 404
    cart = _cart(client, auth_headers)
    assert cart["items"][0]["quantity"] == 2
    assert cart["totalAmount"] == 14.0

    res = client.delete("/api/cart/remove/xyz", headers=auth_headers)
    assert res.status_code == 400


def test_remove_without_cart_is_not_found(client, make_product):
    headers = signup(client)
    p = make_product()
    res = client.delete(f"/api/cart/remove/{p['id']}", headers=headers)
    assert res.status_code == 404
    assert res.json()["message"] == "Cart not found"


def test_clear_is_idempotent(client, make_product):
    headers = signup(client)
    # clear before any cart exists
    res = client.delete("/api/cart/clear", headers=headers)
    assert res.status_code == 200
    assert res.json()["cart"]["items"] == []

    p = make_product(price=5, stock=5)
    client.post("/api/cart/add", json={"productId": p["id"], "quantity": 2}, headers=headers)
    for _ in range(2):
        res = client.delete("/api/cart/clear", headers=headers)
        assert res.status_code == 200
        cart = res.json()["cart"]
        assert cart["items"] == []
        assert cart["totalAmount"] == 0


def test_count(client, make_product):
    headers = signup(client)
    assert client.get("/api/cart/count", headers=headers).json() == {"count": 0}

    a = make_product(stock=10)
    b = make_product(stock=10)
    client.post("/api/cart/add", json={"productId": a["id"], "quantity": 2}, headers=headers)
    client.post("/api/cart/add", json={"productId": b["id"], "quantity": 3}, headers=headers)
    assert client.get("/api/cart/count", headers=headers).json() == {"count": 5}

    client.delete("/api/cart/clear", headers=headers)
    assert client.get("/api/cart/count", headers=headers).json() == {"count": 0}


def test_total_follows_current_price(client, auth_headers, make_product):
    p = make_product(price=10, stock=10)
    client.post("/api/cart/add", json={"productId": p["id"], "quantity": 3}, headers=auth_headers)

    res = client.put(f"/api/items/{p['id']}", json={"price": 12.5}, headers=make_product.headers)
    assert res.status_code == 200

    cart = _cart(client, auth_headers)
    assert cart["items"][0]["product"]["price"] == 12.5
    assert cart["totalAmount"] == 37.5


def test_money_is_summed_in_decimal(client, auth_headers, make_product):
    a = make_product(price=0.1, stock=5)
    b = make_product(price=0.2, stock=5)
    client.post("/api/cart/add", json={"productId": a["id"]}, headers=auth_headers)
    res = client.post("/api/cart/add", json={"productId": b["id"]}, headers=auth_headers)
    assert res.status_code == 200
    cart = res.json()["cart"]
    assert cart["totalAmount"] == 0.3
    assert [it["product"]["price"] for it in cart["items"]] == [0.1, 0.2]
