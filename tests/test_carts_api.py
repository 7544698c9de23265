import uuid

import pytest

MISSING_ID = uuid.uuid4().hex


def stock_of(client, product_id):
    return client.get(f"/api/products/{product_id}").json()["stock"]


# ✅ Create cart from an order

def test_create_cart_decrements_stock(client, make_product):
    p = make_product(stock=5)
    r = client.post("/api/carts", json={"products": [{"id": p["id"], "quantity": 3}]})
    assert r.status_code == 201
    cart = r.json()["cart"]
    assert cart["products"] == [{"id": p["id"], "quantity": 3}]
    assert stock_of(client, p["id"]) == 2


def test_create_cart_insufficient_stock(client, make_product):
    p = make_product(stock=5)
    r = client.post("/api/carts", json={"products": [{"id": p["id"], "quantity": 10}]})
    assert r.status_code == 400
    assert r.json()["error"] == "insufficient_stock"
    assert stock_of(client, p["id"]) == 5


def test_create_cart_restores_earlier_items_on_failure(client, make_product):
    a = make_product(code="A", stock=5)
    b = make_product(code="B", stock=1)
    r = client.post("/api/carts", json={"products": [
        {"id": a["id"], "quantity": 3},
        {"id": b["id"], "quantity": 2},
    ]})
    assert r.status_code == 400
    assert stock_of(client, a["id"]) == 5
    assert stock_of(client, b["id"]) == 1


def test_create_cart_missing_product(client, make_product):
    a = make_product(stock=5)
    r = client.post("/api/carts", json={"products": [
        {"id": a["id"], "quantity": 1},
        {"id": MISSING_ID, "quantity": 1},
    ]})
    assert r.status_code == 404
    assert stock_of(client, a["id"]) == 5


def test_create_cart_empty_products(client):
    r = client.post("/api/carts", json={"products": []})
    assert r.status_code == 400
    assert r.json()["error"] == "validation_error"


def test_create_cart_invalid_product_id(client):
    r = client.post("/api/carts", json={"products": [{"id": "nope", "quantity": 1}]})
    assert r.status_code == 400


def test_create_cart_merges_repeated_products(client, make_product):
    p = make_product(stock=10)
    cart = client.post("/api/carts", json={"products": [
        {"id": p["id"], "quantity": 2},
        {"id": p["id"], "quantity": 3},
    ]}).json()["cart"]
    assert cart["products"] == [{"id": p["id"], "quantity": 5}]
    assert stock_of(client, p["id"]) == 5


# 🛒 Reading carts

def test_get_cart_resolves_products(client, make_product, make_cart):
    p = make_product(title="Spark plug", stock=5)
    cart = make_cart([{"id": p["id"], "quantity": 2}])

    r = client.get(f"/api/carts/{cart['id']}")
    assert r.status_code == 200
    data = r.json()
    assert data["id"] == cart["id"]
    assert data["products"][0]["quantity"] == 2
    assert data["products"][0]["product"]["title"] == "Spark plug"


def test_get_cart_omits_deleted_products(client, make_product, make_cart):
    keep = make_product(code="KEEP", stock=5)
    gone = make_product(code="GONE", stock=5)
    cart = make_cart([{"id": keep["id"], "quantity": 1}, {"id": gone["id"], "quantity": 1}])
    client.delete(f"/api/products/{gone['id']}")

    data = client.get(f"/api/carts/{cart['id']}").json()
    assert [line["product"]["id"] for line in data["products"]] == [keep["id"]]


def test_get_cart_fully_dangling(client, make_product, make_cart):
    p = make_product(stock=5)
    cart = make_cart([{"id": p["id"], "quantity": 1}])
    client.delete(f"/api/products/{p['id']}")

    r = client.get(f"/api/carts/{cart['id']}")
    assert r.status_code == 200
    assert r.json() == {"id": cart["id"], "products": []}


def test_get_cart_malformed_id(client):
    assert client.get("/api/carts/123abc").status_code == 400


def test_get_cart_not_found(client):
    assert client.get(f"/api/carts/{MISSING_ID}").status_code == 404


# ➕ Add / update / remove line items

def test_add_item_merges_quantities(client, make_product, make_cart):
    a = make_product(code="A", stock=5)
    b = make_product(code="B", stock=5)
    cart = make_cart([{"id": a["id"], "quantity": 1}])

    client.post(f"/api/carts/{cart['id']}/product/{b['id']}", json={"quantity": 2})
    r = client.post(f"/api/carts/{cart['id']}/product/{b['id']}", json={"quantity": "3"})
    assert r.status_code == 200
    assert r.json()["cart"]["products"] == [
        {"id": a["id"], "quantity": 1},
        {"id": b["id"], "quantity": 5},
    ]
    # adding does not touch stock
    assert stock_of(client, b["id"]) == 5


def test_add_item_bad_quantity(client, make_product, make_cart):
    p = make_product(stock=5)
    cart = make_cart([{"id": p["id"], "quantity": 1}])
    for bad in ("abc", 0, -2, None):
        r = client.post(f"/api/carts/{cart['id']}/product/{p['id']}", json={"quantity": bad})
        assert r.status_code == 400, bad


def test_add_item_unknown_cart(client, make_product):
    p = make_product()
    r = client.post(f"/api/carts/{MISSING_ID}/product/{p['id']}", json={"quantity": 1})
    assert r.status_code == 404


def test_set_item_quantity(client, make_product, make_cart):
    p = make_product(stock=5)
    cart = make_cart([{"id": p["id"], "quantity": 1}])
    r = client.put(f"/api/carts/{cart['id']}/product/{p['id']}", json={"quantity": 4})
    assert r.status_code == 200
    assert r.json()["cart"]["products"] == [{"id": p["id"], "quantity": 4}]


def test_set_item_quantity_absent_item(client, make_product, make_cart):
    p = make_product(stock=5)
    cart = make_cart([{"id": p["id"], "quantity": 1}])
    r = client.put(f"/api/carts/{cart['id']}/product/{MISSING_ID}", json={"quantity": 4})
    assert r.status_code == 404
    assert r.json()["error"] == "item_not_found"

    data = client.get(f"/api/carts/{cart['id']}").json()
    assert [(line["product"]["id"], line["quantity"]) for line in data["products"]] == [(p["id"], 1)]


def test_set_item_quantity_rejects_strings(client, make_product, make_cart):
    p = make_product(stock=5)
    cart = make_cart([{"id": p["id"], "quantity": 1}])
    r = client.put(f"/api/carts/{cart['id']}/product/{p['id']}", json={"quantity": "4"})
    assert r.status_code == 400


def test_remove_item(client, make_product, make_cart):
    a = make_product(code="A", stock=5)
    b = make_product(code="B", stock=5)
    cart = make_cart([{"id": a["id"], "quantity": 1}, {"id": b["id"], "quantity": 2}])

    r = client.delete(f"/api/carts/{cart['id']}/product/{a['id']}")
    assert r.status_code == 200
    assert r.json()["cart"]["products"] == [{"id": b["id"], "quantity": 2}]


def test_remove_absent_item_is_noop(client, make_product, make_cart):
    p = make_product(stock=5)
    cart = make_cart([{"id": p["id"], "quantity": 1}])
    r = client.delete(f"/api/carts/{cart['id']}/product/{MISSING_ID}")
    assert r.status_code == 200
    assert r.json()["cart"]["products"] == [{"id": p["id"], "quantity": 1}]


# 🔁 Replace / clear

def test_replace_items_round_trip(client, make_product, make_cart):
    a = make_product(code="A", stock=5)
    b = make_product(code="B", stock=5)
    cart = make_cart([{"id": a["id"], "quantity": 1}])

    lines = [{"id": b["id"], "quantity": 7}, {"id": a["id"], "quantity": 2}]
    r = client.put(f"/api/carts/{cart['id']}", json={"products": lines})
    assert r.status_code == 200
    assert r.json()["cart"]["products"] == lines

    data = client.get(f"/api/carts/{cart['id']}").json()
    assert [{"id": line["product"]["id"], "quantity": line["quantity"]} for line in data["products"]] == lines
    # replacing never checks or moves stock
    assert stock_of(client, b["id"]) == 5


def test_replace_items_with_empty_list(client, make_product, make_cart):
    p = make_product(stock=5)
    cart = make_cart([{"id": p["id"], "quantity": 1}])
    r = client.put(f"/api/carts/{cart['id']}", json={"products": []})
    assert r.status_code == 200
    assert r.json()["cart"]["products"] == []


def test_replace_items_not_an_array(client, make_product, make_cart):
    p = make_product(stock=5)
    cart = make_cart([{"id": p["id"], "quantity": 1}])
    r = client.put(f"/api/carts/{cart['id']}", json={"products": {"id": p["id"]}})
    assert r.status_code == 400


def test_replace_items_unknown_cart(client):
    r = client.put(f"/api/carts/{MISSING_ID}", json={"products": []})
    assert r.status_code == 404


def test_clear_cart(client, make_product, make_cart):
    p = make_product(stock=5)
    cart = make_cart([{"id": p["id"], "quantity": 1}])
    r = client.delete(f"/api/carts/{cart['id']}")
    assert r.status_code == 200
    assert r.json()["cart"] == {"id": cart["id"], "products": []}
    # the cart document itself survives
    assert client.get(f"/api/carts/{cart['id']}").status_code == 200


def test_clear_unknown_cart(client):
    assert client.delete(f"/api/carts/{MISSING_ID}").status_code == 404


# 🚫 Malformed identifiers never reach the store

VALID_ID = uuid.uuid4().hex


@pytest.mark.parametrize("method, path, body", [
    ("post", "/api/carts/bad-id/product/{ok}", {"quantity": 1}),
    ("post", "/api/carts/{ok}/product/bad-id", {"quantity": 1}),
    ("put", "/api/carts/bad-id/product/{ok}", {"quantity": 1}),
    ("put", "/api/carts/{ok}/product/bad-id", {"quantity": 1}),
    ("delete", "/api/carts/bad-id/product/{ok}", None),
    ("delete", "/api/carts/{ok}/product/bad-id", None),
    ("put", "/api/carts/bad-id", {"products": []}),
    ("delete", "/api/carts/bad-id", None),
])
def test_cart_routes_reject_malformed_ids(client, method, path, body):
    kwargs = {"json": body} if body is not None else {}
    r = client.request(method.upper(), path.format(ok=VALID_ID), **kwargs)
    assert r.status_code == 400
    assert r.json()["error"] == "validation_error"
