from decimal import Decimal


def test_category_crud(client):
    parent = client.post("/api/categories", json={"name": "Home"})
    assert parent.status_code == 201
    parent = parent.json()

    child = client.post("/api/categories", json={"name": "Lighting", "parentCategoryId": parent["id"]}).json()
    assert child["parentCategoryId"] == parent["id"]

    renamed = client.put(f"/api/categories/{child['id']}", json={"description": "Lamps and bulbs"})
    assert renamed.json()["description"] == "Lamps and bulbs"

    assert len(client.get("/api/categories").json()) == 2
    assert client.delete(f"/api/categories/{child['id']}").status_code == 200
    assert client.get(f"/api/categories/{child['id']}").json() == {"error": "Category not found"}


def test_category_parent_must_exist(client):
    resp = client.post("/api/categories", json={"name": "Orphan", "parentCategoryId": 99})

    assert resp.status_code == 404


def test_product_crud(client, api_product):
    product = api_product(name="Desk", price=120.5, stock=2, sku="DESK-1")
    assert Decimal(product["price"]) == Decimal("120.5")
    assert product["isActive"] is True

    updated = client.put(f"/api/products/{product['id']}", json={"stock": 7, "price": 99.99})
    assert updated.status_code == 200
    assert updated.json()["stock"] == 7
    assert Decimal(updated.json()["price"]) == Decimal("99.99")

    assert client.delete(f"/api/products/{product['id']}").status_code == 200
    missing = client.get(f"/api/products/{product['id']}")
    assert missing.status_code == 404
    assert missing.json() == {"error": "Product not found"}


def test_product_validation(client, api_product):
    assert client.post("/api/products", json={"name": "Bad", "price": -1, "stock": 1}).status_code == 400
    assert client.post("/api/products", json={"name": "Bad", "price": 1, "stock": -1}).status_code == 400
    assert client.post("/api/products", json={"price": 1}).status_code == 400
    assert client.post("/api/products", json={"name": "Lost", "price": 1, "categoryId": 42}).status_code == 404

    api_product(name="One", sku="SKU-1")
    dup = client.post("/api/products", json={"name": "Two", "price": 1, "sku": "SKU-1"})
    assert dup.status_code == 400

    product = api_product()
    assert client.put(f"/api/products/{product['id']}", json={}).status_code == 400
    assert client.put(f"/api/products/{product['id']}", json={"stock": -3}).status_code == 400


def test_products_filtered_by_category(client, api_product):
    books = client.post("/api/categories", json={"name": "Books"}).json()
    api_product(name="Novel", categoryId=books["id"])
    api_product(name="Chair")

    assert len(client.get("/api/products").json()) == 2
    filtered = client.get("/api/products", params={"categoryId": books["id"]}).json()
    assert [p["name"] for p in filtered] == ["Novel"]


def test_ordered_product_cannot_be_deleted(client, api_user, api_product):
    user = api_user()
    product = api_product(stock=3)
    client.post("/api/orders", json={"userId": user["id"], "items": [{"productId": product["id"], "quantity": 1}]})

    resp = client.delete(f"/api/products/{product['id']}")

    assert resp.status_code == 400
    assert "referenced by existing orders" in resp.json()["error"]
    assert client.get(f"/api/products/{product['id']}").status_code == 200


def test_health(client):
    assert client.get("/health").json() == {"status": "ok"}
