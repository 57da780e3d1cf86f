def test_register_hides_password_hash(client, api_user):
    user = api_user("alice", "pw123", "a@example.com")

    assert user["username"] == "alice"
    assert user["email"] == "a@example.com"
    assert user["isActive"] is True
    assert "password" not in user
    assert "passwordHash" not in user

    fetched = client.get(f"/api/users/{user['id']}").json()
    assert "passwordHash" not in fetched


def test_duplicate_registration_is_rejected(client, api_user):
    api_user("alice", "pw123", "a@example.com")

    resp = client.post(
        "/api/users/register",
        json={"username": "alice", "password": "pw123", "email": "a@example.com"},
    )

    assert resp.status_code == 400
    assert "already exists" in resp.json()["error"]
    assert len(client.get("/api/users").json()) == 1


def test_duplicate_email_under_new_username(client, api_user):
    api_user("alice", email="a@example.com")

    resp = client.post("/api/users", json={"username": "alice2", "password": "x", "email": "a@example.com"})

    assert resp.status_code == 400


def test_register_requires_fields(client):
    resp = client.post("/api/users/register", json={"username": "bob"})

    assert resp.status_code == 400
    assert "error" in resp.json()


def test_update_user(client, api_user):
    user = api_user("alice")
    api_user("bob")

    resp = client.put(f"/api/users/{user['id']}", json={"firstName": "Alice", "phone": "+100"})
    assert resp.status_code == 200
    assert resp.json()["firstName"] == "Alice"
    assert resp.json()["phone"] == "+100"

    clash = client.put(f"/api/users/{user['id']}", json={"username": "bob"})
    assert clash.status_code == 400

    empty = client.put(f"/api/users/{user['id']}", json={})
    assert empty.status_code == 400
    assert empty.json() == {"error": "No fields to update"}


def test_delete_user(client, api_user):
    user = api_user("alice")

    assert client.delete(f"/api/users/{user['id']}").status_code == 200
    resp = client.get(f"/api/users/{user['id']}")
    assert resp.status_code == 404
    assert resp.json() == {"error": "User not found"}


def test_delete_user_restores_stock_of_their_orders(client, api_user, api_product):
    user = api_user("alice")
    product = api_product(stock=5)
    client.post("/api/orders", json={"userId": user["id"], "items": [{"productId": product["id"], "quantity": 3}]})
    assert client.get(f"/api/products/{product['id']}").json()["stock"] == 2

    assert client.delete(f"/api/users/{user['id']}").status_code == 200

    assert client.get(f"/api/products/{product['id']}").json()["stock"] == 5
    assert client.get("/api/orders", params={"userId": user["id"]}).json() == []
