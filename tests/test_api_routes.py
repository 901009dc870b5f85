def _login(client, username="admin", password="admin123"):
    r = client.post("/api/auth/login", json={"username": username, "password": password})
    assert r.status_code == 200, r.get_json()
    return {"Authorization": f"Bearer {r.get_json()['token']}"}


def _register(client, username, password="secret1"):
    r = client.post("/api/auth/register", json={"username": username, "password": password})
    assert r.status_code == 201, r.get_json()
    data = r.get_json()
    return data["user"], {"Authorization": f"Bearer {data['token']}"}


def _create_item(client, admin_h, **body):
    body.setdefault("name", "Iron Sword")
    body.setdefault("itemType", "weapon")
    r = client.post("/api/items", json=body, headers=admin_h)
    assert r.status_code == 201, r.get_json()
    return r.get_json()


def test_register_validation(client):
    r = client.post("/api/auth/register", json={"username": "alice", "password": "12345"})
    assert r.status_code == 400
    assert r.get_json()["code"] == "validation_error"

    user, _ = _register(client, "alice", "123456")
    assert user["role"] == "player"

    r = client.post("/api/auth/register", json={"username": "alice", "password": "123456"})
    assert r.status_code == 400


def test_login_rejects_bad_credentials(client):
    r = client.post("/api/auth/login", json={"username": "admin", "password": "nope"})
    assert r.status_code == 401
    assert r.get_json()["error"] == "Invalid credentials"


def test_requires_token(client):
    assert client.get("/api/inventory").status_code == 401
    r = client.get("/api/items", headers={"Authorization": "Bearer not-a-token"})
    assert r.status_code == 401


def test_me(client):
    user, h = _register(client, "alice")
    r = client.get("/api/users/me", headers=h)
    assert r.status_code == 200
    assert r.get_json()["username"] == "alice"
    assert r.get_json()["id"] == user["id"]


def test_catalog_crud(client):
    admin_h = _login(client)
    _, player_h = _register(client, "alice")

    item = _create_item(client, admin_h, rarity="epic", stats={"attack": 9})
    assert item["rarity"] == "epic"

    r = client.post("/api/items", json={"name": "Nope", "itemType": "weapon"}, headers=player_h)
    assert r.status_code == 403

    r = client.post("/api/items", json={"name": "Nope"}, headers=admin_h)
    assert r.status_code == 400

    r = client.get(f"/api/items/{item['id']}", headers=player_h)
    assert r.get_json()["stats"] == {"attack": 9}

    r = client.put(f"/api/items/{item['id']}", json={"name": "Steel Sword", "item_type": "weapon"},
                   headers=admin_h)
    assert r.status_code == 200
    assert r.get_json()["name"] == "Steel Sword"
    assert r.get_json()["stats"] is None

    r = client.get("/api/items", headers=player_h)
    assert [i["name"] for i in r.get_json()] == ["Steel Sword"]

    r = client.delete(f"/api/items/{item['id']}", headers=admin_h)
    assert r.status_code == 200
    assert client.get(f"/api/items/{item['id']}", headers=player_h).status_code == 404


def test_grant_and_transfer_flow(client):
    admin_h = _login(client)
    alice, alice_h = _register(client, "alice")
    bob, bob_h = _register(client, "bob")
    item = _create_item(client, admin_h, name="Item X", itemType="material")

    r = client.post("/api/inventory", json={"userId": alice["id"], "itemId": item["id"], "quantity": 5},
                    headers=admin_h)
    assert r.status_code == 201
    assert r.get_json()["quantity"] == 5

    r = client.post("/api/inventory", json={"userId": bob["id"], "itemId": item["id"], "quantity": 5},
                    headers=alice_h)
    assert r.status_code == 403

    r = client.post("/api/transfers", json={"toUsername": "bob", "itemId": item["id"], "quantity": 3},
                    headers=alice_h)
    assert r.status_code == 201
    record = r.get_json()["transfer"]
    assert record["status"] == "completed"
    assert (record["from_username"], record["to_username"], record["item_name"]) == ("alice", "bob", "Item X")

    inv = client.get("/api/inventory", headers=alice_h).get_json()
    assert inv[0]["quantity"] == 2
    inv = client.get("/api/inventory", headers=bob_h).get_json()
    assert inv[0]["quantity"] == 3

    r = client.post("/api/transfers", json={"to_username": "alice", "item_id": item["id"], "quantity": 5},
                    headers=bob_h)
    assert r.status_code == 409
    assert r.get_json()["code"] == "insufficient_quantity"

    r = client.post("/api/transfers", json={"toUsername": "alice", "itemId": item["id"], "quantity": 1},
                    headers=alice_h)
    assert r.status_code == 400
    assert r.get_json()["code"] == "self_transfer"

    r = client.post("/api/transfers", json={"toUsername": "ghost", "itemId": item["id"], "quantity": 1},
                    headers=alice_h)
    assert r.status_code == 404

    r = client.post("/api/transfers", json={"toUsername": "bob", "itemId": item["id"], "quantity": -1},
                    headers=alice_h)
    assert r.status_code == 400
    assert r.get_json()["code"] == "invalid_quantity"

    assert len(client.get("/api/transfers", headers=bob_h).get_json()) == 1
    assert len(client.get("/api/transfers", headers=admin_h).get_json()) == 1


def test_admin_views(client):
    admin_h = _login(client)
    _, alice_h = _register(client, "alice")

    r = client.get("/api/users", headers=admin_h)
    assert [u["username"] for u in r.get_json()] == ["admin", "alice"]
    assert "password_hash" not in r.get_json()[0]
    assert client.get("/api/users", headers=alice_h).status_code == 403

    r = client.get("/api/statistics", headers=admin_h)
    assert r.get_json() == {"totalUsers": 2, "totalItems": 0, "totalTransfers": 0, "totalInventoryUnits": 0}
    assert client.get("/api/statistics", headers=alice_h).status_code == 403


def test_transfer_rejects_out_of_range_bodies(client):
    admin_h = _login(client)
    alice, alice_h = _register(client, "alice")
    _register(client, "bob")
    item = _create_item(client, admin_h)
    client.post("/api/inventory", json={"userId": alice["id"], "itemId": item["id"], "quantity": 5},
                headers=admin_h)

    for raw in ('{"toUsername": "bob", "itemId": %d, "quantity": 1e400}' % item["id"],
                '{"toUsername": "bob", "itemId": %d, "quantity": 9223372036854775808}' % item["id"]):
        r = client.post("/api/transfers", data=raw, content_type="application/json", headers=alice_h)
        assert r.status_code == 400
        assert r.get_json()["code"] == "invalid_quantity"

    r = client.post("/api/transfers", data='{"toUsername": "bob", "itemId": 1e400, "quantity": 1}',
                    content_type="application/json", headers=alice_h)
    assert r.status_code == 404

    r = client.post("/api/inventory", json={"userId": alice["id"], "itemId": item["id"], "quantity": 2**63},
                    headers=admin_h)
    assert r.status_code == 400
    assert r.get_json()["code"] == "invalid_quantity"

    r = client.post("/api/transfers", json={"toUsername": "alice", "itemId": item["id"]}, headers=alice_h)
    assert r.status_code == 400
    assert r.get_json()["code"] == "self_transfer"

    r = client.post("/api/transfers", json={"toUsername": "bob", "itemId": item["id"]}, headers=alice_h)
    assert r.status_code == 400
    assert r.get_json()["code"] == "validation_error"

    inv = client.get("/api/inventory", headers=alice_h).get_json()
    assert inv[0]["quantity"] == 5


def test_login_rejects_non_string_password(client):
    _register(client, "alice")
    r = client.post("/api/auth/login", json={"username": "alice", "password": 123456})
    assert r.status_code == 400
    assert r.get_json()["code"] == "validation_error"
