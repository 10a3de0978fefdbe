from conftest import BUYER_ID

def _register(client, phone="9123456780", **extra):
    body = {"firstName": "Asha", "phoneNumber": phone, "password": "Password1"}
    body.update(extra)
    return client.post("/api/user/register", json=body)

def test_register_then_login(client, real_auth):
    r = _register(client, email="asha@example.com")
    assert r.status_code == 201
    assert r.json()["user"]["email"] == "asha@example.com"
    assert "password" not in r.json()["user"]

    r = client.post("/api/user/login", json={"identifier": "asha@example.com", "password": "Password1"})
    assert r.status_code == 200
    token = r.json()["token"]
    user_id = r.json()["user"]["_id"]

    r = client.get(f"/api/user/profile/{user_id}", headers={"Authorization": f"Bearer {token}"})
    assert r.status_code == 200
    assert r.json()["user"]["firstName"] == "Asha"

def test_register_validation(client):
    assert _register(client, phone="12").status_code == 422
    r = client.post("/api/user/register", json={"firstName": "A", "phoneNumber": "9123456780", "password": "short"})
    assert r.status_code == 422
    assert _register(client).status_code == 201
    assert _register(client).status_code == 400

def test_login_wrong_password_is_401(client):
    _register(client)
    r = client.post("/api/user/login", json={"identifier": "9123456780", "password": "Wrong1234"})
    assert r.status_code == 401

def test_profile_is_owner_only(client, buyer, store):
    store.add_user("other", phone_number="9000000077")
    assert client.get(f"/api/user/profile/{BUYER_ID}").status_code == 200
    assert client.get("/api/user/profile/other").status_code == 403
    assert client.delete("/api/user/other").status_code == 403

def test_admin_lists_customers(admin_client, buyer, store):
    store.add_user("root", phone_number="9000000088", is_admin=True)
    r = admin_client.get("/api/user")
    assert r.status_code == 200
    assert [u["_id"] for u in r.json()["users"]] == [BUYER_ID]

def test_address_cart_and_wishlist_routes(client, buyer, store):
    store.add_product("P5", 10)

    r = client.post(f"/api/user/address/{BUYER_ID}", json={"addressLine": "1 Park St", "city": "Kolkata", "state": "WB", "pinCode": 700016})
    assert r.status_code == 201
    new_id = r.json()["user"]["address"][-1]["id"]
    r = client.put(f"/api/user/address/{BUYER_ID}/{new_id}", json={"addressLine": "2 Park St", "city": "Kolkata", "state": "WB", "pinCode": 700016})
    assert r.status_code == 200
    assert client.delete(f"/api/user/address/{BUYER_ID}/{new_id}").status_code == 200

    r = client.post(f"/api/user/cart/{BUYER_ID}", json={"productId": "P5"})
    assert r.json()["user"]["cart"]["P5"] == 1
    r = client.request("DELETE", f"/api/user/cart/{BUYER_ID}", json={"productId": "P5"})
    assert "P5" not in r.json()["user"]["cart"]

    assert client.post(f"/api/user/wishlist/{BUYER_ID}", json={"productId": "P5"}).status_code == 200
    assert client.post(f"/api/user/wishlist/{BUYER_ID}", json={"productId": "P5"}).status_code == 400
    r = client.request("DELETE", f"/api/user/wishlist/{BUYER_ID}", json={"productId": "P5"})
    assert r.json()["user"]["wishlist"] == []

def test_change_password(client, buyer):
    r = client.put(f"/api/user/change-password/{BUYER_ID}", json={"currentPassword": "Password1", "newPassword": "Another123"})
    assert r.status_code == 200
    r = client.put(f"/api/user/change-password/{BUYER_ID}", json={"currentPassword": "Password1", "newPassword": "Another123"})
    assert r.status_code == 400

def test_password_over_bcrypt_limit_is_422(client, buyer, store):
    too_long = "a1" * 40
    assert _register(client, phone="9123456781", password=too_long).status_code == 422
    assert store.get_user_by_phone("9123456781") is None
    r = client.put(f"/api/user/change-password/{BUYER_ID}", json={"currentPassword": "Password1", "newPassword": too_long})
    assert r.status_code == 422
