"""Sign-up, sign-in and current user tests."""


def test_register_and_login(client):
    r = client.post(
        "/auth/register",
        json={"email": "maya@test.com", "password": "secret123", "confirm_password": "secret123", "username": "Maya.K"},
    )
    assert r.status_code == 201
    body = r.json()
    assert body["username"] == "maya.k"
    assert body["name"] == "maya"
    assert body["role"] == "user"
    assert body["is_profile_complete"] is False

    r = client.post("/auth/login", json={"email": "maya@test.com", "password": "secret123"})
    assert r.status_code == 200
    data = r.json()
    assert data["token_type"] == "bearer"
    assert data["user_id"] == body["id"]

    me = client.get("/auth/me", headers={"Authorization": f"Bearer {data['access_token']}"})
    assert me.status_code == 200
    assert me.json()["email"] == "maya@test.com"


def test_password_mismatch_rejected(client):
    r = client.post(
        "/auth/register",
        json={"email": "x@test.com", "password": "secret123", "confirm_password": "other123", "username": "x"},
    )
    assert r.status_code == 422


def test_invalid_username_rejected(client):
    r = client.post(
        "/auth/register",
        json={"email": "x@test.com", "password": "secret123", "username": "no spaces"},
    )
    assert r.status_code == 422


def test_duplicate_email_and_username(client, make_user):
    make_user("dana")
    r = client.post("/auth/register", json={"email": "dana@test.com", "password": "secret123", "username": "dana2"})
    assert r.status_code == 409
    r = client.post("/auth/register", json={"email": "other@test.com", "password": "secret123", "username": "DANA"})
    assert r.status_code == 409
    assert "taken" in r.json()["detail"]


def test_wrong_password(client, make_user):
    make_user("eli")
    r = client.post("/auth/login", json={"email": "eli@test.com", "password": "wrong-pass"})
    assert r.status_code == 401
    assert r.json()["detail"] == "Invalid email or password"


def test_me_requires_token(client):
    assert client.get("/auth/me").status_code == 401
    r = client.get("/auth/me", headers={"Authorization": "Bearer not-a-jwt"})
    assert r.status_code == 401


def test_admin_role_from_settings(client, admin_email, make_user):
    admin = make_user("root", email=admin_email)
    me = client.get("/auth/me", headers=admin["headers"]).json()
    assert me["role"] == "admin"
