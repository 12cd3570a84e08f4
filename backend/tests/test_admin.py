"""Admin console tests."""

from safecircle.models.alert import AlertRecipient, EmergencyAlert
from safecircle.models.feedback import Feedback
from safecircle.models.friend_request import FriendRequest
from safecircle.models.friendship import Friendship


def test_admin_routes_require_admin(client, make_user):
    u = make_user("maya")
    for method, path in (("get", "/admin/stats"), ("get", "/admin/users"), ("get", "/admin/feedback")):
        r = getattr(client, method)(path, headers=u["headers"])
        assert r.status_code == 403
    assert client.get("/admin/stats").status_code == 401


def test_stats(client, admin_email, make_user, befriend):
    admin = make_user("root", email=admin_email)
    a = make_user("ann")
    b = make_user("ben")
    befriend(a, b)
    client.post("/alerts", headers=a["headers"], json={})
    client.post("/feedback", headers=a["headers"], json={"message": "hi"})

    r = client.get("/admin/stats", headers=admin["headers"])
    assert r.status_code == 200
    assert r.json() == {"users": 3, "feedback": 1, "active_alerts": 1}


def test_list_and_filter_users(client, admin_email, make_user):
    admin = make_user("root", email=admin_email)
    make_user("ann", name="Ann Lee")
    make_user("ben", name="Ben Stone")

    assert len(client.get("/admin/users", headers=admin["headers"]).json()) == 3
    hits = client.get("/admin/users", params={"q": "STONE"}, headers=admin["headers"]).json()
    assert [h["username"] for h in hits] == ["ben"]
    hits = client.get("/admin/users", params={"q": "ann@"}, headers=admin["headers"]).json()
    assert [h["username"] for h in hits] == ["ann"]


def test_edit_user(client, admin_email, make_user):
    admin = make_user("root", email=admin_email)
    u = make_user("ann")
    r = client.patch(f"/admin/users/{u['id']}", headers=admin["headers"], json={"name": "Ann B", "phone": "5551234567"})
    assert r.status_code == 200
    assert r.json()["name"] == "Ann B"
    assert r.json()["phone"] == "5551234567"

    r = client.patch(f"/admin/users/{u['id']}", headers=admin["headers"], json={"phone": "12"})
    assert r.status_code == 422
    assert client.patch("/admin/users/9999", headers=admin["headers"], json={}).status_code == 404


def test_toggle_role(client, admin_email, make_user):
    admin = make_user("root", email=admin_email)
    u = make_user("ann")
    r = client.post(f"/admin/users/{u['id']}/role", headers=admin["headers"])
    assert r.json()["role"] == "admin"
    assert client.get("/admin/stats", headers=u["headers"]).status_code == 200
    r = client.post(f"/admin/users/{u['id']}/role", headers=admin["headers"])
    assert r.json()["role"] == "user"

    assert client.post(f"/admin/users/{admin['id']}/role", headers=admin["headers"]).status_code == 403


def test_suspend_and_activate(client, admin_email, make_user):
    admin = make_user("root", email=admin_email)
    u = make_user("ann")

    r = client.post(f"/admin/users/{u['id']}/suspend", headers=admin["headers"])
    assert r.json()["is_active"] is False
    assert client.get("/auth/me", headers=u["headers"]).status_code == 401
    assert client.post("/auth/login", json={"email": u["email"], "password": "secret123"}).status_code == 401

    client.post(f"/admin/users/{u['id']}/activate", headers=admin["headers"])
    assert client.get("/auth/me", headers=u["headers"]).status_code == 200
    assert client.post(f"/admin/users/{admin['id']}/suspend", headers=admin["headers"]).status_code == 403


def test_delete_user_removes_related_rows(client, admin_email, make_user, befriend, db):
    admin = make_user("root", email=admin_email)
    a = make_user("ann")
    b = make_user("ben")
    c = make_user("cal")
    befriend(a, b)
    befriend(c, a)
    client.post("/friends/requests", headers=b["headers"], json={"to_user_id": c["id"]})
    client.post("/alerts", headers=a["headers"], json={})
    client.post("/alerts", headers=c["headers"], json={})
    client.post("/feedback", headers=a["headers"], json={"message": "bye"})

    r = client.delete(f"/admin/users/{a['id']}", headers=admin["headers"])
    assert r.status_code == 204

    assert db.query(Friendship).count() == 0
    assert db.query(EmergencyAlert).filter_by(user_id=a["id"]).count() == 0
    assert db.query(AlertRecipient).filter_by(friend_id=a["id"]).count() == 0
    assert db.query(Feedback).count() == 0
    assert db.query(FriendRequest).filter(
        (FriendRequest.from_user_id == a["id"]) | (FriendRequest.to_user_id == a["id"])
    ).count() == 0
    # Unrelated rows survive
    assert db.query(FriendRequest).count() == 1
    assert db.query(EmergencyAlert).count() == 1
    assert client.get("/friends", headers=b["headers"]).json() == []

    assert client.delete(f"/admin/users/{admin['id']}", headers=admin["headers"]).status_code == 403


def test_feedback_admin(client, admin_email, make_user):
    admin = make_user("root", email=admin_email)
    u = make_user("ann")
    client.post("/feedback", headers=u["headers"], json={"message": "first"})
    client.post("/feedback", headers=u["headers"], json={"message": "second"})

    items = client.get("/admin/feedback", headers=admin["headers"]).json()
    assert [i["message"] for i in items] == ["second", "first"]
    assert items[0]["user_email"] == u["email"]

    assert client.delete(f"/admin/feedback/{items[0]['id']}", headers=admin["headers"]).status_code == 204
    assert len(client.get("/admin/feedback", headers=admin["headers"]).json()) == 1
    assert client.delete("/admin/feedback/9999", headers=admin["headers"]).status_code == 404
