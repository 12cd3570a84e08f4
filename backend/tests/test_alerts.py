"""SOS alert broadcast and resolution tests."""

import pytest
from sqlalchemy.exc import IntegrityError

from safecircle.core.config import settings
from safecircle.core.errors import AlertAlreadyActive
from safecircle.models.alert import EmergencyAlert
from safecircle.models.friendship import Friendship
from safecircle.models.user import User
from safecircle.services import alert_service


def test_alert_requires_a_friend(client, make_user):
    a = make_user("ann")
    r = client.post("/alerts", headers=a["headers"], json={})
    assert r.status_code == 400
    assert "friend" in r.json()["detail"].lower()


def test_send_alert_snapshots_friends(client, make_user, befriend):
    a = make_user("ann", name="Ann")
    b = make_user("ben", name="Ben")
    c = make_user("cal", name="Cal")
    befriend(a, b)
    befriend(a, c)

    r = client.post(
        "/alerts",
        headers=a["headers"],
        json={"location": "Main St", "latitude": 40.7, "longitude": -74.0},
    )
    assert r.status_code == 201
    alert = r.json()
    assert alert["status"] == "active"
    assert alert["type"] == "sos"
    assert alert["user_name"] == "Ann"
    assert alert["location"] == "Main St"
    assert alert["resolved_at"] is None
    assert sorted(f["id"] for f in alert["friends"]) == sorted([b["id"], c["id"]])


def test_alert_without_body(client, make_user, befriend):
    a = make_user("ann")
    b = make_user("ben")
    befriend(a, b)
    r = client.post("/alerts", headers=a["headers"])
    assert r.status_code == 201
    assert r.json()["latitude"] is None


def test_invalid_coordinates_rejected(client, make_user, befriend):
    a = make_user("ann")
    b = make_user("ben")
    befriend(a, b)
    r = client.post("/alerts", headers=a["headers"], json={"latitude": 91, "longitude": 0})
    assert r.status_code == 422


def test_one_active_alert_per_user(client, make_user, befriend):
    a = make_user("ann")
    b = make_user("ben")
    befriend(a, b)
    first = client.post("/alerts", headers=a["headers"], json={})
    assert first.status_code == 201
    assert client.post("/alerts", headers=a["headers"], json={}).status_code == 409

    client.post(f"/alerts/{first.json()['id']}/resolve", headers=b["headers"])
    assert client.post("/alerts", headers=a["headers"], json={}).status_code == 201


def test_racing_alerts_rejected_by_index(db, monkeypatch):
    a = User(email="a@test.com", hashed_password="x", name="A", username="a")
    b = User(email="b@test.com", hashed_password="x", name="B", username="b")
    db.add_all([a, b])
    db.commit()
    db.add(Friendship(user_id=a.id, friend_id=b.id, friend_name="B", friend_username="b"))
    db.commit()

    alert_service.send_alert(db, a)
    monkeypatch.setattr(alert_service, "get_active_alert", lambda db, user_id: None)
    with pytest.raises(AlertAlreadyActive):
        alert_service.send_alert(db, a)
    assert db.query(EmergencyAlert).count() == 1


def test_active_alert_unique_in_database(db):
    a = User(email="a@test.com", hashed_password="x", name="A", username="a")
    db.add(a)
    db.commit()
    db.add(EmergencyAlert(user_id=a.id, status="active"))
    db.commit()
    db.add(EmergencyAlert(user_id=a.id, status="active"))
    with pytest.raises(IntegrityError):
        db.commit()


def test_snapshot_survives_unfriending(client, make_user, befriend):
    a = make_user("ann")
    b = make_user("ben")
    c = make_user("cal")
    befriend(a, b)
    alert_id = client.post("/alerts", headers=a["headers"], json={}).json()["id"]

    # Friend list changes after the alert was sent
    assert client.delete(f"/friends/{b['id']}", headers=a["headers"]).status_code == 204
    befriend(a, c)

    r = client.get(f"/alerts/{alert_id}", headers=b["headers"])
    assert r.status_code == 200
    assert [f["id"] for f in r.json()["friends"]] == [b["id"]]
    assert [x["id"] for x in client.get("/alerts/incoming", headers=b["headers"]).json()] == [alert_id]

    assert client.get(f"/alerts/{alert_id}", headers=c["headers"]).status_code == 404
    assert client.get("/alerts/incoming", headers=c["headers"]).json() == []
    assert client.get(f"/alerts/{alert_id}", headers=a["headers"]).status_code == 200


def test_incoming_and_my_alerts(client, make_user, befriend):
    a = make_user("ann")
    b = make_user("ben")
    befriend(a, b)
    alert_id = client.post("/alerts", headers=a["headers"], json={}).json()["id"]

    assert [x["id"] for x in client.get("/alerts/incoming", headers=b["headers"]).json()] == [alert_id]
    assert client.get("/alerts/incoming", headers=a["headers"]).json() == []
    assert [x["id"] for x in client.get("/alerts/me", headers=a["headers"]).json()] == [alert_id]

    client.post(f"/alerts/{alert_id}/resolve", headers=b["headers"])
    assert client.get("/alerts/incoming", headers=b["headers"]).json() == []
    history = client.get("/alerts/incoming", params={"include_resolved": True}, headers=b["headers"]).json()
    assert [x["status"] for x in history] == ["resolved"]


def test_resolve_is_idempotent(client, make_user, befriend):
    a = make_user("ann")
    b = make_user("ben")
    befriend(a, b)
    alert_id = client.post("/alerts", headers=a["headers"], json={}).json()["id"]

    first = client.post(f"/alerts/{alert_id}/resolve", headers=b["headers"])
    assert first.status_code == 200
    assert first.json()["status"] == "resolved"
    assert first.json()["resolved_by"] == b["id"]

    second = client.post(f"/alerts/{alert_id}/resolve", headers=a["headers"])
    assert second.status_code == 200
    assert second.json()["resolved_at"] == first.json()["resolved_at"]
    assert second.json()["resolved_by"] == b["id"]


def test_resolve_missing_alert(client, make_user):
    a = make_user("ann")
    assert client.post("/alerts/9999/resolve", headers=a["headers"]).status_code == 404


def test_any_user_may_resolve_by_default(client, make_user, befriend):
    a = make_user("ann")
    b = make_user("ben")
    outsider = make_user("oz")
    befriend(a, b)
    alert_id = client.post("/alerts", headers=a["headers"], json={}).json()["id"]
    r = client.post(f"/alerts/{alert_id}/resolve", headers=outsider["headers"])
    assert r.status_code == 200
    assert r.json()["resolved_by"] == outsider["id"]


def test_restricted_resolution(client, make_user, befriend, monkeypatch):
    monkeypatch.setattr(settings, "restrict_alert_resolution", True)
    a = make_user("ann")
    b = make_user("ben")
    outsider = make_user("oz")
    befriend(a, b)
    alert_id = client.post("/alerts", headers=a["headers"], json={}).json()["id"]

    assert client.post(f"/alerts/{alert_id}/resolve", headers=outsider["headers"]).status_code == 403
    assert client.post(f"/alerts/{alert_id}/resolve", headers=a["headers"]).status_code == 200


def test_overlapping_resolves_change_once(db, session_factory):
    a = User(email="a@test.com", hashed_password="x", name="A", username="a")
    b = User(email="b@test.com", hashed_password="x", name="B", username="b")
    c = User(email="c@test.com", hashed_password="x", name="C", username="c")
    db.add_all([a, b, c])
    db.commit()
    db.add_all([
        Friendship(user_id=a.id, friend_id=b.id, friend_name="B", friend_username="b"),
        Friendship(user_id=a.id, friend_id=c.id, friend_name="C", friend_username="c"),
    ])
    db.commit()
    alert_id = alert_service.send_alert(db, a).id

    first, second = session_factory(), session_factory()
    try:
        # Both requests have already seen the alert as active
        assert first.get(EmergencyAlert, alert_id).status == "active"
        assert second.get(EmergencyAlert, alert_id).status == "active"

        _, changed_first = alert_service.resolve_alert(first, alert_id, first.get(User, b.id))
        alert, changed_second = alert_service.resolve_alert(second, alert_id, second.get(User, c.id))
    finally:
        first.close()
        second.close()

    assert (changed_first, changed_second) == (True, False)
    assert alert.status == "resolved"
    assert alert.resolved_by == b.id
