import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from allowance.api.deps import db
from allowance.db.base import Base
from allowance.main import app
import allowance.models.audit_log  # noqa: F401
import allowance.models.tracker_state  # noqa: F401
import allowance.models.user  # noqa: F401

from conftest import freeze_today


@pytest.fixture()
def client(monkeypatch):
    freeze_today(monkeypatch, "2024-01-03")

    eng = create_engine(
        "sqlite+pysqlite:///:memory:",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
        future=True,
    )
    Base.metadata.create_all(eng)
    Session = sessionmaker(bind=eng, autoflush=False, autocommit=False, future=True)

    def _db():
        s = Session()
        try:
            yield s
        finally:
            s.close()

    app.dependency_overrides[db] = _db
    try:
        yield TestClient(app)
    finally:
        app.dependency_overrides.clear()
        eng.dispose()


def _signup(client, email="kid@example.com", password="secret1"):
    r = client.post("/auth/signup", json={"email": email, "password": password})
    assert r.status_code == 200, r.text
    return {"Authorization": f"Bearer {r.json()['access_token']}"}


@pytest.fixture()
def auth(client):
    return _signup(client)


def test_health(client):
    assert client.get("/health").json() == {"status": "ok"}
    assert client.get("/api/health").json() == {"status": "ok"}


def test_auth_flow(client):
    _signup(client, email="  Kid@Example.com ")

    r = client.post("/auth/signup", json={"email": "kid@example.com", "password": "secret1"})
    assert r.status_code == 409
    assert r.json()["detail"] == "email_in_use"

    r = client.post("/auth/login", json={"email": "KID@example.com", "password": "secret1"})
    assert r.status_code == 200
    assert r.json()["token_type"] == "bearer"

    r = client.post("/auth/login", json={"email": "kid@example.com", "password": "wrong!!"})
    assert r.status_code == 401

    r = client.post("/auth/signup", json={"email": "nobody", "password": "secret1"})
    assert r.status_code == 422


def test_tracker_requires_token(client):
    assert client.get("/tracker").status_code in (401, 403)
    r = client.get("/tracker", headers={"Authorization": "Bearer nope"})
    assert r.status_code == 401
    assert r.json()["detail"] == "invalid_token"


def test_new_tracker_is_reconciled_on_first_read(client, auth):
    r = client.get("/tracker", headers=auth)
    assert r.status_code == 200
    body = r.json()

    assert body["start_date"] == "2024-01-03"
    assert body["last_log_check"] == "2024-01-03"
    assert [e["date"] for e in body["allowance_log"]] == ["2024-01-03"]
    assert body["total_accumulated"] == 20.0
    assert body["summary"]["available_balance"] == 20.0
    assert body["editing"] == {}
    assert body["wishlist_categories"][0]["name"] == "Unassigned"


def test_settings_move_start_and_backfill(client, auth):
    r = client.put("/tracker/settings", headers=auth, json={"daily_allowance": 25, "start_date": "2024-01-01"})
    assert r.status_code == 200
    assert r.json()["persisted"] is True

    log = client.get("/tracker/log", headers=auth).json()
    assert [e["date"] for e in log] == ["2024-01-03", "2024-01-02", "2024-01-01"]
    # The rate change takes effect today, so the back-filled days use the new base rate.
    assert [e["amount_added"] for e in log] == [20.0, 25.0, 25.0]

    history = client.get("/tracker/history", headers=auth).json()
    assert len(history) == 1
    assert history[0]["new_rate"] == 25.0
    assert history[0]["previous_rate"] == 20.0


def test_settings_reject_bad_input(client, auth):
    r = client.put("/tracker/settings", headers=auth, json={"daily_allowance": -1, "start_date": "2024-01-01"})
    assert r.status_code == 400
    assert r.json()["detail"] == "daily_allowance_invalid"

    r = client.put("/tracker/settings", headers=auth, json={"daily_allowance": 5, "start_date": "01/01/2024"})
    assert r.status_code == 400
    assert r.json()["detail"] == "date_invalid"


def test_spending_and_summary(client, auth):
    r = client.post("/tracker/spending", headers=auth, json={"name": "Lunch", "amount": "12.5", "date": "2024-01-03"})
    assert r.status_code == 200
    item_id = r.json()["id"]

    s = client.get("/tracker/summary", headers=auth).json()
    assert s["total_spent"] == 12.5
    assert s["available_balance"] == 7.5

    r = client.post("/tracker/spending", headers=auth, json={"name": "", "amount": "1", "date": "2024-01-03"})
    assert r.status_code == 400
    assert r.json()["detail"] == "name_required"

    r = client.put(f"/tracker/spending/{item_id}", headers=auth, json={"name": "Dinner", "amount": 30})
    assert r.status_code == 200
    s = client.get("/tracker/summary", headers=auth).json()
    assert s["available_balance"] == -10.0
    assert s["balance_color"] == "#f59e0b"

    assert client.delete(f"/tracker/spending/{item_id}", headers=auth).status_code == 200
    assert client.delete(f"/tracker/spending/{item_id}", headers=auth).status_code == 404
    assert client.get("/tracker/spending", headers=auth).json() == []


def test_edit_staging_round_trip(client, auth):
    item_id = client.post("/tracker/proposed", headers=auth, json={"name": "Kite", "amount": 5}).json()["id"]

    assert client.post(f"/tracker/proposed/{item_id}/edit", headers=auth).status_code == 200
    assert client.get("/tracker", headers=auth).json()["editing"] == {"proposed": [item_id]}

    r = client.put(f"/tracker/proposed/{item_id}", headers=auth, json={"name": "Big kite", "amount": 8})
    assert r.status_code == 200
    assert client.get("/tracker", headers=auth).json()["editing"] == {}

    assert client.post("/tracker/proposed/9999/edit", headers=auth).status_code == 404


def test_proposed_affordability_listing(client, auth):
    for name, amount in (("Game", 15), ("Book", 10), ("Pen", 5)):
        client.post("/tracker/proposed", headers=auth, json={"name": name, "amount": amount})

    out = client.get("/tracker/proposed", headers=auth).json()

    assert [p["name"] for p in out["proposed"]] == ["Game", "Book", "Pen"]
    assert [p["can_afford"] for p in out["proposed"]] == [True, False, True]
    assert out["total_proposed"] == 30.0
    assert out["remaining_after"] == -10.0


def test_wishlist_moves_and_categories(client, auth):
    pid = client.post("/tracker/proposed", headers=auth, json={"name": "Kite", "amount": 5}).json()["id"]
    wid = client.post(f"/tracker/proposed/{pid}/to-wishlist", headers=auth).json()["id"]
    assert client.get("/tracker/proposed", headers=auth).json()["proposed"] == []

    cid = client.post("/tracker/categories", headers=auth, json={"name": "Toys"}).json()["id"]
    assert client.put(f"/tracker/wishlist/{wid}/category", headers=auth, json={"category_id": cid}).status_code == 200

    groups = client.get("/tracker/wishlist", headers=auth).json()
    assert [g["category"]["name"] for g in groups] == ["Unassigned", "Toys"]
    assert groups[1]["items"][0]["id"] == wid

    r = client.put(f"/tracker/categories/{cid}/visibility", headers=auth, json={"visible": False})
    assert r.status_code == 200
    assert client.get("/tracker/wishlist", headers=auth).json()[1]["visible"] is False

    assert client.delete("/tracker/categories/1", headers=auth).json()["detail"] == "category_protected"
    assert client.delete(f"/tracker/categories/{cid}", headers=auth).status_code == 200
    groups = client.get("/tracker/wishlist", headers=auth).json()
    assert [g["category"]["name"] for g in groups] == ["Unassigned"]
    assert groups[0]["items"][0]["id"] == wid

    r = client.post(f"/tracker/wishlist/{wid}/to-proposed", headers=auth)
    assert r.status_code == 200
    assert len(client.get("/tracker/wishlist", headers=auth).json()[0]["items"]) == 1
    assert len(client.get("/tracker/proposed", headers=auth).json()["proposed"]) == 1

    r = client.post("/tracker/wishlist", headers=auth, json={"name": "Drone", "amount": 90, "category_id": 42})
    assert r.status_code == 400
    assert r.json()["detail"] == "category_required"


def test_manual_log_entries(client, auth):
    r = client.post("/tracker/log", headers=auth, json={"date": "2024-01-03", "amount": 5})
    assert r.status_code == 400
    assert r.json()["detail"] == "log_date_taken"

    r = client.post("/tracker/log", headers=auth, json={"date": "2023-12-25", "amount": 50})
    assert r.status_code == 200
    assert client.get("/tracker/summary", headers=auth).json()["total_accumulated"] == 70.0

    assert client.delete("/tracker/log/9999", headers=auth).status_code == 404


def test_history_crud(client, auth):
    r = client.post("/tracker/history", headers=auth, json={"effective_date": "2024-01-10", "amount": 0})
    assert r.status_code == 400

    eid = client.post("/tracker/history", headers=auth, json={"effective_date": "2024-01-10", "amount": 30}).json()["id"]
    r = client.put(f"/tracker/history/{eid}", headers=auth, json={"effective_date": "2024-01-11", "amount": 35})
    assert r.status_code == 200
    assert client.get("/tracker/history", headers=auth).json()[0]["effective_date"] == "2024-01-11"

    assert client.delete(f"/tracker/history/{eid}", headers=auth).status_code == 200
    assert client.get("/tracker/history", headers=auth).json() == []


def test_colors_and_sections(client, auth):
    r = client.post("/tracker/colors/positive", headers=auth, json={"min": 5, "max": 1, "color": "#000"})
    assert r.status_code == 400
    assert r.json()["detail"] == "range_min_above_max"

    assert client.get("/tracker/colors/sideways", headers=auth).status_code == 422

    r = client.put("/tracker/colors/positive/0", headers=auth, json={"min": 0, "max": 100, "color": "#123456"})
    assert r.status_code == 200
    assert client.get("/tracker/summary", headers=auth).json()["balance_color"] == "#123456"

    assert client.delete("/tracker/colors/negative/10", headers=auth).status_code == 404

    assert client.put("/tracker/sections/wishList", headers=auth, json={"visible": False}).status_code == 200
    assert client.get("/tracker", headers=auth).json()["section_visibility"]["wishList"] is False
    assert client.put("/tracker/sections/bogus", headers=auth, json={"visible": False}).status_code == 404


def test_audit_is_per_user(client, auth):
    client.post("/tracker/proposed", headers=auth, json={"name": "Kite", "amount": 5})
    other = _signup(client, email="sibling@example.com")
    client.post("/tracker/proposed", headers=other, json={"name": "Ball", "amount": 3})

    mine = client.get("/audit", headers=auth).json()
    assert [e["action"] for e in mine] == ["proposed.create"]
    assert mine[0]["user_id"] == "kid@example.com"

    assert client.get("/audit", headers=auth, params={"entity_type": "spending"}).json() == []
