# tests/api/test_pastes_api.py
# HTTP surface tests against the FastAPI app with an in-memory store.
# - Identity comes from the X-User-Id header
# - Errors are rendered as {"error": {"code", "message", ...}}

import pytest
from fastapi.testclient import TestClient

from pastebox.db.memory_store import MemoryStore
from pastebox.main import create_app


@pytest.fixture
def client(clock, settings_factory):
    settings = settings_factory(MAX_CONTENT_BYTES=16, RATE_LIMIT_MAX_REQUESTS=2)
    app = create_app(settings, store=MemoryStore(clock=clock), clock=clock)
    with TestClient(app) as c:
        yield c


def as_user(user_id):
    return {"X-User-Id": user_id}


def create(client, user_id, **body):
    body.setdefault("content", "hello")
    body.setdefault("visibility", "public")
    return client.post("/api/pastes", json=body, headers=as_user(user_id))


def test_missing_user_header_is_unauthorized(client):
    response = client.post("/api/pastes", json={"content": "x", "visibility": "public"})

    assert response.status_code == 401
    assert response.json()["error"]["code"] == "UNAUTHORIZED"


def test_create_returns_paste_and_quota(client):
    response = create(client, "alice")

    assert response.status_code == 201
    body = response.json()
    assert body["paste"]["user_id"] == "alice"
    assert body["paste"]["visibility"] == "public"
    assert body["rate_limit"]["remaining"] == 1
    assert response.headers["X-RateLimit-Remaining"] == "1"
    assert response.headers["X-RateLimit-Limit"] == "2"


@pytest.mark.parametrize(
    "body",
    [
        {"content": "x" * 17, "visibility": "public"},
        {"content": "hi", "visibility": "public", "shared_with": ["bob"]},
        {"content": "hi", "visibility": "secret"},
        {"visibility": "public"},
    ],
)
def test_invalid_create_is_rejected(client, body):
    response = client.post("/api/pastes", json=body, headers=as_user("alice"))

    assert response.status_code == 400
    assert response.json()["error"]["code"] == "VALIDATION_ERROR"


def test_create_over_quota_is_rate_limited(client):
    create(client, "alice")
    create(client, "alice")

    response = create(client, "alice")

    assert response.status_code == 429
    assert response.json()["error"]["code"] == "RATE_LIMIT_EXCEEDED"
    assert int(response.headers["Retry-After"]) > 0
    assert response.headers["X-RateLimit-Remaining"] == "0"
    # Other users keep their own quota
    assert create(client, "bob").status_code == 201


def test_get_paste_respects_visibility(client):
    paste_id = create(client, "alice", visibility="private", shared_with=["bob"]).json()["paste"]["paste_id"]

    assert client.get(f"/api/pastes/{paste_id}", headers=as_user("alice")).status_code == 200
    shared = client.get(f"/api/pastes/{paste_id}", headers=as_user("bob"))
    assert shared.status_code == 200
    assert shared.json()["paste"]["shared_with"] == ["bob"]

    denied = client.get(f"/api/pastes/{paste_id}", headers=as_user("carol"))
    assert denied.status_code == 403
    assert denied.json()["error"]["code"] == "FORBIDDEN"

    missing = client.get("/api/pastes/does-not-exist", headers=as_user("alice"))
    assert missing.status_code == 404


def test_expired_paste_is_not_found(client, clock):
    paste_id = create(client, "alice").json()["paste"]["paste_id"]

    clock.advance(7200)

    assert client.get(f"/api/pastes/{paste_id}", headers=as_user("alice")).status_code == 404


def test_delete_is_owner_only(client):
    paste_id = create(client, "alice").json()["paste"]["paste_id"]

    assert client.delete(f"/api/pastes/{paste_id}", headers=as_user("bob")).status_code == 403

    response = client.delete(f"/api/pastes/{paste_id}", headers=as_user("alice"))
    assert response.status_code == 200
    assert response.json() == {"success": True}

    assert client.delete(f"/api/pastes/{paste_id}", headers=as_user("alice")).status_code == 404
    assert client.get(f"/api/pastes/{paste_id}", headers=as_user("alice")).status_code == 404


def test_list_mine_and_all(client, clock):
    own = create(client, "alice", visibility="private").json()["paste"]["paste_id"]
    clock.advance(1)
    shared = create(client, "bob", visibility="private", shared_with=["alice"]).json()["paste"]["paste_id"]
    clock.advance(1)
    public = create(client, "carol").json()["paste"]["paste_id"]

    mine = client.get("/api/pastes", params={"type": "mine"}, headers=as_user("alice"))
    assert [p["paste_id"] for p in mine.json()["pastes"]] == [own]

    everything = client.get("/api/pastes", headers=as_user("alice"))
    assert [p["paste_id"] for p in everything.json()["pastes"]] == [public, shared, own]

    limited = client.get("/api/pastes", params={"limit": 1}, headers=as_user("alice"))
    assert [p["paste_id"] for p in limited.json()["pastes"]] == [public]

    stranger = client.get("/api/pastes", headers=as_user("dave"))
    assert [p["paste_id"] for p in stranger.json()["pastes"]] == [public]


@pytest.mark.parametrize("params", [{"type": "bogus"}, {"limit": 0}])
def test_list_rejects_bad_query(client, params):
    response = client.get("/api/pastes", params=params, headers=as_user("alice"))

    assert response.status_code == 400
    assert response.json()["error"]["code"] == "VALIDATION_ERROR"


def test_health_endpoints(client):
    health = client.get("/health")
    assert health.status_code == 200
    assert health.json()["status"] == "healthy"
    assert health.json()["checks"]["store"]["status"] == "healthy"

    assert client.get("/health/live").json() == {"status": "alive"}
    assert client.get("/health/ready").json() == {"status": "ready"}


def test_metrics_endpoint_exposes_paste_counters(client):
    create(client, "alice")

    response = client.get("/metrics")

    assert response.status_code == 200
    assert "pastes_created_total" in response.text


def test_rate_limit_endpoint_reports_without_consuming(client):
    fresh = client.get("/api/pastes/rate-limit", headers=as_user("alice"))
    assert fresh.status_code == 200
    assert fresh.json()["remaining"] == 2
    assert fresh.json()["limit"] == 2

    create(client, "alice")
    first = client.get("/api/pastes/rate-limit", headers=as_user("alice"))
    second = client.get("/api/pastes/rate-limit", headers=as_user("alice"))
    assert first.json()["remaining"] == second.json()["remaining"] == 1
    assert second.headers["X-RateLimit-Remaining"] == "1"
    assert second.headers["X-RateLimit-Limit"] == "2"

    # Reading the quota left room for exactly one more paste
    assert create(client, "alice").status_code == 201
    assert create(client, "alice").status_code == 429
    assert client.get("/api/pastes/rate-limit", headers=as_user("alice")).json()["remaining"] == 0


def test_rate_limit_endpoint_requires_user(client):
    assert client.get("/api/pastes/rate-limit").status_code == 401
