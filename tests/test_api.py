import pytest
from fastapi.testclient import TestClient

from nexus_api.database.connection import mongo_db_dependency
from nexus_api.main import app
from nexus_api.utils.cache import MemoryCache, get_cache
from nexus_api.utils.http_client import get_http_client
from nexus_api.utils.rate_limiter import MemoryRateLimiter, get_rate_limiter
from nexus_api.utils.security import create_access_token

from fakes import FakeHttp


@pytest.fixture
def http() -> FakeHttp:
    return FakeHttp(json={"_embedded": {"results": []}})


@pytest.fixture
def client(indexed_db, http):
    limiter = MemoryRateLimiter(limit=50, window_ms=3_600_000)
    cache = MemoryCache()

    async def override_db():
        return indexed_db

    async def override_limiter():
        return limiter

    async def override_cache():
        return cache

    async def override_http():
        return http

    app.dependency_overrides[mongo_db_dependency] = override_db
    app.dependency_overrides[get_rate_limiter] = override_limiter
    app.dependency_overrides[get_cache] = override_cache
    app.dependency_overrides[get_http_client] = override_http
    # no context manager: the lifespan would dial a real MongoDB
    yield TestClient(app)
    app.dependency_overrides.clear()


def auth(user_id: str, role: str = "student") -> dict:
    token = create_access_token(user_id, f"{user_id}@university.edu", role)
    return {"Authorization": f"Bearer {token}"}


def test_chat_requires_authentication(client):
    assert client.get("/api/chat/conversations").status_code == 401
    bad = client.get("/api/chat/conversations", headers={"Authorization": "Bearer not-a-jwt"})
    assert bad.status_code == 401


def test_send_and_read_flow(client, alice, bob):
    sent = client.post("/api/chat/send", json={"recipient_id": bob, "content": "hey"}, headers=auth(alice))
    assert sent.status_code == 201
    assert sent.json()["message"] == "Message sent"
    message = sent.json()["data"]

    inbox = client.get("/api/chat/conversations", headers=auth(bob)).json()["conversations"]
    assert inbox[0]["unread_count"] == 1
    assert inbox[0]["other_user"]["name"] == "Alice"

    page = client.get(f"/api/chat/{inbox[0]['_id']}", headers=auth(bob)).json()
    assert [m["content"] for m in page["messages"]] == ["hey"]

    assert client.put(f"/api/chat/{message['_id']}/read", headers=auth(alice)).status_code == 403
    assert client.put(f"/api/chat/{message['_id']}/read", headers=auth(bob)).status_code == 200
    inbox = client.get("/api/chat/conversations", headers=auth(bob)).json()["conversations"]
    assert inbox[0]["unread_count"] == 0


@pytest.mark.parametrize("body", [{}, {"recipient_id": "x"}, {"content": "hi"}, {"recipient_id": "x", "content": "  "}])
def test_send_validation_is_400(client, alice, body):
    assert client.post("/api/chat/send", json=body, headers=auth(alice)).status_code == 400


def test_send_to_unknown_user_is_404(client, alice):
    response = client.post("/api/chat/send", json={"recipient_id": "0123456789abcdef01234567", "content": "hi"}, headers=auth(alice))
    assert response.status_code == 404


def test_rate_limit_is_429(client, alice, bob):
    for i in range(50):
        ok = client.post("/api/chat/send", json={"recipient_id": bob, "content": f"m{i}"}, headers=auth(alice))
        assert ok.status_code == 201
    refused = client.post("/api/chat/send", json={"recipient_id": bob, "content": "one more"}, headers=auth(alice))
    assert refused.status_code == 429


def test_certification_fetch(client, http):
    assert client.get("/api/certifications/fetch", params={"platform": "aws"}).status_code == 400
    assert client.get("/api/certifications/fetch", params={"platform": "edx", "id": "1"}).status_code == 400

    response = client.get("/api/certifications/fetch", params={"platform": "aws", "id": "ABC-123"})
    assert response.status_code == 200
    assert response.json()["platform"] == "aws"
    assert http.calls == []


def test_skill_search(client, http):
    assert client.get("/api/skills/search").status_code == 400

    skills = client.get("/api/skills/search", params={"q": "react"}).json()["skills"]
    assert skills[0]["name"] == "React"
    assert http.calls[0]["params"]["text"] == "react"


def test_register_login_and_me(client):
    registered = client.post("/api/auth/register", json={
        "name": "Dana", "email": "dana@university.edu", "password": "secret123", "role": "student",
    })
    assert registered.status_code == 201
    assert registered.headers["set-cookie"].startswith("token=")

    assert client.post("/api/auth/register", json={
        "name": "Dana", "email": "dana@university.edu", "password": "secret123",
    }).status_code == 400
    assert client.post("/api/auth/register", json={
        "name": "Root", "email": "root@university.edu", "password": "secret123", "role": "admin",
    }).status_code == 400

    login = client.post("/api/auth/login", json={"email": "dana@university.edu", "password": "secret123"})
    assert login.status_code == 200
    me = client.get("/api/auth/me", headers={"Authorization": f"Bearer {login.json()['token']}"})
    assert me.json()["user"]["name"] == "Dana"

    assert client.post("/api/auth/login", json={"email": "dana@university.edu", "password": "nope"}).status_code == 401


def test_only_admin_deletes_users(client, alice, bob):
    assert client.delete(f"/api/users/{bob}", headers=auth(alice)).status_code == 403
    assert client.delete(f"/api/users/{bob}", headers=auth(alice, role="admin")).status_code == 200
    assert client.get(f"/api/users/{bob}").status_code == 404


def test_post_and_event_routes(client, alice, carol):
    created = client.post("/api/posts", json={"title": "Hello", "content": "World"}, headers=auth(alice))
    assert created.status_code == 201
    post_id = created.json()["post"]["_id"]
    liked = client.post(f"/api/posts/{post_id}/like", headers=auth(carol))
    assert liked.json()["liked"] is True

    event = client.post("/api/events", json={
        "title": "Career fair", "description": "Meet employers", "date": "2030-04-01T10:00:00Z",
        "location": "Curry", "max_participants": 1,
    }, headers=auth(carol, role="professor"))
    assert event.status_code == 201
    event_id = event.json()["event"]["_id"]
    assert client.post(f"/api/events/{event_id}/join", headers=auth(alice)).status_code == 200
    assert client.post(f"/api/events/{event_id}/join", headers=auth(carol, role="professor")).status_code == 400


def test_job_comment_routes(client, alice, bob):
    assert client.post("/api/job-comments/job-42", json={"text": "hi"}).status_code == 401
    assert client.post("/api/job-comments/job-42", json={"text": ""}, headers=auth(alice)).status_code == 400
    assert client.post("/api/job-comments/job-42", json={"text": "ok", "rating": 9}, headers=auth(alice)).status_code == 400

    created = client.post("/api/job-comments/job-42", json={"text": "Solid mentorship", "rating": 4}, headers=auth(alice))
    assert created.status_code == 201
    comment = created.json()["comment"]
    assert comment["user"]["name"] == "Alice"

    listed = client.get("/api/job-comments/job-42").json()["comments"]
    assert [c["_id"] for c in listed] == [comment["_id"]]

    assert client.delete(f"/api/job-comments/{comment['_id']}", headers=auth(bob)).status_code == 403
    assert client.delete(f"/api/job-comments/{comment['_id']}", headers=auth(alice)).status_code == 200
    assert client.delete(f"/api/job-comments/{comment['_id']}", headers=auth(alice)).status_code == 404


def test_token_claims_are_validated(client, alice):
    unknown_role = create_access_token(alice, "alice@university.edu", "superuser")
    no_subject = create_access_token("", "alice@university.edu", "student")

    for token in (unknown_role, no_subject):
        response = client.get("/api/chat/conversations", headers={"Authorization": f"Bearer {token}"})
        assert response.status_code == 401
