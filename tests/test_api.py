import pytest
from fastapi.testclient import TestClient

from wayfarer.core.config import Settings
from wayfarer.di import container as container_module
from wayfarer.di.container import DIContainer, reset_container
from wayfarer.main import create_application

PASSWORD = "correct-horse-battery"


@pytest.fixture
def client(monkeypatch):
    monkeypatch.setenv("STORAGE_BACKEND", "memory")
    reset_container()
    monkeypatch.setattr(container_module, "_container", DIContainer(Settings()))
    with TestClient(create_application()) as test_client:
        yield test_client
    reset_container()


def _register(client, email="api@example.com"):
    return client.post("/api/v1/users/register", json={
        "email": email, "password": PASSWORD, "name": "Api Tester",
    })


def test_health_and_root(client):
    assert client.get("/health").json() == {"status": "healthy"}
    assert client.get("/").json()["status"] == "running"


def test_register_login_and_me(client):
    registered = _register(client)
    assert registered.status_code == 201
    assert "hashed_password" not in registered.json()

    login = client.post("/api/v1/users/login", json={"email": "api@example.com", "password": PASSWORD})
    assert login.status_code == 200
    token = login.json()["token"]

    me = client.get("/api/v1/users/me", headers={"Authorization": f"Bearer {token}"})
    assert me.status_code == 200
    assert me.json()["id"] == registered.json()["id"]
    assert me.json()["role"] == "visitor"

    logout = client.post("/api/v1/users/logout", headers={"Authorization": f"Bearer {token}"})
    assert logout.status_code == 204
    assert client.get("/api/v1/users/me", headers={"Authorization": f"Bearer {token}"}).status_code == 404


def test_me_requires_bearer_token(client):
    response = client.get("/api/v1/users/me")

    assert response.status_code == 403
    assert response.json() == {"code": "PERMISSION_REQUIRED", "message": "Bearer token is required"}


def test_bad_login_is_a_validation_error(client):
    _register(client)

    response = client.post("/api/v1/users/login", json={"email": "api@example.com", "password": "nope-nope"})

    assert response.status_code == 400
    assert response.json() == {"code": "VALIDATION_ERROR", "message": "Invalid email or password"}


def test_duplicate_registration_conflicts(client):
    _register(client)

    response = _register(client, email="API@example.com")

    assert response.status_code == 409
    assert response.json()["code"] == "CONFLICT"


def test_request_validation_error_body(client):
    response = client.post("/api/v1/users/register", json={
        "email": "short@example.com", "password": "short", "name": "Shorty",
    })

    assert response.status_code == 400
    body = response.json()
    assert body["code"] == "VALIDATION_ERROR"
    assert body["message"].startswith("password:")


def test_writes_require_acting_user(client):
    response = client.post("/api/v1/regions", json={"name": "Nowhere"})

    assert response.status_code == 403
    assert response.json() == {"code": "PERMISSION_REQUIRED", "message": "X-User-Id header is required"}


def test_visitor_cannot_author_regions(client):
    visitor_id = _register(client).json()["id"]

    response = client.post("/api/v1/regions", json={"name": "Nowhere"}, headers={"X-User-Id": visitor_id})

    assert response.status_code == 403
    assert response.json()["message"] == "Editor or admin role required"


def test_unknown_region_is_not_found(client):
    response = client.get("/api/v1/regions/does-not-exist")

    assert response.status_code == 404
    assert response.json() == {"code": "NOT_FOUND", "message": "Region 'does-not-exist' not found"}


def test_anonymous_region_listing_is_empty_page(client):
    response = client.get("/api/v1/regions")

    assert response.status_code == 200
    body = response.json()
    assert body["items"] == []
    assert body["total_count"] == 0
    assert body["page"] == 1


def test_profile_and_password_routes(client):
    user_id = _register(client).json()["id"]
    token = client.post("/api/v1/users/login", json={
        "email": "api@example.com", "password": PASSWORD,
    }).json()["token"]
    auth = {"Authorization": f"Bearer {token}"}

    patched = client.patch("/api/v1/users/me", json={"bio": "Loves maps"}, headers=auth)
    profile = client.get(f"/api/v1/users/{user_id}/profile")
    wrong = client.put("/api/v1/users/me/password", json={
        "current_password": "not-it", "new_password": "another-secret-1",
    }, headers=auth)
    changed = client.put("/api/v1/users/me/password", json={
        "current_password": PASSWORD, "new_password": "another-secret-1",
    }, headers=auth)

    assert patched.json()["bio"] == "Loves maps"
    assert profile.json()["name"] == "Api Tester"
    assert wrong.status_code == 400
    assert wrong.json()["message"] == "Current password is incorrect"
    assert changed.status_code == 204


def test_password_reset_routes_do_not_reveal_accounts(client):
    _register(client)

    known = client.post("/api/v1/users/password-reset", json={"email": "api@example.com"})
    unknown = client.post("/api/v1/users/password-reset", json={"email": "ghost@example.com"})
    bad_token = client.post("/api/v1/users/password-reset/confirm", json={
        "token": "nope", "new_password": "another-secret-1",
    })

    assert known.status_code == unknown.status_code == 202
    assert bad_token.status_code == 400
    assert bad_token.json()["message"] == "Invalid or expired reset token"
