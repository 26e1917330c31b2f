"""Integration tests for authentication, profile and the auth provider proxy."""

import uuid

import httpx

from app.models import User
from app.routes import auth as auth_routes


def test_me_returns_current_user(client, customer, auth_headers):
    """Test a valid token resolves the local user."""
    response = client.get("/auth/me", headers=auth_headers(customer))

    assert response.status_code == 200
    body = response.json()
    assert body["id"] == customer.id
    assert body["role"] == "user"


def test_first_request_creates_user(client, db_session, token_factory):
    """Test an unseen subject is provisioned from its claims."""
    user_id = str(uuid.uuid4())
    token = token_factory(user_id, "new@example.com", user_metadata={"name": "New Person", "role": "business"})

    response = client.get("/auth/me", headers={"Authorization": f"Bearer {token}"})

    assert response.status_code == 200
    user = db_session.query(User).filter(User.id == user_id).first()
    assert user.email == "new@example.com"
    assert user.full_name == "New Person"
    assert user.role == "business"


def test_admin_role_cannot_be_self_assigned(client, db_session, token_factory):
    """Test sign-up metadata cannot grant admin."""
    user_id = str(uuid.uuid4())
    token = token_factory(user_id, "sneaky@example.com", user_metadata={"role": "admin"})

    response = client.get("/auth/me", headers={"Authorization": f"Bearer {token}"})

    assert response.status_code == 200
    assert response.json()["role"] == "user"


def test_missing_token_is_rejected(client):
    """Test anonymous calls to authenticated procedures fail."""
    response = client.get("/auth/me")

    assert response.status_code in (401, 403)
    assert response.json()["code"] in ("UNAUTHORIZED", "FORBIDDEN")


def test_expired_token_is_unauthorized(client, customer, token_factory):
    """Test expired tokens return 401 and flag the expiry."""
    token = token_factory(customer.id, customer.email, expires_in=-60)

    response = client.get("/auth/me", headers={"Authorization": f"Bearer {token}"})

    assert response.status_code == 401
    assert response.json()["code"] == "UNAUTHORIZED"
    assert response.headers.get("X-Token-Expired") == "true"


def test_token_with_wrong_secret_is_unauthorized(client, customer, token_factory):
    """Test tokens not signed with the project secret are refused."""
    token = token_factory(customer.id, customer.email, secret="someone-elses-secret")

    response = client.get("/auth/me", headers={"Authorization": f"Bearer {token}"})

    assert response.status_code == 401


def test_malformed_token_is_unauthorized(client):
    """Test a bearer value that is not a JWT is refused."""
    response = client.get("/auth/me", headers={"Authorization": "Bearer not-a-jwt"})

    assert response.status_code == 401


def test_suspended_user_is_forbidden(client, create_user, auth_headers):
    """Test suspended accounts cannot call procedures."""
    suspended = create_user(status="suspended")

    response = client.get("/auth/me", headers=auth_headers(suspended))

    assert response.status_code == 403
    assert response.json()["code"] == "FORBIDDEN"


def test_inactive_user_is_forbidden(client, create_user, auth_headers):
    """Test deactivated accounts cannot call procedures."""
    inactive = create_user(status="inactive")

    response = client.get("/auth/me", headers=auth_headers(inactive))

    assert response.status_code == 403
    assert response.json()["detail"] == "Your account is inactive"


def test_update_profile(client, customer, auth_headers):
    """Test the caller can update name, phone and avatar."""
    response = client.patch(
        "/auth/me",
        json={"full_name": "Casey C.", "phone": "+27 82 555 0101", "avatar_url": "https://cdn.example.com/a.png"},
        headers=auth_headers(customer),
    )

    assert response.status_code == 200
    body = response.json()
    assert body["full_name"] == "Casey C."
    assert body["phone"] == "+27825550101"
    assert body["avatar_url"] == "https://cdn.example.com/a.png"


def test_update_profile_rejects_bad_phone(client, customer, auth_headers):
    """Test invalid phone numbers are a validation error."""
    response = client.patch("/auth/me", json={"phone": "123"}, headers=auth_headers(customer))

    assert response.status_code == 422
    assert response.json()["code"] == "BAD_REQUEST"


def test_signin_proxies_to_provider(client, monkeypatch):
    """Test sign-in forwards credentials and returns the session."""
    calls = []

    async def fake_provider(path, payload):
        calls.append((path, payload))
        return httpx.Response(200, json={"access_token": "abc", "refresh_token": "def"})

    monkeypatch.setattr(auth_routes, "call_auth_provider", fake_provider)

    response = client.post("/auth/signin", json={"email": "a@example.com", "password": "secret123"})

    assert response.status_code == 200
    assert response.json()["access_token"] == "abc"
    assert calls == [
        ("/auth/v1/token?grant_type=password", {"email": "a@example.com", "password": "secret123"})
    ]


def test_signin_with_bad_credentials(client, monkeypatch):
    """Test provider rejections become 401."""

    async def fake_provider(path, payload):
        return httpx.Response(400, json={"error_description": "Invalid login credentials"})

    monkeypatch.setattr(auth_routes, "call_auth_provider", fake_provider)

    response = client.post("/auth/signin", json={"email": "a@example.com", "password": "wrong"})

    assert response.status_code == 401
    assert response.json()["detail"] == "Invalid email or password"


def test_signup_passes_role_and_name(client, monkeypatch):
    """Test sign-up forwards profile metadata to the provider."""
    calls = []

    async def fake_provider(path, payload):
        calls.append((path, payload))
        return httpx.Response(200, json={"user": {"id": "u1"}})

    monkeypatch.setattr(auth_routes, "call_auth_provider", fake_provider)

    response = client.post(
        "/auth/signup",
        json={"email": "owner@example.com", "password": "longenough", "full_name": "Olive", "role": "business"},
    )

    assert response.status_code == 200
    path, payload = calls[0]
    assert path == "/auth/v1/signup"
    assert payload["data"] == {"name": "Olive", "role": "business"}


def test_signup_rejects_admin_role(client):
    """Test only user and business roles may sign up."""
    response = client.post(
        "/auth/signup", json={"email": "x@example.com", "password": "longenough", "role": "admin"}
    )

    assert response.status_code == 422


def test_signup_surfaces_provider_error(client, monkeypatch):
    """Test provider messages are passed back as 400."""

    async def fake_provider(path, payload):
        return httpx.Response(422, json={"msg": "User already registered"})

    monkeypatch.setattr(auth_routes, "call_auth_provider", fake_provider)

    response = client.post("/auth/signup", json={"email": "x@example.com", "password": "longenough"})

    assert response.status_code == 400
    assert response.json()["detail"] == "User already registered"


def test_unconfigured_provider_is_unavailable(client, monkeypatch):
    """Test missing provider settings return 503."""
    monkeypatch.setattr(auth_routes, "SUPABASE_URL", None)

    response = client.post("/auth/signin", json={"email": "a@example.com", "password": "secret123"})

    assert response.status_code == 503


def test_signout_revokes_provider_session(client, customer, auth_headers, monkeypatch):
    """Test sign-out forwards the caller's own token to the provider."""
    calls = []

    async def fake_provider(path, payload, access_token=None):
        calls.append((path, access_token))
        return httpx.Response(204)

    monkeypatch.setattr(auth_routes, "call_auth_provider", fake_provider)
    headers = auth_headers(customer)

    response = client.post("/auth/signout", headers=headers)

    assert response.status_code == 200
    assert response.json() == {"success": True}
    assert calls == [("/auth/v1/logout", headers["Authorization"].removeprefix("Bearer "))]


def test_signout_with_ended_session_succeeds(client, customer, auth_headers, monkeypatch):
    """Test a session the provider already dropped still signs out."""

    async def fake_provider(path, payload, access_token=None):
        return httpx.Response(401, json={"msg": "invalid JWT"})

    monkeypatch.setattr(auth_routes, "call_auth_provider", fake_provider)

    response = client.post("/auth/signout", headers=auth_headers(customer))

    assert response.status_code == 200


def test_signout_provider_outage(client, customer, auth_headers, monkeypatch):
    """Test provider failures during sign-out are 502."""

    async def fake_provider(path, payload, access_token=None):
        return httpx.Response(503)

    monkeypatch.setattr(auth_routes, "call_auth_provider", fake_provider)

    response = client.post("/auth/signout", headers=auth_headers(customer))

    assert response.status_code == 502


def test_signout_requires_authentication(client):
    """Test anonymous callers cannot sign out."""
    response = client.post("/auth/signout")

    assert response.status_code in (401, 403)
