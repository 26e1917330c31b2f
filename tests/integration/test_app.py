"""Integration tests for app-level routes, middleware and the realtime feed."""

import pytest
from starlette.websockets import WebSocketDisconnect


def test_health(client):
    """Test the health check."""
    response = client.get("/health")

    assert response.status_code == 200
    assert response.json() == {"status": "healthy"}


def test_security_headers_applied(client):
    """Test API responses carry the security headers."""
    response = client.get("/")

    assert response.headers["X-Content-Type-Options"] == "nosniff"
    assert response.headers["X-Frame-Options"] == "SAMEORIGIN"
    assert "default-src 'none'" in response.headers["Content-Security-Policy"]
    assert response.headers["Cache-Control"] == "no-store, no-cache, must-revalidate"


def test_service_worker_served(client):
    """Test the offline service worker is served from the site root."""
    response = client.get("/service-worker.js")

    assert response.status_code == 200
    assert response.headers["content-type"].startswith("application/javascript")
    assert response.headers["Service-Worker-Allowed"] == "/"
    assert response.headers["Cache-Control"] == "no-cache"
    assert "workbox" in response.text


def test_unknown_route_uses_error_body(client):
    """Test framework 404s share the typed error body."""
    response = client.get("/does-not-exist")

    assert response.status_code == 404
    assert response.json()["code"] == "NOT_FOUND"


def test_websocket_rejects_invalid_token(client):
    """Test sockets without a valid token are closed with a policy violation."""
    with pytest.raises(WebSocketDisconnect) as exc_info:
        with client.websocket_connect("/ws?token=not-a-jwt") as websocket:
            websocket.receive_json()

    assert exc_info.value.code == 1008


@pytest.mark.parametrize("status", ["suspended", "inactive"])
def test_websocket_rejects_disabled_accounts(client, create_user, token_factory, status):
    """Test accounts that may not use the API cannot subscribe to the feed."""
    user = create_user(status=status)
    token = token_factory(user.id, user.email)

    with pytest.raises(WebSocketDisconnect) as exc_info:
        with client.websocket_connect(f"/ws?token={token}") as websocket:
            websocket.receive_json()

    assert exc_info.value.code == 1008


def test_websocket_receives_new_messages(client, customer, owner, auth_headers, token_factory):
    """Test a connected user is pushed messages sent to them and the matching notification."""
    token = token_factory(owner.id, owner.email)

    with client.websocket_connect(f"/ws?token={token}") as websocket:
        response = client.post(
            "/messages", json={"receiverId": owner.id, "content": "Hello there"}, headers=auth_headers(customer)
        )
        assert response.status_code == 201

        message_event = websocket.receive_json()
        assert message_event["type"] == "message"
        assert message_event["data"]["content"] == "Hello there"

        notification_event = websocket.receive_json()
        assert notification_event["type"] == "notification"
        assert notification_event["data"]["title"] == "New Message"
