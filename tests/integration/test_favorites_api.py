"""Integration tests for a customer's saved businesses."""

from app.models import Favorite


def test_add_and_list_favorites(client, customer, business, make_business, owner, auth_headers):
    """Test saved businesses are listed newest first with their details."""
    headers = auth_headers(customer)
    second = make_business(owner, name="Moonlight Spa")

    first_response = client.post("/favorites", json={"businessId": business.id}, headers=headers)
    assert first_response.status_code == 201
    assert first_response.json()["business"]["name"] == "Sunrise Salon"
    client.post("/favorites", json={"businessId": second.id}, headers=headers)

    favorites = client.get("/favorites", headers=headers).json()

    assert {f["business_id"] for f in favorites} == {business.id, second.id}
    assert all(f["business"]["status"] == "approved" for f in favorites)


def test_favorite_twice_conflicts(client, db_session, customer, business, auth_headers):
    """Test a business is saved at most once per user."""
    headers = auth_headers(customer)

    assert client.post("/favorites", json={"businessId": business.id}, headers=headers).status_code == 201
    response = client.post("/favorites", json={"businessId": business.id}, headers=headers)

    assert response.status_code == 409
    assert db_session.query(Favorite).count() == 1


def test_cannot_favorite_unlisted_business(client, customer, owner, make_business, auth_headers):
    """Test only approved, active businesses can be saved."""
    pending = make_business(owner, name="Not Yet", status="pending")
    headers = auth_headers(customer)

    assert client.post("/favorites", json={"businessId": pending.id}, headers=headers).status_code == 404
    assert client.post("/favorites", json={"businessId": "missing"}, headers=headers).status_code == 404


def test_suspended_business_drops_out_of_favorites(client, db_session, customer, business, auth_headers):
    """Test businesses that stop being listed are hidden from the favorites list."""
    headers = auth_headers(customer)
    client.post("/favorites", json={"businessId": business.id}, headers=headers)

    business.status = "suspended"
    db_session.commit()

    assert client.get("/favorites", headers=headers).json() == []


def test_check_and_remove_favorite(client, customer, business, auth_headers):
    """Test the favorite flag follows add and remove."""
    headers = auth_headers(customer)
    url = f"/favorites/{business.id}"

    assert client.get(url, headers=headers).json() == {"business_id": business.id, "is_favorite": False}

    client.post("/favorites", json={"businessId": business.id}, headers=headers)
    assert client.get(url, headers=headers).json()["is_favorite"] is True

    assert client.delete(url, headers=headers).status_code == 200
    assert client.get(url, headers=headers).json()["is_favorite"] is False
    assert client.delete(url, headers=headers).status_code == 404


def test_favorites_are_per_user(client, customer, create_user, business, auth_headers):
    """Test one user's favorites are invisible to another."""
    client.post("/favorites", json={"businessId": business.id}, headers=auth_headers(customer))
    other = create_user()

    assert client.get("/favorites", headers=auth_headers(other)).json() == []
    assert client.get(f"/favorites/{business.id}", headers=auth_headers(other)).json()["is_favorite"] is False


def test_favorites_require_authentication(client):
    """Test anonymous callers have no favorites."""
    assert client.get("/favorites").status_code in (401, 403)
