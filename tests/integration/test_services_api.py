"""Integration tests for the service catalogue."""

from app.models import ServiceCategory


def test_owner_creates_service(client, business, owner, auth_headers, db_session):
    """Test owners add priced, timed services to their business."""
    category = ServiceCategory(name="Haircuts", slug="haircuts")
    db_session.add(category)
    db_session.commit()

    response = client.post(
        "/services",
        json={
            "businessId": business.id,
            "name": "  Beard Trim ",
            "price": "150.50",
            "duration": 30,
            "categoryId": category.id,
        },
        headers=auth_headers(owner),
    )

    assert response.status_code == 201
    body = response.json()
    assert body["name"] == "Beard Trim"
    assert body["price"] == 150.5
    assert body["duration"] == 30
    assert body["category_id"] == category.id
    assert body["is_active"] is True


def test_create_service_validates_price_and_duration(client, business, owner, auth_headers):
    """Test non-positive prices and durations are rejected."""
    headers = auth_headers(owner)
    base = {"businessId": business.id, "name": "Free"}

    assert client.post("/services", json={**base, "price": "0", "duration": 30}, headers=headers).status_code == 422
    assert client.post("/services", json={**base, "price": "10", "duration": 0}, headers=headers).status_code == 422


def test_create_service_unknown_category(client, business, owner, auth_headers):
    """Test service categories must exist."""
    response = client.post(
        "/services",
        json={"businessId": business.id, "name": "Trim", "price": "50", "duration": 15, "categoryId": "missing"},
        headers=auth_headers(owner),
    )

    assert response.status_code == 400


def test_create_service_for_someone_elses_business(client, business, create_user, auth_headers):
    """Test owners cannot add services to businesses they do not own."""
    other_owner = create_user(role="business")

    response = client.post(
        "/services",
        json={"businessId": business.id, "name": "Trim", "price": "50", "duration": 15},
        headers=auth_headers(other_owner),
    )

    assert response.status_code == 403


def test_customers_cannot_create_services(client, business, customer, auth_headers):
    """Test plain users are not business owners."""
    response = client.post(
        "/services",
        json={"businessId": business.id, "name": "Trim", "price": "50", "duration": 15},
        headers=auth_headers(customer),
    )

    assert response.status_code == 403


def test_list_services_hides_inactive_from_public(client, business, service, make_service, owner, auth_headers):
    """Test inactive services are visible to the owner only."""
    make_service(business, name="Archived", is_active=False)

    public = client.get("/services", params={"businessId": business.id}).json()
    assert [s["name"] for s in public] == ["Haircut"]

    owned = client.get("/services", params={"businessId": business.id}, headers=auth_headers(owner)).json()
    assert [s["name"] for s in owned] == ["Archived", "Haircut"]


def test_get_service(client, service):
    """Test a single service can be fetched by id."""
    assert client.get(f"/services/{service.id}").json()["name"] == "Haircut"
    assert client.get("/services/missing").status_code == 404


def test_update_service(client, service, owner, auth_headers):
    """Test partial updates leave unspecified fields untouched."""
    response = client.patch(
        f"/services/{service.id}", json={"price": "120.00", "isActive": False}, headers=auth_headers(owner)
    )

    assert response.status_code == 200
    body = response.json()
    assert body["price"] == 120.0
    assert body["is_active"] is False
    assert body["duration"] == 60


def test_delete_service(client, service, owner, create_user, auth_headers):
    """Test only the owner deletes a service."""
    other_owner = create_user(role="business")
    assert client.delete(f"/services/{service.id}", headers=auth_headers(other_owner)).status_code == 403

    assert client.delete(f"/services/{service.id}", headers=auth_headers(owner)).status_code == 200
    assert client.get(f"/services/{service.id}").status_code == 404


def test_service_categories(client, db_session):
    """Test service categories are listed alphabetically."""
    db_session.add_all([ServiceCategory(name="Nails", slug="nails"), ServiceCategory(name="Massage", slug="massage")])
    db_session.commit()

    response = client.get("/services/categories")

    assert [c["slug"] for c in response.json()] == ["massage", "nails"]
