"""Integration tests for the business directory, working hours and availability."""

from datetime import datetime, time, timedelta

from app.models import Appointment, Review, User


def test_create_business_promotes_customer(client, db_session, customer, auth_headers, make_category):
    """Test registering a business makes the caller an owner and awaits approval."""
    category = make_category()

    response = client.post(
        "/businesses",
        json={
            "name": "Fresh Fades",
            "description": "Barbershop",
            "city": "Durban",
            "phone": "+27 31 555 0101",
            "categoryIds": [category.id],
        },
        headers=auth_headers(customer),
    )

    assert response.status_code == 201
    body = response.json()
    assert body["status"] == "pending"
    assert body["owner_id"] == customer.id
    assert body["categories"][0]["slug"] == "hair-beauty"

    db_session.expire_all()
    assert db_session.get(User, customer.id).role == "business"


def test_create_business_rejects_unknown_category(client, customer, auth_headers):
    """Test category ids must exist."""
    response = client.post(
        "/businesses",
        json={"name": "Fresh Fades", "description": "Barbershop", "categoryIds": ["missing"]},
        headers=auth_headers(customer),
    )

    assert response.status_code == 400


def test_create_business_requires_description(client, customer, auth_headers):
    """Test the description is mandatory."""
    response = client.post("/businesses", json={"name": "Fresh Fades"}, headers=auth_headers(customer))

    assert response.status_code == 422


def test_pending_business_hidden_from_public(client, owner, make_business, auth_headers):
    """Test unapproved businesses are only visible to their owner."""
    pending = make_business(owner, status="pending")

    assert client.get(f"/businesses/{pending.id}").status_code == 404

    response = client.get(f"/businesses/{pending.id}", headers=auth_headers(owner))
    assert response.status_code == 200
    assert response.json()["business"]["status"] == "pending"


def test_public_details_include_services_hours_and_rating(
    client, db_session, business, service, make_service, make_working_hours, customer
):
    """Test the business page aggregates its listing data."""
    make_service(business, name="Retired", is_active=False)
    make_working_hours(business, 0)
    db_session.add(Review(business_id=business.id, user_id=customer.id, rating=4))
    db_session.commit()

    response = client.get(f"/businesses/{business.id}")

    assert response.status_code == 200
    body = response.json()
    assert body["business"]["average_rating"] == 4.0
    assert body["business"]["review_count"] == 1
    assert [s["name"] for s in body["services"]] == ["Haircut"]
    assert body["services"][0]["price"] == 100.0
    assert body["working_hours"][0]["open_time"] == "09:00"


def test_search_lists_only_approved_active(client, owner, make_business, make_category):
    """Test search hides pending, rejected and inactive businesses and applies filters."""
    category = make_category()
    listed = make_business(owner, name="Alpha Salon", city="Cape Town")
    listed.categories = [category]
    make_business(owner, name="Beta Spa", city="Johannesburg")
    make_business(owner, name="Gamma Pending", status="pending")
    make_business(owner, name="Delta Rejected", status="rejected")
    make_business(owner, name="Epsilon Closed", is_active=False)

    response = client.get("/businesses/search")
    assert response.status_code == 200
    body = response.json()
    assert body["total"] == 2
    assert [b["name"] for b in body["items"]] == ["Alpha Salon", "Beta Spa"]

    assert client.get("/businesses/search", params={"q": "spa"}).json()["total"] == 1
    assert client.get("/businesses/search", params={"city": "cape"}).json()["items"][0]["name"] == "Alpha Salon"
    by_category = client.get("/businesses/search", params={"category": "hair-beauty"}).json()
    assert [b["id"] for b in by_category["items"]] == [listed.id]


def test_search_pagination(client, owner, make_business):
    """Test limit and offset page through results."""
    for name in ("A", "B", "C"):
        make_business(owner, name=name)

    body = client.get("/businesses/search", params={"limit": 2, "offset": 2}).json()

    assert body["total"] == 3
    assert [b["name"] for b in body["items"]] == ["C"]


def test_update_business_owner_only(client, business, owner, create_user, auth_headers):
    """Test only the owner (or an admin) can edit a business."""
    other_owner = create_user(role="business")

    forbidden = client.patch(f"/businesses/{business.id}", json={"name": "Hijack"}, headers=auth_headers(other_owner))
    assert forbidden.status_code == 403

    response = client.patch(
        f"/businesses/{business.id}", json={"name": "Sunset Salon", "isActive": False}, headers=auth_headers(owner)
    )
    assert response.status_code == 200
    assert response.json()["name"] == "Sunset Salon"
    assert response.json()["is_active"] is False


def test_customer_cannot_use_owner_procedures(client, business, customer, auth_headers):
    """Test business-owner procedures reject plain users."""
    response = client.get("/businesses/mine", headers=auth_headers(customer))

    assert response.status_code == 403


def test_my_businesses(client, owner, business, make_business, auth_headers):
    """Test owners see all of their businesses, whatever the status."""
    make_business(owner, name="Second", status="pending")

    response = client.get("/businesses/mine", headers=auth_headers(owner))

    assert response.status_code == 200
    assert {b["name"] for b in response.json()} == {"Sunrise Salon", "Second"}


def test_set_and_get_working_hours(client, business, owner, auth_headers):
    """Test working hours are upserted per day and publicly readable."""
    payload = {
        "hours": [
            {"dayOfWeek": 0, "openTime": "09:00", "closeTime": "17:00", "breaks": [{"start": "12:00", "end": "13:00"}]},
            {"dayOfWeek": 6, "isOpen": False},
        ]
    }

    response = client.put(f"/businesses/{business.id}/working-hours", json=payload, headers=auth_headers(owner))
    assert response.status_code == 200

    updated = client.put(
        f"/businesses/{business.id}/working-hours",
        json={"hours": [{"dayOfWeek": 0, "openTime": "08:00", "closeTime": "16:00"}]},
        headers=auth_headers(owner),
    )
    assert updated.status_code == 200

    hours = client.get(f"/businesses/{business.id}/working-hours").json()
    assert len(hours) == 2
    monday = hours[0]
    assert monday["day_of_week"] == 0
    assert monday["open_time"] == "08:00"
    assert monday["breaks"] == []
    assert hours[1]["is_open"] is False


def test_working_hours_owner_only(client, business, create_user, auth_headers):
    """Test other owners cannot change someone else's hours."""
    other_owner = create_user(role="business")

    response = client.put(
        f"/businesses/{business.id}/working-hours",
        json={"hours": [{"dayOfWeek": 0, "openTime": "09:00", "closeTime": "17:00"}]},
        headers=auth_headers(other_owner),
    )

    assert response.status_code == 403


def test_blocked_times_crud(client, business, owner, auth_headers, booking_day):
    """Test owners can add, list and remove blocked times."""
    start = datetime.combine(booking_day, time(9, 0))
    response = client.post(
        f"/businesses/{business.id}/blocked-times",
        json={"startTime": start.isoformat(), "endTime": (start + timedelta(hours=2)).isoformat(), "reason": "Training"},
        headers=auth_headers(owner),
    )
    assert response.status_code == 201
    blocked_id = response.json()["id"]

    listed = client.get(f"/businesses/{business.id}/blocked-times", headers=auth_headers(owner)).json()
    assert [b["id"] for b in listed] == [blocked_id]

    deleted = client.delete(f"/businesses/{business.id}/blocked-times/{blocked_id}", headers=auth_headers(owner))
    assert deleted.status_code == 200
    assert client.get(f"/businesses/{business.id}/blocked-times", headers=auth_headers(owner)).json() == []


def test_blocked_time_end_must_follow_start(client, business, owner, auth_headers, booking_day):
    """Test inverted blocked intervals are rejected."""
    start = datetime.combine(booking_day, time(9, 0))
    response = client.post(
        f"/businesses/{business.id}/blocked-times",
        json={"startTime": start.isoformat(), "endTime": start.isoformat()},
        headers=auth_headers(owner),
    )

    assert response.status_code == 422


def test_available_slots(
    client, db_session, business, service, customer, make_working_hours, booking_day, auth_headers, owner
):
    """Test slots respect hours, blocked times and active bookings."""
    make_working_hours(business, 0, open_time="09:00", close_time="12:00")

    url = f"/businesses/{business.id}/slots"
    params = {"serviceId": service.id, "date": booking_day.isoformat()}
    slots = client.get(url, params=params).json()["slots"]
    assert len(slots) == 9
    assert slots[0]["start"] == f"{booking_day.isoformat()}T09:00:00"

    day_start = datetime.combine(booking_day, time(9, 0))
    client.post(
        f"/businesses/{business.id}/blocked-times",
        json={"startTime": day_start.isoformat(), "endTime": (day_start + timedelta(minutes=30)).isoformat()},
        headers=auth_headers(owner),
    )
    db_session.add(
        Appointment(
            service_id=service.id,
            business_id=business.id,
            user_id=customer.id,
            start_time=day_start + timedelta(hours=2),
            end_time=day_start + timedelta(hours=3),
            status="confirmed",
        )
    )
    db_session.add(
        Appointment(
            service_id=service.id,
            business_id=business.id,
            user_id=customer.id,
            start_time=day_start + timedelta(hours=1),
            end_time=day_start + timedelta(hours=2),
            status="cancelled",
        )
    )
    db_session.commit()

    starts = [s["start"][11:16] for s in client.get(url, params=params).json()["slots"]]
    assert starts == ["09:30", "09:45", "10:00"]


def test_slots_for_closed_day_are_empty(client, business, service, booking_day):
    """Test days without working hours have no slots."""
    response = client.get(
        f"/businesses/{business.id}/slots", params={"serviceId": service.id, "date": booking_day.isoformat()}
    )

    assert response.status_code == 200
    assert response.json()["slots"] == []


def test_slots_for_foreign_service_not_found(client, business, owner, make_business, make_service, booking_day):
    """Test the service must belong to the business."""
    other_service = make_service(make_business(owner, name="Other"))

    response = client.get(
        f"/businesses/{business.id}/slots", params={"serviceId": other_service.id, "date": booking_day.isoformat()}
    )

    assert response.status_code == 404


def test_business_bookings_and_analytics(
    client, db_session, business, service, make_service, customer, owner, auth_headers, booking_day
):
    """Test owners see their bookings and revenue per service."""
    other = make_service(business, name="Colour", price="250.00")
    start = datetime.combine(booking_day, time(9, 0))
    db_session.add_all(
        [
            Appointment(
                service_id=service.id, business_id=business.id, user_id=customer.id,
                start_time=start, end_time=start + timedelta(hours=1), status="confirmed", is_paid=True,
            ),
            Appointment(
                service_id=service.id, business_id=business.id, user_id=customer.id,
                start_time=start + timedelta(days=1), end_time=start + timedelta(days=1, hours=1), status="pending",
            ),
            Appointment(
                service_id=other.id, business_id=business.id, user_id=customer.id,
                start_time=start, end_time=start + timedelta(hours=1), status="cancelled",
            ),
        ]
    )
    db_session.commit()

    bookings = client.get(f"/businesses/{business.id}/bookings", headers=auth_headers(owner)).json()
    assert len(bookings) == 3
    pending = client.get(
        f"/businesses/{business.id}/bookings", params={"status": "pending"}, headers=auth_headers(owner)
    ).json()
    assert len(pending) == 1

    analytics = client.get(f"/businesses/{business.id}/analytics", headers=auth_headers(owner)).json()
    assert analytics["total_bookings"] == 3
    assert analytics["paid_bookings"] == 1
    assert analytics["bookings_by_status"] == {"confirmed": 1, "pending": 1, "cancelled": 1}
    assert analytics["services"][0]["name"] == "Haircut"
    assert analytics["services"][0]["bookings"] == 2


def test_categories_are_public(client, make_category):
    """Test business categories can be listed without signing in."""
    make_category()

    response = client.get("/businesses/categories")

    assert response.status_code == 200
    assert response.json()[0]["slug"] == "hair-beauty"
