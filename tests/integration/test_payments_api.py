"""Integration tests for booking payments and the PayFast notification webhook."""

from datetime import datetime, timedelta

import pytest

from app.models import Appointment, Notification, Payment
from app.payments import generate_signature

PASSPHRASE = "jt7NOE43FZPn"


@pytest.fixture
def appointment(db_session, service, customer):
    start = datetime.utcnow().replace(microsecond=0) + timedelta(days=5)
    booking = Appointment(
        service_id=service.id,
        business_id=service.business_id,
        user_id=customer.id,
        start_time=start,
        end_time=start + timedelta(hours=1),
        status="pending",
    )
    db_session.add(booking)
    db_session.commit()
    db_session.refresh(booking)
    return booking


@pytest.fixture
def initiated(client, appointment, customer, auth_headers):
    response = client.post("/payments/initiate", json={"appointmentId": appointment.id}, headers=auth_headers(customer))
    assert response.status_code == 200
    return response.json()


def notification_fields(initiated, status="COMPLETE", amount="100.00", passphrase=PASSPHRASE, **overrides):
    """A notification as the gateway would post it, signed unless a signature is given"""
    fields = {
        "pf_payment_id": "1089250",
        "payment_status": status,
        "item_name": initiated["fields"]["item_name"],
        "amount_gross": amount,
        "amount_fee": "-2.30",
        "amount_net": "97.70",
        "custom_str1": initiated["fields"]["custom_str1"],
        "custom_str2": initiated["payment_id"],
        "merchant_id": initiated["fields"]["merchant_id"],
        **overrides,
    }
    if "signature" not in fields:
        fields["signature"] = generate_signature(fields, passphrase)
    return fields


def test_initiate_returns_signed_sandbox_form(db_session, appointment, initiated):
    """Test initiation stores a pending payment and signs the redirect form."""
    fields = initiated["fields"]

    assert initiated["url"] == "https://sandbox.payfast.co.za/eng/process"
    assert fields["merchant_id"] == "10000100"
    assert fields["amount"] == "100.00"
    assert fields["item_name"] == "Haircut"
    assert fields["custom_str1"] == appointment.id
    assert fields["custom_str2"] == initiated["payment_id"]
    assert fields["notify_url"].endswith("/payments/notify")
    assert fields["signature"] == generate_signature(fields, PASSPHRASE)

    payment = db_session.get(Payment, initiated["payment_id"])
    assert payment.status == "pending"
    assert str(payment.amount) == "100.00"


def test_initiate_rejects_other_users_booking(client, appointment, create_user, auth_headers):
    """Test only the customer pays for a booking."""
    response = client.post(
        "/payments/initiate", json={"appointmentId": appointment.id}, headers=auth_headers(create_user())
    )

    assert response.status_code == 403


def test_initiate_rejects_unpayable_bookings(client, db_session, appointment, customer, auth_headers):
    """Test paid and cancelled bookings cannot be paid again."""
    headers = auth_headers(customer)

    appointment.is_paid = True
    db_session.commit()
    assert client.post("/payments/initiate", json={"appointmentId": appointment.id}, headers=headers).status_code == 400

    appointment.is_paid = False
    appointment.status = "cancelled"
    db_session.commit()
    assert client.post("/payments/initiate", json={"appointmentId": appointment.id}, headers=headers).status_code == 400

    assert client.post("/payments/initiate", json={"appointmentId": "missing"}, headers=headers).status_code == 404


def test_complete_notification_confirms_booking(client, db_session, appointment, customer, owner, initiated):
    """Test a signed COMPLETE notification pays and confirms the booking."""
    response = client.post("/payments/notify", data=notification_fields(initiated))

    assert response.status_code == 200
    assert response.json() == {"status": "ok"}

    db_session.expire_all()
    payment = db_session.get(Payment, initiated["payment_id"])
    assert payment.status == "completed"
    assert payment.transaction_id == "1089250"
    assert payment.payment_metadata["payment_status"] == "COMPLETE"

    booking = db_session.get(Appointment, appointment.id)
    assert booking.is_paid is True
    assert booking.status == "confirmed"

    for user in (customer, owner):
        titles = [n.title for n in db_session.query(Notification).filter(Notification.user_id == user.id)]
        assert titles == ["Payment Received"]


def test_repeat_notification_is_idempotent(client, db_session, customer, initiated):
    """Test the gateway retrying a notification changes nothing."""
    fields = notification_fields(initiated)

    assert client.post("/payments/notify", data=fields).status_code == 200
    assert client.post("/payments/notify", data=fields).status_code == 200

    received = db_session.query(Notification).filter(
        Notification.user_id == customer.id, Notification.title == "Payment Received"
    )
    assert received.count() == 1


def test_bad_signature_is_rejected(client, db_session, appointment, initiated):
    """Test tampered or unsigned notifications change nothing."""
    tampered = notification_fields(initiated)
    tampered["amount_gross"] = "1.00"

    response = client.post("/payments/notify", data=tampered)
    assert response.status_code == 400
    assert response.json()["detail"] == "Invalid signature"

    wrong_key = notification_fields(initiated, passphrase="not-the-passphrase")
    assert client.post("/payments/notify", data=wrong_key).status_code == 400

    db_session.expire_all()
    assert db_session.get(Payment, initiated["payment_id"]).status == "pending"
    assert db_session.get(Appointment, appointment.id).is_paid is False


def test_failed_notification_marks_payment_failed(client, db_session, appointment, customer, initiated):
    """Test a non-COMPLETE status fails the payment and leaves the booking alone."""
    response = client.post("/payments/notify", data=notification_fields(initiated, status="FAILED"))

    assert response.status_code == 400
    assert response.json()["detail"] == "Payment failed with status: FAILED"

    db_session.expire_all()
    assert db_session.get(Payment, initiated["payment_id"]).status == "failed"
    booking = db_session.get(Appointment, appointment.id)
    assert booking.status == "pending"
    assert booking.is_paid is False

    failed = db_session.query(Notification).filter(Notification.user_id == customer.id).one()
    assert failed.title == "Payment Failed"
    assert failed.type == "error"


def test_failure_after_completion_is_ignored(client, db_session, initiated):
    """Test a late failure cannot undo a completed payment."""
    client.post("/payments/notify", data=notification_fields(initiated))

    response = client.post("/payments/notify", data=notification_fields(initiated, status="CANCELLED"))

    assert response.status_code == 200
    db_session.expire_all()
    assert db_session.get(Payment, initiated["payment_id"]).status == "completed"


def test_amount_mismatch_fails_payment(client, db_session, appointment, initiated):
    """Test a correctly signed notification for the wrong amount does not pay the booking."""
    response = client.post("/payments/notify", data=notification_fields(initiated, amount="10.00"))

    assert response.status_code == 400
    assert response.json()["detail"] == "Payment amount mismatch"

    db_session.expire_all()
    assert db_session.get(Payment, initiated["payment_id"]).status == "failed"
    assert db_session.get(Appointment, appointment.id).is_paid is False


def test_notification_for_unknown_payment(client, initiated):
    """Test a valid notification naming no known payment is 404."""
    response = client.post("/payments/notify", data=notification_fields(initiated, custom_str2="missing"))

    assert response.status_code == 404


def test_get_payment_access(client, customer, owner, admin, create_user, initiated, auth_headers):
    """Test the payer, the business owner and admins can read a payment."""
    url = f"/payments/{initiated['payment_id']}"

    for user in (customer, owner, admin):
        response = client.get(url, headers=auth_headers(user))
        assert response.status_code == 200
        assert response.json()["amount"] == "100.00"

    assert client.get(url, headers=auth_headers(create_user())).status_code == 403
    assert client.get("/payments/missing", headers=auth_headers(customer)).status_code == 404
