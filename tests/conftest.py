"""Pytest configuration and shared fixtures."""

import os
import sys
import time
from datetime import date, timedelta
from decimal import Decimal
from pathlib import Path

# Configure the app for tests before anything imports it
os.environ["DATABASE_URL"] = "sqlite://"
os.environ["ENVIRONMENT"] = "development"
os.environ["SUPABASE_JWT_SECRET"] = "test-jwt-secret"
os.environ["SUPABASE_URL"] = "https://auth.example.test"
os.environ["SUPABASE_ANON_KEY"] = "test-anon-key"
os.environ["CACHE_ENABLED"] = "false"
os.environ["PAYFAST_ENVIRONMENT"] = "sandbox"
os.environ["PAYFAST_PASSPHRASE"] = "jt7NOE43FZPn"
os.environ["DB_LOG_SLOW_QUERIES"] = "false"

# Add project root to Python path
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))

import pytest
from fastapi.testclient import TestClient
from jose import jwt

from app.database import Base, SessionLocal, engine, get_db
from app.main import app
from app.models import Business, BusinessCategory, Service, User, WorkingHours
from app.rate_limiter import auth_rate_limit, payment_notify_rate_limit, search_rate_limit

JWT_SECRET = "test-jwt-secret"


def make_token(user_id: str, email: str, expires_in: int = 3600, secret: str = JWT_SECRET, **claims) -> str:
    """Mint an access token shaped like the auth provider's"""
    payload = {
        "sub": user_id,
        "email": email,
        "aud": "authenticated",
        "role": "authenticated",
        "exp": int(time.time()) + expires_in,
        **claims,
    }
    return jwt.encode(payload, secret, algorithm="HS256")


def next_monday(weeks_ahead: int = 1) -> date:
    """A Monday at least a week away, so bookings are always in the future"""
    today = date.today()
    return today + timedelta(days=(7 - today.weekday()) + 7 * weeks_ahead)


@pytest.fixture
def db_session():
    """Fresh in-memory schema per test."""
    Base.metadata.create_all(bind=engine)
    session = SessionLocal()
    try:
        yield session
    finally:
        session.close()
        Base.metadata.drop_all(bind=engine)


@pytest.fixture
def client(db_session):
    """API client sharing the test session; rate limiters are neutralised."""

    def override_get_db():
        yield db_session

    async def no_rate_limit():
        return None

    app.dependency_overrides[get_db] = override_get_db
    for limiter in (auth_rate_limit, search_rate_limit, payment_notify_rate_limit):
        app.dependency_overrides[limiter] = no_rate_limit

    with TestClient(app) as test_client:
        yield test_client

    app.dependency_overrides.clear()


@pytest.fixture
def create_user(db_session):
    counter = {"n": 0}

    def _create(role: str = "user", status: str = "active", full_name: str = None, email: str = None) -> User:
        counter["n"] += 1
        user = User(
            email=email or f"{role}{counter['n']}@example.com",
            full_name=full_name or f"{role.title()} {counter['n']}",
            role=role,
            status=status,
        )
        db_session.add(user)
        db_session.commit()
        db_session.refresh(user)
        return user

    return _create


@pytest.fixture
def auth_headers():
    def _headers(user: User) -> dict:
        return {"Authorization": f"Bearer {make_token(user.id, user.email)}"}

    return _headers


@pytest.fixture
def token_factory():
    return make_token


@pytest.fixture
def booking_day() -> date:
    """Upcoming Monday (day_of_week 0)"""
    return next_monday()


@pytest.fixture
def customer(create_user):
    return create_user(role="user", full_name="Casey Customer")


@pytest.fixture
def owner(create_user):
    return create_user(role="business", full_name="Olive Owner")


@pytest.fixture
def admin(create_user):
    return create_user(role="admin", full_name="Ada Admin")


@pytest.fixture
def make_business(db_session):
    def _make(owner: User, name: str = "Sunrise Salon", status: str = "approved", **fields) -> Business:
        business = Business(
            owner_id=owner.id,
            name=name,
            description=fields.pop("description", "Cuts and colour"),
            city=fields.pop("city", "Cape Town"),
            status=status,
            is_active=fields.pop("is_active", True),
            **fields,
        )
        db_session.add(business)
        db_session.commit()
        db_session.refresh(business)
        return business

    return _make


@pytest.fixture
def make_service(db_session):
    def _make(business: Business, name: str = "Haircut", price: str = "100.00", duration: int = 60, **fields) -> Service:
        service = Service(
            business_id=business.id,
            name=name,
            price=Decimal(price),
            duration=duration,
            is_active=fields.pop("is_active", True),
            **fields,
        )
        db_session.add(service)
        db_session.commit()
        db_session.refresh(service)
        return service

    return _make


@pytest.fixture
def make_working_hours(db_session):
    def _make(business: Business, day_of_week: int, open_time="09:00", close_time="17:00", breaks=None, is_open=True):
        hours = WorkingHours(
            business_id=business.id,
            day_of_week=day_of_week,
            is_open=is_open,
            open_time=open_time,
            close_time=close_time,
            breaks=breaks or [],
        )
        db_session.add(hours)
        db_session.commit()
        return hours

    return _make


@pytest.fixture
def make_category(db_session):
    def _make(name: str = "Hair & Beauty", slug: str = "hair-beauty") -> BusinessCategory:
        category = BusinessCategory(name=name, slug=slug)
        db_session.add(category)
        db_session.commit()
        db_session.refresh(category)
        return category

    return _make


@pytest.fixture
def business(owner, make_business):
    return make_business(owner)


@pytest.fixture
def service(business, make_service):
    return make_service(business)
