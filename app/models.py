import uuid
from datetime import datetime

from sqlalchemy import (
    JSON,
    Boolean,
    Column,
    DateTime,
    ForeignKey,
    Integer,
    Numeric,
    String,
    Table,
    Text,
    UniqueConstraint,
)
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func

from .database import Base


def generate_id():
    """Generate a UUID primary key (matches the auth provider's user ids)"""
    return str(uuid.uuid4())


# Roles
ROLE_USER = "user"
ROLE_BUSINESS = "business"
ROLE_ADMIN = "admin"
ROLE_STAFF = "staff"
USER_ROLES = (ROLE_USER, ROLE_BUSINESS, ROLE_ADMIN, ROLE_STAFF)
USER_STATUSES = ("active", "inactive", "suspended")

BUSINESS_STATUSES = ("pending", "approved", "rejected", "suspended")

APPOINTMENT_STATUSES = ("pending", "confirmed", "cancelled", "completed", "no_show", "rescheduled")
# Bookings that occupy their time slot
ACTIVE_APPOINTMENT_STATUSES = ("pending", "confirmed", "rescheduled")

PAYMENT_STATUSES = ("pending", "completed", "failed", "refunded")
NOTIFICATION_TYPES = ("info", "success", "warning", "error")
REPORT_STATUSES = ("pending", "approved", "rejected", "dismissed")
SETTINGS_SECTIONS = ("general", "security", "email", "payment", "integration")


business_category_links = Table(
    "business_category_links",
    Base.metadata,
    Column("business_id", String(36), ForeignKey("businesses.id", ondelete="CASCADE"), primary_key=True),
    Column(
        "category_id",
        String(36),
        ForeignKey("business_categories.id", ondelete="CASCADE"),
        primary_key=True,
    ),
)


class User(Base):
    __tablename__ = "users"

    # Same id as the auth provider's subject claim
    id = Column(String(36), primary_key=True, default=generate_id)
    email = Column(String(255), unique=True, index=True, nullable=False)
    full_name = Column(String(255), nullable=True)
    phone = Column(String(50), nullable=True)
    avatar_url = Column(String(500), nullable=True)
    role = Column(String(20), default=ROLE_USER, nullable=False)
    status = Column(String(20), default="active", nullable=False)
    created_at = Column(DateTime, server_default=func.now())
    updated_at = Column(DateTime, server_default=func.now(), onupdate=func.now())

    businesses = relationship("Business", back_populates="owner", cascade="all, delete-orphan")
    appointments = relationship("Appointment", back_populates="user", cascade="all, delete-orphan")
    reviews = relationship("Review", back_populates="user", cascade="all, delete-orphan")
    notifications = relationship(
        "Notification", back_populates="user", cascade="all, delete-orphan"
    )


class BusinessCategory(Base):
    __tablename__ = "business_categories"

    id = Column(String(36), primary_key=True, default=generate_id)
    name = Column(String(100), unique=True, nullable=False)
    slug = Column(String(100), unique=True, index=True, nullable=False)
    description = Column(Text, nullable=True)
    icon = Column(String(100), nullable=True)
    created_at = Column(DateTime, server_default=func.now())

    businesses = relationship(
        "Business", secondary=business_category_links, back_populates="categories"
    )


class ServiceCategory(Base):
    __tablename__ = "service_categories"

    id = Column(String(36), primary_key=True, default=generate_id)
    name = Column(String(100), unique=True, nullable=False)
    slug = Column(String(100), unique=True, index=True, nullable=False)
    description = Column(Text, nullable=True)
    created_at = Column(DateTime, server_default=func.now())

    services = relationship("Service", back_populates="category")


class Business(Base):
    __tablename__ = "businesses"

    id = Column(String(36), primary_key=True, default=generate_id)
    owner_id = Column(String(36), ForeignKey("users.id", ondelete="CASCADE"), index=True, nullable=False)
    name = Column(String(100), nullable=False, index=True)
    description = Column(Text, nullable=True)
    email = Column(String(255), nullable=True)
    phone = Column(String(50), nullable=True)
    address = Column(String(500), nullable=True)
    city = Column(String(100), nullable=True, index=True)
    latitude = Column(Numeric(9, 6), nullable=True)
    longitude = Column(Numeric(9, 6), nullable=True)
    website = Column(String(500), nullable=True)
    logo_url = Column(String(500), nullable=True)
    status = Column(String(20), default="pending", nullable=False)  # pending, approved, rejected, suspended
    is_active = Column(Boolean, default=True, nullable=False)
    created_at = Column(DateTime, server_default=func.now())
    updated_at = Column(DateTime, server_default=func.now(), onupdate=func.now())

    owner = relationship("User", back_populates="businesses")
    categories = relationship(
        "BusinessCategory", secondary=business_category_links, back_populates="businesses"
    )
    services = relationship("Service", back_populates="business", cascade="all, delete-orphan")
    working_hours = relationship(
        "WorkingHours",
        back_populates="business",
        cascade="all, delete-orphan",
        order_by="WorkingHours.day_of_week",
    )
    blocked_times = relationship(
        "BlockedTime", back_populates="business", cascade="all, delete-orphan"
    )
    reviews = relationship("Review", back_populates="business", cascade="all, delete-orphan")
    staff = relationship(
        "StaffMember", back_populates="business", cascade="all, delete-orphan", order_by="StaffMember.name"
    )


class WorkingHours(Base):
    __tablename__ = "working_hours"
    __table_args__ = (UniqueConstraint("business_id", "day_of_week", name="uq_working_hours_day"),)

    id = Column(String(36), primary_key=True, default=generate_id)
    business_id = Column(
        String(36), ForeignKey("businesses.id", ondelete="CASCADE"), index=True, nullable=False
    )
    day_of_week = Column(Integer, nullable=False)  # 0 = Monday ... 6 = Sunday
    is_open = Column(Boolean, default=True, nullable=False)
    open_time = Column(String(5), nullable=True)  # "HH:MM"
    close_time = Column(String(5), nullable=True)  # "HH:MM"
    breaks = Column(JSON, default=list, nullable=False)  # [{"start": "HH:MM", "end": "HH:MM"}]

    business = relationship("Business", back_populates="working_hours")


class BlockedTime(Base):
    __tablename__ = "blocked_times"

    id = Column(String(36), primary_key=True, default=generate_id)
    business_id = Column(
        String(36), ForeignKey("businesses.id", ondelete="CASCADE"), index=True, nullable=False
    )
    start_time = Column(DateTime, nullable=False)
    end_time = Column(DateTime, nullable=False)
    reason = Column(String(255), nullable=True)
    created_at = Column(DateTime, server_default=func.now())

    business = relationship("Business", back_populates="blocked_times")


class Service(Base):
    __tablename__ = "services"

    id = Column(String(36), primary_key=True, default=generate_id)
    business_id = Column(
        String(36), ForeignKey("businesses.id", ondelete="CASCADE"), index=True, nullable=False
    )
    category_id = Column(
        String(36), ForeignKey("service_categories.id", ondelete="SET NULL"), nullable=True
    )
    name = Column(String(100), nullable=False)
    description = Column(Text, nullable=True)
    price = Column(Numeric(10, 2), nullable=False)
    duration = Column(Integer, nullable=False)  # minutes
    is_active = Column(Boolean, default=True, nullable=False)
    created_at = Column(DateTime, server_default=func.now())
    updated_at = Column(DateTime, server_default=func.now(), onupdate=func.now())

    business = relationship("Business", back_populates="services")
    category = relationship("ServiceCategory", back_populates="services")
    appointments = relationship(
        "Appointment", back_populates="service", cascade="all, delete-orphan"
    )


class Appointment(Base):
    __tablename__ = "appointments"

    id = Column(String(36), primary_key=True, default=generate_id)
    service_id = Column(
        String(36), ForeignKey("services.id", ondelete="CASCADE"), index=True, nullable=False
    )
    business_id = Column(
        String(36), ForeignKey("businesses.id", ondelete="CASCADE"), index=True, nullable=False
    )
    user_id = Column(String(36), ForeignKey("users.id", ondelete="CASCADE"), index=True, nullable=False)
    start_time = Column(DateTime, nullable=False, index=True)
    end_time = Column(DateTime, nullable=False)
    notes = Column(Text, nullable=True)
    status = Column(String(20), default="pending", nullable=False)
    is_paid = Column(Boolean, default=False, nullable=False)
    cancellation_reason = Column(String(500), nullable=True)
    created_at = Column(DateTime, server_default=func.now())
    updated_at = Column(DateTime, server_default=func.now(), onupdate=func.now())

    service = relationship("Service", back_populates="appointments")
    business = relationship("Business")
    user = relationship("User", back_populates="appointments")
    payments = relationship("Payment", back_populates="appointment", cascade="all, delete-orphan")


class Payment(Base):
    __tablename__ = "payments"

    id = Column(String(36), primary_key=True, default=generate_id)
    appointment_id = Column(
        String(36), ForeignKey("appointments.id", ondelete="CASCADE"), index=True, nullable=False
    )
    user_id = Column(String(36), ForeignKey("users.id", ondelete="CASCADE"), nullable=False)
    amount = Column(Numeric(10, 2), nullable=False)
    status = Column(String(20), default="pending", nullable=False)  # pending, completed, failed, refunded
    transaction_id = Column(String(255), nullable=True, index=True)  # pf_payment_id
    payment_metadata = Column(JSON, nullable=True)  # Raw notification payload
    created_at = Column(DateTime, server_default=func.now())
    updated_at = Column(DateTime, server_default=func.now(), onupdate=func.now())

    appointment = relationship("Appointment", back_populates="payments")


class Review(Base):
    __tablename__ = "reviews"

    id = Column(String(36), primary_key=True, default=generate_id)
    business_id = Column(
        String(36), ForeignKey("businesses.id", ondelete="CASCADE"), index=True, nullable=False
    )
    service_id = Column(
        String(36), ForeignKey("services.id", ondelete="CASCADE"), index=True, nullable=True
    )
    user_id = Column(String(36), ForeignKey("users.id", ondelete="CASCADE"), nullable=False)
    rating = Column(Integer, nullable=False)  # 1-5
    comment = Column(Text, nullable=True)
    created_at = Column(DateTime, default=datetime.utcnow, index=True)
    updated_at = Column(DateTime, server_default=func.now(), onupdate=func.now())

    business = relationship("Business", back_populates="reviews")
    service = relationship("Service")
    user = relationship("User", back_populates="reviews")


class Favorite(Base):
    __tablename__ = "favorites"
    __table_args__ = (UniqueConstraint("user_id", "business_id", name="uq_favorite_user_business"),)

    id = Column(String(36), primary_key=True, default=generate_id)
    user_id = Column(String(36), ForeignKey("users.id", ondelete="CASCADE"), index=True, nullable=False)
    business_id = Column(
        String(36), ForeignKey("businesses.id", ondelete="CASCADE"), index=True, nullable=False
    )
    created_at = Column(DateTime, default=datetime.utcnow)

    business = relationship("Business")


class StaffMember(Base):
    __tablename__ = "staff_members"
    __table_args__ = (UniqueConstraint("business_id", "email", name="uq_staff_business_email"),)

    id = Column(String(36), primary_key=True, default=generate_id)
    business_id = Column(
        String(36), ForeignKey("businesses.id", ondelete="CASCADE"), index=True, nullable=False
    )
    name = Column(String(100), nullable=False)
    email = Column(String(255), nullable=False)
    phone = Column(String(50), nullable=True)
    role = Column(String(100), nullable=False)  # job title, e.g. "Senior Stylist"
    service_ids = Column(JSON, default=list, nullable=False)
    # Same shape as WorkingHours rows: [{"dayOfWeek": 0, "isOpen": true, "openTime": "09:00", ...}]
    working_hours = Column(JSON, default=list, nullable=False)
    is_active = Column(Boolean, default=True, nullable=False)
    created_at = Column(DateTime, server_default=func.now())
    updated_at = Column(DateTime, server_default=func.now(), onupdate=func.now())

    business = relationship("Business", back_populates="staff")


class ContentReport(Base):
    __tablename__ = "content_reports"

    id = Column(String(36), primary_key=True, default=generate_id)
    reporter_id = Column(String(36), ForeignKey("users.id", ondelete="CASCADE"), nullable=False)
    review_id = Column(String(36), ForeignKey("reviews.id", ondelete="CASCADE"), nullable=False)
    reason = Column(String(500), nullable=False)
    status = Column(String(20), default="pending", nullable=False)
    rejection_reason = Column(String(500), nullable=True)
    created_at = Column(DateTime, server_default=func.now())
    updated_at = Column(DateTime, server_default=func.now(), onupdate=func.now())

    review = relationship("Review")


class Message(Base):
    __tablename__ = "messages"

    id = Column(String(36), primary_key=True, default=generate_id)
    sender_id = Column(String(36), ForeignKey("users.id", ondelete="CASCADE"), index=True, nullable=False)
    receiver_id = Column(
        String(36), ForeignKey("users.id", ondelete="CASCADE"), index=True, nullable=False
    )
    content = Column(Text, nullable=False)
    read = Column(Boolean, default=False, nullable=False)
    created_at = Column(DateTime, default=datetime.utcnow, index=True)


class Notification(Base):
    __tablename__ = "notifications"

    id = Column(String(36), primary_key=True, default=generate_id)
    user_id = Column(String(36), ForeignKey("users.id", ondelete="CASCADE"), index=True, nullable=False)
    title = Column(String(255), nullable=True)
    message = Column(Text, nullable=False)
    type = Column(String(20), default="info", nullable=False)  # info, success, warning, error
    read = Column(Boolean, default=False, nullable=False)
    created_at = Column(DateTime, default=datetime.utcnow, index=True)

    user = relationship("User", back_populates="notifications")


class AdminSettings(Base):
    __tablename__ = "admin_settings"

    id = Column(String(36), primary_key=True, default="default")
    general = Column(JSON, default=dict, nullable=False)
    security = Column(JSON, default=dict, nullable=False)
    email = Column(JSON, default=dict, nullable=False)
    payment = Column(JSON, default=dict, nullable=False)
    integration = Column(JSON, default=dict, nullable=False)
    updated_at = Column(DateTime, server_default=func.now(), onupdate=func.now())
