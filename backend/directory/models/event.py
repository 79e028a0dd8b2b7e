# backend/directory/models/event.py
"""
Event models.

Events belong to a business and may be in-person, virtual or hybrid. Attendance
is tracked through EventRegistration rows (one per event and user).
"""

from enum import Enum
from typing import TYPE_CHECKING, List

import ulid
from sqlalchemy import Boolean, Column, DateTime
from sqlalchemy import Enum as SAEnum
from sqlalchemy import Float, ForeignKey, Index, Integer, Numeric, String, Text, UniqueConstraint
from sqlalchemy.orm import Mapped, relationship

from ..core.constants import DEFAULT_COUNTRY, DEFAULT_STATE
from ..database import Base
from .types import StringArrayType, TimestampMixin

if TYPE_CHECKING:
    from .business import Business
    from .user import User


class EventStatus(str, Enum):
    DRAFT = "DRAFT"
    PUBLISHED = "PUBLISHED"
    CANCELLED = "CANCELLED"
    POSTPONED = "POSTPONED"
    COMPLETED = "COMPLETED"


class RegistrationStatus(str, Enum):
    CONFIRMED = "CONFIRMED"
    CANCELLED = "CANCELLED"


class Event(TimestampMixin, Base):
    __tablename__ = "events"

    id = Column(String(26), primary_key=True, index=True, default=lambda: str(ulid.ULID()))
    slug = Column(String(255), unique=True, nullable=False, index=True)
    title = Column(String(255), nullable=False)
    description = Column(Text, nullable=True)
    short_description = Column(String(160), nullable=True)
    image = Column(String(512), nullable=True)

    start_date = Column(DateTime(timezone=True), nullable=False, index=True)
    end_date = Column(DateTime(timezone=True), nullable=False)

    # In-person details
    venue_name = Column(String(255), nullable=True)
    address1 = Column(String(255), nullable=True)
    address2 = Column(String(255), nullable=True)
    city = Column(String(100), nullable=True, index=True)
    state = Column(String(2), nullable=True, default=DEFAULT_STATE)
    zip_code = Column(String(10), nullable=True)
    country = Column(String(2), nullable=True, default=DEFAULT_COUNTRY)
    latitude = Column(Float, nullable=True)
    longitude = Column(Float, nullable=True)

    # Virtual details
    virtual_url = Column(String(512), nullable=True)
    is_virtual = Column(Boolean, nullable=False, default=False)
    is_hybrid = Column(Boolean, nullable=False, default=False)

    business_id = Column(String(26), ForeignKey("businesses.id", ondelete="CASCADE"), nullable=False, index=True)

    price = Column(Numeric(10, 2), nullable=True)
    currency = Column(String(3), nullable=False, default="USD")
    registration_required = Column(Boolean, nullable=False, default=False)
    registration_url = Column(String(512), nullable=True)
    max_attendees = Column(Integer, nullable=True)

    categories = Column(StringArrayType(), nullable=True, default=list)
    tags = Column(StringArrayType(), nullable=True, default=list)

    status = Column(
        SAEnum(EventStatus, name="event_status"), nullable=False, default=EventStatus.DRAFT, index=True
    )
    featured = Column(Boolean, nullable=False, default=False)

    business: Mapped["Business"] = relationship("Business", back_populates="events")
    registrations: Mapped[List["EventRegistration"]] = relationship(
        "EventRegistration", back_populates="event", cascade="all, delete-orphan"
    )

    __table_args__ = (Index("idx_events_status_start", "status", "start_date"),)

    @property
    def confirmed_registrations(self) -> int:
        return sum(1 for r in self.registrations if r.status == RegistrationStatus.CONFIRMED)

    @property
    def has_coordinates(self) -> bool:
        return self.latitude is not None and self.longitude is not None

    def __repr__(self) -> str:
        return f"<Event {self.slug} ({self.status})>"


class EventRegistration(TimestampMixin, Base):
    __tablename__ = "event_registrations"

    id = Column(String(26), primary_key=True, default=lambda: str(ulid.ULID()))
    event_id = Column(String(26), ForeignKey("events.id", ondelete="CASCADE"), nullable=False, index=True)
    user_id = Column(String(26), ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    name = Column(String(255), nullable=False)
    email = Column(String(255), nullable=False)
    phone = Column(String(30), nullable=True)
    status = Column(
        SAEnum(RegistrationStatus, name="registration_status"),
        nullable=False,
        default=RegistrationStatus.CONFIRMED,
    )

    event: Mapped["Event"] = relationship("Event", back_populates="registrations")
    user: Mapped["User"] = relationship("User")

    __table_args__ = (UniqueConstraint("event_id", "user_id", name="uq_event_registration_user"),)
