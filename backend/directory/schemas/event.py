"""Event request/response schemas."""
from datetime import datetime
from typing import TYPE_CHECKING, List, Optional

from pydantic import EmailStr, Field, HttpUrl, model_validator

from ..core.constants import DEFAULT_STATE, MAX_SHORT_DESCRIPTION_LENGTH
from ..models.event import EventStatus, RegistrationStatus
from .base import Money, StandardizedModel, StrictRequestModel

if TYPE_CHECKING:
    from ..models.event import Event
    from ..services.search.candidates import ScoredCandidate


class EventBusinessRef(StandardizedModel):
    id: str
    slug: str
    name: str
    logo: Optional[str] = None


class EventSummary(StandardizedModel):
    id: str
    slug: str
    title: str
    short_description: Optional[str] = None
    description: Optional[str] = None
    image: Optional[str] = None
    start_date: datetime
    end_date: datetime
    venue_name: Optional[str] = None
    city: Optional[str] = None
    state: Optional[str] = None
    latitude: Optional[float] = None
    longitude: Optional[float] = None
    is_virtual: bool = False
    is_hybrid: bool = False
    price: Optional[Money] = None
    currency: str = "USD"
    registration_required: bool = False
    max_attendees: Optional[int] = None
    categories: List[str] = Field(default_factory=list)
    tags: List[str] = Field(default_factory=list)
    status: EventStatus
    featured: bool = False
    business: Optional[EventBusinessRef] = None
    registration_count: int = 0
    distance: Optional[float] = None

    @classmethod
    def from_event(cls, event: "Event", distance: Optional[float] = None) -> "EventSummary":
        return cls(**_event_fields(event), distance=round(distance, 2) if distance is not None else None)

    @classmethod
    def from_scored(cls, result: "ScoredCandidate") -> "EventSummary":
        return cls.from_event(result.candidate.source, distance=result.distance)


class EventDetail(EventSummary):
    address1: Optional[str] = None
    address2: Optional[str] = None
    zip_code: Optional[str] = None
    country: Optional[str] = None
    virtual_url: Optional[str] = None
    registration_url: Optional[str] = None
    spots_remaining: Optional[int] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    @classmethod
    def from_event(cls, event: "Event", distance: Optional[float] = None) -> "EventDetail":
        registrations = event.confirmed_registrations
        return cls(
            **_event_fields(event),
            distance=distance,
            address1=event.address1,
            address2=event.address2,
            zip_code=event.zip_code,
            country=event.country,
            virtual_url=event.virtual_url,
            registration_url=event.registration_url,
            spots_remaining=(
                max(event.max_attendees - registrations, 0) if event.max_attendees is not None else None
            ),
            created_at=event.created_at,
            updated_at=event.updated_at,
        )


def _event_fields(event: "Event") -> dict:
    business = event.business
    return {
        "id": event.id,
        "slug": event.slug,
        "title": event.title,
        "short_description": event.short_description,
        "description": event.description,
        "image": event.image,
        "start_date": event.start_date,
        "end_date": event.end_date,
        "venue_name": event.venue_name,
        "city": event.city,
        "state": event.state,
        "latitude": event.latitude,
        "longitude": event.longitude,
        "is_virtual": bool(event.is_virtual),
        "is_hybrid": bool(event.is_hybrid),
        "price": event.price,
        "currency": event.currency or "USD",
        "registration_required": bool(event.registration_required),
        "max_attendees": event.max_attendees,
        "categories": list(event.categories or []),
        "tags": list(event.tags or []),
        "status": event.status,
        "featured": bool(event.featured),
        "business": EventBusinessRef.model_validate(business) if business is not None else None,
        "registration_count": event.confirmed_registrations,
    }


class _EventFields(StrictRequestModel):
    title: Optional[str] = Field(default=None, min_length=1, max_length=255)
    description: Optional[str] = None
    short_description: Optional[str] = Field(default=None, max_length=MAX_SHORT_DESCRIPTION_LENGTH)
    image: Optional[str] = None
    start_date: Optional[datetime] = None
    end_date: Optional[datetime] = None
    venue_name: Optional[str] = Field(default=None, max_length=255)
    address1: Optional[str] = Field(default=None, max_length=255)
    address2: Optional[str] = Field(default=None, max_length=255)
    city: Optional[str] = Field(default=None, max_length=100)
    state: Optional[str] = Field(default=None, min_length=2, max_length=2)
    zip_code: Optional[str] = Field(default=None, max_length=10)
    latitude: Optional[float] = Field(default=None, ge=-90, le=90)
    longitude: Optional[float] = Field(default=None, ge=-180, le=180)
    virtual_url: Optional[HttpUrl] = None
    is_virtual: Optional[bool] = None
    is_hybrid: Optional[bool] = None
    price: Optional[float] = Field(default=None, ge=0)
    currency: Optional[str] = Field(default=None, min_length=3, max_length=3)
    registration_required: Optional[bool] = None
    registration_url: Optional[HttpUrl] = None
    max_attendees: Optional[int] = Field(default=None, ge=1)
    categories: Optional[List[str]] = None
    tags: Optional[List[str]] = None

    @model_validator(mode="after")
    def _dates_in_order(self) -> "_EventFields":
        if self.start_date and self.end_date and self.end_date < self.start_date:
            raise ValueError("endDate must not be before startDate")
        return self


class EventCreate(_EventFields):
    business_id: str = Field(min_length=1, max_length=26)
    title: str = Field(min_length=1, max_length=255)
    start_date: datetime
    end_date: datetime
    state: Optional[str] = Field(default=DEFAULT_STATE, min_length=2, max_length=2)


class EventUpdate(_EventFields):
    pass


class EventStatusUpdate(StrictRequestModel):
    status: EventStatus


class EventRegistrationCreate(StrictRequestModel):
    """Attendee details; name and email default to the signed-in user."""

    name: Optional[str] = Field(default=None, min_length=1, max_length=255)
    email: Optional[EmailStr] = None
    phone: Optional[str] = Field(default=None, max_length=30)


class EventRegistrationOut(StandardizedModel):
    id: str
    event_id: str
    user_id: str
    name: str
    email: str
    phone: Optional[str] = None
    status: RegistrationStatus
    created_at: Optional[datetime] = None
