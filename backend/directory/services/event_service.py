# backend/directory/services/event_service.py
"""
Event Service for the directory.

Events are managed by the owner of the hosting business. Registration is open
only while an event is PUBLISHED, one active registration per user, and never
beyond ``max_attendees`` confirmed attendees.
"""

import logging
from typing import Any, Dict, Optional

from sqlalchemy.orm import Session

from ..core.exceptions import (
    BusinessNotFoundException,
    BusinessRuleException,
    ConflictException,
    NotFoundException,
    OwnershipRequiredException,
    ValidationException,
)
from ..models.event import Event, EventRegistration, EventStatus, RegistrationStatus
from ..models.types import utc_naive
from ..models.user import User
from ..repositories.business_repository import BusinessRepository
from ..repositories.event_repository import EventRegistrationRepository, EventRepository
from ..schemas.event import (
    EventCreate,
    EventDetail,
    EventRegistrationCreate,
    EventRegistrationOut,
    EventUpdate,
)
from ..utils.slugs import unique_slug
from .base import BaseService

logger = logging.getLogger(__name__)

_URL_FIELDS = ("virtual_url", "registration_url")


def _event_values(changes: Dict[str, Any]) -> Dict[str, Any]:
    for field in _URL_FIELDS:
        if changes.get(field) is not None:
            changes[field] = str(changes[field])
    return changes


class EventService(BaseService):
    def __init__(self, db: Session):
        super().__init__(db)
        self.repository = EventRepository(db)
        self.registration_repository = EventRegistrationRepository(db)
        self.business_repository = BusinessRepository(db)

    def _get_or_404(self, event_id: str) -> Event:
        event = self.repository.get_by_id(event_id)
        if event is None:
            raise NotFoundException("Event not found", code="EVENT_NOT_FOUND", details={"event": event_id})
        return event

    def _require_owner(self, event: Event, user: User) -> None:
        if event.business is None or event.business.claimed_by_id != user.id:
            raise OwnershipRequiredException("Only the business owner can manage its events")

    @BaseService.measure_operation("get_event")
    def get_event(self, event_id: str) -> EventDetail:
        return EventDetail.from_event(self._get_or_404(event_id))

    def get_published_event(self, event_id: str) -> EventDetail:
        event = self._get_or_404(event_id)
        if event.status != EventStatus.PUBLISHED:
            raise NotFoundException("Event not found", code="EVENT_NOT_FOUND", details={"event": event_id})
        return EventDetail.from_event(event)

    @BaseService.measure_operation("create_event")
    def create_event(self, data: EventCreate, user: User) -> EventDetail:
        business = self.business_repository.get_by_id(data.business_id, load_relationships=False)
        if business is None:
            raise BusinessNotFoundException(data.business_id)
        if business.claimed_by_id != user.id:
            raise OwnershipRequiredException("Only the business owner can create events")

        values = _event_values(data.model_dump(exclude_none=True))
        values["slug"] = unique_slug(data.title, self.repository.slug_exists)
        values["status"] = EventStatus.DRAFT

        with self.transaction():
            event = self.repository.create(**values)

        self.logger.info(f"Event {event.id} created for business {business.id}")
        return EventDetail.from_event(self._get_or_404(event.id))

    @BaseService.measure_operation("update_event")
    def update_event(self, event_id: str, data: EventUpdate, user: User) -> EventDetail:
        event = self._get_or_404(event_id)
        self._require_owner(event, user)

        changes = _event_values(data.model_dump(exclude_unset=True))
        start = utc_naive(changes.get("start_date", event.start_date))
        end = utc_naive(changes.get("end_date", event.end_date))
        if start and end and end < start:
            raise ValidationException(
                "endDate must not be before startDate", fields=["startDate", "endDate"]
            )

        with self.transaction():
            for field, value in changes.items():
                setattr(event, field, value)
            self.repository.flush()

        return EventDetail.from_event(event)

    @BaseService.measure_operation("change_event_status")
    def change_status(self, event_id: str, status: EventStatus, user: User) -> EventDetail:
        event = self._get_or_404(event_id)
        self._require_owner(event, user)

        with self.transaction():
            event.status = EventStatus(status)
            self.repository.flush()

        self.logger.info(f"Event {event.id} moved to {event.status.value}")
        return EventDetail.from_event(event)

    @BaseService.measure_operation("delete_event")
    def delete_event(self, event_id: str, user: User) -> None:
        event = self._get_or_404(event_id)
        self._require_owner(event, user)

        with self.transaction():
            self.repository.delete(event.id)

    @BaseService.measure_operation("register_for_event")
    def register(
        self, event_id: str, user: User, data: Optional[EventRegistrationCreate] = None
    ) -> EventRegistrationOut:
        event = self._get_or_404(event_id)
        if event.status != EventStatus.PUBLISHED:
            raise BusinessRuleException(
                "Event is not available for registration", code="EVENT_NOT_OPEN"
            )

        existing = self.registration_repository.get_for_user(event.id, user.id)
        if existing is not None and existing.status == RegistrationStatus.CONFIRMED:
            raise ConflictException("Already registered for this event", code="ALREADY_REGISTERED")

        if event.max_attendees is not None:
            confirmed = self.registration_repository.count_confirmed(event.id)
            if confirmed >= event.max_attendees:
                raise BusinessRuleException("Event is full", code="EVENT_FULL")

        data = data or EventRegistrationCreate()
        attendee = {
            "name": data.name or user.name or user.email,
            "email": data.email or user.email,
            "phone": data.phone,
        }

        with self.transaction():
            registration: EventRegistration
            if existing is not None:
                # A cancelled registration is reactivated in place
                for field, value in attendee.items():
                    setattr(existing, field, value)
                existing.status = RegistrationStatus.CONFIRMED
                self.registration_repository.flush()
                registration = existing
            else:
                registration = self.registration_repository.create(
                    event_id=event.id,
                    user_id=user.id,
                    status=RegistrationStatus.CONFIRMED,
                    **attendee,
                )

        self.logger.info(f"User {user.id} registered for event {event.id}")
        return EventRegistrationOut.model_validate(registration)

    @BaseService.measure_operation("cancel_event_registration")
    def cancel_registration(self, event_id: str, user: User) -> None:
        registration = self.registration_repository.get_for_user(event_id, user.id)
        if registration is None or registration.status != RegistrationStatus.CONFIRMED:
            raise NotFoundException("Registration not found", code="REGISTRATION_NOT_FOUND")

        with self.transaction():
            registration.status = RegistrationStatus.CANCELLED
            self.registration_repository.flush()
