# backend/directory/repositories/event_repository.py
"""Repository for events and event registrations."""

import logging
from typing import List, Optional

from sqlalchemy import func
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Query, Session, joinedload, selectinload

from ..core.exceptions import RepositoryException
from ..models.event import Event, EventRegistration, RegistrationStatus
from .base_repository import BaseRepository

logger = logging.getLogger(__name__)


class EventRepository(BaseRepository[Event]):
    sort_columns = {
        "startDate": Event.start_date,
        "createdAt": Event.created_at,
        "title": func.lower(Event.title),
    }

    def __init__(self, db: Session):
        super().__init__(db, Event)

    def _apply_eager_loading(self, query: Query) -> Query:
        return query.options(
            joinedload(Event.business),
            selectinload(Event.registrations),
        )

    def slug_exists(self, slug: str) -> bool:
        return self.exists(slug=slug)

    def for_business(self, business_id: str) -> List[Event]:
        query = self._apply_eager_loading(self._build_query()).filter(Event.business_id == business_id)
        return self._execute_query(query.order_by(Event.start_date.desc()))


class EventRegistrationRepository(BaseRepository[EventRegistration]):
    def __init__(self, db: Session):
        super().__init__(db, EventRegistration)

    def get_for_user(self, event_id: str, user_id: str) -> Optional[EventRegistration]:
        return self.find_one_by(event_id=event_id, user_id=user_id)

    def count_confirmed(self, event_id: str) -> int:
        try:
            return (
                self.db.query(EventRegistration)
                .filter(
                    EventRegistration.event_id == event_id,
                    EventRegistration.status == RegistrationStatus.CONFIRMED,
                )
                .count()
            )
        except SQLAlchemyError as e:
            self.logger.error(f"Error counting registrations for {event_id}: {str(e)}")
            raise RepositoryException(f"Failed to count registrations: {str(e)}")
