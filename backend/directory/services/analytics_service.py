# backend/directory/services/analytics_service.py
"""
Business analytics.

Counters are stored per business per UTC day. The owner summary compares the
selected range with the immediately preceding range of the same length.
"""

from collections import OrderedDict
from datetime import date, datetime, time, timedelta, timezone
import logging
from typing import Dict, List, Optional, Tuple

from sqlalchemy.orm import Session

from ..core.exceptions import BusinessNotFoundException, OwnershipRequiredException
from ..models.business import Business
from ..models.types import utc_naive
from ..models.user import User
from ..repositories.analytics_repository import AnalyticsRepository
from ..repositories.business_repository import BusinessRepository
from ..repositories.event_repository import EventRepository
from ..repositories.review_repository import ReviewRepository
from ..schemas.analytics import (
    AnalyticsRange,
    AnalyticsSummary,
    DailyCounters,
    EventRegistrations,
    EventsSummary,
    ReviewPoint,
    ReviewsSummary,
    ViewRecorded,
    ViewsSummary,
)
from .base import BaseService

logger = logging.getLogger(__name__)

RANGE_DAYS: Dict[str, int] = {"7d": 7, "30d": 30, "90d": 90, "1y": 365}


def range_bounds(range_key: str, today: date) -> Tuple[date, date, date, date]:
    """Return (start, end, previous_start, previous_end), all inclusive."""
    days = RANGE_DAYS[range_key]
    start = today - timedelta(days=days)
    previous_end = start - timedelta(days=1)
    previous_start = previous_end - timedelta(days=days)
    return start, today, previous_start, previous_end


def percent_change(current: int, previous: int) -> Optional[float]:
    if previous <= 0:
        return None
    return round((current - previous) / previous * 100, 1)


class AnalyticsService(BaseService):
    def __init__(self, db: Session):
        super().__init__(db)
        self.repository = AnalyticsRepository(db)
        self.business_repository = BusinessRepository(db)
        self.review_repository = ReviewRepository(db)
        self.event_repository = EventRepository(db)

    def _get_business(self, business_id: str) -> Business:
        business = self.business_repository.get_by_id(business_id, load_relationships=False)
        if business is None:
            raise BusinessNotFoundException(business_id)
        return business

    @staticmethod
    def _today() -> date:
        return datetime.now(timezone.utc).date()

    @BaseService.measure_operation("record_business_view")
    def record_view(self, business_id: str) -> ViewRecorded:
        business = self._get_business(business_id)
        today = self._today()
        with self.transaction():
            row = self.repository.increment(business.id, today, "views")
        return ViewRecorded(business_id=business.id, date=today, views=row.views)

    @BaseService.measure_operation("business_analytics_summary")
    def summary(self, business_id: str, range_key: AnalyticsRange, user: User) -> AnalyticsSummary:
        business = self._get_business(business_id)
        if business.claimed_by_id != user.id and not user.is_admin:
            raise OwnershipRequiredException("Only the business owner can view analytics")

        start, end, previous_start, previous_end = range_bounds(range_key, self._today())

        total_views = self.repository.sum_views(business.id, start, end)
        previous_views = self.repository.sum_views(business.id, previous_start, previous_end)
        daily = [
            DailyCounters.model_validate(row) for row in self.repository.rows_between(business.id, start, end)
        ]

        return AnalyticsSummary(
            business_id=business.id,
            range=range_key,
            start_date=start,
            end_date=end,
            views=ViewsSummary(
                total=total_views,
                previous_period=previous_views,
                change_percent=percent_change(total_views, previous_views),
            ),
            reviews=self._reviews_summary(business.id, start),
            events=self._events_summary(business.id),
            daily=daily,
        )

    def _reviews_summary(self, business_id: str, start: date) -> ReviewsSummary:
        average, total = self.business_repository.rating_aggregates([business_id]).get(business_id, (0.0, 0))
        recent = self.review_repository.published_since(
            business_id, datetime.combine(start, time.min, tzinfo=timezone.utc)
        )

        by_day: "OrderedDict[date, List[int]]" = OrderedDict()
        for review in recent:
            by_day.setdefault(utc_naive(review.created_at).date(), []).append(review.rating)

        return ReviewsSummary(
            average_rating=round(average, 1),
            total=total,
            new_in_period=len(recent),
            over_time=[
                ReviewPoint(
                    date=day_date,
                    count=len(ratings),
                    average_rating=round(sum(ratings) / len(ratings), 2),
                )
                for day_date, ratings in by_day.items()
            ],
        )

    def _events_summary(self, business_id: str) -> EventsSummary:
        events = self.event_repository.for_business(business_id)
        now = utc_naive(datetime.now(timezone.utc))
        return EventsSummary(
            total=len(events),
            upcoming=sum(1 for event in events if utc_naive(event.start_date) > now),
            registrations=[
                EventRegistrations(
                    event_id=event.id, title=event.title, registrations=event.confirmed_registrations
                )
                for event in events
            ],
        )
