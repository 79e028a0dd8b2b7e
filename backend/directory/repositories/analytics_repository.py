# backend/directory/repositories/analytics_repository.py
"""Repository for daily business analytics counters."""

from datetime import date
import logging
from typing import List, Optional

from sqlalchemy import func
from sqlalchemy.orm import Session

from ..models.analytics import BusinessAnalytics
from .base_repository import BaseRepository

logger = logging.getLogger(__name__)

COUNTER_FIELDS = (
    "views",
    "detail_views",
    "website_clicks",
    "phone_clicks",
    "directions_clicks",
    "search_impressions",
    "search_clicks",
)


class AnalyticsRepository(BaseRepository[BusinessAnalytics]):
    def __init__(self, db: Session):
        super().__init__(db, BusinessAnalytics)

    def get_day(self, business_id: str, day: date) -> Optional[BusinessAnalytics]:
        return self.find_one_by(business_id=business_id, date=day)

    def increment(self, business_id: str, day: date, field: str, amount: int = 1) -> BusinessAnalytics:
        """Upsert the day's row and bump one counter."""
        if field not in COUNTER_FIELDS:
            raise ValueError(f"Unknown analytics counter: {field}")
        row = self.get_day(business_id, day)
        if row is None:
            row = self.create(business_id=business_id, date=day, **{f: 0 for f in COUNTER_FIELDS})
        setattr(row, field, (getattr(row, field) or 0) + amount)
        self.flush()
        return row

    def rows_between(self, business_id: str, start: date, end: date) -> List[BusinessAnalytics]:
        query = (
            self._build_query()
            .filter(
                BusinessAnalytics.business_id == business_id,
                BusinessAnalytics.date >= start,
                BusinessAnalytics.date <= end,
            )
            .order_by(BusinessAnalytics.date)
        )
        return self._execute_query(query)

    def sum_views(self, business_id: str, start: date, end: date) -> int:
        query = self.db.query(
            func.coalesce(func.sum(BusinessAnalytics.views + BusinessAnalytics.detail_views), 0)
        ).filter(
            BusinessAnalytics.business_id == business_id,
            BusinessAnalytics.date >= start,
            BusinessAnalytics.date <= end,
        )
        return int(self._execute_scalar(query) or 0)
