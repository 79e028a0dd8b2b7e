"""Business analytics schemas."""
import datetime
from typing import List, Literal, Optional

from pydantic import Field

from .base import StandardizedModel

AnalyticsRange = Literal["7d", "30d", "90d", "1y"]


class DailyCounters(StandardizedModel):
    date: datetime.date
    views: int = 0
    detail_views: int = 0
    website_clicks: int = 0
    phone_clicks: int = 0
    directions_clicks: int = 0
    search_impressions: int = 0
    search_clicks: int = 0


class ViewsSummary(StandardizedModel):
    total: int
    previous_period: int
    change_percent: Optional[float] = None


class ReviewPoint(StandardizedModel):
    date: datetime.date
    count: int
    average_rating: float


class ReviewsSummary(StandardizedModel):
    average_rating: float
    total: int
    new_in_period: int
    over_time: List[ReviewPoint] = Field(default_factory=list)


class EventRegistrations(StandardizedModel):
    event_id: str
    title: str
    registrations: int


class EventsSummary(StandardizedModel):
    total: int
    upcoming: int
    registrations: List[EventRegistrations] = Field(default_factory=list)


class AnalyticsSummary(StandardizedModel):
    business_id: str
    range: AnalyticsRange
    start_date: datetime.date
    end_date: datetime.date
    views: ViewsSummary
    reviews: ReviewsSummary
    events: EventsSummary
    daily: List[DailyCounters] = Field(default_factory=list)


class ViewRecorded(StandardizedModel):
    business_id: str
    date: datetime.date
    views: int
