# backend/directory/models/analytics.py
"""Daily per-business traffic counters."""

import ulid
from sqlalchemy import Column, Date, ForeignKey, Integer, String, UniqueConstraint

from ..database import Base


class BusinessAnalytics(Base):
    __tablename__ = "business_analytics"

    id = Column(String(26), primary_key=True, default=lambda: str(ulid.ULID()))
    business_id = Column(String(26), ForeignKey("businesses.id", ondelete="CASCADE"), nullable=False, index=True)
    date = Column(Date, nullable=False)
    views = Column(Integer, nullable=False, default=0)
    detail_views = Column(Integer, nullable=False, default=0)
    website_clicks = Column(Integer, nullable=False, default=0)
    phone_clicks = Column(Integer, nullable=False, default=0)
    directions_clicks = Column(Integer, nullable=False, default=0)
    search_impressions = Column(Integer, nullable=False, default=0)
    search_clicks = Column(Integer, nullable=False, default=0)

    __table_args__ = (UniqueConstraint("business_id", "date", name="uq_business_analytics_day"),)
