"""
Repository layer for the directory.

Repositories own all SQLAlchemy queries; services own business rules and
transaction boundaries.
"""

from .analytics_repository import AnalyticsRepository
from .base_repository import BaseRepository
from .business_repository import BusinessRepository
from .category_repository import CategoryRepository
from .claim_repository import ClaimRepository
from .event_repository import EventRegistrationRepository, EventRepository
from .review_repository import (
    ReviewReportRepository,
    ReviewRepository,
    ReviewResponseRepository,
    ReviewVoteRepository,
)
from .user_repository import UserRepository

__all__ = [
    "AnalyticsRepository",
    "BaseRepository",
    "BusinessRepository",
    "CategoryRepository",
    "ClaimRepository",
    "EventRegistrationRepository",
    "EventRepository",
    "ReviewReportRepository",
    "ReviewRepository",
    "ReviewResponseRepository",
    "ReviewVoteRepository",
    "UserRepository",
]
