"""
Database models for the Minnesota Business Directory.

The models are organized by functionality:
- Users (mirrored from the identity provider)
- Businesses with locations, hours, categories, amenities and social links
- Category tree
- Events and registrations
- Reviews with responses, votes and reports
- Ownership claims
- Daily analytics counters
"""

from .analytics import BusinessAnalytics
from .business import (
    Business,
    BusinessAmenity,
    BusinessCategory,
    BusinessHours,
    BusinessLocation,
    BusinessSocialLink,
    BusinessStatus,
)
from .category import Category
from .claim import BusinessClaim, ClaimStatus, VerificationType
from .event import Event, EventRegistration, EventStatus, RegistrationStatus
from .review import Review, ReviewReport, ReviewResponse, ReviewStatus, ReviewVote
from .user import User

__all__ = [
    "Business",
    "BusinessAmenity",
    "BusinessAnalytics",
    "BusinessCategory",
    "BusinessClaim",
    "BusinessHours",
    "BusinessLocation",
    "BusinessSocialLink",
    "BusinessStatus",
    "Category",
    "ClaimStatus",
    "Event",
    "EventRegistration",
    "EventStatus",
    "RegistrationStatus",
    "Review",
    "ReviewReport",
    "ReviewResponse",
    "ReviewStatus",
    "ReviewVote",
    "User",
    "VerificationType",
]
