# backend/directory/models/review.py
"""
Reviews & Ratings models.

Design notes:
- ULID string IDs everywhere (26 chars)
- One review per (business, user) via DB unique constraint
- Only PUBLISHED reviews count towards listings and aggregates
- A business owner may post a single response per review
"""

from datetime import datetime, timezone
from enum import Enum

import ulid
from sqlalchemy import Boolean, CheckConstraint, Column, DateTime
from sqlalchemy import Enum as SAEnum
from sqlalchemy import ForeignKey, Index, Integer, String, Text, UniqueConstraint
from sqlalchemy.orm import relationship

from ..database import Base
from .types import StringArrayType


class ReviewStatus(str, Enum):
    """Publication state for a review."""

    PENDING = "PENDING"
    PUBLISHED = "PUBLISHED"
    REJECTED = "REJECTED"
    FLAGGED = "FLAGGED"


class Review(Base):
    __tablename__ = "reviews"

    id = Column(String(26), primary_key=True, default=lambda: str(ulid.ULID()))
    business_id = Column(String(26), ForeignKey("businesses.id", ondelete="CASCADE"), nullable=False, index=True)
    user_id = Column(String(26), ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)

    rating = Column(Integer, nullable=False)
    title = Column(String(255), nullable=True)
    content = Column(Text, nullable=False)
    visit_date = Column(DateTime(timezone=True), nullable=True)
    recommends_business = Column(Boolean, nullable=True)
    photos = Column(StringArrayType(), nullable=True, default=list)

    status = Column(SAEnum(ReviewStatus, name="review_status"), nullable=False, default=ReviewStatus.PUBLISHED)

    created_at = Column(DateTime(timezone=True), nullable=False, default=lambda: datetime.now(timezone.utc))
    updated_at = Column(
        DateTime(timezone=True),
        nullable=True,
        default=lambda: datetime.now(timezone.utc),
        onupdate=lambda: datetime.now(timezone.utc),
    )
    edited_at = Column(DateTime(timezone=True), nullable=True)

    business = relationship("Business", back_populates="reviews")
    user = relationship("User", back_populates="reviews")
    response = relationship("ReviewResponse", uselist=False, back_populates="review", cascade="all, delete-orphan")
    votes = relationship("ReviewVote", back_populates="review", cascade="all, delete-orphan")
    reports = relationship("ReviewReport", back_populates="review", cascade="all, delete-orphan")

    __table_args__ = (
        UniqueConstraint("business_id", "user_id", name="uq_reviews_business_user"),
        CheckConstraint("rating >= 1 AND rating <= 5", name="ck_reviews_rating_range"),
        Index("idx_reviews_business_status", "business_id", "status"),
        Index("idx_reviews_created_at", "created_at"),
    )

    @property
    def helpful_count(self) -> int:
        return sum(1 for vote in self.votes if vote.is_helpful)


class ReviewResponse(Base):
    """Single owner reply to a review."""

    __tablename__ = "review_responses"

    id = Column(String(26), primary_key=True, default=lambda: str(ulid.ULID()))
    review_id = Column(String(26), ForeignKey("reviews.id", ondelete="CASCADE"), nullable=False, unique=True)
    user_id = Column(String(26), ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    content = Column(Text, nullable=False)
    created_at = Column(DateTime(timezone=True), nullable=False, default=lambda: datetime.now(timezone.utc))

    review = relationship("Review", back_populates="response")


class ReviewVote(Base):
    __tablename__ = "review_votes"

    id = Column(String(26), primary_key=True, default=lambda: str(ulid.ULID()))
    review_id = Column(String(26), ForeignKey("reviews.id", ondelete="CASCADE"), nullable=False, index=True)
    user_id = Column(String(26), ForeignKey("users.id", ondelete="CASCADE"), nullable=False)
    is_helpful = Column(Boolean, nullable=False)
    created_at = Column(DateTime(timezone=True), nullable=False, default=lambda: datetime.now(timezone.utc))

    review = relationship("Review", back_populates="votes")

    __table_args__ = (UniqueConstraint("review_id", "user_id", name="uq_review_votes_user"),)


class ReviewReport(Base):
    __tablename__ = "review_reports"

    id = Column(String(26), primary_key=True, default=lambda: str(ulid.ULID()))
    review_id = Column(String(26), ForeignKey("reviews.id", ondelete="CASCADE"), nullable=False, index=True)
    reporter_id = Column(String(26), ForeignKey("users.id", ondelete="CASCADE"), nullable=False)
    reason = Column(String(50), nullable=False)
    details = Column(Text, nullable=True)
    created_at = Column(DateTime(timezone=True), nullable=False, default=lambda: datetime.now(timezone.utc))

    review = relationship("Review", back_populates="reports")
