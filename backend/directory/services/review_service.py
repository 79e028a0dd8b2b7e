# backend/directory/services/review_service.py
"""
ReviewService: business logic for business reviews.

Implements:
- Published-only listing with sort + pagination
- Rating statistics (average, 1-5 distribution, recommendation rate)
- One review per user per business; author-only edits
- Helpful votes (one per user, upserted)
- Single owner response per review
- Abuse reports, persisted and logged for moderation
"""

from __future__ import annotations

from datetime import datetime, timezone
import logging
from typing import Dict, Tuple

from sqlalchemy.orm import Session

from ..core.exceptions import (
    BusinessNotFoundException,
    ConflictException,
    ForbiddenException,
    NotFoundException,
)
from ..models.review import Review, ReviewStatus
from ..models.user import User
from ..repositories.business_repository import BusinessRepository
from ..repositories.review_repository import (
    ReviewReportRepository,
    ReviewRepository,
    ReviewResponseRepository,
    ReviewVoteRepository,
)
from ..schemas.common import PaginationMeta, Paginated
from ..schemas.review import (
    ReportAccepted,
    ReviewCreate,
    ReviewOut,
    ReviewReportIn,
    ReviewResponseIn,
    ReviewResponseOut,
    ReviewSort,
    ReviewStats,
    ReviewUpdate,
    VoteResult,
)
from .base import BaseService
from .search.pagination import total_pages

logger = logging.getLogger(__name__)

RATING_VALUES = (1, 2, 3, 4, 5)

_ORDERINGS: Dict[str, Tuple] = {
    "recent": (Review.created_at.desc(), Review.id),
    "rating-high": (Review.rating.desc(), Review.created_at.desc(), Review.id),
    "rating-low": (Review.rating.asc(), Review.created_at.desc(), Review.id),
}


class ReviewService(BaseService):
    """Service layer for reviews & ratings."""

    def __init__(self, db: Session) -> None:
        super().__init__(db)
        self.repository = ReviewRepository(db)
        self.response_repository = ReviewResponseRepository(db)
        self.vote_repository = ReviewVoteRepository(db)
        self.report_repository = ReviewReportRepository(db)
        self.business_repository = BusinessRepository(db)

    def _get_or_404(self, review_id: str) -> Review:
        review = self.repository.get_by_id(review_id)
        if review is None:
            raise NotFoundException("Review not found", code="REVIEW_NOT_FOUND", details={"review": review_id})
        return review

    @BaseService.measure_operation("list_reviews")
    def list_reviews(
        self, business_id: str, sort: ReviewSort = "recent", page: int = 1, limit: int = 10
    ) -> Paginated[ReviewOut]:
        offset = (page - 1) * limit
        if sort == "helpful":
            reviews = self.repository.list_published_by_helpful(business_id, offset, limit)
        else:
            reviews = self.repository.list_published(business_id, _ORDERINGS[sort], offset, limit)
        total = self.repository.count_published(business_id)

        return Paginated[ReviewOut](
            data=[ReviewOut.from_review(review) for review in reviews],
            pagination=PaginationMeta(
                page=page, limit=limit, total=total, total_pages=total_pages(total, limit)
            ),
        )

    @BaseService.measure_operation("review_stats")
    def get_stats(self, business_id: str) -> ReviewStats:
        distribution = self.repository.rating_distribution(business_id)
        total = sum(distribution.values())
        if total == 0:
            return ReviewStats(
                average_rating=0.0,
                total_reviews=0,
                rating_distribution={str(r): 0 for r in RATING_VALUES},
                recommendation_rate=0,
            )

        average = sum(rating * count for rating, count in distribution.items()) / total
        _, recommended = self.repository.recommendation_counts(business_id)
        return ReviewStats(
            average_rating=round(average, 1),
            total_reviews=total,
            rating_distribution={str(r): distribution.get(r, 0) for r in RATING_VALUES},
            recommendation_rate=round(recommended / total * 100),
        )

    @BaseService.measure_operation("create_review")
    def create_review(self, data: ReviewCreate, user: User) -> ReviewOut:
        if self.business_repository.get_by_id(data.business_id, load_relationships=False) is None:
            raise BusinessNotFoundException(data.business_id)
        if self.repository.get_for_user(data.business_id, user.id) is not None:
            raise ConflictException("You have already reviewed this business", code="REVIEW_EXISTS")

        with self.transaction():
            review = self.repository.create(
                user_id=user.id,
                status=ReviewStatus.PUBLISHED,
                **data.model_dump(),
            )

        self.logger.info(f"Review {review.id} created for business {data.business_id}")
        return ReviewOut.from_review(self._get_or_404(review.id))

    @BaseService.measure_operation("update_review")
    def update_review(self, review_id: str, data: ReviewUpdate, user: User) -> ReviewOut:
        review = self._get_or_404(review_id)
        if review.user_id != user.id:
            raise ForbiddenException("You can only edit your own review", code="NOT_REVIEW_AUTHOR")

        with self.transaction():
            for field, value in data.model_dump(exclude_unset=True).items():
                setattr(review, field, value)
            review.edited_at = datetime.now(timezone.utc)
            self.repository.flush()

        return ReviewOut.from_review(review)

    @BaseService.measure_operation("delete_review")
    def delete_review(self, review_id: str, user: User) -> None:
        review = self._get_or_404(review_id)
        if review.user_id != user.id and not user.is_admin:
            raise ForbiddenException("You can only delete your own review", code="NOT_REVIEW_AUTHOR")

        with self.transaction():
            self.repository.delete(review.id)

    @BaseService.measure_operation("vote_review")
    def vote(self, review_id: str, is_helpful: bool, user: User) -> VoteResult:
        review = self._get_or_404(review_id)

        with self.transaction():
            vote = self.vote_repository.get_for_user(review.id, user.id)
            if vote is None:
                self.vote_repository.create(review_id=review.id, user_id=user.id, is_helpful=is_helpful)
            else:
                vote.is_helpful = is_helpful
                self.vote_repository.flush()

        return VoteResult(
            review_id=review.id,
            is_helpful=is_helpful,
            helpful_count=self.vote_repository.helpful_count(review.id),
        )

    @BaseService.measure_operation("respond_to_review")
    def respond(self, review_id: str, data: ReviewResponseIn, user: User) -> ReviewResponseOut:
        review = self._get_or_404(review_id)
        business = self.business_repository.get_by_id(review.business_id, load_relationships=False)
        if business is None or business.claimed_by_id != user.id:
            raise ForbiddenException(
                "Only business owners can respond to reviews", code="NOT_BUSINESS_OWNER"
            )
        if review.response is not None:
            raise ConflictException("Review already has a response", code="RESPONSE_EXISTS")

        with self.transaction():
            response = self.response_repository.create(
                review_id=review.id, user_id=user.id, content=data.content
            )

        return ReviewResponseOut.model_validate(response)

    @BaseService.measure_operation("report_review")
    def report(self, review_id: str, data: ReviewReportIn, user: User) -> ReportAccepted:
        review = self._get_or_404(review_id)

        with self.transaction():
            report = self.report_repository.create(
                review_id=review.id, reporter_id=user.id, reason=data.reason, details=data.details
            )

        self.logger.warning(
            f"Review {review.id} reported by user {user.id}: {data.reason} - {data.details or ''}"
        )
        return ReportAccepted(id=report.id, review_id=review.id, reason=report.reason)
