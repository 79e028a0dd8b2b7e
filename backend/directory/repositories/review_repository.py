# backend/directory/repositories/review_repository.py
"""
Repositories for the reviews system.

Follows repository pattern: no business logic, DB-only operations.
"""

from datetime import datetime
import logging
from typing import Dict, List, Optional, Tuple

from sqlalchemy import func
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Query, Session, joinedload, selectinload

from ..core.exceptions import RepositoryException
from ..models.review import Review, ReviewReport, ReviewResponse, ReviewStatus, ReviewVote
from .base_repository import BaseRepository

logger = logging.getLogger(__name__)


class ReviewRepository(BaseRepository[Review]):
    """Data access for `Review`."""

    def __init__(self, db: Session):
        super().__init__(db, Review)

    def _apply_eager_loading(self, query: Query) -> Query:
        return query.options(
            joinedload(Review.user),
            joinedload(Review.response),
            selectinload(Review.votes),
        )

    def _published_for(self, business_id: str) -> Query:
        return self._build_query().filter(
            Review.business_id == business_id, Review.status == ReviewStatus.PUBLISHED
        )

    def get_for_user(self, business_id: str, user_id: str) -> Optional[Review]:
        return self.find_one_by(business_id=business_id, user_id=user_id)

    def list_published(
        self, business_id: str, order_by: Tuple, offset: int, limit: int
    ) -> List[Review]:
        query = self._apply_eager_loading(self._published_for(business_id))
        return self._execute_query(query.order_by(*order_by).offset(offset).limit(limit))

    def count_published(self, business_id: str) -> int:
        try:
            return self._published_for(business_id).count()
        except SQLAlchemyError as e:
            self.logger.error(f"Error counting reviews: {e}")
            raise RepositoryException(f"Failed to count reviews: {e}")

    def helpful_counts_subquery(self):
        return (
            self.db.query(ReviewVote.review_id, func.count(ReviewVote.id).label("helpful"))
            .filter(ReviewVote.is_helpful.is_(True))
            .group_by(ReviewVote.review_id)
            .subquery()
        )

    def list_published_by_helpful(self, business_id: str, offset: int, limit: int) -> List[Review]:
        helpful = self.helpful_counts_subquery()
        query = (
            self._apply_eager_loading(self._published_for(business_id))
            .outerjoin(helpful, helpful.c.review_id == Review.id)
            .order_by(func.coalesce(helpful.c.helpful, 0).desc(), Review.created_at.desc(), Review.id)
        )
        return self._execute_query(query.offset(offset).limit(limit))

    def rating_distribution(self, business_id: str) -> Dict[int, int]:
        try:
            rows = (
                self.db.query(Review.rating, func.count(Review.id))
                .filter(Review.business_id == business_id, Review.status == ReviewStatus.PUBLISHED)
                .group_by(Review.rating)
                .all()
            )
        except SQLAlchemyError as e:
            self.logger.error(f"Error aggregating rating distribution: {e}")
            raise RepositoryException(f"Failed to aggregate ratings: {e}")
        return {int(rating): int(count) for rating, count in rows}

    def recommendation_counts(self, business_id: str) -> Tuple[int, int]:
        """Return (answered, recommended) over published reviews that answered the question."""
        try:
            rows = (
                self.db.query(Review.recommends_business, func.count(Review.id))
                .filter(
                    Review.business_id == business_id,
                    Review.status == ReviewStatus.PUBLISHED,
                    Review.recommends_business.isnot(None),
                )
                .group_by(Review.recommends_business)
                .all()
            )
        except SQLAlchemyError as e:
            self.logger.error(f"Error aggregating recommendations: {e}")
            raise RepositoryException(f"Failed to aggregate recommendations: {e}")
        answered = sum(int(count) for _, count in rows)
        recommended = sum(int(count) for flag, count in rows if flag)
        return answered, recommended

    def published_since(self, business_id: str, since: datetime) -> List[Review]:
        query = self._published_for(business_id).filter(Review.created_at >= since)
        return self._execute_query(query.order_by(Review.created_at))


class ReviewResponseRepository(BaseRepository[ReviewResponse]):
    def __init__(self, db: Session):
        super().__init__(db, ReviewResponse)


class ReviewVoteRepository(BaseRepository[ReviewVote]):
    def __init__(self, db: Session):
        super().__init__(db, ReviewVote)

    def get_for_user(self, review_id: str, user_id: str) -> Optional[ReviewVote]:
        return self.find_one_by(review_id=review_id, user_id=user_id)

    def helpful_count(self, review_id: str) -> int:
        return self.count(review_id=review_id, is_helpful=True)


class ReviewReportRepository(BaseRepository[ReviewReport]):
    def __init__(self, db: Session):
        super().__init__(db, ReviewReport)
