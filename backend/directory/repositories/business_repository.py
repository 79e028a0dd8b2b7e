# backend/directory/repositories/business_repository.py
"""
Business Repository.

Data access for business listings: slug lookups, search candidate fetches
with eager-loaded locations and categories, and published-review aggregates.
No business logic lives here.
"""

import logging
from typing import Dict, Iterable, List, Optional, Sequence, Tuple

from sqlalchemy import func, or_
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Query, Session, joinedload, selectinload

from ..core.exceptions import RepositoryException
from ..models.business import Business, BusinessCategory, BusinessLocation, BusinessStatus
from ..models.review import Review, ReviewStatus
from .base_repository import BaseRepository

logger = logging.getLogger(__name__)

RatingAggregate = Tuple[float, int]


class BusinessRepository(BaseRepository[Business]):
    """Repository for Business and its child rows."""

    sort_columns = {"name": func.lower(Business.name), "createdAt": Business.created_at}

    def __init__(self, db: Session):
        super().__init__(db, Business)

    def _apply_eager_loading(self, query: Query) -> Query:
        return query.options(
            selectinload(Business.locations).selectinload(BusinessLocation.hours),
            selectinload(Business.categories).joinedload(BusinessCategory.category),
            selectinload(Business.amenities),
            selectinload(Business.social_links),
            joinedload(Business.claimed_by),
        )

    def get_by_slug(self, slug: str) -> Optional[Business]:
        try:
            query = self._apply_eager_loading(self._build_query().filter(Business.slug == slug))
            return query.first()
        except SQLAlchemyError as e:
            self.logger.error(f"Error getting business by slug {slug}: {str(e)}")
            raise RepositoryException(f"Failed to retrieve business: {str(e)}")

    def get_active_by_id_or_slug(self, key: str) -> Optional[Business]:
        """ACTIVE listing whose id or slug equals ``key``."""
        query = self._build_query().filter(
            or_(Business.id == key, Business.slug == key),
            Business.status == BusinessStatus.ACTIVE,
        )
        try:
            return self._apply_eager_loading(query).first()
        except SQLAlchemyError as e:
            self.logger.error(f"Error getting business {key}: {str(e)}")
            raise RepositoryException(f"Failed to retrieve business: {str(e)}")

    def slug_exists(self, slug: str, exclude_id: Optional[str] = None) -> bool:
        try:
            query = self.db.query(Business.id).filter(Business.slug == slug)
            if exclude_id:
                query = query.filter(Business.id != exclude_id)
            return query.first() is not None
        except SQLAlchemyError as e:
            self.logger.error(f"Error checking slug {slug}: {str(e)}")
            raise RepositoryException(f"Failed to check slug: {str(e)}")

    def rating_aggregates(self, business_ids: Iterable[str]) -> Dict[str, RatingAggregate]:
        """Return {business_id: (average_rating, review_count)} over published reviews."""
        ids = list(business_ids)
        if not ids:
            return {}
        try:
            rows = (
                self.db.query(Review.business_id, func.avg(Review.rating), func.count(Review.id))
                .filter(Review.business_id.in_(ids), Review.status == ReviewStatus.PUBLISHED)
                .group_by(Review.business_id)
                .all()
            )
        except SQLAlchemyError as e:
            self.logger.error(f"Error aggregating ratings: {str(e)}")
            raise RepositoryException(f"Failed to aggregate ratings: {str(e)}")
        return {row[0]: (float(row[1] or 0.0), int(row[2] or 0)) for row in rows}

    def find_sharing_categories(
        self, category_ids: Sequence[str], exclude_id: str, cap: int
    ) -> List[Business]:
        """Active businesses that share at least one category with the target."""
        if not category_ids:
            return []
        query = self._apply_eager_loading(self._build_query()).filter(
            Business.id != exclude_id,
            Business.status == BusinessStatus.ACTIVE,
            Business.categories.any(BusinessCategory.category_id.in_(list(category_ids))),
        )
        return self._execute_query(query.order_by(Business.id).limit(cap))

    def find_featured(self, cap: int) -> List[Business]:
        query = self._apply_eager_loading(self._build_query()).filter(
            Business.status == BusinessStatus.ACTIVE, Business.featured.is_(True)
        )
        return self._execute_query(query.order_by(Business.id).limit(cap))

    def find_active_matching_terms(self, terms: Sequence[str], limit: int) -> List[Business]:
        """Active businesses whose name or description contains any of ``terms``."""
        if not terms:
            return []
        clauses = []
        for term in terms:
            pattern = f"%{term}%"
            clauses.append(Business.name.ilike(pattern))
            clauses.append(Business.description.ilike(pattern))
        query = (
            self._build_query()
            .options(selectinload(Business.locations))
            .filter(Business.status == BusinessStatus.ACTIVE, or_(*clauses))
            .order_by(Business.featured.desc(), Business.verified.desc(), Business.id)
            .limit(limit)
        )
        return self._execute_query(query)

    def owned_by(self, user_id: str) -> List[Business]:
        return self._execute_query(
            self._build_query().filter(Business.claimed_by_id == user_id).order_by(Business.name)
        )
