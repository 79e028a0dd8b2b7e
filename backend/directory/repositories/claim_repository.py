# backend/directory/repositories/claim_repository.py
"""Repository for business ownership claims."""

import logging
from typing import Dict, List, Optional

from sqlalchemy import case, func
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Query, Session, joinedload

from ..core.exceptions import RepositoryException
from ..models.claim import BusinessClaim, ClaimStatus
from .base_repository import BaseRepository

logger = logging.getLogger(__name__)


class ClaimRepository(BaseRepository[BusinessClaim]):
    def __init__(self, db: Session):
        super().__init__(db, BusinessClaim)

    def _apply_eager_loading(self, query: Query) -> Query:
        return query.options(joinedload(BusinessClaim.business), joinedload(BusinessClaim.user))

    def list_for_review(self, status: Optional[ClaimStatus] = None) -> List[BusinessClaim]:
        """Pending claims first, then newest first."""
        pending_first = case((BusinessClaim.status == ClaimStatus.PENDING, 0), else_=1)
        query = self._apply_eager_loading(self._build_query())
        if status is not None:
            query = query.filter(BusinessClaim.status == status)
        return self._execute_query(
            query.order_by(pending_first, BusinessClaim.submitted_at.desc(), BusinessClaim.id)
        )

    def open_claim_for(self, business_id: str, user_id: str) -> Optional[BusinessClaim]:
        try:
            return (
                self._build_query()
                .filter(
                    BusinessClaim.business_id == business_id,
                    BusinessClaim.user_id == user_id,
                    BusinessClaim.status.in_([ClaimStatus.PENDING, ClaimStatus.IN_REVIEW]),
                )
                .first()
            )
        except SQLAlchemyError as e:
            self.logger.error(f"Error looking up open claim: {e}")
            raise RepositoryException(f"Failed to look up claim: {e}")

    def counts_by_status(self) -> Dict[ClaimStatus, int]:
        try:
            rows = (
                self.db.query(BusinessClaim.status, func.count(BusinessClaim.id))
                .group_by(BusinessClaim.status)
                .all()
            )
        except SQLAlchemyError as e:
            self.logger.error(f"Error counting claims: {e}")
            raise RepositoryException(f"Failed to count claims: {e}")
        return {ClaimStatus(status): int(count) for status, count in rows}

    def recent_pending(self, limit: int = 5) -> List[BusinessClaim]:
        query = (
            self._apply_eager_loading(self._build_query())
            .filter(BusinessClaim.status == ClaimStatus.PENDING)
            .order_by(BusinessClaim.submitted_at.desc(), BusinessClaim.id)
            .limit(limit)
        )
        return self._execute_query(query)
