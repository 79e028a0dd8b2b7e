# backend/directory/services/claim_service.py
"""
Admin claim console.

Approving a claim hands the business to the claimant and marks the listing
verified; both rows change in a single transaction. Only open claims
(PENDING or IN_REVIEW) can be decided.
"""

from datetime import datetime, timezone
import logging
from typing import List, Optional

from sqlalchemy.orm import Session

from ..core.exceptions import BusinessRuleException, ConflictException, NotFoundException
from ..models.claim import BusinessClaim, ClaimStatus
from ..models.user import User
from ..repositories.claim_repository import ClaimRepository
from ..schemas.claim import ClaimOut, ClaimStats
from .base import BaseService

logger = logging.getLogger(__name__)


class ClaimService(BaseService):
    def __init__(self, db: Session):
        super().__init__(db)
        self.repository = ClaimRepository(db)

    def _get_or_404(self, claim_id: str) -> BusinessClaim:
        claim = self.repository.get_by_id(claim_id)
        if claim is None:
            raise NotFoundException("Claim not found", code="CLAIM_NOT_FOUND", details={"claim": claim_id})
        return claim

    def _require_open(self, claim: BusinessClaim) -> None:
        if not claim.is_open:
            raise BusinessRuleException("Claim already processed", code="CLAIM_ALREADY_PROCESSED")

    def list_claims(self, status: Optional[ClaimStatus] = None) -> List[ClaimOut]:
        """Pending claims first, newest first within each group."""
        return [ClaimOut.from_claim(claim) for claim in self.repository.list_for_review(status)]

    def get_claim(self, claim_id: str) -> ClaimOut:
        return ClaimOut.from_claim(self._get_or_404(claim_id))

    @BaseService.measure_operation("approve_claim")
    def approve(self, claim_id: str, admin: User, notes: Optional[str] = None) -> ClaimOut:
        claim = self._get_or_404(claim_id)
        self._require_open(claim)
        business = claim.business
        if business.claimed_by_id and business.claimed_by_id != claim.user_id:
            raise ConflictException("Business already claimed", code="BUSINESS_ALREADY_CLAIMED")

        now = datetime.now(timezone.utc)
        with self.transaction():
            claim.status = ClaimStatus.APPROVED
            claim.reviewed_at = now
            claim.notes = notes if notes is not None else claim.notes
            business.claimed_by_id = claim.user_id
            business.verified = True
            business.verified_at = now
            self.repository.flush()

        self.logger.info(
            f"Claim {claim.id} approved by admin {admin.id}; business {business.id} now owned by {claim.user_id}"
        )
        return ClaimOut.from_claim(claim)

    @BaseService.measure_operation("reject_claim")
    def reject(self, claim_id: str, admin: User, notes: Optional[str] = None) -> ClaimOut:
        claim = self._get_or_404(claim_id)
        self._require_open(claim)

        with self.transaction():
            claim.status = ClaimStatus.REJECTED
            claim.reviewed_at = datetime.now(timezone.utc)
            claim.notes = notes if notes is not None else claim.notes
            self.repository.flush()

        self.logger.info(f"Claim {claim.id} rejected by admin {admin.id}")
        return ClaimOut.from_claim(claim)

    def stats(self) -> ClaimStats:
        counts = self.repository.counts_by_status()
        return ClaimStats(
            total=sum(counts.values()),
            pending=counts.get(ClaimStatus.PENDING, 0),
            in_review=counts.get(ClaimStatus.IN_REVIEW, 0),
            approved=counts.get(ClaimStatus.APPROVED, 0),
            rejected=counts.get(ClaimStatus.REJECTED, 0),
            expired=counts.get(ClaimStatus.EXPIRED, 0),
            recent_pending=[ClaimOut.from_claim(claim) for claim in self.repository.recent_pending(5)],
        )
