"""Admin claim console schemas."""
from datetime import datetime
from typing import TYPE_CHECKING, Any, Dict, List, Optional

from pydantic import Field

from ..models.claim import ClaimStatus, VerificationType
from .base import StandardizedModel, StrictRequestModel

if TYPE_CHECKING:
    from ..models.claim import BusinessClaim


class ClaimBusinessRef(StandardizedModel):
    id: str
    slug: str
    name: str
    verified: bool = False
    claimed_by_id: Optional[str] = None


class ClaimUserRef(StandardizedModel):
    id: str
    name: Optional[str] = None
    email: str


class ClaimOut(StandardizedModel):
    id: str
    status: ClaimStatus
    verification_type: VerificationType
    verification_data: Optional[Dict[str, Any]] = None
    documents: List[str] = Field(default_factory=list)
    notes: Optional[str] = None
    submitted_at: datetime
    reviewed_at: Optional[datetime] = None
    business: Optional[ClaimBusinessRef] = None
    user: Optional[ClaimUserRef] = None

    @classmethod
    def from_claim(cls, claim: "BusinessClaim") -> "ClaimOut":
        return cls(
            id=claim.id,
            status=claim.status,
            verification_type=claim.verification_type,
            verification_data=claim.verification_data,
            documents=list(claim.documents or []),
            notes=claim.notes,
            submitted_at=claim.submitted_at,
            reviewed_at=claim.reviewed_at,
            business=ClaimBusinessRef.model_validate(claim.business) if claim.business else None,
            user=ClaimUserRef.model_validate(claim.user) if claim.user else None,
        )


class ClaimDecision(StrictRequestModel):
    notes: Optional[str] = Field(default=None, max_length=2000)


class ClaimStats(StandardizedModel):
    total: int
    pending: int
    in_review: int
    approved: int
    rejected: int
    expired: int
    recent_pending: List[ClaimOut] = Field(default_factory=list)
