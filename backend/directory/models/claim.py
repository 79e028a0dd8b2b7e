# backend/directory/models/claim.py
"""Ownership claims submitted by users for unclaimed business listings."""

from datetime import datetime, timezone
from enum import Enum

import ulid
from sqlalchemy import JSON, Column, DateTime
from sqlalchemy import Enum as SAEnum
from sqlalchemy import ForeignKey, Index, String, Text
from sqlalchemy.orm import relationship

from ..database import Base
from .types import StringArrayType


class VerificationType(str, Enum):
    EMAIL = "EMAIL"
    PHONE = "PHONE"
    DOCUMENT = "DOCUMENT"
    PHYSICAL_MAIL = "PHYSICAL_MAIL"


class ClaimStatus(str, Enum):
    PENDING = "PENDING"
    IN_REVIEW = "IN_REVIEW"
    APPROVED = "APPROVED"
    REJECTED = "REJECTED"
    EXPIRED = "EXPIRED"


class BusinessClaim(Base):
    __tablename__ = "business_claims"

    id = Column(String(26), primary_key=True, default=lambda: str(ulid.ULID()))
    business_id = Column(String(26), ForeignKey("businesses.id", ondelete="CASCADE"), nullable=False, index=True)
    user_id = Column(String(26), ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    verification_type = Column(SAEnum(VerificationType, name="verification_type"), nullable=False)
    verification_data = Column(JSON, nullable=True)
    documents = Column(StringArrayType(), nullable=True, default=list)
    status = Column(SAEnum(ClaimStatus, name="claim_status"), nullable=False, default=ClaimStatus.PENDING)
    notes = Column(Text, nullable=True)
    submitted_at = Column(DateTime(timezone=True), nullable=False, default=lambda: datetime.now(timezone.utc))
    reviewed_at = Column(DateTime(timezone=True), nullable=True)

    business = relationship("Business")
    user = relationship("User")

    __table_args__ = (Index("idx_business_claims_status", "status", "submitted_at"),)

    @property
    def is_open(self) -> bool:
        return self.status in (ClaimStatus.PENDING, ClaimStatus.IN_REVIEW)
