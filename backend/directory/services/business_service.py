# backend/directory/services/business_service.py
"""
Business Service for the directory.

Handles listing lifecycle: creation by a signed-in user (who becomes the
owner), owner-only updates and deletion, public lookup by slug with
detail-view tracking, and ownership claims for unclaimed listings.
"""

from datetime import datetime, timezone
import logging
from typing import List

from sqlalchemy.orm import Session

from ..core.exceptions import (
    BusinessNotFoundException,
    ConflictException,
    OwnershipRequiredException,
    ValidationException,
)
from ..models.business import (
    Business,
    BusinessAmenity,
    BusinessCategory,
    BusinessLocation,
    BusinessSocialLink,
    BusinessStatus,
)
from ..models.claim import BusinessClaim, ClaimStatus
from ..models.user import User
from ..repositories.analytics_repository import AnalyticsRepository
from ..repositories.business_repository import BusinessRepository
from ..repositories.category_repository import CategoryRepository
from ..repositories.claim_repository import ClaimRepository
from ..schemas.business import (
    BusinessCreate,
    BusinessDetail,
    BusinessUpdate,
    ClaimCreate,
    ClaimSubmitted,
)
from ..utils.slugs import slugify
from .base import BaseService

logger = logging.getLogger(__name__)


class BusinessService(BaseService):
    """Service layer for business listings."""

    def __init__(self, db: Session):
        super().__init__(db)
        self.repository = BusinessRepository(db)
        self.category_repository = CategoryRepository(db)
        self.claim_repository = ClaimRepository(db)
        self.analytics_repository = AnalyticsRepository(db)

    def _get_or_404(self, business_id: str) -> Business:
        business = self.repository.get_by_id(business_id)
        if business is None:
            raise BusinessNotFoundException(business_id)
        return business

    def _require_owner(self, business: Business, user: User) -> None:
        if business.claimed_by_id != user.id:
            raise OwnershipRequiredException()

    def _category_links(self, category_ids: List[str]) -> List[BusinessCategory]:
        unique_ids = list(dict.fromkeys(category_ids))
        found = {category.id for category in self.category_repository.get_many(unique_ids)}
        missing = [cid for cid in unique_ids if cid not in found]
        if missing:
            raise ValidationException(
                "Unknown categories",
                details={"categoryIds": missing},
                fields=["categoryIds"],
            )
        # First category listed is the primary one
        return [
            BusinessCategory(category_id=cid, is_primary=index == 0)
            for index, cid in enumerate(unique_ids)
        ]

    def _detail(self, business: Business) -> BusinessDetail:
        average, count = self.repository.rating_aggregates([business.id]).get(business.id, (0.0, 0))
        return BusinessDetail.from_business(business, average_rating=average, review_count=count)

    @BaseService.measure_operation("get_business_by_slug")
    def get_by_slug(self, slug: str) -> BusinessDetail:
        """Public detail page; counts a detail view for today."""
        business = self.repository.get_by_slug(slug)
        if business is None:
            raise BusinessNotFoundException(slug)

        with self.transaction():
            self.analytics_repository.increment(
                business.id, datetime.now(timezone.utc).date(), "detail_views"
            )
        return self._detail(business)

    @BaseService.measure_operation("get_public_business")
    def get_public(self, id_or_slug: str) -> BusinessDetail:
        """Key-authenticated read: ACTIVE listings only, no view tracking."""
        business = self.repository.get_active_by_id_or_slug(id_or_slug)
        if business is None:
            raise BusinessNotFoundException(id_or_slug)
        return self._detail(business)

    @BaseService.measure_operation("create_business")
    def create_business(self, data: BusinessCreate, user: User) -> BusinessDetail:
        slug = slugify(data.name)
        if not slug:
            raise ValidationException("Business name must contain letters or digits", fields=["name"])
        if self.repository.slug_exists(slug):
            raise ConflictException(
                "A business with this name already exists",
                code="BUSINESS_SLUG_TAKEN",
                details={"slug": slug},
            )

        links = self._category_links(data.category_ids)
        location = data.location
        business = Business(
            slug=slug,
            name=data.name,
            description=data.description,
            short_description=data.short_description,
            logo=data.logo,
            cover_image=data.cover_image,
            website=str(data.website) if data.website else None,
            email=data.email,
            phone=data.phone,
            year_established=data.year_established,
            employee_count=data.employee_count,
            keywords=data.keywords,
            status=BusinessStatus.PENDING,
            claimed_by_id=user.id,
            categories=links,
            locations=[
                BusinessLocation(
                    name=location.name,
                    is_primary=True,
                    address1=location.address1,
                    address2=location.address2,
                    city=location.city,
                    state=location.state,
                    zip_code=location.zip_code,
                    latitude=location.latitude,
                    longitude=location.longitude,
                )
            ],
            amenities=[BusinessAmenity(name=name) for name in dict.fromkeys(data.amenities)],
            social_links=[
                BusinessSocialLink(platform=link.platform, url=str(link.url)) for link in data.social_links
            ],
        )

        with self.transaction():
            self.repository.add(business)

        self.logger.info(f"Business {business.id} ({slug}) created by user {user.id}")
        return self._detail(self._get_or_404(business.id))

    @BaseService.measure_operation("update_business")
    def update_business(self, business_id: str, data: BusinessUpdate, user: User) -> BusinessDetail:
        business = self._get_or_404(business_id)
        self._require_owner(business, user)

        changes = data.model_dump(exclude_unset=True)
        category_ids = changes.pop("category_ids", None)
        if "website" in changes and changes["website"] is not None:
            changes["website"] = str(data.website)

        with self.transaction():
            for field, value in changes.items():
                setattr(business, field, value)
            if category_ids is not None:
                business.categories = self._category_links(category_ids)
            self.repository.flush()

        return self._detail(self._get_or_404(business.id))

    @BaseService.measure_operation("delete_business")
    def delete_business(self, business_id: str, user: User) -> None:
        business = self._get_or_404(business_id)
        self._require_owner(business, user)

        with self.transaction():
            self.repository.delete(business.id)
        self.logger.info(f"Business {business_id} deleted by owner {user.id}")

    @BaseService.measure_operation("submit_claim")
    def submit_claim(self, business_id: str, data: ClaimCreate, user: User) -> ClaimSubmitted:
        business = self._get_or_404(business_id)
        if business.claimed_by_id:
            raise ConflictException("Business already claimed", code="BUSINESS_ALREADY_CLAIMED")
        if self.claim_repository.open_claim_for(business.id, user.id) is not None:
            raise ConflictException(
                "You already have a claim awaiting review for this business",
                code="CLAIM_ALREADY_OPEN",
            )

        with self.transaction():
            claim: BusinessClaim = self.claim_repository.create(
                business_id=business.id,
                user_id=user.id,
                verification_type=data.verification_type,
                verification_data=data.verification_data,
                documents=data.documents,
                notes=data.notes,
                status=ClaimStatus.PENDING,
            )

        self.logger.info(f"Claim {claim.id} submitted for business {business.id} by user {user.id}")
        return ClaimSubmitted.model_validate(claim)
