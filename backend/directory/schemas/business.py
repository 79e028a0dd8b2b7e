"""
Business request/response schemas.

Search results are rendered from immutable ScoredCandidate projections; the
internal relevance score is never part of the response.
"""
from datetime import datetime
from typing import TYPE_CHECKING, Any, Dict, List, Optional

from pydantic import EmailStr, Field, HttpUrl, field_validator

from ..core.constants import DEFAULT_STATE, MAX_NAME_LENGTH, MAX_SHORT_DESCRIPTION_LENGTH
from ..models.business import BusinessStatus
from ..models.claim import ClaimStatus, VerificationType
from .base import StandardizedModel, StrictRequestModel

if TYPE_CHECKING:
    from ..models.business import Business, BusinessLocation
    from ..services.search.candidates import ScoredCandidate


class BusinessHoursOut(StandardizedModel):
    day_of_week: int
    open_time: Optional[str] = None
    close_time: Optional[str] = None
    is_closed: bool = False


class LocationOut(StandardizedModel):
    id: str
    name: Optional[str] = None
    is_primary: bool = False
    address1: str
    address2: Optional[str] = None
    city: str
    state: str
    zip_code: str
    country: str
    latitude: Optional[float] = None
    longitude: Optional[float] = None


class LocationDetail(LocationOut):
    hours: List[BusinessHoursOut] = Field(default_factory=list)


class CategoryRef(StandardizedModel):
    id: str
    slug: str
    name: str
    is_primary: bool = False


class AmenityOut(StandardizedModel):
    name: str
    icon: Optional[str] = None


class SocialLinkOut(StandardizedModel):
    platform: str
    url: str


def _category_refs(business: "Business") -> List[CategoryRef]:
    refs = [
        CategoryRef(
            id=link.category.id,
            slug=link.category.slug,
            name=link.category.name,
            is_primary=bool(link.is_primary),
        )
        for link in business.categories
        if link.category is not None
    ]
    # Primary first, then by name for a stable rendering
    return sorted(refs, key=lambda ref: (not ref.is_primary, ref.name.lower()))


def _location(location: Optional["BusinessLocation"]) -> Optional[LocationOut]:
    return LocationOut.model_validate(location) if location is not None else None


class BusinessSummary(StandardizedModel):
    """Search and listing item."""

    id: str
    slug: str
    name: str
    short_description: Optional[str] = None
    description: Optional[str] = None
    logo: Optional[str] = None
    cover_image: Optional[str] = None
    website: Optional[str] = None
    phone: Optional[str] = None
    status: BusinessStatus
    verified: bool
    featured: bool
    categories: List[CategoryRef] = Field(default_factory=list)
    location: Optional[LocationOut] = None
    average_rating: float = 0.0
    review_count: int = 0
    distance: Optional[float] = None
    created_at: Optional[datetime] = None

    @classmethod
    def from_business(
        cls,
        business: "Business",
        average_rating: float = 0.0,
        review_count: int = 0,
        distance: Optional[float] = None,
    ) -> "BusinessSummary":
        return cls(
            id=business.id,
            slug=business.slug,
            name=business.name,
            short_description=business.short_description,
            description=business.description,
            logo=business.logo,
            cover_image=business.cover_image,
            website=business.website,
            phone=business.phone,
            status=business.status,
            verified=bool(business.verified),
            featured=bool(business.featured),
            categories=_category_refs(business),
            location=_location(business.primary_location),
            average_rating=round(average_rating, 2),
            review_count=review_count,
            distance=round(distance, 2) if distance is not None else None,
            created_at=business.created_at,
        )

    @classmethod
    def from_scored(cls, result: "ScoredCandidate") -> "BusinessSummary":
        candidate = result.candidate
        return cls.from_business(
            candidate.source,
            average_rating=candidate.average_rating,
            review_count=candidate.review_count,
            distance=result.distance,
        )


class BusinessDetail(BusinessSummary):
    email: Optional[str] = None
    year_established: Optional[int] = None
    employee_count: Optional[str] = None
    keywords: List[str] = Field(default_factory=list)
    verified_at: Optional[datetime] = None
    featured_until: Optional[datetime] = None
    claimed_by_id: Optional[str] = None
    locations: List[LocationDetail] = Field(default_factory=list)
    amenities: List[AmenityOut] = Field(default_factory=list)
    social_links: List[SocialLinkOut] = Field(default_factory=list)
    updated_at: Optional[datetime] = None

    @classmethod
    def from_business(
        cls,
        business: "Business",
        average_rating: float = 0.0,
        review_count: int = 0,
        distance: Optional[float] = None,
    ) -> "BusinessDetail":
        summary = BusinessSummary.from_business(business, average_rating, review_count, distance)
        return cls(
            **summary.model_dump(),
            email=business.email,
            year_established=business.year_established,
            employee_count=business.employee_count,
            keywords=list(business.keywords or []),
            verified_at=business.verified_at,
            featured_until=business.featured_until,
            claimed_by_id=business.claimed_by_id,
            locations=[LocationDetail.model_validate(loc) for loc in business.locations],
            amenities=[AmenityOut.model_validate(a) for a in business.amenities],
            social_links=[SocialLinkOut.model_validate(s) for s in business.social_links],
            updated_at=business.updated_at,
        )


class LocationCreate(StrictRequestModel):
    name: Optional[str] = Field(default=None, max_length=255)
    address1: str = Field(min_length=1, max_length=255)
    address2: Optional[str] = Field(default=None, max_length=255)
    city: str = Field(min_length=1, max_length=100)
    state: str = Field(default=DEFAULT_STATE, min_length=2, max_length=2)
    zip_code: str = Field(min_length=5, max_length=10)
    latitude: Optional[float] = Field(default=None, ge=-90, le=90)
    longitude: Optional[float] = Field(default=None, ge=-180, le=180)


class SocialLinkIn(StrictRequestModel):
    platform: str = Field(min_length=1, max_length=50)
    url: HttpUrl


class BusinessCreate(StrictRequestModel):
    name: str = Field(min_length=1, max_length=MAX_NAME_LENGTH)
    description: Optional[str] = None
    short_description: Optional[str] = Field(default=None, max_length=MAX_SHORT_DESCRIPTION_LENGTH)
    logo: Optional[str] = None
    cover_image: Optional[str] = None
    website: Optional[HttpUrl] = None
    email: Optional[EmailStr] = None
    phone: Optional[str] = Field(default=None, max_length=30)
    year_established: Optional[int] = Field(default=None, ge=1800, le=2100)
    employee_count: Optional[str] = Field(default=None, max_length=30)
    keywords: List[str] = Field(default_factory=list)
    category_ids: List[str] = Field(min_length=1)
    location: LocationCreate
    amenities: List[str] = Field(default_factory=list)
    social_links: List[SocialLinkIn] = Field(default_factory=list)

    @field_validator("name")
    @classmethod
    def _strip_name(cls, value: str) -> str:
        value = value.strip()
        if not value:
            raise ValueError("name must not be blank")
        return value


class BusinessUpdate(StrictRequestModel):
    name: Optional[str] = Field(default=None, min_length=1, max_length=MAX_NAME_LENGTH)
    description: Optional[str] = None
    short_description: Optional[str] = Field(default=None, max_length=MAX_SHORT_DESCRIPTION_LENGTH)
    logo: Optional[str] = None
    cover_image: Optional[str] = None
    website: Optional[HttpUrl] = None
    email: Optional[EmailStr] = None
    phone: Optional[str] = Field(default=None, max_length=30)
    year_established: Optional[int] = Field(default=None, ge=1800, le=2100)
    employee_count: Optional[str] = Field(default=None, max_length=30)
    keywords: Optional[List[str]] = None
    category_ids: Optional[List[str]] = Field(default=None, min_length=1)
    status: Optional[BusinessStatus] = None


class ClaimCreate(StrictRequestModel):
    verification_type: VerificationType
    verification_data: Dict[str, Any] = Field(default_factory=dict)
    documents: List[str] = Field(default_factory=list)
    notes: Optional[str] = Field(default=None, max_length=2000)


class ClaimSubmitted(StandardizedModel):
    id: str
    business_id: str
    status: ClaimStatus
    verification_type: VerificationType
    submitted_at: datetime
