"""Review request/response schemas."""
from datetime import datetime
from typing import TYPE_CHECKING, Dict, List, Literal, Optional

from pydantic import Field

from ..models.review import ReviewStatus
from .base import StandardizedModel, StrictRequestModel

if TYPE_CHECKING:
    from ..models.review import Review

ReviewSort = Literal["recent", "rating-high", "rating-low", "helpful"]
ReportReason = Literal["spam", "inappropriate", "fake", "offensive", "other"]


class ReviewCreate(StrictRequestModel):
    business_id: str = Field(min_length=1, max_length=26)
    rating: int = Field(ge=1, le=5)
    title: Optional[str] = Field(default=None, max_length=255)
    content: str = Field(min_length=10, max_length=5000)
    visit_date: Optional[datetime] = None
    recommends_business: Optional[bool] = None
    photos: List[str] = Field(default_factory=list, max_length=10)


class ReviewUpdate(StrictRequestModel):
    rating: Optional[int] = Field(default=None, ge=1, le=5)
    title: Optional[str] = Field(default=None, max_length=255)
    content: Optional[str] = Field(default=None, min_length=10, max_length=5000)
    visit_date: Optional[datetime] = None
    recommends_business: Optional[bool] = None
    photos: Optional[List[str]] = Field(default=None, max_length=10)


class ReviewVoteIn(StrictRequestModel):
    is_helpful: bool


class ReviewResponseIn(StrictRequestModel):
    content: str = Field(min_length=1, max_length=2000)


class ReviewReportIn(StrictRequestModel):
    reason: ReportReason
    details: Optional[str] = Field(default=None, max_length=2000)


class ReviewAuthor(StandardizedModel):
    id: str
    name: Optional[str] = None
    image: Optional[str] = None


class ReviewResponseOut(StandardizedModel):
    id: str
    content: str
    created_at: datetime


class ReviewOut(StandardizedModel):
    id: str
    business_id: str
    rating: int
    title: Optional[str] = None
    content: str
    visit_date: Optional[datetime] = None
    recommends_business: Optional[bool] = None
    photos: List[str] = Field(default_factory=list)
    status: ReviewStatus
    created_at: datetime
    edited_at: Optional[datetime] = None
    user: Optional[ReviewAuthor] = None
    response: Optional[ReviewResponseOut] = None
    helpful_count: int = 0

    @classmethod
    def from_review(cls, review: "Review") -> "ReviewOut":
        return cls(
            id=review.id,
            business_id=review.business_id,
            rating=review.rating,
            title=review.title,
            content=review.content,
            visit_date=review.visit_date,
            recommends_business=review.recommends_business,
            photos=list(review.photos or []),
            status=review.status,
            created_at=review.created_at,
            edited_at=review.edited_at,
            user=ReviewAuthor.model_validate(review.user) if review.user is not None else None,
            response=(
                ReviewResponseOut.model_validate(review.response) if review.response is not None else None
            ),
            helpful_count=review.helpful_count,
        )


class ReviewStats(StandardizedModel):
    average_rating: float
    total_reviews: int
    rating_distribution: Dict[str, int]
    recommendation_rate: int = 0


class VoteResult(StandardizedModel):
    review_id: str
    is_helpful: bool
    helpful_count: int


class ReportAccepted(StandardizedModel):
    id: str
    review_id: str
    reason: str
    message: str = "Report received"
