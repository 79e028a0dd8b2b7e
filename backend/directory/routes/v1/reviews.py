# backend/directory/routes/v1/reviews.py
"""
Reviews routes - API v1

Versioned review endpoints under /api/v1/reviews.
All business logic delegated to ReviewService.

Endpoints:
    GET /business/{business_id}        → Published reviews, sorted + paginated (public)
    GET /business/{business_id}/stats  → Rating statistics (public)
    POST /                             → Submit a review
    PUT /{review_id}                   → Edit own review
    DELETE /{review_id}                → Delete own review
    POST /{review_id}/vote             → Helpful / not helpful vote
    POST /{review_id}/response         → Business owner response
    POST /{review_id}/report           → Report a review
"""

import logging

from fastapi import APIRouter, Body, Depends, Query, status

from ...api.dependencies.auth import get_current_active_user
from ...api.dependencies.services import get_review_service
from ...core.constants import DEFAULT_REVIEW_PAGE_SIZE, MAX_PAGE_SIZE
from ...models.user import User
from ...schemas.common import MessageResponse, Paginated
from ...schemas.review import (
    ReportAccepted,
    ReviewCreate,
    ReviewOut,
    ReviewReportIn,
    ReviewResponseIn,
    ReviewResponseOut,
    ReviewSort,
    ReviewStats,
    ReviewUpdate,
    ReviewVoteIn,
    VoteResult,
)
from ...services.review_service import ReviewService

logger = logging.getLogger(__name__)

router = APIRouter(tags=["reviews-v1"])


@router.get(
    "/business/{business_id}",
    response_model=Paginated[ReviewOut],
    response_model_by_alias=True,
)
def list_business_reviews(
    business_id: str,
    sort: ReviewSort = Query("recent"),
    page: int = Query(1, ge=1),
    limit: int = Query(DEFAULT_REVIEW_PAGE_SIZE, ge=1, le=MAX_PAGE_SIZE),
    service: ReviewService = Depends(get_review_service),
) -> Paginated[ReviewOut]:
    return service.list_reviews(business_id, sort=sort, page=page, limit=limit)


@router.get(
    "/business/{business_id}/stats",
    response_model=ReviewStats,
    response_model_by_alias=True,
)
def get_business_review_stats(
    business_id: str,
    service: ReviewService = Depends(get_review_service),
) -> ReviewStats:
    return service.get_stats(business_id)


@router.post(
    "",
    response_model=ReviewOut,
    response_model_by_alias=True,
    status_code=status.HTTP_201_CREATED,
)
def create_review(
    payload: ReviewCreate = Body(...),
    current_user: User = Depends(get_current_active_user),
    service: ReviewService = Depends(get_review_service),
) -> ReviewOut:
    """One review per user per business; a second attempt returns 409."""
    return service.create_review(payload, current_user)


@router.put("/{review_id}", response_model=ReviewOut, response_model_by_alias=True)
def update_review(
    review_id: str,
    payload: ReviewUpdate = Body(...),
    current_user: User = Depends(get_current_active_user),
    service: ReviewService = Depends(get_review_service),
) -> ReviewOut:
    return service.update_review(review_id, payload, current_user)


@router.delete("/{review_id}", response_model=MessageResponse)
def delete_review(
    review_id: str,
    current_user: User = Depends(get_current_active_user),
    service: ReviewService = Depends(get_review_service),
) -> MessageResponse:
    service.delete_review(review_id, current_user)
    return MessageResponse(message="Review deleted")


@router.post("/{review_id}/vote", response_model=VoteResult, response_model_by_alias=True)
def vote_on_review(
    review_id: str,
    payload: ReviewVoteIn = Body(...),
    current_user: User = Depends(get_current_active_user),
    service: ReviewService = Depends(get_review_service),
) -> VoteResult:
    return service.vote(review_id, payload.is_helpful, current_user)


@router.post(
    "/{review_id}/response",
    response_model=ReviewResponseOut,
    response_model_by_alias=True,
    status_code=status.HTTP_201_CREATED,
)
def respond_to_review(
    review_id: str,
    payload: ReviewResponseIn = Body(...),
    current_user: User = Depends(get_current_active_user),
    service: ReviewService = Depends(get_review_service),
) -> ReviewResponseOut:
    return service.respond(review_id, payload, current_user)


@router.post(
    "/{review_id}/report",
    response_model=ReportAccepted,
    response_model_by_alias=True,
    status_code=status.HTTP_202_ACCEPTED,
)
def report_review(
    review_id: str,
    payload: ReviewReportIn = Body(...),
    current_user: User = Depends(get_current_active_user),
    service: ReviewService = Depends(get_review_service),
) -> ReportAccepted:
    return service.report(review_id, payload, current_user)
