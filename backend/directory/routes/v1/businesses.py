# backend/directory/routes/v1/businesses.py
"""
Business routes - API v1

Versioned business endpoints under /api/v1/businesses.
All business logic delegated to the business, search and analytics services.

Endpoints:
    GET /search                         → Filtered, geo-aware business search (public)
    POST /ai-search                     → AI-enhanced search (public)
    POST /ai-search/recommendations     → Similar / featured businesses (public)
    GET /{slug}                         → Business detail, counts a detail view (public)
    POST /                              → Create a business (owner = caller)
    PUT /{business_id}                  → Update (owner only)
    DELETE /{business_id}               → Delete (owner only)
    POST /{business_id}/claim           → Submit an ownership claim
    GET /{business_id}/analytics        → Analytics summary (owner only)
    POST /{business_id}/view            → Record a listing view (public)
"""

import logging

from fastapi import APIRouter, Body, Depends, Query, Request, status

from ...api.dependencies.auth import get_current_active_user
from ...api.dependencies.services import (
    get_ai_search_service,
    get_analytics_service,
    get_business_search_service,
    get_business_service,
)
from ...models.user import User
from ...schemas.analytics import AnalyticsRange, AnalyticsSummary, ViewRecorded
from ...schemas.business import (
    BusinessCreate,
    BusinessDetail,
    BusinessSummary,
    BusinessUpdate,
    ClaimCreate,
    ClaimSubmitted,
)
from ...schemas.common import MessageResponse, Paginated
from ...schemas.search import (
    AISearchRequest,
    AISearchResponse,
    RecommendationRequest,
    RecommendationResponse,
)
from ...services.analytics_service import AnalyticsService
from ...services.business_service import BusinessService
from ...services.search.ai_search_service import AISearchService
from ...services.search.business_search_service import BusinessSearchService
from ...services.search.query_validator import parse_business_search

logger = logging.getLogger(__name__)

# V1 router - no prefix here, will be added when mounting in main.py
router = APIRouter(tags=["businesses-v1"])


# =============================================================================
# Static routes first (before dynamic routes with path parameters)
# =============================================================================


@router.get("/search", response_model=Paginated[BusinessSummary], response_model_by_alias=True)
async def search_businesses(
    request: Request,
    service: BusinessSearchService = Depends(get_business_search_service),
) -> Paginated[BusinessSummary]:
    """
    Search active businesses.

    Query parameters (camelCase): query, categoryId, city, status, verified,
    featured, lat, lng, radius (miles), page, limit, sortBy, sortOrder, ai.
    Invalid parameters return 400 listing every offending field.
    """
    query = parse_business_search(request.query_params)
    return await service.search(query)


@router.post("/ai-search", response_model=AISearchResponse, response_model_by_alias=True)
async def ai_search(
    payload: AISearchRequest = Body(...),
    service: AISearchService = Depends(get_ai_search_service),
) -> AISearchResponse:
    """
    AI-enhanced search.

    Falls back to raw-text matching when the AI service is unavailable;
    ``recommendations`` is null when they were not requested or failed.
    """
    return await service.search(payload)


@router.post(
    "/ai-search/recommendations",
    response_model=RecommendationResponse,
    response_model_by_alias=True,
)
def recommend_businesses(
    payload: RecommendationRequest = Body(...),
    service: AISearchService = Depends(get_ai_search_service),
) -> RecommendationResponse:
    return service.recommend(payload)


@router.post(
    "",
    response_model=BusinessDetail,
    response_model_by_alias=True,
    status_code=status.HTTP_201_CREATED,
)
def create_business(
    payload: BusinessCreate = Body(...),
    current_user: User = Depends(get_current_active_user),
    service: BusinessService = Depends(get_business_service),
) -> BusinessDetail:
    """Create a listing in PENDING state owned by the caller."""
    return service.create_business(payload, current_user)


# =============================================================================
# Dynamic routes
# =============================================================================


@router.get("/{slug}", response_model=BusinessDetail, response_model_by_alias=True)
def get_business(
    slug: str,
    service: BusinessService = Depends(get_business_service),
) -> BusinessDetail:
    return service.get_by_slug(slug)


@router.put("/{business_id}", response_model=BusinessDetail, response_model_by_alias=True)
def update_business(
    business_id: str,
    payload: BusinessUpdate = Body(...),
    current_user: User = Depends(get_current_active_user),
    service: BusinessService = Depends(get_business_service),
) -> BusinessDetail:
    return service.update_business(business_id, payload, current_user)


@router.delete("/{business_id}", response_model=MessageResponse)
def delete_business(
    business_id: str,
    current_user: User = Depends(get_current_active_user),
    service: BusinessService = Depends(get_business_service),
) -> MessageResponse:
    service.delete_business(business_id, current_user)
    return MessageResponse(message="Business deleted")


@router.post(
    "/{business_id}/claim",
    response_model=ClaimSubmitted,
    response_model_by_alias=True,
    status_code=status.HTTP_201_CREATED,
)
def claim_business(
    business_id: str,
    payload: ClaimCreate = Body(...),
    current_user: User = Depends(get_current_active_user),
    service: BusinessService = Depends(get_business_service),
) -> ClaimSubmitted:
    return service.submit_claim(business_id, payload, current_user)


@router.get(
    "/{business_id}/analytics",
    response_model=AnalyticsSummary,
    response_model_by_alias=True,
)
def get_business_analytics(
    business_id: str,
    time_range: AnalyticsRange = Query("30d", alias="timeRange"),
    current_user: User = Depends(get_current_active_user),
    service: AnalyticsService = Depends(get_analytics_service),
) -> AnalyticsSummary:
    return service.summary(business_id, time_range, current_user)


@router.post("/{business_id}/view", response_model=ViewRecorded, response_model_by_alias=True)
def record_business_view(
    business_id: str,
    service: AnalyticsService = Depends(get_analytics_service),
) -> ViewRecorded:
    return service.record_view(business_id)
