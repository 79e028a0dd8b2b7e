# backend/directory/routes/v1/public_api.py
"""
Public read API - API v1

Read-only directory data for third parties. Every endpoint requires the
``X-API-Key`` header; only ACTIVE businesses and PUBLISHED events are exposed.

Endpoints:
    GET /                                       → API index
    GET /businesses                             → Business search
    GET /businesses/categories                  → Categories with business counts
    GET /businesses/{business_id}               → Business detail by id or slug
    GET /events                                 → Event search
    GET /events/{event_id}                      → Event detail
    GET /reviews/business/{business_id}         → Published reviews
    GET /reviews/business/{business_id}/stats   → Rating statistics
"""

import logging
from typing import Any, Dict, List

from fastapi import APIRouter, Depends, Query, Request

from ...api.dependencies.services import (
    get_business_search_service,
    get_business_service,
    get_category_service,
    get_event_search_service,
    get_event_service,
    get_review_service,
)
from ...auth import verify_public_api_key
from ...core.constants import API_VERSION, BRAND_NAME, DEFAULT_PAGE_SIZE, MAX_PAGE_SIZE
from ...schemas.business import BusinessDetail, BusinessSummary
from ...schemas.category import CategoryDetail
from ...schemas.common import Paginated
from ...schemas.event import EventDetail, EventSummary
from ...schemas.review import ReviewOut, ReviewStats
from ...services.business_service import BusinessService
from ...services.category_service import CategoryService
from ...services.event_service import EventService
from ...services.review_service import ReviewService
from ...services.search.business_search_service import BusinessSearchService
from ...services.search.event_search_service import EventSearchService
from ...services.search.query_validator import parse_business_search, parse_event_search

logger = logging.getLogger(__name__)

router = APIRouter(tags=["public-api-v1"], dependencies=[Depends(verify_public_api_key)])


def _without_status(request: Request) -> Dict[str, str]:
    # Callers cannot widen the listing to non-public statuses
    return {key: value for key, value in request.query_params.items() if key != "status"}


@router.get("")
def api_index() -> Dict[str, Any]:
    return {
        "name": f"{BRAND_NAME} API",
        "version": API_VERSION,
        "description": "Public API for accessing Minnesota business directory data",
        "endpoints": {
            "businesses": {
                "search": "GET /api/v1/public/businesses",
                "get": "GET /api/v1/public/businesses/{id}",
                "categories": "GET /api/v1/public/businesses/categories",
            },
            "events": {
                "search": "GET /api/v1/public/events",
                "get": "GET /api/v1/public/events/{id}",
            },
            "reviews": {
                "business": "GET /api/v1/public/reviews/business/{businessId}",
                "stats": "GET /api/v1/public/reviews/business/{businessId}/stats",
            },
        },
        "authentication": "Include X-API-Key header with your API key",
    }


@router.get("/businesses", response_model=Paginated[BusinessSummary], response_model_by_alias=True)
async def public_search_businesses(
    request: Request,
    service: BusinessSearchService = Depends(get_business_search_service),
) -> Paginated[BusinessSummary]:
    return await service.search(parse_business_search(_without_status(request), enhance=False))


@router.get(
    "/businesses/categories",
    response_model=List[CategoryDetail],
    response_model_by_alias=True,
)
def public_categories(service: CategoryService = Depends(get_category_service)) -> List[CategoryDetail]:
    return service.list_with_counts()


@router.get(
    "/businesses/{business_id}",
    response_model=BusinessDetail,
    response_model_by_alias=True,
)
def public_get_business(
    business_id: str,
    service: BusinessService = Depends(get_business_service),
) -> BusinessDetail:
    return service.get_public(business_id)


@router.get("/events", response_model=Paginated[EventSummary], response_model_by_alias=True)
async def public_search_events(
    request: Request,
    service: EventSearchService = Depends(get_event_search_service),
) -> Paginated[EventSummary]:
    return await service.search(parse_event_search(_without_status(request), enhance=False))


@router.get("/events/{event_id}", response_model=EventDetail, response_model_by_alias=True)
def public_get_event(event_id: str, service: EventService = Depends(get_event_service)) -> EventDetail:
    return service.get_published_event(event_id)


@router.get(
    "/reviews/business/{business_id}",
    response_model=Paginated[ReviewOut],
    response_model_by_alias=True,
)
def public_business_reviews(
    business_id: str,
    page: int = Query(1, ge=1),
    limit: int = Query(DEFAULT_PAGE_SIZE, ge=1, le=MAX_PAGE_SIZE),
    service: ReviewService = Depends(get_review_service),
) -> Paginated[ReviewOut]:
    return service.list_reviews(business_id, page=page, limit=limit)


@router.get(
    "/reviews/business/{business_id}/stats",
    response_model=ReviewStats,
    response_model_by_alias=True,
)
def public_review_stats(
    business_id: str,
    service: ReviewService = Depends(get_review_service),
) -> ReviewStats:
    return service.get_stats(business_id)
