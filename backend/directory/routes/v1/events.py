# backend/directory/routes/v1/events.py
"""
Event routes - API v1

Endpoints:
    GET /search                 → Event search (public)
    GET /{event_id}             → Event detail (public)
    POST /                      → Create event (business owner)
    PUT /{event_id}             → Update event (business owner)
    PATCH /{event_id}/status    → Change status (business owner)
    DELETE /{event_id}          → Delete event (business owner)
    POST /{event_id}/register   → Register the caller
    DELETE /{event_id}/register → Cancel the caller's registration
"""

import logging
from typing import Optional

from fastapi import APIRouter, Body, Depends, Request, status

from ...api.dependencies.auth import get_current_active_user
from ...api.dependencies.services import get_event_search_service, get_event_service
from ...models.user import User
from ...schemas.common import MessageResponse, Paginated
from ...schemas.event import (
    EventCreate,
    EventDetail,
    EventRegistrationCreate,
    EventRegistrationOut,
    EventStatusUpdate,
    EventSummary,
    EventUpdate,
)
from ...services.event_service import EventService
from ...services.search.event_search_service import EventSearchService
from ...services.search.query_validator import parse_event_search

logger = logging.getLogger(__name__)

router = APIRouter(tags=["events-v1"])


@router.get("/search", response_model=Paginated[EventSummary], response_model_by_alias=True)
async def search_events(
    request: Request,
    service: EventSearchService = Depends(get_event_search_service),
) -> Paginated[EventSummary]:
    """
    Search events (PUBLISHED by default).

    Query parameters (camelCase): query, businessId, isVirtual, isHybrid,
    status, startDate, endDate, city, lat, lng, radius, page, limit, sortBy,
    sortOrder, ai.
    """
    query = parse_event_search(request.query_params)
    return await service.search(query)


@router.post(
    "",
    response_model=EventDetail,
    response_model_by_alias=True,
    status_code=status.HTTP_201_CREATED,
)
def create_event(
    payload: EventCreate = Body(...),
    current_user: User = Depends(get_current_active_user),
    service: EventService = Depends(get_event_service),
) -> EventDetail:
    return service.create_event(payload, current_user)


@router.get("/{event_id}", response_model=EventDetail, response_model_by_alias=True)
def get_event(event_id: str, service: EventService = Depends(get_event_service)) -> EventDetail:
    return service.get_event(event_id)


@router.put("/{event_id}", response_model=EventDetail, response_model_by_alias=True)
def update_event(
    event_id: str,
    payload: EventUpdate = Body(...),
    current_user: User = Depends(get_current_active_user),
    service: EventService = Depends(get_event_service),
) -> EventDetail:
    return service.update_event(event_id, payload, current_user)


@router.patch("/{event_id}/status", response_model=EventDetail, response_model_by_alias=True)
def change_event_status(
    event_id: str,
    payload: EventStatusUpdate = Body(...),
    current_user: User = Depends(get_current_active_user),
    service: EventService = Depends(get_event_service),
) -> EventDetail:
    return service.change_status(event_id, payload.status, current_user)


@router.delete("/{event_id}", response_model=MessageResponse)
def delete_event(
    event_id: str,
    current_user: User = Depends(get_current_active_user),
    service: EventService = Depends(get_event_service),
) -> MessageResponse:
    service.delete_event(event_id, current_user)
    return MessageResponse(message="Event deleted")


@router.post(
    "/{event_id}/register",
    response_model=EventRegistrationOut,
    response_model_by_alias=True,
    status_code=status.HTTP_201_CREATED,
)
def register_for_event(
    event_id: str,
    payload: Optional[EventRegistrationCreate] = Body(default=None),
    current_user: User = Depends(get_current_active_user),
    service: EventService = Depends(get_event_service),
) -> EventRegistrationOut:
    return service.register(event_id, current_user, payload)


@router.delete("/{event_id}/register", response_model=MessageResponse)
def cancel_event_registration(
    event_id: str,
    current_user: User = Depends(get_current_active_user),
    service: EventService = Depends(get_event_service),
) -> MessageResponse:
    service.cancel_registration(event_id, current_user)
    return MessageResponse(message="Registration cancelled")
