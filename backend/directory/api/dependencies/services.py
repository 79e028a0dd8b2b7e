# backend/directory/api/dependencies/services.py
"""
Service layer dependencies for dependency injection.

This module provides factory functions that create service instances
with their required dependencies properly injected. The AI completion client
is shared per application (created in the lifespan, kept on ``app.state``);
tests override ``get_ai_client``.
"""

import logging
from typing import Optional

from fastapi import Depends, Request
from sqlalchemy.orm import Session

from ...services.ai_client import CompletionClient
from ...services.analytics_service import AnalyticsService
from ...services.business_service import BusinessService
from ...services.category_service import CategoryService
from ...services.chat_service import ChatService
from ...services.claim_service import ClaimService
from ...services.event_service import EventService
from ...services.review_service import ReviewService
from ...services.search.ai_enhancer import QueryEnhancer
from ...services.search.ai_search_service import AISearchService
from ...services.search.business_search_service import BusinessSearchService
from ...services.search.event_search_service import EventSearchService
from .database import get_db

logger = logging.getLogger(__name__)


def get_ai_client(request: Request) -> Optional[CompletionClient]:
    """The application's completion client, or None when AI is not configured."""
    return getattr(request.app.state, "ai_client", None)


def get_query_enhancer(client: Optional[CompletionClient] = Depends(get_ai_client)) -> QueryEnhancer:
    return QueryEnhancer(client)


def get_business_search_service(
    db: Session = Depends(get_db), enhancer: QueryEnhancer = Depends(get_query_enhancer)
) -> BusinessSearchService:
    return BusinessSearchService(db, enhancer=enhancer)


def get_event_search_service(
    db: Session = Depends(get_db), enhancer: QueryEnhancer = Depends(get_query_enhancer)
) -> EventSearchService:
    return EventSearchService(db, enhancer=enhancer)


def get_ai_search_service(
    db: Session = Depends(get_db),
    enhancer: QueryEnhancer = Depends(get_query_enhancer),
    client: Optional[CompletionClient] = Depends(get_ai_client),
) -> AISearchService:
    return AISearchService(db, enhancer, client=client)


def get_chat_service(
    db: Session = Depends(get_db), client: Optional[CompletionClient] = Depends(get_ai_client)
) -> ChatService:
    return ChatService(db, client=client)


def get_business_service(db: Session = Depends(get_db)) -> BusinessService:
    return BusinessService(db)


def get_event_service(db: Session = Depends(get_db)) -> EventService:
    return EventService(db)


def get_review_service(db: Session = Depends(get_db)) -> ReviewService:
    return ReviewService(db)


def get_category_service(db: Session = Depends(get_db)) -> CategoryService:
    return CategoryService(db)


def get_claim_service(db: Session = Depends(get_db)) -> ClaimService:
    return ClaimService(db)


def get_analytics_service(db: Session = Depends(get_db)) -> AnalyticsService:
    return AnalyticsService(db)
