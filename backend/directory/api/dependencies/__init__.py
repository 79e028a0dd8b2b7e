# backend/directory/api/dependencies/__init__.py
"""
Central export point for all dependencies.

This module re-exports all dependencies from submodules
for convenient access throughout the application.
"""

from .auth import get_current_active_user, get_current_user_optional, require_admin
from .database import get_db
from .services import (
    get_ai_client,
    get_ai_search_service,
    get_analytics_service,
    get_business_search_service,
    get_business_service,
    get_category_service,
    get_chat_service,
    get_claim_service,
    get_event_search_service,
    get_event_service,
    get_query_enhancer,
    get_review_service,
)

__all__ = [
    # Auth
    "get_current_active_user",
    "get_current_user_optional",
    "require_admin",
    # Database
    "get_db",
    # Services
    "get_ai_client",
    "get_ai_search_service",
    "get_analytics_service",
    "get_business_search_service",
    "get_business_service",
    "get_category_service",
    "get_chat_service",
    "get_claim_service",
    "get_event_search_service",
    "get_event_service",
    "get_query_enhancer",
    "get_review_service",
]
