# backend/directory/routes/v1/__init__.py
"""
API v1 Routes

Versioned API endpoints under /api/v1.
"""

from . import (
    admin_claims,
    businesses,
    categories,
    directory_ai,
    events,
    health,
    public_api,
    reviews,
)

__all__ = [
    "admin_claims",
    "businesses",
    "categories",
    "directory_ai",
    "events",
    "health",
    "public_api",
    "reviews",
]
