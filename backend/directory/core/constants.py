"""Application-wide constants for the Minnesota Business Directory."""

from __future__ import annotations

BRAND_NAME = "Minnesota Business Directory"
API_TITLE = f"{BRAND_NAME} API"
API_VERSION = "1.0.0"
API_DESCRIPTION = "Businesses, events, reviews and AI-assisted search for the Minnesota directory"

# Geography
EARTH_RADIUS_MILES = 3959.0
DEFAULT_STATE = "MN"
DEFAULT_COUNTRY = "US"
MIN_RADIUS_MILES = 1
MAX_RADIUS_MILES = 100

# Pagination
DEFAULT_PAGE_SIZE = 20
MAX_PAGE_SIZE = 100
DEFAULT_REVIEW_PAGE_SIZE = 10

# Text constraints
MAX_NAME_LENGTH = 255
MAX_SHORT_DESCRIPTION_LENGTH = 160
MAX_AI_QUERY_LENGTH = 500

# Users
ROLE_USER = "user"
ROLE_ADMIN = "admin"
