# backend/directory/services/search/__init__.py
"""
Directory search pipeline.

Components:
- query_validator: raw parameters → SearchQuery / EventSearchQuery
- filter_builder: query (+ enhancement) → SQLAlchemy predicates
- geo: Haversine distance and radius filter
- relevance: additive relevance scorer
- ai_enhancer: optional free-text → SearchEnhancement
- pagination: page slicing and metadata

The assembled pipelines live in business_search_service,
event_search_service and ai_search_service; import them from their modules.
"""

from .ai_enhancer import QueryEnhancer
from .geo import GeoPoint, apply_geo_filter, haversine_miles
from .llm_schema import SearchEnhancement
from .pagination import PageSlice, paginate
from .query_validator import EventSearchQuery, SearchQuery, parse_business_search, parse_event_search
from .relevance import RelevanceScorer

__all__ = [
    "EventSearchQuery",
    "GeoPoint",
    "PageSlice",
    "QueryEnhancer",
    "RelevanceScorer",
    "SearchEnhancement",
    "SearchQuery",
    "apply_geo_filter",
    "haversine_miles",
    "paginate",
    "parse_business_search",
    "parse_event_search",
]
