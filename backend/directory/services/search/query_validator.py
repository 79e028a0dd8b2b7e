# backend/directory/services/search/query_validator.py
"""
Search query validation.

Turns raw string query parameters into immutable, typed search queries.
Every offending field is reported at once through ValidationException; a
query that fails validation is never partially executed.
"""
from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
import logging
from typing import Any, Dict, List, Literal, Mapping, Optional, Set, Type, TypeVar

from pydantic import BaseModel, ConfigDict, Field, ValidationError
from pydantic.alias_generators import to_camel

from ...core.constants import DEFAULT_PAGE_SIZE, MAX_PAGE_SIZE, MAX_RADIUS_MILES, MIN_RADIUS_MILES
from ...core.exceptions import ValidationException
from ...models.business import BusinessStatus
from ...models.event import EventStatus
from ...models.types import utc_naive
from .geo import GeoPoint

logger = logging.getLogger(__name__)

BusinessSortKey = Literal["name", "createdAt", "distance", "rating", "relevance"]
EventSortKey = Literal["startDate", "createdAt", "title", "distance", "relevance"]
SortOrder = Literal["asc", "desc"]

# Sort keys where "best first" is the natural default direction
_DESCENDING_BY_DEFAULT = {"rating", "relevance"}


class _SearchParams(BaseModel):
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        extra="ignore",
        str_strip_whitespace=True,
    )

    query: Optional[str] = Field(default=None, max_length=500)
    city: Optional[str] = Field(default=None, max_length=100)
    lat: Optional[float] = Field(default=None, ge=-90, le=90)
    lng: Optional[float] = Field(default=None, ge=-180, le=180)
    radius: Optional[float] = Field(default=None, ge=MIN_RADIUS_MILES, le=MAX_RADIUS_MILES)
    page: int = Field(default=1, ge=1)
    limit: int = Field(default=DEFAULT_PAGE_SIZE, ge=1, le=MAX_PAGE_SIZE)
    sort_order: Optional[SortOrder] = None
    ai: bool = False


class BusinessSearchParams(_SearchParams):
    category_id: Optional[str] = Field(default=None, max_length=26)
    status: Optional[BusinessStatus] = None
    verified: Optional[bool] = None
    featured: Optional[bool] = None
    sort_by: BusinessSortKey = "name"


class EventSearchParams(_SearchParams):
    business_id: Optional[str] = Field(default=None, max_length=26)
    is_virtual: Optional[bool] = None
    is_hybrid: Optional[bool] = None
    status: Optional[EventStatus] = None
    start_date: Optional[datetime] = None
    end_date: Optional[datetime] = None
    sort_by: EventSortKey = "startDate"


@dataclass(frozen=True)
class SearchQuery:
    text: Optional[str] = None
    category_id: Optional[str] = None
    city: Optional[str] = None
    status: BusinessStatus = BusinessStatus.ACTIVE
    verified: Optional[bool] = None
    featured: Optional[bool] = None
    point: Optional[GeoPoint] = None
    radius: Optional[float] = None
    page: int = 1
    limit: int = DEFAULT_PAGE_SIZE
    sort_by: str = "name"
    sort_order: str = "asc"
    enhance: bool = False


@dataclass(frozen=True)
class EventSearchQuery:
    text: Optional[str] = None
    business_id: Optional[str] = None
    is_virtual: Optional[bool] = None
    is_hybrid: Optional[bool] = None
    status: EventStatus = EventStatus.PUBLISHED
    start_date: Optional[datetime] = None
    end_date: Optional[datetime] = None
    city: Optional[str] = None
    point: Optional[GeoPoint] = None
    radius: Optional[float] = None
    page: int = 1
    limit: int = DEFAULT_PAGE_SIZE
    sort_by: str = "startDate"
    sort_order: str = "asc"
    enhance: bool = False


P = TypeVar("P", bound=_SearchParams)


def _normalize(raw: Mapping[str, Any]) -> Dict[str, Any]:
    """Drop blank values so that ``?city=`` behaves like an absent parameter."""
    cleaned: Dict[str, Any] = {}
    for key, value in raw.items():
        if value is None:
            continue
        if isinstance(value, str) and not value.strip():
            continue
        cleaned[key] = value
    return cleaned


def _cross_field_errors(raw: Mapping[str, Any]) -> Set[str]:
    fields: Set[str] = set()
    has_lat = "lat" in raw
    has_lng = "lng" in raw
    if has_lat != has_lng:
        fields.update({"lat", "lng"})
    # Field names are accepted alongside their camelCase aliases; the alias wins
    sort_by = raw.get("sortBy", raw.get("sort_by"))
    if sort_by == "distance" and not (has_lat and has_lng):
        fields.add("sortBy")
    return fields


def _parse(model: Type[P], raw: Mapping[str, Any]) -> P:
    cleaned = _normalize(raw)
    invalid: Set[str] = _cross_field_errors(cleaned)
    errors: List[Dict[str, Any]] = []
    parsed: Optional[P] = None
    try:
        parsed = model.model_validate(cleaned)
    except ValidationError as exc:
        for error in exc.errors():
            loc = error.get("loc") or ("query",)
            invalid.add(str(loc[0]))
            errors.append({"field": str(loc[0]), "message": error.get("msg", "")})

    if invalid or parsed is None:
        logger.debug(f"Rejected search parameters: {sorted(invalid)}")
        raise ValidationException(
            "Invalid search parameters",
            details={"errors": errors} if errors else None,
            fields=invalid,
        )
    return parsed


def _point(params: _SearchParams) -> Optional[GeoPoint]:
    if params.lat is None or params.lng is None:
        return None
    return GeoPoint(latitude=params.lat, longitude=params.lng)


def _order(params: _SearchParams, sort_by: str) -> str:
    if params.sort_order:
        return params.sort_order
    return "desc" if sort_by in _DESCENDING_BY_DEFAULT else "asc"


def parse_business_search(raw: Mapping[str, Any], *, enhance: Optional[bool] = None) -> SearchQuery:
    """Validate raw business search parameters."""
    params = _parse(BusinessSearchParams, raw)
    return SearchQuery(
        text=params.query or None,
        category_id=params.category_id,
        city=params.city,
        status=BusinessStatus(params.status) if params.status else BusinessStatus.ACTIVE,
        verified=params.verified,
        featured=params.featured,
        point=_point(params),
        radius=params.radius,
        page=params.page,
        limit=params.limit,
        sort_by=params.sort_by,
        sort_order=_order(params, params.sort_by),
        enhance=params.ai if enhance is None else enhance,
    )


def parse_event_search(raw: Mapping[str, Any], *, enhance: Optional[bool] = None) -> EventSearchQuery:
    """Validate raw event search parameters."""
    params = _parse(EventSearchParams, raw)
    start_date = utc_naive(params.start_date)
    end_date = utc_naive(params.end_date)
    if start_date and end_date and end_date < start_date:
        raise ValidationException(
            "endDate must not be before startDate", fields=["startDate", "endDate"]
        )
    return EventSearchQuery(
        text=params.query or None,
        business_id=params.business_id,
        is_virtual=params.is_virtual,
        is_hybrid=params.is_hybrid,
        status=EventStatus(params.status) if params.status else EventStatus.PUBLISHED,
        start_date=start_date,
        end_date=end_date,
        city=params.city,
        point=_point(params),
        radius=params.radius,
        page=params.page,
        limit=params.limit,
        sort_by=params.sort_by,
        sort_order=_order(params, params.sort_by),
        enhance=params.ai if enhance is None else enhance,
    )
