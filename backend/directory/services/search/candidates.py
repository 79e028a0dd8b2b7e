# backend/directory/services/search/candidates.py
"""
Read-only search projections.

Candidates are built from ORM rows once per request and never mutated; the
geo filter and relevance scorer wrap them in ScoredCandidate instead.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import TYPE_CHECKING, Any, Optional, Tuple

from ...models.types import utc_naive

if TYPE_CHECKING:
    from ...models.business import Business
    from ...models.event import Event
    from ...repositories.business_repository import RatingAggregate


@dataclass(frozen=True)
class Candidate:
    """Fields needed to filter, score and sort one business or event."""

    id: str
    name: str
    description: str
    categories: Tuple[str, ...]
    latitude: Optional[float]
    longitude: Optional[float]
    average_rating: float = 0.0
    review_count: int = 0
    verified: bool = False
    featured: bool = False
    created_at: Optional[datetime] = None
    starts_at: Optional[datetime] = None
    # ORM row the DTO is rendered from; excluded from equality
    source: Any = field(default=None, compare=False, hash=False, repr=False)

    @property
    def has_location(self) -> bool:
        return self.latitude is not None and self.longitude is not None


@dataclass(frozen=True)
class ScoredCandidate:
    """Candidate plus a non-negative relevance score and optional distance in miles."""

    candidate: Candidate
    score: float = 0.0
    distance: Optional[float] = None

    @property
    def id(self) -> str:
        return self.candidate.id


def business_candidate(business: "Business", aggregate: Optional["RatingAggregate"] = None) -> Candidate:
    average, count = aggregate or (0.0, 0)
    location = business.primary_location
    return Candidate(
        id=business.id,
        name=business.name or "",
        description=business.description or "",
        categories=tuple(category.name for category in business.category_models),
        latitude=location.latitude if location is not None else None,
        longitude=location.longitude if location is not None else None,
        average_rating=average if count else 0.0,
        review_count=count,
        verified=bool(business.verified),
        featured=bool(business.featured),
        created_at=utc_naive(business.created_at),
        source=business,
    )


def event_candidate(event: "Event") -> Candidate:
    # Events carry no reviews and are never verified.
    return Candidate(
        id=event.id,
        name=event.title or "",
        description=event.description or "",
        categories=tuple(event.categories or ()),
        latitude=event.latitude,
        longitude=event.longitude,
        featured=bool(event.featured),
        created_at=utc_naive(event.created_at),
        starts_at=utc_naive(event.start_date),
        source=event,
    )
