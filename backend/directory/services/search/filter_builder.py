# backend/directory/services/search/filter_builder.py
"""
Storage-layer predicates for directory searches.

Translates validated queries into SQLAlchemy boolean clauses. No scoring
happens here; the repository fetches the candidate superset these clauses
describe and the pipeline narrows and orders it in memory.

Text matching modes:
- plain: the raw query is a case-insensitive substring of name/description
- enhanced: raw query OR any keyword (name, description, short description)
  OR a category named in the enhancement's business types
- degraded: enhancement was requested but unavailable, so any whitespace
  separated term of the raw query may match
"""
from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any, List, Optional, Sequence

from sqlalchemy import func, or_

from ...models.business import Business, BusinessCategory, BusinessLocation
from ...models.category import Category
from ...models.event import Event

if TYPE_CHECKING:
    from .llm_schema import SearchEnhancement
    from .query_validator import EventSearchQuery, SearchQuery

logger = logging.getLogger(__name__)


def split_terms(text: str) -> List[str]:
    """Whitespace-separated terms, de-duplicated case-insensitively, order kept."""
    seen = set()
    terms: List[str] = []
    for term in text.split():
        key = term.lower()
        if key not in seen:
            seen.add(key)
            terms.append(term)
    return terms


def _contains(column: Any, text: str) -> Any:
    return column.ilike(f"%{text}%")


class BusinessFilterBuilder:
    """Builds predicates over Business rows."""

    def build(
        self,
        query: "SearchQuery",
        enhancement: Optional["SearchEnhancement"] = None,
        degraded: bool = False,
    ) -> List[Any]:
        predicates: List[Any] = [Business.status == query.status]

        text_clause = self.text_predicate(query.text, enhancement, degraded)
        if text_clause is not None:
            predicates.append(text_clause)

        if query.category_id:
            predicates.append(
                Business.categories.any(BusinessCategory.category_id == query.category_id)
            )
        if query.city:
            predicates.append(Business.locations.any(_contains(BusinessLocation.city, query.city)))
        if query.verified is not None:
            predicates.append(Business.verified.is_(query.verified))
        if query.featured is not None:
            predicates.append(Business.featured.is_(query.featured))
        return predicates

    def text_predicate(
        self,
        text: Optional[str],
        enhancement: Optional["SearchEnhancement"] = None,
        degraded: bool = False,
    ) -> Optional[Any]:
        if not text:
            return None

        if enhancement is not None:
            clauses = [_contains(Business.name, text), _contains(Business.description, text)]
            for keyword in enhancement.keywords:
                clauses.extend(
                    [
                        _contains(Business.name, keyword),
                        _contains(Business.description, keyword),
                        _contains(Business.short_description, keyword),
                    ]
                )
            if enhancement.business_types:
                type_names = [t.lower() for t in enhancement.business_types]
                clauses.append(
                    Business.categories.any(
                        BusinessCategory.category.has(func.lower(Category.name).in_(type_names))
                    )
                )
            return or_(*clauses)

        if degraded:
            return _any_term(split_terms(text), [Business.name, Business.description])

        return or_(_contains(Business.name, text), _contains(Business.description, text))


class EventFilterBuilder:
    """Builds predicates over Event rows."""

    def build(
        self,
        query: "EventSearchQuery",
        enhancement: Optional["SearchEnhancement"] = None,
        degraded: bool = False,
    ) -> List[Any]:
        predicates: List[Any] = [Event.status == query.status]

        text_clause = self.text_predicate(query.text, enhancement, degraded)
        if text_clause is not None:
            predicates.append(text_clause)

        if query.business_id:
            predicates.append(Event.business_id == query.business_id)
        if query.is_virtual is not None:
            predicates.append(Event.is_virtual.is_(query.is_virtual))
        if query.is_hybrid is not None:
            predicates.append(Event.is_hybrid.is_(query.is_hybrid))
        if query.city:
            predicates.append(_contains(Event.city, query.city))
        if query.start_date is not None:
            predicates.append(Event.start_date >= query.start_date)
        if query.end_date is not None:
            predicates.append(Event.end_date <= query.end_date)
        return predicates

    def text_predicate(
        self,
        text: Optional[str],
        enhancement: Optional["SearchEnhancement"] = None,
        degraded: bool = False,
    ) -> Optional[Any]:
        if not text:
            return None

        if enhancement is not None:
            clauses = [_contains(Event.title, text), _contains(Event.description, text)]
            for keyword in enhancement.keywords:
                clauses.extend(
                    [
                        _contains(Event.title, keyword),
                        _contains(Event.description, keyword),
                        _contains(Event.short_description, keyword),
                    ]
                )
            return or_(*clauses)

        if degraded:
            return _any_term(split_terms(text), [Event.title, Event.description])

        return or_(_contains(Event.title, text), _contains(Event.description, text))


def _any_term(terms: Sequence[str], columns: Sequence[Any]) -> Optional[Any]:
    clauses = [_contains(column, term) for term in terms for column in columns]
    return or_(*clauses) if clauses else None
