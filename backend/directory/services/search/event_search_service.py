# backend/directory/services/search/event_search_service.py
"""
Event search pipeline.

Same stages as business search, including the SQL page for startDate,
createdAt and title sorts without a radius. Events contribute no rating or
verified signal, and use their own coordinates for the geo filter; virtual
events without coordinates drop out whenever a radius is applied.
"""
from __future__ import annotations

import logging
from typing import Optional

from sqlalchemy.orm import Session

from ...core.config import settings
from ...repositories.event_repository import EventRepository
from ...schemas.common import PaginationMeta, Paginated
from ...schemas.event import EventSummary
from ..base import BaseService
from .ai_enhancer import QueryEnhancer
from .candidates import event_candidate
from .filter_builder import EventFilterBuilder
from .geo import apply_geo_filter
from .ordering import EVENT_SORT_KEYS, sort_results
from .pagination import paginate, sql_page
from .query_validator import EventSearchQuery
from .relevance import RelevanceScorer

logger = logging.getLogger(__name__)


class EventSearchService(BaseService):
    def __init__(
        self,
        db: Session,
        enhancer: Optional[QueryEnhancer] = None,
        repository: Optional[EventRepository] = None,
        filter_builder: Optional[EventFilterBuilder] = None,
        scorer: Optional[RelevanceScorer] = None,
        candidate_cap: Optional[int] = None,
    ) -> None:
        super().__init__(db)
        self.enhancer = enhancer
        self.repository = repository or EventRepository(db)
        self.filter_builder = filter_builder or EventFilterBuilder()
        self.scorer = scorer or RelevanceScorer()
        self.candidate_cap = candidate_cap or settings.search_candidate_cap

    @BaseService.measure_operation("event_search")
    async def search(self, query: EventSearchQuery) -> Paginated[EventSummary]:
        enhancement = None
        degraded = False
        if query.enhance and query.text:
            if self.enhancer is not None:
                enhancement = await self.enhancer.enhance(query.text)
            degraded = enhancement is None

        predicates = self.filter_builder.build(query, enhancement, degraded)
        descending = query.sort_order == "desc"

        radius_filter = query.point is not None and query.radius is not None
        if not radius_filter and query.sort_by in self.repository.sort_columns:
            total = self.repository.count_matching(predicates)
            rows = self.repository.find_sorted_page(
                predicates,
                query.sort_by,
                descending=descending,
                offset=(query.page - 1) * query.limit,
                limit=query.limit,
            )
            located = apply_geo_filter((event_candidate(row) for row in rows), query.point, None)
            page = sql_page(
                self.scorer.score_all(located, query.text, enhancement), query.page, query.limit, total
            )
        else:
            rows = self.repository.find_candidates(predicates, self.candidate_cap)
            located = apply_geo_filter((event_candidate(row) for row in rows), query.point, query.radius)
            scored = self.scorer.score_all(located, query.text, enhancement)
            ordered = sort_results(scored, EVENT_SORT_KEYS[query.sort_by], descending=descending)
            page = paginate(ordered, query.page, query.limit)
            if len(rows) >= self.candidate_cap:
                if not radius_filter:
                    page = sql_page(
                        page.items, page.page, page.limit, self.repository.count_matching(predicates)
                    )
                self.logger.warning(
                    f"Event search hit the candidate cap ({self.candidate_cap}); "
                    f"ranked {len(rows)} rows, reporting total {page.total}"
                )

        return Paginated[EventSummary](
            data=[EventSummary.from_scored(result) for result in page.items],
            pagination=PaginationMeta(
                page=page.page, limit=page.limit, total=page.total, total_pages=page.total_pages
            ),
        )
