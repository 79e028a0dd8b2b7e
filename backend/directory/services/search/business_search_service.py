# backend/directory/services/search/business_search_service.py
"""
Business search pipeline.

Flow:
    validated SearchQuery
      → optional AI enhancement (single attempt, falls back to raw text)
      → storage predicates (status/text/category/city/flags)
      → either
          name/createdAt sort with no radius: COUNT plus one SQL page
          ordered by key then id, then distances and scores for that page
        or
          candidate superset (capped), geo filter, relevance scoring,
          sort (ties by id ascending), paginate in memory

Every stage is per-request; nothing is cached between searches.
"""
from __future__ import annotations

import logging
from typing import Any, List, Optional, Sequence

from sqlalchemy.orm import Session

from ...core.config import settings
from ...models.business import Business
from ...repositories.business_repository import BusinessRepository
from ...schemas.business import BusinessSummary
from ...schemas.common import PaginationMeta, Paginated
from ..base import BaseService
from .ai_enhancer import QueryEnhancer
from .candidates import Candidate, ScoredCandidate, business_candidate
from .filter_builder import BusinessFilterBuilder
from .geo import apply_geo_filter
from .ordering import BUSINESS_SORT_KEYS, sort_results
from .pagination import PageSlice, paginate, sql_page
from .query_validator import SearchQuery
from .relevance import RelevanceScorer

logger = logging.getLogger(__name__)


class BusinessSearchService(BaseService):
    """Runs the directory search pipeline over businesses."""

    def __init__(
        self,
        db: Session,
        enhancer: Optional[QueryEnhancer] = None,
        repository: Optional[BusinessRepository] = None,
        filter_builder: Optional[BusinessFilterBuilder] = None,
        scorer: Optional[RelevanceScorer] = None,
        candidate_cap: Optional[int] = None,
    ) -> None:
        super().__init__(db)
        self.enhancer = enhancer
        self.repository = repository or BusinessRepository(db)
        self.filter_builder = filter_builder or BusinessFilterBuilder()
        self.scorer = scorer or RelevanceScorer()
        self.candidate_cap = candidate_cap or settings.search_candidate_cap

    @BaseService.measure_operation("business_search")
    async def search(self, query: SearchQuery) -> Paginated[BusinessSummary]:
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
            scored = self.scorer.score_all(
                apply_geo_filter(self._candidates(rows), query.point, None), query.text, enhancement
            )
            page = sql_page(scored, query.page, query.limit, total)
        else:
            rows = self.repository.find_candidates(predicates, self.candidate_cap)
            truncated = len(rows) >= self.candidate_cap
            located = apply_geo_filter(self._candidates(rows), query.point, query.radius)
            scored = self.scorer.score_all(located, query.text, enhancement)
            ordered = sort_results(scored, BUSINESS_SORT_KEYS[query.sort_by], descending=descending)
            page = paginate(ordered, query.page, query.limit)
            if truncated:
                page = self._truncated_page(page, predicates, radius_filter)

        self.logger.debug(
            f"Business search: {len(rows)} rows loaded, page {page.page}/{page.total_pages} "
            f"of {page.total}"
        )
        return Paginated[BusinessSummary](
            data=[BusinessSummary.from_scored(result) for result in page.items],
            pagination=PaginationMeta(
                page=page.page, limit=page.limit, total=page.total, total_pages=page.total_pages
            ),
        )

    def _candidates(self, rows: List[Business]) -> List[Candidate]:
        aggregates = self.repository.rating_aggregates(row.id for row in rows)
        return [business_candidate(row, aggregates.get(row.id)) for row in rows]

    def _truncated_page(
        self, page: PageSlice[ScoredCandidate], predicates: Sequence[Any], radius_filter: bool
    ) -> PageSlice[ScoredCandidate]:
        """
        The in-memory pass only saw ``candidate_cap`` rows.

        Without a radius every stored match would survive, so the true total
        is a COUNT. With a radius the total is a lower bound.
        """
        if radius_filter:
            self.logger.warning(
                f"Business search hit the candidate cap ({self.candidate_cap}) with a radius; "
                f"total {page.total} is a lower bound"
            )
            return page
        total = self.repository.count_matching(predicates)
        self.logger.warning(
            f"Business search hit the candidate cap ({self.candidate_cap}); "
            f"ranked {self.candidate_cap} of {total} matches"
        )
        return sql_page(page.items, page.page, page.limit, total)
