# backend/directory/services/search/ai_search_service.py
"""
AI-assisted search and recommendations.

search():
    Enhances the free-text query, fetches active businesses matching the raw
    text, any keyword or any named business type, scores them with the
    shared RelevanceScorer and returns the top ``limit`` by relevance. When
    requested, a second completion turns the top results into short
    recommendations; that call failing yields ``recommendations=None``.

recommend():
    Rule-based "similar" (shared category) or "featured" businesses,
    scored as:
        10 × average rating
      + 20 if verified
      + 15 if featured
      + min(2 × review count, 20)
      + 25 if a location city matches the user's location
"""
from __future__ import annotations

import json
import logging
from typing import List, Optional

from sqlalchemy.orm import Session

from ...core.config import settings
from ...core.exceptions import AIServiceException, BusinessNotFoundException
from ...models.business import Business
from ...monitoring.prometheus_metrics import prometheus_metrics
from ...repositories.business_repository import BusinessRepository
from ...schemas.business import BusinessSummary
from ...schemas.search import (
    AISearchRequest,
    AISearchResponse,
    RecommendationRequest,
    RecommendedBusiness,
    RecommendationResponse,
    UserContext,
)
from ..ai_client import CompletionClient
from ..base import BaseService
from .ai_enhancer import QueryEnhancer
from .candidates import Candidate, ScoredCandidate, business_candidate
from .filter_builder import BusinessFilterBuilder
from .ordering import BUSINESS_SORT_KEYS, sort_results
from .query_validator import SearchQuery
from .relevance import RelevanceScorer

logger = logging.getLogger(__name__)

# Recommendation weights
REC_RATING_MULTIPLIER = 10.0
REC_VERIFIED_BOOST = 20.0
REC_FEATURED_BOOST = 15.0
REC_REVIEWS_PER_REVIEW = 2.0
REC_REVIEWS_CAP = 20.0
REC_LOCATION_BOOST = 25.0

HIGHLY_RATED_THRESHOLD = 4.5
REASON_SEPARATOR = " • "

RECOMMENDATION_SYSTEM_PROMPT = "You are a helpful Minnesota business directory assistant."


class AISearchService(BaseService):
    def __init__(
        self,
        db: Session,
        enhancer: QueryEnhancer,
        client: Optional[CompletionClient] = None,
        repository: Optional[BusinessRepository] = None,
        scorer: Optional[RelevanceScorer] = None,
        candidate_cap: Optional[int] = None,
    ) -> None:
        super().__init__(db)
        self.enhancer = enhancer
        self.client = client
        self.repository = repository or BusinessRepository(db)
        self.filter_builder = BusinessFilterBuilder()
        self.scorer = scorer or RelevanceScorer()
        self.candidate_cap = candidate_cap or settings.search_candidate_cap

    @BaseService.measure_operation("ai_search")
    async def search(self, request: AISearchRequest) -> AISearchResponse:
        enhancement = await self.enhancer.enhance(request.query)
        query = SearchQuery(text=request.query, limit=request.limit, sort_by="relevance", enhance=True)

        predicates = self.filter_builder.build(query, enhancement, degraded=enhancement is None)
        rows = self.repository.find_candidates(predicates, self.candidate_cap)
        aggregates = self.repository.rating_aggregates(row.id for row in rows)

        scored = [
            ScoredCandidate(
                candidate=candidate,
                score=self.scorer.score(candidate, request.query, enhancement),
            )
            for candidate in (business_candidate(row, aggregates.get(row.id)) for row in rows)
        ]
        top = sort_results(scored, BUSINESS_SORT_KEYS["relevance"], descending=True)[: request.limit]

        recommendations: Optional[List[str]] = None
        if request.include_recommendations and top:
            recommendations = await self._generate_recommendations(
                request.query, request.user_context, [r.candidate for r in top[:5]]
            )

        results = [BusinessSummary.from_scored(result) for result in top]
        return AISearchResponse(
            results=results,
            search_enhancements=enhancement,
            recommendations=recommendations,
            total_results=len(results),
        )

    async def _generate_recommendations(
        self, query: str, context: Optional[UserContext], top: List[Candidate]
    ) -> Optional[List[str]]:
        if self.client is None:
            return None

        context_text = (
            json.dumps(context.model_dump(by_alias=True, exclude_defaults=True))
            if context is not None
            else "No specific context provided"
        )
        listing = "\n".join(
            f"- {c.name}: {c.source.short_description or c.description}" for c in top
        )
        prompt = (
            f'Based on the user\'s search "{query}" and context:\n{context_text}\n\n'
            f"And these search results:\n{listing}\n\n"
            "Provide 3 specific recommendations for how these businesses could help the user. "
            'Be specific and actionable. Respond with a JSON object: {"recommendations": [string, ...]}.'
        )
        try:
            payload = await self.client.complete_json(RECOMMENDATION_SYSTEM_PROMPT, prompt)
        except AIServiceException as e:
            logger.warning(f"AI recommendations failed ({e.code}): {e.message}")
            prometheus_metrics.record_ai_fallback("recommendations", e.code or "AI_ERROR")
            return None

        items = payload.get("recommendations")
        if not isinstance(items, list):
            logger.warning("AI recommendations payload had no recommendations list")
            return None
        return [str(item).strip() for item in items if str(item).strip()]

    @BaseService.measure_operation("ai_recommendations")
    def recommend(self, request: RecommendationRequest) -> RecommendationResponse:
        if request.business_id:
            target = self.repository.get_by_id(request.business_id)
            if target is None:
                raise BusinessNotFoundException(request.business_id)
            category_ids = [link.category_id for link in target.categories]
            rows = self.repository.find_sharing_categories(
                category_ids, exclude_id=target.id, cap=self.candidate_cap
            )
        else:
            rows = self.repository.find_featured(cap=self.candidate_cap)

        aggregates = self.repository.rating_aggregates(row.id for row in rows)
        context = request.user_context
        scored = [
            ScoredCandidate(candidate=candidate, score=self.recommendation_score(candidate, context))
            for candidate in (business_candidate(row, aggregates.get(row.id)) for row in rows)
        ]
        top = sort_results(scored, BUSINESS_SORT_KEYS["relevance"], descending=True)[: request.limit]

        recommendations = []
        for result in top:
            summary = BusinessSummary.from_scored(result)
            recommendations.append(
                RecommendedBusiness(
                    **summary.model_dump(),
                    reason=self.recommendation_reason(result.candidate, context),
                )
            )
        return RecommendationResponse(recommendations=recommendations, context=context)

    @staticmethod
    def _location_match(business: Business, location: Optional[str]) -> Optional[str]:
        if not location:
            return None
        wanted = location.lower()
        for loc in business.locations:
            if loc.city and wanted in loc.city.lower():
                return loc.city
        return None

    def recommendation_score(self, candidate: Candidate, context: UserContext) -> float:
        score = REC_RATING_MULTIPLIER * candidate.average_rating
        if candidate.verified:
            score += REC_VERIFIED_BOOST
        if candidate.featured:
            score += REC_FEATURED_BOOST
        score += min(REC_REVIEWS_PER_REVIEW * candidate.review_count, REC_REVIEWS_CAP)
        if self._location_match(candidate.source, context.location):
            score += REC_LOCATION_BOOST
        return score

    def recommendation_reason(self, candidate: Candidate, context: UserContext) -> str:
        business: Business = candidate.source
        reasons: List[str] = []
        if candidate.review_count and candidate.average_rating >= HIGHLY_RATED_THRESHOLD:
            reasons.append(f"Highly rated ({candidate.average_rating:.1f} stars)")
        if candidate.verified:
            reasons.append("Verified business")
        if candidate.featured:
            reasons.append("Featured partner")
        city = self._location_match(business, context.location)
        if city:
            reasons.append(f"Located in {city}")
        links = [link for link in business.categories if link.category is not None]
        if links:
            primary = next((link for link in links if link.is_primary), links[0])
            reasons.append(f"Specializes in {primary.category.name}")
        return REASON_SEPARATOR.join(reasons) or "Recommended for you"
