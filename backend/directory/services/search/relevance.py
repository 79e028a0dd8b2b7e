# backend/directory/services/search/relevance.py
"""
Relevance scoring for directory search results.

Scoring Formula (additive, never negative):
    score = 10 × [raw query ⊂ name]
          +  5 × |enhancement keywords found in name + description|
          +  8 × |candidate categories named in enhancement business types|
          +  2 × average rating
          +  5 × verified
          +  3 × featured

All string matching is case-insensitive. Without an enhancement only the
name match and the quality signals contribute.
"""
from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Iterable, List, Optional

from .candidates import Candidate, ScoredCandidate

if TYPE_CHECKING:
    from .llm_schema import SearchEnhancement

logger = logging.getLogger(__name__)

# Scoring weights
NAME_MATCH_WEIGHT = 10.0
KEYWORD_WEIGHT = 5.0
BUSINESS_TYPE_WEIGHT = 8.0
RATING_MULTIPLIER = 2.0
VERIFIED_BOOST = 5.0
FEATURED_BOOST = 3.0


class RelevanceScorer:
    """Stateless heuristic scorer."""

    def score(
        self,
        candidate: Candidate,
        raw_query: Optional[str] = None,
        enhancement: Optional["SearchEnhancement"] = None,
    ) -> float:
        name = candidate.name.lower()
        score = 0.0

        query = (raw_query or "").strip().lower()
        if query and query in name:
            score += NAME_MATCH_WEIGHT

        if enhancement is not None:
            haystack = f"{name} {candidate.description.lower()}"
            for keyword in enhancement.keywords:
                if keyword.lower() in haystack:
                    score += KEYWORD_WEIGHT

            wanted_types = {t.lower() for t in enhancement.business_types}
            for category in candidate.categories:
                if category.lower() in wanted_types:
                    score += BUSINESS_TYPE_WEIGHT

        if candidate.review_count > 0:
            score += RATING_MULTIPLIER * max(candidate.average_rating, 0.0)
        if candidate.verified:
            score += VERIFIED_BOOST
        if candidate.featured:
            score += FEATURED_BOOST
        return score

    def score_all(
        self,
        results: Iterable[ScoredCandidate],
        raw_query: Optional[str] = None,
        enhancement: Optional["SearchEnhancement"] = None,
    ) -> List[ScoredCandidate]:
        return [
            ScoredCandidate(
                candidate=result.candidate,
                score=self.score(result.candidate, raw_query, enhancement),
                distance=result.distance,
            )
            for result in results
        ]
