"""Unit tests for RelevanceScorer."""

import pytest

from directory.services.search.candidates import Candidate, ScoredCandidate
from directory.services.search.llm_schema import SearchEnhancement
from directory.services.search.relevance import (
    BUSINESS_TYPE_WEIGHT,
    FEATURED_BOOST,
    KEYWORD_WEIGHT,
    NAME_MATCH_WEIGHT,
    VERIFIED_BOOST,
    RelevanceScorer,
)


def _candidate(**overrides) -> Candidate:
    values = dict(
        id="01HZZZZZZZZZZZZZZZZZZZZZZA",
        name="North Loop Analytics",
        description="Data consulting for growing teams",
        categories=("Consulting",),
        latitude=None,
        longitude=None,
    )
    values.update(overrides)
    return Candidate(**values)


@pytest.fixture
def scorer() -> RelevanceScorer:
    return RelevanceScorer()


class TestRelevanceScorer:
    def test_plain_candidate_scores_zero(self, scorer):
        assert scorer.score(_candidate()) == 0.0

    def test_name_match_is_case_insensitive(self, scorer):
        assert scorer.score(_candidate(), raw_query="loop ANALYTICS") == NAME_MATCH_WEIGHT

    def test_keywords_and_business_types_count_per_match(self, scorer):
        enhancement = SearchEnhancement(
            keywords=["data", "consulting", "bakery"],
            business_types=["consulting", "Marketing"],
        )

        score = scorer.score(_candidate(), enhancement=enhancement)

        assert score == 2 * KEYWORD_WEIGHT + BUSINESS_TYPE_WEIGHT

    def test_without_enhancement_keywords_are_ignored(self, scorer):
        assert scorer.score(_candidate(description="data data data")) == 0.0

    def test_verified_and_featured_boosts(self, scorer):
        score = scorer.score(_candidate(verified=True, featured=True))
        assert score == VERIFIED_BOOST + FEATURED_BOOST

    def test_rating_ignored_without_reviews(self, scorer):
        assert scorer.score(_candidate(average_rating=4.0, review_count=0)) == 0.0

    @pytest.mark.parametrize("low,high", [(1.0, 1.5), (3.9, 4.0), (4.5, 5.0)])
    def test_higher_rating_strictly_increases_score(self, scorer, low, high):
        base = dict(review_count=3, verified=True)
        assert scorer.score(_candidate(average_rating=high, **base)) > scorer.score(
            _candidate(average_rating=low, **base)
        )

    def test_score_all_keeps_distances(self, scorer):
        results = scorer.score_all([ScoredCandidate(candidate=_candidate(featured=True), distance=2.5)])

        assert results[0].score == FEATURED_BOOST
        assert results[0].distance == 2.5
