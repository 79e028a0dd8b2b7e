"""Unit tests for page slicing and result ordering."""

from datetime import datetime

import pytest

from directory.services.search.candidates import Candidate, ScoredCandidate
from directory.services.search.ordering import BUSINESS_SORT_KEYS, EVENT_SORT_KEYS, sort_results
from directory.services.search.pagination import paginate, total_pages


def _scored(id_: str, name: str = "Same", score: float = 0.0, distance=None, rating: float = 0.0) -> ScoredCandidate:
    candidate = Candidate(
        id=id_,
        name=name,
        description="",
        categories=(),
        latitude=None,
        longitude=None,
        average_rating=rating,
    )
    return ScoredCandidate(candidate=candidate, score=score, distance=distance)


class TestPaginate:
    def test_third_page_of_45(self):
        page = paginate(list(range(45)), page=3, limit=20)

        assert page.items == list(range(40, 45))
        assert page.total == 45
        assert page.total_pages == 3

    def test_page_past_the_end_is_empty(self):
        page = paginate(list(range(5)), page=4, limit=2)

        assert page.items == []
        assert page.total == 5
        assert page.total_pages == 3

    def test_empty_input(self):
        page = paginate([], page=1, limit=20)
        assert page.items == [] and page.total == 0 and page.total_pages == 0

    def test_rejects_page_zero(self):
        with pytest.raises(ValueError):
            paginate([1, 2], page=0, limit=1)

    @pytest.mark.parametrize("total,limit,expected", [(0, 20, 0), (20, 20, 1), (21, 20, 2), (1, 100, 1)])
    def test_total_pages_is_ceiling(self, total, limit, expected):
        assert total_pages(total, limit) == expected


class TestSortResults:
    def test_ties_resolve_by_id_in_both_directions(self):
        results = [_scored("c"), _scored("a"), _scored("b")]

        ascending = sort_results(results, BUSINESS_SORT_KEYS["name"])
        descending = sort_results(results, BUSINESS_SORT_KEYS["name"], descending=True)

        assert [r.id for r in ascending] == ["a", "b", "c"]
        assert [r.id for r in descending] == ["a", "b", "c"]

    def test_relevance_descending(self):
        results = [_scored("a", score=1), _scored("b", score=9), _scored("c", score=5)]

        ordered = sort_results(results, BUSINESS_SORT_KEYS["relevance"], descending=True)

        assert [r.id for r in ordered] == ["b", "c", "a"]

    def test_missing_distance_goes_last(self):
        results = [_scored("a"), _scored("b", distance=4.0), _scored("c", distance=1.0)]

        ordered = sort_results(results, BUSINESS_SORT_KEYS["distance"])

        assert [r.id for r in ordered] == ["c", "b", "a"]

    def test_event_start_date_key(self):
        early = ScoredCandidate(
            candidate=Candidate(
                id="z", name="Early", description="", categories=(), latitude=None, longitude=None,
                starts_at=datetime(2030, 1, 1),
            )
        )
        late = ScoredCandidate(
            candidate=Candidate(
                id="a", name="Late", description="", categories=(), latitude=None, longitude=None,
                starts_at=datetime(2030, 6, 1),
            )
        )

        assert [r.id for r in sort_results([late, early], EVENT_SORT_KEYS["startDate"])] == ["z", "a"]

    def test_same_input_same_output(self):
        results = [_scored(str(i), name=f"n{i % 3}", rating=i % 4) for i in range(12)]

        first = sort_results(results, BUSINESS_SORT_KEYS["rating"], descending=True)
        second = sort_results(list(reversed(results)), BUSINESS_SORT_KEYS["rating"], descending=True)

        assert [r.id for r in first] == [r.id for r in second]
