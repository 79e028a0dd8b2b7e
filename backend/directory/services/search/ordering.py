# backend/directory/services/search/ordering.py
"""
Deterministic result ordering.

Results are first ordered by candidate id, then stably sorted by the requested
key, so equal keys always resolve by id ascending in either direction.
Results whose key is missing (e.g. no distance) go last.
"""
from __future__ import annotations

from typing import Any, Callable, Dict, List, Sequence

from .candidates import ScoredCandidate

SortKey = Callable[[ScoredCandidate], Any]

BUSINESS_SORT_KEYS: Dict[str, SortKey] = {
    "name": lambda r: r.candidate.name.lower(),
    "createdAt": lambda r: r.candidate.created_at,
    "distance": lambda r: r.distance,
    "rating": lambda r: r.candidate.average_rating,
    "relevance": lambda r: r.score,
}

EVENT_SORT_KEYS: Dict[str, SortKey] = {
    "startDate": lambda r: r.candidate.starts_at,
    "createdAt": lambda r: r.candidate.created_at,
    "title": lambda r: r.candidate.name.lower(),
    "distance": lambda r: r.distance,
    "relevance": lambda r: r.score,
}


def sort_results(
    results: Sequence[ScoredCandidate], key: SortKey, descending: bool = False
) -> List[ScoredCandidate]:
    by_id = sorted(results, key=lambda r: r.id)
    present = [r for r in by_id if key(r) is not None]
    missing = [r for r in by_id if key(r) is None]
    present.sort(key=key, reverse=descending)
    return present + missing
