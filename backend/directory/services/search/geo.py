# backend/directory/services/search/geo.py
"""
Great-circle distance filtering.

Distances are in statute miles using the Haversine formula over a spherical
Earth of radius 3959 miles.
"""
from __future__ import annotations

from dataclasses import dataclass
import math
from typing import Iterable, List, Optional

from ...core.constants import EARTH_RADIUS_MILES
from .candidates import Candidate, ScoredCandidate


@dataclass(frozen=True)
class GeoPoint:
    latitude: float
    longitude: float


def haversine_miles(lat1: float, lng1: float, lat2: float, lng2: float) -> float:
    """Great-circle distance between two (lat, lng) pairs in miles."""
    phi1 = math.radians(lat1)
    phi2 = math.radians(lat2)
    d_phi = math.radians(lat2 - lat1)
    d_lambda = math.radians(lng2 - lng1)

    a = math.sin(d_phi / 2) ** 2 + math.cos(phi1) * math.cos(phi2) * math.sin(d_lambda / 2) ** 2
    # Clamp against floating error for antipodal points
    a = min(1.0, max(0.0, a))
    return EARTH_RADIUS_MILES * 2 * math.atan2(math.sqrt(a), math.sqrt(1 - a))


def distance_from(point: GeoPoint, candidate: Candidate) -> Optional[float]:
    if not candidate.has_location:
        return None
    return haversine_miles(point.latitude, point.longitude, candidate.latitude, candidate.longitude)


def apply_geo_filter(
    candidates: Iterable[Candidate],
    point: Optional[GeoPoint],
    radius_miles: Optional[float],
) -> List[ScoredCandidate]:
    """
    Attach distances and drop candidates outside the radius.

    - No point: candidates pass through without distances.
    - Point without radius: distances are attached, nothing is dropped.
    - Point and radius: candidates without a location, or farther than
      ``radius_miles``, are dropped.
    """
    results: List[ScoredCandidate] = []
    for candidate in candidates:
        if point is None:
            results.append(ScoredCandidate(candidate=candidate))
            continue
        distance = distance_from(point, candidate)
        if radius_miles is not None and (distance is None or distance > radius_miles):
            continue
        results.append(ScoredCandidate(candidate=candidate, distance=distance))
    return results
