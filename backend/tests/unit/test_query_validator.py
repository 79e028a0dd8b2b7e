"""Unit tests for search parameter validation."""

from datetime import datetime

import pytest

from directory.core.exceptions import ValidationException
from directory.models.business import BusinessStatus
from directory.models.event import EventStatus
from directory.services.search.geo import GeoPoint
from directory.services.search.query_validator import parse_business_search, parse_event_search


class TestParseBusinessSearch:
    def test_defaults(self):
        query = parse_business_search({})

        assert query.status == BusinessStatus.ACTIVE
        assert query.page == 1
        assert query.limit == 20
        assert query.sort_by == "name"
        assert query.sort_order == "asc"
        assert query.enhance is False
        assert query.point is None

    def test_camel_case_parameters(self):
        query = parse_business_search(
            {
                "query": " coffee ",
                "categoryId": "01HCATEGORY000000000000000",
                "city": "Minneapolis",
                "lat": "44.9778",
                "lng": "-93.2650",
                "radius": "10",
                "page": "2",
                "limit": "5",
                "sortBy": "distance",
                "verified": "true",
            }
        )

        assert query.text == "coffee"
        assert query.category_id == "01HCATEGORY000000000000000"
        assert query.point == GeoPoint(44.9778, -93.2650)
        assert query.radius == 10
        assert (query.page, query.limit) == (2, 5)
        assert query.sort_by == "distance"
        assert query.verified is True

    @pytest.mark.parametrize("sort_by", ["rating", "relevance"])
    def test_best_first_sorts_default_descending(self, sort_by):
        assert parse_business_search({"sortBy": sort_by}).sort_order == "desc"

    def test_explicit_sort_order_wins(self):
        assert parse_business_search({"sortBy": "rating", "sortOrder": "asc"}).sort_order == "asc"

    def test_blank_values_are_ignored(self):
        query = parse_business_search({"city": "", "query": "   "})
        assert query.city is None
        assert query.text is None

    def test_reports_every_invalid_field(self):
        with pytest.raises(ValidationException) as exc_info:
            parse_business_search({"radius": "0", "limit": "500", "page": "0"})

        assert {"radius", "limit", "page"} <= set(exc_info.value.fields)
        assert exc_info.value.code == "VALIDATION_ERROR"

    def test_radius_above_maximum(self):
        with pytest.raises(ValidationException) as exc_info:
            parse_business_search({"lat": "44.9", "lng": "-93.2", "radius": "101"})
        assert exc_info.value.fields == ["radius"]

    def test_lat_without_lng(self):
        with pytest.raises(ValidationException) as exc_info:
            parse_business_search({"lat": "44.9"})
        assert set(exc_info.value.fields) == {"lat", "lng"}

    def test_distance_sort_requires_point(self):
        with pytest.raises(ValidationException) as exc_info:
            parse_business_search({"sortBy": "distance"})
        assert "sortBy" in exc_info.value.fields

    def test_distance_sort_by_field_name_requires_point(self):
        with pytest.raises(ValidationException) as exc_info:
            parse_business_search({"sort_by": "distance"})
        assert exc_info.value.fields == ["sortBy"]

    def test_distance_sort_by_field_name_with_point(self):
        query = parse_business_search({"sort_by": "distance", "lat": "44.98", "lng": "-93.27"})
        assert query.sort_by == "distance"

    def test_unknown_status_rejected(self):
        with pytest.raises(ValidationException) as exc_info:
            parse_business_search({"status": "CLOSED"})
        assert exc_info.value.fields == ["status"]

    def test_ai_flag_and_override(self):
        assert parse_business_search({"ai": "true"}).enhance is True
        assert parse_business_search({"ai": "true"}, enhance=False).enhance is False
        assert parse_business_search({}, enhance=True).enhance is True


class TestParseEventSearch:
    def test_defaults(self):
        query = parse_event_search({})

        assert query.status == EventStatus.PUBLISHED
        assert query.sort_by == "startDate"
        assert query.sort_order == "asc"

    def test_date_range(self):
        query = parse_event_search({"startDate": "2030-01-01T00:00:00Z", "endDate": "2030-02-01T00:00:00Z"})

        assert query.start_date == datetime(2030, 1, 1)
        assert query.end_date == datetime(2030, 2, 1)

    def test_end_before_start_rejected(self):
        with pytest.raises(ValidationException) as exc_info:
            parse_event_search({"startDate": "2030-02-01T00:00:00Z", "endDate": "2030-01-01T00:00:00Z"})
        assert set(exc_info.value.fields) == {"startDate", "endDate"}

    def test_business_sort_key_not_valid_for_events(self):
        with pytest.raises(ValidationException) as exc_info:
            parse_event_search({"sortBy": "rating"})
        assert exc_info.value.fields == ["sortBy"]
