"""Analytics range arithmetic and counters."""

from datetime import date

import pytest

from directory.core.exceptions import BusinessNotFoundException, OwnershipRequiredException
from directory.services.analytics_service import AnalyticsService, percent_change, range_bounds


class TestRangeBounds:
    def test_seven_days(self):
        start, end, previous_start, previous_end = range_bounds("7d", date(2026, 10, 17))

        assert (start, end) == (date(2026, 10, 10), date(2026, 10, 17))
        assert (previous_start, previous_end) == (date(2026, 10, 2), date(2026, 10, 9))

    def test_periods_are_the_same_length(self):
        start, end, previous_start, previous_end = range_bounds("90d", date(2026, 1, 15))

        assert (end - start) == (previous_end - previous_start)
        assert (start - previous_end).days == 1

    def test_unknown_range(self):
        with pytest.raises(KeyError):
            range_bounds("2w", date(2026, 1, 1))


class TestPercentChange:
    @pytest.mark.parametrize(
        "current,previous,expected",
        [(150, 100, 50.0), (50, 100, -50.0), (1, 3, -66.7), (10, 0, None), (0, 0, None)],
    )
    def test_values(self, current, previous, expected):
        assert percent_change(current, previous) == expected


def test_record_view_accumulates(db, make_business):
    business = make_business("Counter Cafe")
    service = AnalyticsService(db)

    service.record_view(business.id)
    result = service.record_view(business.id)

    assert result.views == 2


def test_record_view_unknown_business(db):
    with pytest.raises(BusinessNotFoundException):
        AnalyticsService(db).record_view("01HMISSING0000000000000000")


def test_summary_requires_owner(db, make_business, owner, customer):
    business = make_business("Owned Cafe", owner=owner)

    with pytest.raises(OwnershipRequiredException):
        AnalyticsService(db).summary(business.id, "30d", customer)


def test_summary_counts_views_and_reviews(db, make_business, make_review, owner, customer, admin):
    business = make_business("Owned Cafe", owner=owner)
    service = AnalyticsService(db)
    service.record_view(business.id)
    service.record_view(business.id)
    make_review(business, customer, 5)
    make_review(business, admin, 3)

    summary = service.summary(business.id, "7d", owner)

    assert summary.views.total == 2
    assert summary.views.change_percent is None
    assert summary.reviews.total == 2
    assert summary.reviews.average_rating == 4.0
    assert summary.reviews.new_in_period == 2
