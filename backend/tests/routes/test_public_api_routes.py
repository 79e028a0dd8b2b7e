"""Route-level tests for the key-authenticated public API at /api/v1/public."""

import pytest

from directory.models.business import BusinessStatus
from directory.models.event import EventStatus


def test_missing_key_rejected(client, public_api_key):
    response = client.get("/api/v1/public/businesses")

    assert response.status_code == 401
    assert response.json()["detail"] == "API key required"


def test_wrong_key_rejected(client, public_api_key):
    response = client.get("/api/v1/public/businesses", headers={"X-API-Key": "guess"})

    assert response.status_code == 401
    assert response.json()["detail"] == "Invalid API key"


def test_unconfigured_key_rejects_everything(client):
    response = client.get("/api/v1/public", headers={"X-API-Key": "anything"})

    assert response.status_code == 401


@pytest.fixture
def api_headers(public_api_key):
    return {"X-API-Key": public_api_key}


def test_index(client, api_headers):
    response = client.get("/api/v1/public", headers=api_headers)

    assert response.status_code == 200
    body = response.json()
    assert body["name"].endswith("API")
    assert "businesses" in body["endpoints"]


def test_status_parameter_cannot_expose_pending(client, api_headers, make_business):
    make_business("Open Shop")
    make_business("Pending Shop", status=BusinessStatus.PENDING)

    response = client.get("/api/v1/public/businesses", params={"status": "PENDING"}, headers=api_headers)

    assert response.status_code == 200
    assert [b["name"] for b in response.json()["data"]] == ["Open Shop"]


def test_business_by_id_or_slug(client, api_headers, make_business):
    active = make_business("Open Shop")
    pending = make_business("Pending Shop", status=BusinessStatus.PENDING)

    by_slug = client.get("/api/v1/public/businesses/open-shop", headers=api_headers)
    by_id = client.get(f"/api/v1/public/businesses/{active.id}", headers=api_headers)
    hidden = client.get(f"/api/v1/public/businesses/{pending.id}", headers=api_headers)

    assert by_slug.json()["id"] == active.id
    assert by_id.json()["slug"] == "open-shop"
    assert hidden.status_code == 404


def test_categories_with_counts(client, api_headers, make_category, make_business):
    food = make_category("Food")
    make_category("Auto")
    make_business("Mill City Cafe", categories=[food])

    response = client.get("/api/v1/public/businesses/categories", headers=api_headers)

    counts = {c["name"]: c["businessCount"] for c in response.json()}
    assert counts == {"Auto": 0, "Food": 1}


def test_events_only_published(client, api_headers, make_business, make_event):
    business = make_business("Host Hall")
    published = make_event(business, "Public Talk")
    draft = make_event(business, "Private Draft", status=EventStatus.DRAFT)

    listing = client.get("/api/v1/public/events", params={"status": "DRAFT"}, headers=api_headers)
    detail = client.get(f"/api/v1/public/events/{published.id}", headers=api_headers)
    hidden = client.get(f"/api/v1/public/events/{draft.id}", headers=api_headers)

    assert [e["title"] for e in listing.json()["data"]] == ["Public Talk"]
    assert detail.json()["title"] == "Public Talk"
    assert hidden.status_code == 404


def test_reviews_and_stats(client, api_headers, make_business, make_review, customer):
    business = make_business("Mill City Cafe")
    make_review(business, customer, 4)

    reviews = client.get(f"/api/v1/public/reviews/business/{business.id}", headers=api_headers)
    stats = client.get(f"/api/v1/public/reviews/business/{business.id}/stats", headers=api_headers)

    assert [r["rating"] for r in reviews.json()["data"]] == [4]
    assert stats.json()["averageRating"] == 4.0
