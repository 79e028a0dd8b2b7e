"""Route-level tests for /api/v1/businesses."""

from directory.models.business import Business, BusinessStatus
from directory.models.claim import BusinessClaim, ClaimStatus


def _create_payload(category_id: str, name: str = "North Loop Coffee") -> dict:
    return {
        "name": name,
        "description": "Single-origin espresso near Target Field",
        "website": "https://northloop.example.com",
        "categoryIds": [category_id],
        "location": {
            "address1": "200 Washington Ave N",
            "city": "Minneapolis",
            "zipCode": "55401",
            "latitude": 44.9850,
            "longitude": -93.2710,
        },
        "amenities": ["Wi-Fi", "Wi-Fi", "Patio"],
    }


class TestSearch:
    def test_invalid_parameters_list_every_field(self, client):
        response = client.get(
            "/api/v1/businesses/search",
            params={"page": "0", "limit": "500", "lat": "44.9", "sortBy": "distance"},
        )

        assert response.status_code == 400
        body = response.json()
        assert body["code"] == "VALIDATION_ERROR"
        assert body["errors"]["fields"] == ["lat", "limit", "lng", "page", "sortBy"]

    def test_returns_camel_case_page(self, client, make_business):
        make_business("Mill City Cafe", verified=True)

        response = client.get("/api/v1/businesses/search", params={"query": "mill"})

        assert response.status_code == 200
        body = response.json()
        assert body["pagination"] == {"page": 1, "limit": 20, "total": 1, "totalPages": 1}
        item = body["data"][0]
        assert item["name"] == "Mill City Cafe"
        assert item["averageRating"] == 0.0
        assert item["reviewCount"] == 0
        assert item["location"]["zipCode"] == "55401"
        assert "score" not in item

    def test_ai_search_endpoint(self, client, make_business, fake_ai):
        make_business("Loop Marketing")
        fake_ai.json_payload = {"keywords": ["marketing"], "intent": "Marketing help", "recommendations": []}

        response = client.post("/api/v1/businesses/ai-search", json={"query": "marketing"})

        assert response.status_code == 200
        body = response.json()
        assert [r["name"] for r in body["results"]] == ["Loop Marketing"]
        assert body["totalResults"] == 1
        assert body["searchEnhancements"]["intent"] == "Marketing help"


class TestLifecycle:
    def test_create_makes_caller_owner_and_pending(self, client, db, owner, owner_headers, make_category):
        coffee = make_category("Coffee")

        response = client.post("/api/v1/businesses", json=_create_payload(coffee.id), headers=owner_headers)

        assert response.status_code == 201
        body = response.json()
        assert body["slug"] == "north-loop-coffee"
        assert body["status"] == "PENDING"
        assert body["claimedById"] == owner.id
        assert body["categories"][0]["isPrimary"] is True
        assert [a["name"] for a in body["amenities"]] == ["Wi-Fi", "Patio"]
        assert db.query(Business).count() == 1

    def test_create_requires_authentication(self, client, make_category):
        coffee = make_category("Coffee")

        response = client.post("/api/v1/businesses", json=_create_payload(coffee.id))

        assert response.status_code == 401

    def test_duplicate_name_conflicts(self, client, owner_headers, make_category, make_business):
        coffee = make_category("Coffee")
        make_business("North Loop Coffee")

        response = client.post("/api/v1/businesses", json=_create_payload(coffee.id), headers=owner_headers)

        assert response.status_code == 409
        assert response.json()["code"] == "BUSINESS_SLUG_TAKEN"

    def test_unknown_category_rejected(self, client, owner_headers):
        response = client.post(
            "/api/v1/businesses", json=_create_payload("01HNOTACATEGORY00000000000"), headers=owner_headers
        )

        assert response.status_code == 400
        assert response.json()["errors"]["fields"] == ["categoryIds"]

    def test_only_owner_updates(self, client, owner, owner_headers, customer_headers, make_business):
        business = make_business("Owned Shop", owner=owner)

        forbidden = client.put(
            f"/api/v1/businesses/{business.id}", json={"phone": "612-555-0100"}, headers=customer_headers
        )
        allowed = client.put(
            f"/api/v1/businesses/{business.id}", json={"phone": "612-555-0100"}, headers=owner_headers
        )

        assert forbidden.status_code == 403
        assert forbidden.json()["code"] == "NOT_BUSINESS_OWNER"
        assert allowed.status_code == 200
        assert allowed.json()["phone"] == "612-555-0100"

    def test_owner_deletes(self, client, db, owner, owner_headers, make_business):
        business = make_business("Owned Shop", owner=owner)

        response = client.delete(f"/api/v1/businesses/{business.id}", headers=owner_headers)

        assert response.status_code == 200
        assert response.json()["message"] == "Business deleted"
        assert db.query(Business).count() == 0

    def test_get_by_slug_and_missing(self, client, make_business):
        make_business("Mill City Cafe")

        found = client.get("/api/v1/businesses/mill-city-cafe")
        missing = client.get("/api/v1/businesses/no-such-place")

        assert found.status_code == 200
        assert found.json()["locations"][0]["city"] == "Minneapolis"
        assert missing.status_code == 404
        assert missing.json()["code"] == "BUSINESS_NOT_FOUND"


class TestClaims:
    def test_submit_claim(self, client, db, customer, customer_headers, make_business):
        business = make_business("Unclaimed Diner")

        response = client.post(
            f"/api/v1/businesses/{business.id}/claim",
            json={"verificationType": "EMAIL", "verificationData": {"email": "me@diner.example.com"}},
            headers=customer_headers,
        )

        assert response.status_code == 201
        assert response.json()["status"] == "PENDING"
        claim = db.query(BusinessClaim).one()
        assert claim.user_id == customer.id
        assert claim.status == ClaimStatus.PENDING

    def test_claimed_business_conflicts(self, client, owner, customer_headers, make_business):
        business = make_business("Owned Diner", owner=owner)

        response = client.post(
            f"/api/v1/businesses/{business.id}/claim",
            json={"verificationType": "PHONE"},
            headers=customer_headers,
        )

        assert response.status_code == 409
        assert response.json()["code"] == "BUSINESS_ALREADY_CLAIMED"

    def test_second_open_claim_conflicts(self, client, customer_headers, make_business):
        business = make_business("Unclaimed Diner")
        url = f"/api/v1/businesses/{business.id}/claim"

        client.post(url, json={"verificationType": "PHONE"}, headers=customer_headers)
        response = client.post(url, json={"verificationType": "PHONE"}, headers=customer_headers)

        assert response.status_code == 409
        assert response.json()["code"] == "CLAIM_ALREADY_OPEN"


class TestAnalytics:
    def test_view_then_owner_summary(self, client, owner, owner_headers, make_business):
        business = make_business("Tracked Shop", owner=owner)

        first = client.post(f"/api/v1/businesses/{business.id}/view")
        second = client.post(f"/api/v1/businesses/{business.id}/view")
        summary = client.get(
            f"/api/v1/businesses/{business.id}/analytics", params={"timeRange": "7d"}, headers=owner_headers
        )

        assert first.json()["views"] == 1
        assert second.json()["views"] == 2
        assert summary.status_code == 200
        body = summary.json()
        assert body["range"] == "7d"
        assert body["views"]["total"] == 2
        assert body["views"]["changePercent"] is None

    def test_summary_forbidden_for_others(self, client, owner, customer_headers, make_business):
        business = make_business("Tracked Shop", owner=owner)

        response = client.get(f"/api/v1/businesses/{business.id}/analytics", headers=customer_headers)

        assert response.status_code == 403

    def test_invalid_range_rejected(self, client, owner, owner_headers, make_business):
        business = make_business("Tracked Shop", owner=owner)

        response = client.get(
            f"/api/v1/businesses/{business.id}/analytics", params={"timeRange": "2w"}, headers=owner_headers
        )

        assert response.status_code == 422

    def test_pending_business_not_in_default_search(self, client, make_business):
        make_business("Hidden Shop", status=BusinessStatus.PENDING)

        response = client.get("/api/v1/businesses/search")

        assert response.json()["data"] == []
