"""Route-level tests for /api/v1/events."""

from datetime import datetime, timedelta, timezone

from directory.models.event import EventStatus


def _future(days: int) -> str:
    return (datetime.now(timezone.utc) + timedelta(days=days)).isoformat()


class TestManagement:
    def test_owner_creates_draft(self, client, owner, owner_headers, make_business):
        business = make_business("Host Hall", owner=owner)

        response = client.post(
            "/api/v1/events",
            json={
                "businessId": business.id,
                "title": "AI Meetup",
                "startDate": _future(10),
                "endDate": _future(11),
                "maxAttendees": 40,
            },
            headers=owner_headers,
        )

        assert response.status_code == 201
        body = response.json()
        assert body["status"] == "DRAFT"
        assert body["slug"].startswith("ai-meetup")
        assert body["business"]["id"] == business.id
        assert body["spotsRemaining"] == 40

    def test_non_owner_cannot_create(self, client, owner, customer_headers, make_business):
        business = make_business("Host Hall", owner=owner)

        response = client.post(
            "/api/v1/events",
            json={"businessId": business.id, "title": "AI Meetup", "startDate": _future(1), "endDate": _future(2)},
            headers=customer_headers,
        )

        assert response.status_code == 403

    def test_end_before_start_rejected(self, client, owner, owner_headers, make_business):
        business = make_business("Host Hall", owner=owner)

        response = client.post(
            "/api/v1/events",
            json={"businessId": business.id, "title": "Backwards", "startDate": _future(5), "endDate": _future(1)},
            headers=owner_headers,
        )

        assert response.status_code == 422

    def test_owner_publishes(self, client, owner, owner_headers, make_business, make_event):
        business = make_business("Host Hall", owner=owner)
        event = make_event(business, "Draft Night", status=EventStatus.DRAFT)

        response = client.patch(
            f"/api/v1/events/{event.id}/status", json={"status": "PUBLISHED"}, headers=owner_headers
        )

        assert response.status_code == 200
        assert response.json()["status"] == "PUBLISHED"

    def test_owner_deletes(self, client, owner, owner_headers, make_business, make_event):
        business = make_business("Host Hall", owner=owner)
        event = make_event(business, "Gone Soon")

        response = client.delete(f"/api/v1/events/{event.id}", headers=owner_headers)
        follow_up = client.get(f"/api/v1/events/{event.id}")

        assert response.json()["message"] == "Event deleted"
        assert follow_up.status_code == 404
        assert follow_up.json()["code"] == "EVENT_NOT_FOUND"


class TestRegistration:
    def test_register_and_cancel(self, client, customer, customer_headers, make_business, make_event):
        event = make_event(make_business("Host Hall"), "Open Night", max_attendees=5)

        registered = client.post(f"/api/v1/events/{event.id}/register", headers=customer_headers)
        detail = client.get(f"/api/v1/events/{event.id}")
        cancelled = client.delete(f"/api/v1/events/{event.id}/register", headers=customer_headers)
        after = client.get(f"/api/v1/events/{event.id}")

        assert registered.status_code == 201
        assert registered.json()["email"] == customer.email
        assert registered.json()["status"] == "CONFIRMED"
        assert detail.json()["registrationCount"] == 1
        assert detail.json()["spotsRemaining"] == 4
        assert cancelled.json()["message"] == "Registration cancelled"
        assert after.json()["registrationCount"] == 0

    def test_duplicate_registration_conflicts(self, client, customer_headers, make_business, make_event):
        event = make_event(make_business("Host Hall"), "Open Night")

        client.post(f"/api/v1/events/{event.id}/register", headers=customer_headers)
        response = client.post(f"/api/v1/events/{event.id}/register", headers=customer_headers)

        assert response.status_code == 409
        assert response.json()["code"] == "ALREADY_REGISTERED"

    def test_full_event_rejects(
        self, client, customer_headers, owner_headers, make_business, make_event
    ):
        event = make_event(make_business("Host Hall"), "Tiny Workshop", max_attendees=1)

        client.post(f"/api/v1/events/{event.id}/register", headers=owner_headers)
        response = client.post(f"/api/v1/events/{event.id}/register", headers=customer_headers)

        assert response.status_code == 422
        assert response.json()["code"] == "EVENT_FULL"

    def test_draft_event_not_open(self, client, customer_headers, make_business, make_event):
        event = make_event(make_business("Host Hall"), "Secret Draft", status=EventStatus.DRAFT)

        response = client.post(f"/api/v1/events/{event.id}/register", headers=customer_headers)

        assert response.status_code == 422
        assert response.json()["code"] == "EVENT_NOT_OPEN"

    def test_cancelled_registration_can_be_renewed(self, client, customer_headers, make_business, make_event):
        event = make_event(make_business("Host Hall"), "Second Chance")
        url = f"/api/v1/events/{event.id}/register"

        first = client.post(url, headers=customer_headers)
        client.delete(url, headers=customer_headers)
        again = client.post(url, json={"name": "Casey C."}, headers=customer_headers)

        assert again.status_code == 201
        assert again.json()["id"] == first.json()["id"]
        assert again.json()["name"] == "Casey C."


class TestSearch:
    def test_only_published_by_default(self, client, make_business, make_event):
        business = make_business("Host Hall")
        make_event(business, "Visible Talk")
        make_event(business, "Hidden Draft", status=EventStatus.DRAFT)

        response = client.get("/api/v1/events/search")

        assert response.status_code == 200
        assert [e["title"] for e in response.json()["data"]] == ["Visible Talk"]

    def test_sorted_by_start_date(self, client, make_business, make_event):
        business = make_business("Host Hall")
        make_event(business, "Later Talk", starts_in_days=20)
        make_event(business, "Sooner Talk", starts_in_days=2)

        response = client.get("/api/v1/events/search", params={"sortBy": "startDate"})

        assert [e["title"] for e in response.json()["data"]] == ["Sooner Talk", "Later Talk"]

    def test_reversed_dates_rejected(self, client):
        response = client.get(
            "/api/v1/events/search",
            params={"startDate": "2026-06-10T00:00:00", "endDate": "2026-06-01T00:00:00"},
        )

        assert response.status_code == 400
        assert response.json()["errors"]["fields"] == ["endDate", "startDate"]
