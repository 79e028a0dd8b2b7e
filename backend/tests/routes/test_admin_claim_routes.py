"""Route-level tests for the admin claim console at /api/v1/admin/claims."""

import pytest

from directory.models.claim import BusinessClaim, ClaimStatus, VerificationType


@pytest.fixture
def make_claim(db):
    def _make(business, user, status=ClaimStatus.PENDING):
        claim = BusinessClaim(
            business_id=business.id,
            user_id=user.id,
            verification_type=VerificationType.EMAIL,
            verification_data={"email": user.email},
            status=status,
        )
        db.add(claim)
        db.commit()
        db.refresh(claim)
        return claim

    return _make


def test_non_admin_forbidden(client, customer_headers):
    response = client.get("/api/v1/admin/claims", headers=customer_headers)

    assert response.status_code == 403


def test_list_and_filter(client, admin_headers, make_business, make_claim, customer, owner):
    make_claim(make_business("First Diner"), customer)
    make_claim(make_business("Second Diner"), owner, status=ClaimStatus.REJECTED)

    everything = client.get("/api/v1/admin/claims", headers=admin_headers)
    pending = client.get("/api/v1/admin/claims", params={"status": "PENDING"}, headers=admin_headers)

    assert [c["status"] for c in everything.json()] == ["PENDING", "REJECTED"]
    assert [c["business"]["name"] for c in pending.json()] == ["First Diner"]
    assert pending.json()[0]["user"]["email"] == customer.email


def test_approve_transfers_ownership(client, db, admin_headers, make_business, make_claim, customer):
    business = make_business("Unclaimed Diner")
    claim = make_claim(business, customer)

    response = client.post(
        f"/api/v1/admin/claims/{claim.id}/approve", json={"notes": "Domain email checked"}, headers=admin_headers
    )

    assert response.status_code == 200
    body = response.json()
    assert body["status"] == "APPROVED"
    assert body["notes"] == "Domain email checked"
    assert body["reviewedAt"] is not None
    assert body["business"]["claimedById"] == customer.id
    assert body["business"]["verified"] is True
    db.refresh(business)
    assert business.claimed_by_id == customer.id


def test_reject_without_body(client, admin_headers, make_business, make_claim, customer):
    claim = make_claim(make_business("Unclaimed Diner"), customer)

    response = client.post(f"/api/v1/admin/claims/{claim.id}/reject", headers=admin_headers)

    assert response.status_code == 200
    assert response.json()["status"] == "REJECTED"


def test_processed_claim_cannot_be_decided_again(client, admin_headers, make_business, make_claim, customer):
    claim = make_claim(make_business("Unclaimed Diner"), customer, status=ClaimStatus.APPROVED)

    response = client.post(f"/api/v1/admin/claims/{claim.id}/reject", headers=admin_headers)

    assert response.status_code == 422
    assert response.json()["code"] == "CLAIM_ALREADY_PROCESSED"


def test_approve_refuses_business_owned_by_someone_else(
    client, admin_headers, make_business, make_claim, owner, customer
):
    claim = make_claim(make_business("Owned Diner", owner=owner), customer)

    response = client.post(f"/api/v1/admin/claims/{claim.id}/approve", headers=admin_headers)

    assert response.status_code == 409


def test_stats(client, admin_headers, make_business, make_claim, customer, owner):
    make_claim(make_business("First Diner"), customer)
    make_claim(make_business("Second Diner"), owner, status=ClaimStatus.APPROVED)

    response = client.get("/api/v1/admin/claims/stats", headers=admin_headers)

    body = response.json()
    assert body["total"] == 2
    assert body["pending"] == 1
    assert body["approved"] == 1
    assert [c["business"]["name"] for c in body["recentPending"]] == ["First Diner"]


def test_unknown_claim(client, admin_headers):
    response = client.get("/api/v1/admin/claims/01HMISSING0000000000000000", headers=admin_headers)

    assert response.status_code == 404
    assert response.json()["code"] == "CLAIM_NOT_FOUND"
