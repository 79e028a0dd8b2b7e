# backend/directory/routes/v1/admin_claims.py
"""
Admin claim console - API v1

All endpoints require an admin.

Endpoints:
    GET /                      → Claims, pending first (optional ?status=)
    GET /stats                 → Counts by status + five most recent pending
    GET /{claim_id}            → Claim detail
    POST /{claim_id}/approve   → Approve: owner set, business verified
    POST /{claim_id}/reject    → Reject
"""

import logging
from typing import List, Optional

from fastapi import APIRouter, Body, Depends, Query

from ...api.dependencies.auth import require_admin
from ...api.dependencies.services import get_claim_service
from ...models.claim import ClaimStatus
from ...models.user import User
from ...schemas.claim import ClaimDecision, ClaimOut, ClaimStats
from ...services.claim_service import ClaimService

logger = logging.getLogger(__name__)

router = APIRouter(tags=["admin-claims-v1"], dependencies=[Depends(require_admin)])


@router.get("", response_model=List[ClaimOut], response_model_by_alias=True)
def list_claims(
    status: Optional[ClaimStatus] = Query(None),
    service: ClaimService = Depends(get_claim_service),
) -> List[ClaimOut]:
    return service.list_claims(status)


@router.get("/stats", response_model=ClaimStats, response_model_by_alias=True)
def claim_stats(service: ClaimService = Depends(get_claim_service)) -> ClaimStats:
    return service.stats()


@router.get("/{claim_id}", response_model=ClaimOut, response_model_by_alias=True)
def get_claim(claim_id: str, service: ClaimService = Depends(get_claim_service)) -> ClaimOut:
    return service.get_claim(claim_id)


@router.post("/{claim_id}/approve", response_model=ClaimOut, response_model_by_alias=True)
def approve_claim(
    claim_id: str,
    payload: Optional[ClaimDecision] = Body(default=None),
    admin: User = Depends(require_admin),
    service: ClaimService = Depends(get_claim_service),
) -> ClaimOut:
    return service.approve(claim_id, admin, notes=payload.notes if payload else None)


@router.post("/{claim_id}/reject", response_model=ClaimOut, response_model_by_alias=True)
def reject_claim(
    claim_id: str,
    payload: Optional[ClaimDecision] = Body(default=None),
    admin: User = Depends(require_admin),
    service: ClaimService = Depends(get_claim_service),
) -> ClaimOut:
    return service.reject(claim_id, admin, notes=payload.notes if payload else None)
