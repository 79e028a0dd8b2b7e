# backend/directory/routes/v1/categories.py
"""
Category routes - API v1

Endpoints:
    GET /              → Flat list; ?parentId=<id>|null, ?featured=true (public)
    GET /tree          → Full category tree (public)
    GET /{slug}        → Category detail (public)
    POST /             → Create (admin)
    PUT /{category_id} → Update (admin)
    DELETE /{category_id} → Delete when unused (admin)
"""

import logging
from typing import List, Optional

from fastapi import APIRouter, Body, Depends, Query, status

from ...api.dependencies.auth import require_admin
from ...api.dependencies.services import get_category_service
from ...models.user import User
from ...repositories.category_repository import ANY_PARENT
from ...schemas.category import (
    CategoryCreate,
    CategoryDetail,
    CategoryOut,
    CategoryTreeNode,
    CategoryUpdate,
)
from ...schemas.common import MessageResponse
from ...services.category_service import CategoryService

logger = logging.getLogger(__name__)

router = APIRouter(tags=["categories-v1"])


@router.get("", response_model=List[CategoryOut], response_model_by_alias=True)
def list_categories(
    parent_id: Optional[str] = Query(None, alias="parentId"),
    featured: Optional[bool] = Query(None),
    service: CategoryService = Depends(get_category_service),
) -> List[CategoryOut]:
    # "parentId=null" selects root categories
    if parent_id is None:
        parent_filter: object = ANY_PARENT
    elif parent_id == "null":
        parent_filter = None
    else:
        parent_filter = parent_id
    return service.list_categories(parent_filter, featured)


@router.get("/tree", response_model=List[CategoryTreeNode], response_model_by_alias=True)
def get_category_tree(service: CategoryService = Depends(get_category_service)) -> List[CategoryTreeNode]:
    return service.tree()


@router.post(
    "",
    response_model=CategoryDetail,
    response_model_by_alias=True,
    status_code=status.HTTP_201_CREATED,
)
def create_category(
    payload: CategoryCreate = Body(...),
    _admin: User = Depends(require_admin),
    service: CategoryService = Depends(get_category_service),
) -> CategoryDetail:
    return service.create_category(payload)


@router.get("/{slug}", response_model=CategoryDetail, response_model_by_alias=True)
def get_category(slug: str, service: CategoryService = Depends(get_category_service)) -> CategoryDetail:
    return service.get_by_slug(slug)


@router.put("/{category_id}", response_model=CategoryDetail, response_model_by_alias=True)
def update_category(
    category_id: str,
    payload: CategoryUpdate = Body(...),
    _admin: User = Depends(require_admin),
    service: CategoryService = Depends(get_category_service),
) -> CategoryDetail:
    return service.update_category(category_id, payload)


@router.delete("/{category_id}", response_model=MessageResponse)
def delete_category(
    category_id: str,
    _admin: User = Depends(require_admin),
    service: CategoryService = Depends(get_category_service),
) -> MessageResponse:
    service.delete_category(category_id)
    return MessageResponse(message="Category deleted")
