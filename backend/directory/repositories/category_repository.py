# backend/directory/repositories/category_repository.py
"""Repository for the category tree."""

import logging
from typing import List, Optional

from sqlalchemy import func
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session, selectinload

from ..core.exceptions import RepositoryException
from ..models.business import BusinessCategory
from ..models.category import Category
from .base_repository import BaseRepository

logger = logging.getLogger(__name__)

# Sentinel distinguishing "no parent filter" from "parentId=null"
ANY_PARENT = object()


class CategoryRepository(BaseRepository[Category]):
    def __init__(self, db: Session):
        super().__init__(db, Category)

    def list_categories(self, parent_id: object = ANY_PARENT, featured: Optional[bool] = None) -> List[Category]:
        query = self._build_query().options(selectinload(Category.children))
        if parent_id is None:
            query = query.filter(Category.parent_id.is_(None))
        elif parent_id is not ANY_PARENT:
            query = query.filter(Category.parent_id == parent_id)
        if featured is not None:
            query = query.filter(Category.featured.is_(featured))
        return self._execute_query(query.order_by(Category.display_order, Category.name))

    def roots_with_children(self) -> List[Category]:
        query = (
            self._build_query()
            .options(selectinload(Category.children))
            .filter(Category.parent_id.is_(None))
            .order_by(Category.display_order, Category.name)
        )
        return self._execute_query(query)

    def get_by_slug(self, slug: str) -> Optional[Category]:
        try:
            return (
                self._build_query()
                .options(selectinload(Category.children), selectinload(Category.parent))
                .filter(Category.slug == slug)
                .first()
            )
        except SQLAlchemyError as e:
            self.logger.error(f"Error getting category by slug {slug}: {str(e)}")
            raise RepositoryException(f"Failed to retrieve category: {str(e)}")

    def slug_exists(self, slug: str, exclude_id: Optional[str] = None) -> bool:
        try:
            query = self.db.query(Category.id).filter(Category.slug == slug)
            if exclude_id:
                query = query.filter(Category.id != exclude_id)
            return query.first() is not None
        except SQLAlchemyError as e:
            self.logger.error(f"Error checking category slug {slug}: {str(e)}")
            raise RepositoryException(f"Failed to check category slug: {str(e)}")

    def get_many(self, ids: List[str]) -> List[Category]:
        if not ids:
            return []
        return self._execute_query(self._build_query().filter(Category.id.in_(ids)))

    def business_count(self, category_id: str) -> int:
        return int(
            self._execute_scalar(
                self.db.query(func.count()).select_from(BusinessCategory).filter(
                    BusinessCategory.category_id == category_id
                )
            )
            or 0
        )

    def children_count(self, category_id: str) -> int:
        return self.count(parent_id=category_id)
