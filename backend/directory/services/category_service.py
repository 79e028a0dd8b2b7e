# backend/directory/services/category_service.py
"""
Category Service for the directory.

Read side: flat listing, full tree and slug lookup. Write side (admin only):
create and update with slug uniqueness, and deletion refused while businesses
or subcategories still reference the category.
"""

import logging
from typing import List, Optional

from sqlalchemy.orm import Session

from ..core.exceptions import BusinessRuleException, ConflictException, NotFoundException, ValidationException
from ..models.category import Category
from ..repositories.category_repository import ANY_PARENT, CategoryRepository
from ..schemas.category import CategoryCreate, CategoryDetail, CategoryOut, CategoryTreeNode, CategoryUpdate
from ..utils.slugs import slugify
from .base import BaseService

logger = logging.getLogger(__name__)


class CategoryService(BaseService):
    def __init__(self, db: Session):
        super().__init__(db)
        self.repository = CategoryRepository(db)

    def _get_or_404(self, category_id: str) -> Category:
        category = self.repository.get_by_id(category_id)
        if category is None:
            raise NotFoundException("Category not found", code="CATEGORY_NOT_FOUND", details={"category": category_id})
        return category

    def _check_slug(self, slug: str, exclude_id: Optional[str] = None) -> None:
        if self.repository.slug_exists(slug, exclude_id=exclude_id):
            raise ConflictException("Category slug already exists", code="CATEGORY_SLUG_TAKEN", details={"slug": slug})

    def _check_parent(self, parent_id: Optional[str], category_id: Optional[str] = None) -> None:
        if parent_id is None:
            return
        if parent_id == category_id:
            raise ValidationException("A category cannot be its own parent", fields=["parentId"])
        if self.repository.get_by_id(parent_id) is None:
            raise ValidationException("Parent category not found", fields=["parentId"])

    def list_categories(self, parent_id: object = ANY_PARENT, featured: Optional[bool] = None) -> List[CategoryOut]:
        """``parent_id=None`` lists root categories only."""
        return [CategoryOut.from_category(c) for c in self.repository.list_categories(parent_id, featured)]

    @BaseService.measure_operation("category_tree")
    def tree(self) -> List[CategoryTreeNode]:
        return [CategoryTreeNode.from_category(root) for root in self.repository.roots_with_children()]

    def get_by_slug(self, slug: str) -> CategoryDetail:
        category = self.repository.get_by_slug(slug)
        if category is None:
            raise NotFoundException("Category not found", code="CATEGORY_NOT_FOUND", details={"category": slug})
        return self._detail(category)

    def list_with_counts(self) -> List[CategoryDetail]:
        """Every category, name order, with its business count."""
        categories = sorted(self.repository.list_categories(), key=lambda c: c.name.lower())
        return [self._detail(category) for category in categories]

    def _detail(self, category: Category) -> CategoryDetail:
        base = CategoryOut.from_category(category)
        return CategoryDetail(
            **base.model_dump(),
            meta_title=category.meta_title,
            meta_description=category.meta_description,
            parent=CategoryOut.from_category(category.parent) if category.parent is not None else None,
            children=[CategoryOut.from_category(child) for child in category.children],
            business_count=self.repository.business_count(category.id),
        )

    @BaseService.measure_operation("create_category")
    def create_category(self, data: CategoryCreate) -> CategoryDetail:
        slug = data.slug or slugify(data.name)
        if not slug:
            raise ValidationException("Category name must contain letters or digits", fields=["name"])
        self._check_slug(slug)
        self._check_parent(data.parent_id)

        with self.transaction():
            category = self.repository.create(**data.model_dump(exclude={"slug"}), slug=slug)

        self.logger.info(f"Category {category.slug} created")
        return self._detail(category)

    @BaseService.measure_operation("update_category")
    def update_category(self, category_id: str, data: CategoryUpdate) -> CategoryDetail:
        category = self._get_or_404(category_id)
        # parentId may be cleared with null; other fields ignore null
        changes = {
            field: value
            for field, value in data.model_dump(exclude_unset=True).items()
            if value is not None or field == "parent_id"
        }
        if changes.get("slug"):
            self._check_slug(changes["slug"], exclude_id=category.id)
        if "parent_id" in changes:
            self._check_parent(changes["parent_id"], category.id)

        with self.transaction():
            for field, value in changes.items():
                setattr(category, field, value)
            self.repository.flush()

        return self._detail(category)

    @BaseService.measure_operation("delete_category")
    def delete_category(self, category_id: str) -> None:
        category = self._get_or_404(category_id)
        if self.repository.business_count(category.id):
            raise BusinessRuleException(
                "Cannot delete category with associated businesses", code="CATEGORY_IN_USE"
            )
        if self.repository.children_count(category.id):
            raise BusinessRuleException(
                "Cannot delete category with subcategories", code="CATEGORY_HAS_CHILDREN"
            )

        with self.transaction():
            self.repository.delete(category.id)
        self.logger.info(f"Category {category.slug} deleted")
