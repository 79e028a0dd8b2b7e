"""Category request/response schemas."""
from typing import TYPE_CHECKING, List, Optional

from pydantic import Field, field_validator

from .base import StandardizedModel, StrictRequestModel

if TYPE_CHECKING:
    from ..models.category import Category

SLUG_PATTERN = r"^[a-z0-9]+(?:-[a-z0-9]+)*$"


class CategoryOut(StandardizedModel):
    id: str
    slug: str
    name: str
    description: Optional[str] = None
    icon: Optional[str] = None
    image: Optional[str] = None
    parent_id: Optional[str] = None
    featured: bool = False
    display_order: int = 0
    children_count: int = 0

    @classmethod
    def from_category(cls, category: "Category") -> "CategoryOut":
        return cls(
            id=category.id,
            slug=category.slug,
            name=category.name,
            description=category.description,
            icon=category.icon,
            image=category.image,
            parent_id=category.parent_id,
            featured=bool(category.featured),
            display_order=category.display_order or 0,
            children_count=len(category.children),
        )


class CategoryTreeNode(CategoryOut):
    children: List["CategoryTreeNode"] = Field(default_factory=list)

    @classmethod
    def from_category(cls, category: "Category") -> "CategoryTreeNode":
        base = CategoryOut.from_category(category)
        return cls(
            **base.model_dump(),
            children=[cls.from_category(child) for child in category.children],
        )


class CategoryDetail(CategoryOut):
    meta_title: Optional[str] = None
    meta_description: Optional[str] = None
    parent: Optional[CategoryOut] = None
    children: List[CategoryOut] = Field(default_factory=list)
    business_count: int = 0


class CategoryCreate(StrictRequestModel):
    name: str = Field(min_length=1, max_length=100)
    slug: Optional[str] = Field(default=None, max_length=100, pattern=SLUG_PATTERN)
    description: Optional[str] = None
    icon: Optional[str] = Field(default=None, max_length=100)
    image: Optional[str] = None
    parent_id: Optional[str] = Field(default=None, max_length=26)
    featured: bool = False
    display_order: int = 0
    meta_title: Optional[str] = Field(default=None, max_length=255)
    meta_description: Optional[str] = Field(default=None, max_length=500)

    @field_validator("name")
    @classmethod
    def _strip_name(cls, value: str) -> str:
        value = value.strip()
        if not value:
            raise ValueError("name must not be blank")
        return value


class CategoryUpdate(StrictRequestModel):
    name: Optional[str] = Field(default=None, min_length=1, max_length=100)
    slug: Optional[str] = Field(default=None, max_length=100, pattern=SLUG_PATTERN)
    description: Optional[str] = None
    icon: Optional[str] = Field(default=None, max_length=100)
    image: Optional[str] = None
    parent_id: Optional[str] = Field(default=None, max_length=26)
    featured: Optional[bool] = None
    display_order: Optional[int] = None
    meta_title: Optional[str] = Field(default=None, max_length=255)
    meta_description: Optional[str] = Field(default=None, max_length=500)
