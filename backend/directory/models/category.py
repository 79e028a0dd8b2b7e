# backend/directory/models/category.py
"""Category model: a two-level tree of business categories."""

from typing import TYPE_CHECKING, List, Optional

import ulid
from sqlalchemy import Boolean, Column, ForeignKey, Integer, String, Text
from sqlalchemy.orm import Mapped, relationship

from ..database import Base
from .types import TimestampMixin

if TYPE_CHECKING:
    from .business import BusinessCategory


class Category(TimestampMixin, Base):
    __tablename__ = "categories"

    id = Column(String(26), primary_key=True, index=True, default=lambda: str(ulid.ULID()))
    slug = Column(String(100), unique=True, nullable=False, index=True)
    name = Column(String(100), nullable=False)
    description = Column(Text, nullable=True)
    icon = Column(String(100), nullable=True)
    image = Column(String(512), nullable=True)
    parent_id = Column(String(26), ForeignKey("categories.id", ondelete="SET NULL"), nullable=True, index=True)
    featured = Column(Boolean, nullable=False, default=False)
    display_order = Column(Integer, nullable=False, default=0)
    meta_title = Column(String(255), nullable=True)
    meta_description = Column(String(500), nullable=True)

    parent: Mapped[Optional["Category"]] = relationship(
        "Category", remote_side=[id], back_populates="children"
    )
    children: Mapped[List["Category"]] = relationship(
        "Category", back_populates="parent", order_by="Category.display_order"
    )
    business_links: Mapped[List["BusinessCategory"]] = relationship(
        "BusinessCategory", back_populates="category"
    )

    def __repr__(self) -> str:
        return f"<Category {self.slug}>"
