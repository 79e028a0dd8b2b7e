# backend/directory/models/business.py
"""
Business listing models.

A business owns one or more locations (one flagged primary), belongs to
categories through the business_categories junction and carries amenities and
social links as simple child rows.
"""

from enum import Enum
from typing import TYPE_CHECKING, List, Optional

import ulid
from sqlalchemy import Boolean, Column, DateTime
from sqlalchemy import Enum as SAEnum
from sqlalchemy import Float, ForeignKey, Index, Integer, String, Text, UniqueConstraint
from sqlalchemy.orm import Mapped, relationship

from ..core.constants import DEFAULT_COUNTRY, DEFAULT_STATE
from ..database import Base
from .types import StringArrayType, TimestampMixin

if TYPE_CHECKING:
    from .category import Category
    from .event import Event
    from .review import Review
    from .user import User


class BusinessStatus(str, Enum):
    """Listing lifecycle state."""

    DRAFT = "DRAFT"
    PENDING = "PENDING"
    ACTIVE = "ACTIVE"
    INACTIVE = "INACTIVE"
    SUSPENDED = "SUSPENDED"


class Business(TimestampMixin, Base):
    __tablename__ = "businesses"

    id = Column(String(26), primary_key=True, index=True, default=lambda: str(ulid.ULID()))
    slug = Column(String(255), unique=True, nullable=False, index=True)
    name = Column(String(255), nullable=False)
    description = Column(Text, nullable=True)
    short_description = Column(String(160), nullable=True)
    logo = Column(String(512), nullable=True)
    cover_image = Column(String(512), nullable=True)
    website = Column(String(512), nullable=True)
    email = Column(String(255), nullable=True)
    phone = Column(String(30), nullable=True)
    year_established = Column(Integer, nullable=True)
    employee_count = Column(String(30), nullable=True)

    status = Column(
        SAEnum(BusinessStatus, name="business_status"),
        nullable=False,
        default=BusinessStatus.DRAFT,
        index=True,
    )
    verified = Column(Boolean, nullable=False, default=False)
    verified_at = Column(DateTime(timezone=True), nullable=True)
    featured = Column(Boolean, nullable=False, default=False)
    featured_until = Column(DateTime(timezone=True), nullable=True)

    claimed_by_id = Column(String(26), ForeignKey("users.id", ondelete="SET NULL"), nullable=True, index=True)
    keywords = Column(StringArrayType(), nullable=True, default=list)

    claimed_by: Mapped[Optional["User"]] = relationship(
        "User", back_populates="claimed_businesses", foreign_keys=[claimed_by_id]
    )
    locations: Mapped[List["BusinessLocation"]] = relationship(
        "BusinessLocation",
        back_populates="business",
        cascade="all, delete-orphan",
        order_by="BusinessLocation.created_at",
    )
    categories: Mapped[List["BusinessCategory"]] = relationship(
        "BusinessCategory", back_populates="business", cascade="all, delete-orphan"
    )
    amenities: Mapped[List["BusinessAmenity"]] = relationship(
        "BusinessAmenity", back_populates="business", cascade="all, delete-orphan"
    )
    social_links: Mapped[List["BusinessSocialLink"]] = relationship(
        "BusinessSocialLink", back_populates="business", cascade="all, delete-orphan"
    )
    reviews: Mapped[List["Review"]] = relationship(
        "Review", back_populates="business", cascade="all, delete-orphan"
    )
    events: Mapped[List["Event"]] = relationship("Event", back_populates="business", cascade="all, delete-orphan")

    __table_args__ = (Index("idx_businesses_status_featured", "status", "featured"),)

    @property
    def primary_location(self) -> Optional["BusinessLocation"]:
        """The location flagged primary, else the first one."""
        for location in self.locations:
            if location.is_primary:
                return location
        return self.locations[0] if self.locations else None

    @property
    def category_models(self) -> List["Category"]:
        return [link.category for link in self.categories if link.category is not None]

    @property
    def primary_category(self) -> Optional["Category"]:
        """Category linked as primary, else the first linked one."""
        links = [link for link in self.categories if link.category is not None]
        for link in links:
            if link.is_primary:
                return link.category
        return links[0].category if links else None

    def __repr__(self) -> str:
        return f"<Business {self.slug} ({self.status})>"


class BusinessLocation(TimestampMixin, Base):
    __tablename__ = "business_locations"

    id = Column(String(26), primary_key=True, default=lambda: str(ulid.ULID()))
    business_id = Column(String(26), ForeignKey("businesses.id", ondelete="CASCADE"), nullable=False, index=True)
    name = Column(String(255), nullable=True)
    is_primary = Column(Boolean, nullable=False, default=False)
    address1 = Column(String(255), nullable=False)
    address2 = Column(String(255), nullable=True)
    city = Column(String(100), nullable=False, index=True)
    state = Column(String(2), nullable=False, default=DEFAULT_STATE)
    zip_code = Column(String(10), nullable=False)
    country = Column(String(2), nullable=False, default=DEFAULT_COUNTRY)
    latitude = Column(Float, nullable=True)
    longitude = Column(Float, nullable=True)

    business: Mapped["Business"] = relationship("Business", back_populates="locations")
    hours: Mapped[List["BusinessHours"]] = relationship(
        "BusinessHours", back_populates="location", cascade="all, delete-orphan"
    )

    @property
    def has_coordinates(self) -> bool:
        return self.latitude is not None and self.longitude is not None


class BusinessHours(Base):
    __tablename__ = "business_hours"

    id = Column(String(26), primary_key=True, default=lambda: str(ulid.ULID()))
    location_id = Column(
        String(26), ForeignKey("business_locations.id", ondelete="CASCADE"), nullable=False, index=True
    )
    day_of_week = Column(Integer, nullable=False)  # 0 = Sunday
    open_time = Column(String(5), nullable=True)  # HH:MM
    close_time = Column(String(5), nullable=True)
    is_closed = Column(Boolean, nullable=False, default=False)

    location: Mapped["BusinessLocation"] = relationship("BusinessLocation", back_populates="hours")

    __table_args__ = (UniqueConstraint("location_id", "day_of_week", name="uq_business_hours_day"),)


class BusinessCategory(Base):
    """Junction between businesses and categories."""

    __tablename__ = "business_categories"

    business_id = Column(String(26), ForeignKey("businesses.id", ondelete="CASCADE"), primary_key=True)
    category_id = Column(String(26), ForeignKey("categories.id", ondelete="CASCADE"), primary_key=True, index=True)
    is_primary = Column(Boolean, nullable=False, default=False)

    business: Mapped["Business"] = relationship("Business", back_populates="categories")
    category: Mapped["Category"] = relationship("Category", back_populates="business_links")


class BusinessAmenity(Base):
    __tablename__ = "business_amenities"

    id = Column(String(26), primary_key=True, default=lambda: str(ulid.ULID()))
    business_id = Column(String(26), ForeignKey("businesses.id", ondelete="CASCADE"), nullable=False, index=True)
    name = Column(String(100), nullable=False)
    icon = Column(String(100), nullable=True)

    business: Mapped["Business"] = relationship("Business", back_populates="amenities")


class BusinessSocialLink(Base):
    __tablename__ = "business_social_links"

    id = Column(String(26), primary_key=True, default=lambda: str(ulid.ULID()))
    business_id = Column(String(26), ForeignKey("businesses.id", ondelete="CASCADE"), nullable=False, index=True)
    platform = Column(String(50), nullable=False)
    url = Column(String(512), nullable=False)

    business: Mapped["Business"] = relationship("Business", back_populates="social_links")

    __table_args__ = (UniqueConstraint("business_id", "platform", name="uq_business_social_platform"),)
