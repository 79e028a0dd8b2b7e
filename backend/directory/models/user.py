# backend/directory/models/user.py
"""
User model for the directory.

Accounts are provisioned by the upstream identity provider; this table mirrors
the fields the directory needs for ownership, reviews and the admin console.
"""

from typing import TYPE_CHECKING, List

import ulid
from sqlalchemy import Column, String
from sqlalchemy.orm import Mapped, relationship

from ..core.constants import ROLE_ADMIN, ROLE_USER
from ..database import Base
from .types import TimestampMixin

if TYPE_CHECKING:
    from .business import Business
    from .review import Review


class User(TimestampMixin, Base):
    """
    Directory user.

    Attributes:
        id: ULID primary key, also the JWT subject
        name: Display name
        email: Unique e-mail address
        image: Optional avatar URL
        role: "user" or "admin"
    """

    __tablename__ = "users"

    id = Column(String(26), primary_key=True, index=True, default=lambda: str(ulid.ULID()))
    name = Column(String(255), nullable=True)
    email = Column(String(255), unique=True, index=True, nullable=False)
    image = Column(String(512), nullable=True)
    role = Column(String(20), nullable=False, default=ROLE_USER)

    claimed_businesses: Mapped[List["Business"]] = relationship(
        "Business", back_populates="claimed_by", foreign_keys="Business.claimed_by_id"
    )
    reviews: Mapped[List["Review"]] = relationship("Review", back_populates="user")

    @property
    def is_admin(self) -> bool:
        return self.role == ROLE_ADMIN

    def __repr__(self) -> str:
        return f"<User {self.email} ({self.role})>"
