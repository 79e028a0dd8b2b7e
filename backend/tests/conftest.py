# backend/tests/conftest.py
"""
Pytest configuration for the directory API.

Every test gets a fresh in-memory SQLite database (StaticPool keeps the one
connection alive across TestClient threads). The AI completion service is
replaced by FakeCompletionClient; individual tests decide what it returns.
"""

import os

# Set testing mode BEFORE any app imports
os.environ["is_testing"] = "true"
os.environ.setdefault("DATABASE_URL", "sqlite://")

from datetime import datetime, timedelta, timezone
from typing import Any, Callable, Dict, Iterable, List, Optional

from fastapi.testclient import TestClient
import pytest
from sqlalchemy import create_engine
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool

from directory.api.dependencies.database import get_db
from directory.api.dependencies.services import get_ai_client
from directory.auth import create_access_token, hash_api_key
from directory.core.config import settings
from directory.core.constants import ROLE_ADMIN, ROLE_USER
from directory.core.exceptions import AIServiceException
from directory.database import Base
from directory.main import app
from directory.models.business import (
    Business,
    BusinessCategory,
    BusinessLocation,
    BusinessStatus,
)
from directory.models.category import Category
from directory.models.event import Event, EventStatus
from directory.models.review import Review, ReviewStatus
from directory.models.user import User
from directory.services.ai_client import CompletionClient
from directory.utils.slugs import slugify

settings.is_testing = True

PUBLIC_API_KEY = "mn-directory-test-key"

# Downtown Minneapolis
MINNEAPOLIS = (44.9778, -93.2650)
ST_PAUL = (44.9537, -93.0900)
DULUTH = (46.7867, -92.1005)


class FakeCompletionClient(CompletionClient):
    """Scriptable stand-in for the OpenAI adapter; records every call."""

    def __init__(
        self,
        json_payload: Optional[Dict[str, Any]] = None,
        text: str = "Happy to help you explore Minnesota businesses.",
        error: Optional[Exception] = None,
    ) -> None:
        self.json_payload = json_payload
        self.text = text
        self.error = error
        self.json_calls: List[tuple] = []
        self.text_calls: List[list] = []
        self.closed = False

    async def complete_json(self, system_prompt: str, user_text: str) -> Dict[str, Any]:
        self.json_calls.append((system_prompt, user_text))
        if self.error is not None:
            raise self.error
        if self.json_payload is None:
            raise AIServiceException("No scripted payload", code="AI_EMPTY")
        return self.json_payload

    async def complete_text(
        self, messages: List[Dict[str, str]], *, max_tokens: int = 500, temperature: float = 0.7
    ) -> str:
        self.text_calls.append(messages)
        if self.error is not None:
            raise self.error
        return self.text

    async def close(self) -> None:
        self.closed = True


# ============================================================================
# DATABASE
# ============================================================================


@pytest.fixture
def db() -> Session:
    """Fresh schema per test."""
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(bind=engine)
    TestSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)
    session = TestSessionLocal()

    yield session

    session.rollback()
    session.close()
    Base.metadata.drop_all(bind=engine)
    engine.dispose()


@pytest.fixture
def fake_ai() -> FakeCompletionClient:
    return FakeCompletionClient()


@pytest.fixture
def client(db: Session, fake_ai: FakeCompletionClient):
    """Create a test client bound to the test database and fake AI client."""

    def override_get_db():
        try:
            yield db
        finally:
            pass

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_ai_client] = lambda: fake_ai

    # Don't use context manager - startup would create tables on the app engine
    test_client = TestClient(app)

    yield test_client

    app.dependency_overrides.clear()
    test_client.close()


@pytest.fixture
def public_api_key(monkeypatch) -> str:
    monkeypatch.setattr(settings, "public_api_key_hash", hash_api_key(PUBLIC_API_KEY))
    return PUBLIC_API_KEY


# ============================================================================
# USERS
# ============================================================================


def _create_user(db: Session, email: str, name: str, role: str = ROLE_USER) -> User:
    user = User(email=email, name=name, role=role)
    db.add(user)
    db.commit()
    db.refresh(user)
    return user


@pytest.fixture
def owner(db: Session) -> User:
    return _create_user(db, "owner@example.com", "Olivia Owner")


@pytest.fixture
def customer(db: Session) -> User:
    return _create_user(db, "customer@example.com", "Casey Customer")


@pytest.fixture
def admin(db: Session) -> User:
    return _create_user(db, "admin@example.com", "Avery Admin", role=ROLE_ADMIN)


def auth_headers_for(user: User) -> Dict[str, str]:
    token = create_access_token(data={"sub": user.id})
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture
def headers_for() -> Callable[[User], Dict[str, str]]:
    return auth_headers_for


@pytest.fixture
def owner_headers(owner: User) -> Dict[str, str]:
    return auth_headers_for(owner)


@pytest.fixture
def customer_headers(customer: User) -> Dict[str, str]:
    return auth_headers_for(customer)


@pytest.fixture
def admin_headers(admin: User) -> Dict[str, str]:
    return auth_headers_for(admin)


# ============================================================================
# FACTORIES
# ============================================================================


@pytest.fixture
def make_category(db: Session) -> Callable[..., Category]:
    def _make(name: str, parent: Optional[Category] = None, featured: bool = False, **extra: Any) -> Category:
        category = Category(
            name=name,
            slug=extra.pop("slug", slugify(name)),
            parent_id=parent.id if parent is not None else None,
            featured=featured,
            **extra,
        )
        db.add(category)
        db.commit()
        db.refresh(category)
        return category

    return _make


@pytest.fixture
def make_business(db: Session) -> Callable[..., Business]:
    def _make(
        name: str,
        *,
        description: str = "",
        city: str = "Minneapolis",
        coords: Optional[tuple] = MINNEAPOLIS,
        categories: Iterable[Category] = (),
        status: BusinessStatus = BusinessStatus.ACTIVE,
        verified: bool = False,
        featured: bool = False,
        owner: Optional[User] = None,
        created_at: Optional[datetime] = None,
    ) -> Business:
        business = Business(
            name=name,
            slug=slugify(name),
            description=description,
            status=status,
            verified=verified,
            featured=featured,
            claimed_by_id=owner.id if owner is not None else None,
        )
        if created_at is not None:
            business.created_at = created_at
        business.locations.append(
            BusinessLocation(
                is_primary=True,
                address1="1 Main St",
                city=city,
                zip_code="55401",
                latitude=coords[0] if coords else None,
                longitude=coords[1] if coords else None,
            )
        )
        for index, category in enumerate(categories):
            business.categories.append(BusinessCategory(category_id=category.id, is_primary=index == 0))
        db.add(business)
        db.commit()
        db.refresh(business)
        return business

    return _make


@pytest.fixture
def make_review(db: Session) -> Callable[..., Review]:
    def _make(
        business: Business,
        user: User,
        rating: int,
        *,
        recommends: Optional[bool] = None,
        created_at: Optional[datetime] = None,
        status: ReviewStatus = ReviewStatus.PUBLISHED,
    ) -> Review:
        review = Review(
            business_id=business.id,
            user_id=user.id,
            rating=rating,
            content=f"A {rating}-star visit to {business.name}.",
            recommends_business=recommends,
            status=status,
        )
        if created_at is not None:
            review.created_at = created_at
        db.add(review)
        db.commit()
        db.refresh(review)
        return review

    return _make


@pytest.fixture
def make_event(db: Session) -> Callable[..., Event]:
    def _make(
        business: Business,
        title: str,
        *,
        starts_in_days: int = 7,
        status: EventStatus = EventStatus.PUBLISHED,
        max_attendees: Optional[int] = None,
        coords: Optional[tuple] = None,
        city: Optional[str] = None,
        is_virtual: bool = False,
    ) -> Event:
        start = datetime.now(timezone.utc) + timedelta(days=starts_in_days)
        event = Event(
            business_id=business.id,
            title=title,
            slug=slugify(title),
            description=f"{title} hosted by {business.name}",
            start_date=start,
            end_date=start + timedelta(hours=2),
            status=status,
            max_attendees=max_attendees,
            city=city,
            latitude=coords[0] if coords else None,
            longitude=coords[1] if coords else None,
            is_virtual=is_virtual,
        )
        db.add(event)
        db.commit()
        db.refresh(event)
        return event

    return _make
