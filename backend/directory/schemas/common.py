"""Shared response envelopes."""
from typing import Generic, List, TypeVar

from pydantic import Field

from .base import StandardizedModel

T = TypeVar("T")


class PaginationMeta(StandardizedModel):
    page: int = Field(ge=1)
    limit: int = Field(ge=1)
    total: int = Field(ge=0)
    total_pages: int = Field(ge=0)


class Paginated(StandardizedModel, Generic[T]):
    """List response: ``{data, pagination}``."""

    data: List[T]
    pagination: PaginationMeta


class MessageResponse(StandardizedModel):
    message: str


class HealthResponse(StandardizedModel):
    status: str
    service: str
    version: str
    environment: str
    timestamp: str
    database: str


class RootResponse(StandardizedModel):
    """Response for root endpoint."""

    message: str
    version: str
    docs: str
    environment: str
