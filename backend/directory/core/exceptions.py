# backend/directory/core/exceptions.py
"""
Domain-specific exceptions for the directory platform.

These exceptions provide clear, business-focused error messages
that can be caught and handled appropriately at the API layer.
"""

from typing import Any, Dict, Iterable, Optional

from fastapi import HTTPException, status

HTTP_422_UNPROCESSABLE: int = getattr(status, "HTTP_422_UNPROCESSABLE_CONTENT", 422)


class DomainException(Exception):
    """Base exception for all domain-specific errors."""

    status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR

    def __init__(
        self,
        message: str,
        code: Optional[str] = None,
        details: Optional[Dict[str, Any]] = None,
    ) -> None:
        self.message = message
        self.code = code or self.__class__.__name__
        self.details = details or {}
        super().__init__(self.message)

    def to_http_exception(self) -> HTTPException:
        return HTTPException(
            status_code=self.status_code,
            detail={
                "message": self.message,
                "code": self.code,
                "details": self.details,
            },
        )


class ValidationException(DomainException):
    """Raised when request parameters fail validation."""

    status_code = status.HTTP_400_BAD_REQUEST

    def __init__(
        self,
        message: str,
        code: Optional[str] = None,
        details: Optional[Dict[str, Any]] = None,
        *,
        fields: Optional[Iterable[str]] = None,
    ) -> None:
        merged = dict(details or {})
        if fields is not None:
            merged["fields"] = sorted(set(fields))
        super().__init__(message, code or "VALIDATION_ERROR", merged)

    @property
    def fields(self) -> list[str]:
        return list(self.details.get("fields", []))


class NotFoundException(DomainException):
    """Raised when a requested resource is not found."""

    status_code = status.HTTP_404_NOT_FOUND


class ConflictException(DomainException):
    """Raised when there's a conflict with existing data."""

    status_code = status.HTTP_409_CONFLICT


class BusinessRuleException(DomainException):
    """Raised when a business rule is violated."""

    status_code = HTTP_422_UNPROCESSABLE


class ForbiddenException(DomainException):
    """Raised when user lacks permission for an action."""

    status_code = status.HTTP_403_FORBIDDEN


class ServiceException(DomainException):
    """Raised when a service operation fails."""

    def to_http_exception(self) -> HTTPException:
        return HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail={
                "message": self.message or "An error occurred processing your request",
                "code": self.code,
                "details": self.details if self.details else {},
            },
        )


class AIServiceException(ServiceException):
    """
    Raised when the AI completion service fails, times out or returns
    an unusable payload.

    Search callers catch this and continue without enhancement.
    """


# Specific business exceptions


class BusinessNotFoundException(NotFoundException):
    def __init__(self, identifier: str):
        super().__init__(
            message="Business not found",
            code="BUSINESS_NOT_FOUND",
            details={"business": identifier},
        )


class OwnershipRequiredException(ForbiddenException):
    """Raised when a non-owner tries to modify a business or its events."""

    def __init__(self, message: Optional[str] = None):
        super().__init__(
            message=message or "Only the business owner can perform this action",
            code="NOT_BUSINESS_OWNER",
        )


class RepositoryException(Exception):
    """
    Exception raised for repository layer errors.

    This exception is used when data access operations fail,
    such as database connection issues, query failures, or
    constraint violations. It surfaces to clients as a generic failure.
    """
