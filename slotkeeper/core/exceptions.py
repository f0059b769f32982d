"""
Domain exceptions for the availability core.

Raised by the services layer and translated to HTTP responses at the API
boundary via ``to_http_exception``.
"""

from typing import Any

from fastapi import HTTPException, status


class DomainException(Exception):
    """Base exception for all domain-specific errors."""

    status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR

    def __init__(
        self,
        message: str,
        code: str | None = None,
        details: dict[str, Any] | None = None,
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
    """Raised when caller input fails validation."""

    status_code = status.HTTP_400_BAD_REQUEST


class NotFoundException(DomainException):
    """Raised when a requested resource is not found."""

    status_code = status.HTTP_404_NOT_FOUND


class ConflictException(DomainException):
    """Raised when there's a conflict with existing data."""

    status_code = status.HTTP_409_CONFLICT


class ForbiddenException(DomainException):
    """Raised when the caller lacks permission for an action."""

    status_code = status.HTTP_403_FORBIDDEN


class ServiceException(DomainException):
    """Raised when an infrastructure dependency fails."""

    status_code = status.HTTP_503_SERVICE_UNAVAILABLE


# Specific exceptions


class InvalidTimeFormat(ValidationException):
    """Malformed time-of-day, inverted range or unusable date."""

    def __init__(self, message: str, value: Any = None) -> None:
        details = {"value": value} if value is not None else None
        super().__init__(message, code="INVALID_TIME_FORMAT", details=details)


class ServiceNotFound(NotFoundException):
    def __init__(self, service_id: int) -> None:
        self.service_id = service_id
        super().__init__(
            f"Service {service_id} not found",
            code="SERVICE_NOT_FOUND",
            details={"service_id": service_id},
        )


class WindowNotFound(NotFoundException):
    def __init__(self, service_id: int, window_id: int) -> None:
        self.window_id = window_id
        super().__init__(
            f"Availability window {window_id} not found for service {service_id}",
            code="WINDOW_NOT_FOUND",
            details={"service_id": service_id, "window_id": window_id},
        )


class OverlappingWindow(ConflictException):
    """Candidate window intersects an already committed one."""

    def __init__(self, service_id: int, conflicting_window_id: int) -> None:
        self.service_id = service_id
        self.conflicting_window_id = conflicting_window_id
        super().__init__(
            "Availability window overlaps an existing window",
            code="OVERLAPPING_WINDOW",
            details={
                "service_id": service_id,
                "conflicting_window_id": conflicting_window_id,
            },
        )


class StoreUnavailable(ServiceException):
    """Backing store failed or timed out. Safe for the caller to retry."""

    def __init__(self, operation: str, reason: str) -> None:
        self.operation = operation
        super().__init__(
            f"Availability store unavailable during {operation}",
            code="STORE_UNAVAILABLE",
            details={"operation": operation, "reason": reason},
        )
