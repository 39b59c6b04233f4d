"""Exception hierarchy and HTTP error mapping for gdrivefs."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Optional


class GDriveFsError(Exception):
    """
    Base exception for gdrivefs.

    Attributes:
        details: Optional structured information (e.g., HTTP status, identifier).
        cause: Optional original exception that triggered this error.
    """

    def __init__(
        self,
        message: str,
        *,
        details: Optional[dict[str, Any]] = None,
        cause: Optional[BaseException] = None,
    ) -> None:
        super().__init__(message)
        self.details = details or {}
        self.cause = cause


class AuthError(GDriveFsError):
    """Raised when no usable OAuth token exists or refreshing it fails."""


class NotFoundError(GDriveFsError):
    """Raised when a file, folder or export format does not exist."""


class PermissionDeniedError(GDriveFsError):
    """Raised when the Drive item lacks the capability an operation needs."""


class BackendError(GDriveFsError):
    """Raised for Drive API failures other than auth and not-found."""


class NetworkError(BackendError):
    """Raised when network/timeout issues prevent the request."""


class InvalidIdentifierError(GDriveFsError):
    """Raised when an identifier fails the syntax check."""


class MisconfigurationError(GDriveFsError):
    """Raised when a name filter reports that it could not be applied."""


class LocalFileError(GDriveFsError):
    """Raised when a local file cannot be read or written."""


@dataclass(frozen=True)
class HttpErrorInfo:
    """Lightweight HTTP error information for mapping to gdrivefs exceptions."""

    status_code: int
    reason: str | None = None
    message: str | None = None
    details: dict[str, Any] | None = None


def map_http_error(
    info: HttpErrorInfo,
    *,
    cause: Optional[BaseException] = None,
) -> GDriveFsError:
    """
    Map an HTTP error to a gdrivefs exception.

    Policy:
        - 401 -> AuthError
        - 404 -> NotFoundError
        - otherwise -> BackendError (status and reason kept in details)
    """
    details: dict[str, Any] = {
        "status_code": info.status_code,
        "reason": info.reason,
    }
    if info.details:
        details.update(info.details)

    message = info.message or f"HTTP error {info.status_code}"

    if info.status_code == 401:
        return AuthError(message, details=details, cause=cause)
    if info.status_code == 404:
        return NotFoundError(message, details=details, cause=cause)

    return BackendError(message, details=details, cause=cause)
