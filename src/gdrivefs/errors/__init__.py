"""Public error exports for gdrivefs."""

from __future__ import annotations

from .exceptions import (
    AuthError,
    BackendError,
    GDriveFsError,
    HttpErrorInfo,
    InvalidIdentifierError,
    LocalFileError,
    MisconfigurationError,
    NetworkError,
    NotFoundError,
    PermissionDeniedError,
    map_http_error,
)

__all__ = [
    "GDriveFsError",
    "AuthError",
    "NotFoundError",
    "PermissionDeniedError",
    "BackendError",
    "NetworkError",
    "InvalidIdentifierError",
    "MisconfigurationError",
    "LocalFileError",
    "HttpErrorInfo",
    "map_http_error",
]
