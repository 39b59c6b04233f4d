"""gdrivefs public API."""

from __future__ import annotations

from gdrivefs.auth import JsonFileRegistry, MemoryRegistry, OAuthClient, TokenRegistry
from gdrivefs.cache import ListingCache, MetadataCache
from gdrivefs.config import DriverConfig
from gdrivefs.driver import GoogleDriveDriver
from gdrivefs.errors import (
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
from gdrivefs.filters import FilterResult, NameFilter
from gdrivefs.models import Capabilities, ObjectRecord, Permissions

__all__ = [
    # High-level
    "GoogleDriveDriver",
    "DriverConfig",
    "MetadataCache",
    "ListingCache",
    "FilterResult",
    "NameFilter",
    # Auth
    "OAuthClient",
    "TokenRegistry",
    "MemoryRegistry",
    "JsonFileRegistry",
    # Models
    "Capabilities",
    "ObjectRecord",
    "Permissions",
    # Errors
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
