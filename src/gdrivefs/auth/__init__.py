"""Public auth exports for gdrivefs."""

from __future__ import annotations

from .oauth_client import REGISTRY_NAMESPACE, OAuthClient
from .registry import JsonFileRegistry, MemoryRegistry, TokenRegistry
from .setup import extract_auth_code, setup_credentials

__all__ = [
    "REGISTRY_NAMESPACE",
    "OAuthClient",
    "TokenRegistry",
    "MemoryRegistry",
    "JsonFileRegistry",
    "extract_auth_code",
    "setup_credentials",
]
