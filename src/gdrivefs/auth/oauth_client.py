"""OAuth client utilities for gdrivefs."""

from __future__ import annotations

import json
import logging
from typing import Any, Optional, Sequence

from gdrivefs.errors import AuthError

from .registry import TokenRegistry

logger = logging.getLogger(__name__)

REGISTRY_NAMESPACE: str = "gdrivefs"


class OAuthClient:
    """Create authorized Drive API service objects from registry-held tokens."""

    def __init__(self, registry: TokenRegistry, *, namespace: str = REGISTRY_NAMESPACE) -> None:
        self._registry = registry
        self._namespace = namespace

    # ----------------------------
    # Registry slots
    # ----------------------------
    def get_auth_config(self) -> dict[str, Any]:
        """Return the stored OAuth client config ({} if none)."""
        raw = self._registry.get(self._namespace, "credentials")
        if not raw:
            return {}
        return _loads(raw, "credentials")

    def set_auth_config(self, config: dict[str, Any]) -> None:
        self._registry.set(self._namespace, "credentials", json.dumps(config))

    def get_token(self) -> Optional[dict[str, Any]]:
        raw = self._registry.get(self._namespace, "token")
        if not raw:
            return None
        return _loads(raw, "token")

    def set_token(self, token: dict[str, Any]) -> None:
        self._registry.set(self._namespace, "token", json.dumps(token))

    # ----------------------------
    # Credentials / service
    # ----------------------------
    def get_credentials(self, scopes: Sequence[str]):
        """
        Return OAuth credentials for the given scopes.

        An expired access token is refreshed and written back to the registry;
        the refresh token survives the refresh even when Google omits it.

        Returns:
            google.oauth2.credentials.Credentials

        Raises:
            AuthError: if no token is stored or it cannot be loaded/refreshed.
        """
        try:
            from google.auth.transport.requests import Request
            from google.oauth2.credentials import Credentials
        except Exception as exc:  # pragma: no cover
            raise AuthError(
                "Google auth libraries are not available",
                details={"hint": "Install google-auth"},
                cause=exc,
            ) from exc

        token = self.get_token()
        if not token:
            raise AuthError("No access token given")

        info = dict(_client_info(self.get_auth_config()))
        info.update(token)

        try:
            creds = Credentials.from_authorized_user_info(info, scopes=list(scopes))
        except Exception as exc:
            raise AuthError("Failed to load OAuth token", cause=exc) from exc

        if creds.valid:
            return creds

        if not creds.refresh_token:
            raise AuthError("Access token expired and no refresh token is stored")

        refresh_token = creds.refresh_token
        try:
            creds.refresh(Request())
        except Exception as exc:
            raise AuthError("Failed to refresh OAuth credentials", cause=exc) from exc

        refreshed = json.loads(creds.to_json())
        if not refreshed.get("refresh_token"):
            refreshed["refresh_token"] = refresh_token
        self.set_token(refreshed)
        logger.debug("OAuth access token refreshed")
        return creds

    def build_drive_service(self, scopes: Sequence[str]):
        """
        Build a Drive API service resource.

        Returns:
            googleapiclient.discovery.Resource
        """
        try:
            from googleapiclient.discovery import build
        except Exception as exc:  # pragma: no cover
            raise AuthError(
                "google-api-python-client is not available",
                details={"hint": "Install google-api-python-client"},
                cause=exc,
            ) from exc

        creds = self.get_credentials(scopes=scopes)
        try:
            return build("drive", "v3", credentials=creds, cache_discovery=False)
        except Exception as exc:
            raise AuthError("Failed to build Drive service", cause=exc) from exc


def _client_info(config: dict[str, Any]) -> dict[str, Any]:
    """Extract client_id/client_secret/token_uri from a client secrets document."""
    section = config.get("installed") or config.get("web") or config
    info: dict[str, Any] = {}
    for key in ("client_id", "client_secret", "token_uri"):
        if isinstance(section.get(key), str):
            info[key] = section[key]
    return info


def _loads(raw: str, slot: str) -> dict[str, Any]:
    try:
        value = json.loads(raw)
    except ValueError as exc:
        raise AuthError(f"Registry slot '{slot}' is not valid JSON", cause=exc) from exc
    if not isinstance(value, dict):
        raise AuthError(f"Registry slot '{slot}' must hold a JSON object")
    return value
