"""One-time OAuth consent flow that populates the token registry."""

from __future__ import annotations

import json
import logging
from typing import Any, Callable, Sequence
from urllib.parse import parse_qs, urlsplit

from gdrivefs.errors import AuthError

from .oauth_client import OAuthClient

logger = logging.getLogger(__name__)

DEFAULT_REDIRECT_URI: str = "https://www.example.com/"


def extract_auth_code(verification: str) -> str:
    """
    Return the authorization code from the redirected URL.

    A bare code (no query string) is accepted as-is.
    """
    value = verification.strip()
    if not value:
        raise AuthError("Empty verification link")

    if "?" not in value:
        return value

    codes = parse_qs(urlsplit(value).query).get("code")
    if not codes or not codes[0]:
        raise AuthError("Verification link does not contain a code", details={"link": value})
    return codes[0]


def setup_credentials(
    client: OAuthClient,
    config: dict[str, Any],
    scopes: Sequence[str],
    ask: Callable[[str], str],
    *,
    redirect_uri: str = DEFAULT_REDIRECT_URI,
) -> dict[str, Any]:
    """
    Store the client config, run the consent flow and store the token.

    Args:
        client: OAuthClient bound to the target registry.
        config: Parsed client secrets JSON.
        scopes: OAuth scopes to request.
        ask: Callback shown the consent URL; returns the verification link.

    Returns:
        The stored token (authorized-user JSON).
    """
    try:
        from google_auth_oauthlib.flow import Flow
    except Exception as exc:  # pragma: no cover
        raise AuthError(
            "google-auth-oauthlib is not available",
            details={"hint": "Install google-auth-oauthlib"},
            cause=exc,
        ) from exc

    client.set_auth_config(config)

    try:
        flow = Flow.from_client_config(config, scopes=list(scopes), redirect_uri=redirect_uri)
        auth_url, _ = flow.authorization_url(access_type="offline", prompt="consent")
    except Exception as exc:
        raise AuthError("Invalid OAuth client config", cause=exc) from exc

    code = extract_auth_code(ask(auth_url))

    try:
        flow.fetch_token(code=code)
    except Exception as exc:
        raise AuthError("Failed to exchange authorization code", cause=exc) from exc

    token = json.loads(flow.credentials.to_json())
    client.set_token(token)
    logger.info("OAuth token stored")
    return token
