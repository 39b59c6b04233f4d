"""Key-value registries holding the OAuth client config and token."""

from __future__ import annotations

import json
import os
from typing import Optional, Protocol

from gdrivefs.errors import AuthError


class TokenRegistry(Protocol):
    """Persistent string store, one namespace per driver deployment."""

    def get(self, namespace: str, key: str) -> Optional[str]: ...

    def set(self, namespace: str, key: str, value: str) -> None: ...


class MemoryRegistry:
    """In-process registry (useful for tests and short-lived scripts)."""

    def __init__(self) -> None:
        self._data: dict[str, dict[str, str]] = {}

    def get(self, namespace: str, key: str) -> Optional[str]:
        return self._data.get(namespace, {}).get(key)

    def set(self, namespace: str, key: str, value: str) -> None:
        self._data.setdefault(namespace, {})[key] = value


class JsonFileRegistry:
    """Registry stored as one JSON document: {namespace: {key: value}}."""

    def __init__(self, path: str) -> None:
        if not path or not isinstance(path, str):
            raise ValueError("JsonFileRegistry path must be a non-empty string")
        self._path = path

    @property
    def path(self) -> str:
        return self._path

    def get(self, namespace: str, key: str) -> Optional[str]:
        value = self._load().get(namespace, {}).get(key)
        return value if isinstance(value, str) else None

    def set(self, namespace: str, key: str, value: str) -> None:
        data = self._load()
        data.setdefault(namespace, {})[key] = value

        registry_dir = os.path.dirname(self._path)
        if registry_dir:
            os.makedirs(registry_dir, exist_ok=True)

        try:
            with open(self._path, "w", encoding="utf-8") as f:
                json.dump(data, f, indent=2, sort_keys=True)
        except OSError as exc:
            raise AuthError(
                "Failed to save registry file",
                details={"path": self._path},
                cause=exc,
            ) from exc

    def _load(self) -> dict[str, dict[str, str]]:
        if not os.path.exists(self._path):
            return {}
        try:
            with open(self._path, "r", encoding="utf-8") as f:
                data = json.load(f)
        except (OSError, ValueError) as exc:
            raise AuthError(
                "Failed to load registry file",
                details={"path": self._path},
                cause=exc,
            ) from exc
        return data if isinstance(data, dict) else {}
