"""Canonical folder query -> expanded record list."""

from __future__ import annotations

import hashlib
import json
import logging
import threading
from dataclasses import dataclass
from typing import Any, Mapping, Optional

from gdrivefs.models import ObjectRecord

logger = logging.getLogger(__name__)


def canonical_query_key(parameters: Mapping[str, Any]) -> str:
    """Return a deterministic hash of folder listing parameters."""
    payload = json.dumps(parameters, sort_keys=True, separators=(",", ":"), default=str)
    return hashlib.md5(payload.encode("utf-8")).hexdigest()


@dataclass(frozen=True)
class _Entry:
    parent_id: str
    records: tuple[ObjectRecord, ...]


class ListingCache:
    """
    Cache of fully paginated, export-expanded folder listings.

    Each entry remembers the folder it lists so that mutations can drop
    every cached query of one folder at once.
    """

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._entries: dict[str, _Entry] = {}

    def get(self, key: str) -> Optional[list[ObjectRecord]]:
        with self._lock:
            entry = self._entries.get(key)
        if entry is None:
            return None
        return list(entry.records)

    def put(self, key: str, parent_id: str, records: list[ObjectRecord]) -> None:
        with self._lock:
            self._entries[key] = _Entry(parent_id=parent_id, records=tuple(records))

    def invalidate(self, key: str) -> None:
        with self._lock:
            self._entries.pop(key, None)

    def invalidate_parent(self, parent_id: str) -> None:
        with self._lock:
            stale = [k for k, e in self._entries.items() if e.parent_id == parent_id]
            for key in stale:
                del self._entries[key]
        if stale:
            logger.debug("Dropped %d cached listings of folder %s", len(stale), parent_id)

    def clear(self) -> None:
        with self._lock:
            self._entries.clear()

    def __contains__(self, key: object) -> bool:
        with self._lock:
            return key in self._entries

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)
