"""Identifier -> ObjectRecord memo of Drive metadata reads."""

from __future__ import annotations

import logging
import threading
from typing import Iterable, Optional

from gdrivefs.models import ObjectRecord

logger = logging.getLogger(__name__)


class MetadataCache:
    """
    Cache of resolved records keyed by virtual identifier.

    Entries never expire; mutating operations are responsible for
    invalidating what they touch. Records are stored whole, so a reader
    sees either the previous record or the new one.
    """

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._records: dict[str, ObjectRecord] = {}

    def get(self, identifier: str) -> Optional[ObjectRecord]:
        with self._lock:
            return self._records.get(identifier)

    def put(self, identifier: str, record: ObjectRecord) -> None:
        with self._lock:
            self._records[identifier] = record

    def put_all(self, records: Iterable[ObjectRecord]) -> None:
        with self._lock:
            for record in records:
                self._records[record.identifier] = record

    def invalidate(self, identifier: str) -> None:
        with self._lock:
            self._records.pop(identifier, None)

    def invalidate_many(self, identifiers: Iterable[str]) -> None:
        with self._lock:
            for identifier in identifiers:
                self._records.pop(identifier, None)

    def clear(self) -> None:
        with self._lock:
            count = len(self._records)
            self._records.clear()
        logger.debug("Metadata cache cleared (%d entries)", count)

    def __contains__(self, identifier: object) -> bool:
        with self._lock:
            return identifier in self._records

    def __len__(self) -> int:
        with self._lock:
            return len(self._records)
