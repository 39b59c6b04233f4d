"""Resolve virtual identifiers to ObjectRecords."""

from __future__ import annotations

import dataclasses
import logging
from typing import Optional

from gdrivefs.cache import MetadataCache
from gdrivefs.controller import GoogleDriveController
from gdrivefs.errors import NotFoundError
from gdrivefs.models import ObjectRecord
from gdrivefs.util.identifiers import ExportedId, compose, parse
from gdrivefs.util.mime import export_formats

logger = logging.getLogger(__name__)


def expand(record: ObjectRecord) -> list[ObjectRecord]:
    """
    Return the virtual entries of a native record.

    Google-apps documents yield one record per export format (in table
    order); everything else yields the record itself.
    """
    formats = export_formats(record.mime_type)
    if not formats:
        return [record]

    variants: list[ObjectRecord] = []
    for extension, export_mime in formats.items():
        variants.append(
            dataclasses.replace(
                record,
                identifier=compose(record.file_id, extension),
                name=f"{record.name}.{extension}",
                mime_type=export_mime,
                parents=list(record.parents),
                original_mime_type=record.mime_type,
            )
        )
    return variants


class ObjectResolver:
    """Cache-first lookup of Drive items by virtual identifier."""

    def __init__(
        self,
        controller: GoogleDriveController,
        cache: MetadataCache,
        *,
        root_identifier: str = "root",
    ) -> None:
        self._controller = controller
        self._cache = cache
        self._root_identifier = root_identifier

    def resolve(self, identifier: str) -> Optional[ObjectRecord]:
        """
        Return the record for identifier, or None if Drive does not know it.

        Raises:
            InvalidIdentifierError: before any Drive call for malformed ids.
        """
        if identifier == "":
            identifier = self._root_identifier

        cached = self._cache.get(identifier)
        if cached is not None:
            return cached

        parsed = parse(identifier)

        try:
            record = self._controller.get(parsed.file_id)
        except NotFoundError:
            logger.debug("Drive item %s not found", parsed.file_id)
            return None

        if not isinstance(parsed, ExportedId):
            self._cache.put(identifier, record)
            return record

        # Cache every sibling format, not only the requested one.
        found: Optional[ObjectRecord] = None
        for variant in expand(record):
            if not variant.is_export_form:
                continue
            self._cache.put(variant.identifier, variant)
            if variant.identifier == identifier:
                found = variant

        return found
