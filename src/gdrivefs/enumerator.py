"""Folder enumeration: pagination, export expansion, filtering, sorting, recursion."""

from __future__ import annotations

import logging
from typing import Any, Mapping, Optional, Sequence

from gdrivefs.cache import ListingCache, MetadataCache, canonical_query_key
from gdrivefs.controller import GoogleDriveController
from gdrivefs.controller.fields import LIST_FIELDS
from gdrivefs.errors import NotFoundError
from gdrivefs.filters import NameFilter, apply_name_filters
from gdrivefs.models import ObjectRecord
from gdrivefs.permissions import to_permissions
from gdrivefs.resolver import expand
from gdrivefs.util.identifiers import NativeId
from gdrivefs.util.mime import FOLDER_MIME

logger = logging.getLogger(__name__)

# Sort keys Drive can apply itself via orderBy.
NATIVE_ORDER_BY: dict[str, str] = {
    "size": "quotaBytesUsed",
    "tstamp": "modifiedTime",
}
NATIVE_SORTS: tuple[str, ...] = ("", "name", "size", "tstamp")

_SORT_ATTRIBUTES: dict[str, str] = {
    "name": "name",
    "size": "quota_bytes_used",
    "tstamp": "modified_time",
}


def build_folder_query(parent_id: str, *, is_folder: bool) -> str:
    negation = "" if is_folder else "not "
    return (
        f"'{parent_id}' in parents and trashed = false "
        f"and {negation}mimeType = '{FOLDER_MIME}'"
    )


def file_extension(name: str) -> str:
    if "." not in name:
        return ""
    return name.rsplit(".", 1)[1]


def sort_records(records: list[ObjectRecord], sort: str) -> list[ObjectRecord]:
    """
    Sort records client-side (stable).

    fileext sorts by extension, rw by the (readable, writable) pair, any other
    key by its record field, falling back to name when the field is missing.
    """
    if sort == "fileext":
        return sorted(records, key=lambda r: file_extension(r.name))

    if sort == "rw":
        def _rw_key(r: ObjectRecord) -> tuple[bool, bool, str]:
            perms = to_permissions(r.capabilities, r.is_export_form)
            return perms.readable, perms.writable, r.name

        return sorted(records, key=_rw_key)

    attribute = _SORT_ATTRIBUTES.get(sort)
    if attribute is None or any(getattr(r, attribute) is None for r in records):
        attribute = "name"
    return sorted(records, key=lambda r: getattr(r, attribute))


class FolderEnumerator:
    """Lists the files or folders of a Drive folder."""

    def __init__(
        self,
        controller: GoogleDriveController,
        metadata_cache: MetadataCache,
        listing_cache: ListingCache,
        *,
        page_size: int = 1000,
        filter_context: Optional[Mapping[str, Any]] = None,
    ) -> None:
        self._controller = controller
        self._metadata_cache = metadata_cache
        self._listing_cache = listing_cache
        self._page_size = page_size
        self._filter_context: Mapping[str, Any] = filter_context or {}

    def fetch(self, parent_id: str, *, is_folder: bool, sort: str = "") -> list[ObjectRecord]:
        """
        Return the unfiltered, export-expanded children of parent_id.

        Results are served from the listing cache when the same query ran
        before; otherwise every page is fetched and all expanded records are
        also stored in the metadata cache.
        """
        NativeId(parent_id)

        query = build_folder_query(parent_id, is_folder=is_folder)
        order_by = NATIVE_ORDER_BY.get(sort, "name")
        key = canonical_query_key(
            {
                "q": query,
                "orderBy": order_by,
                "pageSize": self._page_size,
                "fields": LIST_FIELDS,
            }
        )

        cached = self._listing_cache.get(key)
        if cached is not None:
            return cached

        raw: list[ObjectRecord] = []
        page_token: Optional[str] = None
        while True:
            try:
                records, page_token = self._controller.list_page(
                    query,
                    page_token=page_token,
                    order_by=order_by,
                    page_size=self._page_size,
                )
            except NotFoundError:
                logger.debug("Listing of %s stopped: folder not found", parent_id)
                break

            raw.extend(records)
            if not page_token:
                break

        expanded: list[ObjectRecord] = []
        for record in raw:
            variants = expand(record)
            self._metadata_cache.put_all(variants)
            expanded.extend(variants)

        self._listing_cache.put(key, parent_id, expanded)
        return list(expanded)

    def list_records(
        self,
        parent_id: Optional[str],
        *,
        is_folder: bool = False,
        start: int = 0,
        count: int = 0,
        recursive: bool = False,
        name_filters: Sequence[NameFilter] = (),
        sort: str = "",
        sort_reverse: bool = False,
    ) -> list[ObjectRecord]:
        """
        Return the ordered records of a folder listing request.

        count == 0 means unbounded. Items reachable twice through recursion
        are not de-duplicated.
        """
        if not parent_id:
            return []
        if start < 0 or count < 0:
            raise ValueError("start and count must not be negative")

        sort = sort or ""
        limit = None if count == 0 else start + count
        records = self._collect(parent_id, is_folder, limit, recursive, name_filters, sort)

        if recursive or sort not in NATIVE_SORTS:
            records = sort_records(records, sort)

        if sort_reverse:
            records.reverse()

        end = None if count == 0 else start + count
        return records[start:end]

    def list_identifiers(self, parent_id: Optional[str], **kwargs: Any) -> list[str]:
        return [r.identifier for r in self.list_records(parent_id, **kwargs)]

    def has_children(self, parent_id: str) -> bool:
        """Probe for any non-trashed child. Bypasses and leaves both caches alone."""
        NativeId(parent_id)
        query = f"'{parent_id}' in parents and trashed = false"
        try:
            records, _ = self._controller.list_page(query, page_size=1)
        except NotFoundError:
            return False
        return bool(records)

    # ----------------------------
    # Internals
    # ----------------------------
    def _collect(
        self,
        parent_id: str,
        is_folder: bool,
        limit: Optional[int],
        recursive: bool,
        name_filters: Sequence[NameFilter],
        sort: str,
    ) -> list[ObjectRecord]:
        fetched = self.fetch(parent_id, is_folder=is_folder, sort=sort)
        records = [
            r
            for r in fetched
            if apply_name_filters(
                name_filters, r.name, r.identifier, parent_id, self._filter_context
            )
        ]

        if not recursive or (limit is not None and len(records) >= limit):
            return records

        folders = fetched if is_folder else self.fetch(parent_id, is_folder=True)
        for folder in folders:
            remaining = None if limit is None else limit - len(records)
            records.extend(
                self._collect(folder.identifier, is_folder, remaining, True, name_filters, "")
            )
            if limit is not None and len(records) >= limit:
                break

        return records
