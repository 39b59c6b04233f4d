"""Create / rename / copy / delete with cache maintenance."""

from __future__ import annotations

import logging
import mimetypes
import os
from typing import Any, Iterable

from gdrivefs.cache import ListingCache, MetadataCache
from gdrivefs.controller import GoogleDriveController
from gdrivefs.enumerator import FolderEnumerator
from gdrivefs.errors import LocalFileError, NotFoundError, PermissionDeniedError
from gdrivefs.models import ObjectRecord
from gdrivefs.resolver import ObjectResolver
from gdrivefs.util.identifiers import compose, decompose
from gdrivefs.util.mime import FOLDER_MIME, export_formats, is_exportable

from ._common import backend_call, drop_listings

logger = logging.getLogger(__name__)


def strip_export_extension(new_name: str, extension: str) -> str:
    """
    Remove extension from new_name when it matches (case-insensitive).

    Keeps the underlying Google-apps document name extension-free.
    """
    if "." not in new_name:
        return new_name
    stem, name_extension = new_name.rsplit(".", 1)
    if name_extension.lower() == extension.lower():
        return stem
    return new_name


def export_sibling_ids(record: ObjectRecord) -> list[str]:
    """Return every virtual id of the Google-apps document behind record."""
    ids = [record.file_id]
    for extension in export_formats(_document_mime_type(record)):
        ids.append(compose(record.file_id, extension))
    return ids


def _document_mime_type(record: ObjectRecord) -> str:
    return record.original_mime_type or record.mime_type


class MutationOperations:
    """Mutating Drive operations; each one keeps both caches consistent."""

    def __init__(
        self,
        controller: GoogleDriveController,
        resolver: ObjectResolver,
        enumerator: FolderEnumerator,
        metadata_cache: MetadataCache,
        listing_cache: ListingCache,
        *,
        root_identifier: str = "root",
    ) -> None:
        self._controller = controller
        self._resolver = resolver
        self._enumerator = enumerator
        self._metadata_cache = metadata_cache
        self._listing_cache = listing_cache
        self._root_identifier = root_identifier

    def create_folder(self, name: str, parent_id: str = "") -> str:
        """Create a folder and return its Drive id."""
        parent_id = parent_id or self._root_identifier
        body = {"name": name, "mimeType": FOLDER_MIME, "parents": [parent_id]}

        new_id = backend_call(
            f"Could not create folder {name!r}",
            lambda: self._controller.create(body),
            parent_id=parent_id,
        )
        self._drop_listings([parent_id])
        logger.debug("Created folder %s in %s", new_id, parent_id)
        return new_id

    def create_file(self, name: str, parent_id: str) -> str:
        """Create an empty file and return its Drive id."""
        parent_id = parent_id or self._root_identifier
        body: dict[str, Any] = {"name": name, "parents": [parent_id]}
        guessed, _ = mimetypes.guess_type(name)
        if guessed:
            body["mimeType"] = guessed

        new_id = backend_call(
            f"Could not create file {name!r}",
            lambda: self._controller.create(body),
            parent_id=parent_id,
        )
        self._drop_listings([parent_id])
        return new_id

    def add_file(
        self,
        local_path: str,
        target_folder_id: str,
        new_name: str = "",
        remove_original: bool = True,
    ) -> str:
        """
        Upload a local file into target_folder_id and return the new id.

        The local file is removed after a successful upload when
        remove_original is set; a failed removal is only logged.

        Raises:
            LocalFileError: if local_path cannot be read.
        """
        try:
            with open(local_path, "rb") as f:
                content = f.read()
        except OSError as exc:
            raise LocalFileError(
                "Could not read local file",
                details={"local_path": local_path},
                cause=exc,
            ) from exc

        target_folder_id = target_folder_id or self._root_identifier
        name = new_name if new_name != "" else os.path.basename(local_path)
        mime_type, _ = mimetypes.guess_type(name)

        new_id = backend_call(
            f"Could not upload {local_path!r}",
            lambda: self._controller.create(
                {"name": name, "parents": [target_folder_id]},
                content=content,
                mime_type=mime_type,
            ),
            parent_id=target_folder_id,
        )
        self._drop_listings([target_folder_id])

        if remove_original:
            try:
                os.remove(local_path)
            except OSError as exc:
                logger.warning("Could not remove uploaded source %s: %s", local_path, exc)

        return new_id

    def rename(self, identifier: str, new_name: str) -> str:
        """
        Rename a file or folder; returns the (unchanged) identifier.

        Raises:
            NotFoundError: if identifier does not resolve.
            PermissionDeniedError: if the item lacks the rename capability.
            BackendError: if Drive rejects the update.
        """
        record = self._resolver.resolve(identifier)
        if record is None:
            raise NotFoundError(
                f'A file with the ID "{identifier}" does not exist.',
                details={"identifier": identifier},
            )

        if record.is_export_form:
            _, extension = decompose(identifier)
            new_name = strip_export_extension(new_name, extension or "")

        if not record.capabilities.can_rename:
            raise PermissionDeniedError(
                f'Could not rename file ID "{record.file_id}" because you do not have rename capability.',
                details={"identifier": identifier},
            )

        backend_call(
            f'Could not rename file ID "{record.file_id}" to "{new_name}"',
            lambda: self._controller.update(record.file_id, {"name": new_name}),
            identifier=identifier,
        )

        self._invalidate_record(record, identifier)
        self._drop_listings(record.parents)
        return identifier

    def copy(self, identifier: str, target_folder_id: str, new_name: str) -> str:
        """
        Copy a file within the drive and return the id of the copy.

        Raises:
            NotFoundError: if identifier is not an existing file.
            BackendError: if Drive rejects the copy.
        """
        record = self._resolver.resolve(identifier)
        if record is None or record.is_folder:
            raise NotFoundError(
                f'A file with the ID "{identifier}" does not exist.',
                details={"identifier": identifier},
            )

        if record.is_export_form:
            _, extension = decompose(identifier)
            new_name = strip_export_extension(new_name, extension or "")

        target_folder_id = target_folder_id or self._root_identifier
        body = {"name": new_name, "parents": [target_folder_id]}

        new_id = backend_call(
            f'Could not copy file ID "{record.file_id}"',
            lambda: self._controller.copy(record.file_id, body),
            identifier=identifier,
            target_folder_id=target_folder_id,
        )
        self._drop_listings([target_folder_id])
        return new_id

    def delete(self, identifier: str, recursive: bool = False) -> bool:
        """
        Delete a file or folder.

        Returns False (and changes nothing) when asked to delete a non-empty
        folder without recursive. Deleting an export id deletes the document.
        """
        record = self._resolver.resolve(identifier)
        if record is None:
            raise NotFoundError(
                f'An item with the ID "{identifier}" does not exist.',
                details={"identifier": identifier},
            )

        non_empty_folder = record.is_folder and self._enumerator.has_children(record.file_id)
        if non_empty_folder and not recursive:
            logger.debug("Refusing non-recursive delete of non-empty folder %s", identifier)
            return False

        backend_call(
            f'Could not delete ID "{record.file_id}"',
            lambda: self._controller.delete(record.file_id),
            identifier=identifier,
        )

        if non_empty_folder:
            # Descendant ids are not tracked individually.
            self._metadata_cache.clear()
            self._listing_cache.clear()
        else:
            self._invalidate_record(record, identifier)

        self._drop_listings(record.parents)
        if record.is_folder:
            self._listing_cache.invalidate_parent(identifier)
        return True

    def _invalidate_record(self, record: ObjectRecord, identifier: str) -> None:
        # A document is cached under its bare id and every export id.
        if is_exportable(_document_mime_type(record)):
            self._metadata_cache.invalidate_many(export_sibling_ids(record))
        else:
            self._metadata_cache.invalidate(identifier)

    def _drop_listings(self, parent_ids: Iterable[str]) -> None:
        drop_listings(
            self._listing_cache,
            self._metadata_cache,
            self._root_identifier,
            parent_ids,
        )
