"""Reading, writing and local staging of file content."""

from __future__ import annotations

import logging
import os
import tempfile
from typing import Optional

from gdrivefs.cache import ListingCache, MetadataCache
from gdrivefs.controller import GoogleDriveController
from gdrivefs.enumerator import file_extension
from gdrivefs.errors import LocalFileError, NotFoundError
from gdrivefs.models import ObjectRecord
from gdrivefs.resolver import ObjectResolver
from gdrivefs.util.identifiers import decompose
from gdrivefs.util.mime import export_mime_type

from ._common import backend_call, drop_listings

logger = logging.getLogger(__name__)


class ContentIO:
    """File content access; staged temporary files are removed by cleanup()."""

    def __init__(
        self,
        controller: GoogleDriveController,
        resolver: ObjectResolver,
        metadata_cache: MetadataCache,
        listing_cache: ListingCache,
        *,
        root_identifier: str = "root",
        temp_prefix: str = "gdrivefs-tempfile-",
        temp_dir: Optional[str] = None,
    ) -> None:
        self._controller = controller
        self._resolver = resolver
        self._metadata_cache = metadata_cache
        self._listing_cache = listing_cache
        self._root_identifier = root_identifier
        self._temp_prefix = temp_prefix
        self._temp_dir = temp_dir
        self._staged: dict[str, str] = {}

    @property
    def staged_paths(self) -> list[str]:
        return list(self._staged)

    def read(self, identifier: str) -> bytes:
        """
        Return the bytes of a file.

        Export ids are converted by Drive to the export MIME type registered
        for their extension.
        """
        record = self._require_file(identifier)

        if not record.is_export_form:
            return self._controller.get_media(record.file_id)

        _, extension = decompose(identifier)
        mime_type = export_mime_type(record.original_mime_type, extension or "")
        if mime_type is None:
            raise NotFoundError(
                f'The export mime type for ID "{identifier}" does not exist.',
                details={"identifier": identifier},
            )
        return self._controller.export(record.file_id, mime_type)

    def write(self, identifier: str, data: bytes) -> int:
        """
        Replace the content of a file; returns the number of bytes written.

        Returns 0 without calling Drive for export ids, files without the
        edit capability and empty payloads.
        """
        record = self._require_file(identifier)
        if not record.capabilities.can_edit or record.is_export_form or not data:
            return 0

        backend_call(
            f'Could not write file ID "{record.file_id}"',
            lambda: self._controller.update(
                record.file_id, {}, content=data, mime_type=record.mime_type
            ),
            identifier=identifier,
        )

        # Size and modification time changed.
        self._metadata_cache.invalidate(identifier)
        drop_listings(
            self._listing_cache,
            self._metadata_cache,
            self._root_identifier,
            record.parents,
        )
        return len(data)

    def replace(self, identifier: str, local_path: str) -> bool:
        try:
            with open(local_path, "rb") as f:
                data = f.read()
        except OSError as exc:
            raise LocalFileError(
                "Could not read local file",
                details={"local_path": local_path},
                cause=exc,
            ) from exc
        return self.write(identifier, data) > 0

    def materialize(self, identifier: str) -> str:
        """
        Write the file content to a temporary path and return it.

        The path ends with the file's extension so that tools sniffing by
        name keep working.

        Raises:
            LocalFileError: if the temporary file cannot be written.
        """
        record = self._require_file(identifier)
        if record.is_export_form:
            _, extension = decompose(identifier)
        else:
            extension = file_extension(record.name)

        content = self.read(identifier)
        suffix = f".{extension}" if extension else ""

        path = None
        try:
            fd, path = tempfile.mkstemp(
                prefix=self._temp_prefix,
                suffix=suffix,
                dir=self._temp_dir,
            )
            with os.fdopen(fd, "wb") as f:
                f.write(content)
        except OSError as exc:
            if path is not None:
                self._remove_quietly(path)
            raise LocalFileError(
                f"Copying file {identifier} to temporary path failed.",
                details={"identifier": identifier},
                cause=exc,
            ) from exc

        self._staged[path] = identifier
        logger.debug("Staged %s at %s", identifier, path)
        return path

    def cleanup(self) -> None:
        """Remove every staged temporary file."""
        for path in list(self._staged):
            self._remove_quietly(path)
            self._staged.pop(path, None)

    def _remove_quietly(self, path: str) -> None:
        try:
            os.remove(path)
        except FileNotFoundError:
            pass
        except OSError as exc:
            logger.warning("Could not remove temporary file %s: %s", path, exc)

    def _require_file(self, identifier: str) -> ObjectRecord:
        record = self._resolver.resolve(identifier)
        if record is None or record.is_folder:
            raise NotFoundError(
                f'A file with the ID "{identifier}" does not exist.',
                details={"identifier": identifier},
            )
        return record
