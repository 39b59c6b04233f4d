"""Field definitions for Google Drive API responses."""

from __future__ import annotations

CAPABILITY_FIELDS: tuple[str, ...] = (
    "canAddChildren",
    "canCopy",
    "canDelete",
    "canDownload",
    "canEdit",
    "canListChildren",
    "canRemoveChildren",
    "canRename",
    "canTrash",
)

FILE_FIELDS: str = (
    "createdTime,"
    "id,"
    "mimeType,"
    "modifiedTime,"
    "name,"
    "parents,"
    "size,"
    "quotaBytesUsed,"
    + ",".join(f"capabilities/{name}" for name in CAPABILITY_FIELDS)
)

LIST_FIELDS: str = f"nextPageToken,files({FILE_FIELDS})"
