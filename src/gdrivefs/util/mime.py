from __future__ import annotations

from typing import Mapping, Optional

FOLDER_MIME: str = "application/vnd.google-apps.folder"

# Google-apps types have no binary form; each one is offered as one virtual
# file per export format. Order matters: it is the listing order of variants.
EXPORT_FORMATS: Mapping[str, Mapping[str, str]] = {
    "application/vnd.google-apps.document": {
        "html": "text/html",
        "zip": "application/zip",
        "txt": "text/plain",
        "rtf": "application/rtf",
        "odt": "application/vnd.oasis.opendocument.text",
        "pdf": "application/pdf",
        "docx": "application/vnd.openxmlformats-officedocument.wordprocessingml.document",
        "epub": "application/epub+zip",
    },
    "application/vnd.google-apps.spreadsheet": {
        "xlsx": "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet",
        "ods": "application/x-vnd.oasis.opendocument.spreadsheet",
    },
    "application/vnd.google-apps.drawing": {
        "jpg": "image/jpeg",
        "png": "image/png",
        "svg": "image/svg+xml",
        "pdf": "application/pdf",
    },
    "application/vnd.google-apps.presentation": {
        "pptx": "application/vnd.openxmlformats-officedocument.presentationml.presentation",
        "odp": "application/vnd.oasis.opendocument.presentation",
        "pdf": "application/pdf",
        "txt": "text/plain",
    },
}


def is_folder(mime_type: str) -> bool:
    return mime_type == FOLDER_MIME


def is_exportable(mime_type: str) -> bool:
    """Returns True if items of this MIME type are only reachable via export."""
    return mime_type in EXPORT_FORMATS


def export_formats(mime_type: str) -> Mapping[str, str]:
    """Return the extension -> export MIME type mapping (empty if not exportable)."""
    return EXPORT_FORMATS.get(mime_type, {})


def export_mime_type(original_mime_type: Optional[str], extension: str) -> Optional[str]:
    """Return the export MIME type for an extension, or None if not registered."""
    if original_mime_type is None:
        return None
    return EXPORT_FORMATS.get(original_mime_type, {}).get(extension)
