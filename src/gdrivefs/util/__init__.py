from .identifiers import (
    DELIMITER,
    ExportedId,
    Identifier,
    NativeId,
    compose,
    decompose,
    is_export_form,
    is_valid,
    parse,
)
from .ids import hash_identifier
from .mime import (
    EXPORT_FORMATS,
    FOLDER_MIME,
    export_formats,
    export_mime_type,
    is_exportable,
    is_folder,
)
from .time import normalize_dt, parse_rfc3339, to_timestamp

__all__ = [
    "DELIMITER",
    "Identifier",
    "NativeId",
    "ExportedId",
    "parse",
    "compose",
    "decompose",
    "is_export_form",
    "is_valid",
    "hash_identifier",
    "EXPORT_FORMATS",
    "FOLDER_MIME",
    "export_formats",
    "export_mime_type",
    "is_exportable",
    "is_folder",
    "parse_rfc3339",
    "normalize_dt",
    "to_timestamp",
]
