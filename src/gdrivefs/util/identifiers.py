"""
Virtual identifiers.

A Drive item is addressed by its Drive file id ("native" form). Google-apps
documents are additionally addressed once per export format as
``<file id>.<extension>`` ("export" form). The dot never occurs in Drive ids,
so the form is detected syntactically; ids that break that assumption are
rejected instead of being misparsed.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Optional, Union

from gdrivefs.errors import InvalidIdentifierError

DELIMITER: str = "."

_NATIVE_PATTERN = re.compile(r"[A-Za-z0-9_-]+")
_EXTENSION_PATTERN = re.compile(r"[A-Za-z0-9]+")


@dataclass(frozen=True)
class NativeId:
    file_id: str

    def __post_init__(self) -> None:
        _check_native(self.file_id)

    @property
    def extension(self) -> None:
        return None

    def __str__(self) -> str:
        return self.file_id


@dataclass(frozen=True)
class ExportedId:
    file_id: str
    extension: str

    def __post_init__(self) -> None:
        _check_native(self.file_id)
        if not _EXTENSION_PATTERN.fullmatch(self.extension):
            raise InvalidIdentifierError(
                "Invalid export extension",
                details={"file_id": self.file_id, "extension": self.extension},
            )

    def __str__(self) -> str:
        return f"{self.file_id}{DELIMITER}{self.extension}"


Identifier = Union[NativeId, ExportedId]


def parse(identifier: str) -> Identifier:
    """
    Parse a virtual identifier string.

    Raises:
        InvalidIdentifierError: if the string is not a well-formed identifier.
    """
    if not isinstance(identifier, str) or not identifier:
        raise InvalidIdentifierError(
            "Identifier must be a non-empty string",
            details={"identifier": identifier},
        )

    if DELIMITER not in identifier:
        return NativeId(identifier)

    parts = identifier.split(DELIMITER)
    if len(parts) != 2:
        raise InvalidIdentifierError(
            f"Invalid file identifier: {identifier!r}",
            details={"identifier": identifier},
        )
    return ExportedId(parts[0], parts[1])


def is_export_form(identifier: str) -> bool:
    return DELIMITER in identifier


def decompose(identifier: str) -> tuple[str, Optional[str]]:
    parsed = parse(identifier)
    return parsed.file_id, parsed.extension


def compose(file_id: str, extension: Optional[str] = None) -> str:
    if extension is None:
        return str(NativeId(file_id))
    return str(ExportedId(file_id, extension))


def is_valid(identifier: str) -> bool:
    try:
        parse(identifier)
    except InvalidIdentifierError:
        return False
    return True


def _check_native(file_id: str) -> None:
    if not isinstance(file_id, str) or not _NATIVE_PATTERN.fullmatch(file_id):
        raise InvalidIdentifierError(
            f"Invalid file identifier: {file_id!r}",
            details={"file_id": file_id},
        )
