"""Data model for resolved Drive items."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Mapping, Optional

from gdrivefs.util.mime import is_folder


@dataclass(slots=True, frozen=True)
class Capabilities:
    """Per-item capability flags as reported by Drive."""

    can_add_children: bool = False
    can_copy: bool = False
    can_delete: bool = False
    can_download: bool = False
    can_edit: bool = False
    can_list_children: bool = False
    can_remove_children: bool = False
    can_rename: bool = False
    can_trash: bool = False

    @classmethod
    def from_dict(cls, data: Optional[Mapping[str, Any]]) -> "Capabilities":
        data = data or {}
        return cls(
            can_add_children=bool(data.get("canAddChildren", False)),
            can_copy=bool(data.get("canCopy", False)),
            can_delete=bool(data.get("canDelete", False)),
            can_download=bool(data.get("canDownload", False)),
            can_edit=bool(data.get("canEdit", False)),
            can_list_children=bool(data.get("canListChildren", False)),
            can_remove_children=bool(data.get("canRemoveChildren", False)),
            can_rename=bool(data.get("canRename", False)),
            can_trash=bool(data.get("canTrash", False)),
        )


@dataclass(slots=True, frozen=True)
class Permissions:
    """Coarse permission model exposed to the host filesystem layer."""

    readable: bool
    writable: bool

    def as_dict(self) -> dict[str, bool]:
        return {"r": self.readable, "w": self.writable}


@dataclass(slots=True)
class ObjectRecord:
    """
    Represents one virtual filesystem entry.

    Notes:
        - For native items: identifier == file_id.
        - For export variants: identifier is "<file_id>.<ext>", name carries the
          extension, mime_type is the export MIME type and original_mime_type is
          the Google-apps type of the underlying document.
    """

    identifier: str
    file_id: str
    name: str
    mime_type: str
    parents: list[str] = field(default_factory=list)

    created_time: Optional[datetime] = None
    modified_time: Optional[datetime] = None
    size: Optional[int] = None
    quota_bytes_used: Optional[int] = None
    capabilities: Capabilities = field(default_factory=Capabilities)
    original_mime_type: Optional[str] = None

    @property
    def is_export_form(self) -> bool:
        return self.original_mime_type is not None

    @property
    def is_folder(self) -> bool:
        return is_folder(self.mime_type)
