"""Map Drive capability flags onto the read/write permission model."""

from __future__ import annotations

from gdrivefs.models import Capabilities, Permissions


def to_permissions(capabilities: Capabilities, is_export_form: bool = False) -> Permissions:
    """
    Collapse Drive capabilities into (readable, writable).

    Export variants are derived from their source document and can never be
    written on their own, so they are always read-only.
    """
    readable = capabilities.can_download or capabilities.can_list_children

    writable = (
        capabilities.can_add_children
        or capabilities.can_copy
        or capabilities.can_delete
        or capabilities.can_edit
        or capabilities.can_remove_children
        or capabilities.can_rename
        or capabilities.can_trash
    )

    if is_export_form:
        writable = False

    return Permissions(readable=readable, writable=writable)
