"""Public model exports for gdrivefs."""

from __future__ import annotations

from .object_record import Capabilities, ObjectRecord, Permissions

__all__ = [
    "Capabilities",
    "ObjectRecord",
    "Permissions",
]
