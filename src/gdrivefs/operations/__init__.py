"""Mutating and content operations for gdrivefs."""

from __future__ import annotations

from .content import ContentIO
from .mutations import MutationOperations

__all__ = ["ContentIO", "MutationOperations"]
