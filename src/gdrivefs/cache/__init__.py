"""Cache exports for gdrivefs."""

from __future__ import annotations

from .listing import ListingCache, canonical_query_key
from .metadata import MetadataCache

__all__ = ["ListingCache", "MetadataCache", "canonical_query_key"]
