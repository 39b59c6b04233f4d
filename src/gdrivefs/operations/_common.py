from __future__ import annotations

from typing import Any, Callable, Iterable, TypeVar

from gdrivefs.cache import ListingCache, MetadataCache
from gdrivefs.errors import AuthError, BackendError, GDriveFsError

T = TypeVar("T")


def backend_call(message: str, func: Callable[[], T], **details: Any) -> T:
    """Run a Drive call, re-raising any failure except AuthError as BackendError."""
    try:
        return func()
    except AuthError:
        raise
    except GDriveFsError as exc:
        merged = dict(exc.details)
        merged.update(details)
        raise BackendError(f"{message}: {exc}", details=merged, cause=exc) from exc


def drop_listings(
    listing_cache: ListingCache,
    metadata_cache: MetadataCache,
    root_identifier: str,
    parent_ids: Iterable[str],
) -> None:
    """Drop cached listings of every given folder, including the root alias."""
    parents = set(parent_ids)
    for parent_id in parents:
        listing_cache.invalidate_parent(parent_id)

    # Unknown root id: the alias may name one of the parents.
    root = metadata_cache.get(root_identifier)
    if root is None or root.file_id in parents:
        listing_cache.invalidate_parent(root_identifier)
