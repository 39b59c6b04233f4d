"""Name filters applied to folder listings."""

from __future__ import annotations

import enum
from typing import Any, Callable, Mapping, Sequence

from gdrivefs.errors import MisconfigurationError


class FilterResult(enum.Enum):
    INCLUDE = "include"
    EXCLUDE = "exclude"
    MISCONFIGURED = "misconfigured"


# (name, identifier, parent_id, context) -> FilterResult
NameFilter = Callable[[str, str, str, Mapping[str, Any]], FilterResult]


def apply_name_filters(
    filters: Sequence[NameFilter],
    name: str,
    identifier: str,
    parent_id: str,
    context: Mapping[str, Any],
) -> bool:
    """
    Return True if every filter lets the item through.

    Raises:
        MisconfigurationError: if a filter reports MISCONFIGURED or returns
            something that is not a FilterResult.
    """
    for name_filter in filters:
        result = name_filter(name, identifier, parent_id, context)
        if result is FilterResult.EXCLUDE:
            return False
        if result is not FilterResult.INCLUDE:
            raise MisconfigurationError(
                "Could not apply file/folder name filter",
                details={
                    "filter": getattr(name_filter, "__qualname__", repr(name_filter)),
                    "identifier": identifier,
                    "result": repr(result),
                },
            )
    return True
