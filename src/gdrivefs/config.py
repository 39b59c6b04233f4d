"""Driver configuration for gdrivefs."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Mapping, Optional

from gdrivefs.util.identifiers import is_valid

DEFAULT_SCOPES: tuple[str, ...] = (
    "https://www.googleapis.com/auth/documents.readonly",
    "https://www.googleapis.com/auth/drive.file",
    "https://www.googleapis.com/auth/drive.metadata",
    "https://www.googleapis.com/auth/drive",
)

# Host-side (camelCase) configuration keys -> DriverConfig fields.
_MAPPING_KEYS: dict[str, str] = {
    "rootIdentifier": "root_identifier",
    "storageUid": "storage_uid",
    "pageSize": "page_size",
    "tempPrefix": "temp_prefix",
    "tempDir": "temp_dir",
    "scopes": "scopes",
    "supportsAllDrives": "supports_all_drives",
}


@dataclass(slots=True, frozen=True)
class DriverConfig:
    """
    Driver configuration.

    root_identifier: Drive folder id used as the storage root ("root" is the
        user's My Drive).
    storage_uid: Host storage record id, echoed in info dicts.
    page_size: pageSize sent with every files.list call (Drive caps it at 1000).
    temp_prefix / temp_dir: where get_file_for_local_processing stages files.
    """

    root_identifier: str = "root"
    storage_uid: Optional[int] = None
    page_size: int = 1000
    temp_prefix: str = "gdrivefs-tempfile-"
    temp_dir: Optional[str] = None
    scopes: tuple[str, ...] = DEFAULT_SCOPES
    supports_all_drives: bool = True

    def __post_init__(self) -> None:
        if not isinstance(self.root_identifier, str) or not is_valid(self.root_identifier):
            raise ValueError("DriverConfig.root_identifier must be a valid Drive id")

        if "." in self.root_identifier:
            raise ValueError("DriverConfig.root_identifier must be a native Drive id")

        if not isinstance(self.page_size, int) or not 1 <= self.page_size <= 1000:
            raise ValueError("DriverConfig.page_size must be between 1 and 1000")

        if not isinstance(self.temp_prefix, str) or not self.temp_prefix:
            raise ValueError("DriverConfig.temp_prefix must be a non-empty string")

        if not self.scopes or not all(isinstance(s, str) and s.strip() for s in self.scopes):
            raise ValueError("DriverConfig.scopes must be a non-empty sequence of strings")

    @classmethod
    def from_mapping(cls, mapping: Mapping[str, Any]) -> "DriverConfig":
        """Build a config from host configuration (camelCase or snake_case keys)."""
        kwargs: dict[str, Any] = {}
        for key, value in mapping.items():
            name = _MAPPING_KEYS.get(key, key)
            if name not in cls.__dataclass_fields__:
                raise ValueError(f"Unknown configuration key: {key}")
            kwargs[name] = value

        if "scopes" in kwargs:
            kwargs["scopes"] = tuple(kwargs["scopes"])
        if kwargs.get("storage_uid") is not None:
            kwargs["storage_uid"] = int(kwargs["storage_uid"])
        if "page_size" in kwargs:
            kwargs["page_size"] = int(kwargs["page_size"])
        return cls(**kwargs)
