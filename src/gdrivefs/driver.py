"""GoogleDriveDriver: Google Drive as an identifier-addressed hierarchical filesystem."""

from __future__ import annotations

from typing import Any, Optional, Sequence

from gdrivefs.auth import TokenRegistry
from gdrivefs.cache import ListingCache, MetadataCache
from gdrivefs.config import DriverConfig
from gdrivefs.controller import GoogleDriveController
from gdrivefs.enumerator import FolderEnumerator, file_extension
from gdrivefs.errors import InvalidIdentifierError, NotFoundError
from gdrivefs.filters import NameFilter
from gdrivefs.models import ObjectRecord, Permissions
from gdrivefs.operations import ContentIO, MutationOperations
from gdrivefs.permissions import to_permissions
from gdrivefs.resolver import ObjectResolver
from gdrivefs.util.identifiers import is_valid
from gdrivefs.util.ids import hash_identifier
from gdrivefs.util.time import to_timestamp


class GoogleDriveDriver:
    """
    Hierarchical filesystem driver backed by Google Drive.

    Identifiers are Drive file ids; Google-apps documents appear once per
    export format as "<file id>.<extension>" and are read-only.
    """

    def __init__(
        self,
        registry: TokenRegistry,
        config: Optional[DriverConfig] = None,
        *,
        metadata_cache: Optional[MetadataCache] = None,
        listing_cache: Optional[ListingCache] = None,
    ) -> None:
        config = config or DriverConfig()
        controller = GoogleDriveController(
            registry,
            scopes=config.scopes,
            supports_all_drives=config.supports_all_drives,
        )
        self._setup(controller, config, metadata_cache, listing_cache)

    @classmethod
    def from_controller(
        cls,
        controller: GoogleDriveController,
        config: Optional[DriverConfig] = None,
        *,
        metadata_cache: Optional[MetadataCache] = None,
        listing_cache: Optional[ListingCache] = None,
    ) -> "GoogleDriveDriver":
        """Create driver with an injected controller (useful for tests)."""
        obj = cls.__new__(cls)
        obj._setup(controller, config or DriverConfig(), metadata_cache, listing_cache)
        return obj

    def _setup(
        self,
        controller: GoogleDriveController,
        config: DriverConfig,
        metadata_cache: Optional[MetadataCache],
        listing_cache: Optional[ListingCache],
    ) -> None:
        self._config = config
        self._controller = controller
        self.metadata_cache = metadata_cache if metadata_cache is not None else MetadataCache()
        self.listing_cache = listing_cache if listing_cache is not None else ListingCache()

        root = config.root_identifier
        self._resolver = ObjectResolver(controller, self.metadata_cache, root_identifier=root)
        self._enumerator = FolderEnumerator(
            controller,
            self.metadata_cache,
            self.listing_cache,
            page_size=config.page_size,
            filter_context={"driver": self},
        )
        self._mutations = MutationOperations(
            controller,
            self._resolver,
            self._enumerator,
            self.metadata_cache,
            self.listing_cache,
            root_identifier=root,
        )
        self._content = ContentIO(
            controller,
            self._resolver,
            self.metadata_cache,
            self.listing_cache,
            root_identifier=root,
            temp_prefix=config.temp_prefix,
            temp_dir=config.temp_dir,
        )

    # ----------------------------
    # Lifecycle
    # ----------------------------
    @property
    def config(self) -> DriverConfig:
        return self._config

    def close(self) -> None:
        """Remove temporary files staged by get_file_for_local_processing."""
        self._content.cleanup()

    def __enter__(self) -> "GoogleDriveDriver":
        return self

    def __exit__(self, *exc_info: Any) -> None:
        self.close()

    # ----------------------------
    # Identifiers
    # ----------------------------
    @property
    def root_level_folder(self) -> str:
        return self._config.root_identifier

    @property
    def default_folder(self) -> str:
        return self.root_level_folder

    def get_public_url(self, identifier: str) -> str:
        return ""

    def canonicalize_identifier(self, identifier: str) -> str:
        """Validate an identifier; "root" maps to the default folder."""
        if identifier == "root":
            return self.default_folder
        if not is_valid(identifier):
            raise InvalidIdentifierError(
                f"Invalid file identifier: {identifier!r}",
                details={"identifier": identifier},
            )
        return identifier

    def hash(self, identifier: str, algorithm: str = "sha1") -> str:
        return hash_identifier(identifier, algorithm)

    def hash_identifier(self, identifier: str) -> str:
        return hash_identifier(identifier)

    def generate_new_id(self) -> str:
        return self._controller.generate_id()

    # ----------------------------
    # Lookup
    # ----------------------------
    def get_record(self, identifier: str) -> Optional[ObjectRecord]:
        return self._resolver.resolve(identifier)

    def file_exists(self, identifier: str) -> bool:
        record = self._resolver.resolve(identifier)
        return record is not None and not record.is_folder

    def folder_exists(self, identifier: str) -> bool:
        record = self._resolver.resolve(identifier)
        return record is not None and record.is_folder

    def is_folder_empty(self, folder_id: str) -> bool:
        return not self._enumerator.has_children(folder_id or self.root_level_folder)

    def file_exists_in_folder(self, file_name: str, folder_id: str) -> bool:
        return self._find_by_name(file_name, folder_id, is_folder=False) is not None

    def folder_exists_in_folder(self, folder_name: str, folder_id: str) -> bool:
        return self._find_by_name(folder_name, folder_id, is_folder=True) is not None

    def get_file_in_folder(self, file_name: str, folder_id: str) -> str:
        """Return the id of the named file, or a fresh Drive id if absent."""
        record = self._find_by_name(file_name, folder_id, is_folder=False)
        return record.identifier if record is not None else self.generate_new_id()

    def get_folder_in_folder(self, folder_name: str, folder_id: str) -> str:
        """Return the id of the named folder, or a fresh Drive id if absent."""
        record = self._find_by_name(folder_name, folder_id, is_folder=True)
        return record.identifier if record is not None else self.generate_new_id()

    def get_parent_folder_identifier_of_identifier(self, identifier: str) -> str:
        if identifier == self.root_level_folder:
            return identifier

        record = self._resolver.resolve(identifier)
        if record is None or not record.parents:
            raise NotFoundError(
                f'No parent folder for ID "{identifier}".',
                details={"identifier": identifier},
            )
        return record.parents[0]

    def is_within(self, folder_id: str, identifier: str) -> bool:
        """True if identifier is folder_id itself or one of its direct children."""
        if folder_id == identifier:
            return True
        if identifier in self.get_files_in_folder(folder_id):
            return True
        return identifier in self.get_folders_in_folder(folder_id)

    # ----------------------------
    # Info / permissions
    # ----------------------------
    def get_file_info_by_identifier(
        self,
        identifier: str,
        properties_to_extract: Sequence[str] = (),
    ) -> Optional[dict[str, Any]]:
        record = self._resolver.resolve(identifier)
        if record is None or record.is_folder:
            return None

        size = record.quota_bytes_used if record.quota_bytes_used is not None else record.size

        info: dict[str, Any] = {
            "name": record.name,
            "identifier": record.identifier,
            "ctime": to_timestamp(record.created_time),
            "mtime": to_timestamp(record.modified_time),
            "identifier_hash": hash_identifier(record.identifier),
            "folder_hash": hash_identifier(record.parents[0] if record.parents else "root"),
            "extension": file_extension(record.name),
            "storage": self._config.storage_uid,
            "size": size or 0,
            "mimetype": record.mime_type,
        }

        if properties_to_extract:
            info = {k: v for k, v in info.items() if k in properties_to_extract}
        return info

    def get_folder_info_by_identifier(self, folder_id: str) -> dict[str, Any]:
        folder_id = folder_id or self.root_level_folder
        record = self._resolver.resolve(folder_id)
        if record is None or not record.is_folder:
            raise NotFoundError(
                f'A folder with the ID "{folder_id}" does not exist.',
                details={"identifier": folder_id},
            )
        return {
            "name": record.name,
            "identifier": record.identifier,
            "storage": self._config.storage_uid,
        }

    def get_permissions(self, identifier: str) -> Permissions:
        record = self._resolver.resolve(identifier)
        if record is None:
            raise NotFoundError(
                f'An item with the ID "{identifier}" does not exist.',
                details={"identifier": identifier},
            )
        return to_permissions(record.capabilities, record.is_export_form)

    # ----------------------------
    # Listing
    # ----------------------------
    def get_files_in_folder(
        self,
        folder_id: str,
        start: int = 0,
        number_of_items: int = 0,
        recursive: bool = False,
        filename_filters: Sequence[NameFilter] = (),
        sort: str = "",
        sort_reverse: bool = False,
    ) -> list[str]:
        return self._enumerator.list_identifiers(
            folder_id,
            is_folder=False,
            start=start,
            count=number_of_items,
            recursive=recursive,
            name_filters=filename_filters,
            sort=sort,
            sort_reverse=sort_reverse,
        )

    def get_folders_in_folder(
        self,
        folder_id: str,
        start: int = 0,
        number_of_items: int = 0,
        recursive: bool = False,
        folder_name_filters: Sequence[NameFilter] = (),
        sort: str = "",
        sort_reverse: bool = False,
    ) -> list[str]:
        return self._enumerator.list_identifiers(
            folder_id,
            is_folder=True,
            start=start,
            count=number_of_items,
            recursive=recursive,
            name_filters=folder_name_filters,
            sort=sort,
            sort_reverse=sort_reverse,
        )

    def count_files_in_folder(
        self,
        folder_id: str,
        recursive: bool = False,
        filename_filters: Sequence[NameFilter] = (),
    ) -> int:
        return len(self.get_files_in_folder(folder_id, 0, 0, recursive, filename_filters))

    def count_folders_in_folder(
        self,
        folder_id: str,
        recursive: bool = False,
        folder_name_filters: Sequence[NameFilter] = (),
    ) -> int:
        return len(self.get_folders_in_folder(folder_id, 0, 0, recursive, folder_name_filters))

    # ----------------------------
    # Mutations
    # ----------------------------
    def create_folder(self, new_folder_name: str, parent_folder_id: str = "") -> str:
        return self._mutations.create_folder(new_folder_name, parent_folder_id)

    def create_file(self, file_name: str, parent_folder_id: str) -> str:
        return self._mutations.create_file(file_name, parent_folder_id)

    def add_file(
        self,
        local_file_path: str,
        target_folder_id: str,
        new_file_name: str = "",
        remove_original: bool = True,
    ) -> str:
        return self._mutations.add_file(
            local_file_path, target_folder_id, new_file_name, remove_original
        )

    def copy_file_within_storage(self, file_id: str, target_folder_id: str, file_name: str) -> str:
        return self._mutations.copy(file_id, target_folder_id, file_name)

    def rename_file(self, file_id: str, new_name: str) -> str:
        return self._mutations.rename(file_id, new_name)

    def rename_folder(self, folder_id: str, new_name: str) -> dict[str, str]:
        identifier = self._mutations.rename(folder_id, new_name)
        return {identifier: identifier}

    def delete_file(self, file_id: str) -> bool:
        return self._mutations.delete(file_id)

    def delete_folder(self, folder_id: str, delete_recursively: bool = False) -> bool:
        return self._mutations.delete(folder_id, delete_recursively)

    # ----------------------------
    # Content
    # ----------------------------
    def get_file_contents(self, file_id: str) -> bytes:
        return self._content.read(file_id)

    def set_file_contents(self, file_id: str, contents: bytes) -> int:
        return self._content.write(file_id, contents)

    def replace_file(self, file_id: str, local_file_path: str) -> bool:
        return self._content.replace(file_id, local_file_path)

    def get_file_for_local_processing(self, file_id: str, writable: bool = True) -> str:
        return self._content.materialize(file_id)

    # ----------------------------
    # Internals
    # ----------------------------
    def _find_by_name(self, name: str, folder_id: str, *, is_folder: bool) -> Optional[ObjectRecord]:
        wanted = name.casefold()
        for record in self._enumerator.list_records(folder_id, is_folder=is_folder):
            if record.name.casefold() == wanted:
                return record
        return None
