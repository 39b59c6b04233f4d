"""Google Drive API controller (internal use only)."""

from __future__ import annotations

import io
import json
import logging
from typing import Any, Callable, Optional, Sequence, TypeVar

from gdrivefs.auth import OAuthClient, TokenRegistry
from gdrivefs.config import DEFAULT_SCOPES
from gdrivefs.errors import (
    AuthError,
    BackendError,
    GDriveFsError,
    HttpErrorInfo,
    NetworkError,
    map_http_error,
)
from gdrivefs.models import Capabilities, ObjectRecord
from gdrivefs.util.identifiers import NativeId
from gdrivefs.util.time import parse_rfc3339

from .fields import FILE_FIELDS, LIST_FIELDS

T = TypeVar("T")

logger = logging.getLogger(__name__)


class GoogleDriveController:
    """
    Drive API controller (internal only).

    Notes:
        - The Drive `service` object is NOT exposed.
        - `supports_all_drives` is applied to all requests consistently.
        - Failures are mapped to gdrivefs errors and never retried.
    """

    def __init__(
        self,
        registry: TokenRegistry,
        *,
        scopes: Optional[Sequence[str]] = None,
        supports_all_drives: bool = True,
    ) -> None:
        self._supports_all_drives = supports_all_drives

        use_scopes = list(scopes) if scopes is not None else list(DEFAULT_SCOPES)
        client = OAuthClient(registry)
        self._service = client.build_drive_service(use_scopes)

    @classmethod
    def from_service(
        cls,
        service: Any,
        *,
        supports_all_drives: bool = True,
    ) -> "GoogleDriveController":
        """Create controller from a pre-built Drive service (useful for tests)."""
        obj = cls.__new__(cls)
        obj._supports_all_drives = supports_all_drives
        obj._service = service
        return obj

    # ----------------------------
    # Public API
    # ----------------------------
    def get(self, file_id: str) -> ObjectRecord:
        req = self._service.files().get(
            fileId=file_id,
            fields=FILE_FIELDS,
            **self._common_get_kwargs(),
        )
        data = self._execute(req.execute)
        return _file_dict_to_record(data)

    def list_page(
        self,
        query: str,
        *,
        page_token: Optional[str] = None,
        order_by: Optional[str] = None,
        page_size: Optional[int] = None,
    ) -> tuple[list[ObjectRecord], Optional[str]]:
        """Fetch one page of a files.list query. Returns (records, next_page_token)."""
        kwargs: dict[str, Any] = {}
        if order_by:
            kwargs["orderBy"] = order_by
        if page_size:
            kwargs["pageSize"] = page_size

        req = self._service.files().list(
            q=query,
            fields=LIST_FIELDS,
            pageToken=page_token,
            **kwargs,
            **self._common_list_kwargs(),
        )
        data = self._execute(req.execute)
        records = [_file_dict_to_record(f) for f in data.get("files", []) or []]

        next_token = data.get("nextPageToken")
        logger.debug("files.list returned %d items (more=%s)", len(records), bool(next_token))
        return records, next_token if next_token else None

    def create(
        self,
        body: dict[str, Any],
        *,
        content: Optional[bytes] = None,
        mime_type: Optional[str] = None,
    ) -> str:
        """Create a file or folder; returns the new Drive id."""
        kwargs: dict[str, Any] = {}
        if content is not None:
            kwargs["media_body"] = _media_upload(content, mime_type)

        req = self._service.files().create(
            body=body,
            fields="id",
            **kwargs,
            **self._common_write_kwargs(),
        )
        data = self._execute(req.execute)
        return _require_id(data)

    def update(
        self,
        file_id: str,
        body: dict[str, Any],
        *,
        content: Optional[bytes] = None,
        mime_type: Optional[str] = None,
    ) -> None:
        kwargs: dict[str, Any] = {}
        if content is not None:
            kwargs["media_body"] = _media_upload(content, mime_type)

        req = self._service.files().update(
            fileId=file_id,
            body=body,
            fields="id,name",
            **kwargs,
            **self._common_write_kwargs(),
        )
        self._execute(req.execute)

    def copy(self, file_id: str, body: dict[str, Any]) -> str:
        """Copy a file; returns the id of the copy."""
        req = self._service.files().copy(
            fileId=file_id,
            body=body,
            fields="id",
            **self._common_write_kwargs(),
        )
        data = self._execute(req.execute)
        return _require_id(data)

    def delete(self, file_id: str) -> None:
        req = self._service.files().delete(
            fileId=file_id,
            **self._common_write_kwargs(),
        )
        self._execute(req.execute)

    def export(self, file_id: str, mime_type: str) -> bytes:
        """Export a Google-apps document to mime_type and return the bytes."""
        req = self._service.files().export(fileId=file_id, mimeType=mime_type)
        return _as_bytes(self._execute(req.execute))

    def get_media(self, file_id: str) -> bytes:
        req = self._service.files().get_media(
            fileId=file_id,
            **self._common_get_kwargs(),
        )
        return _as_bytes(self._execute(req.execute))

    def generate_id(self) -> str:
        req = self._service.files().generateIds(count=1, space="drive")
        data = self._execute(req.execute)
        ids = data.get("ids") or []
        if not ids or not isinstance(ids[0], str):
            raise BackendError("Drive did not return a generated id")
        return ids[0]

    # ----------------------------
    # Internals
    # ----------------------------
    def _common_get_kwargs(self) -> dict[str, Any]:
        if not self._supports_all_drives:
            return {}
        return {"supportsAllDrives": True}

    def _common_list_kwargs(self) -> dict[str, Any]:
        if not self._supports_all_drives:
            return {}
        return {"supportsAllDrives": True, "includeItemsFromAllDrives": True}

    def _common_write_kwargs(self) -> dict[str, Any]:
        if not self._supports_all_drives:
            return {}
        return {"supportsAllDrives": True}

    def _execute(self, func: Callable[[], T]) -> T:
        try:
            return func()
        except GDriveFsError:
            raise
        except Exception as exc:
            raise self._map_exception(exc) from exc

    def _map_exception(self, exc: Exception) -> Exception:
        try:
            from googleapiclient.errors import HttpError
        except Exception:  # pragma: no cover
            HttpError = None  # type: ignore[assignment]

        if HttpError is not None and isinstance(exc, HttpError):
            info = _http_error_to_info(exc)
            return map_http_error(info, cause=exc)

        try:
            from google.auth.exceptions import RefreshError
        except Exception:  # pragma: no cover
            RefreshError = None  # type: ignore[assignment]

        if RefreshError is not None and isinstance(exc, RefreshError):
            return AuthError("OAuth token refresh failed", cause=exc)

        if isinstance(exc, (OSError, TimeoutError)):
            return NetworkError("Network error", cause=exc)

        return BackendError("Drive API error", cause=exc)


def _media_upload(content: bytes, mime_type: Optional[str]):
    try:
        from googleapiclient.http import MediaIoBaseUpload
    except Exception as exc:  # pragma: no cover
        raise AuthError(
            "google-api-python-client is not available",
            cause=exc,
        ) from exc

    return MediaIoBaseUpload(
        io.BytesIO(content),
        mimetype=mime_type or "application/octet-stream",
        resumable=False,
    )


def _as_bytes(value: Any) -> bytes:
    if value is None:
        return b""
    if isinstance(value, str):
        return value.encode("utf-8")
    return bytes(value)


def _require_id(data: Any) -> str:
    file_id = data.get("id") if isinstance(data, dict) else None
    if not isinstance(file_id, str) or not file_id:
        raise BackendError("Drive did not return an id")
    return file_id


def _parse_int(value: Any) -> Optional[int]:
    if isinstance(value, int):
        return value
    if isinstance(value, str) and value.isdigit():
        return int(value)
    return None


def _parse_time(value: Any):
    if not isinstance(value, str):
        return None
    try:
        return parse_rfc3339(value)
    except ValueError:
        return None


def _file_dict_to_record(data: dict[str, Any]) -> ObjectRecord:
    file_id = data.get("id")
    if not isinstance(file_id, str) or not file_id:
        raise BackendError("Drive returned an item without id", details={"item": data})

    # Rejects ids that would be mistaken for export variants.
    identifier = str(NativeId(file_id))

    name = data.get("name", "")
    mime_type = data.get("mimeType", "")
    parents = data.get("parents", []) or []

    return ObjectRecord(
        identifier=identifier,
        file_id=file_id,
        name=name if isinstance(name, str) else "",
        mime_type=mime_type if isinstance(mime_type, str) else "",
        parents=list(parents) if isinstance(parents, list) else [],
        created_time=_parse_time(data.get("createdTime")),
        modified_time=_parse_time(data.get("modifiedTime")),
        size=_parse_int(data.get("size")),
        quota_bytes_used=_parse_int(data.get("quotaBytesUsed")),
        capabilities=Capabilities.from_dict(data.get("capabilities")),
    )


def _http_error_to_info(exc: Any) -> HttpErrorInfo:
    status_code = getattr(getattr(exc, "resp", None), "status", None)
    reason = getattr(getattr(exc, "resp", None), "reason", None)

    message = None
    details: dict[str, Any] = {}

    content = getattr(exc, "content", None)
    if isinstance(content, (bytes, bytearray)):
        try:
            payload = json.loads(content.decode("utf-8"))
        except ValueError:
            payload = None
        if isinstance(payload, dict):
            err = payload.get("error", {})
            if isinstance(err, dict):
                message = err.get("message") or None
                errors = err.get("errors") or []
                if errors and isinstance(errors, list) and isinstance(errors[0], dict):
                    details["domain"] = errors[0].get("domain")
                    if isinstance(errors[0].get("reason"), str):
                        reason = errors[0]["reason"]

    if not isinstance(status_code, int):
        status_code = 0

    return HttpErrorInfo(
        status_code=status_code,
        reason=reason if isinstance(reason, str) else None,
        message=message,
        details=details or None,
    )
