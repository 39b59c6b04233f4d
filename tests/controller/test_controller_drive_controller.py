import json
import unittest
from datetime import datetime, timezone
from unittest.mock import Mock

from gdrivefs.controller.drive_controller import (
    GoogleDriveController,
    _file_dict_to_record,
)
from gdrivefs.controller.fields import FILE_FIELDS, LIST_FIELDS
from gdrivefs.errors import (
    AuthError,
    BackendError,
    InvalidIdentifierError,
    NetworkError,
    NotFoundError,
)


def _http_error(status: int, reason: str, payload=None):
    from googleapiclient.errors import HttpError

    resp = Mock()
    resp.status = status
    resp.reason = reason
    content = json.dumps(payload or {}).encode("utf-8")
    return HttpError(resp=resp, content=content)


class TestDriveControllerHelpers(unittest.TestCase):
    def test_file_dict_to_record_parses_fields(self) -> None:
        dt = datetime(2025, 1, 1, 0, 0, 0, tzinfo=timezone.utc)
        data = {
            "id": "F1",
            "name": "n",
            "mimeType": "text/plain",
            "parents": ["P1"],
            "modifiedTime": "2025-01-01T00:00:00.000Z",
            "createdTime": "2025-01-01T00:00:00Z",
            "size": "123",
            "quotaBytesUsed": "456",
            "capabilities": {"canEdit": True, "canDownload": True},
        }
        rec = _file_dict_to_record(data)
        self.assertEqual(rec.identifier, "F1")
        self.assertEqual(rec.file_id, "F1")
        self.assertEqual(rec.parents, ["P1"])
        self.assertEqual(rec.size, 123)
        self.assertEqual(rec.quota_bytes_used, 456)
        self.assertEqual(rec.modified_time, dt)
        self.assertEqual(rec.created_time, dt)
        self.assertTrue(rec.capabilities.can_edit)
        self.assertFalse(rec.capabilities.can_rename)
        self.assertIsNone(rec.original_mime_type)

    def test_file_dict_without_size(self) -> None:
        rec = _file_dict_to_record({"id": "D1", "name": "d", "mimeType": "application/vnd.google-apps.folder"})
        self.assertIsNone(rec.size)
        self.assertIsNone(rec.modified_time)
        self.assertTrue(rec.is_folder)

    def test_file_dict_without_id(self) -> None:
        with self.assertRaises(BackendError):
            _file_dict_to_record({"name": "n"})

    def test_dotted_backend_id_is_rejected(self) -> None:
        with self.assertRaises(InvalidIdentifierError):
            _file_dict_to_record({"id": "F1.pdf", "name": "n", "mimeType": "text/plain"})

    def test_field_masks_request_capabilities(self) -> None:
        self.assertIn("capabilities/canEdit", FILE_FIELDS)
        self.assertIn("quotaBytesUsed", FILE_FIELDS)
        self.assertTrue(LIST_FIELDS.startswith("nextPageToken,files("))


class TestDriveControllerMocked(unittest.TestCase):
    def _mock_service(self):
        service = Mock()
        files_resource = Mock()
        request = Mock()
        service.files.return_value = files_resource
        return service, files_resource, request

    def test_list_page_kwargs_and_token(self) -> None:
        service, files_resource, request = self._mock_service()
        request.execute.return_value = {
            "files": [{"id": "A", "name": "a", "mimeType": "text/plain"}],
            "nextPageToken": "T2",
        }
        files_resource.list.return_value = request
        controller = GoogleDriveController.from_service(service, supports_all_drives=True)

        records, token = controller.list_page(
            "'P1' in parents", page_token="T1", order_by="name", page_size=50
        )

        kwargs = files_resource.list.call_args.kwargs
        self.assertEqual(kwargs["q"], "'P1' in parents")
        self.assertEqual(kwargs["pageToken"], "T1")
        self.assertEqual(kwargs["orderBy"], "name")
        self.assertEqual(kwargs["pageSize"], 50)
        self.assertEqual(kwargs["fields"], LIST_FIELDS)
        self.assertTrue(kwargs.get("supportsAllDrives"))
        self.assertTrue(kwargs.get("includeItemsFromAllDrives"))
        self.assertEqual([r.identifier for r in records], ["A"])
        self.assertEqual(token, "T2")

    def test_list_page_without_all_drives(self) -> None:
        service, files_resource, request = self._mock_service()
        request.execute.return_value = {"files": []}
        files_resource.list.return_value = request
        controller = GoogleDriveController.from_service(service, supports_all_drives=False)

        records, token = controller.list_page("q")

        kwargs = files_resource.list.call_args.kwargs
        self.assertNotIn("supportsAllDrives", kwargs)
        self.assertNotIn("orderBy", kwargs)
        self.assertEqual(records, [])
        self.assertIsNone(token)

    def test_get_maps_http_404_to_not_found(self) -> None:
        service, files_resource, request = self._mock_service()
        files_resource.get.return_value = request
        request.execute.side_effect = _http_error(
            404,
            "Not Found",
            {"error": {"message": "File not found: X.", "errors": [{"reason": "notFound"}]}},
        )
        controller = GoogleDriveController.from_service(service)

        with self.assertRaises(NotFoundError) as cm:
            controller.get("X")
        self.assertEqual(cm.exception.details["status_code"], 404)
        self.assertEqual(cm.exception.details["reason"], "notFound")

    def test_http_401_maps_to_auth_error(self) -> None:
        service, files_resource, request = self._mock_service()
        files_resource.get.return_value = request
        request.execute.side_effect = _http_error(401, "Unauthorized")

        with self.assertRaises(AuthError):
            GoogleDriveController.from_service(service).get("X")

    def test_other_http_errors_are_backend_errors_without_retry(self) -> None:
        service, files_resource, request = self._mock_service()
        files_resource.delete.return_value = request
        request.execute.side_effect = _http_error(503, "Service Unavailable")

        with self.assertRaises(BackendError):
            GoogleDriveController.from_service(service).delete("X")
        self.assertEqual(request.execute.call_count, 1)

    def test_os_error_maps_to_network_error(self) -> None:
        service, files_resource, request = self._mock_service()
        files_resource.get_media.return_value = request
        request.execute.side_effect = ConnectionResetError("reset")

        with self.assertRaises(NetworkError):
            GoogleDriveController.from_service(service).get_media("X")

    def test_create_with_content_attaches_media(self) -> None:
        service, files_resource, request = self._mock_service()
        request.execute.return_value = {"id": "NEW1"}
        files_resource.create.return_value = request
        controller = GoogleDriveController.from_service(service)

        new_id = controller.create(
            {"name": "a.txt", "parents": ["P1"]}, content=b"hello", mime_type="text/plain"
        )

        kwargs = files_resource.create.call_args.kwargs
        self.assertEqual(new_id, "NEW1")
        self.assertEqual(kwargs["body"], {"name": "a.txt", "parents": ["P1"]})
        self.assertEqual(kwargs["media_body"].mimetype(), "text/plain")
        self.assertFalse(kwargs["media_body"].resumable())

    def test_create_without_id_raises(self) -> None:
        service, files_resource, request = self._mock_service()
        request.execute.return_value = {}
        files_resource.create.return_value = request

        with self.assertRaises(BackendError):
            GoogleDriveController.from_service(service).create({"name": "x"})

    def test_export_passes_mime_type(self) -> None:
        service, files_resource, request = self._mock_service()
        request.execute.return_value = b"PK.."
        files_resource.export.return_value = request
        controller = GoogleDriveController.from_service(service)

        data = controller.export("F1", "application/pdf")

        files_resource.export.assert_called_once_with(fileId="F1", mimeType="application/pdf")
        self.assertEqual(data, b"PK..")

    def test_copy_and_generate_id(self) -> None:
        service, files_resource, request = self._mock_service()
        files_resource.copy.return_value = request
        files_resource.generateIds.return_value = request
        request.execute.side_effect = [{"id": "C1"}, {"ids": ["G1"]}]
        controller = GoogleDriveController.from_service(service)

        self.assertEqual(controller.copy("F1", {"name": "n", "parents": ["P2"]}), "C1")
        self.assertEqual(controller.generate_id(), "G1")
        files_resource.generateIds.assert_called_once_with(count=1, space="drive")


if __name__ == "__main__":
    unittest.main()
