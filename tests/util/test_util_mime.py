import unittest

from gdrivefs.util.mime import (
    EXPORT_FORMATS,
    FOLDER_MIME,
    export_formats,
    export_mime_type,
    is_exportable,
    is_folder,
)


class TestUtilMime(unittest.TestCase):
    def test_is_folder(self) -> None:
        self.assertTrue(is_folder(FOLDER_MIME))
        self.assertFalse(is_folder("text/plain"))

    def test_is_exportable(self) -> None:
        self.assertTrue(is_exportable("application/vnd.google-apps.document"))
        self.assertTrue(is_exportable("application/vnd.google-apps.spreadsheet"))
        self.assertFalse(is_exportable("application/vnd.google-apps.form"))
        self.assertFalse(is_exportable("application/pdf"))

    def test_export_formats_order(self) -> None:
        self.assertEqual(
            list(export_formats("application/vnd.google-apps.spreadsheet")),
            ["xlsx", "ods"],
        )
        self.assertEqual(export_formats("text/plain"), {})

    def test_export_mime_type(self) -> None:
        self.assertEqual(
            export_mime_type("application/vnd.google-apps.spreadsheet", "xlsx"),
            "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet",
        )
        self.assertIsNone(export_mime_type("application/vnd.google-apps.spreadsheet", "pdf"))
        self.assertIsNone(export_mime_type(None, "pdf"))

    def test_every_table_entry_has_formats(self) -> None:
        for mime_type, formats in EXPORT_FORMATS.items():
            self.assertTrue(mime_type.startswith("application/vnd.google-apps."))
            self.assertTrue(formats)


if __name__ == "__main__":
    unittest.main()
