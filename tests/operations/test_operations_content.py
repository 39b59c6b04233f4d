import os
import tempfile
import unittest
from pathlib import Path
from unittest.mock import patch

from fake_drive import FakeDrive, backend_failure

from gdrivefs.cache import ListingCache, MetadataCache
from gdrivefs.enumerator import FolderEnumerator
from gdrivefs.errors import BackendError, LocalFileError, NotFoundError
from gdrivefs.operations import ContentIO
from gdrivefs.resolver import ObjectResolver

SHEET = "application/vnd.google-apps.spreadsheet"
XLSX = "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet"


class _Harness:
    def __init__(self, fake: FakeDrive, temp_dir=None) -> None:
        self.fake = fake
        self.metadata = MetadataCache()
        self.listing = ListingCache()
        self.resolver = ObjectResolver(fake, self.metadata)
        self.enumerator = FolderEnumerator(fake, self.metadata, self.listing)
        self.content = ContentIO(
            fake, self.resolver, self.metadata, self.listing, temp_dir=temp_dir
        )


def _tree() -> FakeDrive:
    fake = FakeDrive()
    fake.add("A", "a.txt", content=b"hello", size=5)
    fake.add("F1", "Budget", SHEET)
    fake.add("R", "readonly.txt", capabilities={"canDownload": True}, content=b"ro")
    fake.add_folder("S", "S")
    return fake


class TestRead(unittest.TestCase):
    def test_read_native(self) -> None:
        self.assertEqual(_Harness(_tree()).content.read("A"), b"hello")

    def test_read_export_uses_export_mime_type(self) -> None:
        h = _Harness(_tree())
        data = h.content.read("F1.xlsx")

        self.assertIn(("export", "F1", XLSX), h.fake.calls)
        self.assertEqual(data, f"export:F1:{XLSX}".encode("utf-8"))

    def test_read_folder_or_unknown(self) -> None:
        h = _Harness(_tree())
        for identifier in ("S", "F1.pdf", "missing"):
            with self.subTest(identifier=identifier):
                with self.assertRaises(NotFoundError):
                    h.content.read(identifier)


class TestWrite(unittest.TestCase):
    def test_write_updates_content_and_caches(self) -> None:
        h = _Harness(_tree())
        h.enumerator.list_records("root", sort="size")
        self.assertIn("A", h.metadata)

        self.assertEqual(h.content.write("A", b"new content"), 11)

        self.assertEqual(h.fake.contents["A"], b"new content")
        self.assertNotIn("A", h.metadata)
        self.assertEqual(len(h.listing), 0)
        self.assertEqual(h.resolver.resolve("A").size, 11)

    def test_write_is_noop_when_not_allowed(self) -> None:
        h = _Harness(_tree())
        self.assertEqual(h.content.write("F1.xlsx", b"x"), 0)
        self.assertEqual(h.content.write("R", b"x"), 0)
        self.assertEqual(h.content.write("A", b""), 0)
        self.assertEqual(h.fake.count("update"), 0)

    def test_write_failure(self) -> None:
        h = _Harness(_tree())
        h.fake.fail_on["update"] = backend_failure()
        with self.assertRaises(BackendError):
            h.content.write("A", b"x")

    def test_replace_from_local_file(self) -> None:
        h = _Harness(_tree())
        with tempfile.TemporaryDirectory() as tmp:
            src = Path(tmp) / "src.txt"
            src.write_bytes(b"replaced")
            self.assertTrue(h.content.replace("A", str(src)))
        self.assertEqual(h.fake.contents["A"], b"replaced")

    def test_replace_missing_local_file(self) -> None:
        h = _Harness(_tree())
        with self.assertRaises(LocalFileError):
            h.content.replace("A", os.path.join(tempfile.gettempdir(), "gdrivefs-missing-file"))


class TestMaterialize(unittest.TestCase):
    def test_materialize_keeps_extension_and_cleanup_removes(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            h = _Harness(_tree(), temp_dir=tmp)

            export_path = h.content.materialize("F1.xlsx")
            native_path = h.content.materialize("A")

            self.assertTrue(export_path.endswith(".xlsx"))
            self.assertTrue(native_path.endswith(".txt"))
            self.assertTrue(os.path.basename(native_path).startswith("gdrivefs-tempfile-"))
            self.assertEqual(Path(native_path).read_bytes(), b"hello")
            self.assertEqual(sorted(h.content.staged_paths), sorted([export_path, native_path]))

            h.content.cleanup()

            self.assertFalse(os.path.exists(export_path))
            self.assertFalse(os.path.exists(native_path))
            self.assertEqual(h.content.staged_paths, [])

    def test_failed_staging_leaves_no_file_behind(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            h = _Harness(_tree(), temp_dir=tmp)

            with patch("gdrivefs.operations.content.os.fdopen", side_effect=OSError("disk full")):
                with self.assertRaises(LocalFileError):
                    h.content.materialize("A")

            self.assertEqual(os.listdir(tmp), [])
            self.assertEqual(h.content.staged_paths, [])

    def test_materialize_unwritable_dir(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            h = _Harness(_tree(), temp_dir=os.path.join(tmp, "does-not-exist"))
            with self.assertRaises(LocalFileError):
                h.content.materialize("A")


if __name__ == "__main__":
    unittest.main()
