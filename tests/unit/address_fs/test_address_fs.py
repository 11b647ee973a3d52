"""Tests for the read/write-through document provider."""

from __future__ import annotations

import tempfile
import unittest
from pathlib import Path

from appnav.address import encode_address
from appnav.address_fs import AddressFileSystem


class AddressFileSystemTests(unittest.TestCase):
    def setUp(self) -> None:
        tmp = tempfile.TemporaryDirectory()
        self.addCleanup(tmp.cleanup)
        self.folder = Path(tmp.name) / "page.home"
        self.folder.mkdir()
        self.view = self.folder / "view.pug"
        self.view.write_bytes(b"div hello")
        self.address = encode_address(self.view, "page", "home", "UI")
        self.provider = AddressFileSystem()

    def test_read_and_stat_go_to_real_file(self) -> None:
        self.assertEqual(self.provider.read_file(self.address), b"div hello")
        stat = self.provider.stat(self.address)
        self.assertTrue(stat.is_file)
        self.assertEqual(stat.size, len(b"div hello"))
        self.assertEqual(stat.mtime_ns, self.view.stat().st_mtime_ns)
        self.assertEqual(stat.language, "jade")

    def test_stat_names_language_of_files_outside_kind_table(self) -> None:
        settings = self.folder / "settings.yaml"
        settings.write_text("key: value\n", encoding="utf-8")
        address = encode_address(settings, "page", "home", "SETTINGS")
        self.assertEqual(self.provider.stat(address).language, "yaml")

    def test_write_goes_through_and_notifies(self) -> None:
        changed: list[str] = []
        unsubscribe = self.provider.on_did_change(changed.append)

        self.provider.write_file(self.address, b"span bye")
        self.assertEqual(self.view.read_bytes(), b"span bye")
        self.assertEqual(changed, [self.address])

        unsubscribe()
        self.provider.write_file(self.address, b"p")
        self.assertEqual(changed, [self.address])

    def test_missing_file_is_not_found(self) -> None:
        missing = encode_address(self.folder / "view.ts", "page", "home", "COMPONENT")
        with self.assertRaises(FileNotFoundError):
            self.provider.read_file(missing)
        with self.assertRaises(FileNotFoundError):
            self.provider.stat(missing)

    def test_undecodable_address_is_not_found(self) -> None:
        with self.assertRaises(FileNotFoundError):
            self.provider.read_file("appnav://page/home")
        with self.assertRaises(PermissionError):
            self.provider.write_file("appnav://page/home", b"x")

    def test_write_into_missing_directory_is_refused(self) -> None:
        address = encode_address(self.folder / "gone" / "view.ts", "page", "home", "COMPONENT")
        with self.assertRaises(PermissionError):
            self.provider.write_file(address, b"x")

    def test_structural_operations_are_refused(self) -> None:
        self.assertEqual(self.provider.read_directory(self.address), [])
        with self.assertRaises(PermissionError):
            self.provider.create_directory(self.address)
        with self.assertRaises(PermissionError):
            self.provider.delete(self.address)
        with self.assertRaises(PermissionError):
            self.provider.rename(self.address, self.address)
        self.assertTrue(self.view.exists())


if __name__ == "__main__":
    unittest.main()
