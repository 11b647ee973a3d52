"""Tests for per-directory kind resolution and primary-file selection."""

from __future__ import annotations

import tempfile
import unittest
from pathlib import Path

from appnav.app_files import AppFileTable, resolve
from appnav.errors import NoEditableFileError
from appnav.kinds import FileKind


def _touch(directory: Path, *names: str) -> None:
    directory.mkdir(parents=True, exist_ok=True)
    for name in names:
        (directory / name).write_text("", encoding="utf-8")


class ResolveTests(unittest.TestCase):
    def test_second_candidate_is_picked_when_only_it_exists(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            folder = Path(tmp) / "page.home"
            _touch(folder, "view.html")

            ui = resolve(folder)[FileKind.UI]
            self.assertEqual(ui.file_name, "view.html")
            self.assertTrue(ui.exists)
            self.assertEqual(ui.full_path, folder / "view.html")
            self.assertEqual(ui.language_hint, "html")
            self.assertEqual(ui.label, "UI")

    def test_first_candidate_wins_when_both_exist(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            folder = Path(tmp) / "page.home"
            _touch(folder, "view.pug", "view.html")
            self.assertEqual(resolve(folder)[FileKind.UI].file_name, "view.pug")

    def test_missing_kind_defaults_to_first_candidate(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            folder = Path(tmp) / "component.widget42"
            _touch(folder, "app.json", "view.scss")

            table = resolve(folder)
            self.assertTrue(table[FileKind.CONFIG].exists)
            self.assertTrue(table[FileKind.STYLES].exists)
            self.assertFalse(table[FileKind.UI].exists)
            self.assertEqual(table[FileKind.UI].file_name, "view.pug")
            self.assertEqual(table[FileKind.UI].language_hint, "jade")

    def test_every_kind_is_checked_for_every_category(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            folder = Path(tmp) / "route" / "home"
            _touch(folder, "controller.py", "view.ts")

            table = resolve(folder)
            self.assertEqual(set(table), set(FileKind))
            self.assertEqual(next(iter(table)), FileKind.CONTROLLER)
            self.assertTrue(table[FileKind.COMPONENT].exists)

    def test_missing_directory_yields_nothing_existing(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            table = resolve(Path(tmp) / "page.gone")
            self.assertTrue(all(not resolved.exists for resolved in table.values()))

    def test_directory_named_like_candidate_does_not_count(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            folder = Path(tmp) / "page.home"
            (folder / "view.ts").mkdir(parents=True)
            self.assertFalse(resolve(folder)[FileKind.COMPONENT].exists)


class PrimaryFileTests(unittest.TestCase):
    def setUp(self) -> None:
        self.table = AppFileTable()

    def test_ui_preferred_for_pages(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            folder = Path(tmp) / "page.home"
            _touch(folder, "app.json", "api.py", "view.pug")
            self.assertIs(self.table.primary_file(folder).kind, FileKind.UI)

    def test_controller_preferred_for_routes(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            folder = Path(tmp) / "route" / "login"
            _touch(folder, "app.json", "controller.py", "view.pug")
            self.assertIs(self.table.primary_file(folder).kind, FileKind.CONTROLLER)

    def test_falls_back_to_table_order(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            folder = Path(tmp) / "page.home"
            _touch(folder, "socket.py", "api.py")
            self.assertIs(self.table.primary_file(folder).kind, FileKind.API)

    def test_empty_folder_raises(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            folder = Path(tmp) / "page.empty"
            folder.mkdir()
            with self.assertRaises(NoEditableFileError):
                self.table.primary_file(folder)

    def test_existing_files_in_table_order(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            folder = Path(tmp) / "page.home"
            _touch(folder, "view.scss", "app.json", "view.ts")
            kinds = [resolved.kind for resolved in self.table.existing_files(folder)]
            self.assertEqual(kinds, [FileKind.CONFIG, FileKind.COMPONENT, FileKind.STYLES])

    def test_reverse_lookups_delegate_to_registry(self) -> None:
        self.assertIs(self.table.kind_from_file_name("api.py"), FileKind.API)
        self.assertIs(self.table.kind_from_address_label("x [SOCKET]"), FileKind.SOCKET)


if __name__ == "__main__":
    unittest.main()
