"""End-to-end flows across identity, resolution, navigation and the info session."""

from __future__ import annotations

import tempfile
import unittest
from pathlib import Path
from unittest import mock

from appnav.address import decode_address
from appnav.address_fs import AddressFileSystem
from appnav.app_files import resolve
from appnav.identity import AppCategory, classify
from appnav.kinds import FileKind
from appnav.navigation import CycleDirection, NavigationHost, NavigationState
from appnav.session import SessionManager


class AppNavigationFlowTests(unittest.TestCase):
    def setUp(self) -> None:
        tmp = tempfile.TemporaryDirectory()
        self.addCleanup(tmp.cleanup)
        self.root = Path(tmp.name)
        patcher = mock.patch("appnav.config.CONFIG_PATH", self.root / "appnav.json")
        patcher.start()
        self.addCleanup(patcher.stop)

        self.opened: list[str] = []
        self.navigation = NavigationState(
            NavigationHost(open_document=lambda address, _language: self.opened.append(address))
        )

    def test_widget_with_only_config_and_styles(self) -> None:
        folder = self.root / "component.widget42"
        folder.mkdir()
        (folder / "app.json").write_text("{}", encoding="utf-8")
        (folder / "view.scss").write_text(".w {}", encoding="utf-8")

        identity = classify(folder)
        self.assertIs(identity.category, AppCategory.COMPONENT)
        self.assertEqual(identity.title, "widget42")

        table = resolve(folder)
        self.assertTrue(table[FileKind.CONFIG].exists)
        self.assertFalse(table[FileKind.UI].exists)
        self.assertEqual(table[FileKind.UI].file_name, "view.pug")
        self.assertTrue(table[FileKind.STYLES].exists)

        context = self.navigation.on_active_document_changed(folder / "view.scss")
        self.assertIs(context.active_kind, FileKind.STYLES)
        self.assertEqual(self.navigation.flags.active_kind, "styles")

        self.assertIsNone(self.navigation.cycle(CycleDirection.NEXT))
        self.assertIs(self.navigation.context, context)
        self.assertEqual(self.opened, [])

    def test_open_edit_rename_and_reopen(self) -> None:
        folder = self.root / "page.home"
        folder.mkdir()
        (folder / "app.json").write_text('{"title": "Home"}', encoding="utf-8")
        (folder / "view.pug").write_text("div", encoding="utf-8")

        address = self.navigation.open_app(folder)
        provider = AddressFileSystem()
        provider.write_file(address, b"section")
        self.assertEqual((folder / "view.pug").read_bytes(), b"section")

        self.assertEqual(self.navigation.switch_to(FileKind.STYLES), self.opened[-1])
        self.assertTrue((folder / "view.scss").is_file())
        self.assertEqual(self.navigation.cycle(), FileKind.UI)

        manager = SessionManager(navigation=self.navigation)
        manager.open(folder)
        self.assertIs(self.navigation.context.active_kind, FileKind.CONFIG)
        renamed = manager.submit_update({"namespace": "landing"})

        self.assertEqual(renamed, self.root / "page.landing")
        self.assertIsNone(manager.session)
        self.assertEqual(self.navigation.context.active_folder.title, "landing")

        reopened = self.navigation.open_app(renamed)
        self.assertEqual(decode_address(reopened).real_path, str(renamed / "view.pug"))
        self.assertEqual(provider.read_file(reopened), b"section")


if __name__ == "__main__":
    unittest.main()
