"""Discover app folders in a project for "go to app" style pickers."""

from __future__ import annotations

from dataclasses import dataclass
import os
from pathlib import Path

from .fs import list_subdirectories, safe_is_file
from .mutations import INFO_FILE_NAME, load_app_info

SOURCE_DIRECTORY = "src"
APP_GROUP_DIRECTORIES: tuple[str, ...] = ("app", "page", "component", "widget", "layout")
ROUTE_DIRECTORY = "route"
PORTAL_DIRECTORY = "portal"


@dataclass(frozen=True)
class AppEntry:
    """One discovered app folder with display data read from ``app.json``."""

    title: str
    identifier: str
    group: str
    path: Path
    mode: str


def _string_field(info: dict[str, object], key: str, fallback: str) -> str:
    value = info.get(key)
    return value if isinstance(value, str) and value else fallback


def _scan_group(directory: Path, group: str, entries: list[AppEntry]) -> None:
    for child in list_subdirectories(directory):
        if not safe_is_file(child / INFO_FILE_NAME):
            continue
        info = load_app_info(child)
        entries.append(
            AppEntry(
                title=_string_field(info, "title", child.name),
                identifier=_string_field(info, "id", child.name),
                group=group,
                path=child,
                mode=_string_field(info, "mode", group),
            )
        )


def scan_apps(project_root: str | os.PathLike[str]) -> list[AppEntry]:
    """List every directory carrying ``app.json`` under the project's source tree.

    Scans ``src/<group>`` for the standard groups, ``src/route``, and each
    portal package's ``app`` and ``route`` directories. Unreadable
    directories are skipped.
    """
    source = Path(project_root) / SOURCE_DIRECTORY
    entries: list[AppEntry] = []
    for group in APP_GROUP_DIRECTORIES:
        _scan_group(source / group, group, entries)
    _scan_group(source / ROUTE_DIRECTORY, ROUTE_DIRECTORY, entries)

    for package in list_subdirectories(source / PORTAL_DIRECTORY):
        prefix = f"{PORTAL_DIRECTORY}/{package.name}"
        _scan_group(package / "app", prefix, entries)
        _scan_group(package / ROUTE_DIRECTORY, f"{prefix}/{ROUTE_DIRECTORY}", entries)
    return entries


def match_apps(entries: list[AppEntry], query: str) -> list[AppEntry]:
    """Filter entries whose title, identifier or group contains ``query`` (case-insensitive)."""
    needle = query.strip().casefold()
    if not needle:
        return list(entries)
    return [
        entry
        for entry in entries
        if needle in entry.title.casefold()
        or needle in entry.identifier.casefold()
        or needle in entry.group.casefold()
    ]


__all__ = ["AppEntry", "match_apps", "scan_apps"]
