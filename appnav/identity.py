"""App-folder identity: category and display title derived from directory names.

``classify`` is a pure string function over a path and its ancestors' names.
Only ``is_app_folder`` touches the filesystem, and then only with single
``stat`` calls.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
import os
from pathlib import Path

from .fs import safe_is_dir, safe_is_file
from .kinds import DEFAULT_REGISTRY, FileKindRegistry


class AppCategory(str, Enum):
    """App folder category; ``UNRECOGNIZED`` marks plain directories."""

    PAGE = "page"
    COMPONENT = "component"
    LAYOUT = "layout"
    ROUTE = "route"
    PORTAL_APP = "portal-app"
    UNRECOGNIZED = "unrecognized"


PREFIX_CATEGORIES: frozenset[str] = frozenset(
    {
        AppCategory.PAGE.value,
        AppCategory.COMPONENT.value,
        AppCategory.LAYOUT.value,
        AppCategory.ROUTE.value,
    }
)
ROUTE_DIRECTORY_NAME = "route"
PORTAL_DIRECTORY_NAME = "portal"
PORTAL_APP_DIRECTORY_NAME = "app"


@dataclass(frozen=True)
class AppFolder:
    """Identity of one directory, recomputed on demand and never persisted."""

    path: Path
    category: AppCategory
    title: str
    display_category: str

    @property
    def is_recognized(self) -> bool:
        return self.category is not AppCategory.UNRECOGNIZED

    @property
    def identifier(self) -> str:
        """Folder-name form ``<category>.<title>`` for prefix categories."""
        if self.category.value in PREFIX_CATEGORIES:
            return f"{self.category.value}.{self.title}"
        return self.title


def _basename(path: str) -> str:
    return os.path.basename(path.rstrip("/\\"))


def _parent(path: str) -> str:
    return os.path.dirname(path.rstrip("/\\"))


def _portal_package_name(dir_path: str) -> str | None:
    """Return ``<pkg>`` for ``.../portal/<pkg>/app/<name>``, else ``None``."""
    parent = _parent(dir_path)
    if _basename(parent) != PORTAL_APP_DIRECTORY_NAME:
        return None
    package = _parent(parent)
    if _basename(_parent(package)) != PORTAL_DIRECTORY_NAME:
        return None
    package_name = _basename(package)
    return package_name or None


def classify(dir_path: str | os.PathLike[str]) -> AppFolder:
    """Classify a directory into an :class:`AppFolder` from names alone.

    Rules, first match wins:

    1. ``<category>.<title>`` where ``<category>`` is a prefix category.
    2. ``.../portal/<pkg>/app/<title>`` is a portal app of package ``<pkg>``.
    3. ``.../route/<title>`` is a flat route.
    4. ``route.<title>`` is a prefixed route.
    5. Anything else is unrecognized, titled by its basename.
    """
    raw = os.fspath(dir_path)
    folder_name = _basename(raw)
    segments = folder_name.split(".")
    path = Path(raw)

    if len(segments) >= 2 and segments[0] in PREFIX_CATEGORIES:
        category = AppCategory(segments[0])
        return AppFolder(path, category, ".".join(segments[1:]), category.value)

    package_name = _portal_package_name(raw)
    if package_name is not None:
        return AppFolder(path, AppCategory.PORTAL_APP, folder_name, package_name)

    if _basename(_parent(raw)) == ROUTE_DIRECTORY_NAME:
        return AppFolder(path, AppCategory.ROUTE, folder_name, AppCategory.ROUTE.value)

    if segments[0] == ROUTE_DIRECTORY_NAME:
        return AppFolder(path, AppCategory.ROUTE, ".".join(segments[1:]), AppCategory.ROUTE.value)

    return AppFolder(path, AppCategory.UNRECOGNIZED, folder_name, AppCategory.UNRECOGNIZED.value)


def is_app_folder(
    dir_path: str | os.PathLike[str] | None,
    registry: FileKindRegistry = DEFAULT_REGISTRY,
) -> bool:
    """Return whether ``dir_path`` exists and holds at least one indicator file."""
    if not dir_path:
        return False
    directory = Path(dir_path)
    if not safe_is_dir(directory):
        return False
    return any(safe_is_file(directory / name) for name in sorted(registry.indicator_file_names()))


__all__ = [
    "AppCategory",
    "AppFolder",
    "PREFIX_CATEGORIES",
    "classify",
    "is_app_folder",
]
