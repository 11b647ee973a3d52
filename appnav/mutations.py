"""Identity mutations on app folders: info updates with namespace rename, delete.

Each operation checks for collisions before touching the filesystem and then
relies on single rename/write/delete primitives. Nothing is rolled back:
after a :class:`~appnav.errors.FilesystemError` the caller re-derives state
from what is on disk (a :class:`~appnav.errors.PartialRenameError` says where
the folder ended up).
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
import logging
import os
from pathlib import Path, PurePath

from .errors import FilesystemError, IdentityCollisionError, PartialRenameError
from .fs import (
    read_json_object,
    remove_tree,
    rename_path,
    safe_exists,
    safe_is_file,
    write_json_object,
    write_text_file,
)
from .identity import AppCategory, PREFIX_CATEGORIES, classify
from .kinds import DEFAULT_REGISTRY, INFO_KIND, FileKind

logger = logging.getLogger(__name__)

INFO_FILE_NAME = DEFAULT_REGISTRY.descriptor(INFO_KIND).default_file_name
VIEW_TYPE_FIELD = "viewType"

# "pug" -> "view.pug", "html" -> "view.html"
VIEW_TYPE_FILE_NAMES: dict[str, str] = {
    PurePath(name).suffix.lstrip("."): name
    for name in DEFAULT_REGISTRY.descriptor(FileKind.UI).candidate_file_names
}

# form field -> app.json key
INFO_FIELD_MAP: tuple[tuple[str, str], ...] = (
    ("title", "title"),
    ("namespace", "namespace"),
    ("category", "category"),
    ("ngRouting", "viewuri"),
    ("previewUrl", "preview"),
    ("id", "id"),
    ("route", "route"),
    ("viewuri", "viewuri"),
    ("controller", "controller"),
    ("layout", "layout"),
)


@dataclass(frozen=True)
class InfoUpdate:
    """Outcome of :func:`update_app_info`."""

    path: Path
    previous_path: Path
    info: dict[str, object] = field(default_factory=dict)
    view_file: Path | None = None

    @property
    def renamed(self) -> bool:
        return self.path != self.previous_path


@dataclass(frozen=True)
class ViewTypeChange:
    """Planned UI template switch; ``source`` is ``None`` when no template exists yet."""

    source: str | None
    target: str


def load_app_info(dir_path: str | os.PathLike[str]) -> dict[str, object]:
    """Return the folder's ``app.json`` object, ``{}`` when missing or malformed."""
    return read_json_object(Path(dir_path) / INFO_FILE_NAME)


def renamed_folder_path(dir_path: str | os.PathLike[str], namespace: str) -> Path | None:
    """Return the folder path a namespace change implies, or ``None`` for no rename.

    Only prefix categories other than ``route`` are renamed; their folder name
    is ``<category>.<namespace>``.
    """
    folder = classify(dir_path)
    if folder.category is AppCategory.ROUTE or folder.category.value not in PREFIX_CATEGORIES:
        return None
    if not namespace or namespace == folder.title:
        return None
    return folder.path.parent / f"{folder.category.value}.{namespace}"


def plan_view_type_change(dir_path: str | os.PathLike[str], view_type: str) -> ViewTypeChange | None:
    """Work out how to switch the UI template to ``view_type`` (``"pug"``/``"html"``).

    Returns ``None`` when the folder already uses that type or the type is
    unknown. Raises :class:`IdentityCollisionError` when the target template
    exists next to a different current one.
    """
    target = VIEW_TYPE_FILE_NAMES.get(view_type)
    if target is None:
        logger.warning("ignoring unknown view type %r", view_type)
        return None
    directory = Path(dir_path)
    current = next(
        (name for name in VIEW_TYPE_FILE_NAMES.values() if safe_is_file(directory / name)),
        None,
    )
    if current == target:
        return None
    if safe_exists(directory / target):
        raise IdentityCollisionError(f"View file already exists: {target}")
    return ViewTypeChange(source=current, target=target)


def apply_view_type_change(dir_path: str | os.PathLike[str], change: ViewTypeChange) -> Path:
    """Rename the current template to the target name, or create it empty."""
    directory = Path(dir_path)
    target = directory / change.target
    if change.source is None:
        write_text_file(target, "")
    else:
        rename_path(directory / change.source, target)
    logger.info("switched view template in %s to %s", directory, change.target)
    return target


def update_app_info(dir_path: str | os.PathLike[str], data: Mapping[str, object]) -> InfoUpdate:
    """Apply an info-form payload to an app folder.

    A changed ``namespace`` renames the folder first; a ``viewType`` switches
    the UI template between its candidate filenames. Raises
    :class:`IdentityCollisionError` when a rename target already exists (disk
    untouched), :class:`PartialRenameError` when a write fails after the
    folder was renamed, and :class:`FilesystemError` for other failures.
    """
    original = Path(dir_path)
    info = load_app_info(original)

    namespace = data.get("namespace")
    target = renamed_folder_path(original, namespace) if isinstance(namespace, str) else None
    if target is not None and safe_exists(target):
        raise IdentityCollisionError(f"App already exists: {target.name}")
    view_type = data.get(VIEW_TYPE_FIELD)
    view_change = plan_view_type_change(original, view_type) if isinstance(view_type, str) and view_type else None

    current = original
    if target is not None:
        rename_path(original, target)
        logger.info("renamed app folder %s -> %s", original, target)
        current = target

    for form_key, info_key in INFO_FIELD_MAP:
        if form_key in data and data[form_key] is not None:
            info[info_key] = data[form_key]
    if target is not None:
        info["id"] = target.name

    view_file = None
    try:
        if view_change is not None:
            view_file = apply_view_type_change(current, view_change)
        write_json_object(current / INFO_FILE_NAME, info)
    except FilesystemError as exc:
        if current == original:
            raise
        raise PartialRenameError(str(exc), original, current) from exc
    return InfoUpdate(path=current, previous_path=original, info=info, view_file=view_file)


def delete_app(dir_path: str | os.PathLike[str]) -> None:
    """Delete an app folder and everything below it."""
    path = Path(dir_path)
    remove_tree(path)
    logger.info("deleted app folder %s", path)


__all__ = [
    "INFO_FILE_NAME",
    "InfoUpdate",
    "VIEW_TYPE_FIELD",
    "ViewTypeChange",
    "apply_view_type_change",
    "delete_app",
    "load_app_info",
    "plan_view_type_change",
    "renamed_folder_path",
    "update_app_info",
]
