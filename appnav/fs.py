"""Small filesystem primitives shared by identity, file-table and mutation code.

Read helpers never raise: stat failures mean "does not exist". Write helpers
raise :class:`~appnav.errors.FilesystemError` so mutation boundaries can
surface a message.
"""

from __future__ import annotations

import json
import logging
import shutil
from pathlib import Path

from .errors import FilesystemError

logger = logging.getLogger(__name__)


def safe_exists(path: Path) -> bool:
    """Return whether ``path`` exists, treating stat errors as missing."""
    try:
        return path.exists()
    except OSError:
        return False


def safe_is_dir(path: Path) -> bool:
    """Return whether ``path`` is a directory, treating stat errors as ``False``."""
    try:
        return path.is_dir()
    except OSError:
        return False


def safe_is_file(path: Path) -> bool:
    """Return whether ``path`` is a regular file, treating stat errors as ``False``."""
    try:
        return path.is_file()
    except OSError:
        return False


def list_subdirectories(directory: Path) -> list[Path]:
    """Return sorted child directories, or ``[]`` when ``directory`` cannot be scanned."""
    try:
        children = [child for child in directory.iterdir() if safe_is_dir(child)]
    except OSError as exc:
        logger.debug("cannot scan %s: %s", directory, exc)
        return []
    return sorted(children, key=lambda child: child.name)


def read_json_object(path: Path) -> dict[str, object]:
    """Load a JSON object from ``path``.

    Returns an empty dict when the file is missing, unreadable, malformed, or
    does not decode to a top-level JSON object.
    """
    try:
        data = json.loads(path.read_text(encoding="utf-8"))
    except FileNotFoundError:
        return {}
    except (OSError, ValueError) as exc:
        logger.warning("ignoring unreadable JSON file %s: %s", path, exc)
        return {}
    return data if isinstance(data, dict) else {}


def write_json_object(path: Path, data: dict[str, object]) -> None:
    """Persist ``data`` as four-space indented JSON."""
    try:
        path.write_text(json.dumps(data, indent=4, ensure_ascii=False), encoding="utf-8")
    except (OSError, TypeError, ValueError) as exc:
        raise FilesystemError(f"failed to write {path}: {exc}") from exc


def write_text_file(path: Path, content: str = "") -> None:
    """Write ``content`` to ``path``, creating parent directories as needed."""
    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(content, encoding="utf-8")
    except OSError as exc:
        raise FilesystemError(f"failed to write {path}: {exc}") from exc


def rename_path(source: Path, target: Path) -> None:
    """Rename a file or directory with the platform's atomic rename."""
    try:
        source.rename(target)
    except OSError as exc:
        raise FilesystemError(f"failed to rename {source.name} to {target.name}: {exc}") from exc


def remove_tree(path: Path) -> None:
    """Recursively delete ``path``; a path that is already gone is not an error."""
    try:
        if not path.exists() and not path.is_symlink():
            return
        if path.is_dir() and not path.is_symlink():
            shutil.rmtree(path)
        else:
            path.unlink()
    except OSError as exc:
        raise FilesystemError(f"failed to delete {path.name}: {exc}") from exc


__all__ = [
    "safe_exists",
    "safe_is_dir",
    "safe_is_file",
    "list_subdirectories",
    "read_json_object",
    "write_json_object",
    "write_text_file",
    "rename_path",
    "remove_tree",
]
