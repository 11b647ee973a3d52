"""File-kind registry: abstract app file roles mapped onto candidate filenames.

The table is fixed at import time and every lookup here is pure. Pygments is
imported lazily on first use and names the language of files the table does
not cover.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass
from enum import Enum
from pathlib import PurePath
import re


class FileKind(str, Enum):
    """Abstract file role inside an app folder."""

    CONFIG = "config"
    CONTROLLER = "controller"
    UI = "ui"
    COMPONENT = "component"
    STYLES = "styles"
    API = "api"
    SOCKET = "socket"


INFO_KIND = FileKind.CONFIG


@dataclass(frozen=True)
class FileKindDescriptor:
    """One registry row: candidate filenames in preference order plus display data."""

    kind: FileKind
    candidate_file_names: tuple[str, ...]
    label: str
    language_hint: str | Mapping[str, str]

    @property
    def default_file_name(self) -> str:
        return self.candidate_file_names[0]

    def language_for(self, file_name: str) -> str | None:
        """Resolve the language hint for one concrete candidate filename."""
        if isinstance(self.language_hint, str):
            return self.language_hint
        return self.language_hint.get(PurePath(file_name).suffix.lower())


FILE_KIND_DESCRIPTORS: tuple[FileKindDescriptor, ...] = (
    FileKindDescriptor(FileKind.CONFIG, ("app.json",), "INFO", "json"),
    FileKindDescriptor(FileKind.CONTROLLER, ("controller.py",), "CONTROLLER", "python"),
    FileKindDescriptor(
        FileKind.UI,
        ("view.pug", "view.html"),
        "UI",
        {".pug": "jade", ".html": "html"},
    ),
    FileKindDescriptor(FileKind.COMPONENT, ("view.ts",), "COMPONENT", "typescript"),
    FileKindDescriptor(FileKind.STYLES, ("view.scss",), "SCSS", "scss"),
    FileKindDescriptor(FileKind.API, ("api.py",), "API", "python"),
    FileKindDescriptor(FileKind.SOCKET, ("socket.py",), "SOCKET", "python"),
)

ROUTE_PRESENTATION_KINDS: tuple[FileKind, ...] = (FileKind.CONTROLLER,)
DEFAULT_PRESENTATION_KINDS: tuple[FileKind, ...] = (
    FileKind.UI,
    FileKind.COMPONENT,
    FileKind.STYLES,
    FileKind.API,
    FileKind.SOCKET,
)

EXTENSION_LANGUAGE_MAP: dict[str, str] = {
    ".pug": "jade",
    ".html": "html",
    ".ts": "typescript",
    ".scss": "scss",
    ".py": "python",
    ".json": "json",
}

_BRACKETED_LABEL_RE = re.compile(r"\[([^\[\]]+)\]\s*$")

_PYGMENTS_READY = False
_PYGMENTS_AVAILABLE = False
_PYGMENTS_GET_LEXER_FOR_FILENAME = None


class FileKindRegistry:
    """Lookup surface over a fixed descriptor table."""

    def __init__(self, descriptors: tuple[FileKindDescriptor, ...] = FILE_KIND_DESCRIPTORS) -> None:
        labels = [descriptor.label for descriptor in descriptors]
        if len(set(labels)) != len(labels):
            raise ValueError(f"file kind labels must be unique: {labels}")
        self._descriptors = descriptors
        self._by_kind = {descriptor.kind: descriptor for descriptor in descriptors}
        self._by_label = {descriptor.label: descriptor.kind for descriptor in descriptors}

    @property
    def descriptors(self) -> tuple[FileKindDescriptor, ...]:
        return self._descriptors

    def descriptor(self, kind: FileKind) -> FileKindDescriptor:
        return self._by_kind[kind]

    def presentation_kinds(self, category: str) -> tuple[FileKind, ...]:
        """Return cycle-eligible kinds for ``category`` in presentation order.

        The info kind is never part of the presentation order; route folders
        only present their controller.
        """
        value = category.value if isinstance(category, Enum) else category
        order = ROUTE_PRESENTATION_KINDS if value == "route" else DEFAULT_PRESENTATION_KINDS
        return tuple(kind for kind in order if kind in self._by_kind)

    def descriptors_of(self, category: str) -> tuple[FileKindDescriptor, ...]:
        """Return every descriptor, presentation kinds first, the rest in table order."""
        leading = [self._by_kind[kind] for kind in self.presentation_kinds(category)]
        remaining = [descriptor for descriptor in self._descriptors if descriptor not in leading]
        return tuple(leading + remaining)

    def indicator_file_names(self) -> frozenset[str]:
        """Union of first candidates; any of them marks a directory as an app folder."""
        return frozenset(descriptor.default_file_name for descriptor in self._descriptors)

    def kind_for_label(self, label: str) -> FileKind | None:
        return self._by_label.get(label)

    def kind_for_file_name(self, name: str) -> FileKind | None:
        for descriptor in self._descriptors:
            if name in descriptor.candidate_file_names:
                return descriptor.kind
        return None

    def kind_from_address_label(self, text: str) -> FileKind | None:
        """Map ``"title [LABEL]"`` or a bare ``"LABEL"`` back to its kind.

        The last bracketed group wins so titles containing brackets still
        resolve to the trailing kind label.
        """
        if not text:
            return None
        match = _BRACKETED_LABEL_RE.search(text)
        if match is not None:
            return self.kind_for_label(match.group(1).strip())
        return self.kind_for_label(text.strip())


DEFAULT_REGISTRY = FileKindRegistry()


def _ensure_pygments_loaded() -> bool:
    """Lazily import the Pygments lexer lookup.

    Returns whether Pygments is available in the runtime environment.
    """
    global _PYGMENTS_READY
    global _PYGMENTS_AVAILABLE
    global _PYGMENTS_GET_LEXER_FOR_FILENAME

    if _PYGMENTS_READY:
        return _PYGMENTS_AVAILABLE

    _PYGMENTS_READY = True
    try:
        from pygments.lexers import get_lexer_for_filename
    except ImportError:
        _PYGMENTS_AVAILABLE = False
        return False

    _PYGMENTS_GET_LEXER_FOR_FILENAME = get_lexer_for_filename
    _PYGMENTS_AVAILABLE = True
    return True


def pygments_language_alias(file_name: str) -> str | None:
    """Return the first Pygments lexer alias for ``file_name``, or ``None``."""
    if not _ensure_pygments_loaded():
        return None
    try:
        assert _PYGMENTS_GET_LEXER_FOR_FILENAME is not None
        lexer = _PYGMENTS_GET_LEXER_FOR_FILENAME(file_name)
    except Exception:
        return None
    aliases = getattr(lexer, "aliases", None) or ()
    return aliases[0] if aliases else None


def language_for_path(path: str | PurePath) -> str | None:
    """Language id for a file path: extension table first, then Pygments."""
    name = PurePath(path).name
    language = EXTENSION_LANGUAGE_MAP.get(PurePath(name).suffix.lower())
    if language is not None:
        return language
    if not name:
        return None
    return pygments_language_alias(name)


__all__ = [
    "FileKind",
    "INFO_KIND",
    "FileKindDescriptor",
    "FileKindRegistry",
    "FILE_KIND_DESCRIPTORS",
    "DEFAULT_REGISTRY",
    "EXTENSION_LANGUAGE_MAP",
    "language_for_path",
    "pygments_language_alias",
]
