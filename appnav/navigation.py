"""Navigation state: which app folder and file kind the host is looking at.

The host reports events explicitly (active document changed, info surface
active, folder renamed) and receives effects through a
:class:`NavigationHost` callback bundle. Every transition republishes
:class:`ContextFlags`. Filesystem and decode failures degrade to the idle
state; no method here raises for a broken document.
"""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass
from enum import Enum
import logging
import os
from pathlib import Path
import re
from urllib.parse import unquote, urlsplit

from .address import address_label, decode_address, encode_address, is_address, last_segment
from .app_files import DEFAULT_FILE_TABLE, AppFileTable, ResolvedFile
from .errors import DecodeError, FilesystemError, NoEditableFileError
from .fs import write_text_file
from .identity import AppFolder, classify, is_app_folder
from .kinds import INFO_KIND, FileKind

logger = logging.getLogger(__name__)

MESSAGE_INFO = "info"
MESSAGE_WARNING = "warning"
MESSAGE_ERROR = "error"

_URI_SCHEME_RE = re.compile(r"^([A-Za-z][A-Za-z0-9+.-]+):")

Document = str | os.PathLike[str] | None


class CycleDirection(str, Enum):
    NEXT = "next"
    PREVIOUS = "previous"


@dataclass(frozen=True)
class NavigationContext:
    """Snapshot of the navigation state; idle when ``active_folder`` is ``None``."""

    active_folder: AppFolder | None = None
    active_kind: FileKind | None = None
    available_kinds: tuple[FileKind, ...] = ()

    @property
    def is_active(self) -> bool:
        return self.active_folder is not None


@dataclass(frozen=True)
class ContextFlags:
    """Flags published to host menus and status indicators."""

    is_app_folder: bool = False
    active_kind: str = ""
    active_category: str = ""
    status_text: str = ""

    @classmethod
    def from_context(cls, context: NavigationContext) -> ContextFlags:
        folder = context.active_folder
        if folder is None:
            return cls()
        return cls(
            is_app_folder=True,
            active_kind=context.active_kind.value if context.active_kind is not None else "",
            active_category=folder.display_category,
            status_text=f"App: {folder.title}",
        )


def _ignore(*_args: object) -> None:
    return None


@dataclass(frozen=True)
class NavigationHost:
    """Host-side effects requested by :class:`NavigationState`."""

    open_document: Callable[[str, str | None], None]
    open_info: Callable[[Path], None] = _ignore
    publish: Callable[[ContextFlags], None] = _ignore
    show_message: Callable[[str, str], None] = _ignore


def document_real_path(document: Document) -> Path | None:
    """Return the real path behind ``document`` or ``None`` when it has none.

    Accepts addresses, ``file://`` URIs and plain paths. Other URI schemes and
    undecodable addresses yield ``None``.
    """
    if document is None:
        return None
    if is_address(document):
        try:
            return Path(decode_address(document).real_path)
        except DecodeError as exc:
            logger.debug("cannot resolve document: %s", exc)
            return None
    text = os.fspath(document)
    if not text:
        return None
    scheme = _URI_SCHEME_RE.match(text)
    if scheme is not None and isinstance(document, str):
        if scheme.group(1).lower() != "file":
            return None
        text = unquote(urlsplit(text).path)
        if not text:
            return None
    return Path(text)


class NavigationState:
    """Single-writer state machine over ``Idle`` and ``Active(folder, kind)``."""

    def __init__(self, host: NavigationHost, file_table: AppFileTable = DEFAULT_FILE_TABLE) -> None:
        self.host = host
        self.file_table = file_table
        self.registry = file_table.registry
        self.context = NavigationContext()
        self.flags = ContextFlags()
        self.document: Document = None

    @property
    def is_active(self) -> bool:
        return self.context.is_active

    # transitions

    def _publish(self) -> None:
        self.flags = ContextFlags.from_context(self.context)
        self.host.publish(self.flags)

    def _go_idle(self) -> NavigationContext:
        self.context = NavigationContext()
        self._publish()
        return self.context

    def _activate(self, folder: AppFolder, kind: FileKind | None) -> NavigationContext:
        self.context = NavigationContext(folder, kind, self.available_kinds(folder))
        self._publish()
        return self.context

    def reset(self) -> NavigationContext:
        """Forget the active document and go idle."""
        self.document = None
        return self._go_idle()

    def on_active_document_changed(self, document: Document) -> NavigationContext:
        """Re-derive the navigation context from the host's active document."""
        self.document = document
        real_path = document_real_path(document)
        if real_path is None:
            return self._go_idle()
        directory = real_path.parent
        if not is_app_folder(directory, self.registry):
            return self._go_idle()
        return self._activate(classify(directory), self.detect_kind(document))

    def on_info_surface_active(self, folder_path: str | os.PathLike[str]) -> NavigationContext:
        """The info surface for ``folder_path`` became the active view."""
        self.document = None
        if not is_app_folder(folder_path, self.registry):
            return self._go_idle()
        return self._activate(classify(folder_path), INFO_KIND)

    def detect_kind(self, document: Document = None) -> FileKind | None:
        """Infer the file kind of ``document`` (defaults to the active document).

        Tries the address label parameter, then the real path's basename, then
        the address's last raw path segment.
        """
        if document is None:
            document = self.document
        if document is None:
            return None

        if is_address(document):
            label = address_label(document)
            if label:
                kind = self.file_table.kind_from_address_label(label)
                if kind is not None:
                    return kind

        real_path = document_real_path(document)
        if real_path is not None:
            kind = self.file_table.kind_from_file_name(real_path.name)
            if kind is not None:
                return kind

        if is_address(document):
            return self.file_table.kind_from_address_label(last_segment(document))
        return None

    # cycle set

    def available_kinds(self, folder: AppFolder) -> tuple[FileKind, ...]:
        """Presentation kinds of ``folder`` whose files exist right now."""
        try:
            resolved = self.file_table.resolve(folder.path)
        except OSError as exc:
            logger.warning("cannot resolve files in %s: %s", folder.path, exc)
            return ()
        return tuple(
            kind
            for kind in self.registry.presentation_kinds(folder.category)
            if kind in resolved and resolved[kind].exists
        )

    def cycle(self, direction: CycleDirection | str = CycleDirection.NEXT) -> FileKind | None:
        """Switch to the next/previous existing sibling kind.

        No-op (returns ``None``) while idle, with fewer than two available
        kinds, or when the active kind is not part of the cycle set.
        """
        direction = CycleDirection(direction)
        folder = self.context.active_folder
        if folder is None:
            return None
        available = self.available_kinds(folder)
        current = self.context.active_kind
        if len(available) < 2 or current not in available:
            return None
        step = -1 if direction is CycleDirection.PREVIOUS else 1
        target = available[(available.index(current) + step) % len(available)]
        self.switch_to(target)
        return target

    # host requests

    def address_for(self, folder: AppFolder, resolved: ResolvedFile) -> str:
        return encode_address(resolved.full_path, folder.display_category, folder.title, resolved.label)

    def _open_resolved(self, folder: AppFolder, resolved: ResolvedFile) -> str:
        address = self.address_for(folder, resolved)
        self.host.open_document(address, resolved.language_hint)
        self.on_active_document_changed(address)
        return address

    def switch_to(self, kind: FileKind | str) -> str | None:
        """Open ``kind`` of the active folder, creating an empty file if missing.

        Returns the opened address, or ``None`` for the info kind and on failure.
        """
        kind = FileKind(kind)
        folder = self.context.active_folder
        if folder is None:
            return None
        if kind is INFO_KIND:
            self.host.open_info(folder.path)
            self.on_info_surface_active(folder.path)
            return None

        resolved = self.file_table.resolve(folder.path).get(kind)
        if resolved is None:
            self.host.show_message(MESSAGE_WARNING, f"Invalid file type: {kind.value}")
            return None
        if not resolved.exists:
            try:
                write_text_file(resolved.full_path, "")
            except FilesystemError as exc:
                self.host.show_message(MESSAGE_ERROR, f"Failed to create {resolved.file_name}: {exc}")
                return None
        return self._open_resolved(folder, resolved)

    def open_app(self, dir_path: str | os.PathLike[str]) -> str | None:
        """Open an app folder on its primary file."""
        folder = classify(dir_path)
        try:
            primary = self.file_table.primary_file(dir_path)
        except NoEditableFileError as exc:
            self.host.show_message(MESSAGE_ERROR, str(exc))
            self.document = None
            if folder.is_recognized:
                self._activate(folder, None)
            else:
                self._go_idle()
            return None
        return self._open_resolved(folder, primary)

    def on_folder_renamed(
        self,
        old_path: str | os.PathLike[str],
        new_path: str | os.PathLike[str],
    ) -> str | None:
        """Re-point the active document after its app folder was renamed.

        Returns the re-encoded document (address or path string) the host
        should reopen, or ``None`` when the active document was elsewhere.
        """
        old_root = Path(old_path)
        new_root = Path(new_path)
        document = self.document

        if document is None:
            folder = self.context.active_folder
            if folder is not None and folder.path == old_root:
                self.on_info_surface_active(new_root)
            return None

        real_path = document_real_path(document)
        if real_path is None:
            return None
        try:
            relative = real_path.relative_to(old_root)
        except ValueError:
            return None

        moved = new_root / relative
        if is_address(document):
            kind = self.detect_kind(document)
            if kind is not None:
                kind_label = self.registry.descriptor(kind).label
            else:
                kind_label = decode_address(document).kind_label
            new_folder = classify(moved.parent)
            reopened = encode_address(moved, new_folder.display_category, new_folder.title, kind_label)
        else:
            reopened = str(moved)
        self.on_active_document_changed(reopened)
        return reopened


__all__ = [
    "CycleDirection",
    "ContextFlags",
    "Document",
    "MESSAGE_ERROR",
    "MESSAGE_INFO",
    "MESSAGE_WARNING",
    "NavigationContext",
    "NavigationHost",
    "NavigationState",
    "document_real_path",
]
