"""Read/write-through document provider keyed by address.

Addresses never own content: every call decodes the address and goes straight
to the real file. Structural operations (mkdir, delete, rename) are refused;
those belong to the mutation layer.
"""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass
import logging
from pathlib import Path
import stat as stat_module

from .address import decode_address
from .errors import DecodeError
from .kinds import language_for_path

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class DocumentStat:
    """Subset of ``os.stat_result`` hosts need to display a document, plus its language id."""

    is_file: bool
    size: int
    ctime_ns: int
    mtime_ns: int
    language: str | None = None


def _real_path_or_not_found(address: str) -> Path:
    try:
        return Path(decode_address(address).real_path)
    except DecodeError as exc:
        raise FileNotFoundError(f"document not found: {address}") from exc


class AddressFileSystem:
    """Host-facing document provider for address strings."""

    def __init__(self) -> None:
        self._listeners: list[Callable[[str], None]] = []

    def on_did_change(self, listener: Callable[[str], None]) -> Callable[[], None]:
        """Register ``listener`` for written addresses; returns an unsubscribe callable."""
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def stat(self, address: str) -> DocumentStat:
        real_path = _real_path_or_not_found(address)
        try:
            result = real_path.stat()
        except OSError as exc:
            raise FileNotFoundError(f"document not found: {address}") from exc
        return DocumentStat(
            is_file=stat_module.S_ISREG(result.st_mode),
            size=int(result.st_size),
            ctime_ns=int(result.st_ctime_ns),
            mtime_ns=int(result.st_mtime_ns),
            language=language_for_path(real_path),
        )

    def read_file(self, address: str) -> bytes:
        real_path = _real_path_or_not_found(address)
        try:
            return real_path.read_bytes()
        except OSError as exc:
            raise FileNotFoundError(f"document not found: {address}") from exc

    def write_file(self, address: str, content: bytes) -> None:
        try:
            real_path = Path(decode_address(address).real_path)
        except DecodeError as exc:
            raise PermissionError(f"cannot write undecodable address: {address}") from exc
        try:
            real_path.write_bytes(content)
        except OSError as exc:
            logger.warning("write-through failed for %s: %s", real_path, exc)
            raise PermissionError(f"cannot write {real_path}: {exc}") from exc
        for listener in list(self._listeners):
            listener(address)

    def read_directory(self, address: str) -> list[tuple[str, bool]]:
        return []

    def create_directory(self, address: str) -> None:
        raise PermissionError("addresses cannot create directories")

    def delete(self, address: str) -> None:
        raise PermissionError("addresses cannot be deleted")

    def rename(self, old_address: str, new_address: str) -> None:
        raise PermissionError("addresses cannot be renamed")


__all__ = ["AddressFileSystem", "DocumentStat"]
