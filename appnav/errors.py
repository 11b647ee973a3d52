"""
appnav exception hierarchy.

AppNavError (base, Exception)
├── DecodeError(AppNavError, ValueError)               ← address cannot map to a path
├── NoEditableFileError(AppNavError)                   ← app folder has no files at all
├── IdentityCollisionError(AppNavError, FileExistsError) ← rename target path already exists
└── FilesystemError(AppNavError, OSError)              ← rename/delete/write primitive failed
    └── PartialRenameError(FilesystemError)            ← write failed after the folder moved

The builtin bases keep ``except ValueError`` / ``except OSError`` call sites
working for hosts that do not know about this package.
"""

from __future__ import annotations

from pathlib import Path


class AppNavError(Exception):
    """Base exception for all appnav errors."""


class DecodeError(AppNavError, ValueError):
    """Address carries neither a decodable path parameter nor a legacy path segment."""


class NoEditableFileError(AppNavError):
    """Recognized app folder resolves zero existing files."""


class IdentityCollisionError(AppNavError, FileExistsError):
    """Mutation would rename a folder or view file onto an existing path."""


class FilesystemError(AppNavError, OSError):
    """Filesystem primitive failed during a mutation."""


class PartialRenameError(FilesystemError):
    """Folder rename succeeded but a later write in the same update failed.

    ``previous_path`` and ``path`` record where the folder was and where it
    is now, so callers can re-point state at the folder that exists.
    """

    def __init__(self, message: str, previous_path: Path, path: Path) -> None:
        super().__init__(message)
        self.previous_path = previous_path
        self.path = path
