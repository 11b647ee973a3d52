"""Public package surface for appnav.

Addresses the files of structured "app folders" as individual documents and
tracks which app and file kind the host is looking at. Most implementation
lives in submodules under ``appnav``.
"""

from __future__ import annotations

from .address import VirtualAddress, decode_address, encode_address, real_path_of
from .app_files import AppFileTable, ResolvedFile, resolve
from .errors import (
    AppNavError,
    DecodeError,
    FilesystemError,
    IdentityCollisionError,
    NoEditableFileError,
    PartialRenameError,
)
from .identity import AppCategory, AppFolder, classify, is_app_folder
from .kinds import DEFAULT_REGISTRY, FileKind, FileKindDescriptor, FileKindRegistry
from .navigation import ContextFlags, CycleDirection, NavigationContext, NavigationHost, NavigationState
from .session import Session, SessionCallbacks, SessionManager

__all__ = [
    "AppCategory",
    "AppFileTable",
    "AppFolder",
    "AppNavError",
    "ContextFlags",
    "CycleDirection",
    "DEFAULT_REGISTRY",
    "DecodeError",
    "FileKind",
    "FileKindDescriptor",
    "FileKindRegistry",
    "FilesystemError",
    "IdentityCollisionError",
    "NavigationContext",
    "NavigationHost",
    "NavigationState",
    "NoEditableFileError",
    "PartialRenameError",
    "ResolvedFile",
    "Session",
    "SessionCallbacks",
    "SessionManager",
    "VirtualAddress",
    "classify",
    "decode_address",
    "encode_address",
    "is_app_folder",
    "real_path_of",
    "resolve",
]
