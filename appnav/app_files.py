"""Per-directory resolution of file kinds onto the files that actually exist."""

from __future__ import annotations

from dataclasses import dataclass
import os
from pathlib import Path

from .errors import NoEditableFileError
from .fs import safe_is_file
from .identity import AppCategory, classify
from .kinds import DEFAULT_REGISTRY, FileKind, FileKindDescriptor, FileKindRegistry


@dataclass(frozen=True)
class ResolvedFile:
    """One kind mapped to a concrete file; ``exists`` is only valid at resolve time."""

    kind: FileKind
    file_name: str
    full_path: Path
    exists: bool
    label: str
    language_hint: str | None


class AppFileTable:
    """Resolve which candidate file backs each kind for a given directory."""

    def __init__(self, registry: FileKindRegistry = DEFAULT_REGISTRY) -> None:
        self.registry = registry

    def _resolve_one(self, directory: Path, descriptor: FileKindDescriptor) -> ResolvedFile:
        file_name = next(
            (name for name in descriptor.candidate_file_names if safe_is_file(directory / name)),
            None,
        )
        exists = file_name is not None
        if file_name is None:
            file_name = descriptor.default_file_name
        return ResolvedFile(
            kind=descriptor.kind,
            file_name=file_name,
            full_path=directory / file_name,
            exists=exists,
            label=descriptor.label,
            language_hint=descriptor.language_for(file_name),
        )

    def resolve(self, dir_path: str | os.PathLike[str]) -> dict[FileKind, ResolvedFile]:
        """Map every registered kind to its first existing candidate.

        Kinds without any existing candidate fall back to the first candidate
        with ``exists=False``. A missing directory yields ``exists=False``
        everywhere.
        """
        directory = Path(dir_path)
        category = classify(directory).category
        return {
            descriptor.kind: self._resolve_one(directory, descriptor)
            for descriptor in self.registry.descriptors_of(category)
        }

    def existing_files(self, dir_path: str | os.PathLike[str]) -> list[ResolvedFile]:
        """Return existing files in registry table order."""
        return self._existing(self.resolve(dir_path))

    def _existing(self, resolved: dict[FileKind, ResolvedFile]) -> list[ResolvedFile]:
        return [
            resolved[descriptor.kind]
            for descriptor in self.registry.descriptors
            if resolved[descriptor.kind].exists
        ]

    def primary_file(self, dir_path: str | os.PathLike[str]) -> ResolvedFile:
        """Return the file an app opens with.

        Routes prefer their controller, every other category its UI template;
        otherwise the first existing file in table order is used.
        """
        folder = classify(dir_path)
        resolved = self.resolve(dir_path)
        preferred = FileKind.CONTROLLER if folder.category is AppCategory.ROUTE else FileKind.UI
        candidate = resolved.get(preferred)
        if candidate is not None and candidate.exists:
            return candidate
        existing = self._existing(resolved)
        if not existing:
            raise NoEditableFileError(f"no editable file in app folder {folder.path.name!r}")
        return existing[0]

    def kind_from_file_name(self, name: str) -> FileKind | None:
        return self.registry.kind_for_file_name(name)

    def kind_from_address_label(self, label: str) -> FileKind | None:
        return self.registry.kind_from_address_label(label)


DEFAULT_FILE_TABLE = AppFileTable()


def resolve(dir_path: str | os.PathLike[str]) -> dict[FileKind, ResolvedFile]:
    """Resolve ``dir_path`` with the default registry."""
    return DEFAULT_FILE_TABLE.resolve(dir_path)


__all__ = [
    "AppFileTable",
    "DEFAULT_FILE_TABLE",
    "ResolvedFile",
    "resolve",
]
