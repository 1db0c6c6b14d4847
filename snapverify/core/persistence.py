"""
Directory-based persistence of snapshot artifacts.

Layout under a project root:
    References/   accepted baselines (read only by the verifier)
    Targets/      every freshly generated snapshot, regardless of outcome
    Additions/    new snapshots awaiting promotion to References
    Changes/      candidates that did not match their reference
    Differences/  strategy-supplied difference artifacts

Nothing here ever deletes a file; re-runs with the same identity overwrite.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import Iterable, Optional, Union

from snapverify.config.configs import DEFAULT_ROOT_MARKERS, VerifierSettings
from snapverify.errors.errors import SnapshotIOError

_LOGGER = logging.getLogger(__name__)


class ArtifactKind(str, Enum):
    REFERENCES = "references"
    TARGETS = "targets"
    ADDITIONS = "additions"
    CHANGES = "changes"
    DIFFERENCES = "differences"


def find_project_root(
    source_file: Union[str, Path],
    markers: Iterable[str] = DEFAULT_ROOT_MARKERS,
) -> Path:
    """
    Walk up from the source file until a directory containing any marker is found.
    """
    markers = tuple(markers)
    start = Path(source_file).resolve()
    for candidate in start.parents:
        if any((candidate / marker).exists() for marker in markers):
            return candidate
    raise SnapshotIOError(
        f"Could not locate a project root above {start} (markers: {', '.join(markers)})",
        path=start,
        component="persistence",
    )


def artifact_file_name(file_name: str, extension: Optional[str]) -> str:
    ext = (extension or "").lstrip(".")
    return f"{file_name}.{ext}" if ext else file_name


@dataclass(frozen=True)
class SnapshotDirectories:
    root: Path
    references: Path
    targets: Path
    additions: Path
    changes: Path
    differences: Path

    @classmethod
    def from_root(
        cls,
        root: Union[str, Path],
        settings: Optional[VerifierSettings] = None,
    ) -> "SnapshotDirectories":
        names = (settings or VerifierSettings()).directories
        root = Path(root)
        return cls(
            root=root,
            references=root / names.references,
            targets=root / names.targets,
            additions=root / names.additions,
            changes=root / names.changes,
            differences=root / names.differences,
        )

    def for_kind(self, kind: ArtifactKind) -> Path:
        return getattr(self, kind.value)


class SnapshotStore:
    """Reads references and writes artifacts for one set of snapshot directories."""

    def __init__(self, directories: SnapshotDirectories) -> None:
        self._directories = directories

    @property
    def directories(self) -> SnapshotDirectories:
        return self._directories

    def artifact_path(self, kind: ArtifactKind, file_name: str, extension: Optional[str]) -> Path:
        return self._directories.for_kind(kind) / artifact_file_name(file_name, extension)

    def ensure_directory(self, kind: ArtifactKind) -> Path:
        directory = self._directories.for_kind(kind)
        try:
            directory.mkdir(parents=True, exist_ok=True)
        except OSError as exc:
            raise SnapshotIOError(
                f"Could not create directory {directory}: {exc.strerror or exc}",
                path=directory,
                component="persistence",
            ) from exc
        return directory

    def write(
        self,
        kind: ArtifactKind,
        file_name: str,
        data: bytes,
        extension: Optional[str] = None,
    ) -> Path:
        self.ensure_directory(kind)
        path = self.artifact_path(kind, file_name, extension)
        try:
            path.write_bytes(data)
        except OSError as exc:
            raise SnapshotIOError(
                f"Could not write snapshot to {path}: {exc.strerror or exc}",
                path=path,
                component="persistence",
            ) from exc

        _LOGGER.debug(
            "snapshot_artifact_written",
            extra={
                "event": "snapshot_artifact_written",
                "kind": kind.value,
                "path": str(path),
                "bytes": len(data),
            },
        )
        return path

    def reference_exists(self, file_name: str, extension: Optional[str] = None) -> bool:
        return self.artifact_path(ArtifactKind.REFERENCES, file_name, extension).is_file()

    def read_reference(self, file_name: str, extension: Optional[str] = None) -> Optional[bytes]:
        """Reference bytes, or None when no baseline exists yet."""
        path = self.artifact_path(ArtifactKind.REFERENCES, file_name, extension)
        if not path.is_file():
            return None
        try:
            return path.read_bytes()
        except OSError as exc:
            raise SnapshotIOError(
                f"Could not read reference {path}: {exc.strerror or exc}",
                path=path,
                component="persistence",
            ) from exc

    def list_artifacts(self, kind: ArtifactKind) -> list[Path]:
        directory = self._directories.for_kind(kind)
        if not directory.is_dir():
            return []
        return sorted(p for p in directory.iterdir() if p.is_file())
