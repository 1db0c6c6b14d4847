from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from pydantic import BaseModel, field_validator, model_validator

"""
Here, we collect the configuration of the verifier:
    - SnapshotConfig: process-wide flags, mutable at any time, read fresh per call
    - VerifierSettings: validated, file-loadable settings (timeout, layout)
"""


# --- Global flags ---


@dataclass
class SnapshotConfig:
    # Advisory only; embedded in failure messages, e.g. "ksdiff" or "code --diff"
    diff_tool: Optional[str] = None
    # Record every snapshot as a new addition instead of comparing
    is_recording: bool = False


GLOBAL_CONFIG = SnapshotConfig()


# --- Settings ---

DEFAULT_TIMEOUT_S: float = 5.0
DEFAULT_ROOT_MARKERS: tuple[str, ...] = ("pyproject.toml", "setup.cfg", ".git")


class DirectoryNames(BaseModel):
    references: str = "References"
    targets: str = "Targets"
    additions: str = "Additions"
    changes: str = "Changes"
    differences: str = "Differences"

    @model_validator(mode="after")
    def _check_names(self) -> "DirectoryNames":
        names = [
            self.references,
            self.targets,
            self.additions,
            self.changes,
            self.differences,
        ]
        for name in names:
            if not name or "/" in name or "\\" in name:
                raise ValueError(f"directory name must be a single path component (got {name!r})")
        if len(set(names)) != len(names):
            raise ValueError("directory names must be distinct")
        return self


class VerifierSettings(BaseModel):
    timeout: float = DEFAULT_TIMEOUT_S
    root_markers: tuple[str, ...] = DEFAULT_ROOT_MARKERS
    directories: DirectoryNames = DirectoryNames()

    @field_validator("timeout")
    @classmethod
    def _positive_timeout(cls, v: float) -> float:
        if v <= 0:
            raise ValueError("timeout must be positive")
        return v

    @field_validator("root_markers")
    @classmethod
    def _non_empty_markers(cls, v: tuple[str, ...]) -> tuple[str, ...]:
        if not v:
            raise ValueError("at least one root marker is required")
        return v
