"""
Shared types for verification results.

An outcome is returned per verify call and never persisted.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Optional, Union


class OutcomeKind(str, Enum):
    """Terminal states of the verification state machine."""

    PASSED = "passed"
    RECORDED_NEW = "recorded_new"
    MISMATCH = "mismatch"
    FAILED = "failed"


@dataclass(frozen=True)
class Attachment:
    """Binary or textual artifact carried alongside a failure report."""

    name: str
    data: bytes
    uniform_type_identifier: Optional[str] = None

    @classmethod
    def text(cls, name: str, content: str) -> "Attachment":
        return cls(name=name, data=content.encode("utf-8"), uniform_type_identifier="public.plain-text")


@dataclass(frozen=True)
class Passed:
    kind: OutcomeKind = field(default=OutcomeKind.PASSED, init=False)

    @property
    def message(self) -> None:
        return None

    @property
    def passed(self) -> bool:
        return True


@dataclass(frozen=True)
class RecordedNew:
    """No baseline existed (or recording was forced); surfaced as a failure for review."""

    message: str
    kind: OutcomeKind = field(default=OutcomeKind.RECORDED_NEW, init=False)

    @property
    def passed(self) -> bool:
        return False


@dataclass(frozen=True)
class Mismatch:
    message: str
    attachments: tuple[Attachment, ...] = ()
    kind: OutcomeKind = field(default=OutcomeKind.MISMATCH, init=False)

    @property
    def passed(self) -> bool:
        return False


@dataclass(frozen=True)
class Failed:
    """Timeout, generation failure, or any I/O or decode error."""

    message: str
    error: Optional[BaseException] = field(default=None, compare=False)
    kind: OutcomeKind = field(default=OutcomeKind.FAILED, init=False)

    @property
    def passed(self) -> bool:
        return False


VerificationOutcome = Union[Passed, RecordedNew, Mismatch, Failed]
