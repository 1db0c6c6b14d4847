"""
Custom exceptions for snapshot verification.

Exception hierarchy:
- SnapshotError (base)
  - SnapshotTimeoutError: snapshot generation exceeded the allotted time
  - GenerationFailedError: the strategy's producer signaled abnormally
  - SnapshotIOError: directory creation, file read/write or decode failures
  - ConfigurationError: invalid settings

Recording a new reference and a diff mismatch are outcomes, not exceptions
(see snapverify.types.outcome).
"""

from __future__ import annotations

from pathlib import Path
from typing import Any, Optional


class SnapshotError(Exception):
    """Base exception for all snapshot verification errors."""

    def __init__(
        self,
        message: str,
        *,
        component: Optional[str] = None,
        details: Optional[dict[str, Any]] = None,
    ) -> None:
        self.component = component
        self.details = details or {}
        super().__init__(message)

    def __str__(self) -> str:
        parts = [super().__str__()]
        if self.component:
            parts.append(f"[component={self.component}]")
        if self.details:
            parts.append(f"[details={self.details}]")
        return " ".join(parts)


class SnapshotTimeoutError(SnapshotError):
    """Raised when a strategy does not produce a snapshot within the timeout."""

    def __init__(
        self,
        timeout: float,
        *,
        component: Optional[str] = None,
    ) -> None:
        self.timeout = timeout
        message = (
            f"Exceeded timeout of {timeout} seconds waiting for snapshot.\n"
            "\n"
            "This can happen when an asynchronously rendered value has not finished "
            "producing its output. Ensure that every asynchronous dependency has "
            'completed to avoid timeouts, or, if a timeout is unavoidable, consider '
            'setting the "timeout" parameter of "verify" to a higher value.'
        )
        super().__init__(message, component=component)

    def __str__(self) -> str:
        # Displayed verbatim to the operator, details would only add noise
        return self.args[0]


class GenerationFailedError(SnapshotError):
    """Raised when the producer completes abnormally (cancelled, raised, or empty)."""

    def __init__(
        self,
        message: str = "Couldn't snapshot value",
        *,
        component: Optional[str] = None,
        details: Optional[dict[str, Any]] = None,
    ) -> None:
        super().__init__(message, component=component, details=details)


class SnapshotIOError(SnapshotError):
    """Raised when reading, writing or decoding a snapshot artifact fails."""

    def __init__(
        self,
        message: str,
        *,
        path: Optional[Path] = None,
        component: Optional[str] = None,
        details: Optional[dict[str, Any]] = None,
    ) -> None:
        self.path = path
        details = details or {}
        if path is not None:
            details["path"] = str(path)
        super().__init__(message, component=component, details=details)


class ConfigurationError(SnapshotError):
    """Raised when configuration is invalid."""

    def __init__(
        self,
        message: str,
        *,
        field: Optional[str] = None,
        value: Optional[Any] = None,
        component: Optional[str] = None,
        details: Optional[dict[str, Any]] = None,
    ) -> None:
        self.field = field
        self.value = value
        details = details or {}
        if field:
            details["field"] = field
        if value is not None:
            details["value"] = str(value)
        super().__init__(message, component=component, details=details)
