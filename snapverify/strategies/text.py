"""
Text strategies: snapshot strings line by line.
"""

from __future__ import annotations

import difflib
from typing import Any, Optional

from snapverify.core.snapshotting import Snapshotting
from snapverify.ports.strategy import DiffResult
from snapverify.types.outcome import Attachment


def _encode(text: str) -> bytes:
    return text.encode("utf-8")


def _decode(data: bytes) -> str:
    return data.decode("utf-8")


def line_diff(reference: str, candidate: str, context: int = 3) -> DiffResult:
    """Unified diff of two texts; None when they are identical."""
    if reference == candidate:
        return None

    hunks = list(
        difflib.unified_diff(
            reference.splitlines(),
            candidate.splitlines(),
            fromfile="reference",
            tofile="candidate",
            n=context,
            lineterm="",
        )
    )
    if not hunks:
        # Same lines, different line endings or trailing newline
        hunks = [f"- {reference!r}", f"+ {candidate!r}"]

    body = "\n".join(hunks)
    return body, [Attachment.text("difference.patch", body)]


def lines(file_extension: Optional[str] = "txt") -> Snapshotting[str, str]:
    """Snapshot a string verbatim."""
    return Snapshotting(
        snapshot_fn=lambda value: value,
        to_bytes_fn=_encode,
        from_bytes_fn=_decode,
        diff_fn=line_diff,
        file_extension=file_extension,
    )


def description() -> Snapshotting[Any, str]:
    """Snapshot any value by its repr()."""
    return lines().pullback(repr)
