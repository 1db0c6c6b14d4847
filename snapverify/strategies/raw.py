"""
Raw data strategy: snapshot bytes as-is.
"""

from __future__ import annotations

from typing import Optional

from snapverify.core.snapshotting import Snapshotting
from snapverify.ports.strategy import DiffResult


def _first_difference(reference: bytes, candidate: bytes) -> int:
    for index, (a, b) in enumerate(zip(reference, candidate)):
        if a != b:
            return index
    return min(len(reference), len(candidate))


def data_diff(reference: bytes, candidate: bytes) -> DiffResult:
    if reference == candidate:
        return None
    offset = _first_difference(reference, candidate)
    message = (
        f"Expected {len(reference)} bytes to match {len(candidate)} bytes; "
        f"first difference at offset {offset}"
    )
    return message, []


def data(file_extension: Optional[str] = None) -> Snapshotting[bytes, bytes]:
    return Snapshotting(
        snapshot_fn=bytes,
        to_bytes_fn=lambda b: b,
        from_bytes_fn=lambda b: b,
        diff_fn=data_diff,
        file_extension=file_extension,
    )
