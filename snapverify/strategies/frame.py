"""
DataFrame strategy: snapshot polars frames as CSV.

References are read back with every column as a string. Equality is decided on
the CSV text, so dtype inference never causes spurious mismatches; when the
text differs, polars.testing.assert_frame_equal explains how.
"""

from __future__ import annotations

import io
from typing import Optional

import polars as pl
from polars.testing import assert_frame_equal

from snapverify.core.snapshotting import Snapshotting
from snapverify.ports.strategy import DiffResult
from snapverify.strategies.text import line_diff


def _to_csv(frame: pl.DataFrame) -> str:
    if frame.width == 0:
        return ""
    return frame.write_csv()


def _to_bytes(frame: pl.DataFrame) -> bytes:
    return _to_csv(frame).encode("utf-8")


def _from_bytes(data: bytes) -> pl.DataFrame:
    if not data.strip():
        return pl.DataFrame()
    return pl.read_csv(io.BytesIO(data), infer_schema_length=0)


def _is_degenerate(frame: pl.DataFrame) -> bool:
    return frame.height == 0 and frame.width == 0


def _as_stored(frame: pl.DataFrame) -> pl.DataFrame:
    return _from_bytes(_to_bytes(frame))


def _frame_mismatch(reference: pl.DataFrame, candidate: pl.DataFrame) -> Optional[str]:
    # Both sides as they would be read from disk, so only values are compared
    try:
        assert_frame_equal(_as_stored(reference), _as_stored(candidate), check_dtypes=False)
    except AssertionError as exc:
        return str(exc)
    return None


def _dtype_changes(reference: pl.DataFrame, candidate: pl.DataFrame) -> list[str]:
    # A reference loaded from disk is all strings and carries no schema
    if all(dtype == pl.String for dtype in reference.dtypes):
        return []
    return [
        f"{name}: {reference.schema[name]} -> {candidate.schema[name]}"
        for name in reference.columns
        if name in candidate.schema and reference.schema[name] != candidate.schema[name]
    ]


def frame_diff(reference: pl.DataFrame, candidate: pl.DataFrame) -> DiffResult:
    text_diff = line_diff(_to_csv(reference), _to_csv(candidate))
    if text_diff is None:
        return None

    body, attachments = text_diff
    summary = [f"DataFrame mismatch: reference shape {reference.shape}, candidate shape {candidate.shape}"]

    missing = [c for c in reference.columns if c not in candidate.columns]
    added = [c for c in candidate.columns if c not in reference.columns]
    if missing:
        summary.append(f"columns missing from candidate: {', '.join(missing)}")
    if added:
        summary.append(f"columns added in candidate: {', '.join(added)}")

    dtypes = _dtype_changes(reference, candidate)
    if dtypes:
        summary.append(f"dtype changes: {'; '.join(dtypes)}")

    mismatch = _frame_mismatch(reference, candidate)
    if mismatch:
        summary.append(mismatch)

    return "\n".join(summary) + "\n\n" + body, attachments


def dataframe() -> Snapshotting[pl.DataFrame, pl.DataFrame]:
    return Snapshotting(
        snapshot_fn=lambda frame: frame,
        to_bytes_fn=_to_bytes,
        from_bytes_fn=_from_bytes,
        diff_fn=frame_diff,
        file_extension="csv",
        degenerate_fn=_is_degenerate,
    )
