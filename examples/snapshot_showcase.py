#!/usr/bin/env python3
"""
Snapshot Verification - End-to-End Showcase

Walks through the record -> promote -> pass -> mismatch cycle in a temporary
directory, printing each outcome.

Usage:
    python examples/snapshot_showcase.py
"""

from __future__ import annotations

import shutil
import tempfile
from pathlib import Path

import polars as pl

from snapverify import SnapshotConfig, SnapshotVerifier
from snapverify.strategies import dataframe, json_strategy

# =============================================================================
# PART 1: Values under test
# =============================================================================


def positions_frame(scale: int = 1) -> pl.DataFrame:
    return pl.DataFrame(
        {
            "symbol": ["BTCUSDT", "ETHUSDT", "SOLUSDT"],
            "qty": [1 * scale, 4 * scale, 25 * scale],
        }
    )


def run_summary() -> dict:
    return {"trades": 12, "pnl": "104.25", "symbols": ["BTCUSDT", "ETHUSDT"]}


# =============================================================================
# PART 2: Record, promote, verify
# =============================================================================


def promote_all(root: Path) -> None:
    references = root / "References"
    references.mkdir(parents=True, exist_ok=True)
    for addition in (root / "Additions").iterdir():
        shutil.copy2(addition, references / addition.name)


def main() -> None:
    root = Path(tempfile.mkdtemp(prefix="snapverify-"))
    verifier = SnapshotVerifier(config=SnapshotConfig(diff_tool="diff -u"))
    call = dict(source_file=__file__, test_name="showcase", snapshot_directory=root)

    print("--- first run (no references) ---")
    print(verifier.verify(positions_frame, dataframe(), name="positions", **call))
    print(verifier.verify(run_summary, json_strategy(), name="summary", **call))

    promote_all(root)

    print("\n--- second run (promoted) ---")
    print(verifier.verify(positions_frame, dataframe(), name="positions", **call))
    print(verifier.verify(run_summary, json_strategy(), name="summary", **call))

    print("\n--- third run (positions changed) ---")
    print(verifier.verify(lambda: positions_frame(scale=2), dataframe(), name="positions", **call))

    print(f"\nArtifacts under {root}:")
    for path in sorted(root.rglob("*")):
        if path.is_file():
            print(f"  {path.relative_to(root)}")


if __name__ == "__main__":
    main()
