"""snap CLI entrypoint.

Subcommands:
    status   list pending Additions, Changes and Differences under a snapshot root
    promote  copy Additions into References (all, or the named files)

Nothing is ever deleted: promoted additions stay in Additions until removed by hand.
"""

from __future__ import annotations

import argparse
import shutil
import sys
from pathlib import Path
from typing import Optional

from snapverify.adapters.telemetry.jsonl import JsonlTelemetry
from snapverify.config.config_loader import ConfigLoader
from snapverify.config.configs import VerifierSettings
from snapverify.core.persistence import ArtifactKind, SnapshotDirectories, SnapshotStore
from snapverify.errors.errors import SnapshotError
from snapverify.ports.telemetry import Telemetry

PENDING_KINDS: tuple[ArtifactKind, ...] = (
    ArtifactKind.ADDITIONS,
    ArtifactKind.CHANGES,
    ArtifactKind.DIFFERENCES,
)


def build_parser() -> argparse.ArgumentParser:
    """
    Return the top-level CLI argument parser.
    """
    p = argparse.ArgumentParser(prog="snap")
    sub = p.add_subparsers(dest="command", required=True)

    def add_common(sp: argparse.ArgumentParser) -> None:
        """Add arguments shared across all subcommands."""
        sp.add_argument("--root", type=Path, default=Path("."), help="Snapshot root directory")
        sp.add_argument(
            "--config",
            type=Path,
            required=False,
            help="TOML file with a [tool.snapverify] table (directory names)",
        )
        sp.add_argument("--events", type=Path, required=False, help="Append JSONL events here")

    status = sub.add_parser("status", help="List pending snapshot artifacts")
    add_common(status)

    promote = sub.add_parser("promote", help="Copy Additions into References")
    add_common(promote)
    promote.add_argument(
        "names",
        nargs="*",
        metavar="NAME",
        help="Artifact file names to promote (default: all additions)",
    )
    promote.add_argument(
        "--dry-run",
        action="store_true",
        help="Print what would be copied without writing",
    )
    return p


def _load_settings(config: Optional[Path]) -> VerifierSettings:
    if config is None:
        return VerifierSettings()
    return ConfigLoader().load_settings(config)


def run_status(store: SnapshotStore, telemetry: Optional[Telemetry] = None) -> int:
    """Print pending artifacts per directory. Returns 0 if nothing is pending, else 1."""
    pending_total = 0
    for kind in PENDING_KINDS:
        paths = store.list_artifacts(kind)
        pending_total += len(paths)
        print(f"{store.directories.for_kind(kind).name}: {len(paths)}")
        for path in paths:
            print(f"  {path.name}")

    if telemetry is not None:
        telemetry.log("cli_status", pending_total=pending_total)
    return 0 if pending_total == 0 else 1


def run_promote(
    store: SnapshotStore,
    names: list[str],
    dry_run: bool = False,
    telemetry: Optional[Telemetry] = None,
) -> int:
    """Copy additions into references, overwriting existing references."""
    additions = {path.name: path for path in store.list_artifacts(ArtifactKind.ADDITIONS)}
    unknown = [name for name in names if name not in additions]
    if unknown:
        print(f"Not found in additions: {', '.join(unknown)}", file=sys.stderr)
        return 1

    selected = [additions[name] for name in names] if names else list(additions.values())
    if not selected:
        print("Nothing to promote")
        return 0

    references = store.directories.references
    if not dry_run:
        store.ensure_directory(ArtifactKind.REFERENCES)

    for source in selected:
        target = references / source.name
        print(f"{source} -> {target}")
        if not dry_run:
            shutil.copy2(source, target)

    if telemetry is not None:
        telemetry.log("cli_promote", promoted=len(selected), dry_run=dry_run)
    return 0


def main(argv: list[str] | None = None) -> int:
    """CLI entrypoint wrapper compatible with setuptools scripts."""
    parser = build_parser()
    args = parser.parse_args(argv)

    telemetry = JsonlTelemetry(sink_path=args.events) if args.events else None
    try:
        settings = _load_settings(args.config)
        store = SnapshotStore(SnapshotDirectories.from_root(args.root, settings))

        if args.command == "status":
            return run_status(store, telemetry)
        return run_promote(store, args.names, args.dry_run, telemetry)
    except (SnapshotError, OSError) as exc:
        print(f"snap: {exc}", file=sys.stderr)
        return 1


if __name__ == "__main__":  # pragma: no cover
    raise SystemExit(main())
