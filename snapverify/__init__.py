"""
Snapshot verification engine.

Serializes a value through a pluggable strategy, compares the result against an
accepted reference on disk, and reports pass / record / mismatch together with
diff artifacts.

Components:
- SnapshotVerifier: orchestration, the verify() call contract
- Strategy / Snapshotting: the pluggable serialization and diff contract
- CounterRegistry: numbering of unnamed snapshots, reset per test case
- SnapshotStore: References / Targets / Additions / Changes / Differences
- generate_snapshot: timeout-bounded (possibly asynchronous) generation

Usage:
    from snapverify import SnapshotVerifier
    from snapverify.strategies import lines

    verifier = SnapshotVerifier()
    message = verifier.verify(
        lambda: "hello", lines(), source_file=__file__, test_name="test_hello"
    )
    assert message is None, message
"""

from snapverify.config.configs import GLOBAL_CONFIG, SnapshotConfig, VerifierSettings
from snapverify.core.harness import generate_snapshot
from snapverify.core.identifier import CounterRegistry, SnapshotIdentity, sanitize_path_component
from snapverify.core.persistence import SnapshotDirectories, SnapshotStore
from snapverify.core.snapshotting import Snapshotting
from snapverify.core.verifier import (
    SnapshotVerifier,
    assert_snapshot,
    assert_snapshots,
    default_verifier,
    reset_counters,
    verify_snapshot,
)
from snapverify.errors.errors import (
    ConfigurationError,
    GenerationFailedError,
    SnapshotError,
    SnapshotIOError,
    SnapshotTimeoutError,
)
from snapverify.ports.strategy import Strategy
from snapverify.types.outcome import (
    Attachment,
    Failed,
    Mismatch,
    OutcomeKind,
    Passed,
    RecordedNew,
    VerificationOutcome,
)

__all__ = [
    # Main entry point
    "SnapshotVerifier",
    "verify_snapshot",
    "assert_snapshot",
    "assert_snapshots",
    "default_verifier",
    "reset_counters",
    # Strategy contract
    "Strategy",
    "Snapshotting",
    # Building blocks
    "CounterRegistry",
    "SnapshotIdentity",
    "sanitize_path_component",
    "SnapshotDirectories",
    "SnapshotStore",
    "generate_snapshot",
    # Configuration
    "GLOBAL_CONFIG",
    "SnapshotConfig",
    "VerifierSettings",
    # Outcomes
    "Attachment",
    "OutcomeKind",
    "Passed",
    "RecordedNew",
    "Mismatch",
    "Failed",
    "VerificationOutcome",
    # Errors
    "SnapshotError",
    "SnapshotTimeoutError",
    "GenerationFailedError",
    "SnapshotIOError",
    "ConfigurationError",
]
