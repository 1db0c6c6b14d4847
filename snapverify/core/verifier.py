"""
Snapshot verification.

Orchestrates identity resolution, timeout-bounded generation and persistence
into a pass / record / mismatch decision.

State Machine:
    [START] --resolve identity/dirs--> [GENERATING] --timeout/failure--> [FAILED]
                                            |
                                    write Targets copy
                                            |
              recording or no reference --> [RECORDING] --> RecordedNew
                                            |
                                       [COMPARING] --> Passed | Mismatch

Any exception raised along the way is converted into a Failed outcome at the
verify boundary; callers never receive an unhandled error from here.

Usage:
    verifier = SnapshotVerifier()
    message = verifier.verify(
        lambda: render(), lines(), source_file=__file__, test_name="test_render"
    )
    assert message is None, message

    # at the end of every test case (see snapverify.pytest_plugin)
    verifier.reset()
"""

from __future__ import annotations

import logging
import threading
from pathlib import Path
from typing import Any, Callable, Iterable, Mapping, Optional, Sequence, Union

from snapverify.config.configs import GLOBAL_CONFIG, SnapshotConfig, VerifierSettings
from snapverify.core.harness import generate_snapshot
from snapverify.core.identifier import CounterRegistry, SnapshotIdentity, resolve_identity
from snapverify.core.persistence import (
    ArtifactKind,
    SnapshotDirectories,
    SnapshotStore,
    find_project_root,
)
from snapverify.errors.errors import SnapshotIOError
from snapverify.ports.strategy import Strategy
from snapverify.ports.telemetry import Telemetry
from snapverify.types.outcome import (
    Failed,
    Mismatch,
    Passed,
    RecordedNew,
    VerificationOutcome,
)

_LOGGER = logging.getLogger(__name__)

PathLike = Union[str, Path]


class SnapshotVerifier:
    """
    Verifies values against references on disk.

    Owns its CounterRegistry; the embedding test harness must call reset() when a
    test case finishes so unnamed snapshots are numbered per test, not per run.
    """

    def __init__(
        self,
        config: Optional[SnapshotConfig] = None,
        settings: Optional[VerifierSettings] = None,
        registry: Optional[CounterRegistry] = None,
        telemetry: Optional[Telemetry] = None,
    ) -> None:
        self._config = config if config is not None else GLOBAL_CONFIG
        self._settings = settings or VerifierSettings()
        self._registry = registry if registry is not None else CounterRegistry()
        self._telemetry = telemetry

    # --- Property methods ---

    @property
    def config(self) -> SnapshotConfig:
        return self._config

    @property
    def settings(self) -> VerifierSettings:
        return self._settings

    @property
    def registry(self) -> CounterRegistry:
        return self._registry

    # --- Lifecycle ---

    def reset(self) -> None:
        """Test-case boundary hook: forget all unnamed-snapshot counters."""
        self._registry.reset()

    # --- Verification ---

    def verify(
        self,
        value: Any,
        strategy: Strategy[Any, Any],
        *,
        source_file: PathLike,
        test_name: str,
        name: Optional[str] = None,
        record: bool = False,
        snapshot_directory: Optional[PathLike] = None,
        timeout: Optional[float] = None,
    ) -> Optional[str]:
        """
        Verify `value` against its reference. Returns None on pass, otherwise a
        failure message suitable for direct display.
        """
        return self.verify_outcome(
            value,
            strategy,
            source_file=source_file,
            test_name=test_name,
            name=name,
            record=record,
            snapshot_directory=snapshot_directory,
            timeout=timeout,
        ).message

    def verify_outcome(
        self,
        value: Any,
        strategy: Strategy[Any, Any],
        *,
        source_file: PathLike,
        test_name: str,
        name: Optional[str] = None,
        record: bool = False,
        snapshot_directory: Optional[PathLike] = None,
        timeout: Optional[float] = None,
    ) -> VerificationOutcome:
        """
        Args:
            value: zero-argument producer of the value, invoked exactly once at the
                point of use. A non-callable is taken as the value itself.
            strategy: how to serialize, persist and diff the value
            source_file: file of the calling test; drives naming and root discovery
            test_name: name of the calling test
            name: explicit snapshot name; unnamed snapshots are numbered 1, 2, ...
            record: force recording a new addition for this call
            snapshot_directory: project root override (skips root discovery)
            timeout: seconds allowed for snapshot generation (default from settings)
        """
        recording = record or self._config.is_recording
        timeout = self._settings.timeout if timeout is None else timeout
        identity: Optional[SnapshotIdentity] = None

        try:
            store = self._store_for(source_file, snapshot_directory)
            identity = resolve_identity(
                source_file=source_file,
                test_name=test_name,
                reference_dir=store.directories.references,
                registry=self._registry,
                name=name,
            )
            store.ensure_directory(ArtifactKind.REFERENCES)

            produced = value() if callable(value) else value
            diffable = generate_snapshot(strategy, produced, timeout=timeout)

            outcome = self._decide(strategy, store, identity, diffable, recording)
        except Exception as exc:
            outcome = Failed(message=str(exc), error=exc)

        self._report(outcome, identity, test_name)
        return outcome

    # --- Internals ---

    def _store_for(
        self,
        source_file: PathLike,
        snapshot_directory: Optional[PathLike],
    ) -> SnapshotStore:
        if snapshot_directory is not None:
            root = Path(snapshot_directory)
        else:
            root = find_project_root(source_file, self._settings.root_markers)
        return SnapshotStore(SnapshotDirectories.from_root(root, self._settings))

    def _decide(
        self,
        strategy: Strategy[Any, Any],
        store: SnapshotStore,
        identity: SnapshotIdentity,
        diffable: Any,
        recording: bool,
    ) -> VerificationOutcome:
        file_name = identity.file_name
        extension = strategy.file_extension
        data = strategy.to_bytes(diffable)

        store.write(ArtifactKind.TARGETS, file_name, data, extension)
        reference_path = store.artifact_path(ArtifactKind.REFERENCES, file_name, extension)

        reference_data = None if recording else store.read_reference(file_name, extension)
        if reference_data is None:
            addition = store.write(ArtifactKind.ADDITIONS, file_name, data, extension)
            message = self._recorded_message(identity, store, addition, recording)
            return RecordedNew(message=self._with_diff_tool(message, reference_path, addition))

        try:
            reference = strategy.from_bytes(reference_data)
        except Exception as exc:
            raise SnapshotIOError(
                f"Could not decode reference {reference_path}: {exc}",
                path=reference_path,
                component="verifier",
            ) from exc

        # Compatibility shim: degenerate renders are not stably regenerable
        if _is_degenerate(strategy, diffable) and _is_degenerate(strategy, reference):
            diffable = reference

        result = strategy.diff(reference, diffable)
        if result is None:
            return Passed()

        summary, attachments = result
        change = store.write(ArtifactKind.CHANGES, file_name, strategy.to_bytes(diffable), extension)

        make_difference = getattr(strategy, "difference", None)
        difference = make_difference(reference, diffable) if make_difference is not None else None
        if difference is not None:
            store.write(ArtifactKind.DIFFERENCES, file_name, strategy.to_bytes(difference), extension)

        return Mismatch(
            message=self._with_diff_tool(summary, reference_path, change),
            attachments=tuple(attachments),
        )

    def _recorded_message(
        self,
        identity: SnapshotIdentity,
        store: SnapshotStore,
        addition: Path,
        recording: bool,
    ) -> str:
        names = self._settings.directories
        reason = (
            "Record mode is on."
            if recording
            else "No reference was found on disk."
        )
        lines = [
            f'{reason} A new snapshot has been created in the "{names.additions}" folder:',
            "",
            f"    {addition}",
            "",
            f'Copy it into the "{names.references}" folder ({store.directories.references}),',
            f'then re-run "{identity.test_name}" to test against the newly-recorded snapshot.',
        ]
        return "\n".join(lines)

    def _with_diff_tool(self, message: str, reference: Path, candidate: Path) -> str:
        """Prefix `message` with a diff tool command line when one is configured."""
        diff_tool = self._config.diff_tool
        if not diff_tool:
            return message
        return f'{diff_tool} "{reference}" "{candidate}"\n\n{message}'

    def _report(
        self,
        outcome: VerificationOutcome,
        identity: Optional[SnapshotIdentity],
        test_name: str,
    ) -> None:
        event = f"snapshot_{outcome.kind.value}"
        snapshot = identity.file_name if identity is not None else None
        fields = {"test_name": test_name, "snapshot": snapshot, "outcome": outcome.kind.value}

        if outcome.passed:
            _LOGGER.debug(event, extra={"event": event, **fields})
        else:
            _LOGGER.info(event, extra={"event": event, **fields})

        if self._telemetry is not None:
            self._telemetry.log(event, **fields)


def _is_degenerate(strategy: Strategy[Any, Any], fmt: Any) -> bool:
    predicate = getattr(strategy, "is_degenerate", None)
    if predicate is None:
        return False
    return bool(predicate(fmt))


# --- Module-level helpers (process default verifier) ---

_DEFAULT_VERIFIER: Optional[SnapshotVerifier] = None
_DEFAULT_LOCK = threading.Lock()


def default_verifier() -> SnapshotVerifier:
    global _DEFAULT_VERIFIER
    with _DEFAULT_LOCK:
        if _DEFAULT_VERIFIER is None:
            _DEFAULT_VERIFIER = SnapshotVerifier()
        return _DEFAULT_VERIFIER


def reset_counters() -> None:
    """Reset the default verifier's counters; call when a test case finishes."""
    default_verifier().reset()


def verify_snapshot(
    value: Any,
    strategy: Strategy[Any, Any],
    *,
    source_file: PathLike,
    test_name: str,
    name: Optional[str] = None,
    record: bool = False,
    snapshot_directory: Optional[PathLike] = None,
    timeout: Optional[float] = None,
    verifier: Optional[SnapshotVerifier] = None,
) -> Optional[str]:
    return (verifier or default_verifier()).verify(
        value,
        strategy,
        source_file=source_file,
        test_name=test_name,
        name=name,
        record=record,
        snapshot_directory=snapshot_directory,
        timeout=timeout,
    )


def assert_snapshot(
    value: Any,
    strategy: Strategy[Any, Any],
    *,
    source_file: PathLike,
    test_name: str,
    name: Optional[str] = None,
    record: bool = False,
    snapshot_directory: Optional[PathLike] = None,
    timeout: Optional[float] = None,
    verifier: Optional[SnapshotVerifier] = None,
) -> None:
    """Raise AssertionError with the failure message unless the value matches."""
    message = verify_snapshot(
        value,
        strategy,
        source_file=source_file,
        test_name=test_name,
        name=name,
        record=record,
        snapshot_directory=snapshot_directory,
        timeout=timeout,
        verifier=verifier,
    )
    if message is not None:
        raise AssertionError(message)


def assert_snapshots(
    value: Any,
    strategies: Union[Mapping[str, Strategy[Any, Any]], Sequence[Strategy[Any, Any]]],
    *,
    source_file: PathLike,
    test_name: str,
    record: bool = False,
    snapshot_directory: Optional[PathLike] = None,
    timeout: Optional[float] = None,
    verifier: Optional[SnapshotVerifier] = None,
) -> None:
    """
    Verify one value under several strategies.

    A mapping names each snapshot by its key; a sequence numbers them. All
    strategies are verified before failing, with every failure message joined.
    """
    named: Iterable[tuple[Optional[str], Strategy[Any, Any]]]
    if isinstance(strategies, Mapping):
        named = strategies.items()
    else:
        named = ((None, strategy) for strategy in strategies)

    produce: Callable[[], Any] = value if callable(value) else (lambda: value)
    failures: list[str] = []
    for snapshot_name, strategy in named:
        message = verify_snapshot(
            produce,
            strategy,
            source_file=source_file,
            test_name=test_name,
            name=snapshot_name,
            record=record,
            snapshot_directory=snapshot_directory,
            timeout=timeout,
            verifier=verifier,
        )
        if message is not None:
            failures.append(message)

    if failures:
        raise AssertionError("\n\n".join(failures))
