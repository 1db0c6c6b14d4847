"""
pytest integration.

Opt in explicitly from a conftest.py:

    pytest_plugins = ["snapverify.pytest_plugin"]

Provides:
    - snapshot_verifier: per-session SnapshotVerifier, counters reset after every test
    - assert_match: verify with source_file / test_name taken from the running test
    - --snapshot-record / SNAPVERIFY_RECORD=1: record every snapshot
"""

from __future__ import annotations

import os
from typing import Any, Callable, Iterator, Optional

import pytest

from snapverify.config.configs import GLOBAL_CONFIG, SnapshotConfig
from snapverify.core.verifier import SnapshotVerifier, reset_counters
from snapverify.ports.strategy import Strategy

RECORD_ENV = "SNAPVERIFY_RECORD"


def pytest_addoption(parser: pytest.Parser) -> None:
    group = parser.getgroup("snapverify")
    group.addoption(
        "--snapshot-record",
        action="store_true",
        default=False,
        help="Record every snapshot into Additions instead of comparing",
    )


def _record_requested(config: pytest.Config) -> bool:
    if config.getoption("--snapshot-record"):
        return True
    return os.environ.get(RECORD_ENV, "").lower() in ("1", "true", "yes")


@pytest.fixture(scope="session")
def snapshot_config(pytestconfig: pytest.Config) -> Iterator[SnapshotConfig]:
    """The process-wide GLOBAL_CONFIG, switched to recording for the session when requested."""
    previous = GLOBAL_CONFIG.is_recording
    if _record_requested(pytestconfig):
        GLOBAL_CONFIG.is_recording = True
    yield GLOBAL_CONFIG
    GLOBAL_CONFIG.is_recording = previous


@pytest.fixture(scope="session")
def _session_verifier(snapshot_config: SnapshotConfig) -> SnapshotVerifier:
    return SnapshotVerifier(config=snapshot_config)


@pytest.fixture
def snapshot_verifier(_session_verifier: SnapshotVerifier) -> Iterator[SnapshotVerifier]:
    yield _session_verifier
    # Test-case boundary: keep unnamed counters test-local
    _session_verifier.reset()


@pytest.fixture(autouse=True)
def _reset_default_counters() -> Iterator[None]:
    yield
    reset_counters()


@pytest.fixture
def assert_match(
    request: pytest.FixtureRequest,
    snapshot_verifier: SnapshotVerifier,
) -> Callable[..., None]:
    source_file = str(request.path)
    test_name = request.node.name

    def _assert(
        value: Any,
        strategy: Strategy[Any, Any],
        name: Optional[str] = None,
        **kwargs: Any,
    ) -> None:
        message = snapshot_verifier.verify(
            value,
            strategy,
            source_file=source_file,
            test_name=test_name,
            name=name,
            **kwargs,
        )
        if message is not None:
            pytest.fail(message, pytrace=False)

    return _assert
