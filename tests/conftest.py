from concurrent.futures import Future
from typing import Any, Optional

import pytest

from snapverify.config.configs import SnapshotConfig
from snapverify.core.identifier import CounterRegistry
from snapverify.core.snapshotting import Snapshotting
from snapverify.core.verifier import SnapshotVerifier

pytest_plugins = ["snapverify.pytest_plugin"]

SOURCE_FILE = "/project/tests/TestRendering.py"


def make_text_strategy(
    diff_message: str = "values differ",
    file_extension: Optional[str] = "txt",
    **overrides: Any,
) -> Snapshotting:
    """
    Minimal str strategy: equal iff the strings are equal, else (diff_message, []).
    Prefer using the fixtures below in tests.
    """
    params: dict[str, Any] = dict(
        snapshot_fn=lambda value: str(value),
        to_bytes_fn=lambda text: text.encode("utf-8"),
        from_bytes_fn=lambda data: data.decode("utf-8"),
        diff_fn=lambda ref, cand: None if ref == cand else (diff_message, []),
        file_extension=file_extension,
    )
    params.update(overrides)
    return Snapshotting(**params)


def never_completing_future(value: Any) -> "Future[Any]":
    return Future()


@pytest.fixture
def config() -> SnapshotConfig:
    return SnapshotConfig()


@pytest.fixture
def registry() -> CounterRegistry:
    return CounterRegistry()


@pytest.fixture
def verifier(config: SnapshotConfig, registry: CounterRegistry) -> SnapshotVerifier:
    return SnapshotVerifier(config=config, registry=registry)


@pytest.fixture
def text_strategy() -> Snapshotting:
    return make_text_strategy()
