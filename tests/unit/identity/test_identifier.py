import threading
from concurrent.futures import ThreadPoolExecutor

import pytest

from snapverify.core.identifier import (
    CounterRegistry,
    SnapshotIdentity,
    file_name_prefix,
    resolve_identity,
    sanitize_path_component,
)

# --- Sanitization ---


@pytest.mark.parametrize(
    "raw,expected",
    [
        ("My Test!!", "My-Test"),
        ("test_render()", "test_render"),
        ("  leading and trailing  ", "leading-and-trailing"),
        ("a/b\\c", "a-b-c"),
        ("dots.in.name", "dots-in-name"),
        ("already-clean", "already-clean"),
        ("test_param[1-2]", "test_param-1-2"),
        ("!!!", "_"),
        ("", "_"),
    ],
)
def test_sanitize_path_component(raw, expected):
    assert sanitize_path_component(raw) == expected


@pytest.mark.parametrize(
    "raw",
    ["My Test!!", "--x--", "a  b", "", "***", "ünïcödé näme", "test[param-1]", "_"],
)
def test_sanitize_is_idempotent(raw):
    once = sanitize_path_component(raw)
    assert sanitize_path_component(once) == once
    assert once
    assert "/" not in once and "\\" not in once


def test_file_name_prefix_lowercases_first_character():
    assert file_name_prefix("/project/tests/TestRendering.py") == "testRendering"
    assert file_name_prefix("test_api.py") == "test_api"
    assert file_name_prefix("My Module.py") == "my-Module"


# --- Counter registry ---


def test_registry_counts_from_one_per_key():
    registry = CounterRegistry()

    assert [registry.next("/refs", "test_a") for _ in range(3)] == [1, 2, 3]
    assert registry.next("/refs", "test_b") == 1
    assert registry.next("/other", "test_a") == 1
    assert registry.peek("/refs", "test_a") == 3
    assert len(registry) == 3


def test_registry_reset_restarts_sequence():
    registry = CounterRegistry()
    registry.next("/refs", "test_a")
    registry.next("/refs", "test_a")

    registry.reset()

    assert len(registry) == 0
    assert registry.peek("/refs", "test_a") == 0
    assert registry.next("/refs", "test_a") == 1


def test_registry_concurrent_increments_are_a_permutation():
    registry = CounterRegistry()
    workers = 16
    calls = 400
    barrier = threading.Barrier(workers)

    def bump(_):
        barrier.wait()
        return [registry.next("/refs", "test_concurrent") for _ in range(calls // workers)]

    with ThreadPoolExecutor(max_workers=workers) as pool:
        results = [n for chunk in pool.map(bump, range(workers)) for n in chunk]

    assert sorted(results) == list(range(1, calls + 1))


# --- Identity ---


def test_resolve_identity_with_name_uses_sanitized_name():
    registry = CounterRegistry()
    identity = resolve_identity(
        source_file="/project/tests/TestRendering.py",
        test_name="test_render()",
        reference_dir="/project/References",
        registry=registry,
        name="dark mode!",
    )

    assert identity.discriminator == "dark-mode"
    assert identity.file_name == "testRendering.test_render.dark-mode"
    # Named snapshots leave the counters untouched
    assert len(registry) == 0


def test_resolve_identity_without_name_increments():
    registry = CounterRegistry()
    kwargs = dict(
        source_file="/project/tests/test_api.py",
        test_name="test_payload",
        reference_dir="/project/References",
        registry=registry,
    )

    first = resolve_identity(**kwargs)
    second = resolve_identity(**kwargs)

    assert first.file_name == "test_api.test_payload.1"
    assert second.file_name == "test_api.test_payload.2"


def test_identity_is_hashable_and_stable():
    a = SnapshotIdentity("/p/t.py", "test_x", "1")
    b = SnapshotIdentity("/p/t.py", "test_x", "1")
    assert a == b
    assert {a, b} == {a}
    assert a.file_name == b.file_name == "t.test_x.1"
