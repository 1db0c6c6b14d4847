"""
Snapshot identity resolution.

A snapshot is identified by (source file, test name, discriminator). The
discriminator is either an explicit, sanitized name or a per-(reference
directory, test) counter starting at 1. Counters live in a CounterRegistry the
verifier owns; the embedding test harness resets it at test-case boundaries so
re-running a single test reproduces the same discriminator sequence.
"""

from __future__ import annotations

import logging
import re
import threading
from dataclasses import dataclass
from pathlib import Path
from typing import Optional, Union

_LOGGER = logging.getLogger(__name__)

_NON_WORD = re.compile(r"\W+")
_EDGE_SEPARATORS = re.compile(r"^-+|-+$")
_EMPTY_COMPONENT = "_"


def sanitize_path_component(text: str) -> str:
    """
    Collapse runs of non-word characters into "-" and trim them from both ends.

    Idempotent, and never returns an empty string or a path separator:
        "My Test!!" -> "My-Test"
        "!!!"       -> "_"
    """
    collapsed = _NON_WORD.sub("-", text)
    trimmed = _EDGE_SEPARATORS.sub("", collapsed)
    return trimmed or _EMPTY_COMPONENT


def file_name_prefix(source_file: Union[str, Path]) -> str:
    """Sanitized stem of the source file with its first character lower-cased."""
    stem = sanitize_path_component(Path(source_file).stem)
    return stem[:1].lower() + stem[1:]


CounterKey = tuple[str, str]


class CounterRegistry:
    """
    Mutex-guarded map from (reference directory, test name) to the last issued counter.

    All reads, increments and resets go through one lock, so concurrent callers
    sharing a key never observe the same value.
    """

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._counters: dict[CounterKey, int] = {}

    @staticmethod
    def _key(reference_dir: Union[str, Path], test_name: str) -> CounterKey:
        return (str(reference_dir), test_name)

    def next(self, reference_dir: Union[str, Path], test_name: str) -> int:
        key = self._key(reference_dir, test_name)
        with self._lock:
            value = self._counters.get(key, 0) + 1
            self._counters[key] = value
        return value

    def peek(self, reference_dir: Union[str, Path], test_name: str) -> int:
        """Last issued counter for the key, 0 if none."""
        with self._lock:
            return self._counters.get(self._key(reference_dir, test_name), 0)

    def reset(self) -> None:
        with self._lock:
            cleared = len(self._counters)
            self._counters = {}
        _LOGGER.debug(
            "counter_registry_reset",
            extra={"event": "counter_registry_reset", "keys_cleared": cleared},
        )

    def __len__(self) -> int:
        with self._lock:
            return len(self._counters)


@dataclass(frozen=True)
class SnapshotIdentity:
    source_file: str
    test_name: str
    discriminator: str

    @property
    def file_name(self) -> str:
        """`<prefix>.<test>.<discriminator>`, without extension."""
        prefix = file_name_prefix(self.source_file)
        test = sanitize_path_component(self.test_name)
        return f"{prefix}.{test}.{self.discriminator}"


def resolve_identity(
    *,
    source_file: Union[str, Path],
    test_name: str,
    reference_dir: Union[str, Path],
    registry: CounterRegistry,
    name: Optional[str] = None,
) -> SnapshotIdentity:
    """
    Build the identity for one verify call.

    The reference directory is only used as a registry key; no I/O happens here.
    """
    if name is not None:
        discriminator = sanitize_path_component(name)
    else:
        # Keyed on the raw test name, sanitization happens in file_name
        discriminator = str(registry.next(reference_dir, test_name))

    return SnapshotIdentity(
        source_file=str(source_file),
        test_name=test_name,
        discriminator=discriminator,
    )
