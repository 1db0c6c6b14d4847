"""
JSON strategy: snapshot JSON-serializable values as indented, key-sorted JSON.

Serialization goes through orjson; non-native types (Decimal, Path, ...) fall
back to str().
"""

from __future__ import annotations

import logging
from typing import Any

import orjson

from snapverify.core.snapshotting import Snapshotting
from snapverify.ports.strategy import DiffResult
from snapverify.strategies.text import line_diff

_LOGGER = logging.getLogger(__name__)

_OPTIONS = orjson.OPT_INDENT_2 | orjson.OPT_SORT_KEYS | orjson.OPT_NON_STR_KEYS


def _dumps(value: Any) -> str:
    return orjson.dumps(value, option=_OPTIONS, default=str).decode("utf-8")


def _canonical(text: str) -> str:
    # References written by hand may differ in whitespace only
    return _dumps(orjson.loads(text))


def _diff(reference: str, candidate: str) -> DiffResult:
    try:
        reference = _canonical(reference)
    except orjson.JSONDecodeError as exc:
        # Malformed reference: compare its raw text
        _LOGGER.debug(
            "json_reference_not_canonicalized",
            extra={"event": "json_reference_not_canonicalized", "error": str(exc)},
        )
    return line_diff(reference, candidate)


def json_strategy() -> Snapshotting[Any, str]:
    return Snapshotting(
        snapshot_fn=_dumps,
        to_bytes_fn=lambda text: text.encode("utf-8"),
        from_bytes_fn=lambda data: data.decode("utf-8"),
        diff_fn=_diff,
        file_extension="json",
    )
