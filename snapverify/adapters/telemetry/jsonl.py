"""JSON Lines Telemetry adapter.

Implements the Telemetry port by appending structured JSON objects (one per
line) to a sink file. Writes are serialized so concurrent verify calls never
interleave partial lines.
"""

from __future__ import annotations

import threading
import uuid
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Callable, Mapping, Optional

import orjson


def _utc_now() -> datetime:
    return datetime.now(timezone.utc)


class JsonlTelemetry:
    def __init__(
        self,
        sink_path: Path,
        run_id: Optional[str] = None,
        clock: Callable[[], datetime] = _utc_now,
    ) -> None:
        self._sink_path = sink_path if isinstance(sink_path, Path) else Path(sink_path)
        self._run_id = str(run_id) if run_id is not None else uuid.uuid4().hex
        self._clock = clock
        self._lock = threading.Lock()

    @property
    def run_id(self) -> str:
        return self._run_id

    def log(self, event: str, **fields: Any) -> None:
        if not event:
            raise ValueError("telemetry event name must be non-empty")

        record: dict[str, Any] = {
            "event": event,
            "ts_utc": self._clock().isoformat(),
            "run_id": self._run_id,
            **fields,
        }
        self._write_record(record)

    def _write_record(self, record: Mapping[str, Any]) -> None:
        # default=str covers Paths and enums carried in fields
        payload = orjson.dumps(record, option=orjson.OPT_SORT_KEYS, default=str)
        with self._lock:
            self._sink_path.parent.mkdir(parents=True, exist_ok=True)
            with self._sink_path.open("ab") as handle:
                handle.write(payload + b"\n")
