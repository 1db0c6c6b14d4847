from datetime import datetime, timezone
from pathlib import Path

import orjson
import pytest

from snapverify.adapters.telemetry.jsonl import JsonlTelemetry


def _read_records(path):
    content = path.read_bytes().strip()
    assert content, "expected telemetry sink to contain at least one record"
    return [orjson.loads(line) for line in content.splitlines()]


def test_jsonl_telemetry_writes_one_record_per_event(tmp_path):
    sink = tmp_path / "nested" / "events.log.jsonl"
    telemetry = JsonlTelemetry(
        sink_path=sink,
        run_id="run_2",
        clock=lambda: datetime(2025, 1, 2, tzinfo=timezone.utc),
    )

    telemetry.log("snapshot_passed", test_name="test_a", snapshot="t.test_a.1")
    telemetry.log("snapshot_mismatch", path=Path("/x/y"))

    first, second = _read_records(sink)
    assert first["event"] == "snapshot_passed"
    assert first["run_id"] == "run_2"
    assert first["ts_utc"] == "2025-01-02T00:00:00+00:00"
    assert first["snapshot"] == "t.test_a.1"
    assert second["path"] == "/x/y"


def test_run_id_generated_when_missing(tmp_path):
    telemetry = JsonlTelemetry(sink_path=tmp_path / "events.jsonl")
    assert len(telemetry.run_id) == 32


def test_log_rejects_blank_event(tmp_path):
    telemetry = JsonlTelemetry(sink_path=tmp_path / "events.jsonl")
    with pytest.raises(ValueError):
        telemetry.log("")
