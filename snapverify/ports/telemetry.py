"""Telemetry Port Interface.

Contract: Log structured verification events (one per verify call), so external
tooling can diff whole test runs.
"""
from __future__ import annotations
from typing import Protocol, Any

class Telemetry(Protocol):
    def log(self, event: str, **fields: Any) -> None: ...
