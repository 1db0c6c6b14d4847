from __future__ import annotations

import asyncio
from dataclasses import dataclass, replace
from typing import Any, Awaitable, Callable, Generic, Optional, TypeVar

from snapverify.ports.strategy import DiffResult

V = TypeVar("V")
F = TypeVar("F")
N = TypeVar("N")


def _never_degenerate(fmt: Any) -> bool:
    return False


def _no_difference(reference: Any, candidate: Any) -> None:
    return None


@dataclass(frozen=True)
class Snapshotting(Generic[V, F]):
    """
    Strategy built from plain callables; satisfies the Strategy port.

    key principles:
        - snapshot: value -> format (or a Future / awaitable of it)
        - to_bytes / from_bytes: round-trip codec for persistence
        - diff: None when equal, else (message, attachments)
        - difference / is_degenerate: optional hooks, off by default

    Derive strategies for other value types with pullback:
        lines().pullback(repr)  # snapshot any value by its repr
    """

    snapshot_fn: Callable[[V], Any]
    to_bytes_fn: Callable[[F], bytes]
    from_bytes_fn: Callable[[bytes], F]
    diff_fn: Callable[[F, F], DiffResult]
    file_extension: Optional[str] = None
    difference_fn: Callable[[F, F], Optional[F]] = _no_difference
    degenerate_fn: Callable[[F], bool] = _never_degenerate

    # --- Strategy port ---

    def snapshot(self, value: V) -> Any:
        return self.snapshot_fn(value)

    def to_bytes(self, fmt: F) -> bytes:
        return self.to_bytes_fn(fmt)

    def from_bytes(self, data: bytes) -> F:
        return self.from_bytes_fn(data)

    def diff(self, reference: F, candidate: F) -> DiffResult:
        return self.diff_fn(reference, candidate)

    def difference(self, reference: F, candidate: F) -> Optional[F]:
        return self.difference_fn(reference, candidate)

    def is_degenerate(self, fmt: F) -> bool:
        return self.degenerate_fn(fmt)

    # --- Combinators ---

    def pullback(self, transform: Callable[[N], V]) -> "Snapshotting[N, F]":
        """Snapshot values of a new type by transforming them into this strategy's input."""
        inner = self.snapshot_fn

        def snapshot_fn(value: N) -> Any:
            return inner(transform(value))

        return replace(self, snapshot_fn=snapshot_fn)  # type: ignore[return-value]

    def with_async(self, delay: float = 0.0) -> "Snapshotting[V, F]":
        """
        Wrap the snapshot function in a coroutine that completes after `delay` seconds.
        Useful to exercise asynchronous producers without a rendering pipeline.
        """
        inner = self.snapshot_fn

        def snapshot_fn(value: V) -> Awaitable[F]:
            async def produce() -> F:
                await asyncio.sleep(delay)
                return inner(value)

            return produce()

        return replace(self, snapshot_fn=snapshot_fn)

    def with_extension(self, file_extension: Optional[str]) -> "Snapshotting[V, F]":
        return replace(self, file_extension=file_extension)
