"""
Timeout-bounded snapshot generation.

Runs a strategy's snapshot production and blocks the calling thread until it
completes or the timeout elapses. A timeout ends the wait, not the work: the
producer is never cancelled, and cleaning up abandoned work is the strategy's
own responsibility.
"""

from __future__ import annotations

import asyncio
import inspect
import logging
import threading
from concurrent.futures import CancelledError, Future
from concurrent.futures import TimeoutError as FutureTimeoutError
from typing import Any, Optional

from snapverify.config.configs import DEFAULT_TIMEOUT_S
from snapverify.errors.errors import GenerationFailedError, SnapshotTimeoutError
from snapverify.ports.strategy import Strategy

_LOGGER = logging.getLogger(__name__)


class _BackgroundLoop:
    """Single daemon thread running an event loop for awaitable producers."""

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._loop: Optional[asyncio.AbstractEventLoop] = None

    def get(self) -> asyncio.AbstractEventLoop:
        with self._lock:
            if self._loop is None or self._loop.is_closed():
                loop = asyncio.new_event_loop()
                thread = threading.Thread(
                    target=loop.run_forever,
                    name="snapverify-harness",
                    daemon=True,
                )
                thread.start()
                self._loop = loop
            return self._loop


_BACKGROUND = _BackgroundLoop()


async def _await(awaitable: Any) -> Any:
    return await awaitable


def _as_future(produced: Any) -> Optional["Future[Any]"]:
    if isinstance(produced, Future):
        return produced
    if inspect.isawaitable(produced):
        return asyncio.run_coroutine_threadsafe(_await(produced), _BACKGROUND.get())
    return None


def generate_snapshot(
    strategy: Strategy[Any, Any],
    value: Any,
    timeout: float = DEFAULT_TIMEOUT_S,
) -> Any:
    """
    Produce the strategy's format for `value`, waiting at most `timeout` seconds.

    Raises:
        SnapshotTimeoutError: the producer did not complete in time
        GenerationFailedError: the producer raised, was cancelled, or produced None
    """
    try:
        produced = strategy.snapshot(value)
    except Exception as exc:
        raise GenerationFailedError(component="harness", details={"cause": repr(exc)}) from exc

    future = _as_future(produced)
    if future is None:
        result = produced
    else:
        try:
            result = future.result(timeout=timeout)
        except FutureTimeoutError as exc:
            # A done future means the producer itself raised TimeoutError
            if future.done():
                raise GenerationFailedError(component="harness", details={"cause": repr(exc)}) from exc
            _LOGGER.warning(
                "snapshot_generation_timeout",
                extra={"event": "snapshot_generation_timeout", "timeout": timeout},
            )
            raise SnapshotTimeoutError(timeout, component="harness") from exc
        except CancelledError as exc:
            raise GenerationFailedError(component="harness", details={"cause": "cancelled"}) from exc
        except Exception as exc:
            raise GenerationFailedError(component="harness", details={"cause": repr(exc)}) from exc

    if result is None:
        raise GenerationFailedError(component="harness", details={"cause": "empty result"})
    return result
