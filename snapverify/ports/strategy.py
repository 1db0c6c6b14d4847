"""Strategy Port Interface.

Contract: turn a value into a comparable format, persist that format as bytes,
and diff two instances of it.

- snapshot(value) may return the format directly, a concurrent.futures.Future,
  or an awaitable. It must produce exactly one format or never complete; the
  caller enforces a timeout and never cancels abandoned work, so cleaning that
  up is the strategy's own responsibility.
- from_bytes(to_bytes(f)) must be diff-equivalent to f.
- diff returns None when reference and candidate are considered equal,
  otherwise a summary message and zero or more attachments.
"""

from __future__ import annotations

from concurrent.futures import Future
from typing import Awaitable, Optional, Protocol, TypeVar, Union

from snapverify.types.outcome import Attachment

Value = TypeVar("Value", contravariant=True)
Format = TypeVar("Format")

DiffResult = Optional[tuple[str, list[Attachment]]]


class Strategy(Protocol[Value, Format]):
    file_extension: Optional[str]

    def snapshot(self, value: Value) -> Union[Format, "Future[Format]", Awaitable[Format]]: ...

    def to_bytes(self, fmt: Format) -> bytes: ...

    def from_bytes(self, data: bytes) -> Format: ...

    def diff(self, reference: Format, candidate: Format) -> DiffResult: ...

    def difference(self, reference: Format, candidate: Format) -> Optional[Format]:
        """
        Optional secondary artifact (e.g. a visual diff) saved to Differences.
        Return None when the strategy has nothing to add.
        """
        ...

    def is_degenerate(self, fmt: Format) -> bool:
        """
        Compatibility shim: when both reference and candidate are degenerate
        (e.g. zero-sized renders), they are treated as equal. Default False.
        """
        ...
