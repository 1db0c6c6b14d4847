"""
Built-in snapshot strategies.

- lines / description: text, unified diff
- json_strategy: JSON via orjson
- dataframe: polars frames as CSV
- data: raw bytes

Build your own with snapverify.core.snapshotting.Snapshotting, or derive one
for a new value type with .pullback(transform).
"""

from snapverify.strategies.frame import dataframe
from snapverify.strategies.json import json_strategy
from snapverify.strategies.raw import data
from snapverify.strategies.text import description, lines

__all__ = [
    "data",
    "dataframe",
    "description",
    "json_strategy",
    "lines",
]
