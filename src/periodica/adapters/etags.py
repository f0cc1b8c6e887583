"""Etag generators used by the blob store adapters.

- `UlidEtagGenerator`: the default. Etags are monotonic ULIDs, so two writes
  in the same millisecond still get distinct tokens.
- `CountingEtagGenerator`: ``0...01``, ``0...02``, ... for tests that assert
  on exact etags.

Both are safe to share between threads; the SQL and memory stores call them
from whichever thread is writing.
"""

import itertools
import threading

from ulid import monotonic

from periodica.interfaces.etags import EtagGenerator

__all__ = ["CountingEtagGenerator", "UlidEtagGenerator"]

# pylint: disable=too-few-public-methods

ETAG_WIDTH = 26


class UlidEtagGenerator(EtagGenerator):
    """Etags from ``ulid.monotonic``."""

    def __init__(self) -> None:
        self._lock = threading.Lock()

    def new_etag(self) -> str:
        with self._lock:
            return str(monotonic.new())


class CountingEtagGenerator(EtagGenerator):
    """Zero-padded decimal counter starting at 1.

    Args:
        width: Number of digits; defaults to the length of a ULID so both
            generators produce etags that fit the same column.
    """

    def __init__(self, width: int = ETAG_WIDTH) -> None:
        self._width = width
        self._counter = itertools.count(1)
        self._lock = threading.Lock()

    def new_etag(self) -> str:
        with self._lock:
            return str(next(self._counter)).zfill(self._width)
