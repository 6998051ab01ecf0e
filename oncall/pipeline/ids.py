"""Per-owner id sequences."""

import itertools


class IdSequence:
    """Monotonic ids such as ``ticket-1``, ``ticket-2``.

    Each session owns its own sequences, so ids are unique and ordered
    within a session without any module-level counter.
    """

    def __init__(self, prefix: str, start: int = 1):
        self.prefix = prefix
        self._counter = itertools.count(start)

    def next_id(self) -> str:
        return f"{self.prefix}-{next(self._counter)}"
