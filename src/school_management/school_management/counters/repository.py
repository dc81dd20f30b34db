from __future__ import annotations

from typing import Protocol


class CounterRepository(Protocol):
    """Named monotonic counters.

    ``next_value`` must be a single atomic find-or-create-then-increment:
    two concurrent callers with the same name never get the same value.
    """

    def next_value(self, name: str) -> int:
        raise NotImplementedError
