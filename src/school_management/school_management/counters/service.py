from __future__ import annotations

import logging

from ..core.constants import STUDENT_COUNTER_PREFIX, STUDENT_ID_PREFIX, STUDENT_SEQ_WIDTH
from .repository import CounterRepository

logger = logging.getLogger(__name__)


def format_student_id(year: int, seq: int) -> str:
    return f"{STUDENT_ID_PREFIX}-{year}-{seq:0{STUDENT_SEQ_WIDTH}d}"


class SequenceService:
    """Use case: mint human-readable identifiers from per-key counters."""

    def __init__(self, counters: CounterRepository):
        self._counters = counters

    def next_value(self, key: str) -> int:
        return int(self._counters.next_value(key))

    def next_student_id(self, admission_year: int) -> str:
        year = int(admission_year)
        seq = self.next_value(f"{STUDENT_COUNTER_PREFIX}-{year}")
        student_id = format_student_id(year, seq)
        logger.debug("Allocated %s", student_id)
        return student_id
