"""Thread-safe admission of task records: duplicate and substantiveness checks."""

from __future__ import annotations

import enum
import logging
import threading
from typing import List, Set

from ..scanner.models import TaskRecord

logger = logging.getLogger(__name__)

# Tokens of this length or shorter do not count as words in a title.
_SHORT_WORD_LENGTH = 2


class Admission(enum.Enum):
    ACCEPTED = "accepted"
    DUPLICATE = "duplicate"
    INSUBSTANTIAL = "insubstantial"


def count_title_words(title: str) -> int:
    return sum(1 for word in title.split() if len(word) > _SHORT_WORD_LENGTH)


class TaskDeduplicator:
    """
    Collects records from concurrent file scans.

    Records with the same title and body collapse to one, whichever file or
    line they came from. Records whose title is too short are rejected.
    One instance belongs to one scan run.
    """

    def __init__(self, *, min_words: int = 3, min_chars: int = 30) -> None:
        self.min_words = min_words
        self.min_chars = min_chars
        self._lock = threading.Lock()
        self._fingerprints: Set[str] = set()
        self._records: List[TaskRecord] = []

    def is_substantial(self, record: TaskRecord) -> bool:
        return count_title_words(record.title) >= self.min_words or len(record.title) >= self.min_chars

    def admit(self, record: TaskRecord) -> Admission:
        fingerprint = record.fingerprint

        with self._lock:
            if fingerprint in self._fingerprints:
                logger.debug(f"Skipping comment duplicate in {record.file}:{record.line}")
                return Admission.DUPLICATE

            if not self.is_substantial(record):
                logger.debug(f"Ignoring comment in {record.file}:{record.line}")
                return Admission.INSUBSTANTIAL

            self._fingerprints.add(fingerprint)
            self._records.append(record)
            return Admission.ACCEPTED

    @property
    def records(self) -> List[TaskRecord]:
        with self._lock:
            return list(self._records)

    def __len__(self) -> int:
        with self._lock:
            return len(self._records)
