from __future__ import annotations

import hashlib
import sys
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Tuple

_DATACLASS_KWARGS = {"slots": True} if sys.version_info >= (3, 10) else {}


@dataclass(**_DATACLASS_KWARGS)
class RawBlock:
    tag: str
    start_line: int
    lines: List[str] = field(default_factory=list)


@dataclass(**_DATACLASS_KWARGS)
class TaskMetadata:
    category: str = ""
    issue: int = 0
    estimate: float = 0.0
    # (code, message) for values that were present but could not be parsed.
    warnings: List[Tuple[str, str]] = field(default_factory=list)


@dataclass(**_DATACLASS_KWARGS)
class TaskRecord:
    """A task parsed from an annotated comment block. ``estimate`` is in hours."""

    type: str
    title: str
    file: str
    line: int
    body: str = ""
    issue: int = 0
    category: str = ""
    estimate: float = 0.0

    @property
    def fingerprint(self) -> str:
        hasher = hashlib.md5()
        hasher.update(self.title.encode("utf-8"))
        hasher.update(self.body.encode("utf-8"))
        return hasher.hexdigest()

    def to_dict(self) -> Dict[str, Any]:
        payload: Dict[str, Any] = {
            "type": self.type,
            "title": self.title,
            "body": self.body,
            "file": self.file,
            "line": self.line,
        }
        if self.issue:
            payload["issue"] = self.issue
        if self.category:
            payload["category"] = self.category
        if self.estimate:
            payload["estimate"] = self.estimate
        return payload


@dataclass(**_DATACLASS_KWARGS)
class ParseIssue:
    path: str
    code: str
    message: str


@dataclass(**_DATACLASS_KWARGS)
class ScanResult:
    records: List[TaskRecord] = field(default_factory=list)
    issues: List[ParseIssue] = field(default_factory=list)
    summary: Dict[str, int] = field(default_factory=dict)

    def sorted_records(self) -> List[TaskRecord]:
        # Scans finish in arbitrary order; sort only for presentation.
        return sorted(self.records, key=lambda record: (record.file, record.line, record.title))


@dataclass(slots=True)
class ScanPreferences:
    """
    Options for a single scan run.

    ``filters`` are regular expressions searched against the full path of
    each candidate file; an empty list accepts every file. ``max_workers``
    bounds the number of files scanned concurrently (None lets the
    executor pick its default).
    """

    filters: List[str] = field(default_factory=list)
    excluded_dirs: Optional[List[str]] = None
    min_words: int = 3
    min_chars: int = 30
    max_workers: Optional[int] = None
