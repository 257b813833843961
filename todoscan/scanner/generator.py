"""
Scan a source tree for annotated comments and collect them as task records.

Files are scanned concurrently on a bounded thread pool. Each scan feeds its
lines through the block accumulator and record builder, then hands finished
records to the run's deduplicator, which is the only state shared between
scans.
"""

from __future__ import annotations

import logging
import os
from collections import Counter
from concurrent.futures import ThreadPoolExecutor
from pathlib import Path
from typing import List, Optional, Sequence

from ..services.dedup_service import Admission, TaskDeduplicator
from .blocks import iter_blocks
from .errors import FileOpenError, ScanRootError
from .models import ParseIssue, ScanPreferences, ScanResult
from .records import build_from_block
from .walker import EntryKind, compile_filters, matches_filters, walk_tree

logger = logging.getLogger(__name__)


class _FileScan:
    """Outcome of scanning one file."""

    __slots__ = ("issues", "counts")

    def __init__(self) -> None:
        self.issues: List[ParseIssue] = []
        self.counts: Counter = Counter()


class TodoGenerator:
    def __init__(self, root: Path | str, preferences: ScanPreferences | None = None) -> None:
        self.preferences = preferences or ScanPreferences()
        self.root = Path(root).expanduser().absolute()
        self.filters = compile_filters(self.preferences.filters)
        logger.info(f"Using {len(self.filters)} filters: {self.preferences.filters}")

    def candidate_files(self, issues: Optional[List[ParseIssue]] = None) -> List[Path]:
        def record_error(path: str, exc: OSError) -> None:
            if issues is not None:
                issues.append(ParseIssue(path=path, code="WALK_ERROR", message=str(exc)))

        candidates: List[Path] = []
        for path, kind in walk_tree(
            self.root, excluded_dirs=self.preferences.excluded_dirs, on_error=record_error
        ):
            if kind is EntryKind.DIRECTORY or kind is EntryKind.OTHER:
                continue
            if kind is EntryKind.SYMLINK and not path.is_file():
                continue
            if not matches_filters(str(path), self.filters):
                continue
            candidates.append(path)
        return candidates

    def generate(self) -> ScanResult:
        if not self.root.exists():
            raise ScanRootError(f"Scan root not found: {self.root}", "ROOT_NOT_FOUND")
        if not self.root.is_dir():
            raise ScanRootError(f"Scan root is not a directory: {self.root}", "ROOT_NOT_DIRECTORY")

        issues: List[ParseIssue] = []
        files = self.candidate_files(issues)
        logger.info(f"Matched files: {len(files)}")

        deduplicator = TaskDeduplicator(
            min_words=self.preferences.min_words,
            min_chars=self.preferences.min_chars,
        )
        counts: Counter = Counter()

        if files:
            workers = self.preferences.max_workers or default_worker_count()
            logger.debug(f"Scanning with {workers} workers")
            with ThreadPoolExecutor(max_workers=workers) as executor:
                futures = [executor.submit(self.scan_file, path, deduplicator) for path in files]
                # Results are collected in submission order; nothing depends on it.
                for future in futures:
                    outcome = future.result()
                    issues.extend(outcome.issues)
                    counts.update(outcome.counts)

        records = deduplicator.records
        summary = {
            "files_matched": len(files),
            "files_scanned": counts["files_scanned"],
            "blocks_found": counts["blocks_found"],
            "records_accepted": len(records),
            "duplicates": counts[Admission.DUPLICATE.value],
            "insubstantial": counts[Admission.INSUBSTANTIAL.value],
            "file_errors": counts["file_errors"],
        }
        logger.info(f"Found {len(records)} comments in {summary['files_scanned']} files")
        return ScanResult(records=records, issues=issues, summary=summary)

    def relative_path(self, path: Path) -> str:
        try:
            return str(path.relative_to(self.root))
        except ValueError:
            return str(path)

    def scan_file(self, path: Path, deduplicator: TaskDeduplicator) -> _FileScan:
        outcome = _FileScan()
        relative = self.relative_path(path)
        try:
            self._scan_lines(path, relative, deduplicator, outcome)
        except FileOpenError as exc:
            logger.warning(str(exc))
            outcome.counts["file_errors"] += 1
            outcome.issues.append(ParseIssue(path=relative, code=exc.code, message=str(exc)))
            return outcome
        outcome.counts["files_scanned"] += 1
        return outcome

    def _scan_lines(
        self, path: Path, relative: str, deduplicator: TaskDeduplicator, outcome: _FileScan
    ) -> None:
        try:
            handle = open(path, "rb")
        except OSError as exc:
            raise FileOpenError(f"Cannot open {relative}: {exc}", "FILE_OPEN_ERROR") from exc

        with handle:
            try:
                lines = (raw.decode("utf-8", errors="replace") for raw in handle)
                for block in iter_blocks(lines):
                    outcome.counts["blocks_found"] += 1
                    record = build_from_block(relative, block, issues=outcome.issues)
                    if record is None:
                        continue
                    admission = deduplicator.admit(record)
                    if admission is Admission.ACCEPTED:
                        continue
                    outcome.counts[admission.value] += 1
                    code = "DUPLICATE_RECORD" if admission is Admission.DUPLICATE else "INSUBSTANTIAL_RECORD"
                    outcome.issues.append(
                        ParseIssue(
                            path=relative,
                            code=code,
                            message=f"line {record.line}: {record.title}",
                        )
                    )
            except OSError as exc:
                raise FileOpenError(f"Cannot read {relative}: {exc}", "FILE_OPEN_ERROR") from exc


def generate_tasks(
    root: Path | str,
    *,
    filters: Sequence[str] = (),
    min_words: int = 3,
    min_chars: int = 30,
    max_workers: Optional[int] = None,
) -> ScanResult:
    preferences = ScanPreferences(
        filters=list(filters),
        min_words=min_words,
        min_chars=min_chars,
        max_workers=max_workers,
    )
    return TodoGenerator(root, preferences).generate()


def default_worker_count() -> int:
    return min(32, (os.cpu_count() or 1) + 4)
