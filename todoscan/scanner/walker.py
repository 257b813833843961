from __future__ import annotations

import enum
import logging
import os
import re
from pathlib import Path
from typing import Callable, Iterable, Iterator, Optional, Sequence, Tuple

from .errors import ScannerError

logger = logging.getLogger(__name__)

# Tool, VCS and dependency folders; skipped only when a caller asks for it.
COMMON_EXCLUDED_DIRS = frozenset({
    ".git",
    ".hg",
    ".svn",
    "__pycache__",
    "node_modules",
    ".venv",
    "venv",
    ".tox",
    ".idea",
    ".vscode",
})


class EntryKind(enum.Enum):
    FILE = "file"
    DIRECTORY = "directory"
    SYMLINK = "symlink"
    OTHER = "other"


def _entry_kind(entry: os.DirEntry) -> EntryKind:
    if entry.is_symlink():
        return EntryKind.SYMLINK
    if entry.is_dir(follow_symlinks=False):
        return EntryKind.DIRECTORY
    if entry.is_file(follow_symlinks=False):
        return EntryKind.FILE
    return EntryKind.OTHER


def walk_tree(
    root: Path,
    *,
    excluded_dirs: Optional[Iterable[str]] = None,
    on_error: Optional[Callable[[str, OSError], None]] = None,
) -> Iterator[Tuple[Path, EntryKind]]:
    """
    Yield ``(path, kind)`` for every entry below ``root``.

    Errors on individual entries are handed to ``on_error`` and skipped, so
    an unreadable directory never aborts the walk. Symlinks are reported but
    not followed. Directories whose name is in ``excluded_dirs`` are neither
    reported nor descended into; by default nothing is excluded.
    """
    excluded = set(excluded_dirs or ())
    pending = [Path(root)]

    while pending:
        directory = pending.pop()
        try:
            with os.scandir(directory) as entries:
                children = list(entries)
        except OSError as exc:
            logger.debug(f"Cannot list {directory}: {exc}")
            if on_error is not None:
                on_error(str(directory), exc)
            continue

        for entry in children:
            try:
                kind = _entry_kind(entry)
            except OSError as exc:
                if on_error is not None:
                    on_error(entry.path, exc)
                continue
            path = Path(entry.path)
            if kind is EntryKind.DIRECTORY:
                if entry.name in excluded:
                    continue
                pending.append(path)
            yield path, kind


def compile_filters(patterns: Sequence[str]) -> list[re.Pattern[str]]:
    compiled = []
    for pattern in patterns:
        try:
            compiled.append(re.compile(pattern))
        except re.error as exc:
            raise ScannerError(f"Invalid filter pattern {pattern!r}: {exc}", "INVALID_FILTER") from exc
    return compiled


def matches_filters(path: str, filters: Sequence[re.Pattern[str]]) -> bool:
    """A path qualifies when any filter matches it, or when there are no filters."""
    if not filters:
        return True
    return any(pattern.search(path) for pattern in filters)
