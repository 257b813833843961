from __future__ import annotations

from typing import List, Optional, Sequence

from .errors import NotMetadataError
from .metadata import parse_metadata
from .models import ParseIssue, RawBlock, TaskRecord


def build_record(
    path: str,
    line: int,
    tag: str,
    lines: Sequence[str],
    *,
    issues: Optional[List[ParseIssue]] = None,
) -> Optional[TaskRecord]:
    """
    Turn the lines of a block into a TaskRecord.

    The first line is the title. The second line is consumed as metadata when
    it parses as such; every remaining line forms the body.
    """
    if not lines:
        return None

    record = TaskRecord(type=tag, title=lines[0], file=path, line=line)
    if len(lines) == 1:
        return record

    try:
        metadata = parse_metadata(lines[1])
    except NotMetadataError:
        body_lines = lines[1:]
    else:
        record.category = metadata.category
        record.issue = metadata.issue
        record.estimate = metadata.estimate
        if issues is not None:
            for code, message in metadata.warnings:
                issues.append(ParseIssue(path=path, code=code, message=f"line {line}: {message}"))
        body_lines = lines[2:]

    record.body = "\n".join(body_lines).strip()
    return record


def build_from_block(
    path: str, block: RawBlock, *, issues: Optional[List[ParseIssue]] = None
) -> Optional[TaskRecord]:
    return build_record(path, block.start_line, block.tag, block.lines, issues=issues)
