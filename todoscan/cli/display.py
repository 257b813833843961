from __future__ import annotations

from typing import Any, Dict, Iterable, Mapping

from rich.markup import escape
from rich.table import Table

from ..scanner.models import ParseIssue, ScanResult, TaskRecord


def format_estimate(hours: float) -> str:
    """Show estimates as minutes below one hour, hours otherwise."""
    if not hours:
        return ""
    if hours < 1:
        return f"{hours * 60:.0f}m"
    return f"{hours:g}h"


def build_json_payload(result: ScanResult, environment: Mapping[str, str]) -> Dict[str, Any]:
    return {
        "root": environment.get("root", ""),
        "branch": environment.get("branch", ""),
        "author": environment.get("author", ""),
        "project": environment.get("project", ""),
        "comments": [record.to_dict() for record in result.sorted_records()],
    }


def render_records_table(records: Iterable[TaskRecord], *, title: str = "Tasks") -> Table:
    table = Table(title=title, highlight=False)
    table.add_column("Type")
    table.add_column("Location")
    table.add_column("Title")
    table.add_column("Category")
    table.add_column("Issue", justify="right")
    table.add_column("Estimate", justify="right")
    for record in records:
        table.add_row(
            record.type,
            escape(f"{record.file}:{record.line}"),
            escape(record.title),
            escape(record.category),
            str(record.issue) if record.issue else "",
            format_estimate(record.estimate),
        )
    return table


def render_issues_table(issues: Iterable[ParseIssue]) -> Table:
    table = Table(title="Issues", highlight=False)
    table.add_column("Code")
    table.add_column("Path")
    table.add_column("Message")
    for issue in issues:
        table.add_row(issue.code, escape(issue.path), escape(issue.message))
    return table


def render_summary(result: ScanResult, environment: Mapping[str, str]) -> str:
    summary = result.summary
    parts = [
        f"files_matched={summary.get('files_matched', 0)}",
        f"files_scanned={summary.get('files_scanned', 0)}",
        f"tasks={len(result.records)}",
        f"duplicates={summary.get('duplicates', 0)}",
        f"insubstantial={summary.get('insubstantial', 0)}",
    ]
    if summary.get("file_errors"):
        parts.append(f"file_errors={summary['file_errors']}")
    header = environment.get("project") or environment.get("root", "")
    branch = environment.get("branch")
    if branch:
        header = f"{header} ({branch})"
    return f"{header}: " + ", ".join(parts)
