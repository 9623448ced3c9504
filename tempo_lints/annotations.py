"""GitHub Actions output: workflow-command annotations and a plain summary."""

from __future__ import annotations

from collections.abc import Sequence
from pathlib import Path

from .aggregate import count_by_severity
from .issues import ERROR, WARNING, Issue

RULE = "=" * 40

_PREFIX = {ERROR: "[ERROR]", WARNING: "[WARN]"}


def annotation_level(severity: str) -> str:
    """Workflow commands only know error and warning; hints ride on warning."""
    return "error" if severity == ERROR else "warning"


def _escape_property(value: str) -> str:
    return (
        value.replace("%", "%25")
        .replace("\r", "%0D")
        .replace("\n", "%0A")
        .replace(":", "%3A")
        .replace(",", "%2C")
    )


def _escape_data(value: str) -> str:
    return value.replace("%", "%25").replace("\r", "%0D").replace("\n", "%0A")


def format_annotation(issue: Issue) -> str:
    """One ``::level file=..,line=..,col=..::rule: message`` workflow command."""
    return (
        f"::{annotation_level(issue.severity)} "
        f"file={_escape_property(issue.file)},line={issue.line},col={issue.column}"
        f"::{_escape_data(f'{issue.rule_id}: {issue.message}')}"
    )


def render_github_action(issues: Sequence[Issue]) -> list[str]:
    """Annotation lines followed by the human-readable results block."""
    counts = count_by_severity(issues)
    lines = [format_annotation(issue) for issue in issues]
    lines.extend(
        [
            "",
            RULE,
            "Tempo Lint Results",
            RULE,
            f"Total issues: {len(issues)}",
            f"Errors: {counts.error}",
            f"Warnings: {counts.warning}",
            f"Hints: {counts.hint}",
            "",
        ]
    )
    if not issues:
        lines.append("No lint issues found!")
        return lines
    for issue in issues:
        lines.append(f"{_PREFIX.get(issue.severity, '[HINT]')} {issue.file}:{issue.line}")
        lines.append(f"[{issue.rule_id}] {issue.message}")
        lines.append("")
    return lines


def write_github_output(path: Path, issues: Sequence[Issue]) -> None:
    """Append step outputs (``total_issues``, ``has_errors``) to the GITHUB_OUTPUT file."""
    has_errors = count_by_severity(issues).error > 0
    with path.open("a", encoding="utf-8") as fh:
        fh.write(f"total_issues={len(issues)}\n")
        fh.write(f"has_errors={'true' if has_errors else 'false'}\n")
