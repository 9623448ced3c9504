"""Render the lint results PR comment.

The body always carries ``COMMENT_MARKER`` so a later run can find and update
the same comment instead of posting a new one.
"""

from __future__ import annotations

import html
from collections.abc import Sequence

from .aggregate import count_by_severity, group_by_file, group_by_rule, pluralize
from .issues import Issue
from .markdown import details_block, location_link, severity_icon, severity_label

COMMENT_MARKER = "<!-- tempo-lints-comment -->"
PROJECT_URL = "https://github.com/stripe/tempo-lints"

MAX_ISSUES_PER_RULE = 10
MAX_ISSUES_PER_FILE = 5
MAX_FILES_TO_DISPLAY = 10


def _footer() -> list[str]:
    return ["---", f"*Posted by [Tempo Lints]({PROJECT_URL})* {COMMENT_MARKER}"]


def _more_line(shown: int, total: int, noun: str) -> list[str]:
    if total > shown:
        remaining = total - shown
        return [f"- _...and {remaining} more {pluralize(remaining, noun)}_"]
    return []


def _ranked(groups: dict[str, list[Issue]]) -> list[tuple[str, list[Issue]]]:
    # sorted() is stable, so equal-sized groups keep encounter order.
    return sorted(groups.items(), key=lambda item: -len(item[1]))


def render_success() -> str:
    """Body for a run with no issues."""
    lines = [
        COMMENT_MARKER,
        "## ✅ Tempo Lint Results",
        "",
        "No lint issues found! Great job! 🎉",
        "",
        *_footer(),
    ]
    return "\n".join(lines)


def render_severity_table(issues: Sequence[Issue]) -> list[str]:
    counts = count_by_severity(issues)
    lines = ["| Severity | Count |", "|----------|-------|"]
    for severity, count in (("error", counts.error), ("warning", counts.warning), ("hint", counts.hint)):
        lines.append(f"| {severity_icon(severity)} {severity_label(severity)} | {count} |")
    return lines


def render_rule_section(
    issues: Sequence[Issue],
    *,
    server: str = "",
    repo: str = "",
    sha: str = "",
) -> list[str]:
    lines = ["### Issues by Rule", ""]
    for rule_id, group in _ranked(group_by_rule(issues)):
        shown = group[:MAX_ISSUES_PER_RULE]
        body = [
            f"- {location_link(issue.file, issue.line, server=server, repo=repo, sha=sha)} — {issue.message}"
            for issue in shown
        ]
        body.extend(_more_line(len(shown), len(group), "issue"))
        summary = f"<code>{html.escape(rule_id)}</code> ({len(group)} {pluralize(len(group), 'issue')})"
        lines.extend(details_block(body, summary=summary))
        lines.append("")
    return lines


def render_file_section(issues: Sequence[Issue]) -> list[str]:
    ranked = _ranked(group_by_file(issues))
    lines = ["### Issues by File", ""]
    if len(ranked) > MAX_FILES_TO_DISPLAY:
        lines.extend([f"_Showing {MAX_FILES_TO_DISPLAY} of {len(ranked)} files._", ""])
    for file, group in ranked[:MAX_FILES_TO_DISPLAY]:
        shown = group[:MAX_ISSUES_PER_FILE]
        body = [
            f"- Line {issue.line}: {severity_icon(issue.severity)} {issue.severity} `{issue.rule_id}`"
            for issue in shown
        ]
        body.extend(_more_line(len(shown), len(group), "issue"))
        summary = f"<code>{html.escape(file)}</code> ({len(group)} {pluralize(len(group), 'issue')})"
        lines.extend(details_block(body, summary=summary))
        lines.append("")
    return lines


def generate_comment_body(
    issues: Sequence[Issue],
    total_issues_count: int,
    *,
    server: str = "",
    repo: str = "",
    sha: str = "",
) -> str:
    """Build the markdown body for the PR comment.

    ``total_issues_count`` is the headline number; it may differ from
    ``len(issues)`` when only part of the results could be read.
    """
    if total_issues_count == 0:
        return render_success()

    file_count = len(group_by_file(issues))
    lines = [
        COMMENT_MARKER,
        "## 🔍 Tempo Lint Results",
        "",
        "### Summary",
        "",
        (
            f"Found **{total_issues_count}** {pluralize(total_issues_count, 'issue')} "
            f"in **{file_count}** {pluralize(file_count, 'file')}."
        ),
        "",
        *render_severity_table(issues),
        "",
    ]
    if issues:
        lines.extend(render_rule_section(issues, server=server, repo=repo, sha=sha))
        lines.extend(render_file_section(issues))
    else:
        lines.extend(["_Issue details are unavailable for this run._", ""])
    lines.extend(_footer())
    return "\n".join(lines)
