"""Normalization of ast-grep JSON matches into lint issues.

ast-grep emits one object per match with most fields optional. Every match
becomes exactly one ``Issue`` with all fields populated; the names of fields
that fell back to a default are kept on ``NormalizedIssue.fallbacks``.
"""

from __future__ import annotations

import json
from collections.abc import Collection
from dataclasses import dataclass
from typing import Any, Literal

Severity = Literal["error", "warning", "hint"]

ERROR = "error"
WARNING = "warning"
HINT = "hint"

DEFAULT_RULE_ID = "unknown"
DEFAULT_SEVERITY: Severity = WARNING
DEFAULT_MESSAGE = "Lint issue"
DEFAULT_FILE = "unknown"

# Only the head of the array is shape-checked.
SCHEMA_SAMPLE_SIZE = 5


class LintOutputError(ValueError):
    """Engine output could not be turned into issues."""


class ParseError(LintOutputError):
    """Engine output is not valid JSON."""


class SchemaError(LintOutputError):
    """Engine output is JSON but not an array of lint matches."""


@dataclass(frozen=True)
class Issue:
    """One normalized rule violation."""
    rule_id: str
    severity: Severity
    message: str
    file: str
    line: int
    column: int
    code: str | None = None

    def to_dict(self) -> dict[str, Any]:
        """Serialize with ast-grep's camelCase keys; ``code`` only when present."""
        out: dict[str, Any] = {
            "ruleId": self.rule_id,
            "severity": self.severity,
            "message": self.message,
            "file": self.file,
            "line": self.line,
            "column": self.column,
        }
        if self.code is not None:
            out["code"] = self.code
        return out


@dataclass(frozen=True)
class NormalizedIssue:
    """An Issue plus the names of the fields that used a default."""
    issue: Issue
    fallbacks: tuple[str, ...] = ()

    @property
    def defaulted(self) -> bool:
        return bool(self.fallbacks)


def classify_severity(value: object) -> Severity | None:
    """Map a raw severity onto error/warning/hint; None when absent or not a string."""
    if not isinstance(value, str):
        return None
    if value == ERROR:
        return ERROR
    if value == WARNING:
        return WARNING
    return HINT


def _as_position(value: object) -> int | None:
    if isinstance(value, bool) or not isinstance(value, int):
        return None
    return value if value >= 1 else None


def _non_empty_str(value: object) -> str | None:
    if isinstance(value, str) and value.strip():
        return value
    return None


def _start_position(raw: dict[str, Any], key: str) -> int | None:
    rng = raw.get("range")
    if isinstance(rng, dict):
        start = rng.get("start")
        if isinstance(start, dict):
            pos = _as_position(start.get(key))
            if pos is not None:
                return pos
    # Already-normalized records carry line/column at the top level.
    return _as_position(raw.get(key))


def _first_note_line(raw: dict[str, Any]) -> str | None:
    note = _non_empty_str(raw.get("note"))
    if note is None:
        return None
    return _non_empty_str(note.strip().splitlines()[0])


def normalize_issue(raw: dict[str, Any]) -> NormalizedIssue:
    """Normalize one ast-grep match."""
    fallbacks: list[str] = []

    rule_id = _non_empty_str(raw.get("ruleId"))
    if rule_id is None:
        fallbacks.append("ruleId")
        rule_id = DEFAULT_RULE_ID

    severity = classify_severity(raw.get("severity"))
    if severity is None:
        fallbacks.append("severity")
        severity = DEFAULT_SEVERITY

    message = _non_empty_str(raw.get("message"))
    if message is None:
        fallbacks.append("message")
        message = _first_note_line(raw) or DEFAULT_MESSAGE

    file = _non_empty_str(raw.get("file"))
    if file is None:
        fallbacks.append("file")
        file = DEFAULT_FILE

    line = _start_position(raw, "line")
    if line is None:
        fallbacks.append("line")
        line = 1

    column = _start_position(raw, "column")
    if column is None:
        fallbacks.append("column")
        column = 1

    lines = raw.get("lines")
    if not isinstance(lines, str):
        lines = raw.get("code")
    code = lines.strip() if isinstance(lines, str) else None

    issue = Issue(
        rule_id=rule_id.strip(),
        severity=severity,
        message=message,
        file=file,
        line=line,
        column=column,
        code=code,
    )
    return NormalizedIssue(issue=issue, fallbacks=tuple(fallbacks))


def _is_match_array(value: object) -> bool:
    if not isinstance(value, list):
        return False
    for item in value[:SCHEMA_SAMPLE_SIZE]:
        # ruleId separates lint matches from parse errors and other entries.
        if not isinstance(item, dict) or "ruleId" not in item:
            return False
    return True


def parse_lint_issues(
    text: str,
    valid_rule_ids: Collection[str] | None = None,
) -> tuple[list[Issue], list[str]]:
    """Parse ast-grep ``--json`` output.

    Args:
        text: Raw stdout from the engine.
        valid_rule_ids: When given, issues for other rule ids are dropped and
            reported in the returned warnings.

    Returns:
        ``(issues, warnings)``

    Raises:
        ParseError: ``text`` is not valid JSON.
        SchemaError: the JSON value is not an array of lint matches.
    """
    try:
        data = json.loads(text)
    except json.JSONDecodeError as exc:
        raise ParseError(f"Failed to parse JSON: {exc}") from exc

    if not _is_match_array(data):
        raise SchemaError("Expected JSON array of lint results")

    issues: list[Issue] = []
    for raw in data:
        if not isinstance(raw, dict):
            raw = {}
        issues.append(normalize_issue(raw).issue)

    warnings: list[str] = []
    if valid_rule_ids is not None:
        kept: list[Issue] = []
        for issue in issues:
            if issue.rule_id in valid_rule_ids:
                kept.append(issue)
                continue
            warnings.append(f"Filtered out non-tempo lint issue: {issue.rule_id} in {issue.file}:{issue.line}")
        issues = kept

    return issues, warnings
