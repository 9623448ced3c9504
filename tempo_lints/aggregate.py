"""Severity counts and grouping over lint issues."""

from __future__ import annotations

from collections.abc import Callable, Iterable
from dataclasses import dataclass
from typing import TypeVar

from .issues import ERROR, WARNING, Issue

T = TypeVar("T")


@dataclass(frozen=True)
class SeverityCounts:
    error: int = 0
    warning: int = 0
    hint: int = 0

    @property
    def total(self) -> int:
        return self.error + self.warning + self.hint


def count_by_severity(issues: Iterable[Issue]) -> SeverityCounts:
    """Tally issues as error, warning, or hint (anything else)."""
    error = warning = hint = 0
    for issue in issues:
        if issue.severity == ERROR:
            error += 1
        elif issue.severity == WARNING:
            warning += 1
        else:
            hint += 1
    return SeverityCounts(error=error, warning=warning, hint=hint)


def group_by(items: Iterable[T], key: Callable[[T], str]) -> dict[str, list[T]]:
    """Group items by key, keeping first-seen key order and item order."""
    grouped: dict[str, list[T]] = {}
    for item in items:
        grouped.setdefault(key(item), []).append(item)
    return grouped


def group_by_file(issues: Iterable[Issue]) -> dict[str, list[Issue]]:
    return group_by(issues, lambda issue: issue.file)


def group_by_rule(issues: Iterable[Issue]) -> dict[str, list[Issue]]:
    return group_by(issues, lambda issue: issue.rule_id)


def pluralize(count: int, singular: str, plural: str | None = None) -> str:
    """Pick the singular or plural form for ``count``."""
    if count == 1:
        return singular
    return plural if plural is not None else f"{singular}s"
