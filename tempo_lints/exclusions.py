"""Rule exclusion (``--exclude``)."""

from __future__ import annotations

from collections.abc import Iterable, Sequence
from dataclasses import dataclass, field

from .issues import Issue


@dataclass(frozen=True)
class ExclusionResult:
    """Issues left after exclusion, plus warnings for exclusions that matched nothing."""
    filtered: list[Issue]
    warnings: list[str] = field(default_factory=list)


def parse_exclude_option(value: str | None) -> list[str]:
    """Split a comma-separated ``--exclude`` value, dropping blanks."""
    if not value:
        return []
    return [part.strip() for part in value.split(",") if part.strip()]


def filter_excluded_rules(issues: Sequence[Issue], exclude_rules: Iterable[str]) -> ExclusionResult:
    """Drop issues for excluded rules and warn about exclusions that matched nothing."""
    exclude = list(dict.fromkeys(exclude_rules))
    if not exclude:
        return ExclusionResult(filtered=list(issues))

    found = {issue.rule_id for issue in issues}
    warnings = [
        f'Excluded rule "{rule_id}" was not found in results (possible typo?)'
        for rule_id in exclude
        if rule_id not in found
    ]
    excluded = set(exclude)
    filtered = [issue for issue in issues if issue.rule_id not in excluded]
    return ExclusionResult(filtered=filtered, warnings=warnings)
