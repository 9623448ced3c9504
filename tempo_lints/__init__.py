"""Shared ast-grep lint rules for Tempo projects, plus the runner and reporters around them."""

__version__ = "0.3.0"

from .aggregate import SeverityCounts, count_by_severity, group_by_file, group_by_rule
from .comment import COMMENT_MARKER, generate_comment_body
from .config import ConfigurationError, Settings
from .exclusions import ExclusionResult, filter_excluded_rules
from .issues import Issue, NormalizedIssue, ParseError, SchemaError, normalize_issue, parse_lint_issues

__all__ = [
    "COMMENT_MARKER",
    "ConfigurationError",
    "ExclusionResult",
    "Issue",
    "NormalizedIssue",
    "ParseError",
    "SchemaError",
    "SeverityCounts",
    "Settings",
    "count_by_severity",
    "filter_excluded_rules",
    "generate_comment_body",
    "group_by_file",
    "group_by_rule",
    "normalize_issue",
    "parse_lint_issues",
]
