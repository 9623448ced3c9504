"""Tests for tempo_lints.aggregate: severity counts and grouping."""
from conftest import make_issue

from tempo_lints.aggregate import (
    SeverityCounts,
    count_by_severity,
    group_by,
    group_by_file,
    group_by_rule,
    pluralize,
)


class TestCountBySeverity:
    def test_empty(self):
        assert count_by_severity([]) == SeverityCounts(error=0, warning=0, hint=0)

    def test_mixed(self):
        issues = [
            make_issue("a", severity="error"),
            make_issue("b", severity="error"),
            make_issue("c", severity="warning"),
            make_issue("d", severity="hint"),
        ]
        counts = count_by_severity(issues)
        assert counts == SeverityCounts(error=2, warning=1, hint=1)
        assert counts.total == len(issues)


class TestGrouping:
    def test_group_by_file_keeps_first_seen_order(self):
        issues = [
            make_issue("a", file="b.ts", line=1),
            make_issue("b", file="a.ts", line=2),
            make_issue("c", file="b.ts", line=3),
        ]
        grouped = group_by_file(issues)
        assert list(grouped) == ["b.ts", "a.ts"]
        assert [i.line for i in grouped["b.ts"]] == [1, 3]

    def test_group_by_rule(self):
        issues = [
            make_issue("no-console-log", line=1),
            make_issue("no-explicit-any", line=2),
            make_issue("no-console-log", line=3),
        ]
        grouped = group_by_rule(issues)
        assert list(grouped) == ["no-console-log", "no-explicit-any"]
        assert len(grouped["no-console-log"]) == 2

    def test_group_by_generic_key(self):
        assert group_by(["apple", "avocado", "banana"], lambda s: s[0]) == {
            "a": ["apple", "avocado"],
            "b": ["banana"],
        }

    def test_empty_input(self):
        assert group_by_file([]) == {}
        assert group_by_rule([]) == {}


class TestPluralize:
    def test_singular(self):
        assert pluralize(1, "issue") == "issue"

    def test_plural_default(self):
        assert pluralize(0, "issue") == "issues"
        assert pluralize(2, "issue") == "issues"

    def test_custom_plural(self):
        assert pluralize(3, "match", "matches") == "matches"
