"""Shared fixtures for tempo_lints tests."""
import sys
from pathlib import Path

import pytest

ROOT = Path(__file__).parent.parent
FIXTURES = Path(__file__).parent / "fixtures"

# Allow running the suite from a checkout without installing the package.
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from tempo_lints.issues import Issue  # noqa: E402


def make_issue(
    rule_id: str = "no-console-log",
    *,
    severity: str = "warning",
    message: str = "Avoid console.log",
    file: str = "src/utils.ts",
    line: int = 10,
    column: int = 1,
    code: str | None = None,
) -> Issue:
    return Issue(
        rule_id=rule_id,
        severity=severity,
        message=message,
        file=file,
        line=line,
        column=column,
        code=code,
    )


@pytest.fixture
def rules_root(tmp_path: Path) -> Path:
    """A minimal rule tree: one shared and one language rule per language."""
    root = tmp_path / "rules"
    layout = {
        "shared/rust/no-fixme.yml": "id: no-fixme-rust\nlanguage: rust\nseverity: hint\nmessage: m\nrule:\n  kind: line_comment\n",
        "rust/no-dbg-macro.yml": "id: no-dbg-macro\nlanguage: rust\nseverity: error\nmessage: m\nrule:\n  pattern: dbg!($$$)\n",
        "shared/typescript/no-fixme.yml": "id: no-fixme-ts\nlanguage: typescript\nseverity: hint\nmessage: m\nrule:\n  kind: comment\n",
        "typescript/no-console-log.yml": "id: no-console-log\nlanguage: typescript\nseverity: warning\nmessage: m\nrule:\n  pattern: console.log($$$)\n",
    }
    for relative, content in layout.items():
        path = root / relative
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(content, encoding="utf-8")
    return root
