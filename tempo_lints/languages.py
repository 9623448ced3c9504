"""Language selectors and the rule directories each one maps to."""

from __future__ import annotations

from pathlib import Path
from typing import Any

import yaml

from .config import ConfigurationError

RUST = "rust"
TYPESCRIPT = "typescript"
ALL = "all"

VALID_LANGUAGES = (RUST, TYPESCRIPT, ALL)
RULE_LANGUAGES = (RUST, TYPESCRIPT)

VENDOR_DIR = ".ast-grep"


def is_valid_language(value: object) -> bool:
    return isinstance(value, str) and value in VALID_LANGUAGES


def languages_for(language: str) -> tuple[str, ...]:
    """Expand a selector into the concrete rule languages it covers."""
    if language == ALL:
        return RULE_LANGUAGES
    if language in RULE_LANGUAGES:
        return (language,)
    raise ValueError(f"Invalid language '{language}'. Must be one of: {', '.join(VALID_LANGUAGES)}")


def rule_dirs(language: str, rules_root: Path) -> list[Path]:
    """Absolute rule directories for ``language``: shared rules first, then language rules."""
    dirs: list[Path] = []
    for lang in languages_for(language):
        dirs.append(rules_root / "shared" / lang)
        dirs.append(rules_root / lang)
    return dirs


def rule_dirs_relative(language: str) -> list[str]:
    """Rule directories relative to a vendored project root."""
    dirs: list[str] = []
    for lang in languages_for(language):
        dirs.append(f"{VENDOR_DIR}/rules/shared/{lang}")
        dirs.append(f"{VENDOR_DIR}/rules/{lang}")
    return dirs


def _load_rule_documents(path: Path) -> list[Any]:
    try:
        return [doc for doc in yaml.safe_load_all(path.read_text(encoding="utf-8")) if doc is not None]
    except yaml.YAMLError as e:
        raise ConfigurationError(f"invalid YAML in {path}: {e}") from e


def rule_files(directory: Path) -> list[Path]:
    """Rule files in ``directory``, sorted by name. Missing directories yield nothing."""
    if not directory.is_dir():
        return []
    return sorted(p for p in directory.iterdir() if p.is_file() and p.suffix in {".yml", ".yaml"})


def valid_rule_ids(language: str, rules_root: Path) -> set[str]:
    """Collect the ``id`` of every rule shipped for ``language``."""
    ids: set[str] = set()
    for directory in rule_dirs(language, rules_root):
        for path in rule_files(directory):
            for doc in _load_rule_documents(path):
                if not isinstance(doc, dict):
                    continue
                rule_id = doc.get("id")
                if isinstance(rule_id, str) and rule_id.strip():
                    ids.add(rule_id.strip())
    return ids
