"""Runtime settings resolved from the environment.

Components take a ``Settings`` value instead of reading module globals, so
tests can point them at temporary rule trees and fake binaries.
"""

from __future__ import annotations

import os
from collections.abc import Mapping
from dataclasses import dataclass, field
from pathlib import Path

PACKAGE_ROOT = Path(__file__).resolve().parent
DEFAULT_RULES_ROOT = PACKAGE_ROOT / "rules"
DEFAULT_API_URL = "https://api.github.com"
DEFAULT_HTTP_TIMEOUT = 30.0


class ConfigurationError(RuntimeError):
    """A required setting, credential, or argument is missing or invalid."""


def _optional_path(value: str | None) -> Path | None:
    text = (value or "").strip()
    return Path(text) if text else None


def _optional_str(value: str | None) -> str | None:
    text = (value or "").strip()
    return text or None


def _positive_float(value: str | None, name: str, default: float) -> float:
    text = (value or "").strip()
    if not text:
        return default
    try:
        parsed = float(text)
    except ValueError:
        raise ConfigurationError(f"{name}: expected a number, got {text!r}") from None
    if parsed <= 0:
        raise ConfigurationError(f"{name}: must be greater than zero")
    return parsed


@dataclass(frozen=True)
class Settings:
    rules_root: Path = DEFAULT_RULES_ROOT
    engine: str | None = None
    api_url: str = DEFAULT_API_URL
    github_output: Path | None = None
    github_token: str | None = field(default=None, repr=False)
    http_timeout: float = DEFAULT_HTTP_TIMEOUT

    @classmethod
    def from_env(cls, environ: Mapping[str, str] | None = None) -> "Settings":
        """Build settings from environment variables (defaults to ``os.environ``)."""
        env = os.environ if environ is None else environ
        rules_root = _optional_path(env.get("TEMPO_LINTS_RULES_ROOT")) or DEFAULT_RULES_ROOT
        api_url = (_optional_str(env.get("GITHUB_API_URL")) or DEFAULT_API_URL).rstrip("/")
        return cls(
            rules_root=rules_root,
            engine=_optional_str(env.get("TEMPO_LINTS_AST_GREP")),
            api_url=api_url,
            github_output=_optional_path(env.get("GITHUB_OUTPUT")),
            github_token=_optional_str(env.get("GITHUB_TOKEN")),
            http_timeout=_positive_float(
                env.get("TEMPO_LINTS_HTTP_TIMEOUT"), "TEMPO_LINTS_HTTP_TIMEOUT", DEFAULT_HTTP_TIMEOUT
            ),
        )

    def require_token(self) -> str:
        """Return the GitHub token or raise ConfigurationError."""
        if not self.github_token:
            raise ConfigurationError("GITHUB_TOKEN environment variable is required")
        return self.github_token
