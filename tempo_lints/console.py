"""Diagnostics written to stderr.

GitHub Actions turns ``::warning::`` lines into workflow annotations; outside
Actions a plain prefix keeps the output greppable.
"""

from __future__ import annotations

import sys

PREFIX = "[tempo-lints]"


def warn(message: str, *, github_action: bool = False) -> None:
    if github_action:
        print(f"::warning::{message}", file=sys.stderr)
    else:
        print(f"{PREFIX} warning: {message}", file=sys.stderr)


def error(message: str, *, github_action: bool = False) -> None:
    if github_action:
        print(f"::error::{message}", file=sys.stderr)
    else:
        print(f"{PREFIX} error: {message}", file=sys.stderr)


def info(message: str) -> None:
    print(message, file=sys.stderr)
