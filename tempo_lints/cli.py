"""``tempo-lints`` command line.

    tempo-lints <language> [path] [--exclude a,b] [--json] [--fix] [--github-action]
    tempo-lints vendor --lang <language> --dest <path>
"""

from __future__ import annotations

import argparse
import sys
from pathlib import Path

from . import __version__, console
from .config import ConfigurationError, Settings
from .exclusions import parse_exclude_option
from .languages import VALID_LANGUAGES, is_valid_language
from .runner import ScanOptions, scan
from .vendor import vendor_rules

PROG = "tempo-lints"


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog=PROG,
        description="Shared ast-grep lint rules for Tempo projects",
        epilog=f"Vendor rules into a project with: {PROG} vendor --lang <language> --dest <path>",
    )
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    parser.add_argument("language", help=f"Language to lint: {', '.join(VALID_LANGUAGES)}")
    parser.add_argument("path", nargs="?", default=".", help="Path to scan (default: .)")
    parser.add_argument("--exclude", default="", help="Comma-separated list of rules to exclude")
    parser.add_argument("--json", action="store_true", help="Output results as JSON")
    parser.add_argument("--fix", action="store_true", help="Apply auto-fixes where available")
    parser.add_argument(
        "--github-action",
        action="store_true",
        help="Output in GitHub Actions format with annotations",
    )
    return parser


def build_vendor_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog=f"{PROG} vendor",
        description="Copy lint rules to a destination project for offline/locked usage",
    )
    parser.add_argument(
        "--lang", required=True, help=f"Language rules to vendor: {', '.join(VALID_LANGUAGES)}"
    )
    parser.add_argument("--dest", required=True, help="Destination project path")
    return parser


def run_vendor(args: argparse.Namespace, settings: Settings) -> int:
    if not is_valid_language(args.lang):
        console.error(f"Invalid language '{args.lang}'. Must be one of: {', '.join(VALID_LANGUAGES)}")
        return 1
    try:
        vendor_rules(args.lang, Path(args.dest), settings.rules_root)
    except OSError as exc:
        console.error(f"vendoring failed: {exc}")
        return 1
    return 0


def run_scan(args: argparse.Namespace, settings: Settings) -> int:
    options = ScanOptions(
        json=args.json,
        fix=args.fix,
        github_action=args.github_action,
        exclude=tuple(parse_exclude_option(args.exclude)),
    )
    return scan(args.language, args.path, options, settings)


def main(argv: list[str] | None = None) -> int:
    argv = sys.argv[1:] if argv is None else argv
    try:
        settings = Settings.from_env()
        if argv and argv[0] == "vendor":
            return run_vendor(build_vendor_parser().parse_args(argv[1:]), settings)
        return run_scan(build_parser().parse_args(argv), settings)
    except ConfigurationError as exc:
        console.error(str(exc))
        return 1


if __name__ == "__main__":
    raise SystemExit(main())
