"""Run ast-grep against a path and turn its output into a lint verdict."""

from __future__ import annotations

import json
import shutil
import signal
import subprocess
import sys
from collections.abc import Iterator, Sequence
from contextlib import contextmanager
from dataclasses import dataclass
from pathlib import Path

from . import console
from .aggregate import count_by_severity
from .annotations import render_github_action, write_github_output
from .config import Settings
from .exclusions import filter_excluded_rules
from .issues import Issue, LintOutputError, parse_lint_issues
from .languages import VALID_LANGUAGES, is_valid_language, rule_dirs, valid_rule_ids
from .sgconfig import temp_config

ENGINE_NAMES = ("ast-grep", "sg")
INSTALL_HINT = "Make sure ast-grep is installed: npm install -g @ast-grep/cli (or cargo install ast-grep)"


class SubprocessLaunchError(RuntimeError):
    """The engine binary is missing or cannot be executed."""


class Interrupted(Exception):
    """SIGINT/SIGTERM arrived while the guard was active."""

    def __init__(self, signum: int) -> None:
        super().__init__(f"interrupted by signal {signum}")
        self.signum = signum

    @property
    def exit_code(self) -> int:
        return 128 + self.signum


@dataclass(frozen=True)
class ScanOptions:
    json: bool = False
    fix: bool = False
    github_action: bool = False
    exclude: tuple[str, ...] = ()

    @property
    def wants_json(self) -> bool:
        return self.json or self.github_action


@dataclass(frozen=True)
class EngineResult:
    """Exit code and captured stdout of one engine run."""
    returncode: int
    stdout: str = ""


def _guarded_signals() -> list[int]:
    return [sig for sig in (getattr(signal, "SIGINT", None), getattr(signal, "SIGTERM", None)) if sig is not None]


@contextmanager
def signal_guard(signals: Sequence[int] | None = None) -> Iterator[None]:
    """Raise ``Interrupted`` on SIGINT/SIGTERM so enclosing ``with`` blocks unwind.

    Previous handlers are restored on exit. Signals that cannot be hooked
    (e.g. outside the main thread) are left alone.
    """

    def _raise(signum: int, _frame: object) -> None:
        raise Interrupted(signum)

    previous: dict[int, object] = {}
    for sig in _guarded_signals() if signals is None else signals:
        try:
            previous[sig] = signal.signal(sig, _raise)
        except (ValueError, OSError):
            continue
    try:
        yield
    finally:
        for sig, handler in previous.items():
            signal.signal(sig, handler)


def resolve_engine(settings: Settings) -> str:
    """Configured engine, else ``ast-grep``/``sg`` on PATH, else the bare name."""
    if settings.engine:
        return settings.engine
    for name in ENGINE_NAMES:
        found = shutil.which(name)
        if found:
            return found
    return ENGINE_NAMES[0]


def build_engine_args(config_path: Path, scan_path: str, options: ScanOptions) -> list[str]:
    """Arguments passed to the engine after its executable."""
    args = ["scan", "--config", str(config_path)]
    if options.wants_json:
        args.append("--json")
    if options.fix:
        args.append("--update-all")
    args.append(scan_path)
    return args


def run_engine(command: Sequence[str], *, capture: bool) -> EngineResult:
    """Run the engine to completion; stdout is buffered when ``capture`` is set.

    Raises:
        SubprocessLaunchError: the binary could not be started.
    """
    try:
        proc = subprocess.Popen(
            list(command),
            stdout=subprocess.PIPE if capture else None,
            text=True,
        )
    except (FileNotFoundError, PermissionError, NotADirectoryError) as exc:
        raise SubprocessLaunchError(f"Error running ast-grep: {exc}") from exc

    try:
        stdout, _ = proc.communicate()
    except BaseException:
        proc.kill()
        proc.wait()
        raise
    return EngineResult(returncode=proc.returncode, stdout=stdout or "")


def _emit_warnings(warnings: Sequence[str], options: ScanOptions) -> None:
    for message in warnings:
        console.warn(message, github_action=options.github_action)


def report(
    result: EngineResult,
    options: ScanOptions,
    settings: Settings,
    *,
    allowed_rule_ids: set[str] | None = None,
) -> int:
    """Parse, filter and print engine JSON output; return the process exit code."""
    if not result.stdout.strip():
        return result.returncode

    try:
        issues, dropped = parse_lint_issues(result.stdout, allowed_rule_ids or None)
    except LintOutputError as exc:
        console.warn(str(exc), github_action=options.github_action)
        print(result.stdout)
        return result.returncode

    _emit_warnings(dropped, options)
    exclusion = filter_excluded_rules(issues, options.exclude)
    _emit_warnings(exclusion.warnings, options)
    filtered: list[Issue] = exclusion.filtered

    if options.github_action:
        print("\n".join(render_github_action(filtered)))
        if settings.github_output is not None:
            write_github_output(settings.github_output, filtered)
    else:
        print(json.dumps([issue.to_dict() for issue in filtered], indent=2))

    # The engine's own exit code reflects pre-filter matches; only post-filter errors count.
    return 1 if count_by_severity(filtered).error > 0 else 0


def scan(language: str, scan_path: str, options: ScanOptions, settings: Settings) -> int:
    """Lint ``scan_path`` with the rules for ``language``; return the exit code."""
    if not is_valid_language(language):
        console.error(f"Invalid language '{language}'. Must be one of: {', '.join(VALID_LANGUAGES)}")
        return 1

    if options.exclude and not options.wants_json:
        console.warn("--exclude only applies with --json or --github-action; passing engine output through")

    command_prefix = [resolve_engine(settings)]
    dirs = rule_dirs(language, settings.rules_root)
    try:
        with signal_guard(), temp_config(dirs) as config_path:
            command = [*command_prefix, *build_engine_args(config_path, scan_path, options)]
            result = run_engine(command, capture=options.wants_json)
    except SubprocessLaunchError as exc:
        console.error(str(exc), github_action=options.github_action)
        print(INSTALL_HINT, file=sys.stderr)
        return 1
    except Interrupted as exc:
        return exc.exit_code

    if not options.wants_json:
        return result.returncode

    return report(result, options, settings, allowed_rule_ids=valid_rule_ids(language, settings.rules_root))
