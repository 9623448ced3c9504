"""Post (or update) the lint results comment on a pull request.

Reads the JSON written by ``tempo-lints --json`` and upserts a single PR
comment identified by ``COMMENT_MARKER``.
"""

from __future__ import annotations

import argparse
import sys
from pathlib import Path

from . import console
from .comment import COMMENT_MARKER, generate_comment_body
from .config import ConfigurationError, Settings
from .github import GitHubApiError, GitHubClient
from .issues import Issue, LintOutputError, parse_lint_issues
from .markdown import repo_context


def parse_args(argv: list[str]) -> argparse.Namespace:
    p = argparse.ArgumentParser(
        prog="tempo-lints-comment",
        description="Post Tempo lint results as a PR comment (updates the previous one in place).",
    )
    p.add_argument("--repo", required=True, help="owner/repo")
    p.add_argument("--pr", type=int, required=True, help="PR number")
    p.add_argument("--results", default="", help="Path to tempo-lints --json output")
    p.add_argument("--total", type=int, default=None, help="Total issue count (default: issues in --results)")
    p.add_argument("--server", default="", help="GitHub server URL (default: env GITHUB_SERVER_URL)")
    p.add_argument("--sha", default="", help="Git SHA for blob links (default: env GITHUB_SHA)")
    p.add_argument("--dry-run", action="store_true", help="Print the comment body instead of posting it")
    return p.parse_args(argv)


def load_issues(path: Path) -> list[Issue]:
    """Issues from a results file; a missing file means no issues.

    Raises:
        LintOutputError: the file exists but is not lint JSON.
        OSError: the file exists but cannot be read.
    """
    if not path.is_file():
        console.warn(f"results file not found: {path}; treating as no issues")
        return []
    content = path.read_text(encoding="utf-8")
    if not content.strip():
        return []
    issues, _ = parse_lint_issues(content)
    return issues


def main(argv: list[str] | None = None) -> int:
    args = parse_args(sys.argv[1:] if argv is None else argv)

    try:
        settings = Settings.from_env()
        token = None if args.dry_run else settings.require_token()
    except ConfigurationError as exc:
        console.error(str(exc))
        return 1

    results_path = Path(args.results) if args.results else None
    issues: list[Issue] = []
    if results_path is not None:
        try:
            issues = load_issues(results_path)
        except LintOutputError as exc:
            console.error(f"lint output in {results_path}: {exc}")
            print(results_path.read_text(encoding="utf-8", errors="replace"), file=sys.stderr)
            return 1
        except OSError as exc:
            console.error(f"failed to read lint output file {results_path}: {exc}")
            return 1

    total = args.total if args.total is not None else len(issues)
    server, _, sha = repo_context(server=args.server or None, repo=args.repo, sha=args.sha or None)
    body = generate_comment_body(issues, total, server=server, repo=args.repo, sha=sha)

    if args.dry_run:
        print(body)
        return 0

    client = GitHubClient(token=token or "", api_url=settings.api_url, timeout=settings.http_timeout)
    try:
        action, comment_id = client.upsert_pr_comment(
            repo=args.repo,
            pr_number=args.pr,
            marker=COMMENT_MARKER,
            body=body,
        )
    except GitHubApiError as exc:
        console.error(f"Error posting comment: {exc}")
        return 1

    if action == "updated":
        print(f"Updated existing comment {comment_id}.")
    else:
        print("Created new comment.")
    print("PR comment posted successfully!")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
