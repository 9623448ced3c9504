"""Markdown helpers for lint PR comments.

Keep surface area small: link formatting + severity badges + <details> blocks.
"""

from __future__ import annotations

import os
from urllib.parse import quote

_SEVERITY_ICON = {
    "error": "❌",
    "warning": "⚠️",
    "hint": "💡",
}

_SEVERITY_LABEL = {
    "error": "Errors",
    "warning": "Warnings",
    "hint": "Hints",
}


def severity_icon(severity: str | None) -> str:
    text = str(severity or "").strip().lower()
    return _SEVERITY_ICON.get(text, _SEVERITY_ICON["hint"])


def severity_label(severity: str) -> str:
    """Plural heading used in the severity table."""
    return _SEVERITY_LABEL.get(severity, severity.capitalize())


def repo_context(
    *,
    server: str | None = None,
    repo: str | None = None,
    sha: str | None = None,
) -> tuple[str, str, str]:
    """Resolve GitHub context used for blob links."""
    resolved_server = (server or os.environ.get("GITHUB_SERVER_URL") or "https://github.com").rstrip(
        "/"
    )
    resolved_repo = (repo or os.environ.get("GITHUB_REPOSITORY") or "").strip()
    resolved_sha = (sha or os.environ.get("GITHUB_SHA") or "").strip()
    return resolved_server, resolved_repo, resolved_sha


def blob_url(
    path: str,
    *,
    server: str,
    repo: str,
    sha: str,
    line: int | None = None,
) -> str | None:
    """Link to ``path`` at ``sha`` on the repository web UI."""
    server = (server or "").rstrip("/")
    repo = (repo or "").strip()
    sha = (sha or "").strip()
    path = (path or "").strip()
    if path.startswith("./"):
        path = path[2:]

    if not (server and repo and sha and path):
        return None
    url = f"{server}/{repo}/blob/{sha}/{quote(path, safe='/')}"
    if line is not None and line > 0:
        url += f"#L{line}"
    return url


def location_link(
    path: str,
    line: int | None,
    *,
    server: str = "",
    repo: str = "",
    sha: str = "",
) -> str:
    """Location link, or a code span when there is nothing to link to."""
    path = (path or "").strip() or "unknown"
    label = f"{path}:{line}" if line is not None and line > 0 else path
    url = None if path == "unknown" else blob_url(path, server=server, repo=repo, sha=sha, line=line)
    if not url:
        return f"`{label}`"
    return f"[`{label}`]({url})"


def details_block(
    body_lines: list[str],
    *,
    summary: str = "Details",
    indent: str = "",
) -> list[str]:
    """Wrap ``body_lines`` in a collapsible ``<details>`` element."""
    if not body_lines:
        return []
    lines = [
        f"{indent}<details>",
        f"{indent}<summary>{summary}</summary>",
        "",
    ]
    for ln in body_lines:
        if ln:
            lines.append(f"{indent}{ln}")
        else:
            lines.append("")
    lines.extend(["", f"{indent}</details>"])
    return lines
