"""GitHub PR comment utilities.

Provides idempotent comment upsert using an HTML marker for identification:
list the PR's issue comments, PATCH the one carrying the marker, otherwise
POST a new one.
"""

from __future__ import annotations

import http.client
import json
import random
import sys
import time
from dataclasses import dataclass, field
from typing import Any, Callable
from urllib import error, request

from .config import DEFAULT_API_URL, DEFAULT_HTTP_TIMEOUT

USER_AGENT = "tempo-lints"
TRANSIENT_STATUSES = (502, 503, 504)

# (request, timeout) -> (status, raw body)
Sender = Callable[[request.Request, float], tuple[int, bytes]]


class GitHubApiError(RuntimeError):
    """GitHub API returned a non-2xx response."""

    def __init__(self, status: int, message: str) -> None:
        super().__init__(f"GitHub API error ({status}): {message}")
        self.status = status
        self.api_message = message


class CommentPermissionError(GitHubApiError):
    """Token lacks pull-requests: write permission."""


class TransientGitHubError(GitHubApiError):
    """GitHub API returned a transient error (5xx) after all retries."""


def _default_sender(req: request.Request, timeout: float) -> tuple[int, bytes]:
    try:
        with request.urlopen(req, timeout=timeout) as response:
            return int(getattr(response, "status", 200)), response.read()
    except error.HTTPError as exc:
        # urllib raises on non-2xx, but the status and body are still on the exception.
        return int(exc.code), exc.read() or b""
    except error.URLError as exc:
        raise GitHubApiError(0, str(getattr(exc, "reason", exc))) from exc
    except (OSError, http.client.HTTPException) as exc:
        # Read timeouts and dropped connections are not wrapped in URLError.
        raise GitHubApiError(0, str(exc) or type(exc).__name__) from exc


def _decode(raw: bytes) -> Any:
    if not raw:
        return {}
    try:
        return json.loads(raw.decode("utf-8"))
    except (UnicodeDecodeError, json.JSONDecodeError):
        return {}


def _error_for(status: int, data: Any) -> GitHubApiError:
    message = data.get("message") if isinstance(data, dict) else None
    if not isinstance(message, str) or not message:
        message = f"Request failed with status {status}"
    if status == 403:
        return CommentPermissionError(
            status,
            f"{message}. Unable to post PR comment: token lacks pull-requests: write permission.\n"
            "Add this to your workflow:\n"
            "permissions:\n"
            "  contents: read\n"
            "  pull-requests: write",
        )
    return GitHubApiError(status, message)


def find_comment_by_marker(comments: list[dict], marker: str) -> int | None:
    """Find the first comment containing the marker, return its numeric ID."""
    for comment in comments:
        body = str(comment.get("body") or "")
        if marker in body:
            comment_id = comment.get("id")
            if isinstance(comment_id, int) and not isinstance(comment_id, bool):
                return comment_id
    return None


@dataclass
class GitHubClient:
    """Minimal REST client for PR issue comments."""
    token: str = field(repr=False)
    api_url: str = DEFAULT_API_URL
    timeout: float = DEFAULT_HTTP_TIMEOUT
    max_retries: int = 3
    base_delay: float = 1.0
    sender: Sender | None = None
    sleep: Callable[[float], None] = time.sleep

    def _build(self, method: str, path: str, body: dict | None) -> request.Request:
        data = json.dumps(body).encode("utf-8") if body is not None else None
        return request.Request(
            f"{self.api_url.rstrip('/')}{path}",
            data=data,
            method=method,
            headers={
                "Authorization": f"Bearer {self.token}",
                "Accept": "application/vnd.github+json",
                "User-Agent": USER_AGENT,
                "Content-Type": "application/json",
            },
        )

    def request(self, method: str, path: str, body: dict | None = None) -> Any:
        """Send one API request with retry logic for transient errors.

        Raises:
            CommentPermissionError: 403 from the API.
            TransientGitHubError: 502/503/504 after all retries.
            GitHubApiError: any other non-2xx response or a network failure.
        """
        send = self.sender or _default_sender
        for attempt in range(self.max_retries):
            status, raw = send(self._build(method, path, body), self.timeout)
            data = _decode(raw)
            if 200 <= status < 300:
                return data

            if status in TRANSIENT_STATUSES:
                if attempt < self.max_retries - 1:
                    # Exponential backoff with jitter: 1s, 2s, 4s + random jitter
                    delay = self.base_delay * (2 ** attempt) + random.uniform(0, 0.5)
                    print(
                        f"::warning::GitHub API error {status} (attempt {attempt + 1}/{self.max_retries}), "
                        f"retrying in {delay:.1f}s...",
                        file=sys.stderr,
                    )
                    self.sleep(delay)
                    continue
                raise TransientGitHubError(
                    status, f"transient error after {self.max_retries} attempts"
                )

            raise _error_for(status, data)

        # The loop must either return or raise.
        raise RuntimeError("GitHubClient.request retry loop exited unexpectedly")

    def fetch_comments(
        self,
        repo: str,
        pr_number: int,
        *,
        per_page: int = 100,
        max_pages: int = 20,
        stop_on_marker: str | None = None,
    ) -> list[dict]:
        """Fetch issue comments for a PR (paginated).

        Args:
            repo: Repository in owner/repo format
            pr_number: Pull request number
            per_page: Number of comments per page (max 100)
            max_pages: Maximum number of pages to fetch
            stop_on_marker: Stop paging once a comment containing this marker
                has been seen.
        """
        comments: list[dict] = []
        for page in range(1, max_pages + 1):
            payload = self.request(
                "GET", f"/repos/{repo}/issues/{pr_number}/comments?per_page={per_page}&page={page}"
            )
            if not isinstance(payload, list) or not payload:
                break
            page_comments = [c for c in payload if isinstance(c, dict)]
            comments.extend(page_comments)

            if stop_on_marker is not None and find_comment_by_marker(page_comments, stop_on_marker) is not None:
                break
            if len(payload) < per_page:
                break
        return comments

    def upsert_pr_comment(
        self,
        *,
        repo: str,
        pr_number: int,
        marker: str,
        body: str,
        comments: list[dict] | None = None,
    ) -> tuple[str, int | None]:
        """Update the comment carrying ``marker`` or create a new one.

        Returns ``("updated", id)`` or ``("created", id)``.
        """
        if comments is None:
            comments = self.fetch_comments(repo, pr_number, stop_on_marker=marker)

        existing_id = find_comment_by_marker(comments, marker)
        if existing_id is not None:
            self.request("PATCH", f"/repos/{repo}/issues/comments/{existing_id}", {"body": body})
            return "updated", existing_id

        created = self.request("POST", f"/repos/{repo}/issues/{pr_number}/comments", {"body": body})
        created_id = created.get("id") if isinstance(created, dict) else None
        return "created", created_id if isinstance(created_id, int) else None
