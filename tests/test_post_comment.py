"""Tests for tempo_lints.post_comment: the tempo-lints-comment entry point."""
import json

import pytest

import tempo_lints.github as github
import tempo_lints.post_comment as mod
from tempo_lints.comment import COMMENT_MARKER
from tempo_lints.github import CommentPermissionError

RESULTS = [
    {
        "ruleId": "no-console-log",
        "severity": "warning",
        "message": "Avoid console.log",
        "file": "src/utils.ts",
        "line": 10,
        "column": 5,
    },
    {
        "ruleId": "no-explicit-any",
        "severity": "error",
        "message": "Avoid any",
        "file": "src/types.ts",
        "line": 3,
        "column": 1,
    },
]


class FakeClient:
    instances = []

    def __init__(self, *, token, api_url, timeout, outcome=("created", 42), exc=None):
        self.token = token
        self.api_url = api_url
        self.timeout = timeout
        self.outcome = outcome
        self.exc = exc
        self.calls = []
        FakeClient.instances.append(self)

    def upsert_pr_comment(self, **kwargs):
        self.calls.append(kwargs)
        if self.exc is not None:
            raise self.exc
        return self.outcome


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    for name in ("GITHUB_TOKEN", "GITHUB_SERVER_URL", "GITHUB_REPOSITORY", "GITHUB_SHA", "GITHUB_API_URL"):
        monkeypatch.delenv(name, raising=False)
    FakeClient.instances = []


@pytest.fixture
def results_file(tmp_path):
    path = tmp_path / "results.json"
    path.write_text(json.dumps(RESULTS), encoding="utf-8")
    return path


def install_client(monkeypatch, **kwargs):
    monkeypatch.setattr(mod, "GitHubClient", lambda **kw: FakeClient(**kw, **kwargs))


class TestMain:
    def test_missing_token_fails_before_network(self, monkeypatch, results_file, capsys):
        install_client(monkeypatch)
        code = mod.main(["--repo", "o/r", "--pr", "7", "--results", str(results_file)])
        assert code == 1
        assert "GITHUB_TOKEN" in capsys.readouterr().err
        assert FakeClient.instances == []

    def test_dry_run_prints_body_without_token(self, results_file, capsys):
        code = mod.main(["--repo", "o/r", "--pr", "7", "--results", str(results_file), "--dry-run"])
        assert code == 0
        out = capsys.readouterr().out
        assert out.startswith(COMMENT_MARKER)
        assert "Found **2** issues in **2** files." in out

    def test_creates_comment(self, monkeypatch, results_file, capsys):
        monkeypatch.setenv("GITHUB_TOKEN", "secret")
        install_client(monkeypatch)
        code = mod.main(["--repo", "o/r", "--pr", "7", "--results", str(results_file)])
        assert code == 0
        client = FakeClient.instances[0]
        assert client.token == "secret"
        call = client.calls[0]
        assert call["repo"] == "o/r"
        assert call["pr_number"] == 7
        assert call["marker"] == COMMENT_MARKER
        assert "no-explicit-any" in call["body"]
        out = capsys.readouterr().out
        assert "Created new comment." in out
        assert "PR comment posted successfully!" in out

    def test_updates_comment(self, monkeypatch, results_file, capsys):
        monkeypatch.setenv("GITHUB_TOKEN", "secret")
        install_client(monkeypatch, outcome=("updated", 99))
        assert mod.main(["--repo", "o/r", "--pr", "7", "--results", str(results_file)]) == 0
        assert "Updated existing comment 99." in capsys.readouterr().out

    def test_blob_links_use_sha(self, monkeypatch, results_file):
        monkeypatch.setenv("GITHUB_TOKEN", "secret")
        install_client(monkeypatch)
        mod.main(["--repo", "o/r", "--pr", "7", "--results", str(results_file), "--sha", "abc123"])
        body = FakeClient.instances[0].calls[0]["body"]
        assert "https://github.com/o/r/blob/abc123/src/utils.ts#L10" in body

    def test_total_override(self, results_file, capsys):
        mod.main(["--repo", "o/r", "--pr", "7", "--results", str(results_file), "--total", "40", "--dry-run"])
        assert "Found **40** issues" in capsys.readouterr().out

    def test_missing_results_posts_success(self, tmp_path, capsys):
        code = mod.main(["--repo", "o/r", "--pr", "7", "--results", str(tmp_path / "nope.json"), "--dry-run"])
        assert code == 0
        captured = capsys.readouterr()
        assert "No lint issues found!" in captured.out
        assert "results file not found" in captured.err

    def test_no_results_flag_posts_success(self, capsys):
        assert mod.main(["--repo", "o/r", "--pr", "7", "--dry-run"]) == 0
        assert "Tempo Lint Results" in capsys.readouterr().out

    def test_invalid_json_posts_nothing(self, monkeypatch, tmp_path, capsys):
        monkeypatch.setenv("GITHUB_TOKEN", "secret")
        install_client(monkeypatch)
        bad = tmp_path / "results.json"
        bad.write_text("not json {", encoding="utf-8")
        assert mod.main(["--repo", "o/r", "--pr", "7", "--results", str(bad)]) == 1
        err = capsys.readouterr().err
        assert "Failed to parse JSON" in err
        assert "not json {" in err
        assert FakeClient.instances == []

    def test_wrong_shape_posts_nothing(self, monkeypatch, tmp_path, capsys):
        monkeypatch.setenv("GITHUB_TOKEN", "secret")
        install_client(monkeypatch)
        bad = tmp_path / "results.json"
        bad.write_text('{"ruleId": "x"}', encoding="utf-8")
        assert mod.main(["--repo", "o/r", "--pr", "7", "--results", str(bad)]) == 1
        assert "Expected JSON array" in capsys.readouterr().err
        assert FakeClient.instances == []

    def test_api_error_exits_one(self, monkeypatch, results_file, capsys):
        monkeypatch.setenv("GITHUB_TOKEN", "secret")
        install_client(monkeypatch, exc=CommentPermissionError(403, "Resource not accessible"))
        assert mod.main(["--repo", "o/r", "--pr", "7", "--results", str(results_file)]) == 1
        assert "Error posting comment" in capsys.readouterr().err

    def test_network_timeout_exits_one(self, monkeypatch, results_file, capsys):
        monkeypatch.setenv("GITHUB_TOKEN", "secret")

        def fake_urlopen(req, timeout):
            raise TimeoutError("The read operation timed out")

        monkeypatch.setattr(github.request, "urlopen", fake_urlopen)
        assert mod.main(["--repo", "o/r", "--pr", "1", "--results", str(results_file), "--total", "1"]) == 1
        err = capsys.readouterr().err
        assert "Error posting comment" in err
        assert "timed out" in err


class TestLoadIssues:
    def test_empty_file(self, tmp_path):
        path = tmp_path / "results.json"
        path.write_text("  \n", encoding="utf-8")
        assert mod.load_issues(path) == []

    def test_reads_cli_output(self, results_file):
        issues = mod.load_issues(results_file)
        assert [i.rule_id for i in issues] == ["no-console-log", "no-explicit-any"]
        assert issues[0].line == 10
        assert issues[0].column == 5
