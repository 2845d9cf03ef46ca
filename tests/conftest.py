"""Shared pytest fixtures and configuration."""

from typing import Any, Optional
from unittest.mock import Mock

import pytest

from storage.credential_store import CredentialStore
from storage.kv_store import JsonFileStore


@pytest.fixture
def test_env(monkeypatch, tmp_path):
    """
    Set up valid test environment variables.

    This fixture sets up environment variables so config can be loaded
    during tests without touching the user's real state file.
    """
    state_file = tmp_path / "state.json"
    monkeypatch.setenv("GITHUB_TOKEN", "ghp_test_token_1234567890")
    monkeypatch.setenv("LOG_LEVEL", "DEBUG")
    monkeypatch.setenv("REPO_MONITOR_STATE_FILE", str(state_file))
    monkeypatch.setenv("REPO_MONITOR_MAX_WORKERS", "4")
    monkeypatch.setenv("REPO_MONITOR_TIMEOUT", "10")
    monkeypatch.delenv("GITHUB_API_URL", raising=False)

    return {
        "github_token": "ghp_test_token_1234567890",
        "log_level": "DEBUG",
        "state_file": state_file,
    }


@pytest.fixture
def invalid_env(monkeypatch):
    """
    Set up invalid environment variables for testing validation.
    """
    monkeypatch.setenv("LOG_LEVEL", "LOUD")
    monkeypatch.setenv("REPO_MONITOR_MAX_WORKERS", "0")


@pytest.fixture
def kv_store(tmp_path):
    return JsonFileStore(tmp_path / "state.json")


@pytest.fixture
def credential_store(kv_store):
    return CredentialStore(kv_store)


def make_raw_pr(
    number: int,
    title: Optional[str] = None,
    draft: bool = False,
    reviewers: Optional[list[str]] = None,
    review_comments: int = 0,
    labels: Optional[list[str]] = None,
    sha: Optional[str] = None,
) -> dict[str, Any]:
    """Build a pull request object shaped like the GitHub list endpoint."""
    return {
        "id": 1000 + number,
        "number": number,
        "title": title or f"Test PR {number}",
        "html_url": f"https://github.com/testowner/testrepo/pull/{number}",
        "draft": draft,
        "requested_reviewers": [{"login": r, "id": i, "type": "User"} for i, r in enumerate(reviewers or [])],
        "review_comments": review_comments,
        "labels": [{"name": name, "color": "ededed"} for name in (labels or [])],
        "head": {"sha": sha or f"sha{number}"},
        "user": {"login": "author"},
    }


def make_response(
    status_code: int = 200,
    json_data: Any = None,
    reason: str = "OK",
) -> Mock:
    """Mock requests.Response with the attributes the fetcher reads."""
    response = Mock()
    response.status_code = status_code
    # Same rule as requests: anything below 400 is "ok"
    response.ok = status_code < 400
    response.reason = reason
    response.headers = {"X-RateLimit-Remaining": "4999", "X-RateLimit-Limit": "5000"}
    response.json.return_value = json_data
    return response
