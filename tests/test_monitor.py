"""Tests for PullRequestMonitor fetch cycles."""

import threading
from unittest.mock import Mock

import pytest

from classifier.monitor import PullRequestMonitor
from models.data_models import NormalizedPullRequest, Repository
from utils.exceptions import ApiError

REPO = Repository(owner="o", name="r")


def make_pr(number, **overrides):
    return NormalizedPullRequest(
        id=number, number=number, title=f"PR {number}",
        url=f"https://github.com/o/r/pull/{number}", **overrides,
    )


class TestRefresh:
    """Tests for refresh()."""

    def test_publishes_snapshot(self):
        fetcher = Mock()
        fetcher.fetch.return_value = [make_pr(1), make_pr(2, has_been_reviewed=True)]
        monitor = PullRequestMonitor(fetcher)

        snapshot = monitor.refresh(REPO, token="tok")

        fetcher.fetch.assert_called_once_with(REPO, "tok")
        assert monitor.latest is snapshot
        assert snapshot.generation == 1
        assert snapshot.authenticated is True
        assert snapshot.repository == REPO
        assert [pr.number for pr in snapshot.buckets.no_reviewer] == [1]
        assert [pr.number for pr in snapshot.buckets.reviewed] == [2]

    def test_unauthenticated_flag(self):
        fetcher = Mock()
        fetcher.fetch.return_value = []
        snapshot = PullRequestMonitor(fetcher).refresh(REPO)
        assert snapshot.authenticated is False

    def test_api_error_propagates_and_keeps_previous(self):
        fetcher = Mock()
        fetcher.fetch.return_value = [make_pr(1)]
        monitor = PullRequestMonitor(fetcher)
        first = monitor.refresh(REPO)

        fetcher.fetch.side_effect = ApiError(404, "Not Found")
        with pytest.raises(ApiError):
            monitor.refresh(REPO)

        assert monitor.latest is first
        assert monitor.generation == 2

    def test_stale_cycle_is_not_published(self):
        """A slow earlier cycle finishing after a newer one must not win."""
        slow_started = threading.Event()
        release_slow = threading.Event()
        calls = []

        def fetch(repo, token):
            calls.append(token)
            if token == "slow":
                slow_started.set()
                release_slow.wait(timeout=5)
                return [make_pr(1)]
            return [make_pr(2)]

        fetcher = Mock()
        fetcher.fetch.side_effect = fetch
        monitor = PullRequestMonitor(fetcher)

        results = {}
        worker = threading.Thread(target=lambda: results.setdefault("slow", monitor.refresh(REPO, "slow")))
        worker.start()
        assert slow_started.wait(timeout=5)

        fast = monitor.refresh(REPO, "fast")
        release_slow.set()
        worker.join(timeout=5)

        assert monitor.latest is fast
        assert results["slow"].generation == 1
        assert [pr.number for pr in results["slow"].pull_requests] == [1]
        assert [pr.number for pr in monitor.latest.pull_requests] == [2]


class TestConvenienceMethods:
    def test_bucket_shortcuts(self):
        fetcher = Mock()
        fetcher.fetch.return_value = [make_pr(1), make_pr(2, has_been_reviewed=True)]
        monitor = PullRequestMonitor(fetcher)

        assert [pr.number for pr in monitor.pull_requests_with_no_reviewers(REPO)] == [1]
        assert [pr.number for pr in monitor.reviewed_pull_requests(REPO, "tok")] == [2]
        assert fetcher.fetch.call_count == 2
