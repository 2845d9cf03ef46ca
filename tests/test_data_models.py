"""Tests for data models."""

from datetime import datetime, timezone
import pytest
from pydantic import ValidationError

from conftest import make_raw_pr
from models.data_models import (
    BUCKET_TITLES,
    MonitorSnapshot,
    NormalizedPullRequest,
    PullRequestBuckets,
    RawPullRequest,
    Repository,
)


class TestRepository:
    """Tests for Repository model."""

    def test_full_name(self):
        repo = Repository(owner="facebook", name="react")
        assert repo.full_name == "facebook/react"
        assert str(repo) == "facebook/react"

    def test_value_equality_and_hashable(self):
        a = Repository(owner="o", name="n")
        b = Repository(owner="o", name="n")
        assert a == b
        assert len({a, b}) == 1

    def test_immutable(self):
        repo = Repository(owner="o", name="n")
        with pytest.raises(ValidationError):
            repo.owner = "other"

    def test_rejects_empty_parts(self):
        with pytest.raises(ValidationError):
            Repository(owner="", name="n")


class TestRawPullRequest:
    """Tests for parsing GitHub list payloads."""

    def test_parses_api_payload(self):
        raw = RawPullRequest.model_validate(
            make_raw_pr(42, reviewers=["alice"], labels=["bug"], sha="deadbeef")
        )
        assert raw.number == 42
        assert raw.requested_reviewers[0].login == "alice"
        assert raw.labels[0].name == "bug"
        assert raw.head.sha == "deadbeef"

    def test_defaults_for_missing_optional_fields(self):
        data = make_raw_pr(1)
        for key in ("draft", "review_comments", "labels"):
            del data[key]
        data["requested_reviewers"] = None

        raw = RawPullRequest.model_validate(data)

        assert raw.draft is False
        assert raw.review_comments == 0
        assert raw.labels == []
        assert raw.requested_reviewers == []

    def test_missing_head_rejected(self):
        data = make_raw_pr(1)
        del data["head"]
        with pytest.raises(ValidationError):
            RawPullRequest.model_validate(data)


class TestNormalizedPullRequest:
    """Tests for NormalizedPullRequest model."""

    def test_defaults_are_degraded_mode(self):
        pr = NormalizedPullRequest(id=1, number=1, title="t", url="u")
        assert pr.is_approved is False
        assert pr.ci_status == "unknown"
        assert pr.labels == ()

    def test_frozen(self):
        pr = NormalizedPullRequest(id=1, number=1, title="t", url="u")
        with pytest.raises(ValidationError):
            pr.is_approved = True

    def test_rejects_unknown_ci_status(self):
        with pytest.raises(ValidationError):
            NormalizedPullRequest(id=1, number=1, title="t", url="u", ci_status="neutral")

    def test_labels_keep_order(self):
        pr = NormalizedPullRequest(id=1, number=1, title="t", url="u", labels=["b", "a"])
        assert pr.labels == ("b", "a")


class TestSnapshot:
    def test_json_dump(self):
        pr = NormalizedPullRequest(id=1, number=1, title="t", url="u")
        snapshot = MonitorSnapshot(
            repository=Repository(owner="o", name="n"),
            pull_requests=(pr,),
            buckets=PullRequestBuckets(no_reviewer=(pr,)),
            generation=3,
            fetched_at=datetime(2025, 1, 1, tzinfo=timezone.utc),
        )

        data = snapshot.model_dump(mode="json")

        assert data["repository"] == {"owner": "o", "name": "n"}
        assert data["buckets"]["no_reviewer"][0]["ci_status"] == "unknown"
        assert set(data["buckets"]) == set(BUCKET_TITLES)
