"""Data models for GitHub pull request data and classification results."""

from datetime import datetime
from typing import Literal

from pydantic import BaseModel, ConfigDict, Field, field_validator


CIStatus = Literal["pending", "success", "failure", "error", "unknown"]

KNOWN_CI_STATES: frozenset[str] = frozenset({"pending", "success", "failure", "error"})

APPROVED = "APPROVED"


class Repository(BaseModel):
    """Repository identity (owner + name). Immutable value."""

    model_config = ConfigDict(frozen=True)

    owner: str = Field(..., min_length=1)
    name: str = Field(..., min_length=1)

    @property
    def full_name(self) -> str:
        return f"{self.owner}/{self.name}"

    def __str__(self) -> str:
        return self.full_name


# GitHub API payloads. Unknown fields are ignored (pydantic default).

class GitHubUser(BaseModel):
    login: str = ""


class GitHubLabel(BaseModel):
    name: str


class GitHubHead(BaseModel):
    sha: str


class RawPullRequest(BaseModel):
    """One item from GET /repos/{owner}/{repo}/pulls.

    Transient: used only to build a NormalizedPullRequest.
    """

    id: int
    number: int
    title: str
    html_url: str
    draft: bool = False
    requested_reviewers: list[GitHubUser] = Field(default_factory=list)
    review_comments: int = 0
    labels: list[GitHubLabel] = Field(default_factory=list)
    head: GitHubHead

    @field_validator("requested_reviewers", "labels", mode="before")
    @classmethod
    def null_as_empty(cls, v):
        return [] if v is None else v

    @field_validator("draft", mode="before")
    @classmethod
    def null_draft_as_false(cls, v):
        return False if v is None else v


class ReviewEvent(BaseModel):
    """One review verdict from GET /pulls/{number}/reviews."""

    state: str


class CommitStatus(BaseModel):
    """Aggregate commit status from GET /commits/{sha}/status."""

    state: str


class NormalizedPullRequest(BaseModel):
    """Canonical pull request record used by the classifier.

    Built fresh on every fetch cycle and never mutated afterwards; enrichment
    produces a new instance via model_copy(update=...).

    has_reviewers, has_been_reviewed and is_approved are independent: a PR may
    have reviewers requested and never been reviewed, or be reviewed and not
    approved.
    """

    model_config = ConfigDict(frozen=True)

    id: int
    number: int
    title: str
    url: str
    is_draft: bool = False
    has_reviewers: bool = False
    has_been_reviewed: bool = False
    is_approved: bool = False  # False (never unknown) without enrichment
    labels: tuple[str, ...] = ()
    ci_status: CIStatus = "unknown"


BUCKET_TITLES: dict[str, str] = {
    "no_reviewer": "Open PRs with No Reviewers",
    "reviewed": "Reviewed Non-Draft PRs",
    "needs_qa": "Approved PRs Needing QA",
    "ci_blocked": "Approved PRs with Failing CI",
    "ready_to_merge": "Approved PRs Ready to Merge",
}


class PullRequestBuckets(BaseModel):
    """The five classification result sets. Members may appear in several."""

    model_config = ConfigDict(frozen=True)

    no_reviewer: tuple[NormalizedPullRequest, ...] = ()
    reviewed: tuple[NormalizedPullRequest, ...] = ()
    needs_qa: tuple[NormalizedPullRequest, ...] = ()
    ci_blocked: tuple[NormalizedPullRequest, ...] = ()
    ready_to_merge: tuple[NormalizedPullRequest, ...] = ()

    def get(self, bucket: str) -> tuple[NormalizedPullRequest, ...]:
        if bucket not in BUCKET_TITLES:
            raise KeyError(f"Unknown bucket: {bucket}")
        return getattr(self, bucket)

    def counts(self) -> dict[str, int]:
        return {bucket: len(self.get(bucket)) for bucket in BUCKET_TITLES}


class MonitorSnapshot(BaseModel):
    """Result of one fetch cycle."""

    model_config = ConfigDict(frozen=True)

    repository: Repository
    pull_requests: tuple[NormalizedPullRequest, ...]
    buckets: PullRequestBuckets
    generation: int
    fetched_at: datetime
    authenticated: bool = False
