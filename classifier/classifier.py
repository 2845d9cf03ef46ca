"""
Pull request classifier - sorts normalized PRs into actionable buckets.

Pure functions only: no network, no storage, no caching. The buckets are
recomputed from scratch on every fetch cycle.
"""

from typing import Iterable

from models.data_models import NormalizedPullRequest, PullRequestBuckets

NEEDS_QA_LABEL = "needs-qa"

FAILING_CI_STATES = frozenset({"failure", "error"})


def needs_reviewer(pr: NormalizedPullRequest) -> bool:
    """Open, not draft, nobody requested and nobody has reviewed yet."""
    return not pr.is_draft and not pr.has_reviewers and not pr.has_been_reviewed


def is_reviewed(pr: NormalizedPullRequest) -> bool:
    return not pr.is_draft and pr.has_been_reviewed


def needs_qa(pr: NormalizedPullRequest) -> bool:
    return not pr.is_draft and pr.is_approved and NEEDS_QA_LABEL in pr.labels


def is_ci_blocked(pr: NormalizedPullRequest) -> bool:
    return not pr.is_draft and pr.is_approved and pr.ci_status in FAILING_CI_STATES


def is_ready_to_merge(pr: NormalizedPullRequest) -> bool:
    """Approved, CI green and not waiting on QA."""
    return (
        not pr.is_draft
        and pr.is_approved
        and pr.ci_status == "success"
        and NEEDS_QA_LABEL not in pr.labels
    )


def pull_requests_with_no_reviewers(prs: Iterable[NormalizedPullRequest]) -> list[NormalizedPullRequest]:
    return [pr for pr in prs if needs_reviewer(pr)]


def reviewed_pull_requests(prs: Iterable[NormalizedPullRequest]) -> list[NormalizedPullRequest]:
    return [pr for pr in prs if is_reviewed(pr)]


def approved_pull_requests_needing_qa(prs: Iterable[NormalizedPullRequest]) -> list[NormalizedPullRequest]:
    return [pr for pr in prs if needs_qa(pr)]


def approved_pull_requests_with_failing_ci(prs: Iterable[NormalizedPullRequest]) -> list[NormalizedPullRequest]:
    return [pr for pr in prs if is_ci_blocked(pr)]


def approved_pull_requests_ready_to_merge(prs: Iterable[NormalizedPullRequest]) -> list[NormalizedPullRequest]:
    return [pr for pr in prs if is_ready_to_merge(pr)]


def classify(prs: Iterable[NormalizedPullRequest]) -> PullRequestBuckets:
    """
    Classify pull requests into the five buckets.

    Buckets may share members (an approved PR needing QA is also reviewed),
    except no_reviewer and reviewed, which are disjoint. Drafts never appear.
    Input order is preserved inside every bucket.

    Args:
        prs: Normalized pull requests from one fetch cycle

    Returns:
        PullRequestBuckets
    """
    prs = list(prs)
    return PullRequestBuckets(
        no_reviewer=tuple(pull_requests_with_no_reviewers(prs)),
        reviewed=tuple(reviewed_pull_requests(prs)),
        needs_qa=tuple(approved_pull_requests_needing_qa(prs)),
        ci_blocked=tuple(approved_pull_requests_with_failing_ci(prs)),
        ready_to_merge=tuple(approved_pull_requests_ready_to_merge(prs)),
    )
