"""GitHub API client for fetching open pull request data.

This module implements the two-phase fetch used by the monitor:
- Phase 1 (Index): List open PRs and build baseline records (one request, fatal on failure)
- Phase 2 (Enrichment): Per-PR reviews and head-commit CI status (token only,
  isolated per PR; a failed lookup degrades that record instead of the batch)
"""

import logging
from concurrent.futures import Future, ThreadPoolExecutor
from typing import Any, Optional

import requests
from pydantic import TypeAdapter

from models.data_models import (
    APPROVED,
    KNOWN_CI_STATES,
    CommitStatus,
    NormalizedPullRequest,
    RawPullRequest,
    Repository,
    ReviewEvent,
)
from utils.exceptions import ApiError, EnrichmentError

logger = logging.getLogger(__name__)

_RAW_PR_LIST = TypeAdapter(list[RawPullRequest])
_REVIEW_LIST = TypeAdapter(list[ReviewEvent])


def _is_success(response: requests.Response) -> bool:
    # response.ok also accepts 3xx
    return 200 <= response.status_code < 300


class GitHubFetcher:
    """Fetch and normalize open pull requests from the GitHub REST API.

    The token is passed explicitly to every call; the fetcher holds no
    credentials of its own.
    """

    def __init__(
        self,
        base_url: str = "https://api.github.com",
        max_workers: int = 8,
        timeout: float = 30.0,
    ):
        """Initialize GitHub API client.

        Args:
            base_url: GitHub REST API root
            max_workers: Upper bound on concurrent enrichment requests
            timeout: Per-request timeout in seconds, handed to requests
        """
        self.base_url = base_url.rstrip("/")
        self.max_workers = max_workers
        self.timeout = timeout

    def _build_headers(self, token: Optional[str]) -> dict[str, str]:
        headers = {"Accept": "application/vnd.github.v3+json"}
        if token:
            headers["Authorization"] = f"token {token}"
        return headers

    def _make_github_request(
        self,
        url: str,
        token: Optional[str],
        params: Optional[dict] = None,
    ) -> requests.Response:
        """Make a single GitHub API GET request.

        No retry or rate-limit waiting is done here; status handling is left
        to the caller.

        Args:
            url: GitHub API URL to request
            token: Optional access token
            params: Optional query parameters

        Returns:
            Response object from requests
        """
        response = requests.get(
            url,
            headers=self._build_headers(token),
            params=params,
            timeout=self.timeout,
        )

        remaining = response.headers.get("X-RateLimit-Remaining")
        limit = response.headers.get("X-RateLimit-Limit")
        if remaining and limit:
            logger.debug(f"Rate limit: {remaining}/{limit} remaining")

        return response

    def fetch_pr_list(self, repo: Repository, token: Optional[str] = None) -> list[RawPullRequest]:
        """Fetch open pull requests (Phase 1 - Index).

        Args:
            repo: Repository to list
            token: Optional access token

        Returns:
            Raw pull requests in API order

        Raises:
            ApiError: On a non-2xx response or an unparseable body
            requests.RequestException: On transport failure
        """
        url = f"{self.base_url}/repos/{repo.owner}/{repo.name}/pulls"
        logger.info(f"Fetching open PRs from {repo.full_name}")

        try:
            response = self._make_github_request(url, token, params={"state": "open"})
        except requests.RequestException as e:
            logger.error(f"Error fetching PR list for {repo.full_name}: {e}")
            raise

        if not _is_success(response):
            logger.error(
                f"PR list request failed: {response.status_code} {response.reason}"
            )
            raise ApiError(response.status_code, response.reason)

        try:
            prs = _RAW_PR_LIST.validate_python(response.json())
        except ValueError as e:
            # Covers both JSON decode errors and pydantic ValidationError
            logger.error(f"Unexpected PR list payload for {repo.full_name}: {e}")
            raise ApiError(response.status_code, "Malformed response body") from e

        logger.info(f"Fetched {len(prs)} open PRs from {repo.full_name}")
        return prs

    def fetch_reviews(self, repo: Repository, pr_number: int, token: Optional[str]) -> list[ReviewEvent]:
        """Fetch review events for a PR (Phase 2 - Enrichment).

        Raises:
            EnrichmentError: On any failure (HTTP, transport, payload)
        """
        url = f"{self.base_url}/repos/{repo.owner}/{repo.name}/pulls/{pr_number}/reviews"
        try:
            response = self._make_github_request(url, token)
            if not _is_success(response):
                raise EnrichmentError(
                    pr_number, "reviews", f"{response.status_code} {response.reason}"
                )
            reviews = _REVIEW_LIST.validate_python(response.json())
        except (requests.RequestException, ValueError) as e:
            raise EnrichmentError(pr_number, "reviews", str(e)) from e

        logger.debug(f"PR #{pr_number}: {len(reviews)} reviews")
        return reviews

    def fetch_commit_status(
        self,
        repo: Repository,
        pr_number: int,
        sha: str,
        token: Optional[str],
    ) -> str:
        """Fetch aggregate CI status of a PR's head commit (Phase 2 - Enrichment).

        Returns:
            One of pending/success/failure/error, or "unknown" for any other
            state the API reports

        Raises:
            EnrichmentError: On any failure (HTTP, transport, payload)
        """
        url = f"{self.base_url}/repos/{repo.owner}/{repo.name}/commits/{sha}/status"
        try:
            response = self._make_github_request(url, token)
            if not _is_success(response):
                raise EnrichmentError(
                    pr_number, "status", f"{response.status_code} {response.reason}"
                )
            status = CommitStatus.model_validate(response.json())
        except (requests.RequestException, ValueError) as e:
            raise EnrichmentError(pr_number, "status", str(e)) from e

        if status.state not in KNOWN_CI_STATES:
            logger.warning(f"PR #{pr_number}: unrecognized CI state '{status.state}'")
            return "unknown"

        logger.debug(f"PR #{pr_number}: CI status {status.state}")
        return status.state

    def normalize(self, raw: RawPullRequest) -> NormalizedPullRequest:
        """Build the baseline record from listing data only (no network)."""
        if raw.requested_reviewers:
            reviewers = ", ".join(user.login for user in raw.requested_reviewers)
            logger.debug(f"PR #{raw.number}: review requested from {reviewers}")
        return NormalizedPullRequest(
            id=raw.id,
            number=raw.number,
            title=raw.title,
            url=raw.html_url,
            is_draft=raw.draft,
            has_reviewers=len(raw.requested_reviewers) > 0,
            has_been_reviewed=raw.review_comments > 0,
            is_approved=False,
            labels=tuple(label.name for label in raw.labels),
            ci_status="unknown",
        )

    def _reviews_or_none(
        self, repo: Repository, pr_number: int, token: str
    ) -> Optional[list[ReviewEvent]]:
        try:
            return self.fetch_reviews(repo, pr_number, token)
        except EnrichmentError as e:
            logger.warning(f"{e}; keeping baseline review state")
            return None

    def _status_or_none(
        self, repo: Repository, pr_number: int, sha: str, token: str
    ) -> Optional[str]:
        try:
            return self.fetch_commit_status(repo, pr_number, sha, token)
        except EnrichmentError as e:
            logger.warning(f"{e}; CI status stays unknown")
            return None

    @staticmethod
    def apply_enrichment(
        baseline: NormalizedPullRequest,
        reviews: Optional[list[ReviewEvent]],
        ci_status: Optional[str],
    ) -> NormalizedPullRequest:
        """Return a new record with whichever lookups succeeded applied.

        None for either lookup means it failed; that field keeps its baseline.
        """
        update: dict[str, Any] = {}
        if reviews is not None:
            update["has_been_reviewed"] = baseline.has_been_reviewed or len(reviews) > 0
            update["is_approved"] = any(review.state == APPROVED for review in reviews)
        if ci_status is not None:
            update["ci_status"] = ci_status
        if not update:
            return baseline
        return baseline.model_copy(update=update)

    def enrich(
        self,
        repo: Repository,
        raws: list[RawPullRequest],
        baselines: list[NormalizedPullRequest],
        token: str,
    ) -> list[NormalizedPullRequest]:
        """Run all review and status lookups concurrently, then join.

        Every sub-request handles its own failure, so one slow or broken PR
        cannot abort the others. Output order matches input order.
        """
        if not raws:
            return []

        workers = min(self.max_workers, 2 * len(raws))
        with ThreadPoolExecutor(max_workers=workers) as executor:
            review_futures: list[Future] = [
                executor.submit(self._reviews_or_none, repo, raw.number, token)
                for raw in raws
            ]
            status_futures: list[Future] = [
                executor.submit(self._status_or_none, repo, raw.number, raw.head.sha, token)
                for raw in raws
            ]
            enriched = [
                self.apply_enrichment(baseline, review_future.result(), status_future.result())
                for baseline, review_future, status_future in zip(
                    baselines, review_futures, status_futures
                )
            ]

        approved = sum(1 for pr in enriched if pr.is_approved)
        logger.info(f"Enriched {len(enriched)} PRs in {repo.full_name} ({approved} approved)")
        return enriched

    def fetch(self, repo: Repository, token: Optional[str] = None) -> list[NormalizedPullRequest]:
        """Fetch open PRs and, when a token is given, enrich them.

        Without a token no enrichment requests are made: every record has
        is_approved=False and ci_status="unknown".

        Raises:
            ApiError: If the listing request fails (only fatal failure)
        """
        raws = self.fetch_pr_list(repo, token)
        baselines = [self.normalize(raw) for raw in raws]

        if not token:
            logger.info("No token supplied - skipping review and CI enrichment")
            return baselines

        return self.enrich(repo, raws, baselines, token)
