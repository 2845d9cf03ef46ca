"""
Pull request monitor - runs fetch cycles and keeps the latest snapshot.

Each refresh takes a generation number before fetching. When the fetch
returns, its snapshot is published as `latest` only if no newer refresh has
started in the meantime, so a slow stale response never overwrites a newer one.
"""

import logging
from datetime import datetime, timezone
from threading import Lock
from typing import Optional

from classifier.classifier import classify
from fetchers.github import GitHubFetcher
from models.data_models import MonitorSnapshot, NormalizedPullRequest, Repository

logger = logging.getLogger(__name__)


class PullRequestMonitor:
    """Fetch, classify and publish pull request snapshots for one dashboard."""

    def __init__(self, fetcher: GitHubFetcher):
        self.fetcher = fetcher
        self._mu = Lock()
        self._generation = 0
        self._latest: Optional[MonitorSnapshot] = None

    @property
    def latest(self) -> Optional[MonitorSnapshot]:
        with self._mu:
            return self._latest

    @property
    def generation(self) -> int:
        with self._mu:
            return self._generation

    def refresh(self, repo: Repository, token: Optional[str] = None) -> MonitorSnapshot:
        """
        Run one fetch cycle.

        Args:
            repo: Repository to monitor
            token: Optional access token (enables review/CI enrichment)

        Returns:
            The snapshot produced by this cycle (even if a newer cycle has
            already superseded it and it was not published)

        Raises:
            ApiError: If the pull request listing request fails
        """
        with self._mu:
            self._generation += 1
            generation = self._generation

        prs = self.fetcher.fetch(repo, token)
        snapshot = MonitorSnapshot(
            repository=repo,
            pull_requests=tuple(prs),
            buckets=classify(prs),
            generation=generation,
            fetched_at=datetime.now(timezone.utc),
            authenticated=bool(token),
        )

        with self._mu:
            if generation == self._generation:
                self._latest = snapshot
            else:
                logger.warning(
                    f"Discarding stale snapshot for {repo.full_name} "
                    f"(generation {generation}, current {self._generation})"
                )
                return snapshot

        counts = snapshot.buckets.counts()
        logger.info(
            f"{repo.full_name}: {len(prs)} open PRs - "
            + ", ".join(f"{name}={count}" for name, count in counts.items())
        )
        return snapshot

    def pull_requests_with_no_reviewers(
        self, repo: Repository, token: Optional[str] = None
    ) -> tuple[NormalizedPullRequest, ...]:
        """Open, non-draft PRs with no reviewers and no reviews."""
        return self.refresh(repo, token).buckets.no_reviewer

    def reviewed_pull_requests(
        self, repo: Repository, token: Optional[str] = None
    ) -> tuple[NormalizedPullRequest, ...]:
        """Open, non-draft PRs that have been reviewed."""
        return self.refresh(repo, token).buckets.reviewed
