"""Data models for the repo monitor."""

from models.config_models import Config, CredentialsConfig
from models.data_models import (
    BUCKET_TITLES,
    MonitorSnapshot,
    NormalizedPullRequest,
    PullRequestBuckets,
    RawPullRequest,
    Repository,
)

__all__ = [
    "Config",
    "CredentialsConfig",
    "BUCKET_TITLES",
    "MonitorSnapshot",
    "NormalizedPullRequest",
    "PullRequestBuckets",
    "RawPullRequest",
    "Repository",
]
