"""
API routes for the Repo Monitor dashboard.

Provides endpoints for managing the stored token and last repository,
and for running a fetch cycle that returns the five PR buckets.
"""

from typing import Optional

import requests
from fastapi import APIRouter, HTTPException, Response
from pydantic import BaseModel

from classifier.monitor import PullRequestMonitor
from fetchers.github import GitHubFetcher
from models.data_models import MonitorSnapshot, Repository
from storage.credential_store import CredentialStore
from storage.kv_store import JsonFileStore
from utils.config_loader import load_config
from utils.exceptions import ApiError, RepositoryValidationError
from utils.logger import setup_logger
from utils.repo_parser import require_repository

config = load_config()
logger = setup_logger(config.log_level, __name__)

credential_store = CredentialStore(JsonFileStore(config.state_file))
monitor = PullRequestMonitor(
    GitHubFetcher(
        base_url=config.api_base_url,
        max_workers=config.max_workers,
        timeout=config.request_timeout,
    )
)

router = APIRouter(prefix="/api", tags=["monitor"])


class TokenRequest(BaseModel):
    """Request body for saving a token."""
    token: str


class TokenStatusResponse(BaseModel):
    has_token: bool


class MonitorRequest(BaseModel):
    """Request body for the monitor endpoint."""
    repository: str


def _resolve_token() -> Optional[str]:
    """Stored token first, then GITHUB_TOKEN from configuration."""
    return credential_store.get_token() or config.credentials.github_token


def _run_cycle(repo: Repository) -> MonitorSnapshot:
    try:
        return monitor.refresh(repo, _resolve_token())
    except ApiError as e:
        logger.error(f"Fetch cycle for {repo.full_name} failed: {e}")
        raise HTTPException(status_code=502, detail=e.message)
    except requests.RequestException as e:
        logger.error(f"Fetch cycle for {repo.full_name} failed: {e}")
        raise HTTPException(status_code=502, detail=f"Could not reach GitHub: {e}")


@router.get("/health")
def health():
    return {"status": "ok"}


@router.get("/token", response_model=TokenStatusResponse)
def token_status():
    """Report whether a token is stored (the token itself is never returned)."""
    return TokenStatusResponse(has_token=credential_store.has_token())


@router.put("/token", status_code=204)
def save_token(body: TokenRequest):
    try:
        credential_store.save_token(body.token)
    except ValueError as e:
        raise HTTPException(status_code=422, detail=str(e))
    return Response(status_code=204)


@router.delete("/token", status_code=204)
def clear_token():
    credential_store.clear_token()
    return Response(status_code=204)


@router.get("/last-repository", response_model=Repository)
def last_repository():
    repo = credential_store.get_last_repository()
    if repo is None:
        raise HTTPException(status_code=404, detail="No repository stored")
    return repo


@router.delete("/last-repository", status_code=204)
def clear_last_repository():
    credential_store.clear_last_repository()
    return Response(status_code=204)


@router.post("/monitor", response_model=MonitorSnapshot)
def start_monitoring(body: MonitorRequest):
    """
    Parse a repository locator, remember it, and run a fetch cycle.

    Accepts "owner/repo" or a github.com URL. Returns 400 for an invalid
    locator and 502 when the GitHub listing request fails.
    """
    try:
        repo = require_repository(body.repository)
    except RepositoryValidationError as e:
        raise HTTPException(status_code=400, detail=str(e))

    credential_store.save_last_repository(repo)
    return _run_cycle(repo)


@router.get("/repos/{owner}/{name}/pull-requests", response_model=MonitorSnapshot)
def repository_pull_requests(owner: str, name: str):
    """Run a fetch cycle for an explicit repository (last repository untouched)."""
    return _run_cycle(Repository(owner=owner, name=name))
