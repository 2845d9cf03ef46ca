#!/usr/bin/env python3
"""
Repo Monitor - Main CLI entrypoint

Polls a GitHub repository's open pull requests and sorts them into
actionable buckets: no reviewer, reviewed, approved needing QA,
approved with failing CI, and approved ready to merge.

Usage:
    python main.py monitor facebook/react                       # short format
    python main.py monitor https://github.com/facebook/react    # URL
    python main.py monitor                                      # last repository
    python main.py monitor facebook/react --bucket ready_to_merge
    python main.py token set ghp_xxx
    python main.py serve --port 8000
"""

import argparse
import json
import sys
from typing import Optional

import requests

from classifier.monitor import PullRequestMonitor
from fetchers.github import GitHubFetcher
from models.config_models import Config
from models.data_models import BUCKET_TITLES, MonitorSnapshot
from storage.credential_store import CredentialStore
from storage.kv_store import JsonFileStore
from utils.config_loader import load_config
from utils.exceptions import ApiError, RepositoryValidationError
from utils.logger import setup_logger
from utils.repo_parser import require_repository

logger = setup_logger()


def build_credential_store(config: Config) -> CredentialStore:
    return CredentialStore(JsonFileStore(config.state_file))


def build_monitor(config: Config) -> PullRequestMonitor:
    fetcher = GitHubFetcher(
        base_url=config.api_base_url,
        max_workers=config.max_workers,
        timeout=config.request_timeout,
    )
    return PullRequestMonitor(fetcher)


def resolve_token(
    cli_token: Optional[str],
    credential_store: CredentialStore,
    config: Config,
) -> Optional[str]:
    """Pick the token: --token flag, then stored token, then GITHUB_TOKEN."""
    return cli_token or credential_store.get_token() or config.credentials.github_token


def render_snapshot(snapshot: MonitorSnapshot, bucket: Optional[str] = None) -> str:
    """Format a snapshot as plain text, one section per bucket."""
    lines = [
        f"Pull Request Monitor for {snapshot.repository.full_name} "
        f"({len(snapshot.pull_requests)} open PRs)"
    ]
    if not snapshot.authenticated:
        lines.append("(no token: approval and CI status unavailable)")

    buckets = [bucket] if bucket else list(BUCKET_TITLES)
    for name in buckets:
        prs = snapshot.buckets.get(name)
        lines.append("")
        lines.append(f"{BUCKET_TITLES[name]} ({len(prs)})")
        lines.append("-" * 80)
        if not prs:
            lines.append("  No pull requests found in this category.")
        for pr in prs:
            lines.append(f"  #{pr.number}: {pr.title}")
            lines.append(f"      {pr.url}")
    return "\n".join(lines)


def monitor_repository(
    repository: Optional[str],
    config: Config,
    credential_store: CredentialStore,
    monitor: PullRequestMonitor,
    token: Optional[str] = None,
    bucket: Optional[str] = None,
    as_json: bool = False,
) -> bool:
    """
    Run one fetch cycle and print the buckets.

    Args:
        repository: "owner/repo" or URL; None falls back to the last repository
        config: Loaded configuration
        credential_store: Token and last-repository store
        monitor: Monitor used to fetch and classify
        token: Token given on the command line (highest precedence)
        bucket: Print only this bucket
        as_json: Dump the snapshot as JSON instead of text

    Returns:
        bool: True if successful, False otherwise
    """
    if repository:
        try:
            repo = require_repository(repository)
        except RepositoryValidationError as e:
            logger.error(str(e))
            return False
    else:
        repo = credential_store.get_last_repository()
        if repo is None:
            logger.error("No repository given and no last repository stored")
            return False
        logger.info(f"Using last repository: {repo.full_name}")

    credential_store.save_last_repository(repo)

    try:
        snapshot = monitor.refresh(repo, resolve_token(token, credential_store, config))
    except ApiError as e:
        logger.error(f"✗ {e}")
        return False
    except requests.RequestException as e:
        logger.error(f"✗ Could not reach GitHub: {e}")
        return False

    if as_json:
        print(snapshot.model_dump_json(indent=2))
    else:
        print(render_snapshot(snapshot, bucket))
    return True


def manage_token(action: str, value: Optional[str], credential_store: CredentialStore) -> bool:
    """Handle `token set|clear|status`."""
    if action == "set":
        try:
            credential_store.save_token(value or "")
        except ValueError as e:
            logger.error(str(e))
            return False
        print("GitHub token is set")
    elif action == "clear":
        credential_store.clear_token()
        print("GitHub token cleared")
    else:
        print("GitHub token is set" if credential_store.has_token() else "No GitHub token stored")
    return True


def manage_last_repository(action: str, credential_store: CredentialStore) -> bool:
    """Handle `last-repo show|clear`."""
    if action == "clear":
        credential_store.clear_last_repository()
        print("Last repository cleared")
        return True

    repo = credential_store.get_last_repository()
    if repo is None:
        print("No last repository stored")
    else:
        print(json.dumps({"owner": repo.owner, "name": repo.name}))
    return True


def main():
    """Main CLI entrypoint."""
    parser = argparse.ArgumentParser(
        description="Repo Monitor - Actionable buckets for open GitHub pull requests",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # Monitor a repository (saved as last repository)
  python main.py monitor facebook/react

  # Re-run on the last repository, only the ready-to-merge bucket
  python main.py monitor --bucket ready_to_merge

  # Store a token so approvals and CI status are fetched
  python main.py token set ghp_xxx
        """
    )

    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    monitor_parser = subparsers.add_parser(
        "monitor",
        help="Fetch open PRs and print the buckets"
    )
    monitor_parser.add_argument(
        "repository",
        nargs="?",
        default=None,
        help="Repository as 'owner/repo' or GitHub URL. Defaults to the last repository."
    )
    monitor_parser.add_argument(
        "--token",
        default=None,
        help="GitHub token for this run (overrides stored token and GITHUB_TOKEN)"
    )
    monitor_parser.add_argument(
        "--bucket",
        choices=list(BUCKET_TITLES),
        default=None,
        help="Print only one bucket"
    )
    monitor_parser.add_argument(
        "--json",
        action="store_true",
        help="Print the full snapshot as JSON"
    )

    token_parser = subparsers.add_parser("token", help="Manage the stored GitHub token")
    token_parser.add_argument("action", choices=["set", "clear", "status"])
    token_parser.add_argument("value", nargs="?", default=None, help="Token (for 'set')")

    last_repo_parser = subparsers.add_parser("last-repo", help="Show or clear the last repository")
    last_repo_parser.add_argument("action", choices=["show", "clear"])

    serve_parser = subparsers.add_parser("serve", help="Start the dashboard API server")
    serve_parser.add_argument(
        "--port",
        type=int,
        default=8000,
        help="Port to run the API server on (default: 8000)"
    )
    serve_parser.add_argument(
        "--host",
        type=str,
        default="127.0.0.1",
        help="Host to bind the server to (default: 127.0.0.1)"
    )
    serve_parser.add_argument(
        "--no-reload",
        action="store_true",
        help="Disable auto-reload"
    )

    args = parser.parse_args()

    if not args.command:
        parser.print_help()
        sys.exit(1)

    config = load_config()
    setup_logger(config.log_level)
    credential_store = build_credential_store(config)

    if args.command == "monitor":
        success = monitor_repository(
            repository=args.repository,
            config=config,
            credential_store=credential_store,
            monitor=build_monitor(config),
            token=args.token,
            bucket=args.bucket,
            as_json=args.json,
        )
        sys.exit(0 if success else 1)

    elif args.command == "token":
        sys.exit(0 if manage_token(args.action, args.value, credential_store) else 1)

    elif args.command == "last-repo":
        sys.exit(0 if manage_last_repository(args.action, credential_store) else 1)

    elif args.command == "serve":
        from backend.server import run_server
        run_server(args.host, args.port, reload=not args.no_reload)
        sys.exit(0)


if __name__ == "__main__":
    main()
