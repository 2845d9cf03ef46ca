"""
Credential store for the GitHub token and the last monitored repository.

This is the only component that touches the durable key-value store.
Absence is a normal return value: no getter raises for a missing key.
"""

import json
import logging
from typing import Optional

from pydantic import ValidationError

from models.data_models import Repository
from storage.kv_store import JsonFileStore
from utils.exceptions import StorageParseError

logger = logging.getLogger(__name__)

GITHUB_TOKEN_KEY = "github_token"
LAST_REPOSITORY_KEY = "last_repository"


class CredentialStore:
    """Persist and retrieve the access token and last-used repository."""

    def __init__(self, store: JsonFileStore):
        self.store = store

    # Token

    def get_token(self) -> Optional[str]:
        """Return the stored token, or None if none is stored."""
        return self.store.get(GITHUB_TOKEN_KEY) or None

    def save_token(self, token: str) -> None:
        """
        Save (overwrite) the GitHub token.

        Raises:
            ValueError: If the token is empty or whitespace-only
        """
        token = (token or "").strip()
        if not token:
            raise ValueError("GitHub token must not be empty")
        self.store.set(GITHUB_TOKEN_KEY, token)
        logger.info("GitHub token saved")

    def clear_token(self) -> None:
        self.store.delete(GITHUB_TOKEN_KEY)
        logger.info("GitHub token cleared")

    def has_token(self) -> bool:
        return self.get_token() is not None

    # Last repository

    def get_last_repository(self) -> Optional[Repository]:
        """Return the last-used repository, or None if absent or malformed."""
        raw = self.store.get(LAST_REPOSITORY_KEY)
        if raw is None:
            return None

        try:
            return self._decode_repository(raw)
        except StorageParseError as e:
            logger.warning(f"{e}; treating as no stored repository")
            return None

    def save_last_repository(self, repo: Repository) -> None:
        self.store.set(
            LAST_REPOSITORY_KEY,
            json.dumps({"owner": repo.owner, "name": repo.name}),
        )
        logger.debug(f"Saved last repository: {repo.full_name}")

    def clear_last_repository(self) -> None:
        self.store.delete(LAST_REPOSITORY_KEY)

    def has_last_repository(self) -> bool:
        return self.get_last_repository() is not None

    @staticmethod
    def _decode_repository(raw: str) -> Repository:
        try:
            data = json.loads(raw)
        except ValueError as e:
            raise StorageParseError(LAST_REPOSITORY_KEY, f"invalid JSON ({e})", raw) from e

        if not isinstance(data, dict):
            raise StorageParseError(LAST_REPOSITORY_KEY, "expected an object", raw)

        try:
            return Repository(owner=data.get("owner"), name=data.get("name"))
        except ValidationError as e:
            raise StorageParseError(
                LAST_REPOSITORY_KEY, "missing or empty owner/name", raw
            ) from e
