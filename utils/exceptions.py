"""Error types raised by the monitor.

Only ApiError aborts a fetch cycle. EnrichmentError and StorageParseError are
raised internally, logged, and degrade a single record or stored value.
"""

from typing import Optional


class RepositoryValidationError(ValueError):
    """Repository locator could not be parsed into owner/name."""

    def __init__(self, text: str):
        self.text = text
        super().__init__(
            f"Invalid repository: {text!r}. "
            "Use 'owner/repo' or 'https://github.com/owner/repo'"
        )


class ApiError(Exception):
    """Non-success response from the pull request listing request."""

    def __init__(self, status: int, status_text: str, api_name: str = "GitHub"):
        self.status = status
        self.status_text = status_text
        self.message = f"{api_name} API error: {status} {status_text}"
        super().__init__(self.message)


class EnrichmentError(Exception):
    """A per-pull-request review or status lookup failed."""

    def __init__(self, pr_number: int, lookup: str, reason: str):
        self.pr_number = pr_number
        self.lookup = lookup
        self.reason = reason
        super().__init__(f"{lookup} lookup failed for PR #{pr_number}: {reason}")


class StorageParseError(ValueError):
    """Stored value could not be decoded."""

    def __init__(self, key: str, reason: str, raw: Optional[str] = None):
        self.key = key
        self.raw = raw
        super().__init__(f"Malformed value for '{key}': {reason}")
