"""Configuration models for validation using Pydantic."""

from pathlib import Path
from typing import Optional
from pydantic import BaseModel, Field, field_validator


DEFAULT_STATE_FILE = Path.home() / ".repo_monitor" / "state.json"


class CredentialsConfig(BaseModel):
    """API credentials loaded from environment variables."""

    # Optional: without a token only the unauthenticated listing runs (no enrichment)
    github_token: Optional[str] = Field(None, description="GitHub personal access token")

    @field_validator("github_token")
    @classmethod
    def validate_github_token(cls, v: Optional[str]) -> Optional[str]:
        """Normalize empty token to None and reject the .env.example placeholder."""
        if v is None:
            return None
        v = v.strip()
        if not v:
            return None
        if v == "ghp_your_token_here":
            raise ValueError("GitHub token must be set in .env file (placeholder found)")
        return v


class Config(BaseModel):
    """Application configuration."""

    credentials: CredentialsConfig = Field(default_factory=CredentialsConfig)
    log_level: str = Field(default="INFO", description="Logging level")
    api_base_url: str = Field(default="https://api.github.com", description="GitHub REST API root")
    state_file: Path = Field(default=DEFAULT_STATE_FILE, description="Durable key-value store file")
    max_workers: int = Field(default=8, ge=1, le=64, description="Concurrent enrichment requests")
    request_timeout: float = Field(default=30.0, gt=0, description="Per-request timeout in seconds")

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        """Validate log level is one of the standard levels."""
        valid_levels = ["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]
        v_upper = v.upper()
        if v_upper not in valid_levels:
            raise ValueError(f"Log level must be one of: {', '.join(valid_levels)}")
        return v_upper

    @field_validator("api_base_url")
    @classmethod
    def validate_api_base_url(cls, v: str) -> str:
        """API root must be an http(s) URL; trailing slash is dropped."""
        if not v.startswith(("https://", "http://")):
            raise ValueError("GitHub API URL must start with https:// or http://")
        return v.rstrip("/")

    @field_validator("state_file")
    @classmethod
    def expand_state_file(cls, v: Path) -> Path:
        return v.expanduser()
