"""Configuration loader that reads from .env and validates with Pydantic."""

import os
import sys
from pathlib import Path
from dotenv import load_dotenv
from pydantic import ValidationError

from models.config_models import DEFAULT_STATE_FILE, Config, CredentialsConfig


def load_config() -> Config:
    """
    Load and validate configuration from environment variables.

    Reads from .env file in the project root and validates all
    settings using Pydantic models. Every setting has a default, so an
    empty environment yields a usable (unauthenticated) configuration.

    Returns:
        Config: Validated configuration object

    Raises:
        SystemExit: If configuration is invalid
    """
    env_path = Path(__file__).parent.parent / ".env"
    load_dotenv(dotenv_path=env_path)

    try:
        config = Config(
            credentials=CredentialsConfig(
                github_token=os.getenv("GITHUB_TOKEN"),
            ),
            log_level=os.getenv("LOG_LEVEL", "INFO"),
            api_base_url=os.getenv("GITHUB_API_URL", "https://api.github.com"),
            state_file=os.getenv("REPO_MONITOR_STATE_FILE") or DEFAULT_STATE_FILE,
            max_workers=os.getenv("REPO_MONITOR_MAX_WORKERS", "8"),
            request_timeout=os.getenv("REPO_MONITOR_TIMEOUT", "30"),
        )

        return config

    except ValidationError as e:
        print("❌ Configuration validation failed:", file=sys.stderr)
        print("\nPlease check your .env file. Missing or invalid fields:", file=sys.stderr)

        for error in e.errors():
            field_path = " → ".join(str(x) for x in error["loc"])
            message = error["msg"]
            print(f"  • {field_path}: {message}", file=sys.stderr)

        print("\nHint: Copy .env.example to .env and adjust the settings.", file=sys.stderr)
        sys.exit(1)
