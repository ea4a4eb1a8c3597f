"""Environment variable loading and validation."""

import os
import re
from typing import Optional

from .exceptions import ConfigurationError

VALID_LOG_LEVELS = ["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]

# GitHub organization logins: alphanumerics and single hyphens, max 39 chars
_ORG_PATTERN = re.compile(r"^[A-Za-z0-9](?:[A-Za-z0-9]|-(?=[A-Za-z0-9])){0,38}$")


class EnvironmentConfig:
    """Environment variable configuration holder."""

    def __init__(
        self,
        github_token: Optional[str] = None,
        github_org: Optional[str] = None,
        log_level: Optional[str] = None,
        github_api_url: Optional[str] = None,
    ):
        self.github_token = github_token
        self.github_org = github_org
        self.log_level = log_level
        self.github_api_url = github_api_url

    @property
    def has_github_credentials(self) -> bool:
        return bool(self.github_token and self.github_org)


def load_environment_config(require_github: bool = False) -> EnvironmentConfig:
    """
    Load and validate environment variables.

    Environment variables:
    - GITHUB_TOKEN: token used for the GitHub REST API
    - GITHUB_ORG: organization whose repositories are analyzed
    - LOG_LEVEL: override log level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
    - GITHUB_API_URL: override the API base URL (GitHub Enterprise)

    GITHUB_TOKEN and GITHUB_ORG are only mandatory when require_github is set,
    i.e. when records are fetched live instead of read from a snapshot.

    Args:
        require_github: Whether missing GitHub credentials are an error

    Returns:
        EnvironmentConfig object with validated values

    Raises:
        ConfigurationError: If required variables are missing or invalid
    """
    errors = []

    github_token = os.getenv("GITHUB_TOKEN") or None
    github_org = os.getenv("GITHUB_ORG") or None
    log_level = os.getenv("LOG_LEVEL") or None
    github_api_url = os.getenv("GITHUB_API_URL") or None

    if require_github:
        if not github_token:
            errors.append("Missing required environment variable: GITHUB_TOKEN")
        if not github_org:
            errors.append("Missing required environment variable: GITHUB_ORG")

    if github_org and not _ORG_PATTERN.match(github_org.strip()):
        errors.append(f"Invalid GITHUB_ORG: '{github_org}' is not a valid organization login")

    if log_level and log_level.upper() not in VALID_LOG_LEVELS:
        errors.append(
            f"Invalid LOG_LEVEL: '{log_level}'. Must be one of: {', '.join(VALID_LOG_LEVELS)}"
        )

    if errors:
        raise ConfigurationError(
            "Environment variable validation failed",
            errors=errors,
            suggestions=[
                "Copy .env.example to .env and fill in your credentials",
                "Set your GitHub token: export GITHUB_TOKEN=your_token_here",
                "Set your organization: export GITHUB_ORG=your_org_name",
                "Use --input to analyze a saved repository snapshot instead",
            ],
        )

    return EnvironmentConfig(
        github_token=github_token,
        github_org=github_org.strip() if github_org else None,
        log_level=log_level.upper() if log_level else None,
        github_api_url=github_api_url,
    )
