"""Factory function for instantiating repository adapters."""

from pathlib import Path
from typing import Iterable, Optional, Union

from repo_norms.config.models import GitHubSettings, ReportSettings
from repo_norms.logging import get_logger

from .base import BaseAdapter
from .exceptions import AdapterConfigurationError
from .github import GitHubAdapter
from .snapshot import SnapshotAdapter

logger = get_logger(__name__, component="adapter")

SOURCES = ("github", "snapshot")


def get_adapter(
    source: str,
    github_settings: Optional[GitHubSettings] = None,
    report_settings: Optional[ReportSettings] = None,
    org: Optional[str] = None,
    token: Optional[str] = None,
    snapshot_path: Optional[Union[str, Path]] = None,
    protection_fields: Iterable[str] = ("branch_protection",),
) -> BaseAdapter:
    """Factory function to instantiate the adapter for a record source.

    Args:
        source: "github" or "snapshot"
        github_settings: GitHub acquisition settings (also supply visibility filters)
        report_settings: Report settings (include_archived)
        org: Organization login (github)
        token: GitHub token (github)
        snapshot_path: Snapshot file (snapshot)
        protection_fields: Fields that receive the branch protection descriptor

    Returns:
        Instantiated adapter

    Raises:
        AdapterConfigurationError: If the source is unknown or its settings are incomplete

    Example:
        >>> adapter = get_adapter("snapshot", snapshot_path="repos.json")
        >>> records = adapter.fetch_records()
    """
    github_settings = github_settings or GitHubSettings()
    report_settings = report_settings or ReportSettings()
    source_name = source.lower() if isinstance(source, str) else str(source)

    logger.debug(
        "Creating adapter instance",
        extra={"event": "adapter.create", "source": source_name},
    )

    if source_name == "github":
        return GitHubAdapter(
            org=org or "",
            token=token or "",
            settings=github_settings,
            include_archived=report_settings.include_archived,
            protection_fields=protection_fields,
        )

    if source_name == "snapshot":
        if snapshot_path is None:
            raise AdapterConfigurationError("Snapshot source requires a file path")
        return SnapshotAdapter(
            snapshot_path,
            include_archived=report_settings.include_archived,
            include_private=github_settings.include_private,
            include_public=github_settings.include_public,
            include_internal=github_settings.include_internal,
        )

    raise AdapterConfigurationError(
        f"Unknown record source: {source}. Supported sources: {', '.join(SOURCES)}"
    )
