"""Repository adapters acquiring raw records for analysis.

This module provides:
- BaseAdapter: Shared archived/visibility pre-filtering
- GitHubAdapter: Organization listing and branch protection via the GitHub API
- SnapshotAdapter: Records loaded from a saved JSON or YAML file
- get_adapter: Factory choosing the adapter for a record source
"""

from .base import BaseAdapter, record_visibility
from .exceptions import (
    AdapterConfigurationError,
    AdapterError,
    AdapterHTTPError,
    AdapterResponseError,
    AdapterTimeoutError,
)
from .factory import get_adapter
from .github import GitHubAdapter
from .snapshot import SnapshotAdapter

__all__ = [
    "BaseAdapter",
    "GitHubAdapter",
    "SnapshotAdapter",
    "get_adapter",
    "record_visibility",
    "AdapterError",
    "AdapterHTTPError",
    "AdapterTimeoutError",
    "AdapterResponseError",
    "AdapterConfigurationError",
]
