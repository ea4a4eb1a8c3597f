"""Snapshot adapter for offline analysis of saved repository listings."""

import json
from pathlib import Path
from typing import Any, Dict, List, Union

import yaml

from repo_norms.logging import get_logger

from .base import BaseAdapter
from .exceptions import AdapterConfigurationError, AdapterResponseError

logger = get_logger(__name__, component="adapter")

YAML_SUFFIXES = (".yaml", ".yml")


class SnapshotAdapter(BaseAdapter):
    """Adapter reading repository records from a JSON or YAML file.

    The file holds either a list of repository records or a mapping with a
    "repositories" list, e.g. a saved GET /orgs/{org}/repos response with
    branch_protection descriptors already attached.
    """

    ADAPTER_NAME = "snapshot"

    def __init__(self, path: Union[str, Path], **filters: bool) -> None:
        """Initialize adapter.

        Args:
            path: Snapshot file path
            **filters: Pre-filter flags passed to BaseAdapter

        Raises:
            AdapterConfigurationError: If the file does not exist
        """
        super().__init__(**filters)
        self.path = Path(path)
        if not self.path.is_file():
            raise AdapterConfigurationError(f"Snapshot file not found: {self.path}")

    def fetch_records(self) -> List[Dict[str, Any]]:
        """Load and pre-filter the snapshot's records.

        Raises:
            AdapterResponseError: If the file cannot be parsed or has the wrong shape
        """
        data = self._load()

        if isinstance(data, dict) and "repositories" in data:
            data = data["repositories"]
        if not isinstance(data, list):
            raise AdapterResponseError(
                f"Snapshot must contain a list of repositories, got {type(data).__name__}"
            )

        invalid = [index for index, record in enumerate(data) if not isinstance(record, dict)]
        if invalid:
            raise AdapterResponseError(
                f"Snapshot entries must be objects; invalid entries at positions: "
                f"{', '.join(str(index) for index in invalid)}"
            )

        records = self.filter_records(data)
        logger.info(
            f"Loaded {len(records)} repositories from snapshot",
            extra={
                "event": "adapter.snapshot.loaded",
                "path": str(self.path),
                "total": len(data),
                "count": len(records),
            },
        )
        return records

    def _load(self) -> Any:
        try:
            with open(self.path, "r", encoding="utf-8") as f:
                if self.path.suffix.lower() in YAML_SUFFIXES:
                    return yaml.safe_load(f)
                return json.load(f)
        except (json.JSONDecodeError, yaml.YAMLError) as e:
            raise AdapterResponseError(f"Failed to parse snapshot {self.path}: {e}") from e
        except OSError as e:
            raise AdapterResponseError(f"Failed to read snapshot {self.path}: {e}") from e
