"""Base adapter class with the record pre-filters shared by all sources.

Adapters deliver raw repository records (plain dicts shaped like the GitHub
REST API's repository objects) to the analysis engine. Which repositories take
part in an analysis (archived ones, visibility classes) is decided here,
before the engine ever sees the record set.
"""

from abc import ABC, abstractmethod
from typing import Any, Dict, List, Mapping

from repo_norms.logging import get_logger

logger = get_logger(__name__, component="adapter")

VISIBILITIES = ("public", "private", "internal")


class BaseAdapter(ABC):
    """Base class for all repository adapters.

    All adapters must inherit from this class and implement fetch_records().

    Attributes:
        include_archived: Keep archived repositories in the record set
        include_private: Keep private repositories
        include_public: Keep public repositories
        include_internal: Keep internal repositories
    """

    ADAPTER_NAME = "base"

    def __init__(
        self,
        include_archived: bool = False,
        include_private: bool = True,
        include_public: bool = True,
        include_internal: bool = True,
    ) -> None:
        self.include_archived = include_archived
        self.include_private = include_private
        self.include_public = include_public
        self.include_internal = include_internal

    @abstractmethod
    def fetch_records(self) -> List[Dict[str, Any]]:
        """Fetch the raw repository records to analyze.

        Implementations must apply filter_records() to what they load, so
        every adapter honors the same pre-filters.

        Returns:
            List of raw repository records, in source order

        Raises:
            AdapterError: If the records cannot be acquired
        """
        pass

    def filter_records(self, records: List[Dict[str, Any]]) -> List[Dict[str, Any]]:
        """Drop records excluded by the archived and visibility settings."""
        kept = [record for record in records if self._is_included(record)]

        dropped = len(records) - len(kept)
        if dropped:
            logger.debug(
                f"Filtered out {dropped} repositories",
                extra={
                    "event": "adapter.records.filtered",
                    "adapter": self.ADAPTER_NAME,
                    "total": len(records),
                    "kept": len(kept),
                },
            )
        return kept

    def _is_included(self, record: Mapping[str, Any]) -> bool:
        if record.get("archived") and not self.include_archived:
            return False

        visibility = record_visibility(record)
        if visibility == "private":
            return self.include_private
        if visibility == "internal":
            return self.include_internal
        return self.include_public


def record_visibility(record: Mapping[str, Any]) -> str:
    """Visibility class of a repository record.

    Uses the record's "visibility" when it names a known class, else falls
    back to the "private" flag.
    """
    visibility = record.get("visibility")
    if isinstance(visibility, str) and visibility.lower() in VISIBILITIES:
        return visibility.lower()
    return "private" if record.get("private") else "public"
