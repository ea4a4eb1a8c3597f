"""Core domain models for repository records.

This module defines the data structures shared by acquisition, analysis and
reporting:
- RecordIdentity: how a repository is named and linked in results and reports
- BranchProtection: the branch-protection descriptor attached to raw records
"""

from typing import Any, Dict, Mapping, Optional

from pydantic import BaseModel, Field

NOT_FETCHED_ERROR = "Not fetched"
NO_PERMISSION_ERROR = "No permission to view branch protection"

# Sub-objects of the protection API whose {"enabled": bool} wrapper is flattened
_TOGGLE_SETTINGS = (
    "enforce_admins",
    "allow_force_pushes",
    "allow_deletions",
    "block_creations",
    "required_conversation_resolution",
    "lock_branch",
    "allow_fork_syncing",
)


class RecordIdentity(BaseModel):
    """Identity of one analyzed repository."""

    name: str = Field(..., description="Repository name")
    full_name: str = Field(..., description="owner/name")
    html_url: Optional[str] = Field(None, description="Link to the repository")

    model_config = {"frozen": True}

    @classmethod
    def from_record(cls, raw_record: Mapping[str, Any], position: int = 0) -> "RecordIdentity":
        """Derive the identity of a raw repository record.

        Records without a name are labeled by their position in the input.
        """
        name = raw_record.get("name")
        if not isinstance(name, str) or not name:
            name = f"record-{position}"
        full_name = raw_record.get("full_name")
        if not isinstance(full_name, str) or not full_name:
            full_name = name
        html_url = raw_record.get("html_url")
        return cls(
            name=name,
            full_name=full_name,
            html_url=html_url if isinstance(html_url, str) else None,
        )


class BranchProtection(BaseModel):
    """Branch protection state of a repository's default branch.

    Three shapes exist, and their exact key sets matter because descriptors
    are compared by deep equality:
    - enabled: every protection setting is present (nested ones may be null)
    - disabled: only {"enabled": false}
    - unknown: {"enabled": null, "error": ...} when the state could not be read
    """

    enabled: Optional[bool] = None
    required_status_checks: Optional[Dict[str, Any]] = None
    enforce_admins: Optional[bool] = None
    required_pull_request_reviews: Optional[Dict[str, Any]] = None
    restrictions: Optional[Dict[str, Any]] = None
    allow_force_pushes: Optional[bool] = None
    allow_deletions: Optional[bool] = None
    block_creations: Optional[bool] = None
    required_conversation_resolution: Optional[bool] = None
    lock_branch: Optional[bool] = None
    allow_fork_syncing: Optional[bool] = None
    error: Optional[str] = None

    @classmethod
    def from_api(cls, data: Mapping[str, Any]) -> "BranchProtection":
        """Build an enabled descriptor from a protection API payload."""
        settings: Dict[str, Any] = {
            "enabled": True,
            "required_status_checks": _strip_urls(data.get("required_status_checks")),
            "required_pull_request_reviews": _strip_urls(
                data.get("required_pull_request_reviews")
            ),
            "restrictions": _strip_urls(data.get("restrictions")),
        }
        for key in _TOGGLE_SETTINGS:
            toggle = data.get(key)
            settings[key] = bool(toggle.get("enabled")) if isinstance(toggle, Mapping) else False
        return cls(**settings)

    @classmethod
    def disabled(cls) -> "BranchProtection":
        return cls(enabled=False)

    @classmethod
    def unknown(cls, error: str) -> "BranchProtection":
        return cls(enabled=None, error=error)

    @classmethod
    def not_fetched(cls) -> "BranchProtection":
        return cls.unknown(NOT_FETCHED_ERROR)

    @property
    def is_known(self) -> bool:
        return self.enabled is not None

    def to_descriptor(self) -> Dict[str, Any]:
        """Plain-dict descriptor holding only the keys set for this shape."""
        descriptor = self.model_dump(exclude_unset=True)
        descriptor.setdefault("enabled", self.enabled)
        return descriptor


def _strip_urls(value: Any) -> Any:
    """Drop API link keys (url, *_url) from nested protection settings.

    Links embed the repository name, so keeping them would make every
    repository's protection unique.
    """
    if isinstance(value, Mapping):
        return {
            key: _strip_urls(item)
            for key, item in value.items()
            if not (key == "url" or key.endswith("_url"))
        }
    if isinstance(value, list):
        return [_strip_urls(item) for item in value]
    return value
