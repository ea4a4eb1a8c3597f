"""Domain models for the repository norms analyzer."""

from .models import (
    NO_PERMISSION_ERROR,
    NOT_FETCHED_ERROR,
    BranchProtection,
    RecordIdentity,
)

__all__ = [
    "BranchProtection",
    "RecordIdentity",
    "NOT_FETCHED_ERROR",
    "NO_PERMISSION_ERROR",
]
