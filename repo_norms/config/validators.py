"""Additional validation utilities for configuration."""

import warnings
from typing import Any, Dict, List

from .fields import DEFAULT_FIELD_KINDS, DEFAULT_FIELDS, FieldKind


def _configured_field_names(config_dict: Dict[str, Any]) -> List[str]:
    """Best-effort list of field names from a raw (unvalidated) config dict."""
    fields = config_dict.get("fields", list(DEFAULT_FIELDS))
    names = []
    if isinstance(fields, list):
        for entry in fields:
            if isinstance(entry, str):
                names.append(entry.strip())
            elif isinstance(entry, dict) and isinstance(entry.get("name"), str):
                names.append(entry["name"].strip())
    return names


def _has_multiset_field(config_dict: Dict[str, Any]) -> bool:
    fields = config_dict.get("fields", list(DEFAULT_FIELDS))
    if not isinstance(fields, list):
        return False
    for entry in fields:
        if isinstance(entry, str) and DEFAULT_FIELD_KINDS.get(entry.strip()) is FieldKind.MULTISET:
            return True
        if isinstance(entry, dict):
            kind = entry.get("kind")
            name = entry.get("name")
            if kind == FieldKind.MULTISET.value:
                return True
            if kind is None and isinstance(name, str):
                if DEFAULT_FIELD_KINDS.get(name.strip()) is FieldKind.MULTISET:
                    return True
    return False


def check_for_warnings(config_dict: Dict[str, Any]) -> List[str]:
    """
    Check configuration for potential issues and return warnings.

    Args:
        config_dict: Raw configuration dictionary

    Returns:
        List of warning messages
    """
    warning_messages = []
    field_names = _configured_field_names(config_dict)

    deviation = config_dict.get("deviation_settings", {})
    if isinstance(deviation, dict):
        # Ignored fields that are not analyzed at all
        ignore_fields = deviation.get("ignore_fields", [])
        if isinstance(ignore_fields, list):
            unknown = [
                name for name in ignore_fields
                if isinstance(name, str) and name.strip() not in field_names
            ]
            if unknown:
                warning_messages.append(
                    f"ignore_fields lists fields that are not analyzed: {', '.join(unknown)}"
                )

        # A zero threshold turns every record into a topic deviation
        for key in ("topic_missing_threshold", "topic_extra_threshold"):
            if deviation.get(key) == 0:
                warning_messages.append(
                    f"{key} is 0, every repository will be reported as deviating on topics"
                )

    report = config_dict.get("report_settings", {})
    if isinstance(report, dict):
        if report.get("max_topics_in_norms") == 0 and _has_multiset_field(config_dict):
            warning_messages.append(
                "max_topics_in_norms is 0, the topics norm will always be empty"
            )

    github = config_dict.get("github", {})
    if isinstance(github, dict):
        if not any(
            github.get(key, True)
            for key in ("include_private", "include_public", "include_internal")
        ):
            warning_messages.append(
                "All repository visibilities are excluded, no repositories will be analyzed"
            )

    return warning_messages


def emit_warnings(warning_messages: List[str]) -> None:
    """
    Emit warning messages using Python's warnings module.

    Args:
        warning_messages: List of warning messages to emit
    """
    for message in warning_messages:
        warnings.warn(message, UserWarning, stacklevel=2)
