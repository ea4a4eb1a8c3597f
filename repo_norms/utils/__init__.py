"""Utility functions for time handling."""

from .timestamps import (
    ensure_utc,
    format_display_timestamp,
    format_report_date,
    format_timestamp,
    utc_now,
)

__all__ = [
    "utc_now",
    "ensure_utc",
    "format_timestamp",
    "format_report_date",
    "format_display_timestamp",
]
