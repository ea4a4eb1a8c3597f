"""Report generation for analysis results.

This module provides:
- ReportRenderer: Renders the full and deviations-only HTML reports with Jinja2
- ReportWriter: Writes dated report files and the JSON export
- ReportRenderError: Raised when a report cannot be rendered or written
"""

from .models import ReportError, ReportRenderError, WrittenReports
from .templates import ReportRenderer, format_value, protection_status
from .writer import ReportWriter, report_filename

__all__ = [
    "ReportRenderer",
    "ReportWriter",
    "WrittenReports",
    "ReportError",
    "ReportRenderError",
    "format_value",
    "protection_status",
    "report_filename",
]
