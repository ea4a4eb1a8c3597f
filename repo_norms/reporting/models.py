"""Data models and exceptions for report generation."""

from dataclasses import dataclass
from pathlib import Path
from typing import List, Optional


class ReportError(Exception):
    """Base exception for report-related errors."""

    pass


class ReportRenderError(ReportError):
    """Raised when a report template fails to render or a report cannot be written."""

    pass


@dataclass
class WrittenReports:
    """Files produced by one report run.

    Attributes:
        full_report: Path of the full configuration report
        deviations_report: Path of the deviations-only report, if generated
        json_export: Path of the JSON export, if requested
    """

    full_report: Path
    deviations_report: Optional[Path] = None
    json_export: Optional[Path] = None

    @property
    def paths(self) -> List[Path]:
        written = [self.full_report]
        if self.deviations_report is not None:
            written.append(self.deviations_report)
        if self.json_export is not None:
            written.append(self.json_export)
        return written
