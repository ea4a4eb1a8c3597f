"""Report file output: HTML reports and JSON export."""

import json
import re
from datetime import datetime
from pathlib import Path
from typing import Optional, Union

from repo_norms.config.models import ReportSettings
from repo_norms.logging import get_logger
from repo_norms.pipeline.models import AnalysisResult
from repo_norms.utils.timestamps import format_report_date, utc_now

from .models import ReportRenderError, WrittenReports
from .templates import ReportRenderer

logger = get_logger(__name__, component="reporting")

FULL_REPORT_PREFIX = "repo-config-analysis"
DEVIATIONS_REPORT_PREFIX = "repo-deviations"


def report_filename(prefix: str, org: str, generated_at: Optional[datetime] = None) -> str:
    """File name of a dated report, e.g. repo-deviations-acme-2025-11-04.html."""
    safe_org = re.sub(r"[^A-Za-z0-9._-]+", "-", org).strip("-") or "org"
    return f"{prefix}-{safe_org}-{format_report_date(generated_at)}.html"


class ReportWriter:
    """Writes the reports of one analysis into the configured output directory."""

    def __init__(
        self,
        renderer: ReportRenderer,
        report_settings: Optional[ReportSettings] = None,
        output_dir: Optional[Union[str, Path]] = None,
    ):
        """Initialize ReportWriter.

        Args:
            renderer: Renderer producing the HTML documents
            report_settings: Report settings (output_dir, generate_both_reports)
            output_dir: Overrides report_settings.output_dir
        """
        self.renderer = renderer
        self.report_settings = report_settings or ReportSettings()
        self.output_dir = Path(output_dir or self.report_settings.output_dir)

    def write(
        self, result: AnalysisResult, org: str, generated_at: Optional[datetime] = None
    ) -> WrittenReports:
        """Render and write the full report, plus the deviations report if enabled.

        Raises:
            ReportRenderError: If rendering or writing fails
        """
        generated_at = generated_at or utc_now()

        full_path = self.output_dir / report_filename(FULL_REPORT_PREFIX, org, generated_at)
        self._write_text(full_path, self.renderer.render_full(result, org, generated_at))
        written = WrittenReports(full_report=full_path)

        if self.report_settings.generate_both_reports:
            deviations_path = self.output_dir / report_filename(
                DEVIATIONS_REPORT_PREFIX, org, generated_at
            )
            self._write_text(
                deviations_path, self.renderer.render_deviations(result, org, generated_at)
            )
            written.deviations_report = deviations_path

        return written

    def write_json(self, result: AnalysisResult, path: Union[str, Path]) -> Path:
        """Export the analysis result as JSON.

        Raises:
            ReportRenderError: If the file cannot be written
        """
        json_path = Path(path)
        payload = json.dumps(result.to_dict(), indent=2, ensure_ascii=False, default=str)
        self._write_text(json_path, payload + "\n")
        return json_path

    def _write_text(self, path: Path, content: str) -> None:
        try:
            path.parent.mkdir(parents=True, exist_ok=True)
            path.write_text(content, encoding="utf-8")
        except OSError as e:
            raise ReportRenderError(f"Failed to write report {path}: {e}") from e

        logger.info(
            f"Report written: {path}",
            extra={"event": "report.written", "path": str(path), "bytes": len(content)},
        )
