"""HTML report rendering using Jinja2.

Both reports share one base layout; values are displayed according to the
kind of the field they belong to (topic tags, JSON blocks, protection status).
"""

import json
import logging
from datetime import datetime
from typing import Any, Dict, Mapping, Optional

from jinja2 import Environment, PackageLoader, StrictUndefined, TemplateError

from repo_norms.analysis.deviations import topic_of
from repo_norms.config.fields import FieldConfig
from repo_norms.pipeline.models import AnalysisResult
from repo_norms.utils.timestamps import format_display_timestamp, utc_now

from .models import ReportRenderError

logger = logging.getLogger(__name__)

FULL_REPORT_TEMPLATE = "full_report.html.j2"
DEVIATIONS_REPORT_TEMPLATE = "deviations_report.html.j2"


def format_value(value: Any) -> str:
    """Display form of a plain field value (null/true/false like JSON)."""
    if value is None:
        return "null"
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, (dict, list, tuple)):
        return to_json(value)
    return str(value)


def to_json(value: Any, indent: Optional[int] = 2) -> str:
    return json.dumps(value, indent=indent, ensure_ascii=False, default=str)


def protection_status(descriptor: Any) -> str:
    """Classify a branch protection descriptor as enabled, disabled or error."""
    if not isinstance(descriptor, Mapping) or descriptor.get("enabled") is None:
        return "error"
    return "enabled" if descriptor.get("enabled") else "disabled"


class ReportRenderer:
    """Renders the full and deviations-only HTML reports.

    Templates are loaded from the repo_norms.reporting.report_templates
    package and cached by the Jinja2 environment.
    """

    def __init__(
        self,
        field_config: Optional[FieldConfig] = None,
        custom_css: Optional[str] = None,
        template_dir: str = "report_templates",
    ):
        """Initialize renderer with a Jinja2 environment.

        Args:
            field_config: Field-kind table used to pick how values are displayed.
                Resolved from the result's field names when omitted.
            custom_css: Extra CSS appended to the report stylesheet
            template_dir: Directory name within the repo_norms.reporting package
        """
        self.field_config = field_config
        self.custom_css = custom_css or ""

        self.env = Environment(
            loader=PackageLoader("repo_norms.reporting", template_dir),
            autoescape=True,
            undefined=StrictUndefined,
            trim_blocks=True,
            lstrip_blocks=True,
        )
        self.env.filters["format_value"] = format_value
        self.env.filters["to_json"] = to_json
        self.env.filters["protection_status"] = protection_status
        self.env.filters["topic_of"] = topic_of

        logger.debug(f"Initialized ReportRenderer with templates from {template_dir}")

    def build_context(
        self,
        result: AnalysisResult,
        org: str,
        generated_at: Optional[datetime] = None,
    ) -> Dict[str, Any]:
        """Template variables shared by both reports."""
        field_config = self.field_config or FieldConfig.from_entries(result.field_names)
        return {
            "org": org,
            "generated_at": format_display_timestamp(generated_at or utc_now()),
            "field_names": result.field_names,
            "field_kinds": {spec.name: spec.kind.value for spec in field_config},
            "norms": result.norms,
            "records": result.records,
            "records_with_deviations": result.records_with_deviations,
            "deviation_counts": result.deviation_counts(),
            "ignored_fields": result.ignored_fields,
            "custom_css": self.custom_css,
        }

    def render_full(
        self, result: AnalysisResult, org: str, generated_at: Optional[datetime] = None
    ) -> str:
        """Render the full configuration report.

        Raises:
            ReportRenderError: If template rendering fails
        """
        return self._render(FULL_REPORT_TEMPLATE, self.build_context(result, org, generated_at))

    def render_deviations(
        self, result: AnalysisResult, org: str, generated_at: Optional[datetime] = None
    ) -> str:
        """Render the report listing only records with deviations.

        Raises:
            ReportRenderError: If template rendering fails
        """
        return self._render(
            DEVIATIONS_REPORT_TEMPLATE, self.build_context(result, org, generated_at)
        )

    def _render(self, template_name: str, context: Dict[str, Any]) -> str:
        try:
            template = self.env.get_template(template_name)
            html = template.render(context)
            logger.debug(f"Rendered report template: {template_name}")
            return html
        except TemplateError as e:
            error_msg = f"Template rendering failed for {template_name}: {e}"
            logger.error(error_msg, exc_info=True)
            raise ReportRenderError(error_msg) from e
