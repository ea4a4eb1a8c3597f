"""Analysis orchestration: extract all, compute norms once, classify each."""

import logging
import time
from typing import Any, Iterable, List, Mapping, Optional, Tuple
from uuid import uuid4

from repo_norms.analysis.deviations import DeviationClassifier
from repo_norms.analysis.norms import NormCalculator
from repo_norms.config.exceptions import ConfigurationError
from repo_norms.config.fields import FieldConfig
from repo_norms.config.models import DeviationSettings, ReportSettings
from repo_norms.domain.models import RecordIdentity
from repo_norms.extraction.service import FieldExtractor
from repo_norms.logging import get_logger
from repo_norms.logging.context import log_context
from repo_norms.utils.timestamps import utc_now

from .models import AnalysisResult, RecordAnalysis

logger = get_logger(__name__, component="engine")


class AnalysisEngine:
    """
    Runs the three analysis phases over one record set.

    The phases always run in order: every record is extracted first, the
    norms are computed once from the complete set, and each record is then
    classified against that single shared norms map. The engine holds no
    per-run state, so one instance can analyze any number of record sets.
    """

    def __init__(
        self,
        field_config: FieldConfig,
        deviation_settings: Optional[DeviationSettings] = None,
        report_settings: Optional[ReportSettings] = None,
        logger_instance: Optional[logging.Logger] = None,
    ):
        """
        Initialize the engine.

        Args:
            field_config: Resolved field-kind table
            deviation_settings: Thresholds and ignored fields
            report_settings: Report settings (max_topics_in_norms)
            logger_instance: Optional logger instance (defaults to module logger)

        Raises:
            ConfigurationError: If the field table is not a FieldConfig or is invalid
        """
        self.field_config = _ensure_field_config(field_config)
        self.deviation_settings = deviation_settings or DeviationSettings()
        self.report_settings = report_settings or ReportSettings()
        self.logger = logger_instance or logger

        self.extractor = FieldExtractor(self.field_config)
        self.calculator = NormCalculator(self.field_config, self.report_settings)
        self.classifier = DeviationClassifier(self.field_config, self.deviation_settings)

    def analyze(self, raw_records: Iterable[Mapping[str, Any]]) -> AnalysisResult:
        """
        Analyze a record set.

        Args:
            raw_records: Raw repository records; consumed once, in order

        Returns:
            AnalysisResult with the norms and one RecordAnalysis per record
        """
        records: Tuple[Mapping[str, Any], ...] = tuple(raw_records)
        started_at = utc_now()
        run_id = uuid4().hex

        with log_context(run_id=run_id):
            self.logger.info(
                "Analysis started",
                extra={
                    "event": "engine.run.started",
                    "record_count": len(records),
                    "field_count": len(self.field_config),
                },
            )

            phase_start = time.time()
            configs = self.extractor.extract_all(records)
            identities = [
                RecordIdentity.from_record(raw_record, position)
                for position, raw_record in enumerate(records)
            ]
            self.logger.info(
                "Extracted record configs",
                extra={
                    "event": "engine.extract.completed",
                    "record_count": len(configs),
                    "duration_ms": int((time.time() - phase_start) * 1000),
                },
            )

            phase_start = time.time()
            norms = self.calculator.compute(configs)
            self.logger.info(
                "Computed norms",
                extra={
                    "event": "engine.norms.computed",
                    "field_count": len(norms),
                    "duration_ms": int((time.time() - phase_start) * 1000),
                },
            )

            phase_start = time.time()
            analyses: List[RecordAnalysis] = []
            for identity, config in zip(identities, configs):
                deviations = self.classifier.classify(config, norms)
                self.logger.debug(
                    f"Classified record: {identity.name}",
                    extra={
                        "event": "engine.record.classified",
                        "record": identity.full_name,
                        "deviation_count": len(deviations),
                    },
                )
                analyses.append(
                    RecordAnalysis(identity=identity, config=config, deviations=deviations)
                )

            result = AnalysisResult(
                norms=norms,
                records=analyses,
                field_names=self.field_config.names,
                ignored_fields=[
                    name
                    for name in self.field_config.names
                    if self.deviation_settings.is_ignored(name)
                ],
                started_at=started_at,
                finished_at=utc_now(),
            )
            self.logger.info(
                "Classified records",
                extra={
                    "event": "engine.classify.completed",
                    "record_count": len(analyses),
                    "records_with_deviations": len(result.records_with_deviations),
                    "duration_ms": int((time.time() - phase_start) * 1000),
                },
            )

            self.logger.info(
                "Analysis completed",
                extra={
                    "event": "engine.run.completed",
                    "record_count": result.record_count,
                    "records_with_deviations": len(result.records_with_deviations),
                    "duration_ms": int(result.duration_seconds * 1000),
                },
            )
            return result


def _ensure_field_config(field_config: Any) -> FieldConfig:
    """Accept a FieldConfig or a list of field entries; reject anything else."""
    if isinstance(field_config, FieldConfig):
        return field_config
    if isinstance(field_config, (list, tuple)):
        return FieldConfig.from_entries(field_config)

    raise ConfigurationError(
        "Invalid field configuration",
        errors=[f"Expected a list of fields, got {type(field_config).__name__}"],
    )


def analyze(
    raw_records: Iterable[Mapping[str, Any]],
    field_config: FieldConfig,
    deviation_settings: Optional[DeviationSettings] = None,
    report_settings: Optional[ReportSettings] = None,
) -> AnalysisResult:
    """Functional shortcut for AnalysisEngine(...).analyze(raw_records)."""
    engine = AnalysisEngine(field_config, deviation_settings, report_settings)
    return engine.analyze(raw_records)
