"""Norm computation across a set of extracted record configs.

The norm of a field is its most representative value over all records:
- scalar: the most frequent value; null and absent share one bucket
- multiset: the K most frequent elements with their counts
- structured-security: the most frequent whole object, nulls do not vote
- structured-protection: as security, but descriptors whose state is unknown
  (an "enabled" key holding null) do not vote either; descriptors without an
  "enabled" key still vote

Ties always go to the value seen first, so the same input sequence yields the
same norms on every run.
"""

import logging
from typing import Any, Callable, Dict, List, Mapping, Optional, Sequence, Tuple

from repo_norms.config.fields import FieldConfig, FieldKind
from repo_norms.config.models import ReportSettings
from repo_norms.logging import get_logger

from .models import Norms, RecordConfig
from .values import ValueTally, is_collection

logger = get_logger(__name__, component="analysis")

Aggregator = Callable[[List[Any]], Any]


class NormCalculator:
    """Computes one norm per configured field.

    The per-field aggregation plan is resolved from the field-kind table once,
    at construction; computing norms never re-inspects kinds.
    """

    def __init__(
        self,
        field_config: FieldConfig,
        report_settings: Optional[ReportSettings] = None,
        logger_instance: Optional[logging.Logger] = None,
    ):
        """Initialize NormCalculator.

        Args:
            field_config: Resolved field-kind table
            report_settings: Report settings (max_topics_in_norms); defaults apply if None
            logger_instance: Optional logger instance (defaults to module logger)
        """
        self.field_config = field_config
        self.report_settings = report_settings or ReportSettings()
        self.logger = logger_instance or logger

        aggregators: Dict[FieldKind, Aggregator] = {
            FieldKind.SCALAR: self._scalar_norm,
            FieldKind.MULTISET: self._multiset_norm,
            FieldKind.STRUCTURED_SECURITY: self._security_norm,
            FieldKind.STRUCTURED_PROTECTION: self._protection_norm,
        }
        self._plan: List[Tuple[str, Aggregator]] = [
            (spec.name, aggregators[spec.kind]) for spec in field_config
        ]

    def compute(self, record_configs: Sequence[RecordConfig]) -> Norms:
        """Compute norms for every configured field.

        Args:
            record_configs: One extracted config per record, in input order

        Returns:
            Mapping of field name to norm value, in field-config order
        """
        norms: Norms = {}
        for field_name, aggregate in self._plan:
            values = [config.get(field_name) for config in record_configs]
            norms[field_name] = aggregate(values)

        self.logger.debug(
            "Computed norms",
            extra={
                "event": "norms.computed",
                "record_count": len(record_configs),
                "field_count": len(norms),
            },
        )
        return norms

    @staticmethod
    def _scalar_norm(values: List[Any]) -> Any:
        tally = ValueTally()
        for value in values:
            tally.add(value)
        winner = tally.most_common()
        return winner[0] if winner else None

    def _multiset_norm(self, values: List[Any]) -> List[Dict[str, Any]]:
        tally = ValueTally()
        for elements in values:
            if is_collection(elements):
                for element in elements:
                    tally.add(element)

        limit = self.report_settings.max_topics_in_norms
        return [
            {"topic": topic, "count": count}
            for topic, count in tally.ranked()[:limit]
        ]

    @staticmethod
    def _security_norm(values: List[Any]) -> Any:
        tally = ValueTally()
        for value in values:
            if value is not None:
                tally.add(value)
        winner = tally.most_common()
        return winner[0] if winner else None

    @staticmethod
    def _protection_norm(values: List[Any]) -> Any:
        tally = ValueTally()
        for value in values:
            if not isinstance(value, Mapping):
                continue
            # Only an explicit "enabled": null marks unreadable protection
            if "enabled" in value and value["enabled"] is None:
                continue
            tally.add(value)
        winner = tally.most_common()
        return winner[0] if winner else None


def compute_norms(
    record_configs: Sequence[RecordConfig],
    field_config: FieldConfig,
    report_settings: Optional[ReportSettings] = None,
) -> Norms:
    """Functional shortcut for NormCalculator(...).compute(record_configs)."""
    return NormCalculator(field_config, report_settings).compute(record_configs)
