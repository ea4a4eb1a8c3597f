"""Field extraction from raw repository records.

This module implements the projection that:
1. Copies scalar attributes verbatim, taking a configured sub-key from objects
2. Copies list-valued (multiset) attributes, non-lists become null
3. Flattens security_and_analysis into its three status values
4. Passes through the branch-protection descriptor attached upstream
"""

import logging
from typing import Any, Callable, Dict, Iterable, List, Mapping, Optional, Tuple

from repo_norms.analysis.models import RecordConfig
from repo_norms.config.fields import FieldConfig, FieldKind, FieldSpec
from repo_norms.domain.models import BranchProtection
from repo_norms.logging import get_logger

logger = get_logger(__name__, component="extraction")

SECURITY_FEATURES: Tuple[str, ...] = (
    "advanced_security",
    "secret_scanning",
    "secret_scanning_push_protection",
)

Extractor = Callable[[Mapping[str, Any], FieldSpec], Any]


class FieldExtractor:
    """Projects raw records into flat RecordConfig maps.

    Extraction is a pure function of the raw record and the field table: every
    configured field gets exactly one entry, and absent data becomes None.
    """

    def __init__(
        self,
        field_config: FieldConfig,
        logger_instance: Optional[logging.Logger] = None,
    ):
        """Initialize FieldExtractor.

        Args:
            field_config: Resolved field-kind table
            logger_instance: Optional logger instance (defaults to module logger)
        """
        self.field_config = field_config
        self.logger = logger_instance or logger

        extractors: Dict[FieldKind, Extractor] = {
            FieldKind.SCALAR: _extract_scalar,
            FieldKind.MULTISET: _extract_multiset,
            FieldKind.STRUCTURED_SECURITY: _extract_security,
            FieldKind.STRUCTURED_PROTECTION: _extract_protection,
        }
        self._plan: List[Tuple[FieldSpec, Extractor]] = [
            (spec, extractors[spec.kind]) for spec in field_config
        ]

    def extract(self, raw_record: Mapping[str, Any]) -> RecordConfig:
        """Extract the configured fields of one raw record.

        Args:
            raw_record: Repository record as delivered by an adapter

        Returns:
            RecordConfig with one entry per configured field
        """
        return {spec.name: extract(raw_record, spec) for spec, extract in self._plan}

    def extract_all(self, raw_records: Iterable[Mapping[str, Any]]) -> List[RecordConfig]:
        """Extract every record, preserving input order."""
        configs = [self.extract(raw_record) for raw_record in raw_records]
        self.logger.debug(
            "Extracted record configs",
            extra={
                "event": "extraction.completed",
                "record_count": len(configs),
                "field_count": len(self.field_config),
            },
        )
        return configs


def _extract_scalar(raw_record: Mapping[str, Any], spec: FieldSpec) -> Any:
    value = raw_record.get(spec.name)
    if spec.attribute is not None and isinstance(value, Mapping):
        return value.get(spec.attribute)
    return value


def _extract_multiset(raw_record: Mapping[str, Any], spec: FieldSpec) -> Optional[List[Any]]:
    value = raw_record.get(spec.name)
    if isinstance(value, (list, tuple)):
        return list(value)
    return None


def _extract_security(
    raw_record: Mapping[str, Any], spec: FieldSpec
) -> Optional[Dict[str, Any]]:
    settings = raw_record.get(spec.name)
    if not isinstance(settings, Mapping):
        return None
    return {feature: _status_of(settings.get(feature)) for feature in SECURITY_FEATURES}


def _status_of(feature: Any) -> Any:
    if isinstance(feature, Mapping):
        return feature.get("status")
    return None


def _extract_protection(raw_record: Mapping[str, Any], spec: FieldSpec) -> Any:
    descriptor = raw_record.get(spec.name)
    if isinstance(descriptor, BranchProtection):
        return descriptor.to_descriptor()
    if isinstance(descriptor, Mapping):
        return dict(descriptor)
    if descriptor is None:
        return BranchProtection.not_fetched().to_descriptor()
    # Unexpected shapes still take part in comparison as-is
    return descriptor


def extract_record(raw_record: Mapping[str, Any], field_config: FieldConfig) -> RecordConfig:
    """Functional shortcut for FieldExtractor(field_config).extract(raw_record)."""
    return FieldExtractor(field_config).extract(raw_record)
