"""Deviation classification of one record config against computed norms.

This module implements the comparison rules that:
1. Skip ignored fields entirely
2. Compare scalars with null equivalence and "true"/"false" coercion
3. Compare multisets by set difference under the topic thresholds
4. Compare structured objects as a whole by deep equality
"""

import logging
from typing import Any, Callable, Dict, List, Mapping, Optional, Tuple

from repo_norms.config.fields import FieldConfig, FieldKind
from repo_norms.config.models import DeviationSettings
from repo_norms.logging import get_logger

from .models import DeviationEntry, DeviationMap, Norms, RecordConfig
from .values import deep_equal, is_collection, value_token

logger = get_logger(__name__, component="analysis")

Comparator = Callable[[Any, Any], Optional[DeviationEntry]]

_BOOLEAN_STRINGS = {"true": True, "false": False}


class DeviationClassifier:
    """Classifies record configs against norms.

    Responsibilities:
    - Apply the field-kind specific comparison rule per field
    - Honor ignore_fields and the topic thresholds
    - Produce a sparse DeviationMap; an empty map means "no deviations"

    Classification never raises on mismatched shapes (an object compared to a
    primitive, a list compared to null); such pairs degrade to plain
    structural inequality.
    """

    def __init__(
        self,
        field_config: FieldConfig,
        deviation_settings: Optional[DeviationSettings] = None,
        logger_instance: Optional[logging.Logger] = None,
    ):
        """Initialize DeviationClassifier.

        Args:
            field_config: Resolved field-kind table
            deviation_settings: Thresholds and ignored fields; defaults apply if None
            logger_instance: Optional logger instance (defaults to module logger)
        """
        self.field_config = field_config
        self.deviation_settings = deviation_settings or DeviationSettings()
        self.logger = logger_instance or logger

        comparators: Dict[FieldKind, Comparator] = {
            FieldKind.SCALAR: self._compare_scalar,
            FieldKind.MULTISET: self._compare_multiset,
            FieldKind.STRUCTURED_SECURITY: self._compare_structured,
            FieldKind.STRUCTURED_PROTECTION: self._compare_structured,
        }
        self._plan: List[Tuple[str, Comparator]] = [
            (spec.name, comparators[spec.kind])
            for spec in field_config
            if not self.deviation_settings.is_ignored(spec.name)
        ]

    def classify(self, record_config: RecordConfig, norms: Norms) -> DeviationMap:
        """Classify one record config against the norms.

        Args:
            record_config: Extracted config of a single record
            norms: Norms computed over the full record set

        Returns:
            DeviationMap holding only the deviating fields (possibly empty)
        """
        deviations: DeviationMap = {}
        for field_name, compare in self._plan:
            entry = compare(record_config.get(field_name), norms.get(field_name))
            if entry is not None:
                deviations[field_name] = entry
        return deviations

    @staticmethod
    def _compare_scalar(repo_value: Any, norm_value: Any) -> Optional[DeviationEntry]:
        if scalars_differ(repo_value, norm_value):
            return DeviationEntry(repo=repo_value, norm=norm_value)
        return None

    def _compare_multiset(self, repo_value: Any, norm_value: Any) -> Optional[DeviationEntry]:
        if not is_collection(repo_value) or not is_collection(norm_value):
            if deep_equal(repo_value, norm_value):
                return None
            self.logger.debug(
                "Multiset value is not a list, comparing directly",
                extra={
                    "event": "deviations.multiset.fallback",
                    "repo_type": type(repo_value).__name__,
                    "norm_type": type(norm_value).__name__,
                },
            )
            return DeviationEntry(repo=repo_value, norm=norm_value)

        norm_topics = [topic_of(element) for element in norm_value]
        repo_tokens = {value_token(topic) for topic in repo_value}
        norm_tokens = {value_token(topic) for topic in norm_topics}

        # Missing entries keep the norm's own {"topic", "count"} shape
        missing = [
            element
            for element in norm_value
            if value_token(topic_of(element)) not in repo_tokens
        ]
        extra = [topic for topic in repo_value if value_token(topic) not in norm_tokens]

        settings = self.deviation_settings
        if (
            len(missing) >= settings.topic_missing_threshold
            or len(extra) >= settings.topic_extra_threshold
        ):
            return DeviationEntry(repo=repo_value, norm=norm_value, missing=missing, extra=extra)
        return None

    @staticmethod
    def _compare_structured(repo_value: Any, norm_value: Any) -> Optional[DeviationEntry]:
        # All or nothing: one differing sub-key marks the whole field
        if deep_equal(repo_value, norm_value):
            return None
        return DeviationEntry(repo=repo_value, norm=norm_value)


def scalars_differ(repo_value: Any, norm_value: Any) -> bool:
    """Whether two scalar values differ under the scalar comparison rule.

    - null and absent are the same; two nulls never differ
    - values of the same JSON type compare by value (1 and 1.0 are equal)
    - across types, "true"/"false" strings are read as booleans first
    """
    if repo_value is None or norm_value is None:
        return (repo_value is None) != (norm_value is None)

    if deep_equal(repo_value, norm_value):
        return False

    if _json_type(repo_value) == _json_type(norm_value):
        return True

    return not deep_equal(_coerce_boolean(repo_value), _coerce_boolean(norm_value))


def _json_type(value: Any) -> str:
    return value_token(value)[0]


def _coerce_boolean(value: Any) -> Any:
    if isinstance(value, str) and value in _BOOLEAN_STRINGS:
        return _BOOLEAN_STRINGS[value]
    return value


def topic_of(element: Any) -> Any:
    """Norm entries are {"topic", "count"} pairs; bare elements are accepted too."""
    if isinstance(element, Mapping) and "topic" in element:
        return element["topic"]
    return element


def classify(
    record_config: RecordConfig,
    norms: Norms,
    field_config: FieldConfig,
    deviation_settings: Optional[DeviationSettings] = None,
) -> DeviationMap:
    """Functional shortcut for DeviationClassifier(...).classify(record_config, norms)."""
    return DeviationClassifier(field_config, deviation_settings).classify(record_config, norms)
