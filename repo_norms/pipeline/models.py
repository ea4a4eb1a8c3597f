"""Data models for analysis results."""

from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Dict, List, Optional

from repo_norms.analysis.models import DeviationMap, Norms, RecordConfig
from repo_norms.domain.models import RecordIdentity
from repo_norms.utils.timestamps import format_timestamp


@dataclass
class RecordAnalysis:
    """
    Analysis of a single repository.

    Attributes:
        identity: Name and link of the repository
        config: Extracted field values
        deviations: Deviating fields. None means the record was never
            classified; an empty map means it was classified and conforms.
    """

    identity: RecordIdentity
    config: RecordConfig
    deviations: Optional[DeviationMap] = None

    @property
    def evaluated(self) -> bool:
        return self.deviations is not None

    @property
    def has_deviations(self) -> bool:
        return bool(self.deviations)

    @property
    def deviation_count(self) -> int:
        return len(self.deviations) if self.deviations else 0

    def to_dict(self) -> Dict[str, Any]:
        deviations = None
        if self.deviations is not None:
            deviations = {name: entry.to_dict() for name, entry in self.deviations.items()}
        return {
            "name": self.identity.name,
            "full_name": self.identity.full_name,
            "html_url": self.identity.html_url,
            "config": self.config,
            "deviations": deviations,
        }


@dataclass
class AnalysisResult:
    """
    Norms plus per-record analysis for one record set.

    Attributes:
        norms: Norm value per configured field
        records: Per-record analysis, in input order
        field_names: Configured fields, in configured order
        ignored_fields: Fields excluded from deviation classification
        started_at: UTC timestamp when the analysis began
        finished_at: UTC timestamp when the analysis completed
    """

    norms: Norms
    records: List[RecordAnalysis] = field(default_factory=list)
    field_names: List[str] = field(default_factory=list)
    ignored_fields: List[str] = field(default_factory=list)
    started_at: Optional[datetime] = None
    finished_at: Optional[datetime] = None

    @property
    def record_count(self) -> int:
        return len(self.records)

    @property
    def records_with_deviations(self) -> List[RecordAnalysis]:
        return [record for record in self.records if record.has_deviations]

    @property
    def duration_seconds(self) -> float:
        if self.started_at is None or self.finished_at is None:
            return 0.0
        return (self.finished_at - self.started_at).total_seconds()

    def deviation_counts(self) -> Dict[str, int]:
        """Number of deviating records per field, for fields with at least one."""
        counts: Dict[str, int] = {}
        for name in self.field_names:
            count = sum(
                1 for record in self.records if record.deviations and name in record.deviations
            )
            if count:
                counts[name] = count
        return counts

    def to_dict(self) -> Dict[str, Any]:
        return {
            "generated_at": format_timestamp(self.finished_at) if self.finished_at else None,
            "record_count": self.record_count,
            "records_with_deviations": len(self.records_with_deviations),
            "fields": list(self.field_names),
            "ignored_fields": list(self.ignored_fields),
            "norms": self.norms,
            "deviation_counts": self.deviation_counts(),
            "records": [record.to_dict() for record in self.records],
        }
