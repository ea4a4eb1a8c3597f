"""Data models for norm computation and deviation classification.

Norms and record configs are plain field-name -> value mappings so they can be
rendered or serialized as-is. A topics norm is a list of {"topic", "count"}
entries; structured norms are the winning descriptor object.
"""

from dataclasses import dataclass
from typing import Any, Dict, List, Optional

RecordConfig = Dict[str, Any]
Norms = Dict[str, Any]


@dataclass(frozen=True)
class DeviationEntry:
    """One field on which a record departs from the norm.

    Attributes:
        repo: The record's value for the field
        norm: The field's norm value
        missing: Norm entries ({"topic", "count"}) whose topic the record lacks
            (multiset fields only)
        extra: Record topics absent from the norm (multiset fields only)
    """

    repo: Any
    norm: Any
    missing: Optional[List[Any]] = None
    extra: Optional[List[Any]] = None

    @property
    def is_multiset(self) -> bool:
        return self.missing is not None

    def to_dict(self) -> Dict[str, Any]:
        data: Dict[str, Any] = {"repo": self.repo, "norm": self.norm}
        if self.missing is not None:
            data["missing"] = list(self.missing)
        if self.extra is not None:
            data["extra"] = list(self.extra)
        return data


DeviationMap = Dict[str, DeviationEntry]

