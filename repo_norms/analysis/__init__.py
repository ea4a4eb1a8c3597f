"""Norm computation and deviation classification.

This module provides:
- NormCalculator: Computes the per-field norm over a set of record configs
- DeviationClassifier: Compares one record config against the norms
- DeviationEntry: One deviating field with record and norm values
- Value helpers for type-aware structural equality
"""

from .deviations import DeviationClassifier, classify, scalars_differ, topic_of
from .models import DeviationEntry, DeviationMap, Norms, RecordConfig
from .norms import NormCalculator, compute_norms
from .values import ValueTally, deep_equal, is_collection, value_token

__all__ = [
    "NormCalculator",
    "DeviationClassifier",
    "DeviationEntry",
    "DeviationMap",
    "Norms",
    "RecordConfig",
    "compute_norms",
    "classify",
    "scalars_differ",
    "topic_of",
    "ValueTally",
    "deep_equal",
    "is_collection",
    "value_token",
]
