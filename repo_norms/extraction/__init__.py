"""Field extraction layer turning raw repository records into comparable configs.

This module provides:
- FieldExtractor: Projects a raw record onto the configured field list
- SECURITY_FEATURES: The three security_and_analysis statuses that are compared
"""

from .service import SECURITY_FEATURES, FieldExtractor, extract_record

__all__ = [
    "FieldExtractor",
    "SECURITY_FEATURES",
    "extract_record",
]
