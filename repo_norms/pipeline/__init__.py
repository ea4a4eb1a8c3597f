"""Analysis orchestration: extraction, norm computation and deviation classification."""

from .models import AnalysisResult, RecordAnalysis
from .runner import AnalysisEngine, analyze

__all__ = [
    "AnalysisEngine",
    "AnalysisResult",
    "RecordAnalysis",
    "analyze",
]
