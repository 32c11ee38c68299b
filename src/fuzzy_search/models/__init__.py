"""Data models for fuzzy search system."""

from .record import RecordCollection
from .config import SearchField, SearchConfig, SearchConfigModel
from .result import MatchDiagnostic, MatchResult, AggregatedResult

__all__ = [
    "RecordCollection",
    "SearchField",
    "SearchConfig",
    "SearchConfigModel",
    "MatchDiagnostic",
    "MatchResult",
    "AggregatedResult",
]
