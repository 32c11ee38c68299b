"""
Fuzzy Search Aggregator

Ranks already-fetched, in-memory records against multi-word queries by
matching each term approximately and merging per-term scores by record
identity.
"""

from .api.service import FuzzySearchService
from .core.aggregator import FuzzyAggregator
from .core.matcher import FuzzyMatcher
from .core.normalizer import QueryNormalizer, NormalizedQuery
from .models.config import SearchConfig, SearchField, SearchConfigModel
from .models.record import RecordCollection
from .models.result import AggregatedResult, MatchResult, MatchDiagnostic

__version__ = "1.0.0"

__all__ = [
    "FuzzySearchService",
    "FuzzyAggregator",
    "FuzzyMatcher",
    "QueryNormalizer",
    "NormalizedQuery",
    "SearchConfig",
    "SearchField",
    "SearchConfigModel",
    "RecordCollection",
    "AggregatedResult",
    "MatchResult",
    "MatchDiagnostic",
]
