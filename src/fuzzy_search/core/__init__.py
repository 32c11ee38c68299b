"""Core components for fuzzy search."""

from .aggregator import FuzzyAggregator
from .matcher import FuzzyMatcher
from .normalizer import QueryNormalizer
from .exceptions import (
    FuzzySearchError,
    ConfigurationError,
    MissingIdentityError,
    ValidationError
)

__all__ = [
    "FuzzyAggregator",
    "FuzzyMatcher",
    "QueryNormalizer",
    "FuzzySearchError",
    "ConfigurationError",
    "MissingIdentityError",
    "ValidationError"
]
