"""Normalization of raw search request inputs."""

import logging
from dataclasses import dataclass, field
from typing import Any, List, Optional, Sequence

from ..models.config import (
    DEFAULT_LIMIT,
    DEFAULT_THRESHOLD,
    DEFAULT_WEIGHT,
    SearchConfig,
    build_search_fields,
    coerce_limit,
    coerce_threshold,
    parse_weights,
)
from ..utils.text_processing import TextProcessor

logger = logging.getLogger(__name__)


@dataclass
class NormalizedQuery:
    """Query terms plus the clean configuration to search them with."""
    terms: List[str]
    config: SearchConfig = field(default_factory=SearchConfig)

    @property
    def is_empty(self) -> bool:
        return not self.terms


class QueryNormalizer:
    """
    Turns raw request inputs into query terms and a SearchConfig.

    Invalid thresholds, limits and weights fall back to defaults instead of
    failing the request.
    """

    def __init__(
        self,
        default_threshold: float = DEFAULT_THRESHOLD,
        default_limit: int = DEFAULT_LIMIT,
        default_weight: float = DEFAULT_WEIGHT,
        text_processor: Optional[TextProcessor] = None
    ):
        if default_weight <= 0:
            raise ValueError("Default weight must be positive")
        self.default_threshold = default_threshold
        self.default_limit = default_limit
        self.default_weight = default_weight
        self.text_processor = text_processor or TextProcessor()

    def terms(self, query: Optional[str], split: bool = True) -> List[str]:
        """
        Decode a raw query and decompose it into terms.

        Args:
            query: Raw query, possibly percent-encoded
            split: Split on whitespace; otherwise the whole query is one term

        Returns:
            Terms in query order; empty for a blank query
        """
        decoded = self.text_processor.decode_query(query)
        if not split:
            decoded = decoded.strip()
            return [decoded] if decoded else []
        return self.text_processor.split_terms(decoded)

    def normalize(
        self,
        query: Optional[str],
        field_names: Sequence[str],
        threshold: Any = None,
        limit: Any = None,
        weights: Any = None,
        **options: Any
    ) -> NormalizedQuery:
        """
        Build a normalized query from raw request inputs.

        Args:
            query: Raw query string
            field_names: Fields discovered from a sample record
            threshold: Raw threshold (number, string or None)
            limit: Raw result cap (number, string or None)
            weights: Custom weights (JSON string, mapping or None)
            **options: Boolean SearchConfig flags and other SearchConfig fields

        Returns:
            NormalizedQuery with terms and configuration
        """
        config = SearchConfig(
            fields=build_search_fields(field_names, parse_weights(weights), self.default_weight),
            threshold=coerce_threshold(threshold, self.default_threshold),
            limit=coerce_limit(limit, self.default_limit),
            **options
        )
        terms = self.terms(query, split=config.split_terms)

        logger.debug(
            f"Normalized query into {len(terms)} terms over {len(config.fields)} fields "
            f"(threshold={config.threshold}, limit={config.limit})"
        )
        return NormalizedQuery(terms=terms, config=config)
