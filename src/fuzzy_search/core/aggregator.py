"""Multi-term fuzzy ranking aggregator."""

import logging
from concurrent.futures import Executor
from typing import Any, Callable, Dict, Hashable, List, Mapping, Optional, Sequence

from ..models.config import SearchConfig, SearchField, build_search_fields
from ..models.record import discover_fields
from ..models.result import AggregatedResult, MatchResult
from ..utils.text_processing import TextProcessor
from ..utils.validators import validate_config, validate_records
from .exceptions import ConfigurationError, ValidationError
from .matcher import FuzzyMatcher

logger = logging.getLogger(__name__)

MatcherFactory = Callable[[SearchConfig], Any]


class FuzzyAggregator:
    """
    Ranks records against a possibly multi-word query.

    Each term is matched on its own; results are merged by record identity
    with multiplicative score composition, then sorted and capped.
    """

    def __init__(
        self,
        matcher_factory: MatcherFactory = FuzzyMatcher.from_config,
        executor: Optional[Executor] = None,
        text_processor: Optional[TextProcessor] = None
    ):
        """
        Initialize aggregator.

        Args:
            matcher_factory: Builds a matcher (anything with a ``match`` method) from config
            executor: Optional executor to match terms in parallel
            text_processor: Shared text utilities
        """
        self.matcher_factory = matcher_factory
        self.executor = executor
        self.text_processor = text_processor or TextProcessor()

    def search(
        self,
        records: Sequence[Mapping[str, Any]],
        query: Any,
        config: SearchConfig,
        model_name: Optional[str] = None
    ) -> List[AggregatedResult]:
        """
        Search records for a query.

        Args:
            records: Already-fetched records (read only)
            query: Decoded query text, or a list of pre-split terms
            config: Search configuration
            model_name: Type tag attached to every result

        Returns:
            At most ``config.limit`` results, best (lowest score) first

        Raises:
            ConfigurationError: If no fields are configured or discoverable
            MissingIdentityError: If a record has no identity value
            ValidationError: If the configuration, a record or a pre-split term is invalid
        """
        validate_config(config)

        terms = self._terms(query, config)
        if not records or not terms:
            return []

        validate_records(records, config.id_field)
        fields = self._resolve_fields(records, config)

        matcher = self.matcher_factory(config)

        if len(terms) == 1 and not config.match_all_terms:
            matches = matcher.match(records, terms[0], fields, config.limit)
            results = [AggregatedResult.from_match(match, terms[0]) for match in matches]
        else:
            results = self._aggregate(matcher, records, terms, fields, config)

        if config.should_sort:
            results.sort(key=lambda result: result.score)
        results = results[:config.limit]

        for result in results:
            result.model_name = model_name

        logger.debug(f"Search for {len(terms)} terms returned {len(results)} results")
        return results

    def _terms(self, query: Any, config: SearchConfig) -> List[str]:
        if isinstance(query, (list, tuple)):
            for term in query:
                if not isinstance(term, str):
                    raise ValidationError(f"Query terms must be strings, got {type(term).__name__}")
            return [term.strip() for term in query if term.strip()]
        if not query:
            return []
        if not config.split_terms:
            return [query.strip()] if query.strip() else []
        return self.text_processor.split_terms(query)

    def _resolve_fields(
        self, records: Sequence[Mapping[str, Any]], config: SearchConfig
    ) -> List[SearchField]:
        """Configured fields, or fields discovered once from the first record."""
        if config.fields:
            return list(config.fields)

        fields = build_search_fields(discover_fields(records[0], config.id_field))
        if not fields:
            raise ConfigurationError("No search fields configured and none discoverable from records")
        return fields

    def _match_terms(
        self,
        matcher: Any,
        records: Sequence[Mapping[str, Any]],
        terms: List[str],
        fields: List[SearchField]
    ) -> List[List[MatchResult]]:
        """Per-term match lists in term order; no per-term cap."""
        def match_term(term: str) -> List[MatchResult]:
            return matcher.match(records, term, fields, None)

        if self.executor is not None and len(terms) > 1:
            return list(self.executor.map(match_term, terms))
        return [match_term(term) for term in terms]

    def _aggregate(
        self,
        matcher: Any,
        records: Sequence[Mapping[str, Any]],
        terms: List[str],
        fields: List[SearchField],
        config: SearchConfig
    ) -> List[AggregatedResult]:
        accumulator: Dict[Hashable, AggregatedResult] = {}
        # Running products of per-term factors, kept apart from the reported
        # score so a product that underflows to 0.0 is never reset to 1
        composites: Dict[Hashable, float] = {}

        for term, matches in zip(terms, self._match_terms(matcher, records, terms, fields)):
            for match in matches:
                identity = match.record[config.id_field]
                # A missing or zero term score counts as 1 so one term cannot zero the product
                factor = match.score or 1.0
                existing = accumulator.get(identity)
                if existing is None:
                    accumulator[identity] = AggregatedResult.from_match(match, term)
                    composites[identity] = factor
                    continue

                composites[identity] *= factor
                existing.score = composites[identity]
                existing.matched_terms.append(term)
                if match.matches is not None:
                    if existing.matches is None:
                        existing.matches = []
                    existing.matches.extend(match.matches)

        results = list(accumulator.values())
        if config.match_all_terms:
            required = set(terms)
            results = [result for result in results if required.issubset(result.matched_terms)]
        return results
