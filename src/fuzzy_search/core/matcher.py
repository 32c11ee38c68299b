"""Approximate matching of a single term against records, backed by RapidFuzz."""

import logging
import sys
from typing import Any, Callable, List, Mapping, Optional, Sequence, Tuple

import numpy as np
from rapidfuzz import fuzz, process, utils

from ..models.config import (
    DEFAULT_MIN_MATCH_CHAR_LENGTH,
    DEFAULT_THRESHOLD,
    SearchConfig,
    SearchField,
)
from ..models.result import MatchDiagnostic, MatchResult
from ..utils.text_processing import TextProcessor

logger = logging.getLogger(__name__)

# Exact matches score epsilon rather than 0 so weighted products stay positive
EPSILON = sys.float_info.epsilon

# Extended term operators
EQUALS = "="
INCLUDES = "'"
PREFIX = "^"
SUFFIX = "$"
INVERSE = "!"


class FuzzyMatcher:
    """
    Scores records against one query term.

    Field values are compared word-window by word-window with RapidFuzz's
    ``fuzz.ratio``. A field matches when ``1 - similarity / 100`` is within
    the threshold; a record's score is the weighted product of its matching
    field scores, so 0.0 is a perfect match and lower is better.
    """

    def __init__(
        self,
        threshold: float = DEFAULT_THRESHOLD,
        include_matches: bool = False,
        should_sort: bool = True,
        find_all_matches: bool = False,
        use_extended_search: bool = False,
        min_match_char_length: int = DEFAULT_MIN_MATCH_CHAR_LENGTH,
        ignore_case: bool = True,
        text_processor: Optional[TextProcessor] = None
    ):
        """
        Initialize matcher.

        Args:
            threshold: Largest field score still counted as a match (0.0-1.0)
            include_matches: Attach match diagnostics to results
            should_sort: Sort results by ascending score; otherwise keep input order
            find_all_matches: Report every qualifying window, not just the best
            use_extended_search: Interpret term operators (=, ', ^, $, !)
            min_match_char_length: Terms shorter than this never match
            ignore_case: Case-insensitive comparison
            text_processor: Shared text utilities
        """
        self.threshold = threshold
        self.include_matches = include_matches
        self.should_sort = should_sort
        self.find_all_matches = find_all_matches
        self.use_extended_search = use_extended_search
        self.min_match_char_length = min_match_char_length
        self.ignore_case = ignore_case
        self.text_processor = text_processor or TextProcessor()

        self._processor: Optional[Callable[[str], str]] = (
            utils.default_process if ignore_case else None
        )

    @classmethod
    def from_config(cls, config: SearchConfig) -> "FuzzyMatcher":
        """Build a matcher from search configuration options."""
        return cls(
            threshold=config.threshold,
            include_matches=config.include_matches,
            should_sort=config.should_sort,
            find_all_matches=config.find_all_matches,
            use_extended_search=config.use_extended_search,
            min_match_char_length=config.min_match_char_length,
            ignore_case=config.ignore_case
        )

    def match(
        self,
        records: Sequence[Mapping[str, Any]],
        term: str,
        fields: Sequence[SearchField],
        limit: Optional[int] = None
    ) -> List[MatchResult]:
        """
        Match one term against every record.

        Args:
            records: Records to score (never mutated)
            term: Query term
            fields: Fields to compare, with weights
            limit: Maximum number of results (None for all)

        Returns:
            Matching records sorted by ascending score (ties in input order),
            or in input order when sorting is off
        """
        if not records or not fields:
            return []

        total_weight = float(sum(search_field.weight for search_field in fields))
        results = []

        for ref_index, record in enumerate(records):
            field_scores = []
            exponents = []
            diagnostics = []

            for search_field in fields:
                field_match = self._match_field(record.get(search_field.name), term, search_field.name)
                if field_match is None:
                    continue
                score, field_diagnostics = field_match
                field_scores.append(score)
                exponents.append(search_field.weight / total_weight)
                diagnostics.extend(field_diagnostics)

            if not field_scores:
                continue

            record_score = float(np.prod(
                np.power(np.maximum(np.array(field_scores), EPSILON), np.array(exponents))
            ))
            results.append(MatchResult(
                record=record,
                score=record_score,
                ref_index=ref_index,
                matches=diagnostics if self.include_matches else None
            ))

        if self.should_sort:
            results.sort(key=lambda result: result.score)
        if limit is not None:
            results = results[:limit]

        logger.debug(f"Term '{term}' matched {len(results)} of {len(records)} records")
        return results

    def _match_field(
        self, value: Any, term: str, key: str
    ) -> Optional[Tuple[float, List[MatchDiagnostic]]]:
        """Best score of a term over a field's candidates, or None if no match."""
        best_score = None
        diagnostics = []

        for candidate in self.text_processor.field_candidates(value):
            candidate_match = self._score_candidate(candidate, term)
            if candidate_match is None:
                continue
            score, spans = candidate_match
            if best_score is None or score < best_score:
                best_score = score
            if self.include_matches:
                diagnostics.append(MatchDiagnostic(key=key, value=candidate, indices=spans, term=term))

        if best_score is None:
            return None
        return best_score, diagnostics

    def _score_candidate(
        self, text: str, term: str
    ) -> Optional[Tuple[float, List[Tuple[int, int]]]]:
        if self.use_extended_search:
            operator, needle = self._parse_operator(term)
            if operator is not None:
                return self._exact_match(text, operator, needle)
        return self._fuzzy_match(text, term)

    def _fuzzy_match(
        self, text: str, term: str
    ) -> Optional[Tuple[float, List[Tuple[int, int]]]]:
        if len(term.strip()) < self.min_match_char_length:
            return None

        query = self._processor(term) if self._processor else term
        if not query:
            return None

        word_count = len(self.text_processor.split_terms(term))
        windows = self.text_processor.word_windows(text, word_count)
        if not windows:
            return None

        choices = [self._processor(window) if self._processor else window for window, _ in windows]
        score_cutoff = round((1.0 - self.threshold) * 100, 9)

        if self.find_all_matches:
            found = process.extract(
                query, choices, scorer=fuzz.ratio, score_cutoff=score_cutoff, limit=None
            )
        else:
            best = process.extractOne(
                query, choices, scorer=fuzz.ratio, score_cutoff=score_cutoff
            )
            found = [best] if best is not None else []

        if not found:
            return None

        similarity = max(similarity for _, similarity, _ in found)
        spans = [windows[index][1] for _, _, index in sorted(found, key=lambda item: item[2])]
        return max(1.0 - similarity / 100.0, 0.0), spans

    def _parse_operator(self, term: str) -> Tuple[Optional[str], str]:
        """Split an extended term into its operator and needle."""
        if len(term) > 1:
            for operator in (INVERSE, EQUALS, PREFIX, INCLUDES):
                if term.startswith(operator):
                    return operator, term[1:]
            if term.endswith(SUFFIX):
                return SUFFIX, term[:-1]
        return None, term

    def _exact_match(
        self, text: str, operator: str, needle: str
    ) -> Optional[Tuple[float, List[Tuple[int, int]]]]:
        if len(needle) < self.min_match_char_length:
            return None

        haystack = text.lower() if self.ignore_case else text
        needle = needle.lower() if self.ignore_case else needle

        if operator == EQUALS:
            stripped = haystack.strip()
            if stripped != needle:
                return None
            start = haystack.index(stripped)
            return EPSILON, [(start, start + len(stripped))]

        if operator == PREFIX:
            return (EPSILON, [(0, len(needle))]) if haystack.startswith(needle) else None

        if operator == SUFFIX:
            return (EPSILON, [(len(haystack) - len(needle), len(haystack))]) if haystack.endswith(needle) else None

        position = haystack.find(needle)
        if operator == INVERSE:
            return (EPSILON, []) if position == -1 else None

        if position == -1:
            return None
        spans = [(position, position + len(needle))]
        if self.find_all_matches:
            position = haystack.find(needle, position + 1)
            while position != -1:
                spans.append((position, position + len(needle)))
                position = haystack.find(needle, position + 1)
        return EPSILON, spans
