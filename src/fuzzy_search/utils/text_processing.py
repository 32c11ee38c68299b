"""Text processing utilities for queries and record values."""

import re
from typing import Any, List, Optional, Tuple
from urllib.parse import unquote


class TextProcessor:
    """Text processing utilities for fuzzy search queries and field values."""

    def __init__(self):
        """Initialize text processor patterns."""
        self.whitespace_pattern = re.compile(r'\s+')
        self.word_pattern = re.compile(r'\S+')

    def decode_query(self, text: Optional[str]) -> str:
        """
        Percent-decode a raw query string.

        Args:
            text: Raw query, possibly percent-encoded

        Returns:
            Decoded query (empty string for None)
        """
        if not text:
            return ""
        # '+' stays literal: queries arrive as path segments, not form data
        return unquote(text)

    def split_terms(self, text: Optional[str]) -> List[str]:
        """
        Split a decoded query into whitespace-delimited terms.

        Args:
            text: Decoded query text

        Returns:
            Non-empty terms in query order
        """
        if not text:
            return []
        return [term for term in self.whitespace_pattern.split(text.strip()) if term]

    def word_spans(self, text: str) -> List[Tuple[int, int]]:
        """Half-open character spans of the words in text."""
        return [match.span() for match in self.word_pattern.finditer(text)]

    def word_windows(self, text: str, size: int) -> List[Tuple[str, Tuple[int, int]]]:
        """
        Consecutive runs of `size` words in text, with their spans.

        A text with fewer words than `size` yields a single window covering
        all of it.

        Args:
            text: Field value text
            size: Number of words per window

        Returns:
            List of (window_text, (start, end)) tuples
        """
        spans = self.word_spans(text)
        if not spans:
            return []

        size = max(size, 1)
        if len(spans) <= size:
            start, end = spans[0][0], spans[-1][1]
            return [(text[start:end], (start, end))]

        windows = []
        for i in range(len(spans) - size + 1):
            start, end = spans[i][0], spans[i + size - 1][1]
            windows.append((text[start:end], (start, end)))
        return windows

    def field_candidates(self, value: Any) -> List[str]:
        """
        Searchable text candidates of a record field value.

        Strings are used as-is, scalars are stringified, and lists or tuples
        contribute one candidate per usable element. Everything else is
        skipped.
        """
        if isinstance(value, (list, tuple)):
            candidates = []
            for item in value:
                candidates.extend(self._scalar_candidate(item))
            return candidates
        return self._scalar_candidate(value)

    def _scalar_candidate(self, value: Any) -> List[str]:
        if isinstance(value, str):
            return [value] if value.strip() else []
        if isinstance(value, (bool, int, float)):
            return [str(value)]
        return []

    def term_from_path(self, path: str, marker: str = "fuzzy") -> Optional[str]:
        """
        Extract the search term that follows a marker segment in a request path.

        The marker must not be the first path segment after the leading
        slash (e.g. ``/products/fuzzy/<term>``).

        Args:
            path: Request path
            marker: Segment announcing a fuzzy search

        Returns:
            The raw (still encoded) term, or None when the path is not a
            fuzzy search path
        """
        segments = path.split('/')
        if marker not in segments:
            return None

        position = segments.index(marker)
        if position <= 1 or position + 1 >= len(segments):
            return None

        term = segments[position + 1]
        return term or None
