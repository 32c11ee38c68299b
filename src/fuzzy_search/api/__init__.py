"""Service layer for fuzzy search."""

from .service import FuzzySearchService

__all__ = ["FuzzySearchService"]
