"""Custom exceptions for fuzzy search system."""


class FuzzySearchError(Exception):
    """Base exception for fuzzy search operations."""
    pass


class ConfigurationError(FuzzySearchError):
    """Exception raised when a search cannot be configured (e.g. no fields)."""
    pass


class MissingIdentityError(FuzzySearchError):
    """Exception raised when a record lacks the identity field used for merging."""

    def __init__(self, id_field: str, position: int):
        self.id_field = id_field
        self.position = position
        super().__init__(
            f"Record at position {position} has no '{id_field}' identity field"
        )


class ValidationError(FuzzySearchError):
    """Exception raised during input validation."""
    pass
