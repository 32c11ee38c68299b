"""Utility modules for fuzzy search."""

from .text_processing import TextProcessor
from .validators import validate_config, validate_records
from .logging_config import setup_logging

__all__ = ["TextProcessor", "validate_config", "validate_records", "setup_logging"]
