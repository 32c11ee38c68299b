"""Search configuration models and raw input coercion."""

import json
import logging
import math
from dataclasses import dataclass, field
from typing import Any, Dict, List, Mapping, Optional, Sequence

from pydantic import BaseModel, Field, validator

from .record import DEFAULT_ID_FIELD

logger = logging.getLogger(__name__)

DEFAULT_THRESHOLD = 0.5
DEFAULT_LIMIT = 100
DEFAULT_WEIGHT = 0.1
DEFAULT_MIN_MATCH_CHAR_LENGTH = 3


@dataclass
class SearchField:
    """
    A record field to match against.

    Attributes:
        name: Field name as found on the records
        weight: Relative importance (higher is more important)
    """
    name: str
    weight: float = DEFAULT_WEIGHT

    def __post_init__(self) -> None:
        """Validate field after initialization."""
        if not self.name or not str(self.name).strip():
            raise ValueError("Field name cannot be empty")
        if not isinstance(self.weight, (int, float)) or isinstance(self.weight, bool):
            raise ValueError(f"Invalid weight for field '{self.name}': {self.weight!r}")
        if not math.isfinite(self.weight) or self.weight <= 0:
            raise ValueError(f"Weight for field '{self.name}' must be positive")


@dataclass
class SearchConfig:
    """
    Configuration for one search call.

    Attributes:
        fields: Fields to match against (discovered from a sample record when empty)
        threshold: Match threshold (0.0 matches exactly, 1.0 matches anything)
        limit: Maximum number of results to return
        include_matches: Attach matched positions to results
        should_sort: Sort results by ascending score
        find_all_matches: Report every qualifying match per field, not just the best
        use_extended_search: Enable term operators (=, ', ^, $, !)
        match_all_terms: Keep only records matched by every query term
        split_terms: Decompose a multi-word query into terms
        min_match_char_length: Terms shorter than this never match
        ignore_case: Case-insensitive matching
        id_field: Identity field used to merge per-term results
    """
    fields: List[SearchField] = field(default_factory=list)
    threshold: float = DEFAULT_THRESHOLD
    limit: int = DEFAULT_LIMIT
    include_matches: bool = False
    should_sort: bool = True
    find_all_matches: bool = False
    use_extended_search: bool = False
    match_all_terms: bool = False
    split_terms: bool = True
    min_match_char_length: int = DEFAULT_MIN_MATCH_CHAR_LENGTH
    ignore_case: bool = True
    id_field: str = DEFAULT_ID_FIELD

    def __post_init__(self) -> None:
        """Validate configuration values."""
        if not 0.0 <= self.threshold <= 1.0:
            raise ValueError("Threshold must be between 0.0 and 1.0")
        if self.limit <= 0:
            raise ValueError("Limit must be positive")
        if self.min_match_char_length < 1:
            raise ValueError("Minimum match length must be at least 1")
        if not self.id_field:
            raise ValueError("Identity field name cannot be empty")

    @property
    def field_names(self) -> List[str]:
        return [search_field.name for search_field in self.fields]


def _to_number(raw: Any) -> Optional[float]:
    """Interpret raw request input as a finite number, or None."""
    if raw is None or isinstance(raw, bool):
        return None
    if isinstance(raw, (int, float)):
        value = float(raw)
    elif isinstance(raw, str):
        try:
            value = float(raw.strip())
        except ValueError:
            return None
    else:
        return None
    return value if math.isfinite(value) else None


def coerce_threshold(raw: Any, default: float = DEFAULT_THRESHOLD) -> float:
    """
    Coerce a raw threshold, falling back to the default.

    An absent threshold falls back to the default; an explicit 0 is kept.
    Non-numeric and out-of-range values fall back to the default.
    """
    value = _to_number(raw)
    if value is None:
        if raw is not None:
            logger.debug(f"Ignoring invalid threshold {raw!r}, using {default}")
        return default
    if not 0.0 <= value <= 1.0:
        logger.debug(f"Threshold {value} out of range, using {default}")
        return default
    return value


def coerce_limit(raw: Any, default: int = DEFAULT_LIMIT) -> int:
    """
    Coerce a raw result cap, falling back to the default.

    String input is parsed as a number; NaN, non-numeric and non-positive
    values fall back to the default.
    """
    value = _to_number(raw)
    if value is None:
        if raw is not None:
            logger.debug(f"Ignoring invalid limit {raw!r}, using {default}")
        return default
    limit = int(value)
    if limit <= 0:
        logger.debug(f"Limit {raw!r} is not positive, using {default}")
        return default
    return limit


def parse_weights(raw: Any) -> Dict[str, float]:
    """
    Parse custom per-field weights from a JSON string or a mapping.

    Malformed input yields no custom weights; entries that are not finite
    positive numbers are dropped.
    """
    if raw is None or raw == "":
        return {}

    if isinstance(raw, (str, bytes)):
        try:
            raw = json.loads(raw)
        except ValueError:
            logger.warning("Ignoring custom weights: not valid JSON")
            return {}

    if not isinstance(raw, Mapping):
        logger.warning(f"Ignoring custom weights: expected an object, got {type(raw).__name__}")
        return {}

    weights = {}
    for name, weight in raw.items():
        value = _to_number(weight)
        if value is None or value <= 0:
            logger.warning(f"Ignoring invalid weight {weight!r} for field '{name}'")
            continue
        weights[str(name)] = value
    return weights


def build_search_fields(
    field_names: Sequence[str],
    weights: Optional[Mapping[str, float]] = None,
    default_weight: float = DEFAULT_WEIGHT
) -> List[SearchField]:
    """Assign each field its custom weight, or the default weight."""
    weights = weights or {}
    unknown = set(weights) - set(field_names)
    if unknown:
        logger.debug(f"Custom weights for unknown fields ignored: {sorted(unknown)}")
    return [
        SearchField(name=name, weight=weights.get(name, default_weight))
        for name in field_names
    ]


class SearchConfigModel(BaseModel):
    """Pydantic model for raw search options in API contexts."""

    keys: List[str] = Field(default_factory=list, description="Fields to search")
    weights: Dict[str, float] = Field(default_factory=dict, description="Custom field weights")
    threshold: float = Field(DEFAULT_THRESHOLD, description="Match threshold")
    limit: int = Field(DEFAULT_LIMIT, description="Maximum results to return")
    include_matches: bool = Field(False, description="Attach matched positions")
    should_sort: bool = Field(True, description="Sort results by score")
    find_all_matches: bool = Field(False, description="Report every match per field")
    use_extended_search: bool = Field(False, description="Enable term operators")
    match_all_terms: bool = Field(False, description="Require every term to match")
    split_terms: bool = Field(True, description="Decompose multi-word queries")
    min_match_char_length: int = Field(DEFAULT_MIN_MATCH_CHAR_LENGTH, ge=1, description="Shortest term that can match")
    ignore_case: bool = Field(True, description="Case-insensitive matching")
    id_field: str = Field(DEFAULT_ID_FIELD, min_length=1, description="Identity field used to merge results")

    @validator('threshold', pre=True)
    def validate_threshold(cls, v: Any) -> float:
        """Fall back to the default threshold for unusable values."""
        return coerce_threshold(v)

    @validator('limit', pre=True)
    def validate_limit(cls, v: Any) -> int:
        """Fall back to the default limit for unusable values."""
        return coerce_limit(v)

    @validator('weights', pre=True)
    def validate_weights(cls, v: Any) -> Dict[str, float]:
        """Accept weights as a JSON string or an object."""
        return parse_weights(v)

    def to_config(self, field_names: Optional[Sequence[str]] = None) -> SearchConfig:
        """Convert to SearchConfig, using discovered field names when given."""
        names = list(field_names) if field_names is not None else self.keys
        return SearchConfig(
            fields=build_search_fields(names, self.weights),
            threshold=self.threshold,
            limit=self.limit,
            include_matches=self.include_matches,
            should_sort=self.should_sort,
            find_all_matches=self.find_all_matches,
            use_extended_search=self.use_extended_search,
            match_all_terms=self.match_all_terms,
            split_terms=self.split_terms,
            min_match_char_length=self.min_match_char_length,
            ignore_case=self.ignore_case,
            id_field=self.id_field
        )
