"""Search result data models."""

from dataclasses import dataclass, field
from typing import Any, Dict, List, Mapping, Optional, Tuple


@dataclass
class MatchDiagnostic:
    """
    Where a term matched inside a record field.

    Attributes:
        key: Field name
        value: Text of the field (or list element) that matched
        indices: Half-open (start, end) character spans within value
        term: Query term that produced the match
    """
    key: str
    value: str
    indices: List[Tuple[int, int]] = field(default_factory=list)
    term: str = ""

    def to_dict(self) -> Dict[str, Any]:
        return {
            "key": self.key,
            "value": self.value,
            "indices": [list(span) for span in self.indices],
            "term": self.term
        }


@dataclass
class MatchResult:
    """
    One record matched by a single term.

    Attributes:
        record: The matched record
        score: Match score (0.0 is exact, lower is better)
        ref_index: Position of the record in the searched collection
        matches: Match diagnostics, when requested
    """
    record: Mapping[str, Any]
    score: float
    ref_index: int
    matches: Optional[List[MatchDiagnostic]] = None

    def __post_init__(self) -> None:
        """Validate match result."""
        if self.score < 0.0:
            raise ValueError("Score cannot be negative")


@dataclass
class AggregatedResult:
    """
    One record's merged result across all query terms.

    Attributes:
        record: The matched record
        score: Composite score (lower is better)
        ref_index: Position of the record in the searched collection
        matches: Concatenated match diagnostics, when requested
        matched_terms: Query terms that matched this record, in query order
        model_name: Type tag supplied with the searched collection
    """
    record: Mapping[str, Any]
    score: float
    ref_index: int
    matches: Optional[List[MatchDiagnostic]] = None
    matched_terms: List[str] = field(default_factory=list)
    model_name: Optional[str] = None

    @classmethod
    def from_match(cls, match: MatchResult, term: str) -> "AggregatedResult":
        return cls(
            record=match.record,
            score=match.score,
            ref_index=match.ref_index,
            matches=list(match.matches) if match.matches is not None else None,
            matched_terms=[term]
        )

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for serialization."""
        data = {
            "record": dict(self.record),
            "ref_index": self.ref_index,
            "score": self.score,
            "matched_terms": list(self.matched_terms),
            "model_name": self.model_name
        }
        if self.matches is not None:
            data["matches"] = [match.to_dict() for match in self.matches]
        return data
