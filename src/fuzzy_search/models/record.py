"""Record collection model carrying an explicit model tag."""

from dataclasses import dataclass, field
from typing import Any, Callable, Iterator, List, Mapping, Optional

DEFAULT_ID_FIELD = "id"


@dataclass
class RecordCollection:
    """
    Already-fetched records of one model, ready to be searched.

    Attributes:
        records: Records as mappings from field name to value
        model_name: Type tag attached to every search result
        id_field: Name of the identity field used to merge results
    """
    records: List[Mapping[str, Any]] = field(default_factory=list)
    model_name: Optional[str] = None
    id_field: str = DEFAULT_ID_FIELD

    def __post_init__(self) -> None:
        """Validate collection after initialization."""
        if not self.id_field or not self.id_field.strip():
            raise ValueError("Identity field name cannot be empty")
        self.records = list(self.records)

    def __len__(self) -> int:
        return len(self.records)

    def __iter__(self) -> Iterator[Mapping[str, Any]]:
        return iter(self.records)

    @property
    def sample(self) -> Optional[Mapping[str, Any]]:
        """First record of the collection, used to discover its shape."""
        return self.records[0] if self.records else None

    def discover_fields(self) -> List[str]:
        """
        Discover searchable field names from the sample record.

        The identity field is never searched. Returns an empty list for an
        empty collection.
        """
        return discover_fields(self.sample, self.id_field)

    def filter(
        self, predicate: Callable[[Mapping[str, Any]], bool]
    ) -> "RecordCollection":
        """Return a new collection holding only records matching predicate."""
        return RecordCollection(
            records=[record for record in self.records if predicate(record)],
            model_name=self.model_name,
            id_field=self.id_field
        )


def discover_fields(
    sample: Optional[Mapping[str, Any]],
    id_field: str = DEFAULT_ID_FIELD
) -> List[str]:
    """Field names of a sample record, excluding the identity field."""
    if not sample:
        return []
    return [str(name) for name in sample.keys() if name != id_field]
