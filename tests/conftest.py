"""Pytest configuration and shared fixtures."""

import pytest
from typing import Any, Dict, List

from fuzzy_search.api.service import FuzzySearchService
from fuzzy_search.models.config import SearchConfig, SearchField
from fuzzy_search.models.record import RecordCollection


@pytest.fixture
def lodge_records() -> List[Dict[str, Any]]:
    """Three records with a single searchable name."""
    return [
        {"id": 1, "name": "Alpine Ridge"},
        {"id": 2, "name": "Alpine Lodge"},
        {"id": 3, "name": "Coastal View"},
    ]


@pytest.fixture
def property_records() -> List[Dict[str, Any]]:
    """Records with several fields of mixed types."""
    return [
        {"id": "p1", "name": "Harbor House", "city": "Portland", "tags": ["waterfront", "historic"], "rooms": 12},
        {"id": "p2", "name": "Pine Cabin", "city": "Bend", "tags": ["forest", "quiet"], "rooms": 2},
        {"id": "p3", "name": "Portland Lofts", "city": "Portland", "tags": ["downtown"], "rooms": 40},
        {"id": "p4", "name": "Desert Inn", "city": "Tucson", "tags": ["pool", "historic"], "rooms": 25},
        {"id": "p5", "name": "Harbor View Suites", "city": "Seattle", "tags": ["waterfront"], "rooms": None},
    ]


@pytest.fixture
def name_config() -> SearchConfig:
    """Search the name field only, default threshold and limit."""
    return SearchConfig(fields=[SearchField(name="name")])


@pytest.fixture
def lodge_collection(lodge_records) -> RecordCollection:
    return RecordCollection(records=lodge_records, model_name="Lodging")


@pytest.fixture
def property_collection(property_records) -> RecordCollection:
    return RecordCollection(records=property_records, model_name="Property")


@pytest.fixture
async def search_service():
    """Create and initialize a search service for testing."""
    async with FuzzySearchService.create(
        max_workers=2,
        log_level="WARNING"  # Reduce test output
    ) as service:
        yield service
