"""Basic usage example for fuzzy search system."""

import asyncio
import json

from fuzzy_search import FuzzySearchService, RecordCollection, SearchConfig, SearchField


PROPERTIES = [
    {"id": 1, "name": "Alpine Ridge", "city": "Bend", "tags": ["mountain", "quiet"]},
    {"id": 2, "name": "Alpine Lodge", "city": "Bend", "tags": ["mountain", "historic"]},
    {"id": 3, "name": "Coastal View", "city": "Seattle", "tags": ["waterfront"]},
    {"id": 4, "name": "Harbor House", "city": "Portland", "tags": ["waterfront", "historic"]},
    {"id": 5, "name": "Portland Lofts", "city": "Portland", "tags": ["downtown"]},
]


def print_results(title: str, results) -> None:
    print(f"\n   {title}")
    if not results:
        print("      (no results)")
    for rank, result in enumerate(results, 1):
        print(f"      {rank}. {result.record['name']:<16} score={result.score:.3g} "
              f"terms={result.matched_terms}")


async def basic_search_demo():
    """Demonstrate basic search functionality."""
    print("Fuzzy Search - Basic Usage Demo")
    print("=" * 50)

    collection = RecordCollection(records=PROPERTIES, model_name="Property")

    async with FuzzySearchService.create(log_level="WARNING") as service:
        print("\n1. Multi-term search (fields discovered from the first record)")
        results = await service.search_request(collection, "Alpine%20Lodge")
        print_results("Query: 'Alpine Lodge'", results)

        print("\n2. Raw request parameters are coerced")
        results = await service.search_request(collection, "portland", limit="1", threshold="abc")
        print_results("Query: 'portland' limit='1' threshold='abc'", results)

        print("\n3. Custom field weights")
        results = await service.search_request(
            collection, "portland", weights=json.dumps({"name": 2})
        )
        print_results("Query: 'portland' weights={'name': 2}", results)

        print("\n4. Require every term to match")
        results = await service.search_request(collection, "historic waterfront", match_all_terms=True)
        print_results("Query: 'historic waterfront' (all terms)", results)

        print("\n5. Extended search operators with an explicit config")
        config = SearchConfig(
            fields=[SearchField("name"), SearchField("tags")],
            use_extended_search=True,
            include_matches=True
        )
        results = await service.search(collection, "^harb", config)
        print_results("Query: '^harb' (prefix)", results)
        for result in results:
            print(f"      matches: {[match.to_dict() for match in result.matches]}")

        print("\n6. Request path handling")
        results = await service.search_path(collection, "/properties/fuzzy/coastal", {"limit": "5"})
        print_results("Path: /properties/fuzzy/coastal", results)

        print("\n7. Serialized response")
        print(json.dumps([result.to_dict() for result in results], indent=2, default=str))

        stats = await service.get_stats()
        print(f"\nSearches run: {stats['searches']['total_searches']}")


if __name__ == "__main__":
    asyncio.run(basic_search_demo())
