"""High-level API service for fuzzy search."""

import asyncio
import logging
from concurrent.futures import ThreadPoolExecutor
from contextlib import asynccontextmanager
from typing import Any, Dict, List, Mapping, Optional, AsyncContextManager

from ..core.aggregator import FuzzyAggregator
from ..core.exceptions import FuzzySearchError
from ..core.normalizer import QueryNormalizer
from ..models.config import DEFAULT_LIMIT, DEFAULT_THRESHOLD, DEFAULT_WEIGHT, SearchConfig
from ..models.record import RecordCollection
from ..models.result import AggregatedResult
from ..utils.logging_config import setup_logging, StructuredLogger
from ..utils.text_processing import TextProcessor

logger = logging.getLogger(__name__)


class FuzzySearchService:
    """
    High-level service interface for fuzzy search requests.

    Normalizes raw request inputs, discovers searchable fields from the
    fetched records and runs the aggregator off the event loop.
    """

    def __init__(
        self,
        default_threshold: float = DEFAULT_THRESHOLD,
        default_limit: int = DEFAULT_LIMIT,
        default_weight: float = DEFAULT_WEIGHT,
        max_workers: int = 4,
        parallel_terms: bool = False,
        log_level: str = "INFO"
    ):
        """
        Initialize fuzzy search service.

        Args:
            default_threshold: Threshold used when a request gives none (or an invalid one)
            default_limit: Result cap used when a request gives none (or an invalid one)
            default_weight: Weight of fields without a custom weight
            max_workers: Number of worker threads
            parallel_terms: Match the terms of one query in parallel
            log_level: Logging level
        """
        # Setup logging
        setup_logging(level=log_level)

        self.text_processor = TextProcessor()
        self.normalizer = QueryNormalizer(
            default_threshold=default_threshold,
            default_limit=default_limit,
            default_weight=default_weight,
            text_processor=self.text_processor
        )

        self.executor = ThreadPoolExecutor(max_workers=max_workers)
        # Terms get their own pool so a search never waits on its own workers
        self.term_executor = ThreadPoolExecutor(max_workers=max_workers) if parallel_terms else None
        self.aggregator = FuzzyAggregator(
            executor=self.term_executor,
            text_processor=self.text_processor
        )

        self._stats = {
            'total_searches': 0,
            'total_results': 0,
            'avg_search_time': 0.0
        }
        self._initialized = False
        logger.info("Fuzzy search service initialized")

    async def initialize(self) -> None:
        """Mark the service ready to serve searches."""
        self._initialized = True
        logger.info("Service initialization complete")

    async def search(
        self,
        collection: RecordCollection,
        query: Any,
        config: SearchConfig
    ) -> List[AggregatedResult]:
        """
        Search a record collection with an already normalized configuration.

        Args:
            collection: Fetched records and their model tag
            query: Decoded query text, or pre-split terms
            config: Search configuration

        Returns:
            Ranked, capped search results

        Raises:
            FuzzySearchError: If the service is not initialized or the search
                is misconfigured
        """
        self._check_initialized()

        search_logger = StructuredLogger(__name__).with_context(
            model=collection.model_name, records=len(collection)
        )
        start_time = asyncio.get_running_loop().time()

        try:
            results = await asyncio.get_running_loop().run_in_executor(
                self.executor,
                self.aggregator.search,
                collection.records,
                query,
                config,
                collection.model_name
            )
        except Exception as e:
            search_logger.error(f"Search failed: {str(e)}")
            raise

        search_time = asyncio.get_running_loop().time() - start_time
        self._update_search_stats(search_time, len(results))

        search_logger.info(f"Search completed: {len(results)} results in {search_time:.3f}s")
        return results

    async def search_request(
        self,
        collection: RecordCollection,
        query: Optional[str],
        threshold: Any = None,
        limit: Any = None,
        weights: Any = None,
        **options: Any
    ) -> List[AggregatedResult]:
        """
        Search using raw request inputs.

        Fields are discovered from the first record of the collection.

        Args:
            collection: Fetched records and their model tag
            query: Raw (possibly percent-encoded) query
            threshold: Raw threshold
            limit: Raw result cap
            weights: Custom field weights (JSON string or mapping)
            **options: Boolean SearchConfig flags

        Returns:
            Ranked, capped search results
        """
        self._check_initialized()

        normalized = self.normalizer.normalize(
            query,
            collection.discover_fields(),
            threshold=threshold,
            limit=limit,
            weights=weights,
            id_field=collection.id_field,
            **options
        )
        if normalized.is_empty or not collection:
            return []

        return await self.search(collection, normalized.terms, normalized.config)

    async def search_path(
        self,
        collection: RecordCollection,
        path: str,
        query_params: Optional[Mapping[str, Any]] = None
    ) -> Optional[List[AggregatedResult]]:
        """
        Search for the term embedded in a ``.../fuzzy/<term>`` request path.

        Args:
            collection: Records the request handler fetched
            path: Request path
            query_params: Request query parameters (threshold, limit, weights)

        Returns:
            Search results, or None when the path is not a fuzzy search path
        """
        term = self.text_processor.term_from_path(path)
        if term is None:
            return None

        params = query_params or {}
        return await self.search_request(
            collection,
            term,
            threshold=params.get('threshold'),
            limit=params.get('limit'),
            weights=params.get('weights'),
            include_matches=True
        )

    def _update_search_stats(self, search_time: float, result_count: int) -> None:
        """Update search performance statistics."""
        self._stats['total_searches'] += 1
        self._stats['total_results'] += result_count

        # Update rolling average
        total_searches = self._stats['total_searches']
        current_avg = self._stats['avg_search_time']
        self._stats['avg_search_time'] = (
            (current_avg * (total_searches - 1) + search_time) / total_searches
        )

    async def get_stats(self) -> Dict[str, Any]:
        """Get service statistics."""
        self._check_initialized()

        return {
            'service': {
                'initialized': self._initialized,
                'default_threshold': self.normalizer.default_threshold,
                'default_limit': self.normalizer.default_limit,
                'parallel_terms': self.aggregator.executor is not None
            },
            'searches': dict(self._stats)
        }

    async def health_check(self) -> Dict[str, Any]:
        """Perform health check."""
        if not self._initialized:
            return {
                'status': 'not_initialized',
                'message': 'Service not initialized'
            }

        return {
            'status': 'healthy',
            'stats': dict(self._stats),
            'timestamp': asyncio.get_running_loop().time()
        }

    def _check_initialized(self) -> None:
        """Check if service is properly initialized."""
        if not self._initialized:
            raise FuzzySearchError("Service not initialized. Call initialize() first.")

    async def close(self) -> None:
        """Clean up resources and close the service."""
        self.executor.shutdown(wait=True)
        if self.term_executor is not None:
            self.term_executor.shutdown(wait=True)
        self._initialized = False
        logger.info("Service closed successfully")

    @classmethod
    @asynccontextmanager
    async def create(cls, **kwargs) -> AsyncContextManager['FuzzySearchService']:
        """
        Create and manage service lifecycle with context manager.

        Args:
            **kwargs: Service configuration

        Yields:
            Initialized fuzzy search service
        """
        service = cls(**kwargs)

        try:
            await service.initialize()
            yield service
        finally:
            await service.close()
