"""
Search orchestrator - main entry point.

Coordinates sanitization, LLM planning, plan execution and LLM
consolidation to answer natural-language questions over records.
"""

import logging
import time
from typing import Any, List, Optional, Sequence, Union

from record_search.core.errors import InvalidInputError, SearchError
from record_search.core.interfaces import ITextGenerator
from record_search.core.models import (
    LLMConfig,
    PlanOutcome,
    Record,
    RecordCollection,
    SearchConfig,
    SearchOptions,
    SearchResult,
)
from record_search.execution.filter_engine import FilterEngine
from record_search.llm.client_factory import LLMClientFactory
from record_search.query.planner import PlanGenerator
from record_search.query.sanitizer import sanitize
from record_search.summary.summarizer import ResultSummarizer

logger = logging.getLogger("record_search.orchestrator")

CollectionInput = Union[RecordCollection, Sequence[Record]]


class SearchOrchestrator:
    """
    Main orchestrator for natural-language search over records.

    Holds no per-query state: query() and query_raw() may run
    concurrently against the same collection. The only shared resource is
    the injected LLM collaborator.
    """

    def __init__(
        self,
        generator: ITextGenerator,
        config: Optional[SearchConfig] = None,
        planner: Optional[PlanGenerator] = None,
        filter_engine: Optional[FilterEngine] = None,
        summarizer: Optional[ResultSummarizer] = None,
    ):
        """
        Initialize search orchestrator.

        Args:
            generator: LLM collaborator used for planning and consolidation
            config: Pipeline settings (retries, limits, tokens)
            planner: Plan generator (built from generator/config if omitted)
            filter_engine: Plan executor
            summarizer: Result summarizer (built from generator/config if omitted)
        """
        self.generator = generator
        self.config = config or SearchConfig()
        self.planner = planner or PlanGenerator(generator, self.config)
        self.filter_engine = filter_engine or FilterEngine()
        self.summarizer = summarizer or ResultSummarizer(generator, self.config)

    @classmethod
    def from_env(cls, llm_config: Optional[LLMConfig] = None) -> "SearchOrchestrator":
        """
        Create orchestrator from environment configuration.

        Args:
            llm_config: Explicit LLM settings; read from LLM_* env vars if omitted

        Returns:
            Configured SearchOrchestrator backed by LLMClientFactory
        """
        llm_config = llm_config or LLMConfig.from_env()
        return cls(
            generator=LLMClientFactory.from_config(llm_config),
            config=SearchConfig.from_env(),
        )

    @staticmethod
    def _prepare(collection: Any, raw_query: Any) -> RecordCollection:
        """
        Validate inputs and wrap plain record lists.

        Raises:
            InvalidInputError: If the collection or query is absent or malformed
        """
        if not isinstance(raw_query, str) or not raw_query.strip():
            raise InvalidInputError("Search query cannot be empty")
        if isinstance(collection, RecordCollection):
            return collection
        return RecordCollection.from_records(collection)

    async def _plan(
        self,
        collection: RecordCollection,
        raw_query: str,
        options: SearchOptions,
    ) -> PlanOutcome:
        sanitized = sanitize(raw_query)
        return await self.planner.plan_for_collection(collection, sanitized, options.limit)

    async def query(
        self,
        collection: CollectionInput,
        raw_query: str,
        options: Optional[SearchOptions] = None,
    ) -> SearchResult:
        """
        Answer a natural-language query over a record collection.

        Args:
            collection: RecordCollection or list of record dicts
            raw_query: Natural-language query
            options: Limit hint and consolidation settings

        Returns:
            SearchResult with answer, insights, stats and matching records

        Raises:
            InvalidInputError: If the collection or query is malformed
            SearchError: If the LLM collaborator fails fatally
        """
        collection = self._prepare(collection, raw_query)
        options = options or SearchOptions()

        logger.info('Starting search: "%s"', raw_query)
        start_time = time.perf_counter()

        try:
            logger.debug("Step 1: Creating search plan with LLM")
            plan_outcome = await self._plan(collection, raw_query, options)

            logger.debug("Step 2: Executing search plan")
            matching_records = self.filter_engine.execute(collection.records, plan_outcome.plan)

            logger.debug("Step 3: Consolidating results with LLM")
            summary_outcome = await self.summarizer.consolidate(raw_query, matching_records, options)
        except Exception as e:
            logger.error("Search failed: %s", e)
            raise SearchError(f"Search failed: {e}", code="SEARCH_FAILED") from e

        execution_time_ms = int(round((time.perf_counter() - start_time) * 1000))
        summary = summary_outcome.summary

        result = SearchResult(
            query=raw_query,
            answer=summary.answer,
            insights=summary.insights,
            stats=summary.stats,
            matching_records=matching_records,
            total_matches=len(matching_records),
            execution_time_ms=execution_time_ms,
            metadata={
                "plan": plan_outcome.plan.model_dump(mode="json", by_alias=True),
                "plan_attempts": plan_outcome.attempts,
                "planning_degraded": plan_outcome.degraded,
                "summary_degraded": summary_outcome.degraded,
            },
        )

        logger.info("Search complete: %d matches in %dms", result.total_matches, result.execution_time_ms)
        return result

    async def query_raw(
        self,
        collection: CollectionInput,
        raw_query: str,
        options: Optional[SearchOptions] = None,
    ) -> List[Record]:
        """
        Plan and execute a query without LLM consolidation.

        Args:
            collection: RecordCollection or list of record dicts
            raw_query: Natural-language query
            options: Limit hint

        Returns:
            Matching records

        Raises:
            InvalidInputError: If the collection or query is malformed
            SearchError: If the LLM collaborator fails fatally
        """
        collection = self._prepare(collection, raw_query)
        options = options or SearchOptions()

        logger.debug('Executing raw search: "%s"', raw_query)
        try:
            plan_outcome = await self._plan(collection, raw_query, options)
            results = self.filter_engine.execute(collection.records, plan_outcome.plan)
        except Exception as e:
            logger.error("Raw search failed: %s", e)
            raise SearchError(f"Search failed: {e}", code="SEARCH_FAILED") from e

        logger.info("Raw search complete: %d matches", len(results))
        return results
