"""
Search plan generation.

Turns a sanitized natural-language query plus the field catalog into a
structured Plan via the LLM, retrying with exponential backoff on empty or
unparsable responses and degrading to a filter-free plan when every
attempt fails.
"""

import asyncio
import logging
from typing import Any, Awaitable, Callable, Dict, List, Optional, Sequence

from pydantic import ValidationError

from record_search.core.errors import EmptyResponseError, MalformedResponseError
from record_search.core.interfaces import ITextGenerator
from record_search.core.models import (
    FieldInfo,
    Filter,
    Plan,
    PlanOutcome,
    RecordCollection,
    SearchConfig,
    SortOrder,
)
from record_search.llm.json_extraction import extract_json_object
from record_search.query.prompt_generator import PromptGenerator

logger = logging.getLogger("record_search.query.planner")

Sleep = Callable[[float], Awaitable[Any]]


class PlanGenerator:
    """
    Creates search plans with the LLM.

    Never raises for empty or malformed LLM output: after the last failed
    attempt it returns the fallback plan (no filters, default limit).
    Fatal collaborator errors are not retried and propagate.
    """

    def __init__(
        self,
        generator: ITextGenerator,
        config: Optional[SearchConfig] = None,
        prompt_generator: Optional[PromptGenerator] = None,
        sleep: Sleep = asyncio.sleep,
    ):
        """
        Initialize plan generator.

        Args:
            generator: LLM collaborator
            config: Retry, limit and token settings
            prompt_generator: Prompt builder
            sleep: Awaitable used for backoff delays
        """
        self.generator = generator
        self.config = config or SearchConfig()
        self.prompt_generator = prompt_generator or PromptGenerator()
        self._sleep = sleep

    def backoff_delay(self, attempt: int) -> float:
        """Delay after a failed attempt (1-based): base * 2^(attempt-1)."""
        return self.config.backoff_base_seconds * (2 ** (attempt - 1))

    def fallback_plan(self, limit_hint: Optional[int] = None) -> Plan:
        return Plan(filters=[], limit=self._resolve_limit(None, limit_hint))

    async def plan_for_collection(
        self,
        collection: RecordCollection,
        sanitized_query: str,
        limit_hint: Optional[int] = None,
    ) -> PlanOutcome:
        """Plan against the field catalog of a RecordCollection."""
        return await self.plan(collection.field_catalog(), sanitized_query, limit_hint)

    async def plan(
        self,
        fields: Sequence[FieldInfo],
        sanitized_query: str,
        limit_hint: Optional[int] = None,
    ) -> PlanOutcome:
        """
        Create a search plan for a query.

        Args:
            fields: Field catalog shown to the LLM
            sanitized_query: Query already passed through the sanitizer
            limit_hint: Caller's preferred limit when the LLM gives none

        Returns:
            PlanOutcome; degraded=True when the fallback plan was used

        Raises:
            CollaboratorError: For collaborator failures other than empty
                or malformed responses
        """
        logger.debug("Planning search for query: %s", sanitized_query)

        prompt = self.prompt_generator.generate_plan_prompt(
            fields, sanitized_query, default_limit=self._resolve_limit(None, limit_hint)
        )
        max_attempts = self.config.max_plan_attempts
        last_error: Optional[Exception] = None

        for attempt in range(1, max_attempts + 1):
            logger.debug("Calling LLM to create search plan (attempt %d/%d)", attempt, max_attempts)
            try:
                result = await self.generator.generate_text(
                    prompt,
                    temperature=0,
                    max_tokens=self.config.plan_max_tokens,
                )
                logger.debug("LLM response: %s", result.text)
                data = extract_json_object(result.text)
            except (EmptyResponseError, MalformedResponseError) as e:
                last_error = e
                logger.warning(
                    "Failed to create search plan (attempt %d/%d): %s", attempt, max_attempts, e
                )
                if attempt < max_attempts:
                    delay = self.backoff_delay(attempt)
                    logger.debug("Waiting %.1fs before retry", delay)
                    await self._sleep(delay)
                continue

            plan = self.parse_plan(data, limit_hint)
            logger.info("Search plan created: %d filters, limit=%s", len(plan.filters), plan.limit)
            if plan.filters:
                logger.debug("Filters: %s", [f.model_dump(mode="json") for f in plan.filters])
            return PlanOutcome(plan=plan, attempts=attempt)

        logger.warning("All %d planning attempts failed, using fallback plan: %s", max_attempts, last_error)
        return PlanOutcome(
            plan=self.fallback_plan(limit_hint),
            degraded=True,
            reason=str(last_error) if last_error else None,
            attempts=max_attempts,
        )

    def parse_plan(self, data: Dict[str, Any], limit_hint: Optional[int] = None) -> Plan:
        """
        Coerce a parsed LLM response into a Plan.

        Filters that fail validation (unknown operator, missing field or
        value) are dropped, which leaves every record eligible for them.

        Args:
            data: JSON object returned by the LLM
            limit_hint: Caller's preferred limit

        Returns:
            Validated Plan with defaults applied
        """
        sort_by = data.get("sortBy", data.get("sort_by"))
        if not isinstance(sort_by, str) or not sort_by.strip():
            sort_by = None

        return Plan(
            filters=self._parse_filters(data.get("filters")),
            sort_by=sort_by,
            sort_order=self._parse_sort_order(data.get("sortOrder", data.get("sort_order"))),
            limit=self._resolve_limit(data.get("limit"), limit_hint),
        )

    @staticmethod
    def _parse_filters(raw_filters: Any) -> List[Filter]:
        if not isinstance(raw_filters, list):
            return []

        filters: List[Filter] = []
        for raw in raw_filters:
            if not isinstance(raw, dict) or "value" not in raw:
                logger.warning("Dropping malformed filter: %r", raw)
                continue
            try:
                filters.append(Filter.model_validate(raw))
            except ValidationError as e:
                logger.warning(
                    "Dropping filter %r (%d validation errors)", raw, e.error_count()
                )
        return filters

    @staticmethod
    def _parse_sort_order(raw: Any) -> SortOrder:
        if isinstance(raw, str) and raw.strip().lower() in {o.value for o in SortOrder}:
            return SortOrder(raw.strip().lower())
        return SortOrder.DESC

    def _resolve_limit(self, raw: Any, limit_hint: Optional[int]) -> int:
        """First positive integer among the LLM limit, the hint and the default."""
        for candidate in (raw, limit_hint):
            if isinstance(candidate, bool):
                continue
            if isinstance(candidate, float) and candidate.is_integer():
                candidate = int(candidate)
            if isinstance(candidate, int) and candidate > 0:
                return candidate
        return self.config.default_limit
