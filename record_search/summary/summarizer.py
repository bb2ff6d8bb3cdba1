"""
Result consolidation.

Turns matching records back into a short natural-language answer with
insights and statistics. Falls back to a canned summary whenever the LLM
cannot produce one.
"""

import logging
from typing import Any, Dict, List, Optional, Sequence

from record_search.core.interfaces import ITextGenerator
from record_search.core.models import (
    Record,
    SearchConfig,
    SearchOptions,
    Summary,
    SummaryOutcome,
)
from record_search.query.prompt_generator import PromptGenerator

logger = logging.getLogger("record_search.summary.summarizer")

NO_MATCHES_ANSWER = "No matching records found for your query."
DEFAULT_ANSWER = "Results found."


class ResultSummarizer:
    """
    Summarizes matching records with the LLM.

    Never raises: any collaborator or parsing failure yields the fallback
    summary "Found N matching records.".
    """

    def __init__(
        self,
        generator: ITextGenerator,
        config: Optional[SearchConfig] = None,
        prompt_generator: Optional[PromptGenerator] = None,
    ):
        self.generator = generator
        self.config = config or SearchConfig()
        self.prompt_generator = prompt_generator or PromptGenerator()

    @staticmethod
    def empty_summary() -> Summary:
        return Summary(answer=NO_MATCHES_ANSWER, insights=[], stats={})

    @staticmethod
    def fallback_summary(total: int) -> Summary:
        return Summary(answer=f"Found {total} matching records.", insights=[], stats={"total": total})

    async def consolidate(
        self,
        query: str,
        matches: Sequence[Record],
        options: Optional[SearchOptions] = None,
    ) -> SummaryOutcome:
        """
        Consolidate matching records into an answer.

        Args:
            query: Original user query
            matches: Matching records, in result order
            options: Temperature / max token overrides

        Returns:
            SummaryOutcome; degraded=True when the fallback summary was used
        """
        logger.debug("Consolidating %d results for query: %s", len(matches), query)

        if not matches:
            logger.info("No results to consolidate")
            return SummaryOutcome(summary=self.empty_summary())

        options = options or SearchOptions()
        sample = list(matches[: self.config.summary_sample_size])
        prompt = self.prompt_generator.generate_summary_prompt(query, len(matches), sample)

        temperature = options.temperature if options.temperature is not None else self.config.summary_temperature
        max_tokens = options.max_tokens or self.config.summary_max_tokens

        try:
            data = await self.generator.generate_structured(
                prompt, temperature=temperature, max_tokens=max_tokens, output_type=Summary
            )
            summary = self._to_summary(data)
        except Exception as e:
            logger.warning("Failed to consolidate results, using fallback: %s", e)
            return SummaryOutcome(
                summary=self.fallback_summary(len(matches)),
                degraded=True,
                reason=str(e),
            )

        logger.info("Results consolidated successfully")
        logger.debug("Answer length: %d chars, insights: %d", len(summary.answer), len(summary.insights))
        return SummaryOutcome(summary=summary)

    @staticmethod
    def _to_summary(data: Any) -> Summary:
        """
        Normalize the LLM's structured output.

        Raises:
            TypeError: If the output is not a JSON object
        """
        if not isinstance(data, dict):
            raise TypeError(f"Expected a JSON object, got {type(data).__name__}")

        answer = data.get("answer")
        if not isinstance(answer, str) or not answer.strip():
            answer = DEFAULT_ANSWER

        raw_insights = data.get("insights")
        insights: List[str] = []
        if isinstance(raw_insights, list):
            insights = [item if isinstance(item, str) else str(item) for item in raw_insights]

        raw_stats = data.get("stats")
        stats: Dict[str, Any] = raw_stats if isinstance(raw_stats, dict) else {}

        return Summary(answer=answer, insights=insights, stats=stats)
