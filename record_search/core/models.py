"""
Shared data models for the search pipeline.
"""

import os
from enum import Enum
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field, model_validator


Record = Dict[str, Any]

# SearchConfig field -> environment variable override
SEARCH_ENV_VARS = {
    "max_plan_attempts": "SEARCH_MAX_PLAN_ATTEMPTS",
    "backoff_base_seconds": "SEARCH_BACKOFF_BASE_SECONDS",
    "default_limit": "SEARCH_DEFAULT_LIMIT",
    "plan_max_tokens": "SEARCH_PLAN_MAX_TOKENS",
    "summary_temperature": "SEARCH_SUMMARY_TEMPERATURE",
    "summary_max_tokens": "SEARCH_SUMMARY_MAX_TOKENS",
    "summary_sample_size": "SEARCH_SUMMARY_SAMPLE_SIZE",
}


class FilterOperator(str, Enum):
    """Closed set of single-field predicate operators."""

    EQ = "="
    NE = "!="
    GT = ">"
    LT = "<"
    GE = ">="
    LE = "<="
    CONTAINS = "contains"
    STARTS_WITH = "startsWith"
    ENDS_WITH = "endsWith"


class SortOrder(str, Enum):
    """Sort direction."""

    ASC = "asc"
    DESC = "desc"


class FieldStats(BaseModel):
    """Per-field statistics derived from a record collection."""

    type: str
    null_count: int = 0
    unique_count: int = 0


class FieldInfo(BaseModel):
    """One entry of the field catalog shown to the planner."""

    name: str
    type: str
    example: Any = None


class RecordCollection(BaseModel):
    """Ordered records plus derived field statistics."""

    records: List[Record] = Field(default_factory=list)
    field_stats: Dict[str, FieldStats] = Field(default_factory=dict)
    schema_types: Optional[Dict[str, str]] = None

    @model_validator(mode="after")
    def fill_field_stats(self) -> "RecordCollection":
        """Derive field statistics when the constructor was given none."""
        if self.records and not self.field_stats:
            from record_search.schema.extractor import FieldStatsExtractor

            self.field_stats = FieldStatsExtractor.compute(self.records)
        return self

    @classmethod
    def from_records(
        cls,
        records: List[Record],
        schema_types: Optional[Dict[str, str]] = None,
    ) -> "RecordCollection":
        """
        Build a collection and compute its field statistics.

        The caller's record objects are kept as-is (no copy, no coercion).

        Args:
            records: Normalized records from upstream ingestion
            schema_types: Optional explicit field -> type names

        Returns:
            RecordCollection with field_stats populated

        Raises:
            InvalidInputError: If records is not a list of mappings
        """
        from record_search.schema.extractor import FieldStatsExtractor

        field_stats = FieldStatsExtractor.compute(records)
        return cls.model_construct(
            records=records,
            field_stats=field_stats,
            schema_types=dict(schema_types) if schema_types else None,
        )

    def __len__(self) -> int:
        return len(self.records)

    def field_names(self) -> List[str]:
        return list(self.field_stats.keys())

    def example_for(self, field: str) -> Any:
        """Example value for a field, taken from the first record."""
        if not self.records:
            return None
        return self.records[0].get(field)

    def type_for(self, field: str) -> str:
        """Explicit schema type if given, otherwise the inferred one."""
        from record_search.schema.type_mappings import TypeMapper

        if self.schema_types and field in self.schema_types:
            return TypeMapper.normalize_type(self.schema_types[field])
        stats = self.field_stats.get(field)
        return stats.type if stats else "unknown"

    def field_catalog(self) -> List[FieldInfo]:
        return [
            FieldInfo(name=name, type=self.type_for(name), example=self.example_for(name))
            for name in self.field_names()
        ]


class Filter(BaseModel):
    """Single-field predicate."""

    model_config = ConfigDict(frozen=True)

    field: str = Field(min_length=1)
    operator: FilterOperator
    value: Any = None


class Plan(BaseModel):
    """Structured filters, sort and limit for one query."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    filters: List[Filter] = Field(default_factory=list)
    sort_by: Optional[str] = Field(default=None, alias="sortBy")
    sort_order: SortOrder = Field(default=SortOrder.DESC, alias="sortOrder")
    limit: Optional[int] = None


class SearchOptions(BaseModel):
    """Per-call options for a search."""

    limit: Optional[int] = Field(default=None, description="Limit hint for the planner")
    temperature: Optional[float] = Field(default=None, ge=0, le=2)
    max_tokens: Optional[int] = Field(default=None, gt=0)


class Summary(BaseModel):
    """Natural-language consolidation of matching records."""

    answer: str
    insights: List[str] = Field(default_factory=list)
    stats: Dict[str, Any] = Field(default_factory=dict)


class PlanOutcome(BaseModel):
    """Result of the planning stage: a plan, possibly the fallback one."""

    plan: Plan
    degraded: bool = False
    reason: Optional[str] = None
    attempts: int = 0


class SummaryOutcome(BaseModel):
    """Result of the consolidation stage: a summary, possibly the canned one."""

    summary: Summary
    degraded: bool = False
    reason: Optional[str] = None


class SearchResult(BaseModel):
    """Final result of a natural-language search."""

    model_config = ConfigDict(populate_by_name=True)

    query: str
    answer: str
    insights: List[str] = Field(default_factory=list)
    stats: Dict[str, Any] = Field(default_factory=dict)
    matching_records: List[Record] = Field(default_factory=list, alias="matchingRecords")
    total_matches: int = Field(default=0, alias="totalMatches")
    execution_time_ms: int = Field(default=0, alias="executionTimeMs")
    metadata: Dict[str, Any] = Field(default_factory=dict)


class TokenUsage(BaseModel):
    """Token accounting reported by the collaborator."""

    prompt_tokens: Optional[int] = None
    completion_tokens: Optional[int] = None
    total_tokens: Optional[int] = None


class GenerationResult(BaseModel):
    """Free-text output of the collaborator."""

    text: str = ""
    usage: Optional[TokenUsage] = None


class LLMConfig(BaseModel):
    """Configuration for LLM client."""

    model: str
    api_key: Optional[str] = None
    base_url: Optional[str] = None
    temperature: float = 0.0
    max_tokens: Optional[int] = None

    @classmethod
    def from_env(cls) -> "LLMConfig":
        """
        Read LLM settings from the environment.

        Reads LLM_MODEL, LLM_API_KEY (or OPENAI_API_KEY) and LLM_BASE_URL.
        """
        return cls(
            model=os.getenv("LLM_MODEL", ""),
            api_key=os.getenv("LLM_API_KEY") or os.getenv("OPENAI_API_KEY"),
            base_url=os.getenv("LLM_BASE_URL"),
        )


class SearchConfig(BaseModel):
    """Tunables for planning retries, limits and consolidation."""

    max_plan_attempts: int = Field(default=3, ge=1)
    backoff_base_seconds: float = Field(default=2.0, ge=0)
    default_limit: int = Field(default=10, gt=0)
    plan_max_tokens: int = Field(default=400, gt=0)
    summary_temperature: float = Field(default=0.7, ge=0, le=2)
    summary_max_tokens: int = Field(default=1000, gt=0)
    summary_sample_size: int = Field(default=5, gt=0)

    @classmethod
    def from_env(cls) -> "SearchConfig":
        """
        Build config from defaults overridden by SEARCH_* environment variables.

        Returns:
            Validated SearchConfig (pydantic coerces the string values)
        """
        overrides = {}
        for attr, env_var in SEARCH_ENV_VARS.items():
            value = os.getenv(env_var)
            if value:
                overrides[attr] = value
        return cls(**overrides)
