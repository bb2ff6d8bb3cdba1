"""Core interfaces, models and errors for the search pipeline."""

from record_search.core.errors import (
    SearchError,
    InvalidInputError,
    CollaboratorError,
    EmptyResponseError,
    MalformedResponseError,
)
from record_search.core.interfaces import ITextGenerator
from record_search.core.models import (
    Record,
    FieldStats,
    FieldInfo,
    RecordCollection,
    FilterOperator,
    SortOrder,
    Filter,
    Plan,
    SearchOptions,
    Summary,
    PlanOutcome,
    SummaryOutcome,
    SearchResult,
    TokenUsage,
    GenerationResult,
    LLMConfig,
    SearchConfig,
)

__all__ = [
    "SearchError",
    "InvalidInputError",
    "CollaboratorError",
    "EmptyResponseError",
    "MalformedResponseError",
    "ITextGenerator",
    "Record",
    "FieldStats",
    "FieldInfo",
    "RecordCollection",
    "FilterOperator",
    "SortOrder",
    "Filter",
    "Plan",
    "SearchOptions",
    "Summary",
    "PlanOutcome",
    "SummaryOutcome",
    "SearchResult",
    "TokenUsage",
    "GenerationResult",
    "LLMConfig",
    "SearchConfig",
]
