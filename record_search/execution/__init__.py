"""Plan execution over in-memory records."""

from record_search.execution.filter_engine import FilterEngine
from record_search.execution.predicates import (
    EQUALITY_STRATEGIES,
    compare_equal,
    compare_for_sort,
    matches,
    to_boolean,
    to_number,
)

__all__ = [
    "FilterEngine",
    "EQUALITY_STRATEGIES",
    "compare_equal",
    "compare_for_sort",
    "matches",
    "to_boolean",
    "to_number",
]
