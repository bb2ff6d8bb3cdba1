"""
Record Search - natural-language questions over in-memory records.

Main entry point for creating search orchestrators.
"""

from record_search.orchestrator import SearchOrchestrator
from record_search.core.models import RecordCollection, SearchOptions, SearchResult

__all__ = ["SearchOrchestrator", "RecordCollection", "SearchOptions", "SearchResult"]
