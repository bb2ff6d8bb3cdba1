"""Consolidation of matching records into an answer."""

from record_search.summary.summarizer import ResultSummarizer

__all__ = ["ResultSummarizer"]
