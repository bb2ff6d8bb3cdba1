"""
Exception hierarchy for the search pipeline.

Only InvalidInputError and wrapped CollaboratorError failures ever leave
SearchOrchestrator.query(); planning and consolidation problems degrade
to fallback output instead of raising.
"""

from typing import Any, Dict, Optional


class SearchError(Exception):
    """Base error for all search failures."""

    def __init__(
        self,
        message: str,
        code: str = "SEARCH_ERROR",
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message)
        self.code = code
        self.context = context or {}


class InvalidInputError(SearchError, ValueError):
    """Record collection or query is absent or malformed."""

    def __init__(self, message: str, context: Optional[Dict[str, Any]] = None):
        super().__init__(message, code="INVALID_INPUT", context=context)


class CollaboratorError(SearchError):
    """The language-generation collaborator failed (auth, transport, provider)."""

    def __init__(
        self,
        message: str,
        code: str = "COLLABORATOR_ERROR",
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message, code=code, context=context)


class EmptyResponseError(CollaboratorError):
    """The collaborator returned no text."""

    def __init__(self, message: str = "LLM returned empty response", context: Optional[Dict[str, Any]] = None):
        super().__init__(message, code="EMPTY_RESPONSE", context=context)


class MalformedResponseError(CollaboratorError):
    """The collaborator response holds no parsable JSON object."""

    def __init__(self, message: str = "LLM response is not valid JSON", context: Optional[Dict[str, Any]] = None):
        super().__init__(message, code="MALFORMED_RESPONSE", context=context)
