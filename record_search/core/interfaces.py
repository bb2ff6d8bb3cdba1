"""
Abstract interface for the language-generation collaborator.

The search pipeline only ever talks to the LLM through this protocol, so a
scripted fake can stand in for it in tests.
"""

from typing import Any, Dict, Optional, Protocol, Type

from pydantic import BaseModel

from record_search.core.models import GenerationResult


class ITextGenerator(Protocol):
    """
    Generate free text or structured JSON from a prompt.

    Implementations must be safe for concurrent invocation: several
    queries may await the same client at once.
    """

    async def generate_text(
        self,
        prompt: str,
        *,
        temperature: float = 0.0,
        max_tokens: Optional[int] = None,
    ) -> GenerationResult:
        """
        Generate free text for a prompt.

        Args:
            prompt: Full prompt text
            temperature: Sampling temperature
            max_tokens: Upper bound on generated tokens

        Returns:
            GenerationResult with the text and optional token usage

        Raises:
            CollaboratorError: If the provider call fails
        """
        ...

    async def generate_structured(
        self,
        prompt: str,
        *,
        temperature: float = 0.0,
        max_tokens: Optional[int] = None,
        output_type: Optional[Type[BaseModel]] = None,
    ) -> Dict[str, Any]:
        """
        Generate a JSON object for a prompt.

        Args:
            prompt: Full prompt text
            temperature: Sampling temperature
            max_tokens: Upper bound on generated tokens
            output_type: Optional Pydantic model the response must validate against

        Returns:
            Parsed JSON object

        Raises:
            CollaboratorError: If the provider call fails
            MalformedResponseError: If no JSON object can be parsed
        """
        ...
