"""
LLM client factory and management.

Implements the text-generation collaborator used by the search pipeline
on top of pydantic-ai agents.
"""

import logging
import os
from typing import Any, Dict, Optional, Type

from pydantic import BaseModel
from pydantic_ai import Agent
from pydantic_ai.models.openai import OpenAIChatModel
from pydantic_ai.providers.openai import OpenAIProvider

from record_search.core.errors import CollaboratorError
from record_search.core.models import GenerationResult, LLMConfig, TokenUsage
from record_search.llm.json_extraction import extract_json_object

logger = logging.getLogger("record_search.llm.client_factory")

JSON_ONLY_SUFFIX = "\n\nRespond with valid JSON only. Do not wrap in markdown code blocks."


class LLMClientFactory:
    """
    Creates pydantic-ai agents and exposes them as a text generator.

    Supports OpenAI, Anthropic, Google and OpenAI-compatible APIs.
    A fresh agent is built per call, so one factory can be shared by
    concurrent queries.

    Reads configuration from environment variables by default:
    - LLM_MODEL: Model name
    - LLM_API_KEY or OPENAI_API_KEY: API key
    - LLM_BASE_URL: Optional base URL for OpenAI-compatible APIs
    """

    def __init__(
        self,
        model_name: Optional[str] = None,
        api_key: Optional[str] = None,
        base_url: Optional[str] = None,
        model_settings: Optional[Dict[str, Any]] = None,
        system_prompt: str = "",
    ):
        """
        Initialize LLM client factory.

        Args:
            model_name: Name of the LLM model (e.g., "gpt-4o", "openai:gpt-4o-mini", "qwen3:8b").
                       If not provided, reads from LLM_MODEL environment variable.
            api_key: API key for the LLM provider.
                    If not provided, reads from LLM_API_KEY or OPENAI_API_KEY.
                    Optional when using base_url (e.g., Ollama doesn't require real API keys).
            base_url: Optional base URL for OpenAI-compatible APIs (e.g., "http://localhost:11434/v1" for Ollama).
                     If not provided, reads from LLM_BASE_URL environment variable.
            model_settings: Default model settings merged under per-call temperature/max_tokens
            system_prompt: Optional system prompt for every call

        Raises:
            ValueError: If model_name is missing, or if api_key is missing when not using base_url
        """
        model_name = model_name or os.getenv("LLM_MODEL")
        api_key = api_key or os.getenv("LLM_API_KEY") or os.getenv("OPENAI_API_KEY")
        base_url = base_url or os.getenv("LLM_BASE_URL")

        if not model_name:
            raise ValueError("model_name is required (provide as parameter or set LLM_MODEL env var)")

        self.model_name = model_name
        self.model_settings = model_settings or {}
        self.system_prompt = system_prompt

        if base_url:
            # OpenAI-compatible API (Ollama, vLLM); normalize to end with /v1
            normalized_base_url = base_url.rstrip("/")
            if not normalized_base_url.endswith("/v1"):
                normalized_base_url = f"{normalized_base_url}/v1"
            self.base_url = normalized_base_url

            provider_kwargs = {"base_url": normalized_base_url}
            if api_key:
                provider_kwargs["api_key"] = api_key

            self.model = OpenAIChatModel(
                model_name,
                provider=OpenAIProvider(**provider_kwargs),
            )
        elif not api_key:
            raise ValueError(
                "api_key is required when not using a custom base_url "
                "(provide as parameter or set LLM_API_KEY/OPENAI_API_KEY env var)"
            )
        else:
            self.base_url = None
            # pydantic-ai providers read their keys from the environment
            if model_name.startswith(("anthropic:", "claude")):
                os.environ["ANTHROPIC_API_KEY"] = api_key
                self.model = model_name if ":" in model_name else f"anthropic:{model_name}"
            elif model_name.startswith(("google-gla:", "gemini")):
                os.environ["GOOGLE_API_KEY"] = api_key
                self.model = model_name if ":" in model_name else f"google-gla:{model_name}"
            else:
                os.environ["OPENAI_API_KEY"] = api_key
                self.model = model_name if model_name.startswith("openai:") else f"openai:{model_name}"

    @classmethod
    def from_config(cls, config: LLMConfig) -> "LLMClientFactory":
        """Create a factory from an LLMConfig."""
        settings: Dict[str, Any] = {"temperature": config.temperature}
        if config.max_tokens:
            settings["max_tokens"] = config.max_tokens
        return cls(
            model_name=config.model or None,
            api_key=config.api_key,
            base_url=config.base_url,
            model_settings=settings,
        )

    def _create_agent(self, output_type: Optional[Type[BaseModel]] = None) -> Agent:
        """
        Create a pydantic-ai agent.

        Args:
            output_type: Optional Pydantic model for structured output.
                        If None, the agent returns plain text.

        Returns:
            Configured Agent
        """
        agent_kwargs: Dict[str, Any] = {
            "model": self.model,
            "output_type": output_type if output_type is not None else str,
        }
        if output_type is not None:
            agent_kwargs["retries"] = 3  # validation retries for structured output
        if self.system_prompt:
            agent_kwargs["system_prompt"] = self.system_prompt
        return Agent(**agent_kwargs)

    def _settings_for(self, temperature: float, max_tokens: Optional[int]) -> Dict[str, Any]:
        settings = dict(self.model_settings)
        settings["temperature"] = temperature
        if max_tokens:
            settings["max_tokens"] = max_tokens
        return settings

    async def _run(
        self,
        prompt: str,
        output_type: Optional[Type[BaseModel]],
        temperature: float,
        max_tokens: Optional[int],
    ) -> Any:
        agent = self._create_agent(output_type)
        try:
            return await agent.run(
                prompt,
                model_settings=self._settings_for(temperature, max_tokens),
            )
        except Exception as e:
            raise CollaboratorError(
                f"LLM call failed: {e}",
                context={"model": self.model_name},
            ) from e

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
            GenerationResult with text and token usage

        Raises:
            CollaboratorError: If the provider call fails
        """
        result = await self._run(prompt, None, temperature, max_tokens)

        text = result.output or ""
        logger.debug("LLM response (%d chars)", len(text))
        return GenerationResult(text=text, usage=self._usage_of(result))

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

        With an output_type the agent validates the response against that
        model; otherwise the JSON object is extracted from free text.

        Args:
            prompt: Full prompt text
            temperature: Sampling temperature
            max_tokens: Upper bound on generated tokens
            output_type: Optional Pydantic model for structured output

        Returns:
            Parsed JSON object

        Raises:
            CollaboratorError: If the provider call fails or output never validates
            MalformedResponseError: If the free-text response holds no JSON object
        """
        if output_type is not None:
            result = await self._run(prompt, output_type, temperature, max_tokens)
            return result.output.model_dump(mode="json")

        result = await self.generate_text(
            prompt + JSON_ONLY_SUFFIX,
            temperature=temperature,
            max_tokens=max_tokens,
        )
        return extract_json_object(result.text)

    @staticmethod
    def _usage_of(result: Any) -> Optional[TokenUsage]:
        usage = result.usage()
        if usage is None:
            return None
        # RunUsage exposes input/output tokens; older releases used request/response
        prompt_tokens = getattr(usage, "input_tokens", None)
        if prompt_tokens is None:
            prompt_tokens = getattr(usage, "request_tokens", None)
        completion_tokens = getattr(usage, "output_tokens", None)
        if completion_tokens is None:
            completion_tokens = getattr(usage, "response_tokens", None)
        return TokenUsage(
            prompt_tokens=prompt_tokens,
            completion_tokens=completion_tokens,
            total_tokens=getattr(usage, "total_tokens", None),
        )
