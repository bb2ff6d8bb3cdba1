"""Language-generation collaborator backed by pydantic-ai."""

from record_search.llm.client_factory import LLMClientFactory
from record_search.llm.json_extraction import extract_json_object

__all__ = ["LLMClientFactory", "extract_json_object"]
