"""Helpers for pulling JSON objects out of free-text LLM responses."""

import json
import re
from typing import Any, Dict, Optional

from record_search.core.errors import EmptyResponseError, MalformedResponseError

_FENCE_PATTERN = re.compile(r"```(?:json)?\s*\n?(.*?)\n?```", re.DOTALL)


def strip_code_fences(text: str) -> str:
    """Return the body of a Markdown code block, or the text unchanged."""
    stripped = text.strip()
    if stripped.startswith("```"):
        match = _FENCE_PATTERN.search(stripped)
        if match:
            return match.group(1).strip()
    return stripped


def find_json_object(text: str) -> Optional[str]:
    """Substring from the first '{' to the last '}', if any."""
    start = text.find("{")
    end = text.rfind("}")
    if start < 0 or end <= start:
        return None
    return text[start : end + 1]


def extract_json_object(raw: Optional[str]) -> Dict[str, Any]:
    """
    Parse the JSON object embedded in an LLM response.

    Handles Markdown code fences and preamble/trailing text.

    Args:
        raw: Raw response text

    Returns:
        Parsed JSON object

    Raises:
        EmptyResponseError: If the response is empty or whitespace
        MalformedResponseError: If no JSON object can be parsed
    """
    if raw is None or not raw.strip():
        raise EmptyResponseError()

    candidate = find_json_object(strip_code_fences(raw))
    if candidate is None:
        raise MalformedResponseError("No JSON object in response", context={"response": raw[:200]})

    try:
        parsed = json.loads(candidate)
    except json.JSONDecodeError as e:
        raise MalformedResponseError(
            f"LLM response is not valid JSON: {e}", context={"response": raw[:200]}
        ) from e

    if not isinstance(parsed, dict):
        raise MalformedResponseError("LLM response JSON is not an object")
    return parsed
