"""Test doubles for the LLM collaborator."""

import json
from typing import Any, Dict, List, Optional

from record_search.core.models import GenerationResult
from record_search.llm.json_extraction import extract_json_object


class FakeTextGenerator:
    """
    Scripted stand-in for the LLM collaborator.

    Each call pops the next scripted item: a string is returned as text, a
    dict is returned as JSON text, an exception instance is raised. Once
    only one item is left it repeats.
    """

    def __init__(self, plan_script: Optional[List[Any]] = None, summary_script: Optional[List[Any]] = None):
        self.plan_script = list(plan_script or [])
        self.summary_script = list(summary_script or [])
        self.text_calls: List[Dict[str, Any]] = []
        self.structured_calls: List[Dict[str, Any]] = []

    @staticmethod
    def _next(script: List[Any]) -> Any:
        if not script:
            return ""
        return script.pop(0) if len(script) > 1 else script[0]

    async def generate_text(self, prompt, *, temperature=0.0, max_tokens=None):
        self.text_calls.append({"prompt": prompt, "temperature": temperature, "max_tokens": max_tokens})
        item = self._next(self.plan_script)
        if isinstance(item, BaseException):
            raise item
        if isinstance(item, dict):
            item = json.dumps(item)
        return GenerationResult(text=item)

    async def generate_structured(self, prompt, *, temperature=0.0, max_tokens=None, output_type=None):
        self.structured_calls.append(
            {"prompt": prompt, "temperature": temperature, "max_tokens": max_tokens, "output_type": output_type}
        )
        item = self._next(self.summary_script)
        if isinstance(item, BaseException):
            raise item
        if isinstance(item, dict):
            return item
        return extract_json_object(item)


class SleepRecorder:
    """Records backoff delays instead of sleeping."""

    def __init__(self):
        self.delays: List[float] = []

    async def __call__(self, delay: float) -> None:
        self.delays.append(delay)
