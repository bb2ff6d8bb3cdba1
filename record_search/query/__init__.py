"""Query sanitization, prompt building and plan generation."""

from record_search.query.sanitizer import sanitize
from record_search.query.prompt_generator import PromptGenerator
from record_search.query.planner import PlanGenerator

__all__ = ["sanitize", "PromptGenerator", "PlanGenerator"]
