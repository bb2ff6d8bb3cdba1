"""
Query sanitization.

Rewrites wording that tends to make the LLM refuse (financial terms) and
normalizes comparison phrases before planning.
"""

import logging
import re
from typing import Any, List, Pattern, Tuple

logger = logging.getLogger("record_search.query.sanitizer")

# Applied in order. No replacement produces a pattern applied at or after it.
SUBSTITUTIONS: List[Tuple[Pattern[str], str]] = [
    (re.compile(r"\bearns?\b", re.IGNORECASE), "has"),
    (re.compile(r"\bsalary\b", re.IGNORECASE), "compensation"),
    (re.compile(r"\bincome\b", re.IGNORECASE), "amount"),
    (re.compile(r"\bpayment\b", re.IGNORECASE), "value"),
    (re.compile(r"\bmoney\b", re.IGNORECASE), "amount"),
    (re.compile(r"\bmore than\b", re.IGNORECASE), "greater than"),
    (re.compile(r"\bgreater than or equal to\b", re.IGNORECASE), "at least"),
    (re.compile(r"\bless than or equal to\b", re.IGNORECASE), "at most"),
    (re.compile(r"\bless than\b", re.IGNORECASE), "below"),
]


def sanitize(query: Any) -> str:
    """
    Rewrite a natural-language query into planner-friendly wording.

    Args:
        query: Raw user query

    Returns:
        Sanitized query (unchanged when nothing matched)
    """
    original = query if isinstance(query, str) else str(query)
    sanitized = original
    for pattern, replacement in SUBSTITUTIONS:
        sanitized = pattern.sub(replacement, sanitized)

    if sanitized != original:
        logger.debug('Query sanitized: "%s" -> "%s"', original, sanitized)
    return sanitized
