"""
Generate prompts for LLM plan extraction and result consolidation.
"""

import json
from typing import Any, List, Sequence

from record_search.core.models import FieldInfo, Record

MAX_EXAMPLE_CHARS = 80


class PromptGenerator:
    """
    Generates prompts for the search pipeline.

    The planning prompt guides the LLM to convert a natural-language
    request into a flat filter plan; the consolidation prompt asks for a
    short JSON summary of matching records.
    """

    @staticmethod
    def render_example(value: Any) -> str:
        """Compact JSON rendering of an example value."""
        rendered = json.dumps(value, default=str, ensure_ascii=False)
        if len(rendered) > MAX_EXAMPLE_CHARS:
            rendered = rendered[: MAX_EXAMPLE_CHARS - 3] + "..."
        return rendered

    def render_field_catalog(self, fields: Sequence[FieldInfo]) -> str:
        """One `name (type): example` line per field."""
        return "\n".join(
            f"{f.name} ({f.type}): {self.render_example(f.example)}" for f in fields
        )

    def generate_plan_prompt(
        self,
        fields: Sequence[FieldInfo],
        query: str,
        default_limit: int = 10,
    ) -> str:
        """
        Generate the planning prompt.

        Args:
            fields: Field catalog (name, type, example)
            query: Sanitized natural-language request
            default_limit: Limit shown in the examples

        Returns:
            Prompt string with field catalog, operator grammar and examples
        """
        return f"""Analyze this search request and create structured filters.

AVAILABLE DATA FIELDS:
{self.render_field_catalog(fields)}

SEARCH REQUEST: "{query}"

Create a JSON response with filters that match the request.

FILTER FORMAT:
{{"field": "fieldname", "operator": "op", "value": val}}

OPERATORS:
= (exact match)
!= (not equal)
> (greater than - for numbers only)
< (less than - for numbers only)
>= (at least - for numbers only)
<= (at most - for numbers only)
contains (partial text match)
startsWith (text begins with value)
endsWith (text ends with value)

PLAN OPTIONS:
- "sortBy": field name to sort by (optional)
- "sortOrder": "asc" or "desc" (optional, defaults to "desc")
- "limit": maximum number of records to return

RULES:
1. Field names must exactly match available fields
2. Use numbers without quotes for numeric values
3. Use quoted strings for text values
4. Multiple filters can be combined; all of them must hold

EXAMPLES:

Request: "Find records where city is NYC"
Response: {{"filters":[{{"field":"city","operator":"=","value":"NYC"}}],"limit":{default_limit}}}

Request: "active status is true"
Response: {{"filters":[{{"field":"active","operator":"=","value":"true"}}],"limit":{default_limit}}}

Request: "age field greater than 30"
Response: {{"filters":[{{"field":"age","operator":">","value":30}}],"limit":{default_limit}}}

Request: "names starting with J, oldest first"
Response: {{"filters":[{{"field":"name","operator":"startsWith","value":"J"}}],"sortBy":"age","sortOrder":"desc","limit":{default_limit}}}

Request: "compensation field greater than 70000"
Response: {{"filters":[{{"field":"salary","operator":">","value":70000}}],"limit":{default_limit}}}

NOW ANALYZE THE SEARCH REQUEST ABOVE.

Respond with ONLY valid JSON:
{{"filters":[...],"limit":{default_limit}}}

If no filters needed: {{"filters":[],"limit":{default_limit}}}"""

    def generate_summary_prompt(
        self,
        query: str,
        total_matches: int,
        sample: List[Record],
    ) -> str:
        """
        Generate the consolidation prompt.

        Args:
            query: Original user query
            total_matches: Number of matching records
            sample: First few matching records

        Returns:
            Prompt string asking for {answer, insights, stats} JSON
        """
        sample_json = json.dumps(sample, indent=2, default=str, ensure_ascii=False)
        return f"""You are a data analyst. The user searched for: "{query}"

Found {total_matches} matching records.

Sample results (first {len(sample)}):
{sample_json}

Provide a JSON response with:
{{
  "answer": "Brief 1-2 sentence answer to the query",
  "insights": ["insight 1", "insight 2", "insight 3"],
  "stats": {{"stat_name": value}}
}}

Rules:
- Keep answer concise (max 2 sentences)
- Provide 2-4 key insights only
- Include 2-4 relevant statistics
- Use proper JSON syntax with NO line breaks in strings
- Respond with ONLY valid JSON, no markdown, no code blocks

Response:"""
