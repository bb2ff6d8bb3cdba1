"""
Example usage of the record search pipeline.

Requires LLM_MODEL plus LLM_API_KEY (or LLM_BASE_URL for Ollama/vLLM).
"""

import asyncio
import json
import logging
import os

from dotenv import load_dotenv

from record_search import RecordCollection, SearchOptions, SearchOrchestrator

load_dotenv()

logging.basicConfig(level=os.getenv("LOG_LEVEL", "INFO").upper())

RECORDS = [
    {"name": "John", "age": 30, "city": "NYC", "active": True},
    {"name": "Jane", "age": 25, "city": "LA", "active": False},
    {"name": "Maria", "age": 41, "city": "NYC", "active": "true"},
    {"name": "Ken", "age": "28", "city": "Boston", "active": None},
]


async def main():
    print("=" * 80)
    print("RECORD SEARCH EXAMPLE")
    print("=" * 80)

    orchestrator = SearchOrchestrator.from_env()
    collection = RecordCollection.from_records(RECORDS)

    print("\nAvailable fields:")
    for info in collection.field_catalog():
        print(f"  - {info.name} ({info.type})")

    queries = [
        "people in NYC",
        "who is older than 27, oldest first",
        "active users whose name starts with J",
    ]

    for query in queries:
        print(f"\n{'-' * 80}")
        print(f"Query: {query}")
        print("-" * 80)

        result = await orchestrator.query(collection, query, SearchOptions(limit=5))

        print(f"Answer: {result.answer}")
        for insight in result.insights:
            print(f"  * {insight}")
        print(f"Plan: {json.dumps(result.metadata['plan'])}")
        print(f"Matches ({result.total_matches}, {result.execution_time_ms}ms):")
        for record in result.matching_records:
            print(f"  {record}")

    print(f"\n{'-' * 80}")
    print("Raw search (no consolidation)")
    records = await orchestrator.query_raw(collection, "people in LA")
    print(json.dumps(records, indent=2))


if __name__ == "__main__":
    asyncio.run(main())
