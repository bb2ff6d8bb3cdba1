"""
FastAPI REST API for natural-language record search.

Answers natural-language questions over a posted record collection.
"""

import logging
import os
from functools import lru_cache
from typing import Any, Dict, List, Optional

from dotenv import load_dotenv
from fastapi import Depends, FastAPI, HTTPException
from pydantic import BaseModel, Field

from record_search import SearchOrchestrator
from record_search.core.errors import InvalidInputError, SearchError
from record_search.core.models import RecordCollection, SearchOptions

load_dotenv()

logging.basicConfig(
    level=os.getenv("LOG_LEVEL", "INFO").upper(),
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)
logger = logging.getLogger("record_search.api")

app = FastAPI(
    title="Record Search API",
    description="Ask natural-language questions over structured records",
    version="1.0.0",
)


class SearchRequest(BaseModel):
    """Request model for a natural-language search."""
    query: str = Field(..., description="Natural language query string")
    records: List[Dict[str, Any]] = Field(..., description="Records to search")
    schema_types: Optional[Dict[str, str]] = Field(None, description="Explicit field types")
    limit: Optional[int] = Field(None, gt=0, description="Preferred maximum number of matches")
    temperature: Optional[float] = Field(None, ge=0, le=2, description="Consolidation temperature")
    max_tokens: Optional[int] = Field(None, gt=0, description="Consolidation token budget")


class RawSearchResponse(BaseModel):
    """Response model for a search without consolidation."""
    query: str
    matchingRecords: List[Dict[str, Any]]
    totalMatches: int


@lru_cache(maxsize=1)
def get_orchestrator() -> SearchOrchestrator:
    """Create the orchestrator once from environment configuration."""
    return SearchOrchestrator.from_env()


def _options(request: SearchRequest) -> SearchOptions:
    return SearchOptions(
        limit=request.limit,
        temperature=request.temperature,
        max_tokens=request.max_tokens,
    )


def _collection(request: SearchRequest) -> RecordCollection:
    return RecordCollection.from_records(request.records, schema_types=request.schema_types)


@app.get("/health")
async def health() -> Dict[str, str]:
    return {"status": "ok"}


@app.post("/search")
async def search(
    request: SearchRequest,
    orchestrator: SearchOrchestrator = Depends(get_orchestrator),
) -> Dict[str, Any]:
    """
    Answer a natural-language query over the posted records.

    Returns the answer, insights, stats and the matching records.
    """
    try:
        result = await orchestrator.query(_collection(request), request.query, _options(request))
    except InvalidInputError as e:
        raise HTTPException(status_code=400, detail=str(e))
    except SearchError as e:
        raise HTTPException(status_code=502, detail=str(e))
    return result.model_dump(mode="json", by_alias=True)


@app.post("/search/raw", response_model=RawSearchResponse)
async def search_raw(
    request: SearchRequest,
    orchestrator: SearchOrchestrator = Depends(get_orchestrator),
) -> RawSearchResponse:
    """
    Return matching records without LLM consolidation.
    """
    try:
        records = await orchestrator.query_raw(_collection(request), request.query, _options(request))
    except InvalidInputError as e:
        raise HTTPException(status_code=400, detail=str(e))
    except SearchError as e:
        raise HTTPException(status_code=502, detail=str(e))
    return RawSearchResponse(query=request.query, matchingRecords=records, totalMatches=len(records))


if __name__ == "__main__":
    import uvicorn

    port = int(os.getenv("API_PORT", "8000"))
    host = os.getenv("API_HOST", "0.0.0.0")

    uvicorn.run(app, host=host, port=port)
