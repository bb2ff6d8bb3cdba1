"""Shared fixtures for the search pipeline tests."""

from typing import Any, Dict, List

import pytest

from record_search.core.models import SearchConfig

from fakes import SleepRecorder


@pytest.fixture
def people() -> List[Dict[str, Any]]:
    return [
        {"name": "John", "age": 30, "city": "NYC"},
        {"name": "Jane", "age": 25, "city": "LA"},
    ]


@pytest.fixture
def fast_config() -> SearchConfig:
    """Config without backoff delays."""
    return SearchConfig(backoff_base_seconds=0)


@pytest.fixture
def sleep_recorder() -> SleepRecorder:
    return SleepRecorder()
