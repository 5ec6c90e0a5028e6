"""
Fixtures for the API suite.

Clients are session-scoped so the connection pool is reused across
tests; every test still gets the narration fixture for its log banner.
"""

from __future__ import annotations

import json
import os
from collections.abc import Generator
from pathlib import Path
from typing import Any

import pytest

from shared.api_client import ApiClient

FIXTURES_DIR = Path(__file__).resolve().parent.parent / "fixtures"

# ReqRes rejects anonymous calls without a key; the free key is public.
REQRES_DEFAULT_KEY = "reqres-free-v1"


@pytest.fixture(scope="session")
def api_test_data() -> dict[str, Any]:
    with open(FIXTURES_DIR / "api_test_data.json", encoding="utf-8") as handle:
        return json.load(handle)


@pytest.fixture(scope="session")
def api(settings) -> Generator[ApiClient, None, None]:
    """JSONPlaceholder client with the configured latency budget."""
    with ApiClient(
        settings.api_base_url,
        max_response_ms=settings.performance.max_api_response_time_ms,
    ) as client:
        yield client


@pytest.fixture(scope="session")
def reqres(settings, api_test_data) -> Generator[ApiClient, None, None]:
    """ReqRes client for the register/login simulation endpoints."""
    with ApiClient(
        api_test_data["endpoints"]["reqres"]["baseUrl"],
        max_response_ms=settings.performance.max_api_response_time_ms,
        headers={"x-api-key": os.environ.get("REQRES_API_KEY", REQRES_DEFAULT_KEY)},
    ) as client:
        yield client


@pytest.fixture(autouse=True)
def _narrate(narration):
    return narration
