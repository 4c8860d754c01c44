"""Global pytest configuration."""

import os

# Settings are read at import time; keep tests independent of any local .env key
os.environ.setdefault("GEMINI_API_KEY", "")

from datetime import date

import pytest
from fastapi.testclient import TestClient

from planner.dependencies import get_itinerary_service, get_session_store, get_suggestion_service
from planner.main import app
from planner.models.trip import GeneratedItinerary
from planner.services.itinerary_service import ItineraryService
from planner.services.session_store import SessionStore
from planner.services.suggestion_service import SuggestionService
from tests.mock_llm_service import SAMPLE_ITINERARY, MockLLMService


@pytest.fixture
def mock_llm() -> MockLLMService:
    return MockLLMService()


@pytest.fixture
def store() -> SessionStore:
    return SessionStore(ttl_hours=4)


@pytest.fixture
def sample_itinerary() -> GeneratedItinerary:
    return GeneratedItinerary.model_validate(SAMPLE_ITINERARY)


@pytest.fixture
def trip_dates():
    return date(2024, 6, 1), date(2024, 6, 5)


@pytest.fixture
def client(mock_llm, store):
    """TestClient wired to the mock LLM and a fresh session store"""
    app.dependency_overrides[get_session_store] = lambda: store
    app.dependency_overrides[get_suggestion_service] = lambda: SuggestionService(llm_service=mock_llm)
    app.dependency_overrides[get_itinerary_service] = lambda: ItineraryService(llm_service=mock_llm)
    with TestClient(app) as test_client:
        yield test_client
    app.dependency_overrides.clear()
