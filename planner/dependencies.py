import logging

from planner.services.itinerary_service import ItineraryService
from planner.services.session_store import SessionStore
from planner.services.suggestion_service import SuggestionService

logger = logging.getLogger(__name__)
logger.setLevel(logging.INFO)


# Lazily initialize a single global session store to reuse across requests
_session_store = None


def get_session_store() -> SessionStore:
    global _session_store
    if _session_store is None:
        _session_store = SessionStore()
        logger.info("Initialized in-memory session store")
    return _session_store


# ---------------------------
# FastAPI dependencies
# ---------------------------
def get_suggestion_service() -> SuggestionService:
    return SuggestionService()


def get_itinerary_service() -> ItineraryService:
    return ItineraryService()
