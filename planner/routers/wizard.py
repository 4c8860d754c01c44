from fastapi import APIRouter, BackgroundTasks, Depends
from pydantic import BaseModel, Field
from typing import List, Optional
import logging

from planner.dependencies import get_itinerary_service, get_session_store, get_suggestion_service
from planner.errors import PlannerError, ValidationError
from planner.models.trip import ActivitySuggestion, Notice, TripSnapshot
from planner.models.wizard import (
    BeginItineraryFetch,
    ItineraryFailed,
    ItineraryLoaded,
    UserAction,
    WizardState,
)
from planner.services.itinerary_service import ItineraryService
from planner.services.session_store import SessionStore, WizardSession, pool_key
from planner.services.suggestion_service import SuggestionService, refill_suggestion
from planner.services.wizard import finalize, needs_itinerary

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/wizard", tags=["wizard"])

# Request Models
class ActionRequest(BaseModel):
    action: UserAction

class SuggestionsRequest(BaseModel):
    count: Optional[int] = Field(None, ge=1, le=10)

# Response Models
class WizardView(BaseModel):
    sessionId: str
    state: WizardState
    needsItinerary: bool
    suggestions: List[ActivitySuggestion] = []
    notices: List[Notice] = []

# Helper Functions
def _view(session: WizardSession) -> WizardView:
    return WizardView(
        sessionId=session.session_id,
        state=session.state,
        needsItinerary=needs_itinerary(session.state),
        suggestions=list(session.suggestions),
        notices=list(session.notices)
    )

# API Endpoints
@router.get("/{session_id}", response_model=WizardView)
def get_wizard(session_id: str, store: SessionStore = Depends(get_session_store)):
    return _view(store.get_session(session_id))

@router.post("/{session_id}/actions", response_model=WizardView)
def apply_action(
    session_id: str,
    request: ActionRequest,
    store: SessionStore = Depends(get_session_store)
):
    store.apply(session_id, request.action)
    return _view(store.get_session(session_id))

@router.post("/{session_id}/itinerary", response_model=WizardView)
async def fetch_itinerary(
    session_id: str,
    store: SessionStore = Depends(get_session_store),
    service: ItineraryService = Depends(get_itinerary_service)
):
    """
    Generate the itinerary once all trip fields are set.

    Calling this again while a fetch is in flight, or after the itinerary
    exists, returns the current state without another AI call.
    """
    state = store.get_session(session_id).state
    if not needs_itinerary(state):
        logger.info(f"Session {session_id}: itinerary fetch skipped at stage {state.stage.value}")
        return _view(store.get_session(session_id))

    state = store.apply(session_id, BeginItineraryFetch())
    params = state.trip_parameters()

    try:
        itinerary = await service.fetch_itinerary(
            origin=params.origin,
            destination=params.destination,
            budget=params.budget,
            start_date=params.startDate,
            end_date=params.endDate,
            traveler_count=params.numberOfTravelers
        )
    except PlannerError as e:
        logger.error(f"Itinerary fetch failed for session {session_id}: {e.message}")
        error = f"{e.message}: {e.details}" if e.details else e.message
        store.apply(session_id, ItineraryFailed(error=error), expected_parameters=params)
        raise
    except Exception as e:
        logger.error(f"Unexpected error fetching itinerary: {e}", exc_info=True)
        store.apply(session_id, ItineraryFailed(error=str(e)), expected_parameters=params)
        raise

    store.apply(session_id, ItineraryLoaded(itinerary=itinerary), expected_parameters=params)
    return _view(store.get_session(session_id))

@router.post("/{session_id}/suggestions", response_model=WizardView)
async def fetch_suggestions(
    session_id: str,
    request: SuggestionsRequest,
    store: SessionStore = Depends(get_session_store),
    service: SuggestionService = Depends(get_suggestion_service)
):
    state = store.get_session(session_id).state
    if not state.destination or state.budget is None:
        raise ValidationError("Set a destination and budget before asking for suggestions")

    fetched_for = pool_key(state)
    suggestions = await service.fetch_suggestions(state.destination, state.budget, request.count)
    store.set_suggestions(session_id, suggestions, fetched_for=fetched_for)
    return _view(store.get_session(session_id))

@router.post("/{session_id}/suggestions/{index}/promote", response_model=WizardView)
def promote_suggestion(
    session_id: str,
    index: int,
    background_tasks: BackgroundTasks,
    store: SessionStore = Depends(get_session_store),
    service: SuggestionService = Depends(get_suggestion_service)
):
    """Add a pooled suggestion to the plan, then fetch one replacement in the background"""
    state, suggestion = store.promote_suggestion(session_id, index)
    logger.info(f"Session {session_id}: promoted suggestion {suggestion.name}")

    background_tasks.add_task(
        refill_suggestion,
        store,
        service,
        session_id,
        state.destination,
        state.budget
    )
    return _view(store.get_session(session_id))

@router.post("/{session_id}/finalize", response_model=TripSnapshot)
def finalize_trip(session_id: str, store: SessionStore = Depends(get_session_store)):
    return finalize(store.get_session(session_id).state)

@router.delete("/{session_id}/notices", response_model=List[Notice])
def clear_notices(session_id: str, store: SessionStore = Depends(get_session_store)):
    return store.drain_notices(session_id)
