"""
AI proxy endpoints: prompt building, Gemini call and response-shape validation.

Request fields are deliberately loose so missing values reach the services
and come back as a 400 with a readable message instead of a schema dump.
"""

from fastapi import APIRouter, Depends
from pydantic import BaseModel
from typing import Any, List, Optional
import logging

from planner.dependencies import get_itinerary_service, get_suggestion_service
from planner.models.trip import ActivitySuggestion, GeneratedItinerary
from planner.services.itinerary_service import ItineraryService
from planner.services.suggestion_service import SuggestionService

logger = logging.getLogger(__name__)
router = APIRouter(tags=["gateway"])

# Request Models
class SuggestActivitiesRequest(BaseModel):
    destination: Optional[str] = None
    budget: Optional[Any] = None
    count: Optional[Any] = None

class GenerateItineraryRequest(BaseModel):
    origin: Optional[str] = None
    destination: Optional[str] = None
    budget: Optional[Any] = None
    startDate: Optional[str] = None
    endDate: Optional[str] = None
    numberOfTravelers: Optional[Any] = None

# Response Models
class ErrorResponse(BaseModel):
    """Error response model"""
    error: str
    details: Optional[str] = None
    raw: Optional[str] = None

_ERROR_RESPONSES = {
    400: {"model": ErrorResponse, "description": "Bad Request"},
    500: {"model": ErrorResponse, "description": "Configuration Error"},
    502: {"model": ErrorResponse, "description": "AI Gateway Error"},
}

@router.post("/suggest-activities", response_model=List[ActivitySuggestion], responses=_ERROR_RESPONSES)
async def suggest_activities(
    request: SuggestActivitiesRequest,
    service: SuggestionService = Depends(get_suggestion_service)
):
    logger.info(f"Suggest activities for {request.destination}, budget: {request.budget}")
    return await service.fetch_suggestions(
        destination=request.destination,
        budget=request.budget,
        count=request.count
    )

@router.post("/generate-itinerary", response_model=GeneratedItinerary, responses=_ERROR_RESPONSES)
async def generate_itinerary(
    request: GenerateItineraryRequest,
    service: ItineraryService = Depends(get_itinerary_service)
):
    logger.info(f"Generate itinerary {request.origin} -> {request.destination}")
    return await service.fetch_itinerary(
        origin=request.origin,
        destination=request.destination,
        budget=request.budget,
        start_date=request.startDate,
        end_date=request.endDate,
        traveler_count=request.numberOfTravelers
    )
