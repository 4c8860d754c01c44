import logging
from datetime import date
from typing import Union

from planner.errors import ValidationError
from planner.models.trip import GeneratedItinerary
from planner.services.llm_service import LLMConfig, SystemInstructions, get_llm_service
from planner.services.response_parser import (
    parse_json_response,
    parse_model,
    raise_for_application_error,
)
from planner.services.validation import (
    require_budget,
    require_date,
    require_positive_int,
    require_text,
)

logger = logging.getLogger(__name__)
logger.setLevel(logging.INFO)


class ItineraryService:
    """Service for generating full trip itineraries with the LLM service"""

    def __init__(self, llm_service=None):
        self._llm_service = llm_service

    @property
    def llm_service(self):
        if self._llm_service is None:
            self._llm_service = get_llm_service()
        return self._llm_service

    async def fetch_itinerary(
        self,
        origin: str,
        destination: str,
        budget: float,
        start_date: Union[date, str],
        end_date: Union[date, str],
        traveler_count: int
    ) -> GeneratedItinerary:
        """
        Generate an itinerary covering transportation, accommodation, food and activities.

        Args:
            origin: Departure city
            destination: Travel destination, embedded in the prompt as typed
            budget: Total budget for all travelers
            start_date: Trip start (date or YYYY-MM-DD)
            end_date: Trip end (date or YYYY-MM-DD), not before start_date
            traveler_count: Number of travelers (>= 1)

        Returns:
            GeneratedItinerary

        Raises:
            ValidationError: before any network call
            ApplicationError: the AI answered with an {"error": ...} object
            GatewayError, EmptyResponseError, MalformedResponseError
        """
        origin = require_text(origin, "origin")
        destination = require_text(destination, "destination")
        budget = require_budget(budget)
        start = require_date(start_date, "startDate")
        end = require_date(end_date, "endDate")
        if start > end:
            raise ValidationError("startDate must not be after endDate.")
        traveler_count = require_positive_int(traveler_count, "numberOfTravelers")

        logger.info(
            f"Generating itinerary {origin} -> {destination}, {start.isoformat()} to {end.isoformat()}, "
            f"{traveler_count} travelers, budget: {budget}"
        )

        user_message = SystemInstructions.itinerary_request(
            origin=origin,
            destination=destination,
            budget=budget,
            start_date=start.isoformat(),
            end_date=end.isoformat(),
            travelers=traveler_count
        )

        response = await self.llm_service.generate_content(
            user_message=user_message,
            system_instruction=SystemInstructions.itinerary_planner(),
            config=LLMConfig(temperature=0.7)
        )
        text = response.text_or_raise()
        logger.info(f"Raw LLM response (first 200 chars): {text[:200]}")

        data = parse_json_response(text)
        raise_for_application_error(data)
        itinerary = parse_model(data, GeneratedItinerary, text)

        logger.info(f"Itinerary generated with {len(itinerary.activities)} activities")
        return itinerary
