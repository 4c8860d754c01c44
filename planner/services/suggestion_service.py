import logging
from typing import List, Optional

from planner.errors import PlannerError
from planner.models.trip import ActivitySuggestion, Notice
from planner.services.llm_service import LLMConfig, SystemInstructions, get_llm_service
from planner.services.response_parser import (
    parse_json_response,
    parse_model_list,
    raise_for_application_error,
)
from planner.services.validation import require_budget, require_positive_int, require_text

logger = logging.getLogger(__name__)
logger.setLevel(logging.INFO)


class SuggestionService:
    """Fetches activity suggestions for a destination and budget"""

    def __init__(self, llm_service=None):
        self._llm_service = llm_service

    @property
    def llm_service(self):
        # Resolved lazily so input validation always runs before the API key check
        if self._llm_service is None:
            self._llm_service = get_llm_service()
        return self._llm_service

    async def fetch_suggestions(
        self,
        destination: str,
        budget: float,
        count: Optional[int] = None
    ) -> List[ActivitySuggestion]:
        """
        Ask the AI for activity suggestions.

        Args:
            destination: Trip destination, passed to the AI as typed
            budget: Total budget (> 0)
            count: Exact number of suggestions; the AI picks 3-5 when omitted

        Returns:
            Suggestions, every one with a non-negative estimatedCost

        Raises:
            ValidationError, ConfigurationError, GatewayError, EmptyResponseError,
            MalformedResponseError, ApplicationError
        """
        destination = require_text(destination, "destination")
        budget = require_budget(budget)
        if count is not None:
            count = require_positive_int(count, "count")

        logger.info(f"Fetching {count or '3-5'} suggestions for {destination}, budget: {budget}")

        response = await self.llm_service.generate_content(
            user_message=SystemInstructions.suggestion_request(destination, budget, count),
            system_instruction=SystemInstructions.activity_suggester(),
            config=LLMConfig(temperature=0.9)
        )
        text = response.text_or_raise()

        data = parse_json_response(text)
        raise_for_application_error(data)
        suggestions = parse_model_list(data, ActivitySuggestion, text)

        logger.info(f"Received {len(suggestions)} suggestions for {destination}")
        return suggestions


async def refill_suggestion(
    store,
    suggestion_service: SuggestionService,
    session_id: str,
    destination: str,
    budget: float
) -> None:
    """
    Background task run after a suggestion is promoted: fetch one replacement
    into the session's pool. Failures go to the session's notices and never
    touch the activity that was already added. The replacement is dropped if
    the destination or budget changed while it was being fetched.
    """
    try:
        suggestions = await suggestion_service.fetch_suggestions(destination, budget, count=1)
    except PlannerError as e:
        logger.error(f"Replacement suggestion failed for session {session_id}: {e.message}")
        store.add_notice(session_id, Notice(
            kind=type(e).__name__,
            message=f"Could not fetch a replacement suggestion: {e.message}",
            details=e.details
        ))
        return
    except Exception as e:
        logger.error(f"Unexpected error fetching replacement suggestion: {e}", exc_info=True)
        store.add_notice(session_id, Notice(
            kind="UnexpectedError",
            message="Could not fetch a replacement suggestion",
            details=str(e)
        ))
        return

    store.add_suggestions(session_id, suggestions, fetched_for=(destination, budget))
