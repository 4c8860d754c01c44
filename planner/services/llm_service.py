import logging
from typing import Any, List, Optional
from dataclasses import dataclass, field

from google import genai
from google.genai import errors as genai_errors
from google.genai import types

from planner.config import settings
from planner.errors import ConfigurationError, EmptyResponseError, GatewayError

logger = logging.getLogger(__name__)
logger.setLevel(logging.INFO)


SUGGESTION_SCHEMA_DOCS = """
[
  {
    "name": "string - Activity name",
    "description": "string - One or two sentences about the activity",
    "estimatedCost": "number - Estimated cost in US dollars (0 if free)"
  }
]
"""

ITINERARY_SCHEMA_DOCS = """
{
  "transportation": {
    "mode": "string - e.g. Flight, Train, Bus, Car",
    "details": "string - Route, carrier or booking notes",
    "estimatedCost": "number - Estimated round-trip cost for all travelers",
    "exactCost": "number - OPTIONAL, only if a firm fare is known"
  },
  "accommodation": {
    "type": "string - e.g. Hotel, Hostel, Apartment",
    "name": "string - Property name",
    "description": "string - Short description",
    "estimatedCost": "number - Estimated cost for the whole stay",
    "exactCost": "number - OPTIONAL, only if a firm price is known"
  },
  "food": {
    "description": "string - Dining plan",
    "estimatedCost": "number - Estimated food cost for the whole trip"
  },
  "activities": [
    {
      "name": "string - Activity name",
      "description": "string - Short description",
      "estimatedCost": "number - Estimated cost"
    }
  ]
}
"""


@dataclass
class LLMConfig:
    """Configuration for LLM calls"""
    model: str = field(default_factory=lambda: settings.gemini_model)
    temperature: float = field(default_factory=lambda: settings.llm_temperature)
    top_p: float = field(default_factory=lambda: settings.llm_top_p)
    max_output_tokens: int = field(default_factory=lambda: settings.llm_max_output_tokens)


@dataclass
class LLMResponse:
    """Standardized LLM response"""
    success: bool
    content: Optional[str]
    raw_response: Any
    error: Optional[str] = None
    status_code: Optional[int] = None
    error_body: Any = None

    def text_or_raise(self) -> str:
        """
        Return the reply text, or raise the matching failure.

        Raises:
            GatewayError: the call itself failed
            EmptyResponseError: the call succeeded without any text
        """
        if not self.success:
            raise GatewayError(
                f"Failed to get a response from AI: {self.error}",
                upstream_status=self.status_code,
                body=self.error_body if self.error_body is not None else self.error
            )
        if not self.content or not self.content.strip():
            raise EmptyResponseError("AI response contained no text")
        return self.content


class GeminiLLMService:
    """Service for Gemini API calls using an API key"""

    def __init__(self, api_key: Optional[str] = None):
        api_key = api_key if api_key is not None else settings.gemini_api_key
        if not api_key:
            raise ConfigurationError("GEMINI_API_KEY not set in environment variables.")

        self.client = genai.Client(api_key=api_key)
        logger.info("Initialized Gemini client")

    def _create_contents(self, system_instruction: str, user_message: str) -> List[types.Content]:
        """Create content structure for the LLM"""
        combined_message = f"{system_instruction}\n\n{user_message}" if system_instruction else user_message

        return [
            types.Content(
                role="user",
                parts=[
                    types.Part(text=combined_message)
                ]
            )
        ]

    async def generate_content(
        self,
        user_message: str,
        system_instruction: str,
        config: Optional[LLMConfig] = None
    ) -> LLMResponse:
        """
        Generate content with Gemini.

        Args:
            user_message: Trip-specific request
            system_instruction: Instruction block prepended to the message
            config: LLM configuration (optional, uses settings if not provided)

        Returns:
            LLMResponse; failures are reported through `success`/`error`, not raised
        """
        if config is None:
            config = LLMConfig()

        contents = self._create_contents(system_instruction, user_message)
        generate_content_config = types.GenerateContentConfig(
            temperature=config.temperature,
            top_p=config.top_p,
            max_output_tokens=config.max_output_tokens,
        )

        try:
            logger.info(f"Making LLM call with model: {config.model}")
            response = await self.client.aio.models.generate_content(
                model=config.model,
                contents=contents,
                config=generate_content_config
            )
        except genai_errors.APIError as e:
            logger.error(f"Gemini API error {e.code}: {e.message}")
            return LLMResponse(
                success=False,
                content=None,
                raw_response=None,
                error=e.message or str(e),
                status_code=e.code,
                error_body=e.details
            )
        except Exception as e:
            logger.error(f"LLM call failed: {e}")
            return LLMResponse(
                success=False,
                content=None,
                raw_response=None,
                error=str(e)
            )

        content = response.text
        logger.info(f"LLM call successful, response length: {len(content) if content else 0}")
        return LLMResponse(success=True, content=content, raw_response=response)


# Singleton instance
_llm_service_instance = None

def get_llm_service() -> GeminiLLMService:
    """Get singleton instance of LLM service"""
    global _llm_service_instance
    if _llm_service_instance is None:
        _llm_service_instance = GeminiLLMService()
    return _llm_service_instance


def _format_amount(amount: float) -> str:
    return f"{amount:,.0f}" if float(amount).is_integer() else f"{amount:,.2f}"


class SystemInstructions:
    """Collection of predefined system instructions"""

    @staticmethod
    def activity_suggester() -> str:
        return (
            "You are a helpful travel planner who suggests unique and interesting activities for a trip.\n"
            "=== RULES ===\n"
            "1. If the destination looks misspelled, silently use the correct place name. Do not mention the correction.\n"
            "2. Keep the total estimated cost of all suggested activities within the given budget.\n"
            "3. estimatedCost must be a non-negative number without currency symbols.\n\n"
            "=== OUTPUT FORMAT ===\n"
            "Return ONLY a JSON array of objects following the schema below. "
            "Do not include explanations or any text outside the JSON."
            f"\n{SUGGESTION_SCHEMA_DOCS}"
        )

    @staticmethod
    def itinerary_planner() -> str:
        return (
            "You are an expert travel planning assistant that creates a complete trip plan covering "
            "transportation, accommodation, food and activities.\n\n"
            "=== RULES ===\n"
            "1. If the origin or destination looks misspelled, silently use the correct place name.\n"
            "2. Costs must cover every traveler for the whole trip, in US dollars.\n"
            "3. The sum of transportation, accommodation, food and activities must stay within the budget.\n"
            "4. Suggest 3-5 activities that fit the remaining budget.\n"
            "5. Only include exactCost when you know a firm price; otherwise omit it.\n\n"
            "=== OUTPUT FORMAT ===\n"
            "Return ONLY a valid JSON object following the schema below. "
            "Do not include explanations, markdown formatting, or any text outside the JSON."
            f"\n{ITINERARY_SCHEMA_DOCS}"
        )

    @staticmethod
    def suggestion_request(destination: str, budget: float, count: Optional[int] = None) -> str:
        amount = "3-5" if count is None else str(count)
        noun = "activity" if count == 1 else "activities"
        return (
            f"Suggest {amount} unique and interesting {noun} for a trip to {destination} "
            f"with a budget of ${_format_amount(budget)}."
        )

    @staticmethod
    def itinerary_request(
        origin: str,
        destination: str,
        budget: float,
        start_date: str,
        end_date: str,
        travelers: int
    ) -> str:
        people = "1 traveler" if travelers == 1 else f"{travelers} travelers"
        return (
            f"Plan a trip from {origin} to {destination} for {people}, "
            f"from {start_date} to {end_date}, with a total budget of ${_format_amount(budget)}."
        )
