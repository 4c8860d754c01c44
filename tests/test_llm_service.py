"""Tests for the Gemini wrapper. The genai client is patched; no network calls are made."""

from unittest.mock import AsyncMock, MagicMock, patch

import pytest
from google.genai import errors as genai_errors

from planner.errors import ConfigurationError, EmptyResponseError, GatewayError
from planner.services.llm_service import (
    GeminiLLMService,
    LLMConfig,
    LLMResponse,
    SystemInstructions,
)


def _service_with(generate):
    with patch("planner.services.llm_service.genai.Client") as client_cls:
        client = MagicMock()
        client.aio.models.generate_content = generate
        client_cls.return_value = client
        service = GeminiLLMService(api_key="test-key")
    client_cls.assert_called_once_with(api_key="test-key")
    return service


def test_missing_api_key():
    with pytest.raises(ConfigurationError) as exc_info:
        GeminiLLMService(api_key="")
    assert "GEMINI_API_KEY" in exc_info.value.message


@pytest.mark.asyncio
async def test_successful_call_returns_text():
    generate = AsyncMock(return_value=MagicMock(text='[{"name": "Louvre"}]'))
    service = _service_with(generate)

    response = await service.generate_content(
        user_message="Suggest activities",
        system_instruction="Return JSON",
        config=LLMConfig(model="gemini-test", temperature=0.9)
    )

    assert response.success
    assert response.content == '[{"name": "Louvre"}]'
    kwargs = generate.call_args.kwargs
    assert kwargs["model"] == "gemini-test"
    assert kwargs["config"].temperature == 0.9
    assert kwargs["contents"][0].parts[0].text == "Return JSON\n\nSuggest activities"


@pytest.mark.asyncio
async def test_api_error_keeps_upstream_status_and_body():
    body = {"error": {"code": 429, "message": "Resource exhausted", "status": "RESOURCE_EXHAUSTED"}}
    generate = AsyncMock(side_effect=genai_errors.ClientError(429, body))
    service = _service_with(generate)

    response = await service.generate_content("hi", "system")

    assert not response.success
    assert response.status_code == 429
    assert response.error == "Resource exhausted"
    with pytest.raises(GatewayError) as exc_info:
        response.text_or_raise()
    assert exc_info.value.status_code == 429


@pytest.mark.asyncio
async def test_transport_error_is_reported_not_raised():
    generate = AsyncMock(side_effect=ConnectionError("connection reset"))
    service = _service_with(generate)

    response = await service.generate_content("hi", "system")

    assert not response.success
    assert response.status_code is None
    assert "connection reset" in response.error


def test_empty_text_raises_empty_response():
    with pytest.raises(EmptyResponseError):
        LLMResponse(success=True, content=None, raw_response=None).text_or_raise()


def test_suggestion_request_formats_budget():
    message = SystemInstructions.suggestion_request("Lisbon", 1234.5)
    assert message == (
        "Suggest 3-5 unique and interesting activities for a trip to Lisbon "
        "with a budget of $1,234.50."
    )


def test_itinerary_request_single_traveler():
    message = SystemInstructions.itinerary_request("Oslo", "Bergen", 900, "2024-08-01", "2024-08-03", 1)
    assert "1 traveler," in message
    assert "from 2024-08-01 to 2024-08-03" in message
