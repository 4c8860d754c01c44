"""Itinerary generation tests against the scripted LLM"""

from datetime import date

import pytest

from planner.errors import ApplicationError, GatewayError, MalformedResponseError, ValidationError
from planner.services.itinerary_service import ItineraryService
from tests.mock_llm_service import SAMPLE_ITINERARY, failed_response, json_response, text_response


def _fetch(service, **overrides):
    request = {
        "origin": "London",
        "destination": "Paris",
        "budget": 2000,
        "start_date": date(2024, 6, 1),
        "end_date": date(2024, 6, 5),
        "traveler_count": 2,
    }
    request.update(overrides)
    return service.fetch_itinerary(**request)


@pytest.mark.asyncio
async def test_itinerary_parsed_from_fenced_reply(mock_llm):
    mock_llm.queue(json_response(SAMPLE_ITINERARY, fenced=True))

    itinerary = await _fetch(ItineraryService(llm_service=mock_llm))

    assert itinerary.transportation.mode == "Train"
    assert itinerary.transportation.exactCost == 360
    assert itinerary.accommodation.exactCost is None
    assert itinerary.food.estimatedCost == 250
    assert len(itinerary.activities) == 3


@pytest.mark.asyncio
async def test_prompt_passes_misspelled_destination_and_iso_dates(mock_llm):
    mock_llm.queue(json_response(SAMPLE_ITINERARY))

    await _fetch(ItineraryService(llm_service=mock_llm), destination="Pariz")

    prompt = mock_llm.last_prompt
    assert "Pariz" in prompt
    assert "2024-06-01" in prompt
    assert "2024-06-05" in prompt
    assert "2 travelers" in prompt
    assert "$2,000" in prompt
    assert "misspelled" in prompt


@pytest.mark.asyncio
async def test_string_dates_are_accepted(mock_llm):
    mock_llm.queue(json_response(SAMPLE_ITINERARY))

    await _fetch(ItineraryService(llm_service=mock_llm), start_date="2024-06-01", end_date="2024-06-01")

    assert "from 2024-06-01 to 2024-06-01" in mock_llm.calls[0]["user_message"]


@pytest.mark.asyncio
async def test_error_object_reply_is_application_error(mock_llm):
    mock_llm.queue(json_response({"error": "rate limited"}))

    with pytest.raises(ApplicationError) as exc_info:
        await _fetch(ItineraryService(llm_service=mock_llm))

    assert exc_info.value.message == "rate limited"
    assert exc_info.value.status_code == 502


@pytest.mark.asyncio
async def test_missing_section_is_malformed(mock_llm):
    broken = {key: value for key, value in SAMPLE_ITINERARY.items() if key != "food"}
    mock_llm.queue(json_response(broken))

    with pytest.raises(MalformedResponseError) as exc_info:
        await _fetch(ItineraryService(llm_service=mock_llm))

    assert "food" in exc_info.value.parse_error


@pytest.mark.asyncio
async def test_truncated_json_is_malformed(mock_llm):
    mock_llm.queue(text_response('{"transportation": {"mode": "Flight", "estimatedCost": 300'))

    with pytest.raises(MalformedResponseError) as exc_info:
        await _fetch(ItineraryService(llm_service=mock_llm))

    assert exc_info.value.raw_text.startswith('{"transportation"')


@pytest.mark.asyncio
async def test_upstream_failure_is_gateway_error(mock_llm):
    mock_llm.queue(failed_response("Internal error", status_code=500))

    with pytest.raises(GatewayError) as exc_info:
        await _fetch(ItineraryService(llm_service=mock_llm))

    assert exc_info.value.status_code == 500


@pytest.mark.asyncio
@pytest.mark.parametrize("overrides", [
    {"origin": ""},
    {"destination": None},
    {"budget": "lots"},
    {"start_date": date(2024, 6, 6)},
    {"end_date": "06/05/2024"},
    {"end_date": "2024-06-05garbage"},
    {"traveler_count": 0},
])
async def test_invalid_request_never_reaches_the_model(mock_llm, overrides):
    with pytest.raises(ValidationError):
        await _fetch(ItineraryService(llm_service=mock_llm), **overrides)

    assert mock_llm.calls == []


@pytest.mark.asyncio
async def test_iso_timestamp_dates_are_accepted(mock_llm):
    mock_llm.queue(json_response(SAMPLE_ITINERARY))

    await _fetch(
        ItineraryService(llm_service=mock_llm),
        start_date="2024-06-01T09:30:00",
        end_date="2024-06-03T18:00:00"
    )

    assert "from 2024-06-01 to 2024-06-03" in mock_llm.calls[0]["user_message"]
