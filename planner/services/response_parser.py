"""
Turn raw AI text into validated models.

Gemini often wraps JSON in a ```json fence. The exact fence is stripped
first; if the rest still does not parse, the span from the first `[`/`{` to
the last matching `]`/`}` is tried before giving up.
"""

import json
import logging
from typing import Any, List, Optional, Type, TypeVar

from pydantic import BaseModel, TypeAdapter
from pydantic import ValidationError as PydanticValidationError

from planner.errors import ApplicationError, MalformedResponseError

logger = logging.getLogger(__name__)
logger.setLevel(logging.INFO)

JSON_FENCE_OPEN = "```json"
FENCE_CLOSE = "```"

ModelT = TypeVar("ModelT", bound=BaseModel)


def strip_code_fences(text: str) -> str:
    """Remove a leading ```json fence and a trailing ``` fence, nothing else"""
    cleaned = text.strip()
    if cleaned.startswith(JSON_FENCE_OPEN):
        cleaned = cleaned[len(JSON_FENCE_OPEN):]
    if cleaned.endswith(FENCE_CLOSE):
        cleaned = cleaned[:-len(FENCE_CLOSE)]
    return cleaned.strip()


def extract_json_span(text: str) -> Optional[str]:
    """Slice from the first opening bracket to the last matching closing bracket"""
    starts = [index for index in (text.find("["), text.find("{")) if index != -1]
    if not starts:
        return None
    start = min(starts)
    closer = "]" if text[start] == "[" else "}"
    end = text.rfind(closer)
    if end <= start:
        return None
    return text[start:end + 1]


def parse_json_response(raw_text: str) -> Any:
    """
    Parse AI text as JSON.

    Raises:
        MalformedResponseError: carrying the raw text and the parser message
    """
    cleaned = strip_code_fences(raw_text)
    try:
        return json.loads(cleaned)
    except json.JSONDecodeError as e:
        first_error = e

    candidate = extract_json_span(cleaned)
    if candidate is not None and candidate != cleaned:
        try:
            data = json.loads(candidate)
            logger.warning("Recovered JSON from surrounding text in AI response")
            return data
        except json.JSONDecodeError:
            pass

    logger.error(f"Failed to parse AI response as JSON: {first_error}")
    logger.error(f"Raw response (first 500 chars): {raw_text[:500]}")
    raise MalformedResponseError(
        "AI did not return valid JSON",
        raw_text=raw_text,
        parse_error=str(first_error)
    )


def raise_for_application_error(data: Any) -> None:
    """A JSON object with an `error` key is a failure even though the call succeeded"""
    if isinstance(data, dict) and "error" in data:
        message = data.get("details") or data.get("error") or "AI response indicated an error."
        logger.error(f"AI response reported an error: {message}")
        raise ApplicationError(str(message))


def parse_model(data: Any, model: Type[ModelT], raw_text: str) -> ModelT:
    try:
        return model.model_validate(data)
    except PydanticValidationError as e:
        logger.error(f"AI response did not match {model.__name__}: {e}")
        raise MalformedResponseError(
            f"AI response did not match the expected {model.__name__} shape",
            raw_text=raw_text,
            parse_error=str(e)
        )


def parse_model_list(data: Any, model: Type[ModelT], raw_text: str) -> List[ModelT]:
    if not isinstance(data, list):
        raise MalformedResponseError(
            f"AI response was not a JSON array of {model.__name__}",
            raw_text=raw_text,
            parse_error=f"expected array, got {type(data).__name__}"
        )
    try:
        return TypeAdapter(List[model]).validate_python(data)
    except PydanticValidationError as e:
        logger.error(f"AI response did not match {model.__name__} list: {e}")
        raise MalformedResponseError(
            f"AI response did not match the expected {model.__name__} shape",
            raw_text=raw_text,
            parse_error=str(e)
        )
