"""
Error taxonomy for the trip planner.

Every failure a caller can act on is a PlannerError. The HTTP layer renders
them through a single exception handler, so services only need to raise.
"""

from typing import Any, Dict, Optional


class PlannerError(Exception):
    """Base class for all planner failures"""

    status_code: int = 500

    def __init__(self, message: str, details: Optional[str] = None):
        super().__init__(message)
        self.message = message
        self.details = details

    def to_payload(self) -> Dict[str, Any]:
        payload: Dict[str, Any] = {"error": self.message}
        if self.details:
            payload["details"] = self.details
        return payload


class ValidationError(PlannerError):
    """Missing or invalid input, raised before any network call"""

    status_code = 400


class ConfigurationError(PlannerError):
    """Required configuration (e.g. the Gemini API key) is missing"""

    status_code = 500


class SessionNotFoundError(PlannerError):
    status_code = 404


class GatewayError(PlannerError):
    """The AI provider call failed at the transport level or returned a non-success status"""

    def __init__(self, message: str, upstream_status: Optional[int] = None, body: Any = None):
        details = None if body is None else str(body)
        super().__init__(message, details)
        self.upstream_status = upstream_status
        self.body = body

    @property
    def status_code(self) -> int:
        if self.upstream_status and self.upstream_status >= 400:
            return self.upstream_status
        return 502


class EmptyResponseError(PlannerError):
    """The AI call succeeded but carried no usable text"""

    status_code = 502


class MalformedResponseError(PlannerError):
    """
    The AI text could not be turned into the expected JSON shape.

    Keeps the raw text so callers can show exactly what the model said.
    """

    status_code = 502

    def __init__(self, message: str, raw_text: str, parse_error: str):
        super().__init__(message, parse_error)
        self.raw_text = raw_text
        self.parse_error = parse_error

    def to_payload(self) -> Dict[str, Any]:
        payload = super().to_payload()
        payload["raw"] = self.raw_text
        return payload


class ApplicationError(PlannerError):
    """Parseable JSON that itself reports an error, e.g. {"error": "rate limited"}"""

    status_code = 502
