from datetime import date, datetime
from typing import Any, Union

from planner.config import settings
from planner.errors import ValidationError


def require_text(value: Any, field: str) -> str:
    if not isinstance(value, str) or not value.strip():
        raise ValidationError(f"{field} is required.")
    return value.strip()


def require_budget(value: Any) -> float:
    # bool is an int subclass; a JSON `true` is not a budget
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise ValidationError("budget is required and must be a number.")
    if value <= 0:
        raise ValidationError("budget must be greater than 0.")
    if value > settings.max_budget:
        raise ValidationError(f"budget must not exceed {settings.max_budget:g}.")
    return float(value)


def require_positive_int(value: Any, field: str) -> int:
    if isinstance(value, bool) or not isinstance(value, int) or value < 1:
        raise ValidationError(f"{field} must be a positive integer.")
    return value


def require_date(value: Union[date, str, None], field: str) -> date:
    """Accept a date, datetime or YYYY-MM-DD string"""
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    if isinstance(value, str) and value.strip():
        text = value.strip()
        try:
            # A full ISO timestamp is allowed; anything else after the date is not
            if "T" in text:
                return datetime.fromisoformat(text).date()
            return date.fromisoformat(text)
        except ValueError:
            raise ValidationError(f"{field} must be a date in YYYY-MM-DD format.")
    raise ValidationError(f"{field} is required.")
