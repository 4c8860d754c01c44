import uuid
from datetime import date, datetime, timezone
from typing import List, Literal, Optional, Tuple

from pydantic import BaseModel, ConfigDict, Field, model_validator


# ---------------------------
# AI-produced models
# ---------------------------

class ActivitySuggestion(BaseModel):
    model_config = ConfigDict(frozen=True)

    name: str = Field(..., min_length=1)
    description: str = ""
    estimatedCost: float = Field(..., ge=0)


class Transportation(BaseModel):
    model_config = ConfigDict(frozen=True)

    mode: str
    details: str = ""
    estimatedCost: float = Field(..., ge=0)
    exactCost: Optional[float] = Field(None, ge=0)


class Accommodation(BaseModel):
    model_config = ConfigDict(frozen=True)

    type: str
    name: str
    description: str = ""
    estimatedCost: float = Field(..., ge=0)
    exactCost: Optional[float] = Field(None, ge=0)


class Food(BaseModel):
    model_config = ConfigDict(frozen=True)

    description: str = ""
    estimatedCost: float = Field(..., ge=0)


class GeneratedItinerary(BaseModel):
    model_config = ConfigDict(frozen=True)

    transportation: Transportation
    accommodation: Accommodation
    food: Food
    activities: Tuple[ActivitySuggestion, ...] = ()


# ---------------------------
# User-side models
# ---------------------------

PLACEHOLDER_DATE = "TBD"
PLACEHOLDER_TIME = "12:00"


def new_activity_id() -> str:
    """Timestamp-derived id, suffixed so two activities added in the same millisecond differ"""
    millis = int(datetime.now(timezone.utc).timestamp() * 1000)
    return f"{millis}-{uuid.uuid4().hex[:6]}"


class ManualActivity(BaseModel):
    model_config = ConfigDict(frozen=True)

    id: str = Field(default_factory=new_activity_id)
    name: str = Field(..., min_length=1)
    date: str = Field(..., pattern=r"^(\d{4}-\d{2}-\d{2}|TBD)$")
    time: str = Field(..., pattern=r"^\d{2}:\d{2}$")
    cost: float = Field(..., ge=0)

    @classmethod
    def from_suggestion(
        cls,
        suggestion: ActivitySuggestion,
        start_date: "Optional[date]" = None
    ) -> "ManualActivity":
        """Promote an AI suggestion, placing it on the trip's first day at midday"""
        return cls(
            name=suggestion.name,
            date=start_date.isoformat() if start_date else PLACEHOLDER_DATE,
            time=PLACEHOLDER_TIME,
            cost=suggestion.estimatedCost,
        )


class CombinedActivity(BaseModel):
    id: str
    name: str
    description: Optional[str] = None
    date: str
    time: str
    cost: float
    source: Literal["ai", "user"]


# ---------------------------
# Trip-level models
# ---------------------------

class TripParameters(BaseModel):
    model_config = ConfigDict(frozen=True)

    origin: str = Field(..., min_length=1)
    destination: str = Field(..., min_length=1)
    budget: float = Field(..., gt=0)
    startDate: date
    endDate: date
    numberOfTravelers: int = Field(..., ge=1)

    @model_validator(mode="after")
    def check_date_order(self):
        if self.startDate > self.endDate:
            raise ValueError("startDate must not be after endDate")
        return self


class TripSnapshot(TripParameters):
    """Read-only hand-off from the wizard to the summary view"""

    generatedItinerary: GeneratedItinerary
    userActivities: Tuple[ManualActivity, ...] = ()


class CostTotals(BaseModel):
    transportation: float
    accommodation: float
    food: float
    activitiesTotal: float
    grandTotal: float


class ChartSlice(BaseModel):
    label: str
    value: float


class DayTimeline(BaseModel):
    date: str
    activities: List[CombinedActivity] = []


class TripSummary(BaseModel):
    trip: TripSnapshot
    totals: CostTotals
    remainingBudget: float
    tripDurationDays: int
    timeline: List[DayTimeline] = []
    chart: List[ChartSlice] = []


class Notice(BaseModel):
    """Entry on a session's background error channel"""

    kind: str
    message: str
    details: Optional[str] = None
    createdAt: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))
