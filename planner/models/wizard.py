from datetime import date
from enum import Enum
from typing import Annotated, Literal, Optional, Tuple, Union

from pydantic import BaseModel, ConfigDict, Field, computed_field, model_validator

from planner.models.trip import ActivitySuggestion, GeneratedItinerary, ManualActivity, TripParameters


class WizardStage(str, Enum):
    NO_ORIGIN = "no_origin"
    NO_DESTINATION = "no_destination"
    NO_BUDGET = "no_budget"
    NO_DATES = "no_dates"
    NO_TRAVELER_COUNT = "no_traveler_count"
    AWAITING_ITINERARY = "awaiting_itinerary"
    PLANNING = "planning"


class WizardState(BaseModel):
    """
    Immutable wizard state. The stage is derived from which fields are set,
    so it can never disagree with the data.
    """
    model_config = ConfigDict(frozen=True)

    origin: Optional[str] = None
    destination: Optional[str] = None
    budget: Optional[float] = None
    startDate: Optional[date] = None
    endDate: Optional[date] = None
    numberOfTravelers: Optional[int] = None
    itinerary: Optional[GeneratedItinerary] = None
    activities: Tuple[ManualActivity, ...] = ()
    itineraryLoading: bool = False
    lastError: Optional[str] = None

    @computed_field
    @property
    def stage(self) -> WizardStage:
        if not self.origin:
            return WizardStage.NO_ORIGIN
        if not self.destination:
            return WizardStage.NO_DESTINATION
        if self.budget is None:
            return WizardStage.NO_BUDGET
        if self.startDate is None or self.endDate is None:
            return WizardStage.NO_DATES
        if self.numberOfTravelers is None:
            return WizardStage.NO_TRAVELER_COUNT
        if self.itinerary is None:
            return WizardStage.AWAITING_ITINERARY
        return WizardStage.PLANNING

    def trip_parameters(self) -> Optional[TripParameters]:
        if self.stage in (WizardStage.AWAITING_ITINERARY, WizardStage.PLANNING):
            return TripParameters(
                origin=self.origin,
                destination=self.destination,
                budget=self.budget,
                startDate=self.startDate,
                endDate=self.endDate,
                numberOfTravelers=self.numberOfTravelers,
            )
        return None


# ---------------------------
# Actions
# ---------------------------

class _Action(BaseModel):
    model_config = ConfigDict(frozen=True, str_strip_whitespace=True)


class SetOrigin(_Action):
    type: Literal["set_origin"] = "set_origin"
    origin: str = Field(..., min_length=1)


class SetDestination(_Action):
    type: Literal["set_destination"] = "set_destination"
    destination: str = Field(..., min_length=1)


class SetBudget(_Action):
    type: Literal["set_budget"] = "set_budget"
    budget: float = Field(..., gt=0)


class SetDates(_Action):
    type: Literal["set_dates"] = "set_dates"
    startDate: date
    endDate: date

    @model_validator(mode="after")
    def check_date_order(self):
        if self.startDate > self.endDate:
            raise ValueError("startDate must not be after endDate")
        return self


class SetTravelerCount(_Action):
    type: Literal["set_traveler_count"] = "set_traveler_count"
    numberOfTravelers: int = Field(..., ge=1)


class BeginItineraryFetch(_Action):
    type: Literal["begin_itinerary_fetch"] = "begin_itinerary_fetch"


class ItineraryLoaded(_Action):
    type: Literal["itinerary_loaded"] = "itinerary_loaded"
    itinerary: GeneratedItinerary


class ItineraryFailed(_Action):
    type: Literal["itinerary_failed"] = "itinerary_failed"
    error: str


class AddActivity(_Action):
    type: Literal["add_activity"] = "add_activity"
    name: str = Field(..., min_length=1)
    date: str = Field(..., pattern=r"^\d{4}-\d{2}-\d{2}$")
    time: str = Field(..., pattern=r"^\d{2}:\d{2}$")
    cost: float = Field(..., ge=0)


class PromoteSuggestion(_Action):
    type: Literal["promote_suggestion"] = "promote_suggestion"
    suggestion: ActivitySuggestion


class DeleteActivity(_Action):
    type: Literal["delete_activity"] = "delete_activity"
    id: str


class Reset(_Action):
    type: Literal["reset"] = "reset"


WizardAction = Annotated[
    Union[
        SetOrigin,
        SetDestination,
        SetBudget,
        SetDates,
        SetTravelerCount,
        BeginItineraryFetch,
        ItineraryLoaded,
        ItineraryFailed,
        AddActivity,
        PromoteSuggestion,
        DeleteActivity,
        Reset,
    ],
    Field(discriminator="type"),
]


# Actions a client may send directly; the itinerary_* actions are driven by the fetch endpoint
UserAction = Annotated[
    Union[
        SetOrigin,
        SetDestination,
        SetBudget,
        SetDates,
        SetTravelerCount,
        AddActivity,
        DeleteActivity,
        Reset,
    ],
    Field(discriminator="type"),
]
