"""
Trip wizard state machine.

The wizard walks origin -> destination -> budget -> dates -> travelers ->
itinerary -> activities. `reduce` is a pure function: it never mutates the
state it is given and returns a new WizardState for every accepted action.

Setting any trip field clears every field that follows it, so an itinerary
can never be shown against trip parameters it was not generated for.
"""

import logging
from typing import Any, Callable, Dict

from planner.config import settings
from planner.errors import ValidationError
from planner.models.trip import ManualActivity, TripSnapshot
from planner.models.wizard import (
    AddActivity,
    BeginItineraryFetch,
    DeleteActivity,
    ItineraryFailed,
    ItineraryLoaded,
    PromoteSuggestion,
    Reset,
    SetBudget,
    SetDates,
    SetDestination,
    SetOrigin,
    SetTravelerCount,
    WizardAction,
    WizardStage,
    WizardState,
)

logger = logging.getLogger(__name__)
logger.setLevel(logging.INFO)


# Fields owned by each step, in wizard order
_STEPS = (
    ("origin",),
    ("destination",),
    ("budget",),
    ("startDate", "endDate"),
    ("numberOfTravelers",),
    ("itinerary",),
)


def _cleared_after(step_index: int) -> Dict[str, Any]:
    """Updates that reset every step after `step_index`, plus the activities and fetch status"""
    updates: Dict[str, Any] = {}
    for fields in _STEPS[step_index + 1:]:
        for field in fields:
            updates[field] = None
    updates.update(activities=(), itineraryLoading=False, lastError=None)
    return updates


def _require_stage_at_least(state: WizardState, stage: WizardStage, action: str) -> None:
    order = list(WizardStage)
    if order.index(state.stage) < order.index(stage):
        raise ValidationError(
            f"Cannot {action} before the previous step is complete",
            details=f"current stage: {state.stage.value}"
        )


def _set_origin(state: WizardState, action: SetOrigin) -> WizardState:
    return state.model_copy(update={"origin": action.origin, **_cleared_after(0)})


def _set_destination(state: WizardState, action: SetDestination) -> WizardState:
    _require_stage_at_least(state, WizardStage.NO_DESTINATION, "set the destination")
    return state.model_copy(update={"destination": action.destination, **_cleared_after(1)})


def _set_budget(state: WizardState, action: SetBudget) -> WizardState:
    _require_stage_at_least(state, WizardStage.NO_BUDGET, "set the budget")
    if action.budget > settings.max_budget:
        raise ValidationError(f"Budget must not exceed {settings.max_budget:g}")
    return state.model_copy(update={"budget": action.budget, **_cleared_after(2)})


def _set_dates(state: WizardState, action: SetDates) -> WizardState:
    _require_stage_at_least(state, WizardStage.NO_DATES, "set the travel dates")
    return state.model_copy(update={
        "startDate": action.startDate,
        "endDate": action.endDate,
        **_cleared_after(3)
    })


def _set_traveler_count(state: WizardState, action: SetTravelerCount) -> WizardState:
    _require_stage_at_least(state, WizardStage.NO_TRAVELER_COUNT, "set the number of travelers")
    if action.numberOfTravelers > settings.max_travelers:
        raise ValidationError(f"Number of travelers must not exceed {settings.max_travelers}")
    return state.model_copy(update={"numberOfTravelers": action.numberOfTravelers, **_cleared_after(4)})


def _begin_itinerary_fetch(state: WizardState, action: BeginItineraryFetch) -> WizardState:
    if not needs_itinerary(state):
        raise ValidationError(
            "Itinerary fetch is not needed",
            details=f"stage: {state.stage.value}, loading: {state.itineraryLoading}"
        )
    return state.model_copy(update={"itineraryLoading": True, "lastError": None})


def _itinerary_loaded(state: WizardState, action: ItineraryLoaded) -> WizardState:
    if state.stage == WizardStage.PLANNING:
        # An overlapping fetch for the same trip already delivered
        logger.info("Ignoring late itinerary, one is already loaded")
        return state
    if state.stage != WizardStage.AWAITING_ITINERARY:
        raise ValidationError(
            "Wizard is not waiting for an itinerary",
            details=f"current stage: {state.stage.value}"
        )
    return state.model_copy(update={"itinerary": action.itinerary, **_cleared_after(5)})


def _itinerary_failed(state: WizardState, action: ItineraryFailed) -> WizardState:
    if state.stage == WizardStage.PLANNING:
        return state
    # Stage is left untouched so the caller can retry
    return state.model_copy(update={"itineraryLoading": False, "lastError": action.error})


def _add_activity(state: WizardState, action: AddActivity) -> WizardState:
    _require_stage_at_least(state, WizardStage.PLANNING, "add activities")
    activity = ManualActivity(name=action.name, date=action.date, time=action.time, cost=action.cost)
    return state.model_copy(update={"activities": state.activities + (activity,)})


def _promote_suggestion(state: WizardState, action: PromoteSuggestion) -> WizardState:
    _require_stage_at_least(state, WizardStage.PLANNING, "add activities")
    activity = ManualActivity.from_suggestion(action.suggestion, start_date=state.startDate)
    return state.model_copy(update={"activities": state.activities + (activity,)})


def _delete_activity(state: WizardState, action: DeleteActivity) -> WizardState:
    remaining = tuple(activity for activity in state.activities if activity.id != action.id)
    return state.model_copy(update={"activities": remaining})


def _reset(state: WizardState, action: Reset) -> WizardState:
    return WizardState()


_HANDLERS: Dict[str, Callable[[WizardState, Any], WizardState]] = {
    "set_origin": _set_origin,
    "set_destination": _set_destination,
    "set_budget": _set_budget,
    "set_dates": _set_dates,
    "set_traveler_count": _set_traveler_count,
    "begin_itinerary_fetch": _begin_itinerary_fetch,
    "itinerary_loaded": _itinerary_loaded,
    "itinerary_failed": _itinerary_failed,
    "add_activity": _add_activity,
    "promote_suggestion": _promote_suggestion,
    "delete_activity": _delete_activity,
    "reset": _reset,
}


def reduce(state: WizardState, action: WizardAction) -> WizardState:
    """
    Apply one action to the wizard state.

    Args:
        state: Current state (left unchanged)
        action: Any WizardAction

    Returns:
        The next WizardState

    Raises:
        ValidationError: if the action is not allowed at the current stage
    """
    new_state = _HANDLERS[action.type](state, action)
    if new_state.stage != state.stage:
        logger.info(f"Wizard {action.type}: {state.stage.value} -> {new_state.stage.value}")
    return new_state


def needs_itinerary(state: WizardState) -> bool:
    """True only when every trip field is set, no itinerary exists and none is being fetched"""
    return state.stage == WizardStage.AWAITING_ITINERARY and not state.itineraryLoading


def finalize(state: WizardState) -> TripSnapshot:
    """
    Produce the read-only hand-off for the summary view.

    Calling this twice on the same state yields equal snapshots; nothing is
    retained by the wizard.
    """
    if state.stage != WizardStage.PLANNING:
        raise ValidationError(
            "Trip cannot be finalized until an itinerary has been generated",
            details=f"current stage: {state.stage.value}"
        )
    params = state.trip_parameters()
    return TripSnapshot(
        **params.model_dump(),
        generatedItinerary=state.itinerary,
        userActivities=state.activities,
    )
