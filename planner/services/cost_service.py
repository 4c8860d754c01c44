from typing import Iterable, Union

from planner.models.trip import (
    Accommodation,
    CostTotals,
    GeneratedItinerary,
    ManualActivity,
    Transportation,
)


def resolve_cost(item: Union[Transportation, Accommodation]) -> float:
    """Exact cost wins over the estimate whenever it is present, including an exact 0"""
    if item.exactCost is not None:
        return item.exactCost
    return item.estimatedCost


def compute_totals(
    itinerary: GeneratedItinerary,
    manual_activities: Iterable[ManualActivity]
) -> CostTotals:
    """
    Per-category and grand totals for a trip.

    Only manual activities count toward activitiesTotal; AI suggestions that
    were never promoted are excluded.
    """
    transportation = resolve_cost(itinerary.transportation)
    accommodation = resolve_cost(itinerary.accommodation)
    food = itinerary.food.estimatedCost
    activities_total = sum(activity.cost for activity in manual_activities)

    return CostTotals(
        transportation=transportation,
        accommodation=accommodation,
        food=food,
        activitiesTotal=activities_total,
        grandTotal=transportation + accommodation + food + activities_total,
    )
