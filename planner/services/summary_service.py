"""
Summary view data: totals, chart slices and a per-day timeline.

AI activities carry no date or time of their own, so they are shown on the
trip's first day at midday next to the user's own activities.
"""

import re
from datetime import date
from typing import Dict, List, Optional, Sequence, Tuple

from planner.models.trip import (
    PLACEHOLDER_DATE,
    PLACEHOLDER_TIME,
    ActivitySuggestion,
    ChartSlice,
    CombinedActivity,
    CostTotals,
    DayTimeline,
    ManualActivity,
    TripSnapshot,
    TripSummary,
)
from planner.services.cost_service import compute_totals


def _slug(name: str) -> str:
    return re.sub(r"[^a-z0-9]+", "-", name.lower()).strip("-") or "activity"


def combine_activities(
    ai_activities: Sequence[ActivitySuggestion],
    user_activities: Sequence[ManualActivity],
    start_date: Optional[date] = None
) -> List[CombinedActivity]:
    """Merge AI and user activities, sorted by date then time"""
    ai_date = start_date.isoformat() if start_date else PLACEHOLDER_DATE
    combined = [
        CombinedActivity(
            id=f"ai-{index}-{_slug(activity.name)}",
            name=activity.name,
            description=activity.description or None,
            date=ai_date,
            time=PLACEHOLDER_TIME,
            cost=activity.estimatedCost,
            source="ai",
        )
        for index, activity in enumerate(ai_activities)
    ]
    combined.extend(
        CombinedActivity(
            id=activity.id,
            name=activity.name,
            date=activity.date,
            time=activity.time,
            cost=activity.cost,
            source="user",
        )
        for activity in user_activities
    )
    return sorted(combined, key=_sort_key)


def _sort_key(activity: CombinedActivity) -> Tuple[int, str, str]:
    # Undated activities go last
    undated = 1 if activity.date == PLACEHOLDER_DATE else 0
    return undated, activity.date, activity.time


def group_by_day(activities: Sequence[CombinedActivity]) -> List[DayTimeline]:
    days: Dict[str, List[CombinedActivity]] = {}
    for activity in activities:
        days.setdefault(activity.date, []).append(activity)
    return [DayTimeline(date=day, activities=items) for day, items in days.items()]


def trip_duration_days(start_date: date, end_date: date) -> int:
    """Inclusive of both the start and the end day"""
    return (end_date - start_date).days + 1


def chart_slices(totals: CostTotals) -> List[ChartSlice]:
    slices = [
        ChartSlice(label="Transportation", value=totals.transportation),
        ChartSlice(label="Accommodation", value=totals.accommodation),
        ChartSlice(label="Food", value=totals.food),
        ChartSlice(label="Activities", value=totals.activitiesTotal),
    ]
    return [item for item in slices if item.value > 0]


def build_summary(snapshot: TripSnapshot) -> TripSummary:
    totals = compute_totals(snapshot.generatedItinerary, snapshot.userActivities)
    timeline = combine_activities(
        snapshot.generatedItinerary.activities,
        snapshot.userActivities,
        start_date=snapshot.startDate
    )
    return TripSummary(
        trip=snapshot,
        totals=totals,
        remainingBudget=snapshot.budget - totals.grandTotal,
        tripDurationDays=trip_duration_days(snapshot.startDate, snapshot.endDate),
        timeline=group_by_day(timeline),
        chart=chart_slices(totals),
    )
