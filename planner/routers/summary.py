from fastapi import APIRouter

from planner.models.trip import TripSnapshot, TripSummary
from planner.services.summary_service import build_summary

router = APIRouter(tags=["summary"])


@router.post("/summary", response_model=TripSummary)
def trip_summary(snapshot: TripSnapshot):
    """
    Cost breakdown, pie-chart slices and day-by-day timeline for a finalized trip.

    The snapshot comes from /wizard/{id}/finalize; nothing is looked up server-side.
    """
    return build_summary(snapshot)
