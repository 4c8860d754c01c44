import pytest

from planner.models.trip import (
    Accommodation,
    Food,
    GeneratedItinerary,
    ManualActivity,
    Transportation,
)
from planner.services.cost_service import compute_totals, resolve_cost


def _itinerary(transport_exact=None, accommodation_exact=None):
    return GeneratedItinerary(
        transportation=Transportation(mode="Flight", estimatedCost=100, exactCost=transport_exact),
        accommodation=Accommodation(type="Hotel", name="Inn", estimatedCost=300, exactCost=accommodation_exact),
        food=Food(description="Local", estimatedCost=150),
    )


def test_exact_cost_takes_precedence():
    item = Transportation(mode="Flight", estimatedCost=100, exactCost=80)
    assert resolve_cost(item) == 80


def test_estimate_used_without_exact_cost():
    item = Transportation(mode="Flight", estimatedCost=100)
    assert resolve_cost(item) == 100


def test_exact_zero_is_honored():
    item = Accommodation(type="Couch", name="Friend's place", estimatedCost=200, exactCost=0)
    assert resolve_cost(item) == 0


def test_totals_sum_categories_and_manual_activities():
    activities = [
        ManualActivity(name="Museum", date="2024-06-02", time="10:00", cost=25),
        ManualActivity(name="Dinner cruise", date="2024-06-03", time="19:30", cost=75.5),
    ]

    totals = compute_totals(_itinerary(transport_exact=80), activities)

    assert totals.transportation == 80
    assert totals.accommodation == 300
    assert totals.food == 150
    assert totals.activitiesTotal == pytest.approx(100.5)
    assert totals.grandTotal == pytest.approx(630.5)


def test_ai_activities_do_not_count(sample_itinerary):
    totals = compute_totals(sample_itinerary, [])

    assert totals.activitiesTotal == 0
    assert totals.grandTotal == 360 + 600 + 250


def test_no_activities():
    totals = compute_totals(_itinerary(accommodation_exact=0), ())
    assert totals.grandTotal == 250
