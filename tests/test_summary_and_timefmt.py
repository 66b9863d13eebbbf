import pytest

from travel_assistant.planner.summary import build_summary
from travel_assistant.planner.timefmt import format_minutes
from travel_assistant.schemas import ScoredDestination


def _stop(name: str, visit: float, travel: float, distance: float, rating: float, score: float) -> ScoredDestination:
    return ScoredDestination(
        name=name,
        visit_time=visit,
        travel_time_from_source=travel,
        distance_from_source=distance,
        rating=rating,
        score=score,
    )


def test_summary_of_empty_route_is_all_zero():
    summary = build_summary([], return_time=12.0)

    assert summary.total_locations == 0
    assert summary.average_rating == 0.0
    assert summary.average_score == 0.0
    assert summary.total_trip_time == 0.0


def test_summary_totals_and_averages():
    route = [_stop("A", 60, 15, 2, 4.5, 0.6), _stop("B", 30, 10, 3, 3.5, 0.4)]

    summary = build_summary(route, return_time=4.5)

    assert summary.total_locations == 2
    assert summary.total_visit_time == 90
    assert summary.total_travel_time == 25
    assert summary.total_distance == 5
    assert summary.average_rating == pytest.approx(4.0)
    assert summary.average_score == pytest.approx(0.5)
    assert summary.total_trip_time == pytest.approx(119.5)


def test_summary_serialises_with_camel_case_keys():
    dumped = build_summary([_stop("A", 60, 15, 2, 4.5, 0.6)]).model_dump(by_alias=True)

    assert set(dumped) == {
        "totalLocations",
        "totalVisitTime",
        "totalTravelTime",
        "totalDistance",
        "averageRating",
        "averageScore",
        "totalTripTime",
    }


@pytest.mark.parametrize(
    "minutes, expected",
    [
        (0, "0 minutes"),
        (1, "1 minute"),
        (45, "45 minutes"),
        (59.5, "1 hour"),
        (61, "1 hour and 1 minute"),
        (125, "2 hours and 5 minutes"),
        (180, "3 hours"),
    ],
)
def test_format_minutes(minutes, expected):
    assert format_minutes(minutes) == expected
