from unittest.mock import Mock

import pytest

from travel_assistant import llm, recommender
from travel_assistant.errors import GatewayNotConfiguredError, ValidationError
from travel_assistant.schemas import RecommendedTripPlan

RECOMMENDER_RECORDS = [
    {
        "name": "Belem Tower",
        "visitTime": 45,
        "travelTimeFromSource": 20,
        "distanceFromSource": 6,
        "distanceToSource": 6,
        "rating": 4.6,
        "category": "historical",
        "popularity": 9,
    },
    {
        "name": "LX Factory",
        "visitTime": 60,
        "travelTimeFromSource": 15,
        "distanceFromSource": 4,
        "rating": "excellent",
        "category": "shopping",
    },
    "Oceanarium",
    {
        "name": "Alfama walk",
        "visitTime": 90,
        "travelTimeFromSource": 10,
        "distanceFromSource": 2,
        "distanceToSource": 2,
        "rating": 4.4,
        "category": "cultural",
    },
]


def _request(**overrides) -> dict:
    payload = {
        "startLocation": "Lisbon",
        "availableTime": 4,
        "userPreferences": ["historical sites"],
    }
    payload.update(overrides)
    return payload


def test_validate_candidates_reports_malformed_entries():
    accepted, rejected = recommender.validate_candidates(RECOMMENDER_RECORDS)

    assert [d.name for d in accepted] == ["Belem Tower", "Alfama walk"]
    assert [(r.index, r.name, r.field) for r in rejected] == [
        (1, "LX Factory", "rating"),
        (2, None, "record"),
    ]


def test_plan_recommended_trip_optimises_valid_candidates(monkeypatch):
    fake = Mock(return_value=RECOMMENDER_RECORDS)
    monkeypatch.setattr(llm, "recommend_destinations", fake)

    plan = recommender.plan_recommended_trip(_request())

    assert isinstance(plan, RecommendedTripPlan)
    fake.assert_called_once_with("Lisbon", "Lisbon", 4.0, ["historical sites"])
    names = {d.name for d in plan.optimized_route} | {d.name for d in plan.skipped_destinations}
    assert names == {"Belem Tower", "Alfama walk"}
    assert plan.optimized_route[0].name == "Belem Tower"
    assert len(plan.rejected_candidates) == 2
    dumped = plan.model_dump(mode="json", by_alias=True)
    assert dumped["rejectedCandidates"][0]["field"] == "rating"


def test_plan_recommended_trip_validates_request_before_calling_gateway(monkeypatch):
    fake = Mock(return_value=[])
    monkeypatch.setattr(llm, "recommend_destinations", fake)

    with pytest.raises(ValidationError):
        recommender.plan_recommended_trip(_request(availableTime=0))
    fake.assert_not_called()


def test_recommendations_need_a_configured_gateway(monkeypatch):
    monkeypatch.setattr(llm, "_client", None)

    with pytest.raises(GatewayNotConfiguredError):
        recommender.plan_recommended_trip(_request())


def test_plan_recommended_trip_ignores_caller_destinations(monkeypatch):
    monkeypatch.setattr(llm, "recommend_destinations", Mock(return_value=RECOMMENDER_RECORDS))

    plan = recommender.plan_recommended_trip(_request(destinations=[{"name": "Broken", "visitTime": "soon"}]))

    names = {d.name for d in plan.optimized_route} | {d.name for d in plan.skipped_destinations}
    assert names == {"Belem Tower", "Alfama walk"}
