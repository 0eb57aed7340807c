"""Tests for the individual planning agents."""

from __future__ import annotations

import json
import logging
from typing import List, Optional, Sequence

import pytest

from yatra.agents import (
    DetailedTripAgent,
    PlannerAgent,
    TourAgent,
    TransportAgent,
    WeatherAgent,
    is_bad_weather,
    rainy_places,
)
from yatra.core.llm import InferenceError
from yatra.schemas import DayPlaces, TourPlan, TransportRoute, WeatherEntry


class ScriptedClient:
    """Completion client that replays canned replies and records prompts."""

    def __init__(self, replies: Sequence[str]):
        self.replies = list(replies)
        self.calls: List[dict] = []

    def complete(
        self,
        prompt: str,
        *,
        system: Optional[str] = None,
        model: Optional[str] = None,
        stop: Optional[Sequence[str]] = None,
        prompt_version: str = "adhoc",
    ) -> str:
        self.calls.append(
            {"prompt": prompt, "system": system, "model": model, "prompt_version": prompt_version}
        )
        return self.replies.pop(0)


class FailingClient:
    def complete(self, prompt: str, **_) -> str:
        raise InferenceError("401 Unauthorized")


@pytest.mark.parametrize("condition", ["Light Rain", "rainy", "HEAVY RAIN", "Thunderstorms and rain"])
def test_rain_conditions_are_bad_weather(condition: str) -> None:
    assert is_bad_weather(WeatherEntry(place="Lalbagh", weather=condition))


@pytest.mark.parametrize("condition", ["Sunny", "Cloudy", "", "Drizzle"])
def test_other_conditions_are_not_bad_weather(condition: str) -> None:
    assert not is_bad_weather(WeatherEntry(place="Lalbagh", weather=condition))


def test_rainy_places_are_distinct_and_ordered() -> None:
    report = [
        WeatherEntry(place="Nandi Hills", weather="Light Rain"),
        WeatherEntry(place="Lalbagh", weather="Sunny"),
        WeatherEntry(place="nandi hills", weather="Rain"),
        WeatherEntry(place="Cubbon Park", weather="rainy"),
    ]

    assert rainy_places(report) == ["Nandi Hills", "Cubbon Park"]


def test_tour_agent_parses_plan_and_mentions_exclusions() -> None:
    reply = (
        "Here is the plan:\n```json\n"
        + json.dumps(
            {
                "days": [
                    {"day": 1, "places": ["Lalbagh", "Cubbon Park", "Vidhana Soudha"]},
                    {"day": 2, "places": ["Bangalore Palace", "ISKCON Temple", "UB City"]},
                ]
            }
        )
        + "\n```"
    )
    client = ScriptedClient([reply])
    agent = TourAgent(client=client, model="test-model")

    plan = agent.run("Bangalore", 2, exclude=["Nandi Hills"])

    assert len(plan.days) == 2
    assert plan.places()[:2] == ["Lalbagh", "Cubbon Park"]
    call = client.calls[0]
    assert "Bangalore" in call["prompt"]
    assert "2 days" in call["prompt"]
    assert "Nandi Hills" in call["prompt"]
    assert call["model"] == "test-model"
    assert call["prompt_version"] == TourAgent.prompt_version


def test_tour_agent_prompt_without_exclusions_has_no_exclusion_clause() -> None:
    prompt = TourAgent().build_prompt("Bangalore", 3)

    assert "Do not include" not in prompt
    assert "3 days" in prompt


def test_tour_agent_degrades_to_empty_plan_on_garbage(caplog: pytest.LogCaptureFixture) -> None:
    client = ScriptedClient(["Sorry, I can't plan that trip."])

    with caplog.at_level(logging.WARNING):
        plan = TourAgent(client=client).run("Bangalore", 3)

    assert plan == TourPlan()
    assert len(client.calls) == 1
    assert any("fallback" in record.getMessage() for record in caplog.records)


def test_tour_agent_degrades_to_empty_plan_on_invalid_shape() -> None:
    client = ScriptedClient(['{"days": [{"day": -4, "places": ["Lalbagh"]}]}'])

    assert TourAgent(client=client).run("Bangalore", 1) == TourPlan()


def test_tour_agent_skips_model_for_degenerate_ranges() -> None:
    client = ScriptedClient([])

    assert TourAgent(client=client).run("Bangalore", 0) == TourPlan()
    assert TourAgent(client=client).run("Bangalore", -3) == TourPlan()
    assert client.calls == []


def test_weather_agent_parses_report_with_loose_keys() -> None:
    reply = json.dumps(
        [
            {"city": "Lalbagh", "temperature": "26°C", "Weather Condition": "Sunny"},
            {"place": "Nandi Hills", "temperature": 19, "weather": "Light Rain"},
            "not an entry",
        ]
    )
    client = ScriptedClient([reply])

    report = WeatherAgent(client=client).run("Bangalore", ["Lalbagh", "Nandi Hills"])

    assert [entry.place for entry in report] == ["Lalbagh", "Nandi Hills"]
    assert report[1].temperature == "19"
    assert "Lalbagh, Nandi Hills" in client.calls[0]["prompt"]


def test_weather_agent_unwraps_wrapper_object() -> None:
    client = ScriptedClient(['{"weather": [{"place": "Lalbagh", "weather": "Cloudy"}]}'])

    report = WeatherAgent(client=client).run("Bangalore", ["Lalbagh"])

    assert report == [WeatherEntry(place="Lalbagh", weather="Cloudy")]


def test_weather_agent_returns_empty_report_on_garbage() -> None:
    client = ScriptedClient(["The weather will be lovely!"])

    assert WeatherAgent(client=client).run("Bangalore", ["Lalbagh"]) == []


def test_weather_and_transport_make_no_calls_without_places() -> None:
    client = ScriptedClient([])

    assert WeatherAgent(client=client).run("Bangalore", []) == []
    assert TransportAgent(client=client).run("Bangalore", [], []) == []
    assert client.calls == []


def test_transport_agent_makes_one_call_for_all_places() -> None:
    reply = json.dumps(
        [
            {"place": "Lalbagh", "fromMajestic": "Metro (Green line)", "fromAirport": "Taxi"},
            {"place": "Cubbon Park", "fromMajestic": "Metro (Purple line)", "fromAirport": "Bus"},
        ]
    )
    client = ScriptedClient([reply])
    weather = [WeatherEntry(place="Lalbagh", weather="Sunny", temperature="27°C")]

    routes = TransportAgent(client=client).run("Bangalore", ["Lalbagh", "Cubbon Park"], weather)

    assert len(client.calls) == 1
    assert routes[0] == TransportRoute(
        place="Lalbagh", from_majestic="Metro (Green line)", from_airport="Taxi"
    )
    prompt = client.calls[0]["prompt"]
    assert "Majestic" in prompt and "Kempegowda Airport" in prompt
    assert "27°C" in prompt


def test_transport_agent_uses_configured_departure_points() -> None:
    agent = TransportAgent(hub="Central Station", airport="Schiphol")

    prompt = agent.build_prompt("Amsterdam", ["Rijksmuseum"])

    assert "from Central Station and Schiphol" in prompt


def test_planner_returns_raw_text_without_extraction() -> None:
    narrative = 'Day 1: Lalbagh {"not": "parsed"}\nDay 2: Cubbon Park'
    client = ScriptedClient([narrative])
    tour = TourPlan(days=[DayPlaces(day=1, places=["Lalbagh"]), DayPlaces(day=2, places=["Cubbon Park"])])

    result = PlannerAgent(client=client).run(
        "Bangalore",
        tour,
        [WeatherEntry(place="Lalbagh", weather="Sunny")],
        [TransportRoute(place="Lalbagh", from_majestic="Metro", from_airport="Taxi")],
        start_date="01/06/25",
        end_date="02/06/25",
        total_days=2,
    )

    assert result == narrative
    prompt = client.calls[0]["prompt"]
    assert "from 01/06/25 to 02/06/25 (2 days)" in prompt
    assert "fromMajestic" in prompt
    assert "plain text" in prompt


def test_detailed_agent_requests_plain_text_plan() -> None:
    client = ScriptedClient(["Day 1: ..."])

    result = DetailedTripAgent(client=client).run("Bangalore", "01/06/25", "03/06/25", 3)

    assert result == "Day 1: ..."
    assert "(3 days)" in client.calls[0]["prompt"]


def test_inference_errors_propagate_from_agents() -> None:
    with pytest.raises(InferenceError):
        TourAgent(client=FailingClient()).run("Bangalore", 2)
    with pytest.raises(InferenceError):
        PlannerAgent(client=FailingClient()).run("Bangalore", TourPlan(), [], [])
