"""Orchestrates the end-to-end flow for generating a trip plan."""

from __future__ import annotations

import logging
import os
import time
from typing import Any, Callable, FrozenSet, List, Optional, Sequence, Set, Tuple, TypeVar

from yatra.agents import (
    DetailedTripAgent,
    PlannerAgent,
    TourAgent,
    TransportAgent,
    WeatherAgent,
    rainy_places,
)
from yatra.core.dates import days_between
from yatra.schemas import (
    DetailedTrip,
    TourPlan,
    TripPlan,
    WeatherReport,
    unique_places,
)

_LOGGER = logging.getLogger(__name__)

DEFAULT_MAX_REPLAN_ROUNDS = 3

R = TypeVar("R")


class TripPipelineError(RuntimeError):
    """Raised when a stage fails and the run has to be abandoned."""

    def __init__(self, stage: str, cause: BaseException) -> None:
        self.stage = stage
        self.cause = cause
        self.user_message = format_pipeline_error(cause)
        super().__init__(f"{stage.capitalize()} stage failed: {cause}")


def format_pipeline_error(exc: BaseException) -> str:
    """Turn a pipeline failure into a message suitable for travellers."""

    base_message = "Unable to generate the trip plan."
    details = str(exc).strip()
    if details:
        lowered = details.lower()
        if any(token in lowered for token in ("api key", "401", "403", "unauthorized", "forbidden")):
            return (
                f"{base_message} Provide a valid API key via the "
                "OPENAI_API_KEY environment variable."
            )
        if "429" in lowered or "too many requests" in lowered:
            return f"{base_message} The model rate limit was hit. Wait a moment and try again."
        if "timed out" in lowered or "timeout" in lowered:
            return f"{base_message} The model took too long to answer. Try again shortly."
        return f"{base_message} {details}"
    return f"{base_message} Check your configuration and try again."


def _log_stage(stage: str, duration: float, prompt_version: str) -> None:
    _LOGGER.info(
        "%s stage completed in %.2fs [prompt_version=%s]",
        stage.capitalize(),
        duration,
        prompt_version,
    )


def _log_stage_skipped(stage: str, reason: str, prompt_version: str) -> None:
    _LOGGER.info(
        "%s stage skipped: %s [prompt_version=%s]",
        stage.capitalize(),
        reason,
        prompt_version,
    )


def _place_key(places: Sequence[str]) -> FrozenSet[str]:
    return frozenset(place.strip().lower() for place in places)


def _total_days(start_date: str, end_date: str) -> int:
    try:
        return days_between(start_date, end_date)
    except ValueError as exc:
        _LOGGER.warning("Could not compute trip length, treating it as empty: %s", exc)
        return 0


class TripPipeline:
    """Runs the tour, weather, transport and planner agents for one request.

    Holds agents and limits only. Every call works on its own request data, so
    one instance can serve concurrent requests.
    """

    def __init__(
        self,
        *,
        tour_agent: Optional[TourAgent] = None,
        weather_agent: Optional[WeatherAgent] = None,
        transport_agent: Optional[TransportAgent] = None,
        planner_agent: Optional[PlannerAgent] = None,
        detailed_agent: Optional[DetailedTripAgent] = None,
        max_replan_rounds: Optional[int] = None,
    ) -> None:
        self.tour_agent = tour_agent or TourAgent()
        self.weather_agent = weather_agent or WeatherAgent()
        self.transport_agent = transport_agent or TransportAgent()
        self.planner_agent = planner_agent or PlannerAgent()
        self.detailed_agent = detailed_agent or DetailedTripAgent()
        if max_replan_rounds is None:
            max_replan_rounds = int(
                os.getenv("YATRA_MAX_REPLAN_ROUNDS", str(DEFAULT_MAX_REPLAN_ROUNDS))
            )
        self.max_replan_rounds = max(0, max_replan_rounds)

    def _run_stage(
        self,
        stage: str,
        agent: Any,
        func: Callable[..., R],
        *args: Any,
        **kwargs: Any,
    ) -> R:
        prompt_version = getattr(agent, "prompt_version", "unknown")
        start = time.perf_counter()
        try:
            result = func(*args, **kwargs)
        except Exception as exc:
            _LOGGER.exception(
                "%s stage failed [prompt_version=%s]", stage.capitalize(), prompt_version
            )
            raise TripPipelineError(stage, exc) from exc
        _log_stage(stage, time.perf_counter() - start, prompt_version)
        return result

    def _tour(self, city: str, total_days: int, exclude: Sequence[str] = ()) -> TourPlan:
        stage = "replan" if exclude else "tour"
        return self._run_stage(
            stage, self.tour_agent, self.tour_agent.run, city, total_days, exclude
        )

    def _forecast(self, city: str, places: Sequence[str]) -> WeatherReport:
        return self._run_stage(
            "weather", self.weather_agent, self.weather_agent.run, city, places
        )

    def plan_with_forecast(self, city: str, total_days: int) -> Tuple[TourPlan, WeatherReport, int]:
        """Plan attractions and re-plan around rain until the forecast is clear.

        Returns the accepted tour, its weather report and the number of
        replanning rounds whose plan was accepted. The loop stops when no place is rainy, when a plan
        comes back empty, when ``max_replan_rounds`` is reached or when the
        model offers a set of places it already offered. The last two keep the
        best plan found so far.
        """

        tour = self._tour(city, total_days)
        places = tour.places()
        report = self._forecast(city, places)

        replan_days = len(tour.days) or total_days
        excluded: List[str] = []
        seen: Set[FrozenSet[str]] = {_place_key(places)}
        rounds = 0

        while True:
            rainy = rainy_places(report)
            if not rainy:
                break
            if rounds >= self.max_replan_rounds:
                _LOGGER.warning(
                    "Rain still forecast for %s after %d replanning rounds; "
                    "keeping the current plan",
                    ", ".join(rainy),
                    rounds,
                )
                break

            excluded = unique_places([*excluded, *rainy])
            attempt = rounds + 1
            _LOGGER.info(
                "Replanning round %d for %s, excluding %s",
                attempt,
                city,
                ", ".join(excluded),
            )

            candidate = self._tour(city, replan_days, excluded)
            candidate_places = candidate.places()
            key = _place_key(candidate_places)
            if candidate_places and key in seen:
                _LOGGER.warning(
                    "Replanning round %d repeated an earlier set of places; keeping the current plan",
                    attempt,
                )
                break
            seen.add(key)

            rounds = attempt
            tour = candidate
            report = self._forecast(city, candidate_places)

        return tour, report, rounds

    def run_trip(self, city: str, start_date: str, end_date: str) -> TripPlan:
        """Run every stage and return the assembled :class:`TripPlan`."""

        pipeline_start = time.perf_counter()
        _LOGGER.info("Starting trip pipeline for %s (%s to %s)", city, start_date, end_date)

        total_days = _total_days(start_date, end_date)
        tour, report, rounds = self.plan_with_forecast(city, total_days)
        places = tour.places()

        transport = self._run_stage(
            "transport",
            self.transport_agent,
            self.transport_agent.run,
            city,
            places,
            report,
        )
        if total_days <= 0:
            _log_stage_skipped(
                "planner",
                f"trip spans {total_days} days",
                getattr(self.planner_agent, "prompt_version", "unknown"),
            )
            narrative = ""
        else:
            narrative = self._run_stage(
                "planner",
                self.planner_agent,
                self.planner_agent.run,
                city,
                tour,
                report,
                transport,
                start_date=start_date,
                end_date=end_date,
                total_days=total_days,
            )

        _LOGGER.info(
            "Trip pipeline completed in %.2fs with %d replanning rounds",
            time.perf_counter() - pipeline_start,
            rounds,
        )
        return TripPlan(
            city=city,
            start_date=start_date,
            end_date=end_date,
            total_days=total_days,
            tour_plan=tour,
            weather_report=report,
            transport_plan=transport,
            narrative=narrative,
            replan_rounds=rounds,
        )

    def run_tour_only(self, city: str, start_date: str, end_date: str) -> TourPlan:
        """Return the attractions plan without weather, transport or narrative."""

        return self._tour(city, _total_days(start_date, end_date))

    def run_weather_only(self, city: str, start_date: str, end_date: str) -> WeatherReport:
        """Return the forecast for the places of the accepted plan."""

        _, report, _ = self.plan_with_forecast(city, _total_days(start_date, end_date))
        return report

    def run_detailed_trip(self, city: str, start_date: str, end_date: str) -> DetailedTrip:
        """Return a single-call, plain-text detailed plan."""

        total_days = _total_days(start_date, end_date)
        trip_plan = self._run_stage(
            "detailed",
            self.detailed_agent,
            self.detailed_agent.run,
            city,
            start_date,
            end_date,
            total_days,
        )
        return DetailedTrip(
            city=city,
            start_date=start_date,
            end_date=end_date,
            total_days=total_days,
            trip_plan=trip_plan,
        )


def run_trip(city: str, start_date: str, end_date: str) -> TripPlan:
    """Execute the full pipeline with default agents."""

    return TripPipeline().run_trip(city, start_date, end_date)


def run_tour_only(city: str, start_date: str, end_date: str) -> TourPlan:
    return TripPipeline().run_tour_only(city, start_date, end_date)


def run_weather_only(city: str, start_date: str, end_date: str) -> WeatherReport:
    return TripPipeline().run_weather_only(city, start_date, end_date)


def run_detailed_trip(city: str, start_date: str, end_date: str) -> DetailedTrip:
    return TripPipeline().run_detailed_trip(city, start_date, end_date)


__all__ = [
    "DEFAULT_MAX_REPLAN_ROUNDS",
    "TripPipeline",
    "TripPipelineError",
    "format_pipeline_error",
    "run_detailed_trip",
    "run_tour_only",
    "run_trip",
    "run_weather_only",
]
