"""Agent that explains how to reach each place from the city's arrival points."""

from __future__ import annotations

import logging
import os
from typing import Optional, Sequence

from yatra.agents import (
    CompletionClient,
    call_llm_and_extract,
    default_agent_model,
    format_prompt_data,
    unwrap_list,
    validate_items,
)
from yatra.schemas import TransportPlan, TransportRoute, WeatherEntry

_LOGGER = logging.getLogger(__name__)

DEFAULT_DEPARTURE_HUB = "Majestic"
DEFAULT_DEPARTURE_AIRPORT = "Kempegowda Airport"


class TransportAgent:
    """Recommends the best way to travel to every place of the tour."""

    system_prompt = (
        "You are a local transport expert. Suggest practical options such as bus, metro, "
        "auto or taxi. Only respond with JSON."
    )
    prompt_version = "transport.v1"

    def __init__(
        self,
        *,
        model: Optional[str] = None,
        stop: Optional[Sequence[str]] = None,
        client: Optional[CompletionClient] = None,
        hub: Optional[str] = None,
        airport: Optional[str] = None,
    ) -> None:
        self.model = model or default_agent_model()
        self.stop = stop
        self.client = client
        self.hub = hub or os.getenv("YATRA_DEPARTURE_HUB", DEFAULT_DEPARTURE_HUB)
        self.airport = airport or os.getenv("YATRA_DEPARTURE_AIRPORT", DEFAULT_DEPARTURE_AIRPORT)

    def build_prompt(
        self,
        city: str,
        places: Sequence[str],
        weather: Sequence[WeatherEntry] = (),
    ) -> str:
        prompt = (
            f"Provide the best transportation method to reach each place in {city}.\n"
            f"For places: {', '.join(places)}, from {self.hub} and {self.airport}.\n"
        )
        if weather:
            prompt += (
                "Take the expected weather into account:\n"
                f"{format_prompt_data(list(weather))}\n"
            )
        prompt += (
            "Return strictly valid JSON array:\n"
            "[\n"
            '  { "place": "Place 1", "fromMajestic": "Bus/Metro", "fromAirport": "Taxi/Uber" }\n'
            "]\n"
            f'"fromMajestic" is the route from {self.hub} and "fromAirport" the route from '
            f"{self.airport}."
        )
        return prompt

    def run(
        self,
        city: str,
        places: Sequence[str],
        weather: Sequence[WeatherEntry] = (),
    ) -> TransportPlan:
        """Return a :class:`TransportRoute` for the places, in one model call."""

        if not places:
            _LOGGER.info(
                "Skipping transport request for %s: no places [prompt_version=%s]",
                city,
                self.prompt_version,
            )
            return []

        data = call_llm_and_extract(
            prompt=self.build_prompt(city, places, weather),
            system_prompt=self.system_prompt,
            prompt_version=self.prompt_version,
            expect="array",
            model=self.model,
            stop=self.stop,
            client=self.client,
        )

        items = unwrap_list(data, ("transport", "routes", "places"))
        return validate_items(TransportRoute, items, prompt_version=self.prompt_version)


__all__ = ["DEFAULT_DEPARTURE_AIRPORT", "DEFAULT_DEPARTURE_HUB", "TransportAgent"]
