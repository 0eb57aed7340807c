"""Agent that forecasts the weather at each planned place."""

from __future__ import annotations

import logging
from typing import Iterable, List, Optional, Sequence

from yatra.agents import (
    CompletionClient,
    call_llm_and_extract,
    default_agent_model,
    unwrap_list,
    validate_items,
)
from yatra.schemas import WeatherEntry, WeatherReport, unique_places

_LOGGER = logging.getLogger(__name__)

BAD_WEATHER_KEYWORD = "rain"


def is_bad_weather(entry: WeatherEntry) -> bool:
    """Return ``True`` when the forecast mentions rain, in any case."""

    return BAD_WEATHER_KEYWORD in entry.weather.lower()


def rainy_places(report: Iterable[WeatherEntry]) -> List[str]:
    """Return the distinct places with a rainy forecast, in report order."""

    return unique_places(entry.place for entry in report if is_bad_weather(entry))


class WeatherAgent:
    """Reports the temperature and condition for every place of a tour."""

    system_prompt = (
        "You are a weather assistant for travellers. Give a short condition such as "
        "Sunny, Cloudy or Light Rain and a temperature for each place. Only respond with JSON."
    )
    prompt_version = "weather.v1"

    def __init__(
        self,
        *,
        model: Optional[str] = None,
        stop: Optional[Sequence[str]] = None,
        client: Optional[CompletionClient] = None,
    ) -> None:
        self.model = model or default_agent_model()
        self.stop = stop
        self.client = client

    def build_prompt(self, city: str, places: Sequence[str]) -> str:
        return (
            f"Give the current temperature and weather condition (e.g. cloudy, sunny) "
            f"for each of these places in {city}: {', '.join(places)}.\n"
            "Return strictly valid JSON:\n"
            "[\n"
            '  { "place": "Place 1", "date": "dd/mm/yy", "weather": "Sunny", "temperature": "25°C" }\n'
            "]"
        )

    def run(self, city: str, places: Sequence[str]) -> WeatherReport:
        """Return one :class:`WeatherEntry` per place, as far as the model provides them."""

        if not places:
            _LOGGER.info(
                "Skipping weather request for %s: no places [prompt_version=%s]",
                city,
                self.prompt_version,
            )
            return []

        data = call_llm_and_extract(
            prompt=self.build_prompt(city, places),
            system_prompt=self.system_prompt,
            prompt_version=self.prompt_version,
            expect="array",
            model=self.model,
            stop=self.stop,
            client=self.client,
        )

        items = unwrap_list(data, ("weather", "results", "forecast", "places"))
        report = validate_items(WeatherEntry, items, prompt_version=self.prompt_version)
        if len(report) != len(places):
            _LOGGER.info(
                "Weather report covers %d entries for %d places [prompt_version=%s]",
                len(report),
                len(places),
                self.prompt_version,
            )
        return report


__all__ = ["BAD_WEATHER_KEYWORD", "WeatherAgent", "is_bad_weather", "rainy_places"]
