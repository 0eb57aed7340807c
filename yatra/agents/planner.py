"""Agent that writes the final day-wise trip narrative."""

from __future__ import annotations

from typing import Optional, Sequence

from yatra.agents import (
    CompletionClient,
    call_llm_text,
    default_agent_model,
    format_prompt_data,
)
from yatra.schemas import TourPlan, TransportRoute, WeatherEntry


class PlannerAgent:
    """Combines places, weather and transport into a readable itinerary."""

    system_prompt = (
        "You are a meticulous travel planner. Write clear day-wise itineraries in plain "
        "text that a traveller can follow without further research."
    )
    prompt_version = "planner.v1"

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

    def run(
        self,
        city: str,
        tour: TourPlan,
        weather: Sequence[WeatherEntry],
        transport: Sequence[TransportRoute],
        *,
        start_date: str = "",
        end_date: str = "",
        total_days: Optional[int] = None,
    ) -> str:
        """Return the itinerary text exactly as the model wrote it."""

        days = total_days if total_days is not None else len(tour.days)
        window = f" from {start_date} to {end_date}" if start_date and end_date else ""

        prompt_payload = {
            "tour_plan": tour,
            "weather": list(weather),
            "transport": list(transport),
        }

        prompt = (
            f"Create a detailed day-wise trip plan for {city}{window} ({days} days).\n"
            "Strictly only give a day-wise plan (Day 1: ...).\n"
            "Each day must include:\n"
            "- places\n"
            "- transport\n"
            "- weather\n"
            "- activities\n"
            "- costs\n"
            "- tips\n"
            "\n"
            "# Planning Context\n"
            f"{format_prompt_data(prompt_payload)}\n"
            "\n"
            "Return the structured plan as plain text (not JSON)."
        )

        return call_llm_text(
            prompt=prompt,
            system_prompt=self.system_prompt,
            prompt_version=self.prompt_version,
            model=self.model,
            stop=self.stop,
            client=self.client,
        )


__all__ = ["PlannerAgent"]
