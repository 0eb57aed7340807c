"""Agent that distributes a city's attractions across the days of a trip."""

from __future__ import annotations

import logging
from typing import Optional, Sequence

from pydantic import ValidationError

from yatra.agents import (
    CompletionClient,
    call_llm_and_extract,
    default_agent_model,
    format_prompt_data,
)
from yatra.schemas import TourPlan

_LOGGER = logging.getLogger(__name__)


class TourAgent:
    """Suggests 3-4 famous places per day, steering clear of excluded ones."""

    system_prompt = (
        "You are a local tour guide. Recommend famous tourist places and group them "
        "into days so that each day is easy to cover. Only respond with JSON."
    )
    prompt_version = "tour.v1"

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

    def build_prompt(self, city: str, total_days: int, exclude: Sequence[str] = ()) -> str:
        prompt = (
            f"Plan a trip for {city}.\n"
            f"Distribute tourist places across {total_days} days.\n"
            "Each day must include 3 to 4 famous tourist places.\n"
        )
        if exclude:
            prompt += (
                "Do not include any of these places, they are unsuitable for this trip:\n"
                f"{format_prompt_data(list(exclude))}\n"
            )
        prompt += (
            "\n"
            "Return strictly valid JSON in this format:\n"
            "{\n"
            '  "days": [\n'
            '    { "day": 1, "places": ["Place 1", "Place 2", "Place 3"] },\n'
            '    { "day": 2, "places": ["Place 4", "Place 5", "Place 6"] }\n'
            "  ]\n"
            "}"
        )
        return prompt

    def run(self, city: str, total_days: int, exclude: Sequence[str] = ()) -> TourPlan:
        """Return a :class:`TourPlan` with ``total_days`` days of attractions."""

        if total_days <= 0:
            _LOGGER.info(
                "Skipping tour request for %s: %s day trip [prompt_version=%s]",
                city,
                total_days,
                self.prompt_version,
            )
            return TourPlan()

        data = call_llm_and_extract(
            prompt=self.build_prompt(city, total_days, exclude),
            system_prompt=self.system_prompt,
            prompt_version=self.prompt_version,
            expect="object",
            model=self.model,
            stop=self.stop,
            client=self.client,
        )

        try:
            plan = TourPlan.model_validate(data)
        except ValidationError as exc:
            _LOGGER.warning(
                "Tour plan could not be validated, continuing with no places: %s "
                "[prompt_version=%s]",
                exc,
                self.prompt_version,
            )
            return TourPlan()

        if len(plan.days) != total_days:
            _LOGGER.info(
                "Tour plan for %s has %d days, expected %d [prompt_version=%s]",
                city,
                len(plan.days),
                total_days,
                self.prompt_version,
            )
        return plan


__all__ = ["TourAgent"]
