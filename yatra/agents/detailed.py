"""Agent that writes a complete trip plan in a single model call."""

from __future__ import annotations

from typing import Optional, Sequence

from yatra.agents import CompletionClient, call_llm_text, default_agent_model


class DetailedTripAgent:
    """Produces a very detailed plain-text plan without the staged pipeline."""

    system_prompt = (
        "You are a meticulous travel planner. Write clear day-wise itineraries in plain text."
    )
    prompt_version = "detailed.v1"

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

    def run(self, city: str, start_date: str, end_date: str, total_days: int) -> str:
        prompt = (
            f"Create a very detailed day-wise trip plan for {city} from {start_date} "
            f"to {end_date} ({total_days} days).\n"
            "\n"
            "Each day must include:\n"
            "- tourist places to visit\n"
            "- local transport options\n"
            "- expected weather (use reasonable assumptions)\n"
            "- suggested activities\n"
            "- approximate costs (in local currency)\n"
            "- travel tips\n"
            "\n"
            "Format the response as structured plain text, not JSON."
        )

        return call_llm_text(
            prompt=prompt,
            system_prompt=self.system_prompt,
            prompt_version=self.prompt_version,
            model=self.model,
            stop=self.stop,
            client=self.client,
        )


__all__ = ["DetailedTripAgent"]
