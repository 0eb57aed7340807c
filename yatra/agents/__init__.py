"""Shared utilities for Yatra's LLM-backed agents."""

from __future__ import annotations

import json
import logging
import os
from typing import Any, Iterable, List, Optional, Protocol, Sequence, Type, TypeVar

from pydantic import BaseModel, ValidationError

from yatra.core import llm
from yatra.core.extract import JSONValue, extract_json

T = TypeVar("T", bound=BaseModel)


def default_agent_model() -> str:
    """Model name used by agents built without an explicit ``model``."""

    return os.getenv("OPENAI_MODEL", llm.DEFAULT_MODEL)

_LOGGER = logging.getLogger(__name__)


class CompletionClient(Protocol):
    """Anything that turns a prompt into completion text."""

    def complete(
        self,
        prompt: str,
        *,
        system: Optional[str] = None,
        model: Optional[str] = None,
        stop: Optional[Sequence[str]] = None,
        prompt_version: str = "adhoc",
    ) -> str:
        ...


def _json_default(value: Any) -> Any:
    if isinstance(value, BaseModel):
        return value.model_dump(by_alias=True)
    if isinstance(value, set):
        return sorted(value)
    return str(value)


def format_prompt_data(data: Any) -> str:
    """Render arbitrary python data for inclusion in an LLM prompt."""

    return json.dumps(data, indent=2, default=_json_default, ensure_ascii=False)


def call_llm_text(
    *,
    prompt: str,
    system_prompt: str,
    prompt_version: str,
    model: Optional[str] = None,
    stop: Optional[Sequence[str]] = None,
    client: Optional[CompletionClient] = None,
) -> str:
    """Call the completion dependency and return its raw reply."""

    completion = client.complete if client is not None else llm.complete
    return completion(
        prompt,
        system=system_prompt,
        model=model or default_agent_model(),
        stop=stop,
        prompt_version=prompt_version,
    )


def call_llm_and_extract(
    *,
    prompt: str,
    system_prompt: str,
    prompt_version: str,
    expect: str,
    model: Optional[str] = None,
    stop: Optional[Sequence[str]] = None,
    client: Optional[CompletionClient] = None,
) -> JSONValue:
    """Call the completion dependency and recover the JSON in its reply."""

    raw = call_llm_text(
        prompt=prompt,
        system_prompt=system_prompt,
        prompt_version=prompt_version,
        model=model,
        stop=stop,
        client=client,
    )
    return extract_json(raw, expect=expect)


def unwrap_list(data: JSONValue, keys: Sequence[str]) -> List[Any]:
    """Return the list payload in ``data``, looking inside wrapper objects."""

    if isinstance(data, list):
        return data
    if isinstance(data, dict):
        for key in keys:
            value = data.get(key)
            if isinstance(value, list):
                return value
        lists = [value for value in data.values() if isinstance(value, list)]
        if len(lists) == 1:
            return lists[0]
        if data and not lists:
            return [data]
    return []


def validate_items(
    schema: Type[T],
    items: Iterable[Any],
    *,
    prompt_version: str,
) -> List[T]:
    """Validate each item against ``schema``, dropping the ones that do not fit."""

    validated: List[T] = []
    for item in items:
        try:
            validated.append(schema.model_validate(item))
        except ValidationError as exc:
            _LOGGER.warning(
                "Dropping %s entry that failed validation: %s [prompt_version=%s]",
                schema.__name__,
                exc.errors()[0]["msg"] if exc.errors() else exc,
                prompt_version,
            )
    return validated


from .detailed import DetailedTripAgent
from .planner import PlannerAgent
from .tour import TourAgent
from .transport import TransportAgent
from .weather import WeatherAgent, is_bad_weather, rainy_places

__all__ = [
    "CompletionClient",
    "default_agent_model",
    "DetailedTripAgent",
    "PlannerAgent",
    "TourAgent",
    "TransportAgent",
    "WeatherAgent",
    "call_llm_and_extract",
    "call_llm_text",
    "format_prompt_data",
    "is_bad_weather",
    "rainy_places",
    "unwrap_list",
    "validate_items",
]
