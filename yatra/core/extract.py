"""Best-effort recovery of JSON payloads embedded in free-form model replies."""

from __future__ import annotations

import json
import logging
import re
from typing import Any, Callable, Iterator, List, Union

_LOGGER = logging.getLogger(__name__)

JSONValue = Union[dict, list]

_FENCE_RE = re.compile(r"```(?:\w+)?([\s\S]*?)```")
_OBJECT_RE = re.compile(r"\{[\s\S]*\}")
_ARRAY_RE = re.compile(r"\[[\s\S]*\]")

_FALLBACKS: dict[str, Callable[[], JSONValue]] = {"object": dict, "array": list}

_RAW_PREVIEW_CHARS = 500


def _candidates(text: str, expect: str) -> Iterator[str]:
    """Yield the substrings worth parsing, in priority order."""

    fence = _FENCE_RE.search(text)
    if fence:
        yield fence.group(1).strip()
        return

    patterns: List[re.Pattern[str]] = (
        [_ARRAY_RE, _OBJECT_RE] if expect == "array" else [_OBJECT_RE, _ARRAY_RE]
    )
    matched = False
    for pattern in patterns:
        match = pattern.search(text)
        if match:
            matched = True
            yield match.group(0)
    if not matched:
        yield text.strip()


def extract_json(text: Any, expect: str = "object") -> JSONValue:
    """Return the JSON value embedded in ``text`` or an empty fallback.

    A fenced code block wins; otherwise the greedy ``{...}``/``[...]`` span is
    tried, and finally the whole trimmed text. When nothing parses the result
    is ``{}`` for ``expect="object"`` and ``[]`` for ``expect="array"``.
    """

    if expect not in _FALLBACKS:
        raise ValueError(f"expect must be 'object' or 'array', got {expect!r}")

    fallback = _FALLBACKS[expect]
    if not isinstance(text, str) or not text.strip():
        _LOGGER.warning("Model reply was empty; using %s fallback", expect)
        return fallback()

    last_error: Exception | None = None
    for candidate in _candidates(text, expect):
        try:
            value = json.loads(candidate)
        except json.JSONDecodeError as exc:
            last_error = exc
            continue
        if isinstance(value, (dict, list)):
            return value

    _LOGGER.warning(
        "Failed to parse JSON from model reply (%s); using %s fallback. Raw text was: %s",
        last_error or "no JSON value found",
        expect,
        text[:_RAW_PREVIEW_CHARS],
    )
    return fallback()


__all__ = ["JSONValue", "extract_json"]
