"""Centralised LLM client utilities."""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass, field
from typing import Any, Dict, List, Mapping, MutableMapping, Optional, Sequence

import httpx


DEFAULT_MODEL = "gpt-4o-mini"
DEFAULT_BASE_URL = "https://api.openai.com/v1"


def _env_model() -> str:
    return os.getenv("OPENAI_MODEL", DEFAULT_MODEL)


def _env_temperature() -> float:
    return float(os.getenv("LLM_TEMPERATURE", "0.7"))


def _env_timeout() -> Optional[float]:
    return float(os.getenv("LLM_TIMEOUT", "60"))


def _env_max_tokens() -> Optional[int]:
    value = os.getenv("LLM_MAX_TOKENS", "2000")
    return int(value) if value else None


_LOGGER = logging.getLogger(__name__)


class InferenceError(RuntimeError):
    """Raised when the completion service is unreachable or rejects a request."""


def _clean_dict(payload: MutableMapping[str, Any]) -> Dict[str, Any]:
    return {key: value for key, value in payload.items() if value is not None}


@dataclass
class LLMClient:
    """A small convenience wrapper for calling chat based LLM APIs.

    Unset fields are read from the environment when the client is created.
    """

    model: str = field(default_factory=_env_model)
    temperature: float = field(default_factory=_env_temperature)
    timeout: Optional[float] = field(default_factory=_env_timeout)
    max_tokens: Optional[int] = field(default_factory=_env_max_tokens)
    api_key: Optional[str] = field(default_factory=lambda: os.getenv("OPENAI_API_KEY"))
    base_url: str = field(
        default_factory=lambda: os.getenv("OPENAI_BASE_URL", DEFAULT_BASE_URL)
    )

    def chat(
        self,
        *,
        prompt: str,
        system: Optional[str] = None,
        model: Optional[str] = None,
        stop: Optional[Sequence[str]] = None,
        prompt_version: str,
        temperature: Optional[float] = None,
        timeout: Optional[float] = None,
        max_tokens: Optional[int] = None,
    ) -> Dict[str, Any]:
        """Call the backing LLM API and return its raw response."""

        messages: List[Dict[str, str]] = []
        if system:
            messages.append({"role": "system", "content": system})
        messages.append({"role": "user", "content": prompt})

        payload: Dict[str, Any] = {
            "model": model or self.model,
            "messages": messages,
            "temperature": temperature if temperature is not None else self.temperature,
            "max_tokens": max_tokens if max_tokens is not None else self.max_tokens,
            "stop": list(stop) if stop else None,
            "user": prompt_version,
        }

        payload = _clean_dict(payload)

        _LOGGER.debug(
            "Calling chat completion model %s [prompt_version=%s]",
            payload["model"],
            prompt_version,
        )

        request_timeout = timeout if timeout is not None else self.timeout
        headers = {"Content-Type": "application/json"}
        if self.api_key:
            headers["Authorization"] = f"Bearer {self.api_key}"

        request_kwargs: Dict[str, Any] = {}
        if request_timeout is not None:
            request_kwargs["timeout"] = request_timeout

        try:
            response = httpx.post(
                f"{self.base_url.rstrip('/')}/chat/completions",
                json=payload,
                headers=headers,
                **request_kwargs,
            )
            response.raise_for_status()
            return response.json()
        except httpx.HTTPError as exc:
            raise InferenceError(f"Chat completion request failed: {exc}") from exc
        except ValueError as exc:
            raise InferenceError(f"Chat completion returned a non-JSON body: {exc}") from exc

    @staticmethod
    def extract_content(response: Mapping[str, Any]) -> str:
        """Extract the assistant message content from a chat completion response."""

        if not isinstance(response, Mapping):
            raise InferenceError(
                f"LLM response was a {type(response).__name__}, expected an object"
            )
        choices = response.get("choices")
        if not choices:
            raise InferenceError("LLM response did not contain any choices")
        if not isinstance(choices, Sequence) or isinstance(choices, (str, bytes)):
            raise InferenceError("LLM response choices were not a list")
        choice = choices[0]
        if not isinstance(choice, Mapping):
            raise InferenceError("LLM response choice was not an object")
        message = choice.get("message") or {}
        if not isinstance(message, Mapping):
            raise InferenceError("LLM response message was not an object")
        content = message.get("content")
        if content is None:
            raise InferenceError("LLM response did not contain content")
        if not isinstance(content, str):
            raise InferenceError("LLM response content was not text")
        return content

    def complete(
        self,
        prompt: str,
        *,
        system: Optional[str] = None,
        model: Optional[str] = None,
        stop: Optional[Sequence[str]] = None,
        prompt_version: str = "adhoc",
    ) -> str:
        """Submit ``prompt`` and return the model's raw text reply."""

        response = self.chat(
            prompt=prompt,
            system=system,
            model=model,
            stop=stop,
            prompt_version=prompt_version,
        )
        return self.extract_content(response)


_default_client: Optional[LLMClient] = None


def _client() -> LLMClient:
    global _default_client
    if _default_client is None:
        _default_client = LLMClient()
    return _default_client


def complete(
    prompt: str,
    *,
    system: Optional[str] = None,
    model: Optional[str] = None,
    stop: Optional[Sequence[str]] = None,
    prompt_version: str = "adhoc",
) -> str:
    """Call the shared LLM client and return the completion text."""

    return _client().complete(
        prompt,
        system=system,
        model=model,
        stop=stop,
        prompt_version=prompt_version,
    )


__all__ = ["InferenceError", "LLMClient", "complete"]
