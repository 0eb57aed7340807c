"""Core utilities for Yatra."""

from .dates import days_between, is_valid_trip_date, parse_trip_date
from .extract import extract_json
from .llm import InferenceError, LLMClient

__all__ = [
    "InferenceError",
    "LLMClient",
    "days_between",
    "extract_json",
    "is_valid_trip_date",
    "parse_trip_date",
]
