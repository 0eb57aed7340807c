"""Workflow entry points for orchestrating Yatra agents."""

from .trip_pipeline import (
    TripPipeline,
    TripPipelineError,
    format_pipeline_error,
    run_detailed_trip,
    run_tour_only,
    run_trip,
    run_weather_only,
)

__all__ = [
    "TripPipeline",
    "TripPipelineError",
    "format_pipeline_error",
    "run_detailed_trip",
    "run_tour_only",
    "run_trip",
    "run_weather_only",
]
