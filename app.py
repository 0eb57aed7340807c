"""Command line entry point for the Yatra trip planner."""
from __future__ import annotations

import argparse
import json
import logging
import sys
from typing import Optional, Sequence

from dotenv import find_dotenv, load_dotenv
from rich.console import Console
from rich.markup import escape

from yatra.schemas import validate_trip_request
from yatra.workflows import TripPipeline, TripPipelineError


_MODES: Sequence[str] = ("trip", "tour", "weather", "detailed")

console = Console()


def configure(verbose: bool = False) -> None:
    """Load ``.env`` from the working directory and set up logging.

    Settings are read when the pipeline is built, so this must run first.
    """

    load_dotenv(find_dotenv(usecwd=True))
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Plan a multi-day trip with LLM agents.")
    parser.add_argument("--city", required=True)
    parser.add_argument("--start", required=True, help="start date, dd/mm/yy")
    parser.add_argument("--end", required=True, help="end date, dd/mm/yy")
    parser.add_argument("--mode", choices=_MODES, default="trip")
    parser.add_argument("--json", action="store_true", help="print raw JSON output")
    parser.add_argument("--verbose", action="store_true")
    return parser


def _print_text(text: str) -> None:
    if text:
        console.print(text, markup=False, highlight=False)
    else:
        console.print("[yellow]No itinerary was produced.[/]")


def _render(mode: str, result: object, as_json: bool) -> None:
    if isinstance(result, list):
        payload = [item.model_dump(by_alias=True) for item in result]
    else:
        payload = result.model_dump(by_alias=True)

    if as_json:
        console.print_json(json.dumps(payload, ensure_ascii=False))
        return

    if mode == "trip":
        console.rule(f"[bold cyan]{escape(payload['city'])} · {payload['total_days']} days")
        _print_text(payload["narrative"])
        if payload["replan_rounds"]:
            console.print(
                f"[dim]Re-planned {payload['replan_rounds']} time(s) to avoid rain.[/]"
            )
    elif mode == "detailed":
        console.rule(f"[bold cyan]{escape(payload['city'])} · {payload['total_days']} days")
        _print_text(payload["trip_plan"])
    elif mode == "tour":
        for day in payload["days"]:
            console.print(f"[bold]Day {day['day']}:[/] {escape(', '.join(day['places']))}")
        if not payload["days"]:
            console.print("[yellow]No places were suggested.[/]")
    else:
        for entry in payload:
            console.print(
                f"[bold]{escape(entry['place'])}[/]: "
                f"{escape(entry['weather'])} {escape(entry['temperature'])}"
            )
        if not payload:
            console.print("[yellow]No weather data available.[/]")


def main(argv: Optional[Sequence[str]] = None) -> int:
    args = _build_parser().parse_args(argv)
    configure(verbose=args.verbose)

    try:
        request = validate_trip_request(args.city, args.start, args.end)
    except ValueError as exc:
        console.print(f"[bold red]{escape(str(exc))}[/]")
        return 2

    pipeline = TripPipeline()
    operations = {
        "trip": pipeline.run_trip,
        "tour": pipeline.run_tour_only,
        "weather": pipeline.run_weather_only,
        "detailed": pipeline.run_detailed_trip,
    }

    try:
        with console.status("Planning your trip…"):
            result = operations[args.mode](request.city, request.start_date, request.end_date)
    except TripPipelineError as exc:
        console.print(f"[bold red]{escape(exc.user_message)}[/]")
        return 1

    _render(args.mode, result, args.json)
    return 0


if __name__ == "__main__":
    sys.exit(main())
