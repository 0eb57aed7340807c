"""Data schemas for the Yatra trip planner."""

from __future__ import annotations

from typing import Iterable, List, Optional

from pydantic import (
    AliasChoices,
    BaseModel,
    ConfigDict,
    Field,
    PositiveInt,
    field_validator,
    model_validator,
)

from yatra.core.dates import is_valid_trip_date


class TripRequest(BaseModel):
    """A request to plan a trip to ``city`` between two ``dd/mm/yy`` dates."""

    city: str
    start_date: str
    end_date: str


def validate_trip_request(
    city: Optional[str],
    start_date: Optional[str],
    end_date: Optional[str],
) -> TripRequest:
    """Apply the caller-side checks a request must pass before planning."""

    if not city or not city.strip():
        raise ValueError("City is required")
    if not start_date or not end_date:
        raise ValueError("Start and end dates are required")
    if not is_valid_trip_date(start_date) or not is_valid_trip_date(end_date):
        raise ValueError("Dates must be in dd/mm/yy format")
    return TripRequest(city=city.strip(), start_date=start_date, end_date=end_date)


class DayPlaces(BaseModel):
    """Attractions scheduled for one day of the trip."""

    day: PositiveInt
    date: Optional[str] = None
    places: List[str] = Field(
        default_factory=list,
        validation_alias=AliasChoices("places", "attractions", "spots"),
    )

    model_config = ConfigDict(populate_by_name=True)

    @field_validator("places", mode="before")
    @classmethod
    def _drop_blank_places(cls, value: object) -> object:
        if isinstance(value, str):
            value = [value]
        if not isinstance(value, (list, tuple)):
            return value
        cleaned: List[str] = []
        for item in value:
            if isinstance(item, dict):
                item = item.get("name") or item.get("place")
            if isinstance(item, str) and item.strip():
                cleaned.append(item.strip())
        return cleaned

    @field_validator("date", mode="before")
    @classmethod
    def _stringify_date(cls, value: object) -> object:
        if value is None or isinstance(value, str):
            return value
        return str(value)


class TourPlan(BaseModel):
    """Ordered day-by-day attractions for a trip."""

    days: List[DayPlaces] = Field(default_factory=list)

    @model_validator(mode="before")
    @classmethod
    def _unwrap_common_wrappers(cls, data: object) -> object:
        """Support the nesting and numbering variants returned by the LLM."""

        if isinstance(data, list):
            data = {"days": data}
        if not isinstance(data, dict):
            return data

        candidate = data
        for key in ("tour_plan", "tour", "itinerary", "plan"):
            nested = candidate.get(key)
            if isinstance(nested, dict):
                candidate = nested
            elif isinstance(nested, list) and "days" not in candidate:
                candidate = {"days": nested}

        days = candidate.get("days")
        if not isinstance(days, list):
            return candidate

        numbered: List[object] = []
        for index, day in enumerate(days, start=1):
            if isinstance(day, dict) and not day.get("day"):
                day = {**day, "day": index}
            numbered.append(day)
        return {**candidate, "days": numbered}

    def places(self) -> List[str]:
        """Return every place in visiting order."""

        return [place for day in self.days for place in day.places]


class WeatherEntry(BaseModel):
    """Forecast for a single place."""

    place: str = Field(
        default="",
        validation_alias=AliasChoices("place", "city", "name", "location"),
    )
    date: str = ""
    weather: str = Field(
        default="",
        validation_alias=AliasChoices(
            "weather", "Weather Condition", "weather_condition", "condition"
        ),
    )
    temperature: str = Field(
        default="",
        validation_alias=AliasChoices("temperature", "temp"),
    )

    model_config = ConfigDict(populate_by_name=True)

    @field_validator("place", "date", "weather", "temperature", mode="before")
    @classmethod
    def _coerce_to_text(cls, value: object) -> object:
        if value is None:
            return ""
        if isinstance(value, (int, float)):
            return str(value)
        return value


WeatherReport = List[WeatherEntry]


class TransportRoute(BaseModel):
    """How to reach ``place`` from the city's two reference departure points."""

    place: str = Field(
        default="",
        validation_alias=AliasChoices("place", "name", "destination"),
    )
    from_majestic: str = Field(
        default="",
        alias="fromMajestic",
        validation_alias=AliasChoices("fromMajestic", "from_majestic", "from_hub"),
    )
    from_airport: str = Field(
        default="",
        alias="fromAirport",
        validation_alias=AliasChoices("fromAirport", "from_airport"),
    )

    model_config = ConfigDict(populate_by_name=True)


TransportPlan = List[TransportRoute]

TripNarrative = str

ExcludeSet = List[str]


class TripPlan(BaseModel):
    """Everything produced by one full planning run."""

    city: str
    start_date: str
    end_date: str
    total_days: int
    tour_plan: TourPlan = Field(default_factory=TourPlan)
    weather_report: List[WeatherEntry] = Field(default_factory=list)
    transport_plan: List[TransportRoute] = Field(default_factory=list)
    narrative: str = ""
    replan_rounds: int = 0


class DetailedTrip(BaseModel):
    """A single-shot, plain-text day-wise trip plan."""

    city: str
    start_date: str
    end_date: str
    total_days: int
    trip_plan: str = ""


def unique_places(places: Iterable[str]) -> List[str]:
    """De-duplicate ``places`` case-insensitively while keeping first-seen order."""

    seen: set[str] = set()
    ordered: List[str] = []
    for place in places:
        key = place.strip().lower()
        if not key or key in seen:
            continue
        seen.add(key)
        ordered.append(place.strip())
    return ordered


__all__ = [
    "DayPlaces",
    "DetailedTrip",
    "ExcludeSet",
    "TourPlan",
    "TransportPlan",
    "TransportRoute",
    "TripNarrative",
    "TripPlan",
    "TripRequest",
    "WeatherEntry",
    "WeatherReport",
    "unique_places",
    "validate_trip_request",
]
