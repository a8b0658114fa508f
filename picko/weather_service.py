"""Fetch forecasts from Open-Meteo and normalize them into a WeatherSnapshot."""
from __future__ import annotations

from typing import Any, Dict, List, Protocol

import requests

from picko.config import settings
from picko.domain import CurrentConditions, DayForecast, WeatherSnapshot
from utils.logging_utils import get_tagged_logger

logger = get_tagged_logger(__name__, tag="weather_service")

session = requests.Session()

UNKNOWN_LOCATION = "Unknown Location"

CURRENT_VARS = [
    "temperature_2m",
    "relative_humidity_2m",
    "apparent_temperature",
    "weather_code",
    "wind_speed_10m",
]
DAILY_VARS = [
    "weather_code",
    "temperature_2m_max",
    "temperature_2m_min",
    "precipitation_probability_max",
    "wind_speed_10m_max",
]

# WMO weather interpretation codes
WEATHER_DESCRIPTIONS: Dict[int, str] = {
    0: "Clear",
    1: "Mainly Clear",
    2: "Partly Cloudy",
    3: "Overcast",
    45: "Foggy",
    48: "Foggy",
    51: "Light Drizzle",
    53: "Drizzle",
    55: "Heavy Drizzle",
    61: "Light Rain",
    63: "Rain",
    65: "Heavy Rain",
    71: "Light Snow",
    73: "Snow",
    75: "Heavy Snow",
    77: "Snow Grains",
    80: "Light Showers",
    81: "Showers",
    82: "Heavy Showers",
    85: "Light Snow Showers",
    86: "Snow Showers",
    95: "Thunderstorm",
    96: "Thunderstorm with Hail",
    99: "Thunderstorm with Hail",
}


class WeatherUnavailableError(RuntimeError):
    """The forecast could not be fetched or was missing required fields."""


class WeatherProvider(Protocol):
    """Anything that can produce a WeatherSnapshot for a coordinate pair."""

    def fetch_snapshot(self, latitude: float, longitude: float) -> WeatherSnapshot:
        ...


def describe_weather_code(code: int | None) -> str:
    """Map a WMO code to a short description, ``Unknown`` if unmapped."""
    if code is None:
        return "Unknown"
    return WEATHER_DESCRIPTIONS.get(int(code), "Unknown")


def fetch_location_name(latitude: float, longitude: float) -> str:
    """Best-effort place name for the coordinates; never raises."""
    params = {
        "latitude": latitude,
        "longitude": longitude,
        "count": 1,
        "language": "en",
        "format": "json",
    }
    try:
        resp = session.get(settings.geocoding_api_url, params=params, timeout=settings.weather_timeout_seconds)
        resp.raise_for_status()
        results = resp.json().get("results") or []
    except (requests.exceptions.RequestException, ValueError) as exc:
        logger.warning("Error fetching location name: %s", exc)
        return UNKNOWN_LOCATION
    if results:
        return results[0].get("name") or UNKNOWN_LOCATION
    return UNKNOWN_LOCATION


def _daily_value(daily: Dict[str, List[Any]], field: str, index: int, default: Any = None) -> Any:
    """Return ``daily[field][index]`` or ``default`` when missing/null."""
    values = daily.get(field) or []
    if index >= len(values) or values[index] is None:
        return default
    return values[index]


def _parse_day(daily: Dict[str, List[Any]], index: int, *, default_description: str = "Unknown") -> DayForecast:
    """Build a DayForecast from column ``index`` of Open-Meteo's daily block."""
    high = _daily_value(daily, "temperature_2m_max", index)
    low = _daily_value(daily, "temperature_2m_min", index)
    if high is None or low is None:
        raise WeatherUnavailableError(f"Forecast is missing high/low for day {index}")
    code = _daily_value(daily, "weather_code", index)
    return DayForecast(
        high=round(high),
        low=round(low),
        description=describe_weather_code(code) if code is not None else default_description,
        weather_code=int(code) if code is not None else 0,
        precipitation_chance=_daily_value(daily, "precipitation_probability_max", index, 0),
        wind_speed=round(_daily_value(daily, "wind_speed_10m_max", index, 0)),
    )


def parse_forecast(data: Dict[str, Any], location: str) -> WeatherSnapshot:
    """Convert an Open-Meteo forecast response into a WeatherSnapshot."""
    try:
        current = data["current"]
        daily = data["daily"]
        current_conditions = CurrentConditions(
            temp=round(current["temperature_2m"]),
            feels_like=round(current["apparent_temperature"]),
            description=describe_weather_code(current.get("weather_code")),
            weather_code=int(current.get("weather_code") or 0),
            wind_speed=round(current.get("wind_speed_10m") or 0),
            humidity=current.get("relative_humidity_2m") or 0,
        )
    except (KeyError, TypeError) as exc:
        raise WeatherUnavailableError(f"Malformed forecast response: {exc}") from exc

    return WeatherSnapshot(
        location=location,
        current=current_conditions,
        today=_parse_day(daily, 0, default_description=current_conditions.description),
        tomorrow=_parse_day(daily, 1),
    )


def fetch_weather_snapshot(latitude: float, longitude: float) -> WeatherSnapshot:
    """Fetch current conditions plus today's and tomorrow's forecast in °F and mph."""
    params = {
        "latitude": latitude,
        "longitude": longitude,
        "current": ",".join(CURRENT_VARS),
        "daily": ",".join(DAILY_VARS),
        "temperature_unit": "fahrenheit",
        "wind_speed_unit": "mph",
        "precipitation_unit": "inch",
        "timezone": "auto",
        "forecast_days": 2,
    }
    try:
        resp = session.get(settings.weather_api_url, params=params, timeout=settings.weather_timeout_seconds)
        resp.raise_for_status()
        data = resp.json()
    except (requests.exceptions.RequestException, ValueError) as exc:
        logger.error("Error fetching weather data: %s", exc)
        raise WeatherUnavailableError("Failed to fetch weather data") from exc

    location = fetch_location_name(latitude, longitude)
    snapshot = parse_forecast(data, location)
    logger.info(
        "Fetched forecast for %s: today %s/%s, tomorrow %s/%s %s",
        snapshot.location,
        snapshot.today.high,
        snapshot.today.low,
        snapshot.tomorrow.high,
        snapshot.tomorrow.low,
        snapshot.tomorrow.description,
    )
    return snapshot


class OpenMeteoWeatherProvider(WeatherProvider):
    """WeatherProvider backed by the public Open-Meteo APIs."""

    def fetch_snapshot(self, latitude: float, longitude: float) -> WeatherSnapshot:
        return fetch_weather_snapshot(latitude, longitude)
