#!/usr/bin/env python3
"""
Agent Skill Toolkit - Weather Lookup

Geocodes a city with the open-meteo geocoding API, then prints either the
current weather or the forecast for a single date.

Usage:
    python scripts/get_weather.py Berlin
    python scripts/get_weather.py "New York" 2026-10-21

Exit codes:
    0 - Weather printed
    1 - Invalid date, unknown city, no forecast, or network error
"""

from __future__ import annotations

import argparse
import re
import sys
from dataclasses import dataclass
from typing import Any

import requests

GEOCODING_URL = "https://geocoding-api.open-meteo.com/v1/search"
FORECAST_URL = "https://api.open-meteo.com/v1/forecast"

DATE_PATTERN = re.compile(r"^\d{4}-\d{2}-\d{2}$")

REQUEST_TIMEOUT = 30


class WeatherError(Exception):
    """Lookup failed; the message is ready to show to the user."""


@dataclass
class Location:
    name: str
    latitude: float
    longitude: float


def _get_json(url: str, params: dict[str, Any]) -> dict[str, Any]:
    try:
        response = requests.get(url, params=params, timeout=REQUEST_TIMEOUT)
        response.raise_for_status()
        return response.json()
    except requests.RequestException as exc:
        raise WeatherError(f"Network error: {exc}") from exc


def geocode(city: str) -> Location:
    data = _get_json(GEOCODING_URL, {"name": city, "count": 1})
    results = data.get("results") or []
    if not results:
        raise WeatherError(f"City not found: {city}")
    first = results[0]
    return Location(name=first["name"], latitude=first["latitude"], longitude=first["longitude"])


def current_weather(location: Location) -> list[str]:
    data = _get_json(
        FORECAST_URL,
        {
            "latitude": location.latitude,
            "longitude": location.longitude,
            "current": "temperature_2m,wind_speed_10m,weather_code",
        },
    )
    current = data["current"]
    return [
        f"Weather for {location.name}:",
        f"  Temperature: {current['temperature_2m']}°C",
        f"  Wind Speed: {current['wind_speed_10m']} km/h",
        f"  Condition Code: {current['weather_code']}",
    ]


def forecast_for_date(location: Location, date: str) -> list[str]:
    data = _get_json(
        FORECAST_URL,
        {
            "latitude": location.latitude,
            "longitude": location.longitude,
            "daily": "temperature_2m_max,temperature_2m_min,wind_speed_10m_max,weather_code",
            "start_date": date,
            "end_date": date,
        },
    )
    daily = data.get("daily") or {}
    if not daily.get("time"):
        raise WeatherError(f"No forecast available for date: {date}")
    return [
        f"Weather forecast for {location.name} on {date}:",
        f"  Temperature: {daily['temperature_2m_min'][0]}°C - {daily['temperature_2m_max'][0]}°C",
        f"  Max Wind Speed: {daily['wind_speed_10m_max'][0]} km/h",
        f"  Condition Code: {daily['weather_code'][0]}",
    ]


def get_weather(city: str, date: str | None = None) -> list[str]:
    """Return the report lines for a city, now or on a YYYY-MM-DD date."""
    if date is not None and not DATE_PATTERN.match(date):
        raise WeatherError("Invalid date format. Use YYYY-MM-DD")
    location = geocode(city)
    if date is None:
        return current_weather(location)
    return forecast_for_date(location, date)


def main() -> int:
    """Main entry point."""
    parser = argparse.ArgumentParser(description="Show current weather or a single-date forecast")
    parser.add_argument("city", help="City name")
    parser.add_argument("date", nargs="?", help="Forecast date, YYYY-MM-DD (default: current weather)")
    args = parser.parse_args()

    try:
        lines = get_weather(args.city, args.date)
    except WeatherError as exc:
        print(f"Error: {exc}", file=sys.stderr)
        return 1

    for line in lines:
        print(line)
    return 0


if __name__ == "__main__":
    sys.exit(main())
