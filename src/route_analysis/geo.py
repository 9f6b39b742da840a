"""Geodesic distance, U.S. state names, and duration formatting."""

import math

from models.route import AdminArea, LatLng

EARTH_RADIUS_MILES = 3958.8
METERS_TO_MILES = 0.000621371

STATE_NAMES: dict[str, str] = {
    "Alabama": "AL",
    "Alaska": "AK",
    "Arizona": "AZ",
    "Arkansas": "AR",
    "California": "CA",
    "Colorado": "CO",
    "Connecticut": "CT",
    "Delaware": "DE",
    "Florida": "FL",
    "Georgia": "GA",
    "Hawaii": "HI",
    "Idaho": "ID",
    "Illinois": "IL",
    "Indiana": "IN",
    "Iowa": "IA",
    "Kansas": "KS",
    "Kentucky": "KY",
    "Louisiana": "LA",
    "Maine": "ME",
    "Maryland": "MD",
    "Massachusetts": "MA",
    "Michigan": "MI",
    "Minnesota": "MN",
    "Mississippi": "MS",
    "Missouri": "MO",
    "Montana": "MT",
    "Nebraska": "NE",
    "Nevada": "NV",
    "New Hampshire": "NH",
    "New Jersey": "NJ",
    "New Mexico": "NM",
    "New York": "NY",
    "North Carolina": "NC",
    "North Dakota": "ND",
    "Ohio": "OH",
    "Oklahoma": "OK",
    "Oregon": "OR",
    "Pennsylvania": "PA",
    "Rhode Island": "RI",
    "South Carolina": "SC",
    "South Dakota": "SD",
    "Tennessee": "TN",
    "Texas": "TX",
    "Utah": "UT",
    "Vermont": "VT",
    "Virginia": "VA",
    "Washington": "WA",
    "West Virginia": "WV",
    "Wisconsin": "WI",
    "Wyoming": "WY",
    "District of Columbia": "DC",
}

STATE_CODE_TO_NAME: dict[str, str] = {code: name for name, code in STATE_NAMES.items()}


def haversine_miles(a: LatLng, b: LatLng) -> float:
    """Great-circle distance in miles."""
    d_lat = math.radians(b.lat - a.lat)
    d_lng = math.radians(b.lng - a.lng)
    h = (
        math.sin(d_lat / 2) ** 2
        + math.cos(math.radians(a.lat))
        * math.cos(math.radians(b.lat))
        * math.sin(d_lng / 2) ** 2
    )
    return EARTH_RADIUS_MILES * 2 * math.atan2(math.sqrt(h), math.sqrt(1 - h))


def resolve_state_code(area: AdminArea | None) -> str | None:
    """2-letter short name if present, else the long name looked up in STATE_NAMES."""
    if area is None:
        return None
    if area.short_name and len(area.short_name) == 2:
        return area.short_name.upper()
    return STATE_NAMES.get(area.long_name)


def state_name(code: str) -> str:
    return STATE_CODE_TO_NAME.get(code, code)


def round_tenth(value: float) -> float:
    """Half-up to one decimal place."""
    return math.floor(value * 10 + 0.5) / 10


def format_duration(minutes: int) -> str:
    """125 -> '2h 5m', 45 -> '45m', 120 -> '2h'"""
    hours, mins = divmod(int(minutes), 60)
    if hours == 0:
        return f"{mins}m"
    if mins == 0:
        return f"{hours}h"
    return f"{hours}h {mins}m"
