"""
Dimension and weight normalization.

Source data mixes plain inch measurements with feet.inches shorthand
("10.6" meaning 10 ft 6 in), so numeric values are disambiguated by a
per-dimension threshold: anything above it is already inches.
"""

import math
import re
from collections.abc import Mapping
from typing import Any, Literal

from pydantic import BaseModel, Field

from common.config import config
from models.trucks import Envelope

DimensionKind = Literal["length", "width", "height"]

_LEADING_NUMBER = re.compile(r"^\s*([-+]?(?:\d+(?:\.\d*)?|\.\d+))")
_FEET_INCHES = re.compile(
    r"(\d+(?:\.\d+)?)\s*(?:'|feet|foot|ft\.?)\s*-?\s*(?:(\d+(?:\.\d+)?)\s*(?:\"|''|inches|inch|in\.?)?)?",
    re.IGNORECASE,
)
_DASH = re.compile(r"(\d+)\s*-\s*(\d+)")
_NUMBER = re.compile(r"\d+(?:\.\d+)?|\.\d+")
_TONS = re.compile(r"(\d+(?:\.\d+)?|\.\d+)\s*tons?\b")


class DimensionThresholds(BaseModel):
    """Values above a threshold are plain inches; at or below, feet.inches."""

    length_threshold: float = Field(default_factory=lambda: config.length_threshold)
    width_threshold: float = Field(default_factory=lambda: config.width_threshold)
    height_threshold: float = Field(default_factory=lambda: config.height_threshold)


def default_legal_limits() -> Envelope:
    return Envelope(
        length=config.legal_length,
        width=config.legal_width,
        height=config.legal_height,
        weight=config.legal_weight,
    )


def round_half_up(value: float) -> int:
    return math.floor(value + 0.5)


def _finite(value: float) -> float:
    """Overflowing input (hundreds of digits) counts as unreadable."""
    return value if math.isfinite(value) else 0


def to_number(value: Any) -> float | None:
    """Numeric value of an int/float or the leading number of a string (parseFloat semantics)."""
    if isinstance(value, bool) or value is None:
        return None
    if isinstance(value, (int, float)):
        return float(value) if math.isfinite(value) else None
    match = _LEADING_NUMBER.match(str(value))
    if not match:
        return None
    number = float(match.group(1))
    return number if math.isfinite(number) else None


def _resolve_thresholds(thresholds: DimensionThresholds | Mapping[str, float] | None) -> DimensionThresholds:
    if thresholds is None:
        return DimensionThresholds()
    if isinstance(thresholds, DimensionThresholds):
        return thresholds
    return DimensionThresholds(**thresholds)


def parse_dimension(
    value: Any,
    kind: DimensionKind,
    thresholds: DimensionThresholds | Mapping[str, float] | None = None,
) -> int:
    """
    Parse a dimension that is either plain inches or feet.inches shorthand.

    The first decimal digit is inches, not a fraction of a foot:
    10.6 -> 10 ft 6 in = 126, and 10.5 -> 125 (not 126).

    Examples:
        parse_dimension(10.6, "length", {"length_threshold": 20}) -> 126
        parse_dimension(126, "length", {"length_threshold": 20}) -> 126
        parse_dimension("abc", "height") -> 0
    """
    number = to_number(value)
    if number is None:
        return 0

    threshold = getattr(_resolve_thresholds(thresholds), f"{kind}_threshold")
    if number > threshold:
        return round_half_up(number)

    feet = math.floor(number)
    inches = round_half_up((number - feet) * 10)
    return feet * 12 + inches


def _split_feet_inches(inches: float) -> tuple[int, int]:
    feet = math.floor(inches / 12)
    remaining = round_half_up(inches - feet * 12)
    if remaining == 12:
        feet, remaining = feet + 1, 0
    return feet, remaining


def inches_to_feet_inches(inches: float) -> str:
    """126 -> 10' 6\""""
    if not inches or inches <= 0:
        return "0' 0\""
    feet, remaining = _split_feet_inches(inches)
    return f"{feet}' {remaining}\""


def format_dimension(inches: float) -> str:
    """126 -> 10'-6\""""
    if not inches or inches <= 0:
        return "-"
    feet, remaining = _split_feet_inches(inches)
    return f"{feet}'-{remaining}\""


def convert_to_inches(value: str | None) -> float:
    """
    Convert free-text dimensions to inches.

    Tried in order: feet-inches with a foot mark ("10'6\"", "10 ft 6 in"),
    the dash form ("10-6"), then a bare number taken as inches ("126").
    """
    if not value:
        return 0
    text = str(value).strip()

    match = _FEET_INCHES.search(text)
    if match:
        feet = float(match.group(1))
        inches = float(match.group(2) or 0)
        return _finite(feet * 12 + inches)

    match = _DASH.search(text)
    if match:
        return _finite(float(match.group(1)) * 12 + float(match.group(2)))

    match = _NUMBER.search(text)
    return _finite(float(match.group(0))) if match else 0


def convert_to_lbs(value: str | float | None) -> int:
    """
    Convert weight input to pounds.

    Handles "5000", "5,000", "5000 lbs" and "2.5 tons" (short tons).
    """
    if value is None or isinstance(value, bool):
        return 0
    if isinstance(value, (int, float)):
        return round_half_up(value) if math.isfinite(value) else 0

    text = str(value).lower().replace(",", "")

    match = _TONS.search(text)
    if match:
        return round_half_up(_finite(float(match.group(1)) * 2000))

    match = _NUMBER.search(text)
    if match:
        return round_half_up(_finite(float(match.group(0))))

    return 0


def is_oversize(length: float, width: float, height: float, limits: Envelope | None = None) -> bool:
    """Any dimension over its legal limit requires an oversize permit."""
    limits = limits or default_legal_limits()
    return length > limits.length or width > limits.width or height > limits.height


def is_overweight(weight: float, limit: float | None = None) -> bool:
    return weight > (config.legal_weight if limit is None else limit)
