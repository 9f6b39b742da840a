"""Tests for distance, state name and duration helpers."""

import pytest

from models.route import AdminArea, LatLng
from route_analysis.geo import (
    STATE_CODE_TO_NAME,
    STATE_NAMES,
    format_duration,
    haversine_miles,
    resolve_state_code,
    round_tenth,
    state_name,
)

NEW_YORK = LatLng(lat=40.7128, lng=-74.0060)
LOS_ANGELES = LatLng(lat=34.0522, lng=-118.2437)


def test_haversine_new_york_to_los_angeles():
    assert haversine_miles(NEW_YORK, LOS_ANGELES) == pytest.approx(2445, abs=20)


def test_haversine_is_symmetric_and_zero_for_same_point():
    assert haversine_miles(NEW_YORK, NEW_YORK) == 0
    assert haversine_miles(NEW_YORK, LOS_ANGELES) == pytest.approx(haversine_miles(LOS_ANGELES, NEW_YORK))


def test_state_table_has_fifty_states_and_dc():
    assert len(STATE_NAMES) == 51
    assert STATE_NAMES["District of Columbia"] == "DC"
    assert STATE_CODE_TO_NAME["TX"] == "Texas"


@pytest.mark.parametrize(
    "area,code",
    [
        (AdminArea(short_name="TX", long_name="Texas"), "TX"),
        (AdminArea(short_name="tx", long_name="Texas"), "TX"),
        (AdminArea(short_name="", long_name="New Mexico"), "NM"),
        (AdminArea(short_name="Baja California", long_name="Baja California"), None),
        (None, None),
    ],
)
def test_resolve_state_code(area, code):
    assert resolve_state_code(area) == code


def test_state_name_falls_back_to_code():
    assert state_name("OK") == "Oklahoma"
    assert state_name("ON") == "ON"


@pytest.mark.parametrize("minutes,text", [(125, "2h 5m"), (45, "45m"), (120, "2h"), (0, "0m")])
def test_format_duration(minutes, text):
    assert format_duration(minutes) == text


def test_round_tenth_rounds_half_up():
    assert round_tenth(2.25) == 2.3
    assert round_tenth(99.99) == 100.0
