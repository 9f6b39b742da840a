"""Coercion of loosely typed row dicts (client-parsed sheets, JSON) into CargoItems."""

from collections.abc import Mapping
from typing import Any

from models.cargo import CargoItem
from planner.dimensions import to_number

_FALSE_STRINGS = {"", "false", "no", "n", "0", "off", "none", "null"}


def first_present(row: Mapping[str, Any], *keys: str) -> Any:
    """Value of the first key with a truthy value, else None."""
    for key in keys:
        value = row.get(key)
        if value:
            return value
    return None


def to_bool(value: Any) -> bool:
    if isinstance(value, str):
        return value.strip().lower() not in _FALSE_STRINGS
    return bool(value)


def to_quantity(value: Any) -> int:
    """Positive unit count; missing, zero or non-numeric means 1."""
    number = to_number(value)
    if number is None or number < 1:
        return 1
    return int(number)


def to_measure(value: Any) -> float:
    number = to_number(value)
    return number if number is not None else 0


def item_from_row(row: Mapping[str, Any], index: int) -> CargoItem:
    """
    Build a CargoItem from a row dict.

    Description comes from description|name|item, quantity from quantity|qty.
    Numbers are taken as given (inches / pounds); anything non-numeric is 0.
    """
    description = str(first_present(row, "description", "name", "item") or "").strip()
    sku = row.get("sku")
    return CargoItem(
        id=str(row.get("id") or f"item-{index}"),
        sku=str(sku) if sku else None,
        description=description or "Unknown Item",
        quantity=to_quantity(first_present(row, "quantity", "qty")),
        length=to_measure(row.get("length")),
        width=to_measure(row.get("width")),
        height=to_measure(row.get("height")),
        weight=to_measure(row.get("weight")),
        stackable=to_bool(row.get("stackable")),
        fragile=to_bool(row.get("fragile")),
        hazmat=to_bool(row.get("hazmat")),
    )
