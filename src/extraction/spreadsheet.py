"""
Spreadsheet cargo lists (.xlsx, .xls, .csv).

Headers are matched against known aliases first. When a dimension or weight
column cannot be matched, an optional async column mapper (the LLM column
mapping agent) is asked to fill the gaps.
"""

import math
import re
import zipfile
from collections.abc import Awaitable, Callable
from io import BytesIO
from typing import Any

import pandas as pd
from pydantic import BaseModel, Field, ValidationError
from xlrd import XLRDError

from common.errors import InputError, first_validation_error
from common.logging import get_logger
from extraction.rows import to_bool, to_quantity
from models.cargo import CargoItem, ColumnMapping
from planner.dimensions import (
    DimensionKind,
    convert_to_inches,
    convert_to_lbs,
    parse_dimension,
    round_half_up,
    to_number,
)

logger = get_logger(__name__)

SPREADSHEET_EXTENSIONS = (".xlsx", ".xls", ".csv")

CARGO_FIELDS = (
    "description",
    "sku",
    "quantity",
    "length",
    "width",
    "height",
    "weight",
    "stackable",
    "fragile",
    "hazmat",
)
REQUIRED_FIELDS = ("length", "width", "height", "weight")

# normalized header -> cargo field
COLUMN_ALIASES = {
    "description": "description",
    "desc": "description",
    "item": "description",
    "item description": "description",
    "name": "description",
    "equipment": "description",
    "commodity": "description",
    "make model": "description",
    "sku": "sku",
    "part": "sku",
    "part number": "sku",
    "part no": "sku",
    "model": "sku",
    "model number": "sku",
    "quantity": "quantity",
    "qty": "quantity",
    "count": "quantity",
    "pcs": "quantity",
    "pieces": "quantity",
    "units": "quantity",
    "length": "length",
    "len": "length",
    "l": "length",
    "overall length": "length",
    "width": "width",
    "wid": "width",
    "w": "width",
    "overall width": "width",
    "height": "height",
    "ht": "height",
    "hgt": "height",
    "h": "height",
    "overall height": "height",
    "weight": "weight",
    "wt": "weight",
    "gross weight": "weight",
    "unit weight": "weight",
    "weight each": "weight",
    "lbs": "weight",
    "pounds": "weight",
    "stackable": "stackable",
    "stack": "stackable",
    "fragile": "fragile",
    "hazmat": "hazmat",
    "hazardous": "hazmat",
    "dangerous goods": "hazmat",
}

_UNIT_TOKENS = {
    "in": "in",
    "inch": "in",
    "inches": "in",
    "ft": "ft",
    "feet": "ft",
    "m": "m",
    "meters": "m",
    "cm": "cm",
    "lb": "lb",
    "lbs": "lb",
    "pounds": "lb",
    "kg": "kg",
    "kgs": "kg",
    "ton": "ton",
    "tons": "ton",
}
_PLAIN_NUMBER = re.compile(r"^\s*[-+]?(?:\d+(?:\.\d+)?|\.\d+)\s*$")
_FEET_INCHES_ONLY = {"length_threshold": math.inf, "width_threshold": math.inf, "height_threshold": math.inf}

ColumnMapper = Callable[[list[str], list[dict[str, str]]], Awaitable[dict[str, str | None]]]


class SpreadsheetParse(BaseModel):
    items: list[CargoItem] = Field(default_factory=list)
    column_mapping: ColumnMapping = "pattern"
    columns: dict[str, str] = Field(default_factory=dict, description="Cargo field -> sheet header")
    rows_read: int = 0


def is_spreadsheet(filename: str) -> bool:
    return filename.lower().endswith(SPREADSHEET_EXTENSIONS)


def read_sheet(content: bytes, filename: str) -> pd.DataFrame:
    """First sheet as strings; empty cells are ''."""
    name = filename.lower()
    if not is_spreadsheet(name):
        raise InputError(f"Unsupported file type: {filename}. Supported: images, Excel (.xlsx/.xls), CSV")

    try:
        if name.endswith(".csv"):
            df = pd.read_csv(BytesIO(content), dtype=str, keep_default_na=False)
        else:
            engine = "openpyxl" if name.endswith(".xlsx") else "xlrd"
            df = pd.read_excel(BytesIO(content), dtype=str, keep_default_na=False, engine=engine)
    except (ValueError, OSError, zipfile.BadZipFile, XLRDError) as e:
        raise InputError(f"Could not read spreadsheet {filename}: {e}") from e

    df.columns = [str(col).strip() for col in df.columns]
    return df


def normalize_header(header: str) -> str:
    """'Length (ft)' -> 'length', 'Gross_Weight' -> 'gross weight'"""
    text = re.sub(r"\(.*?\)|\[.*?\]", " ", str(header).lower())
    return re.sub(r"[^a-z0-9]+", " ", text).strip()


def header_unit(header: str) -> str | None:
    """Unit named in a header, e.g. 'Length (ft)' -> 'ft', 'Weight kg' -> 'kg'."""
    units = {_UNIT_TOKENS[t] for t in re.findall(r"[a-z]+", str(header).lower()) if t in _UNIT_TOKENS}
    # 'in' is also a preposition ('Length in feet')
    return next((unit for unit in ("ft", "m", "cm", "kg", "ton", "lb", "in") if unit in units), None)


def match_columns(headers: list[str]) -> dict[str, str]:
    """Cargo field -> header for headers with a known alias; the first match wins."""
    mapping: dict[str, str] = {}
    for header in headers:
        normalized = normalize_header(header)
        field = COLUMN_ALIASES.get(normalized)
        if field is None:
            # 'weight lbs', 'length in' and similar
            words = [w for w in normalized.split() if w not in _UNIT_TOKENS]
            field = COLUMN_ALIASES.get(" ".join(words))
        if field and field not in mapping:
            mapping[field] = header
    return mapping


def missing_fields(mapping: dict[str, str]) -> list[str]:
    return [field for field in REQUIRED_FIELDS if field not in mapping]


def dimension_cell(value: str, kind: DimensionKind, unit: str | None = None) -> float:
    """
    Inches from a dimension cell.

    Plain numbers follow the header unit when it names one ('in', 'm', 'cm');
    a 'ft' header means feet.inches shorthand, and no unit means the threshold
    rule of parse_dimension. Text like 10'6" goes through convert_to_inches.
    """
    text = str(value).strip()
    if not text:
        return 0
    if not _PLAIN_NUMBER.match(text):
        return convert_to_inches(text)

    number = to_number(text)
    if number is None:
        return 0
    if unit == "in":
        return round_half_up(number)
    if unit == "m":
        return round_half_up(number * 39.37)
    if unit == "cm":
        return round_half_up(number / 2.54)
    if unit == "ft":
        return parse_dimension(number, kind, _FEET_INCHES_ONLY)
    return parse_dimension(number, kind)


def weight_cell(value: str, unit: str | None = None) -> float:
    text = str(value).strip()
    if not text:
        return 0
    plain = text.replace(",", "")
    number = to_number(plain) if _PLAIN_NUMBER.match(plain) else None
    if number is not None:
        if unit == "kg":
            return round_half_up(number * 2.20462)
        if unit == "ton":
            return round_half_up(number * 2000)
    return convert_to_lbs(text)


def _row_to_item(row: dict[str, str], columns: dict[str, str], index: int) -> CargoItem:
    def cell(field: str) -> str:
        header = columns.get(field)
        return str(row.get(header, "")).strip() if header else ""

    def dims(kind: DimensionKind) -> float:
        return dimension_cell(cell(kind), kind, header_unit(columns.get(kind, "")))

    return CargoItem(
        id=f"item-{index}",
        sku=cell("sku") or None,
        description=cell("description") or "Unknown Item",
        quantity=to_quantity(cell("quantity")),
        length=dims("length"),
        width=dims("width"),
        height=dims("height"),
        weight=weight_cell(cell("weight"), header_unit(columns.get("weight", ""))),
        stackable=to_bool(cell("stackable")),
        fragile=to_bool(cell("fragile")),
        hazmat=to_bool(cell("hazmat")),
    )


def items_from_sheet(df: pd.DataFrame, columns: dict[str, str]) -> list[CargoItem]:
    """One item per non-blank row, in sheet order."""
    items = []
    # sheet row numbers: the header is row 1
    for row_number, row in enumerate(df.to_dict(orient="records"), start=2):
        if not any(str(value).strip() for value in row.values()):
            continue
        try:
            items.append(_row_to_item(row, columns, len(items)))
        except ValidationError as e:
            raise InputError(f"Invalid spreadsheet row {row_number}: {first_validation_error(e)}") from e
    return items


def sample_rows(df: pd.DataFrame, limit: int = 5) -> list[dict[str, str]]:
    return [{str(k): str(v) for k, v in row.items()} for row in df.head(limit).to_dict(orient="records")]


def _merge_ai_columns(
    columns: dict[str, str], suggested: dict[str, Any], headers: list[str]
) -> dict[str, str]:
    """Fill unmatched fields with suggested headers that exist and are not taken."""
    merged = dict(columns)
    used = set(merged.values())
    for field in CARGO_FIELDS:
        header = suggested.get(field)
        if field in merged or not header or header not in headers or header in used:
            continue
        merged[field] = header
        used.add(header)
    return merged


async def parse_spreadsheet(content: bytes, filename: str, column_mapper: ColumnMapper | None = None) -> SpreadsheetParse:
    """Read a spreadsheet into CargoItems, asking column_mapper only when required columns are missing."""
    df = read_sheet(content, filename)
    headers = list(df.columns)
    columns = match_columns(headers)
    method: ColumnMapping = "pattern"

    missing = missing_fields(columns)
    if missing and column_mapper is not None and len(df):
        logger.info(f"[Extract] {filename}: no header match for {missing}, asking column mapper")
        suggested = await column_mapper(headers, sample_rows(df))
        merged = _merge_ai_columns(columns, suggested, headers)
        if merged != columns:
            columns, method = merged, "AI"
        missing = missing_fields(columns)

    if missing:
        logger.warning(f"[Extract] {filename}: columns not found for {missing}")

    items = items_from_sheet(df, columns)
    logger.info(f"[Extract] {filename}: {len(items)} items from {len(df)} rows (columns by {method})")
    return SpreadsheetParse(items=items, column_mapping=method, columns=columns, rows_read=len(df))
