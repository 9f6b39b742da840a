"""Decide the cargo input variant once, at the HTTP boundary."""

import base64
from typing import Any

from pydantic import ValidationError

from common.errors import InputError, first_validation_error
from extraction.spreadsheet import is_spreadsheet
from models.analyze import CargoInput, ImageInput, ItemsInput, RowsInput, SpreadsheetInput, TextInput

INVALID_BODY = "Invalid request body. Provide text, imageBase64+mimeType, items array, or rows array"


def parse_analyze_body(body: Any) -> CargoInput:
    """
    JSON body -> input variant.

    Checked in order: text (or emailText), imageBase64 + mimeType, items, rows.
    """
    if not isinstance(body, dict):
        raise InputError(INVALID_BODY)

    text = body.get("text") or body.get("emailText")
    if text:
        if not isinstance(text, str):
            raise InputError(INVALID_BODY)
        return TextInput(text=text)

    if body.get("imageBase64") and body.get("mimeType"):
        return ImageInput(image_base64=str(body["imageBase64"]), mime_type=str(body["mimeType"]))

    if isinstance(body.get("items"), list):
        try:
            return ItemsInput(items=body["items"])
        except ValidationError as e:
            raise InputError(f"Invalid items: {first_validation_error(e)}") from e

    if isinstance(body.get("rows"), list):
        if not all(isinstance(row, dict) for row in body["rows"]):
            raise InputError("Invalid rows: every row must be an object")
        return RowsInput(rows=body["rows"])

    raise InputError(INVALID_BODY)


def input_from_upload(
    filename: str | None,
    content_type: str | None,
    content: bytes | None,
    text: str | None = None,
) -> CargoInput:
    """Multipart upload -> input variant; images by content type, spreadsheets by extension."""
    if content is not None and filename:
        content_type = content_type or ""
        if content_type.startswith("image/"):
            return ImageInput(image_base64=base64.b64encode(content).decode("ascii"), mime_type=content_type)
        if is_spreadsheet(filename):
            return SpreadsheetInput(content=content, filename=filename)
        raise InputError(
            f"Unsupported file type: {content_type or filename}. Supported: images, Excel (.xlsx/.xls), CSV"
        )

    if text:
        return TextInput(text=text)

    raise InputError("No file or text provided")
