"""Cargo analysis request variants and response."""

from typing import Annotated, Any, Literal, Union

from pydantic import BaseModel, Field

from models.base import ApiModel
from models.cargo import CargoItem, ParsedLoad, ParseMetadata
from models.load_plan import LoadPlan
from models.trucks import TruckRecommendation


class TextInput(BaseModel):
    """Free text, usually a pasted e-mail."""

    kind: Literal["text"] = "text"
    text: str


class ImageInput(BaseModel):
    """Photo or screenshot of a packing list, base64 encoded."""

    kind: Literal["image"] = "image"
    image_base64: str
    mime_type: str


class SpreadsheetInput(BaseModel):
    """Raw spreadsheet bytes; the filename extension selects the reader."""

    kind: Literal["spreadsheet"] = "spreadsheet"
    content: bytes
    filename: str


class RowsInput(BaseModel):
    """Rows already split into columns by the client."""

    kind: Literal["rows"] = "rows"
    rows: list[dict[str, Any]]


class ItemsInput(BaseModel):
    """CargoItem-shaped objects the caller already trusts."""

    kind: Literal["items"] = "items"
    items: list[CargoItem]


CargoInput = Annotated[
    Union[TextInput, ImageInput, SpreadsheetInput, RowsInput, ItemsInput],
    Field(discriminator="kind"),
]


class AnalyzeResponse(ApiModel):
    success: bool
    parsed_load: ParsedLoad = Field(default_factory=ParsedLoad)
    recommendations: list[TruckRecommendation] = Field(default_factory=list)
    load_plan: LoadPlan | None = None
    metadata: ParseMetadata | None = None
    warning: str | None = None
    error: str | None = None
    status_code: int = Field(200, description="HTTP status for this outcome", exclude=True)
