"""Cargo models: items, parsed loads, and parse metadata.

All dimensions are inches and all weights are pounds.
"""

from typing import Literal

from pydantic import ConfigDict, Field

from models.base import ApiModel

ParseMethod = Literal["text-ai", "image-ai", "spreadsheet", "rows", "items"]
ColumnMapping = Literal["pattern", "AI"]

# Units are expanded one by one when planning
MAX_ITEM_QUANTITY = 1000


class CargoItem(ApiModel):
    """One unit type of freight."""

    model_config = ConfigDict(frozen=True, allow_inf_nan=False)

    id: str = Field(..., description="Item identifier")
    sku: str | None = Field(None, description="Item SKU / part number")
    description: str = Field("Unknown Item", description="What the item is (e.g., 'CAT 320 excavator')")
    quantity: int = Field(1, ge=1, le=MAX_ITEM_QUANTITY, description="Number of identical units")
    length: float = Field(0, description="Length in inches")
    width: float = Field(0, description="Width in inches")
    height: float = Field(0, description="Height in inches")
    weight: float = Field(0, description="Weight per unit in pounds")
    stackable: bool = Field(False, description="Other cargo may be stacked on this item")
    fragile: bool = Field(False, description="Requires careful handling")
    hazmat: bool = Field(False, description="Hazardous material")

    @property
    def is_valid(self) -> bool:
        """Plannable only when every dimension and the weight are positive."""
        return self.length > 0 and self.width > 0 and self.height > 0 and self.weight > 0

    @property
    def volume(self) -> float:
        return self.length * self.width * self.height

    @property
    def total_weight(self) -> float:
        return self.weight * self.quantity


class ParseMetadata(ApiModel):
    """How a ParsedLoad was produced."""

    parse_method: ParseMethod | None = None
    items_found: int = 0
    valid_items: int = 0
    confidence: int | None = None
    column_mapping: ColumnMapping | None = Field(None, description="Spreadsheet header detection method")
    file_name: str | None = None


class ParsedLoad(ApiModel):
    """Aggregate description of a shipment before truck assignment.

    length/width/height are the componentwise maximum across items (items
    travel side by side or stacked, never end to end), weight is the total
    of weight x quantity.
    """

    length: float = 0
    width: float = 0
    height: float = 0
    weight: float = 0
    items: list[CargoItem] = Field(default_factory=list)
    confidence: int = Field(0, ge=0, le=100)
    metadata: ParseMetadata | None = None

    @classmethod
    def from_items(
        cls, items: list[CargoItem], confidence: int, metadata: ParseMetadata | None = None
    ) -> "ParsedLoad":
        return cls(
            length=max((i.length for i in items), default=0),
            width=max((i.width for i in items), default=0),
            height=max((i.height for i in items), default=0),
            weight=sum(i.total_weight for i in items),
            items=list(items),
            confidence=confidence,
            metadata=metadata,
        )

    @property
    def valid_items(self) -> list[CargoItem]:
        return [i for i in self.items if i.is_valid]

    def plannable(self) -> "ParsedLoad":
        """Same load restricted to valid items, aggregates recomputed."""
        return ParsedLoad.from_items(self.valid_items, self.confidence, self.metadata)
