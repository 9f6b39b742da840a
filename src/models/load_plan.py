"""Load plan models: per-truck bins and unplaceable units."""

from pydantic import Field

from models.base import ApiModel
from models.trucks import Dimension, FitClass, TruckSpec


class PlacedItem(ApiModel):
    """Units of one cargo item assigned to a truck."""

    item_id: str
    description: str
    quantity: int
    length: float
    width: float
    height: float
    weight: float = Field(..., description="Per-unit weight in pounds")


class TruckLoad(ApiModel):
    """One truck of a load plan."""

    id: str
    truck: TruckSpec
    fit: FitClass
    items: list[PlacedItem] = Field(default_factory=list)
    unit_count: int = 0
    weight: float = Field(0, description="Subtotal weight in pounds")
    length: float = 0
    width: float = 0
    height: float = 0
    exceeded: list[Dimension] = Field(default_factory=list, description="Legal limits exceeded (permit loads)")
    permits: list[str] = Field(default_factory=list)


class UnplaceableUnit(ApiModel):
    """A unit that no catalog truck can carry, even with permits."""

    item_id: str
    description: str
    unit_index: int = Field(..., description="Zero-based unit number within the item's quantity")
    length: float
    width: float
    height: float
    weight: float
    reason: str


class LoadPlan(ApiModel):
    loads: list[TruckLoad] = Field(default_factory=list)
    total_trucks: int = 0
    total_weight: float = 0
    total_items: int = Field(0, description="Units placed on trucks")
    unplaceable: list[UnplaceableUnit] = Field(default_factory=list)
    warnings: list[str] = Field(default_factory=list)
