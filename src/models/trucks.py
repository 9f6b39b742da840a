"""Truck/trailer models and fit classification."""

from typing import Literal

from pydantic import ConfigDict, Field, model_validator

from models.base import ApiModel

FitClass = Literal["legal-fit", "permit-required", "does-not-fit"]
Dimension = Literal["length", "width", "height", "weight"]

DIMENSIONS: tuple[Dimension, ...] = ("length", "width", "height", "weight")


class Envelope(ApiModel):
    """Cargo envelope: inches for length/width/height, pounds for weight."""

    model_config = ConfigDict(frozen=True)

    length: float
    width: float
    height: float
    weight: float

    def exceeded_by(self, length: float, width: float, height: float, weight: float) -> list[Dimension]:
        """Dimensions of the given cargo that are over this envelope, in canonical order."""
        cargo = {"length": length, "width": width, "height": height, "weight": weight}
        return [dim for dim in DIMENSIONS if cargo[dim] > getattr(self, dim)]

    def slack(self, length: float, width: float, height: float, weight: float) -> float:
        """Unused capacity as the sum of per-dimension fractions (0 = exact fit)."""
        cargo = {"length": length, "width": width, "height": height, "weight": weight}
        return sum((getattr(self, dim) - cargo[dim]) / getattr(self, dim) for dim in DIMENSIONS)


class TruckSpec(ApiModel):
    """A trailer type's physical (max) and road-legal envelopes."""

    model_config = ConfigDict(frozen=True)

    id: str
    name: str
    description: str = ""
    legal: Envelope = Field(..., description="Limits without oversize/overweight permits")
    max: Envelope = Field(..., description="Physical capacity regardless of permits")

    @model_validator(mode="after")
    def _legal_within_max(self) -> "TruckSpec":
        over = [dim for dim in DIMENSIONS if getattr(self.legal, dim) > getattr(self.max, dim)]
        if over:
            raise ValueError(f"{self.id}: legal limit above max limit for {', '.join(over)}")
        return self


class TruckRecommendation(ApiModel):
    """A truck type classified against a load."""

    truck: TruckSpec
    fit: FitClass
    exceeded: list[Dimension] = Field(default_factory=list, description="Violated dimensions when not a legal fit")
    permits: list[str] = Field(default_factory=list)
    excess_capacity: float = Field(0, description="Unused fraction of the relevant envelope, summed over dimensions")
    reason: str = ""
