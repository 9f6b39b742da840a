"""Subset of the Google Directions and Geocoding JSON responses."""

from pydantic import BaseModel, Field


class TextValue(BaseModel):
    text: str = ""
    value: int = 0


class DirectionsLeg(BaseModel):
    distance: TextValue = Field(default_factory=TextValue)
    duration: TextValue = Field(default_factory=TextValue)
    start_address: str = ""
    end_address: str = ""


class OverviewPolyline(BaseModel):
    points: str = ""


class DirectionsRoute(BaseModel):
    summary: str = ""
    legs: list[DirectionsLeg] = []
    overview_polyline: OverviewPolyline = Field(default_factory=OverviewPolyline)


class DirectionsResponse(BaseModel):
    status: str
    routes: list[DirectionsRoute] = []
    error_message: str | None = None


class AddressComponent(BaseModel):
    long_name: str = ""
    short_name: str = ""
    types: list[str] = []


class GeocodeResult(BaseModel):
    address_components: list[AddressComponent] = []
    formatted_address: str = ""


class GeocodeResponse(BaseModel):
    status: str
    results: list[GeocodeResult] = []
    error_message: str | None = None
