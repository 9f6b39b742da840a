"""Route analysis models."""

from pydantic import ConfigDict, Field

from models.base import ApiModel


class LatLng(ApiModel):
    model_config = ConfigDict(frozen=True)

    lat: float
    lng: float


class AdminArea(ApiModel):
    """administrative_area_level_1 address component (a U.S. state)."""

    short_name: str = ""
    long_name: str = ""


class RouteLeg(ApiModel):
    distance_meters: int = 0
    duration_seconds: int = 0


class RouteResponse(ApiModel):
    """First route returned by the routing service."""

    legs: list[RouteLeg] = Field(default_factory=list)
    overview_polyline: str = ""


class GeocodeOutcome(ApiModel):
    """Result of reverse geocoding one sampled route point."""

    index: int = Field(..., description="Index of the point in the decoded polyline")
    point: LatLng
    state_code: str | None = None
    error: str | None = None


class StateSegment(ApiModel):
    """A contiguous stretch of the route within one state."""

    state_code: str
    state_name: str
    entry_point: LatLng
    exit_point: LatLng
    distance_miles: float
    order: int


class PermitCargo(ApiModel):
    """Loaded cargo envelope checked against road limits: inches and gross pounds."""

    model_config = ConfigDict(allow_inf_nan=False)

    length: float = Field(..., ge=0)
    width: float = Field(..., ge=0)
    height: float = Field(..., ge=0)
    weight: float = Field(..., ge=0, description="Gross weight in pounds (cargo, trailer and tractor when known)")


class PermitCheck(ApiModel):
    oversize_needed: bool = False
    overweight_needed: bool = False
    reasons: list[str] = Field(default_factory=list)


class StatePermit(ApiModel):
    """Permits one traversed state requires for a cargo envelope."""

    state_code: str
    state_name: str
    oversize_required: bool = False
    overweight_required: bool = False
    reasons: list[str] = Field(default_factory=list)
    distance_miles: float = 0


class RoutePermitSummary(ApiModel):
    states: list[StatePermit] = Field(default_factory=list, description="Every traversed state, in route order")
    permit_states: list[str] = Field(default_factory=list, description="Codes of states requiring any permit")
    escort_required: bool = False
    warnings: list[str] = Field(default_factory=list)


class RouteRequest(ApiModel):
    origin: str = Field(..., min_length=1, description="Origin address")
    destination: str = Field(..., min_length=1, description="Destination address")
    waypoints: list[str] = Field(default_factory=list, description="Intermediate stops, in order")
    cargo: PermitCargo | None = Field(None, description="When given, per-state permit requirements are included")


class RouteAnalysis(ApiModel):
    total_distance_miles: float = 0
    total_duration_minutes: int = 0
    estimated_drive_time: str = ""
    states_traversed: list[str] = Field(default_factory=list)
    state_segments: list[StateSegment] = Field(default_factory=list)
    state_distances: dict[str, float] = Field(default_factory=dict)
    route_polyline: str = ""
    waypoints: list[LatLng] = Field(default_factory=list)
    permits: RoutePermitSummary | None = None
    warnings: list[str] = Field(default_factory=list)
