"""
Route/permit analysis.

Stages of one run:
1. Directions - first route for origin -> waypoints -> destination
2. Polyline - decode the overview polyline into points
3. Sampling - reverse geocode every Nth point (plus the last) to a state code
4. Segments - fold points and sampled states into per-state stretches

Geocode failures on single samples are logged and skipped, never fatal.
"""

import asyncio
from dataclasses import dataclass, field
from enum import Enum
from typing import Protocol

from common.config import config
from common.errors import AnalysisTimeoutError, CollaboratorError, GeocodeError, RouteNotFoundError
from common.logging import get_logger
from models.route import AdminArea, GeocodeOutcome, LatLng, RouteAnalysis, RouteRequest, RouteResponse, StateSegment
from route_analysis.geo import (
    METERS_TO_MILES,
    format_duration,
    haversine_miles,
    resolve_state_code,
    round_tenth,
    state_name,
)
from route_analysis.permits import calculate_route_permits
from route_analysis.polyline import decode_polyline

logger = get_logger(__name__)

LONG_ROUTE_MILES = 2000
MANY_STATES = 5


class RouteStage(str, Enum):
    IDLE = "idle"
    POLYLINE_DECODED = "polyline_decoded"
    STATES_SAMPLED = "states_sampled"
    SEGMENTS_BUILT = "segments_built"
    DONE = "done"


class RoutingProvider(Protocol):
    async def route(self, origin: str, destination: str, waypoints: list[str] | None = None) -> RouteResponse | None: ...


class Geocoder(Protocol):
    async def reverse_geocode(self, lat: float, lng: float) -> AdminArea | None: ...


@dataclass
class StateDetection:
    states: list[str] = field(default_factory=list)
    segments: list[StateSegment] = field(default_factory=list)
    distances: dict[str, float] = field(default_factory=dict)


def sample_indices(count: int, target: int) -> list[int]:
    """Every Nth index with N = max(1, count // target), plus the last index."""
    if count == 0:
        return []
    step = max(1, count // target)
    indices = list(range(0, count, step))
    if indices[-1] != count - 1:
        indices.append(count - 1)
    return indices


def downsample(points: list[LatLng], target: int) -> list[LatLng]:
    step = max(1, len(points) // target)
    return points[::step]


def build_state_segments(points: list[LatLng], outcomes: list[GeocodeOutcome]) -> StateDetection:
    """
    Fold route points and sampled state codes into contiguous state segments.

    Distance accumulates point to point. When a sample reports a new state,
    the running distance closes the previous state's segment (exit at the
    point before the sample) and the new segment starts at the sample. The
    last segment is closed at the final point if it covered any distance.
    Samples with no state code (failed or outside the U.S.) change nothing.
    """
    detection = StateDetection()
    states_by_index = {o.index: o.state_code for o in outcomes if o.state_code}
    raw_distances: dict[str, float] = {}

    current = ""
    entry = points[0] if points else None
    distance = 0.0

    def close(exit_point: LatLng) -> None:
        detection.segments.append(
            StateSegment(
                state_code=current,
                state_name=state_name(current),
                entry_point=entry,
                exit_point=exit_point,
                distance_miles=round_tenth(distance),
                order=len(detection.segments),
            )
        )
        raw_distances[current] = raw_distances.get(current, 0) + distance

    for i, point in enumerate(points):
        if i > 0:
            distance += haversine_miles(points[i - 1], point)

        code = states_by_index.get(i)
        if not code or code == current:
            continue

        if current:
            close(points[i - 1])
        if code not in detection.states:
            detection.states.append(code)
        current, entry, distance = code, point, 0.0

    if current and distance > 0:
        close(points[-1])

    detection.distances = {code: round_tenth(miles) for code, miles in raw_distances.items()}
    return detection


class RouteAnalyzer:
    """
    Determines which states a truck route passes through and how far in each.

    Example:
        maps = GoogleMapsClient()
        analyzer = RouteAnalyzer(routing=maps, geocoder=maps)
        analysis = await analyzer.analyze(RouteRequest(origin="Houston, TX", destination="Denver, CO"))
    """

    def __init__(
        self,
        routing: RoutingProvider,
        geocoder: Geocoder,
        sample_target: int = config.geocode_sample_target,
        waypoint_target: int = config.waypoint_sample_target,
        concurrency: int = config.geocode_concurrency,
    ):
        self.routing = routing
        self.geocoder = geocoder
        self.sample_target = sample_target
        self.waypoint_target = waypoint_target
        self.concurrency = max(1, concurrency)

    async def analyze(self, request: RouteRequest, timeout: float | None = config.route_timeout_seconds) -> RouteAnalysis:
        """Run the analysis; raises AnalysisTimeoutError if it does not finish within `timeout` seconds."""
        try:
            return await asyncio.wait_for(self._analyze(request), timeout)
        except asyncio.TimeoutError as e:
            logger.warning(f"[Route] Timed out after {timeout}s: {request.origin} -> {request.destination}")
            raise AnalysisTimeoutError(f"Route analysis timed out after {timeout} seconds") from e

    async def _geocode(self, index: int, point: LatLng) -> GeocodeOutcome:
        try:
            area = await self.geocoder.reverse_geocode(point.lat, point.lng)
        except GeocodeError as e:
            logger.warning(f"[Route] Failed to geocode point {point.lat}, {point.lng}: {e}")
            return GeocodeOutcome(index=index, point=point, error=str(e))
        return GeocodeOutcome(index=index, point=point, state_code=resolve_state_code(area))

    async def geocode_samples(self, points: list[LatLng]) -> list[GeocodeOutcome]:
        """Reverse geocode sampled points; outcomes are ordered by point index."""
        indices = sample_indices(len(points), self.sample_target)

        if self.concurrency == 1:
            return [await self._geocode(i, points[i]) for i in indices]

        semaphore = asyncio.Semaphore(self.concurrency)

        async def bounded(i: int) -> GeocodeOutcome:
            async with semaphore:
                return await self._geocode(i, points[i])

        outcomes = await asyncio.gather(*(bounded(i) for i in indices))
        return sorted(outcomes, key=lambda o: o.index)

    async def _analyze(self, request: RouteRequest) -> RouteAnalysis:
        stage = RouteStage.IDLE
        logger.info(f"[Route] {stage.value}: {request.origin} -> {request.destination}")

        route = await self.routing.route(request.origin, request.destination, request.waypoints or None)
        if route is None:
            raise RouteNotFoundError(f"No route found from {request.origin} to {request.destination}")

        try:
            points = decode_polyline(route.overview_polyline)
        except ValueError as e:
            raise CollaboratorError(f"Invalid route polyline: {e}") from e
        stage = RouteStage.POLYLINE_DECODED
        logger.debug(f"[Route] {stage.value}: {len(points)} points")

        outcomes = await self.geocode_samples(points)
        failed = sum(1 for o in outcomes if o.error)
        stage = RouteStage.STATES_SAMPLED
        logger.debug(f"[Route] {stage.value}: {len(outcomes)} samples, {failed} failed")

        detection = build_state_segments(points, outcomes)
        stage = RouteStage.SEGMENTS_BUILT
        logger.debug(f"[Route] {stage.value}: {detection.states}")

        total_meters = sum(leg.distance_meters for leg in route.legs)
        total_seconds = sum(leg.duration_seconds for leg in route.legs)
        total_miles = round_tenth(total_meters * METERS_TO_MILES)
        total_minutes = int(total_seconds / 60 + 0.5)

        warnings = []
        if total_miles > LONG_ROUTE_MILES:
            warnings.append("Route exceeds 2,000 miles - consider driver rest requirements")
        if len(detection.states) > MANY_STATES:
            warnings.append(f"Route passes through {len(detection.states)} states - multiple permits may be required")
        if failed:
            warnings.append(f"{failed} of {len(outcomes)} route points could not be geocoded - state list may be incomplete")

        permits = None
        if request.cargo is not None:
            permits = calculate_route_permits(detection.states, request.cargo, detection.distances)

        analysis = RouteAnalysis(
            total_distance_miles=total_miles,
            total_duration_minutes=total_minutes,
            estimated_drive_time=format_duration(total_minutes),
            states_traversed=detection.states,
            state_segments=detection.segments,
            state_distances=detection.distances,
            route_polyline=route.overview_polyline,
            waypoints=downsample(points, self.waypoint_target),
            permits=permits,
            warnings=warnings,
        )
        stage = RouteStage.DONE
        logger.info(f"[Route] {stage.value}: {total_miles} mi, {', '.join(detection.states) or 'no states'}")
        return analysis
