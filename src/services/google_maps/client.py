from typing import Any

import httpx

from common.config import config
from common.errors import CollaboratorError, GeocodeError
from common.logging import get_logger
from models.route import AdminArea, RouteLeg, RouteResponse
from route_analysis.geo import resolve_state_code
from services.google_maps.schemas import DirectionsResponse, GeocodeResponse

logger = get_logger(__name__)

STATE_COMPONENT = "administrative_area_level_1"
NO_RESULT_STATUSES = {"ZERO_RESULTS", "NOT_FOUND"}


class GoogleMapsClient:
    """
    Driving directions and reverse geocoding over the Google Maps web services.

    Example:
        maps = GoogleMapsClient()
        route = await maps.route("Houston, TX", "Denver, CO")
        area = await maps.reverse_geocode(29.76, -95.37)
    """

    def __init__(
        self,
        api_key: str | None = None,
        base_url: str = config.google_maps_base_url,
        timeout: float = config.http_timeout,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        self.api_key = api_key if api_key is not None else config.google_maps_api_key.get_secret_value()
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self._transport = transport

    async def _get(self, path: str, params: dict[str, Any]) -> dict[str, Any]:
        if not self.api_key:
            raise CollaboratorError("Missing GOOGLE_MAPS_API_KEY")

        async with httpx.AsyncClient(timeout=self.timeout, transport=self._transport) as client:
            resp = await client.get(f"{self.base_url}/{path}", params={**params, "key": self.api_key})
            resp.raise_for_status()
            return resp.json()

    async def route(self, origin: str, destination: str, waypoints: list[str] | None = None) -> RouteResponse | None:
        """First driving route, or None when Google finds no route."""
        params = {"origin": origin, "destination": destination, "mode": "driving"}
        if waypoints:
            params["waypoints"] = "|".join(waypoints)

        logger.info(f"[Route] Directions {origin} -> {destination} ({len(waypoints or [])} waypoints)")
        try:
            data = DirectionsResponse.model_validate(await self._get("directions/json", params))
        except httpx.HTTPStatusError as e:
            logger.error(f"[Route] Directions HTTP {e.response.status_code}")
            raise CollaboratorError(f"Directions request failed: HTTP {e.response.status_code}") from e
        except httpx.RequestError as e:
            logger.error(f"[Route] Directions request failed: {e!r}")
            raise CollaboratorError(f"Directions request failed: {e}") from e
        except ValueError as e:
            raise CollaboratorError("Invalid JSON in directions response") from e

        if data.status in NO_RESULT_STATUSES or (data.status == "OK" and not data.routes):
            return None
        if data.status != "OK":
            raise CollaboratorError(f"Directions request failed: {data.status} {data.error_message or ''}".strip())

        first = data.routes[0]
        return RouteResponse(
            legs=[RouteLeg(distance_meters=leg.distance.value, duration_seconds=leg.duration.value) for leg in first.legs],
            overview_polyline=first.overview_polyline.points,
        )

    async def reverse_geocode(self, lat: float, lng: float) -> AdminArea | None:
        """State-level address component for a point, or None outside any state."""
        try:
            data = GeocodeResponse.model_validate(await self._get("geocode/json", {"latlng": f"{lat},{lng}"}))
        except httpx.HTTPStatusError as e:
            raise GeocodeError(f"Geocode failed for {lat},{lng}: HTTP {e.response.status_code}") from e
        except httpx.RequestError as e:
            raise GeocodeError(f"Geocode failed for {lat},{lng}: {e}") from e
        except ValueError as e:
            raise GeocodeError(f"Invalid JSON in geocode response for {lat},{lng}") from e

        if data.status in NO_RESULT_STATUSES:
            return None
        if data.status != "OK":
            raise GeocodeError(f"Geocode failed for {lat},{lng}: {data.status}")

        fallback = None
        for result in data.results:
            for component in result.address_components:
                if STATE_COMPONENT not in component.types:
                    continue
                area = AdminArea(short_name=component.short_name, long_name=component.long_name)
                if resolve_state_code(area):
                    return area
                fallback = fallback or area
        return fallback
