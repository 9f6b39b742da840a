"""Route/permit analysis endpoint."""

from fastapi import APIRouter, Depends, HTTPException

from common.errors import AnalysisTimeoutError, CollaboratorError
from common.logging import get_logger
from models.route import RouteAnalysis, RouteRequest
from route_analysis.analyzer import RouteAnalyzer
from services.google_maps.client import GoogleMapsClient

logger = get_logger(__name__)
router = APIRouter(prefix="/api/route", tags=["route"])


def get_route_analyzer() -> RouteAnalyzer:
    maps = GoogleMapsClient()
    return RouteAnalyzer(routing=maps, geocoder=maps)


@router.post("/analyze", response_model=RouteAnalysis)
async def analyze_route_endpoint(request: RouteRequest, analyzer: RouteAnalyzer = Depends(get_route_analyzer)):
    """
    Distance, drive time, and the states a route passes through.

    Example request:
        ```json
        {"origin": "Houston, TX", "destination": "Denver, CO", "waypoints": ["Amarillo, TX"]}
        ```
    """
    try:
        return await analyzer.analyze(request)
    except (CollaboratorError, AnalysisTimeoutError) as e:
        logger.error(f"[Route] Analysis failed for {request.origin} -> {request.destination}: {e}")
        raise HTTPException(status_code=e.status_code, detail=str(e)) from e
