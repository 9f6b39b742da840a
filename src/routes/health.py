"""Health check and service info endpoints."""

import os

from fastapi import APIRouter

from common.config import config
from common.logging import get_logger
from planner.trucks import TRUCK_CATALOG

logger = get_logger(__name__)
router = APIRouter(tags=["health"])


@router.get("/")
async def root():
    """Root endpoint with basic info."""
    return {
        "service": "Load Planner API",
        "version": "0.1.0",
        "status": "running",
        "description": "Cargo extraction, truck selection, load planning and route/permit analysis",
        "endpoints": {
            "health": "/health",
            "docs": "/docs",
            "analyze": "/api/load-planner/analyze",
            "analyze_file": "/api/load-planner/analyze-file",
            "trucks": "/api/load-planner/trucks",
            "route": "/api/route/analyze",
        },
        "example_request": {
            "text": "CAT 320 excavator, 32' L x 10' W x 11' H, 48,000 lbs",
        },
    }


@router.get("/health")
async def health_check():
    """Health check endpoint."""
    return {"status": "healthy", "service": "load-planner"}


@router.get("/health/debug")
async def debug_check():
    """Debug endpoint to verify configuration and connections."""
    checks = {
        "status": "checking",
        "config": {},
        "azure_openai": {},
        "env_vars": {},
    }

    # Check critical env vars (don't expose values, just presence)
    env_checks = [
        "AZURE_OPENAI_API_KEY",
        "AZURE_OPENAI_ENDPOINT",
        "GOOGLE_MAPS_API_KEY",
    ]
    for var in env_checks:
        value = os.environ.get(var)
        checks["env_vars"][var] = "set" if value else "MISSING"

    # Check config
    checks["config"]["openai_model"] = config.openai_model
    checks["config"]["openai_vision_model"] = config.openai_vision_model
    checks["config"]["azure_endpoint_set"] = bool(config.azure_openai_endpoint)
    checks["config"]["azure_key_set"] = bool(config.azure_openai_api_key.get_secret_value())
    checks["config"]["google_maps_key_set"] = bool(config.google_maps_api_key.get_secret_value())
    checks["config"]["trucks"] = [truck.id for truck in TRUCK_CATALOG]

    # Azure OpenAI client
    try:
        from services.azure_openai_service import AzureOpenAIService

        client = AzureOpenAIService.get_async_client()
        checks["azure_openai"]["client_created"] = True
        checks["azure_openai"]["client_type"] = type(client).__name__
    except ValueError as e:
        checks["azure_openai"]["client_created"] = False
        checks["azure_openai"]["error"] = f"{type(e).__name__}: {e}"

    # Overall status
    all_env_set = all(v == "set" for v in checks["env_vars"].values())
    azure_ok = checks["azure_openai"].get("client_created", False)
    checks["status"] = "healthy" if (all_env_set and azure_ok) else "unhealthy"

    logger.info(f"Debug check result: {checks}")
    return checks
