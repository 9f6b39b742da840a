#!/usr/bin/env python3
"""
FastAPI server for the load planner.
"""

# Load environment variables first
import os

from dotenv import load_dotenv
from fastapi import FastAPI, Request
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from routes import health, load_planner, route_analysis

load_dotenv()

# Initialize
app = FastAPI(
    title="Load Planner API",
    description="Cargo extraction, truck recommendations, multi-truck load plans and route/permit analysis",
    version="0.1.0",
    docs_url="/docs",
    redoc_url="/redoc",
)


@app.exception_handler(RequestValidationError)
async def validation_exception_handler(request: Request, exc: RequestValidationError):
    """422 without echoing the rejected input; Infinity and NaN cannot be written back as JSON."""
    errors = [{key: value for key, value in error.items() if key != "input"} for error in exc.errors()]
    return JSONResponse(status_code=422, content={"detail": jsonable_encoder(errors)})


# Include routers
app.include_router(health.router)
app.include_router(load_planner.router)
app.include_router(route_analysis.router)


if __name__ == "__main__":
    import uvicorn

    port = int(os.environ.get("PORT", 8080))

    uvicorn.run(
        "main:app",
        host="0.0.0.0",
        port=port,
        reload=False,
        log_level="info",
    )
