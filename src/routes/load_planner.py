"""Load planner endpoints: cargo analysis, truck catalog, recommendations, load plans."""

from typing import Any

from fastapi import APIRouter, Body, Depends, File, Form, HTTPException, UploadFile
from fastapi.responses import JSONResponse

from common.errors import InputError
from common.logging import get_logger
from extraction.extractor import CargoExtractor
from extraction.inputs import input_from_upload, parse_analyze_body
from models.analyze import AnalyzeResponse
from models.base import ApiModel
from models.cargo import CargoItem, ParsedLoad
from models.load_plan import LoadPlan
from models.trucks import TruckRecommendation, TruckSpec
from pipelines.cargo_analysis import analyze_cargo
from planner.load_planner import plan_loads
from planner.truck_selector import select_trucks
from planner.trucks import TRUCK_CATALOG, get_truck_by_id

logger = get_logger(__name__)
router = APIRouter(prefix="/api/load-planner", tags=["load-planner"])


class ItemsRequest(ApiModel):
    items: list[CargoItem]


def get_cargo_extractor() -> CargoExtractor:
    return CargoExtractor()


def _respond(result: AnalyzeResponse) -> JSONResponse:
    return JSONResponse(status_code=result.status_code, content=result.model_dump(mode="json", by_alias=True))


@router.post("/analyze", response_model=AnalyzeResponse)
async def analyze_endpoint(body: Any = Body(...), extractor: CargoExtractor = Depends(get_cargo_extractor)):
    """
    Analyze cargo from a JSON body.

    Accepts one of:
        {"text": "..."} or {"emailText": "..."}
        {"imageBase64": "...", "mimeType": "image/png"}
        {"items": [CargoItem, ...]}
        {"rows": [{"description": ..., "length": ..., ...}, ...]}

    Returns parsed items, truck recommendations, and a load plan.
    """
    try:
        cargo_input = parse_analyze_body(body)
    except InputError as e:
        logger.info(f"[Analyze] Invalid body: {e}")
        return _respond(AnalyzeResponse(success=False, error=str(e), status_code=e.status_code))

    return _respond(await analyze_cargo(cargo_input, extractor=extractor))


@router.post("/analyze-file", response_model=AnalyzeResponse)
async def analyze_file_endpoint(
    file: UploadFile | None = File(None),
    text: str | None = Form(None),
    extractor: CargoExtractor = Depends(get_cargo_extractor),
):
    """Analyze an uploaded image or spreadsheet (.xlsx/.xls/.csv), or text sent as a form field."""
    try:
        if file is not None:
            content = await file.read()
            cargo_input = input_from_upload(file.filename, file.content_type, content)
        else:
            cargo_input = input_from_upload(None, None, None, text=text)
    except InputError as e:
        logger.info(f"[Analyze] Invalid upload: {e}")
        return _respond(AnalyzeResponse(success=False, error=str(e), status_code=e.status_code))

    return _respond(await analyze_cargo(cargo_input, extractor=extractor))


@router.get("/trucks", response_model=list[TruckSpec])
async def list_trucks():
    return list(TRUCK_CATALOG)


@router.get("/trucks/{truck_id}", response_model=TruckSpec)
async def get_truck(truck_id: str):
    truck = get_truck_by_id(truck_id)
    if truck is None:
        raise HTTPException(status_code=404, detail=f"Unknown truck: {truck_id}")
    return truck


@router.post("/recommendations", response_model=list[TruckRecommendation])
async def recommendations_endpoint(request: ItemsRequest):
    """Truck recommendations for already parsed items, best first."""
    return select_trucks(ParsedLoad.from_items(request.items, confidence=100))


@router.post("/plan", response_model=LoadPlan)
async def plan_endpoint(request: ItemsRequest):
    """Multi-truck load plan for already parsed items."""
    return plan_loads(ParsedLoad.from_items(request.items, confidence=100))
