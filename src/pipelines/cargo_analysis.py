"""
Cargo analysis pipeline.

Extraction -> truck recommendations -> load plan, for any cargo input.
Always returns an AnalyzeResponse: data and an optional warning on success,
an error message and HTTP status on failure.
"""

import asyncio

from common.config import config
from common.errors import CollaboratorError, InputError
from common.logging import get_logger
from extraction.extractor import CargoExtractor, CargoTextExtractor
from models.analyze import AnalyzeResponse, CargoInput
from models.cargo import ParsedLoad
from models.trucks import TruckSpec
from planner.load_planner import plan_loads
from planner.truck_selector import select_trucks
from planner.trucks import TRUCK_CATALOG

logger = get_logger(__name__)

NO_ITEMS_WARNING = "No cargo items could be extracted. Please check the input format."
NO_VALID_ITEMS_WARNING = (
    "Items were found but none have complete dimensions (length, width, height, weight). Please verify the data."
)


def build_analysis(parsed: ParsedLoad, catalog: tuple[TruckSpec, ...] = TRUCK_CATALOG) -> AnalyzeResponse:
    """Recommendations and load plan for an already parsed load."""
    if not parsed.items:
        return AnalyzeResponse(success=True, parsed_load=parsed, metadata=parsed.metadata, warning=NO_ITEMS_WARNING)

    if not parsed.valid_items:
        return AnalyzeResponse(
            success=True, parsed_load=parsed, metadata=parsed.metadata, warning=NO_VALID_ITEMS_WARNING
        )

    recommendations = select_trucks(parsed, catalog)
    load_plan = plan_loads(parsed, catalog)
    return AnalyzeResponse(
        success=True,
        parsed_load=parsed,
        recommendations=recommendations,
        load_plan=load_plan,
        metadata=parsed.metadata,
    )


async def analyze_cargo(
    cargo_input: CargoInput,
    extractor: CargoTextExtractor | None = None,
    timeout: float | None = config.analyze_timeout_seconds,
    catalog: tuple[TruckSpec, ...] = TRUCK_CATALOG,
) -> AnalyzeResponse:
    """
    Run cargo analysis for one input.

    Args:
        cargo_input: Any CargoInput variant
        extractor: Extraction collaborator (defaults to the LLM-backed CargoExtractor)
        timeout: Deadline in seconds for extraction; None disables it
        catalog: Truck catalog to recommend from and plan with

    Returns:
        AnalyzeResponse; failures carry `error` and a 400/502/504/500 status
    """
    extractor = extractor or CargoExtractor()
    logger.info(f"[Analyze] Starting {cargo_input.kind} analysis")

    try:
        parsed = await asyncio.wait_for(extractor.extract(cargo_input), timeout)
        response = build_analysis(parsed, catalog)
    except asyncio.TimeoutError:
        error = f"Cargo analysis timed out after {timeout} seconds"
        logger.warning(f"[Analyze] {error}")
        return AnalyzeResponse(success=False, error=error, status_code=504)
    except InputError as e:
        logger.info(f"[Analyze] Rejected input: {e}")
        return AnalyzeResponse(success=False, error=str(e), status_code=e.status_code)
    except CollaboratorError as e:
        logger.error(f"[Analyze] Extraction failed: {e}")
        return AnalyzeResponse(success=False, error=str(e), status_code=e.status_code)
    except Exception as e:
        logger.error(f"[Analyze] Unexpected failure: {type(e).__name__}: {e!r}")
        return AnalyzeResponse(success=False, error=str(e) or "Failed to analyze cargo. Please try again.", status_code=500)

    logger.info(
        f"[Analyze] Completed - {len(parsed.items)} items, {len(response.recommendations)} recommendations"
        + (f", warning: {response.warning}" if response.warning else "")
    )
    return response
