"""Tests for the cargo analysis pipeline with a stubbed extractor."""

import asyncio

import pytest

from common.errors import CollaboratorError, InputError
from extraction.extractor import CargoExtractor
from models.analyze import ImageInput, ItemsInput, RowsInput, TextInput
from models.cargo import CargoItem, ParsedLoad
from pipelines.cargo_analysis import NO_ITEMS_WARNING, NO_VALID_ITEMS_WARNING, analyze_cargo, build_analysis

PALLET = CargoItem(id="pallet", description="Pallet of tile", quantity=4, length=48, width=40, height=50, weight=1000)
EXCAVATOR_ROW = {"description": "CAT 320 excavator", "length": 384, "width": 120, "height": 132, "weight": 48000}


class StubExtractor:
    """Returns a fixed load or raises a fixed error."""

    def __init__(self, result: ParsedLoad | None = None, error: Exception | None = None, delay: float = 0):
        self.result = result
        self.error = error
        self.delay = delay
        self.calls = []

    async def extract(self, cargo_input):
        self.calls.append(cargo_input)
        if self.delay:
            await asyncio.sleep(self.delay)
        if self.error is not None:
            raise self.error
        return self.result


TEXT = TextInput(text="Four pallets of tile, 48x40x50, 1000 lbs each")


# --- Failures ---


@pytest.mark.asyncio
async def test_input_error_is_400():
    result = await analyze_cargo(TEXT, extractor=StubExtractor(error=InputError("Text is too short")))
    assert result.success is False
    assert result.status_code == 400
    assert result.error == "Text is too short"
    assert result.recommendations == []


@pytest.mark.asyncio
async def test_collaborator_error_is_502():
    result = await analyze_cargo(TEXT, extractor=StubExtractor(error=CollaboratorError("Azure OpenAI error")))
    assert (result.success, result.status_code, result.error) == (False, 502, "Azure OpenAI error")


@pytest.mark.asyncio
async def test_timeout_is_504():
    extractor = StubExtractor(result=ParsedLoad(), delay=1)
    result = await analyze_cargo(TEXT, extractor=extractor, timeout=0.01)
    assert result.success is False
    assert result.status_code == 504
    assert "timed out" in result.error


@pytest.mark.asyncio
async def test_unexpected_error_is_500():
    result = await analyze_cargo(TEXT, extractor=StubExtractor(error=KeyError("boom")))
    assert result.success is False
    assert result.status_code == 500
    assert result.error


def test_status_code_is_not_serialized():
    result = build_analysis(ParsedLoad())
    assert "statusCode" not in result.model_dump(by_alias=True)
    assert "status_code" not in result.model_dump()


# --- Warnings ---


@pytest.mark.asyncio
async def test_no_items_warning():
    result = await analyze_cargo(TEXT, extractor=StubExtractor(result=ParsedLoad()))
    assert result.success is True
    assert result.status_code == 200
    assert result.warning == NO_ITEMS_WARNING
    assert result.load_plan is None


@pytest.mark.asyncio
async def test_no_valid_items_warning():
    incomplete = CargoItem(id="crate", description="Crate", length=48, width=40, height=0, weight=500)
    load = ParsedLoad.from_items([incomplete], confidence=85)
    result = await analyze_cargo(TEXT, extractor=StubExtractor(result=load))
    assert result.success is True
    assert result.warning == NO_VALID_ITEMS_WARNING
    assert result.parsed_load.items == [incomplete]
    assert result.recommendations == []


# --- Success ---


@pytest.mark.asyncio
async def test_success_has_recommendations_and_plan():
    load = ParsedLoad.from_items([PALLET], confidence=85)
    extractor = StubExtractor(result=load)

    result = await analyze_cargo(TEXT, extractor=extractor)

    assert extractor.calls == [TEXT]
    assert result.success is True
    assert result.warning is None
    assert result.recommendations[0].truck.id == "flatbed"
    assert result.recommendations[0].fit == "legal-fit"
    assert result.load_plan.total_trucks == 1
    assert result.load_plan.total_items == 4
    assert result.load_plan.total_weight == 4000


@pytest.mark.asyncio
async def test_rows_through_real_extractor():
    result = await analyze_cargo(RowsInput(rows=[EXCAVATOR_ROW]), extractor=CargoExtractor())

    assert result.success is True
    assert result.metadata.parse_method == "rows"
    assert result.parsed_load.items[0].id == "item-0"
    assert [rec.truck.id for rec in result.recommendations] == ["rgn", "lowboy"]
    assert all(rec.fit == "permit-required" for rec in result.recommendations)
    assert result.load_plan.loads[0].truck.id == "rgn"


@pytest.mark.asyncio
async def test_items_keep_caller_confidence():
    result = await analyze_cargo(ItemsInput(items=[PALLET]), extractor=CargoExtractor())
    assert result.parsed_load.confidence == 100
    assert result.metadata.parse_method == "items"


# --- Malformed input never escapes as an unhandled error ---


@pytest.mark.asyncio
async def test_data_url_without_payload_is_400():
    image = ImageInput(image_base64="data:image/png;base64", mime_type="image/png")
    result = await analyze_cargo(image, extractor=CargoExtractor())
    assert (result.success, result.status_code, result.error) == (False, 400, "Image data is empty")


@pytest.mark.asyncio
async def test_oversized_quantity_row_is_400():
    rows = RowsInput(rows=[{"description": "Bolts", "quantity": 100_000_000, "length": 10, "width": 10, "height": 10, "weight": 1}])
    result = await analyze_cargo(rows, extractor=CargoExtractor())
    assert result.status_code == 400
    assert result.error.startswith("Invalid row 0: quantity")


@pytest.mark.asyncio
async def test_planning_failure_is_reported_not_raised():
    # bypasses validation, as a misbehaving extractor could
    beam = CargoItem.model_construct(id="beam", description="Beam", length=float("inf"), width=50, height=50, weight=1000)
    load = ParsedLoad.from_items([beam], confidence=100)

    result = await analyze_cargo(TEXT, extractor=StubExtractor(result=load))

    assert result.success is False
    assert result.status_code == 500
