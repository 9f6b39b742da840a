"""Tests for the cargo extraction orchestrator (LLM calls mocked)."""

from unittest.mock import AsyncMock, MagicMock, patch

import httpx
import pytest
from agents import ModelBehaviorError
from openai import APIConnectionError

from common.errors import CollaboratorError, InputError
from extraction.agents.cargo_extraction import CargoExtractionResult, ParsedItem
from extraction.agents.column_mapping import ColumnMappingResult
from extraction.extractor import CargoExtractor
from models.analyze import ItemsInput, RowsInput, SpreadsheetInput, TextInput
from models.cargo import CargoItem

EMAIL = "Please quote: CAT 320 excavator 32' x 10' x 11', 48,000 lbs, plus 2 light towers"


def run_result(output) -> MagicMock:
    return MagicMock(final_output=output)


def extraction(*items: ParsedItem) -> CargoExtractionResult:
    return CargoExtractionResult(items=list(items), reasoning="converted feet to inches")


@pytest.fixture
def extractor():
    with (
        patch("extraction.extractor.create_cargo_extraction_agent") as mock_cargo_agent,
        patch("extraction.extractor.create_column_mapping_agent"),
    ):
        mock_cargo_agent.side_effect = lambda model=None: MagicMock(name=f"agent-{model}")
        yield CargoExtractor()


# --- Text ---


@pytest.mark.asyncio
async def test_text_too_short_is_rejected_without_llm_call(extractor):
    with patch("extraction.extractor.Runner.run", new_callable=AsyncMock) as mock_run:
        with pytest.raises(InputError, match="minimum 10 characters"):
            await extractor.extract(TextInput(text="  tiny   "))
        mock_run.assert_not_awaited()


@pytest.mark.asyncio
async def test_text_extraction_maps_agent_items(extractor):
    output = extraction(
        ParsedItem(description="CAT 320 excavator", length=384, width=120, height=132, weight=48000),
        ParsedItem(id="LT-7", description="Light tower", quantity=2, length=160, width=60, height=90, weight=3000),
    )
    with patch("extraction.extractor.Runner.run", new=AsyncMock(return_value=run_result(output))) as mock_run:
        load = await extractor.extract(TextInput(text=EMAIL))

    assert mock_run.await_args.args[1] == EMAIL
    assert [item.id for item in load.items] == ["item-0", "LT-7"]
    assert load.items[1].quantity == 2
    assert all(item.fragile is False and item.hazmat is False for item in load.items)
    assert load.confidence == 85
    assert load.metadata.parse_method == "text-ai"
    assert load.metadata.items_found == 2
    assert load.metadata.valid_items == 2
    assert (load.length, load.width, load.height, load.weight) == (384, 120, 132, 54000)


@pytest.mark.asyncio
async def test_text_extraction_clamps_quantity_and_defaults_description(extractor):
    output = extraction(ParsedItem(description="  ", quantity=0, weight=500))
    with patch("extraction.extractor.Runner.run", new=AsyncMock(return_value=run_result(output))):
        load = await extractor.extract_text(EMAIL)

    item = load.items[0]
    assert item.quantity == 1
    assert item.description == "Unknown Item"
    assert item.is_valid is False
    assert load.metadata.valid_items == 0


@pytest.mark.asyncio
async def test_openai_errors_become_collaborator_errors(extractor):
    error = APIConnectionError(request=httpx.Request("POST", "https://example.openai.azure.com"))
    with patch("extraction.extractor.Runner.run", new=AsyncMock(side_effect=error)):
        with pytest.raises(CollaboratorError, match="Cannot connect to Azure OpenAI"):
            await extractor.extract_text(EMAIL)


@pytest.mark.asyncio
async def test_missing_agent_output_is_a_collaborator_error(extractor):
    with patch("extraction.extractor.Runner.run", new=AsyncMock(return_value=run_result(None))):
        with pytest.raises(CollaboratorError, match="returned no result"):
            await extractor.extract_text(EMAIL)


# --- Image ---


@pytest.mark.asyncio
async def test_unsupported_image_type_is_rejected(extractor):
    with pytest.raises(InputError, match="image/bmp"):
        await extractor.extract_image("aGVsbG8=", "image/bmp")


@pytest.mark.asyncio
async def test_image_sent_as_data_url_to_vision_agent(extractor):
    output = extraction(ParsedItem(description="Crated press", length=120, width=80, height=90, weight=9000))
    with patch("extraction.extractor.Runner.run", new=AsyncMock(return_value=run_result(output))) as mock_run:
        load = await extractor.extract_image("data:image/png;base64,aGVsbG8=", "image/png")

    agent, agent_input = mock_run.await_args.args
    assert agent is extractor.vision_agent
    content = agent_input[0]["content"]
    assert content[1]["type"] == "input_image"
    assert content[1]["image_url"] == "data:image/png;base64,aGVsbG8="
    assert load.confidence == 85
    assert load.metadata.parse_method == "image-ai"


@pytest.mark.asyncio
async def test_empty_image_is_rejected(extractor):
    with pytest.raises(InputError, match="empty"):
        await extractor.extract_image("", "image/jpeg")


@pytest.mark.asyncio
async def test_data_url_without_payload_is_rejected(extractor):
    with patch("extraction.extractor.Runner.run", new_callable=AsyncMock) as mock_run:
        with pytest.raises(InputError, match="Image data is empty"):
            await extractor.extract_image("data:image/png;base64", "image/png")
        mock_run.assert_not_awaited()


# --- Spreadsheet ---


@pytest.mark.asyncio
async def test_spreadsheet_by_pattern(extractor):
    csv = b"Description,Qty,Length,Width,Height,Weight\nGenerator,2,240,96,100,12000\n"
    load = await extractor.extract(SpreadsheetInput(content=csv, filename="gen.csv"))

    assert load.confidence == 80
    assert load.metadata.parse_method == "spreadsheet"
    assert load.metadata.column_mapping == "pattern"
    assert load.metadata.file_name == "gen.csv"
    assert load.weight == 24000


@pytest.mark.asyncio
async def test_spreadsheet_with_ai_column_mapping(extractor):
    csv = b"Item,Long,Wide,Tall,Mass\nGenerator,240,96,100,12000\n"
    mapping = ColumnMappingResult(length="Long", width="Wide", height="Tall", weight="Mass", reasoning="by values")
    with patch("extraction.extractor.Runner.run", new=AsyncMock(return_value=run_result(mapping))):
        load = await extractor.extract(SpreadsheetInput(content=csv, filename="odd.csv"))

    assert load.confidence == 90
    assert load.metadata.column_mapping == "AI"
    assert load.items[0].is_valid


# --- Rows and items ---


def test_rows_are_coerced(extractor):
    load = extractor.extract_rows(
        [
            {"name": "Boom lift", "qty": "2", "length": "300", "width": 96, "height": 100, "weight": 15000},
            {"item": "Pallet", "length": "abc", "stackable": "false", "hazmat": "yes"},
            {},
        ]
    )

    boom, pallet, empty = load.items
    assert (boom.description, boom.quantity, boom.length) == ("Boom lift", 2, 300)
    assert pallet.description == "Pallet"
    assert pallet.length == 0
    assert pallet.stackable is False
    assert pallet.hazmat is True
    assert (empty.id, empty.description, empty.quantity) == ("item-2", "Unknown Item", 1)
    assert load.confidence == 80
    assert load.metadata.parse_method == "rows"


@pytest.mark.asyncio
async def test_items_pass_through_unchanged(extractor):
    items = [CargoItem(id="x", description="Crate", length=40, width=40, height=40, weight=800, fragile=True)]
    load = await extractor.extract(ItemsInput(items=items))
    assert load.items == items
    assert load.confidence == 100
    assert load.metadata.parse_method == "items"


@pytest.mark.asyncio
async def test_rows_input_dispatch(extractor):
    load = await extractor.extract(RowsInput(rows=[{"description": "Crate", "length": 40}]))
    assert load.items[0].description == "Crate"


def test_row_with_too_many_units_is_an_input_error(extractor):
    with pytest.raises(InputError, match="Invalid row 1: quantity"):
        extractor.extract_rows([{"description": "Crate"}, {"description": "Bolts", "quantity": 100_000_000}])


# --- Agent failures ---


@pytest.mark.asyncio
async def test_agent_output_schema_failure_is_collaborator_error(extractor):
    failure = ModelBehaviorError("Invalid JSON when parsing output for CargoExtractionResult")
    with patch("extraction.extractor.Runner.run", new=AsyncMock(side_effect=failure)):
        with pytest.raises(CollaboratorError, match="ModelBehaviorError"):
            await extractor.extract(TextInput(text=EMAIL))


@pytest.mark.asyncio
async def test_agent_item_out_of_range_is_collaborator_error(extractor):
    output = extraction(ParsedItem(description="Bolts", quantity=5000, length=10, width=10, height=10, weight=1))
    with patch("extraction.extractor.Runner.run", new=AsyncMock(return_value=run_result(output))):
        with pytest.raises(CollaboratorError, match="returned an invalid item: quantity"):
            await extractor.extract(TextInput(text=EMAIL))
