"""
Cargo extraction orchestrator.

Turns any supported cargo input into a ParsedLoad:
1. text / image - LLM cargo extraction agent (vision model for images)
2. spreadsheet - header aliases, LLM column mapping as fallback
3. rows / items - deterministic coercion, no LLM call
"""

from typing import Any, Protocol

from agents import Agent, Runner
from pydantic import ValidationError

from common.config import config
from common.errors import CollaboratorError, InputError, first_validation_error
from common.logging import get_logger
from common.openai_errors import handle_openai_errors
from extraction.agents.cargo_extraction import CargoExtractionResult, ParsedItem, create_cargo_extraction_agent
from extraction.agents.column_mapping import ColumnMappingResult, create_column_mapping_agent
from extraction.rows import item_from_row
from extraction.spreadsheet import parse_spreadsheet
from models.analyze import CargoInput, ImageInput, ItemsInput, RowsInput, SpreadsheetInput, TextInput
from models.cargo import CargoItem, ParsedLoad, ParseMetadata, ParseMethod

logger = get_logger(__name__)

MIN_TEXT_LENGTH = 10
SUPPORTED_IMAGE_TYPES = ("image/jpeg", "image/png", "image/webp", "image/gif")

AI_CONFIDENCE = 85
ROWS_CONFIDENCE = 80
ITEMS_CONFIDENCE = 100
SPREADSHEET_CONFIDENCE = {"pattern": 80, "AI": 90}


class CargoTextExtractor(Protocol):
    async def extract(self, cargo_input: CargoInput) -> ParsedLoad: ...


def _to_cargo_item(parsed: ParsedItem, index: int) -> CargoItem:
    return CargoItem(
        id=parsed.id.strip() or f"item-{index}",
        sku=parsed.sku or None,
        description=parsed.description.strip() or "Unknown Item",
        quantity=max(1, parsed.quantity),
        length=parsed.length,
        width=parsed.width,
        height=parsed.height,
        weight=parsed.weight,
        stackable=parsed.stackable,
        fragile=False,
        hazmat=False,
    )


def _build_load(
    items: list[CargoItem],
    confidence: int,
    method: ParseMethod,
    **metadata: Any,
) -> ParsedLoad:
    meta = ParseMetadata(
        parse_method=method,
        items_found=len(items),
        valid_items=sum(1 for item in items if item.is_valid),
        confidence=confidence,
        **metadata,
    )
    return ParsedLoad.from_items(items, confidence, meta)


class CargoExtractor:
    """Cargo extraction orchestrator."""

    def __init__(self):
        self._text_agent: Agent[CargoExtractionResult] | None = None
        self._vision_agent: Agent[CargoExtractionResult] | None = None
        self._column_agent: Agent[ColumnMappingResult] | None = None

    @property
    def text_agent(self) -> Agent[CargoExtractionResult]:
        if self._text_agent is None:
            self._text_agent = create_cargo_extraction_agent()
        return self._text_agent

    @property
    def vision_agent(self) -> Agent[CargoExtractionResult]:
        if self._vision_agent is None:
            self._vision_agent = create_cargo_extraction_agent(model=config.openai_vision_model)
        return self._vision_agent

    @property
    def column_agent(self) -> Agent[ColumnMappingResult]:
        if self._column_agent is None:
            self._column_agent = create_column_mapping_agent()
        return self._column_agent

    async def extract(self, cargo_input: CargoInput) -> ParsedLoad:
        """Dispatch on the input variant."""
        if isinstance(cargo_input, TextInput):
            return await self.extract_text(cargo_input.text)
        if isinstance(cargo_input, ImageInput):
            return await self.extract_image(cargo_input.image_base64, cargo_input.mime_type)
        if isinstance(cargo_input, SpreadsheetInput):
            return await self.extract_spreadsheet(cargo_input.content, cargo_input.filename)
        if isinstance(cargo_input, RowsInput):
            return self.extract_rows(cargo_input.rows)
        if isinstance(cargo_input, ItemsInput):
            return self.extract_items(cargo_input.items)
        raise InputError(f"Unsupported cargo input: {type(cargo_input).__name__}")

    async def _run_extraction(self, agent: Agent[CargoExtractionResult], agent_input, operation: str) -> list[CargoItem]:
        with handle_openai_errors(operation):
            run_result = await Runner.run(agent, agent_input)

        result = run_result.final_output
        if result is None:
            error = f"{operation} returned no result"
            logger.error(f"[Extract] {error}")
            raise CollaboratorError(error)

        logger.info(f"[Extract] {operation}: {len(result.items)} items ({result.reasoning})")
        try:
            return [_to_cargo_item(parsed, index) for index, parsed in enumerate(result.items)]
        except ValidationError as e:
            error = f"{operation} returned an invalid item: {first_validation_error(e)}"
            logger.error(f"[Extract] {error}")
            raise CollaboratorError(error) from e

    async def extract_text(self, text: str) -> ParsedLoad:
        text = (text or "").strip()
        if len(text) < MIN_TEXT_LENGTH:
            raise InputError(f"Text is too short to analyze (minimum {MIN_TEXT_LENGTH} characters)")

        logger.info(f"[Extract] Text extraction, {len(text)} characters")
        items = await self._run_extraction(self.text_agent, text, "Text Extraction")
        return _build_load(items, AI_CONFIDENCE, "text-ai")

    async def extract_image(self, image_base64: str, mime_type: str) -> ParsedLoad:
        if mime_type not in SUPPORTED_IMAGE_TYPES:
            raise InputError(f"Unsupported image type: {mime_type}. Supported: {', '.join(SUPPORTED_IMAGE_TYPES)}")

        # accept a full data URL as well as bare base64
        payload = image_base64.partition(",")[2] if image_base64.startswith("data:") else image_base64
        if not payload.strip():
            raise InputError("Image data is empty")

        agent_input = [
            {
                "role": "user",
                "content": [
                    {"type": "input_text", "text": "Extract every cargo item shown in this image."},
                    {"type": "input_image", "image_url": f"data:{mime_type};base64,{payload}", "detail": "high"},
                ],
            }
        ]
        logger.info(f"[Extract] Image extraction ({mime_type})")
        items = await self._run_extraction(self.vision_agent, agent_input, "Image Extraction")
        return _build_load(items, AI_CONFIDENCE, "image-ai")

    async def map_columns(self, headers: list[str], samples: list[dict[str, str]]) -> dict[str, str | None]:
        """Ask the column mapping agent which header holds each cargo field."""
        lines = [f"<Headers>\n{headers}\n</Headers>", "<SampleRows>"]
        lines += [str(row) for row in samples]
        lines.append("</SampleRows>")

        with handle_openai_errors("Column Mapping"):
            run_result = await Runner.run(self.column_agent, "\n".join(lines))

        result = run_result.final_output
        if result is None:
            raise CollaboratorError("Column Mapping returned no result")

        logger.info(f"[Extract] Column mapping: {result.reasoning}")
        return result.model_dump(exclude={"reasoning"})

    async def extract_spreadsheet(self, content: bytes, filename: str) -> ParsedLoad:
        sheet = await parse_spreadsheet(content, filename, column_mapper=self.map_columns)
        confidence = SPREADSHEET_CONFIDENCE[sheet.column_mapping]
        return _build_load(
            sheet.items,
            confidence,
            "spreadsheet",
            column_mapping=sheet.column_mapping,
            file_name=filename,
        )

    def extract_rows(self, rows: list[dict[str, Any]]) -> ParsedLoad:
        items = []
        for index, row in enumerate(rows):
            try:
                items.append(item_from_row(row, index))
            except ValidationError as e:
                raise InputError(f"Invalid row {index}: {first_validation_error(e)}") from e
        return _build_load(items, ROWS_CONFIDENCE, "rows")

    def extract_items(self, items: list[CargoItem]) -> ParsedLoad:
        return _build_load(list(items), ITEMS_CONFIDENCE, "items")
