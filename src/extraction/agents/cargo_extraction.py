"""
Cargo extraction agent.

Extracts a list of cargo items from an e-mail, quote request, packing list,
or a photo/screenshot of one:
- description / sku: what each item is
- quantity: number of identical units
- length, width, height: inches
- weight: pounds per unit
- stackable: whether other cargo can ride on top
"""

from agents import Agent, OpenAIChatCompletionsModel
from pydantic import BaseModel, ConfigDict, Field

from common.config import config
from services.azure_openai_service import AzureOpenAIService


class ParsedItem(BaseModel):
    """One cargo line as extracted by the agent."""

    model_config = ConfigDict(allow_inf_nan=False)

    id: str = Field("", description="Identifier from the source (line number, tag, stock #); empty if none")
    sku: str | None = Field(None, description="SKU, part or model number if mentioned")
    description: str = Field(..., description="What the item is (e.g., 'CAT 320 excavator', 'crated generator')")
    quantity: int = Field(1, description="Number of identical units")
    length: float = Field(0, description="Length in inches, 0 if unknown")
    width: float = Field(0, description="Width in inches, 0 if unknown")
    height: float = Field(0, description="Height in inches, 0 if unknown")
    weight: float = Field(0, description="Weight of ONE unit in pounds, 0 if unknown")
    stackable: bool = Field(False, description="Other cargo can be placed on top")


class CargoExtractionResult(BaseModel):
    """Output from the cargo extraction agent."""

    items: list[ParsedItem] = Field(default_factory=list, description="Every distinct cargo item, in source order")
    reasoning: str = Field(..., description="Short explanation of unit conversions and assumptions")


CARGO_EXTRACTION_INSTRUCTIONS = """
<ROLE>
You are an expert heavy-haul freight estimator. You read shipping requests for machinery,
equipment and palletized freight and turn them into a clean list of cargo items.
</ROLE>

<TASK>
Extract every distinct cargo item from the input (e-mail text, quote request, packing list,
spreadsheet screenshot or photo). Translate non-English text. Do not invent items.
</TASK>

<UNITS>
- All dimensions MUST be returned in INCHES.
  - 10' 6" or 10 ft 6 in -> 126
  - 10-6 (feet-inches) -> 126
  - 3.2 m -> 126 (1 m = 39.37 in); 320 cm -> 126
- All weights MUST be returned in POUNDS for ONE unit.
  - 2.5 tons -> 5000 (short tons, 2000 lb)
  - 1,000 kg -> 2205 (1 kg = 2.20462 lb)
  - If only a total weight is given for N identical units, divide by N.
- Use 0 for any value that is not stated or cannot be inferred. Never guess dimensions.
</UNITS>

<FIELDS>
- **id**: identifier from the source if present (line #, stock #, tag), else empty
- **sku**: model or part number if present
- **description**: make/model/type, concise (e.g., "CAT 320 excavator")
- **quantity**: integer, 1 if not stated
- **length / width / height**: inches
- **weight**: pounds per unit
- **stackable**: True only if the source says the item can be stacked or it is clearly boxed/palletized freight
- **reasoning**: 1-3 sentences on conversions and assumptions
</FIELDS>

<EXAMPLES>
Example 1:
Input: "Need a quote to move a CAT 320 excavator, 32' L x 10' W x 11' H, about 48,000 lbs"
Output: items=[{description="CAT 320 excavator", quantity=1, length=384, width=120, height=132, weight=48000}]

Example 2:
Input: "3 crated generators 8x4x5 ft, 2.5 tons each. Crates can be stacked."
Output: items=[{description="Crated generator", quantity=3, length=96, width=48, height=60, weight=5000, stackable=True}]

Example 3:
Input: "Two skid steers (Bobcat S650), total 16,000 lbs"
Output: items=[{description="Bobcat S650 skid steer", sku="S650", quantity=2, length=0, width=0, height=0, weight=8000}]
</EXAMPLES>
"""


def create_cargo_extraction_agent(model: str = config.openai_model) -> Agent[CargoExtractionResult]:
    """Create an agent for extracting cargo items (text, or images with a vision model)."""
    azure_client = AzureOpenAIService.get_async_client(model=model)

    azure_model = OpenAIChatCompletionsModel(
        model=model,
        openai_client=azure_client,
    )

    return Agent[CargoExtractionResult](
        name="Cargo Extraction Assistant",
        instructions=CARGO_EXTRACTION_INSTRUCTIONS,
        output_type=CargoExtractionResult,
        tools=[],
        model=azure_model,
    )
