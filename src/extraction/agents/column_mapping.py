"""
Spreadsheet column mapping agent.

Used when a sheet's headers do not match the known aliases: maps each cargo
field to the header that holds it, given the headers and a few sample rows.
"""

from agents import Agent, OpenAIChatCompletionsModel
from pydantic import BaseModel, Field

from common.config import config
from services.azure_openai_service import AzureOpenAIService


class ColumnMappingResult(BaseModel):
    """Header name for each cargo field; None when the sheet has no such column."""

    description: str | None = Field(None, description="Header of the item name/description column")
    sku: str | None = Field(None, description="Header of the SKU / part / model number column")
    quantity: str | None = Field(None, description="Header of the quantity column")
    length: str | None = Field(None, description="Header of the length column")
    width: str | None = Field(None, description="Header of the width column")
    height: str | None = Field(None, description="Header of the height column")
    weight: str | None = Field(None, description="Header of the weight column")
    stackable: str | None = Field(None, description="Header of a stackable yes/no column")
    fragile: str | None = Field(None, description="Header of a fragile yes/no column")
    hazmat: str | None = Field(None, description="Header of a hazmat / dangerous goods column")
    reasoning: str = Field(..., description="One sentence on how the columns were identified")


COLUMN_MAPPING_INSTRUCTIONS = """
<ROLE>
You map spreadsheet columns of freight packing lists and equipment lists to cargo fields.
</ROLE>

<TASK>
You get the exact header row and up to five sample rows. For each field, return the EXACT
header text (copied verbatim) of the column that holds it, or null if no column does.
Use the sample values to decide: dimension columns hold numbers or feet-inches like 10'6",
weight columns hold large numbers, lbs, kg or tons.
</TASK>

<RULES>
- Never return a header that is not in the header row.
- Never map two fields to the same header.
- A combined column like "Dimensions (LxWxH)" cannot be mapped to length/width/height; return null.
</RULES>
"""


def create_column_mapping_agent(model: str = config.openai_model) -> Agent[ColumnMappingResult]:
    """Create an agent for mapping unrecognized spreadsheet headers."""
    azure_client = AzureOpenAIService.get_async_client(model=model)

    azure_model = OpenAIChatCompletionsModel(
        model=model,
        openai_client=azure_client,
    )

    return Agent[ColumnMappingResult](
        name="Column Mapping Assistant",
        instructions=COLUMN_MAPPING_INSTRUCTIONS,
        output_type=ColumnMappingResult,
        tools=[],
        model=azure_model,
    )
