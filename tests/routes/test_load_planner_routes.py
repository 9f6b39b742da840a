"""Tests for the load planner HTTP endpoints."""

import pytest
from fastapi.testclient import TestClient

from common.errors import CollaboratorError
from extraction.extractor import CargoExtractor
from main import app
from models.cargo import CargoItem, ParsedLoad
from routes.load_planner import get_cargo_extractor

EXCAVATOR = {"id": "ex-1", "description": "CAT 320 excavator", "length": 384, "width": 120, "height": 132, "weight": 48000}
PALLETS = {"id": "plt", "description": "Pallet", "quantity": 3, "length": 48, "width": 40, "height": 50, "weight": 1200}


class StubExtractor(CargoExtractor):
    """Real extractor for rows/items/spreadsheets; text goes to a canned result or error."""

    def __init__(self, text_result: ParsedLoad | None = None, text_error: Exception | None = None):
        super().__init__()
        self.text_result = text_result
        self.text_error = text_error

    async def extract_text(self, text: str) -> ParsedLoad:
        if self.text_error is not None:
            raise self.text_error
        return self.text_result


@pytest.fixture
def client():
    app.dependency_overrides[get_cargo_extractor] = lambda: StubExtractor()
    yield TestClient(app)
    app.dependency_overrides.clear()


def override_extractor(extractor: CargoExtractor) -> None:
    app.dependency_overrides[get_cargo_extractor] = lambda: extractor


# --- /analyze ---


def test_analyze_items_uses_camel_case(client):
    resp = client.post("/api/load-planner/analyze", json={"items": [EXCAVATOR]})

    assert resp.status_code == 200
    body = resp.json()
    assert body["success"] is True
    assert body["parsedLoad"]["items"][0]["id"] == "ex-1"
    assert body["metadata"]["parseMethod"] == "items"
    assert [rec["truck"]["id"] for rec in body["recommendations"]] == ["rgn", "lowboy"]
    assert body["loadPlan"]["totalTrucks"] == 1
    assert "statusCode" not in body


def test_analyze_rows(client):
    resp = client.post("/api/load-planner/analyze", json={"rows": [{"name": "Crate", "qty": "2", "length": "48", "width": "40", "height": "40", "weight": "500"}]})

    body = resp.json()
    assert resp.status_code == 200
    assert body["parsedLoad"]["items"][0]["quantity"] == 2
    assert body["loadPlan"]["totalItems"] == 2


def test_analyze_invalid_body(client):
    resp = client.post("/api/load-planner/analyze", json={"foo": "bar"})
    assert resp.status_code == 400
    assert resp.json()["success"] is False
    assert resp.json()["error"].startswith("Invalid request body")


def test_analyze_short_text(client):
    override_extractor(CargoExtractor())
    resp = client.post("/api/load-planner/analyze", json={"text": "hi there"})
    assert resp.status_code == 400
    assert "minimum 10 characters" in resp.json()["error"]


def test_analyze_text(client):
    load = ParsedLoad.from_items([CargoItem(**PALLETS)], confidence=85)
    override_extractor(StubExtractor(text_result=load))

    resp = client.post("/api/load-planner/analyze", json={"emailText": "Three pallets, 48x40x50, 1200 lbs each"})

    assert resp.status_code == 200
    assert resp.json()["recommendations"][0]["fit"] == "legal-fit"


def test_analyze_llm_failure_is_502(client):
    override_extractor(StubExtractor(text_error=CollaboratorError("Azure OpenAI error: rate limited")))
    resp = client.post("/api/load-planner/analyze", json={"text": "Three pallets of tile please"})
    assert resp.status_code == 502
    assert resp.json()["error"] == "Azure OpenAI error: rate limited"


# --- /analyze-file ---


def test_analyze_file_csv(client):
    csv = b"Description,Length (in),Width (in),Height (in),Weight (lbs)\nCAT 320 excavator,384,120,132,48000\n"

    resp = client.post("/api/load-planner/analyze-file", files={"file": ("cargo.csv", csv, "text/csv")})

    body = resp.json()
    assert resp.status_code == 200
    assert body["metadata"]["parseMethod"] == "spreadsheet"
    assert body["metadata"]["columnMapping"] == "pattern"
    assert body["metadata"]["fileName"] == "cargo.csv"
    assert body["parsedLoad"]["items"][0]["height"] == 132


def test_analyze_file_unsupported_type(client):
    resp = client.post("/api/load-planner/analyze-file", files={"file": ("quote.pdf", b"%PDF-1.4", "application/pdf")})
    assert resp.status_code == 400
    assert resp.json()["error"].startswith("Unsupported file type: application/pdf")


def test_analyze_file_nothing_sent(client):
    resp = client.post("/api/load-planner/analyze-file")
    assert resp.status_code == 400
    assert resp.json()["error"] == "No file or text provided"


# --- Catalog, recommendations, plans ---


def test_list_and_get_trucks(client):
    trucks = client.get("/api/load-planner/trucks").json()
    assert [truck["id"] for truck in trucks] == ["flatbed", "step-deck", "rgn", "lowboy"]

    rgn = client.get("/api/load-planner/trucks/rgn").json()
    assert rgn["max"]["weight"] == 150000

    assert client.get("/api/load-planner/trucks/spaceship").status_code == 404


def test_recommendations(client):
    resp = client.post("/api/load-planner/recommendations", json={"items": [PALLETS]})
    assert resp.status_code == 200
    assert resp.json()[0]["truck"]["id"] == "flatbed"


def test_plan(client):
    resp = client.post("/api/load-planner/plan", json={"items": [EXCAVATOR, PALLETS]})

    plan = resp.json()
    assert resp.status_code == 200
    assert plan["totalItems"] == 4
    assert plan["totalWeight"] == 48000 + 3 * 1200
    assert plan["unplaceable"] == []


def test_plan_rejects_bad_items(client):
    resp = client.post("/api/load-planner/plan", json={"items": [{"description": "no id"}]})
    assert resp.status_code == 422


# --- Non-finite numbers ---

OVERFLOWING_ITEMS = '{"items": [{"id": "a", "description": "beam", "length": 1e400, "width": 50, "height": 50, "weight": 1000}]}'


def test_analyze_rejects_non_finite_dimensions(client):
    resp = client.post(
        "/api/load-planner/analyze", content=OVERFLOWING_ITEMS, headers={"Content-Type": "application/json"}
    )
    assert resp.status_code == 400
    assert resp.json()["error"].startswith("Invalid items: items.0.length")


def test_plan_rejects_non_finite_dimensions(client):
    resp = client.post("/api/load-planner/plan", content=OVERFLOWING_ITEMS, headers={"Content-Type": "application/json"})
    assert resp.status_code == 422
    error = resp.json()["detail"][0]
    assert error["loc"] == ["body", "items", 0, "length"]
    assert "input" not in error
