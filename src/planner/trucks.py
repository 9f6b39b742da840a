"""
Fixed trailer catalog.

Envelopes are cargo limits in inches and pounds. The legal envelope is what
the trailer carries on public roads without oversize/overweight permits (deck
height eats into the 13' 6" overall height limit); the max envelope is what
it can physically carry with permits and escorts.
"""

from models.trucks import Envelope, TruckSpec

FLATBED = TruckSpec(
    id="flatbed",
    name="Flatbed",
    description="48' flatbed, 5' deck. General freight, crane or forklift loaded.",
    legal=Envelope(length=600, width=102, height=102, weight=45000),
    max=Envelope(length=720, width=168, height=120, weight=47000),
)

STEP_DECK = TruckSpec(
    id="step-deck",
    name="Step Deck",
    description="53' step deck, 3'4\" lower deck. Taller cargo that still loads from a ramp.",
    legal=Envelope(length=636, width=102, height=120, weight=46000),
    max=Envelope(length=756, width=168, height=138, weight=47500),
)

RGN = TruckSpec(
    id="rgn",
    name="RGN (Removable Gooseneck)",
    description="29' well, detachable gooseneck for drive-on equipment. Multi-axle permit loads.",
    legal=Envelope(length=348, width=102, height=138, weight=42000),
    max=Envelope(length=636, width=192, height=168, weight=150000),
)

LOWBOY = TruckSpec(
    id="lowboy",
    name="Lowboy",
    description="24' well, 18\" deck height. Tallest and heaviest equipment.",
    legal=Envelope(length=288, width=102, height=144, weight=40000),
    max=Envelope(length=600, width=192, height=180, weight=150000),
)

# Read-only, process-wide; order is the tie-break order for recommendations
TRUCK_CATALOG: tuple[TruckSpec, ...] = (FLATBED, STEP_DECK, RGN, LOWBOY)


def get_truck_by_id(truck_id: str, catalog: tuple[TruckSpec, ...] = TRUCK_CATALOG) -> TruckSpec | None:
    return next((truck for truck in catalog if truck.id == truck_id), None)
