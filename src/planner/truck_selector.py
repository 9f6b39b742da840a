"""
Truck selection.

Classifies every catalog trailer against a load's aggregate envelope and
ranks the viable ones:
1. legal-fit - tightest fit first (least unused capacity costs least)
2. permit-required - fewest exceeded dimensions, then tightest fit
Trailers the load does not fit even with permits are left out.
"""

from models.cargo import ParsedLoad
from models.trucks import TruckRecommendation, TruckSpec
from planner.trucks import TRUCK_CATALOG

PERMIT_NAMES = {
    "length": "Oversize Length",
    "width": "Oversize Width",
    "height": "Oversize Height",
    "weight": "Overweight",
}


def classify_truck(length: float, width: float, height: float, weight: float, truck: TruckSpec) -> TruckRecommendation:
    """Compare cargo against the legal envelope first, then the max envelope."""
    legal_exceeded = truck.legal.exceeded_by(length, width, height, weight)
    if not legal_exceeded:
        return TruckRecommendation(
            truck=truck,
            fit="legal-fit",
            excess_capacity=truck.legal.slack(length, width, height, weight),
            reason=f"Fits within {truck.name} legal limits",
        )

    max_exceeded = truck.max.exceeded_by(length, width, height, weight)
    if not max_exceeded:
        return TruckRecommendation(
            truck=truck,
            fit="permit-required",
            exceeded=legal_exceeded,
            permits=[PERMIT_NAMES[dim] for dim in legal_exceeded],
            excess_capacity=truck.max.slack(length, width, height, weight),
            reason=f"Over legal {', '.join(legal_exceeded)} on {truck.name}; permit required",
        )

    return TruckRecommendation(
        truck=truck,
        fit="does-not-fit",
        exceeded=max_exceeded,
        reason=f"Over {truck.name} maximum {', '.join(max_exceeded)}",
    )


def _rank_key(position: int, rec: TruckRecommendation) -> tuple:
    if rec.fit == "legal-fit":
        return (0, 0, rec.excess_capacity, position)
    return (1, len(rec.exceeded), rec.excess_capacity, position)


def rank_trucks(
    length: float,
    width: float,
    height: float,
    weight: float,
    catalog: tuple[TruckSpec, ...] = TRUCK_CATALOG,
) -> list[TruckRecommendation]:
    """Viable trucks for a cargo envelope, best first."""
    classified = [classify_truck(length, width, height, weight, truck) for truck in catalog]
    viable = [(pos, rec) for pos, rec in enumerate(classified) if rec.fit != "does-not-fit"]
    return [rec for pos, rec in sorted(viable, key=lambda pair: _rank_key(*pair))]


def diagnose_trucks(load: ParsedLoad, catalog: tuple[TruckSpec, ...] = TRUCK_CATALOG) -> list[TruckRecommendation]:
    """Classification of every catalog truck (does-not-fit included), in catalog order."""
    plannable = load.plannable()
    if not plannable.items:
        return []
    return [
        classify_truck(plannable.length, plannable.width, plannable.height, plannable.weight, truck)
        for truck in catalog
    ]


def select_trucks(load: ParsedLoad, catalog: tuple[TruckSpec, ...] = TRUCK_CATALOG) -> list[TruckRecommendation]:
    """
    Recommend trucks for a load, best fit first.

    Only valid items count toward the aggregate; an empty or all-invalid
    load has no recommendations.
    """
    plannable = load.plannable()
    if not plannable.items:
        return []
    return rank_trucks(plannable.length, plannable.width, plannable.height, plannable.weight, catalog)


def get_best_truck(load: ParsedLoad, catalog: tuple[TruckSpec, ...] = TRUCK_CATALOG) -> TruckRecommendation | None:
    recommendations = select_trucks(load, catalog)
    return recommendations[0] if recommendations else None


def get_legal_trucks(load: ParsedLoad, catalog: tuple[TruckSpec, ...] = TRUCK_CATALOG) -> list[TruckRecommendation]:
    return [rec for rec in select_trucks(load, catalog) if rec.fit == "legal-fit"]


def can_transport_legally(load: ParsedLoad, catalog: tuple[TruckSpec, ...] = TRUCK_CATALOG) -> bool:
    return bool(get_legal_trucks(load, catalog))
