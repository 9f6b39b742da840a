"""
Multi-truck load planning.

First-fit decreasing over individual units:
1. Expand each valid item by quantity (units of one order may ride different trucks)
2. Sort units by weight, then volume, heaviest first
3. Put each unit on the first open truck whose legal envelope still holds it
4. Otherwise open a truck using the best recommendation for the unit alone

A heuristic: the goal is a small, explainable number of trucks, not the
minimum. Bins track a bounding box (componentwise max, items side by side),
so stacking is approximated by the bounding-height check.
"""

from dataclasses import dataclass, field

from common.logging import get_logger
from models.cargo import CargoItem, ParsedLoad
from models.load_plan import LoadPlan, PlacedItem, TruckLoad, UnplaceableUnit
from models.trucks import TruckRecommendation, TruckSpec
from planner.dimensions import format_dimension
from planner.truck_selector import rank_trucks
from planner.trucks import TRUCK_CATALOG

logger = get_logger(__name__)


@dataclass(frozen=True)
class _Unit:
    item: CargoItem
    unit_index: int

    @property
    def weight(self) -> float:
        return self.item.weight


@dataclass
class _Bin:
    """Running state of one truck while planning; never leaves plan_loads."""

    recommendation: TruckRecommendation
    units: list[_Unit] = field(default_factory=list)
    weight: float = 0
    length: float = 0
    width: float = 0
    height: float = 0

    @property
    def hazmat(self) -> bool:
        return bool(self.units) and self.units[0].item.hazmat

    def accepts(self, unit: _Unit) -> bool:
        limits = self.recommendation.truck.legal
        item = unit.item
        if self.weight + unit.weight > limits.weight:
            return False
        if max(self.length, item.length) > limits.length or max(self.width, item.width) > limits.width:
            return False
        if max(self.height, item.height) > limits.height:
            return False
        # hazmat rides only with hazmat
        return not self.units or item.hazmat == self.hazmat

    def add(self, unit: _Unit) -> None:
        self.units.append(unit)
        self.weight += unit.weight
        self.length = max(self.length, unit.item.length)
        self.width = max(self.width, unit.item.width)
        self.height = max(self.height, unit.item.height)

    def to_load(self, load_id: str) -> TruckLoad:
        placed: dict[str, PlacedItem] = {}
        for unit in self.units:
            item = unit.item
            if item.id in placed:
                placed[item.id].quantity += 1
            else:
                placed[item.id] = PlacedItem(
                    item_id=item.id,
                    description=item.description,
                    quantity=1,
                    length=item.length,
                    width=item.width,
                    height=item.height,
                    weight=item.weight,
                )

        rec = self.recommendation
        return TruckLoad(
            id=load_id,
            truck=rec.truck,
            fit=rec.fit,
            items=list(placed.values()),
            unit_count=len(self.units),
            weight=self.weight,
            length=self.length,
            width=self.width,
            height=self.height,
            exceeded=list(rec.exceeded),
            permits=list(rec.permits),
        )


def _expand_units(items: list[CargoItem]) -> list[_Unit]:
    units = [_Unit(item=item, unit_index=n) for item in items for n in range(item.quantity)]
    # stable: equal units keep item order
    units.sort(key=lambda u: (-u.item.weight, -u.item.volume))
    return units


def _unplaceable(unit: _Unit) -> tuple[UnplaceableUnit, str]:
    item = unit.item
    record = UnplaceableUnit(
        item_id=item.id,
        description=item.description,
        unit_index=unit.unit_index,
        length=item.length,
        width=item.width,
        height=item.height,
        weight=item.weight,
        reason="Exceeds the maximum envelope of every catalog truck",
    )
    warning = (
        f'Item "{item.description}" ({format_dimension(item.length)} L x {format_dimension(item.width)} W x '
        f"{format_dimension(item.height)} H, {item.weight:,.0f} lbs) exceeds all truck capacities"
    )
    return record, warning


def plan_loads(load: ParsedLoad, catalog: tuple[TruckSpec, ...] = TRUCK_CATALOG) -> LoadPlan:
    """
    Assign the load's valid items to trucks.

    Units that fit no catalog truck, even with permits, are reported in
    `unplaceable` with a warning each; they are never dropped silently.
    """
    bins: list[_Bin] = []
    unplaceable: list[UnplaceableUnit] = []
    warnings: list[str] = []

    for unit in _expand_units(load.valid_items):
        target = next((b for b in bins if b.accepts(unit)), None)

        if target is None:
            item = unit.item
            ranked = rank_trucks(item.length, item.width, item.height, item.weight, catalog)
            if not ranked:
                record, warning = _unplaceable(unit)
                unplaceable.append(record)
                warnings.append(warning)
                logger.warning(f"[Planner] {warning}")
                continue
            target = _Bin(recommendation=ranked[0])
            bins.append(target)
            logger.debug(f"[Planner] Opened truck {len(bins)}: {ranked[0].truck.name} ({ranked[0].fit})")

        target.add(unit)

    loads = [b.to_load(f"load-{n}") for n, b in enumerate(bins, start=1)]
    for truck_load in loads:
        if truck_load.fit == "permit-required":
            warnings.append(f"{truck_load.id}: {truck_load.truck.name} requires permits ({', '.join(truck_load.permits)})")
    if len(loads) > 1:
        warnings.append(f"Load requires {len(loads)} trucks to transport all items")

    plan = LoadPlan(
        loads=loads,
        total_trucks=len(loads),
        total_weight=sum(truck_load.weight for truck_load in loads),
        total_items=sum(truck_load.unit_count for truck_load in loads),
        unplaceable=unplaceable,
        warnings=warnings,
    )
    logger.info(f"[Planner] {load_plan_summary(plan)}")
    return plan


def load_plan_summary(plan: LoadPlan) -> str:
    """One-line summary, e.g. '2 trucks, 5 units, 61,000 lbs'."""
    trucks = f"{plan.total_trucks} truck{'s' if plan.total_trucks != 1 else ''}"
    units = f"{plan.total_items} unit{'s' if plan.total_items != 1 else ''}"
    summary = f"{trucks}, {units}, {plan.total_weight:,.0f} lbs"
    if plan.unplaceable:
        summary += f"; {len(plan.unplaceable)} unplaceable"
    return summary
