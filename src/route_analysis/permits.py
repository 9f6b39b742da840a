"""
Per-state permit requirements for a cargo envelope along a route.

Every traversed state is checked against the same baseline (federal standard
limits from config); state-specific limits, fees and escort rules are not
modelled.
"""

from common.config import config
from common.logging import get_logger
from models.route import PermitCargo, PermitCheck, RoutePermitSummary, StatePermit
from models.trucks import Envelope
from planner.dimensions import inches_to_feet_inches
from route_analysis.geo import state_name

logger = get_logger(__name__)


def permit_limits() -> Envelope:
    return Envelope(
        length=config.permit_length,
        width=config.permit_width,
        height=config.permit_height,
        weight=config.permit_gross_weight,
    )


def needs_permit(cargo: PermitCargo, limits: Envelope | None = None) -> PermitCheck:
    """
    Quick check of a cargo envelope against standard limits.

    Example:
        needs_permit(PermitCargo(length=600, width=120, height=132, weight=90000))
        -> oversize and overweight, with one reason per exceeded dimension
    """
    limits = limits or permit_limits()
    reasons = []
    for dim in ("width", "height", "length"):
        value, limit = getattr(cargo, dim), getattr(limits, dim)
        if value > limit:
            reasons.append(f"{dim.title()} {inches_to_feet_inches(value)} > {inches_to_feet_inches(limit)} standard")

    oversize = bool(reasons)
    overweight = cargo.weight > limits.weight
    if overweight:
        reasons.append(f"Weight {cargo.weight:,.0f} lbs > {limits.weight:,.0f} lb standard")

    return PermitCheck(oversize_needed=oversize, overweight_needed=overweight, reasons=reasons)


def calculate_route_permits(
    states: list[str],
    cargo: PermitCargo,
    state_distances: dict[str, float] | None = None,
    limits: Envelope | None = None,
) -> RoutePermitSummary:
    """Permit requirements for each traversed state, in route order."""
    check = needs_permit(cargo, limits)
    distances = state_distances or {}

    permits = [
        StatePermit(
            state_code=code,
            state_name=state_name(code),
            oversize_required=check.oversize_needed,
            overweight_required=check.overweight_needed,
            reasons=list(check.reasons),
            distance_miles=distances.get(code, 0),
        )
        for code in states
    ]
    permit_states = [p.state_code for p in permits if p.oversize_required or p.overweight_required]
    escort = cargo.width > config.escort_width

    warnings = []
    if permit_states:
        flags = (("Oversize", check.oversize_needed), ("Overweight", check.overweight_needed))
        kinds = [kind for kind, needed in flags if needed]
        plural = "s" if len(permit_states) != 1 else ""
        warnings.append(
            f"{' and '.join(kinds)} permits required in {len(permit_states)} state{plural}: {', '.join(permit_states)}"
        )
    if escort:
        warnings.append(f"Width over {inches_to_feet_inches(config.escort_width)} requires escort vehicles")

    logger.info(f"[Permits] {len(permit_states)} of {len(states)} states need permits")
    return RoutePermitSummary(states=permits, permit_states=permit_states, escort_required=escort, warnings=warnings)
