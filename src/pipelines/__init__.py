"""Load planner pipelines."""

from pipelines.cargo_analysis import analyze_cargo, build_analysis

__all__ = [
    "analyze_cargo",
    "build_analysis",
]
