"""
Routes component - Data models.
"""

from __future__ import annotations

from dataclasses import dataclass

from src.domain.entities import Route

# --- Input Models ---


@dataclass(frozen=True)
class GetRouteInput:
    """Input for fetching a single route."""

    route_id: str


@dataclass(frozen=True)
class SetBaselineInput:
    """Input for marking a route as the comparison baseline."""

    route_id: str


# --- Output Models ---


@dataclass(frozen=True)
class RouteView:
    """Route with its derived energy and emission figures."""

    route: Route
    energy_in_scope: float
    total_emissions: float
    compliance_balance: float


@dataclass(frozen=True)
class RouteComparison:
    """One row of the compliance comparison table."""

    route_id: str
    ghg_intensity: float
    compliance_balance: float
    is_compliant: bool
    percent_diff: float


@dataclass(frozen=True)
class RouteListOutput:
    """Output from list operation."""

    routes: tuple[RouteView, ...]
    total: int


@dataclass(frozen=True)
class ComparisonOutput:
    """Output from compare operation."""

    rows: tuple[RouteComparison, ...]
    target_intensity: float
    baseline_id: str | None
