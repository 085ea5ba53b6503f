"""
Routes component - Route catalogue and comparison.

Shell Layer - handles I/O and error conversion.
"""

from __future__ import annotations

from ._impl import RouteService
from .models import (
    ComparisonOutput,
    GetRouteInput,
    RouteListOutput,
    RouteView,
    SetBaselineInput,
)


def run_list(service: RouteService) -> RouteListOutput:
    """List all routes with derived figures."""
    views = tuple(service.describe(route) for route in service.list_routes())
    return RouteListOutput(routes=views, total=len(views))


def run_get(input_data: GetRouteInput, service: RouteService) -> RouteView:
    """Get a route by ID. Raises NotFoundError."""
    return service.describe(service.get_route(input_data.route_id))


def run_compare(service: RouteService) -> ComparisonOutput:
    """Build the compliance comparison table."""
    baseline = service.get_baseline()
    return ComparisonOutput(
        rows=tuple(service.compare_routes()),
        target_intensity=service.target_intensity,
        baseline_id=baseline.id if baseline else None,
    )


def run_set_baseline(input_data: SetBaselineInput, service: RouteService) -> RouteView:
    """Mark a route as the baseline."""
    return service.describe(service.set_baseline(input_data.route_id))
