"""
Routes component - Route catalogue and compliance comparison.
"""

from ._impl import RouteService
from .component import (
    run_compare,
    run_get,
    run_list,
    run_set_baseline,
)
from .models import (
    ComparisonOutput,
    GetRouteInput,
    RouteComparison,
    RouteListOutput,
    RouteView,
    SetBaselineInput,
)
from .ports import RouteRepoPort

__all__ = [
    # Entry points
    "run_list",
    "run_get",
    "run_compare",
    "run_set_baseline",
    # Input models
    "GetRouteInput",
    "SetBaselineInput",
    # Output models
    "RouteView",
    "RouteComparison",
    "RouteListOutput",
    "ComparisonOutput",
    # Ports
    "RouteRepoPort",
    # Service
    "RouteService",
]
