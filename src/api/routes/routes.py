"""Route catalogue endpoints."""

from fastapi import APIRouter, Depends

from src.api.deps import get_route_service
from src.api.errors import to_http_exception
from src.api.schemas import ComparisonResponse, RouteComparisonResponse, RouteResponse
from src.components.routes import (
    GetRouteInput,
    RouteService,
    RouteView,
    SetBaselineInput,
    run_compare,
    run_get,
    run_list,
    run_set_baseline,
)
from src.domain.errors import ComplianceError

router = APIRouter()


def _to_response(view: RouteView) -> RouteResponse:
    return RouteResponse(
        **view.route.model_dump(),
        energy_in_scope=view.energy_in_scope,
        total_emissions=view.total_emissions,
        compliance_balance=view.compliance_balance,
    )


@router.get("", response_model=list[RouteResponse])
def list_routes(service: RouteService = Depends(get_route_service)) -> list[RouteResponse]:
    """List all routes with derived energy, emissions and balance."""
    result = run_list(service)
    return [_to_response(view) for view in result.routes]


@router.get("/comparison", response_model=ComparisonResponse)
def compare_routes(service: RouteService = Depends(get_route_service)) -> ComparisonResponse:
    """Compare every route against the target intensity."""
    result = run_compare(service)
    return ComparisonResponse(
        target_intensity=result.target_intensity,
        baseline_id=result.baseline_id,
        rows=[
            RouteComparisonResponse(
                route_id=row.route_id,
                ghg_intensity=row.ghg_intensity,
                compliance_balance=row.compliance_balance,
                is_compliant=row.is_compliant,
                percent_diff=row.percent_diff,
            )
            for row in result.rows
        ],
    )


@router.get("/{route_id}", response_model=RouteResponse)
def get_route(
    route_id: str,
    service: RouteService = Depends(get_route_service),
) -> RouteResponse:
    try:
        view = run_get(GetRouteInput(route_id=route_id), service)
    except ComplianceError as e:
        raise to_http_exception(e) from e
    return _to_response(view)


@router.post("/{route_id}/baseline", response_model=RouteResponse)
def set_baseline(
    route_id: str,
    service: RouteService = Depends(get_route_service),
) -> RouteResponse:
    """Mark a route as the comparison baseline."""
    try:
        view = run_set_baseline(SetBaselineInput(route_id=route_id), service)
    except ComplianceError as e:
        raise to_http_exception(e) from e
    return _to_response(view)
