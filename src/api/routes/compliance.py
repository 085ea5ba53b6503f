"""Compliance balance endpoint."""

from fastapi import APIRouter, Depends

from src.api.deps import get_banking_service
from src.api.errors import to_http_exception
from src.api.schemas import BalanceResponse
from src.components.banking import BankingService, GetBalanceInput, run_get_balance
from src.domain.errors import ComplianceError

router = APIRouter()


@router.get("/cb", response_model=BalanceResponse)
def get_compliance_balance(
    route_id: str,
    service: BankingService = Depends(get_banking_service),
) -> BalanceResponse:
    """Current compliance balance of a route."""
    try:
        snapshot = run_get_balance(GetBalanceInput(route_id=route_id), service)
    except ComplianceError as e:
        raise to_http_exception(e) from e

    return BalanceResponse(
        route_id=snapshot.route_id,
        year=snapshot.year,
        balance=snapshot.balance,
        status=snapshot.status,
    )
