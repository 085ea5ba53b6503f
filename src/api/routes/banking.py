"""Banking endpoints: ledger listing, banking and applying surplus."""

from fastapi import APIRouter, Depends
from pydantic import BaseModel, Field

from src.api.deps import get_banking_service
from src.api.errors import to_http_exception
from src.api.schemas import ApplyResponse, BankEntryResponse, BankResponse, LedgerResponse
from src.components.banking import (
    ApplyBankedInput,
    BankingService,
    BankSurplusInput,
    ListEntriesInput,
    run_apply,
    run_bank,
    run_list_entries,
)
from src.domain.errors import ComplianceError

router = APIRouter()


# --- Request Models ---


class BankRequest(BaseModel):
    route_id: str = Field(min_length=1)
    amount: float = Field(gt=0)


class ApplyRequest(BaseModel):
    route_id: str = Field(min_length=1)
    apply_year: int
    amount: float = Field(gt=0)


# --- Routes ---


@router.get("/records", response_model=LedgerResponse)
def list_records(
    route_id: str,
    year: int | None = None,
    service: BankingService = Depends(get_banking_service),
) -> LedgerResponse:
    """Bank entries of a route, optionally for one vintage year."""
    try:
        result = run_list_entries(ListEntriesInput(route_id=route_id, year=year), service)
    except ComplianceError as e:
        raise to_http_exception(e) from e

    return LedgerResponse(
        route_id=result.route_id,
        available=result.available,
        entries=[BankEntryResponse.model_validate(entry) for entry in result.entries],
    )


@router.post("/bank", response_model=BankResponse)
def bank_surplus(
    data: BankRequest,
    service: BankingService = Depends(get_banking_service),
) -> BankResponse:
    """Bank part of a route's surplus."""
    try:
        result = run_bank(BankSurplusInput(route_id=data.route_id, amount=data.amount), service)
    except ComplianceError as e:
        raise to_http_exception(e) from e

    return BankResponse(
        message="Surplus banked successfully.",
        entry=BankEntryResponse.model_validate(result.entry),
        available_after=result.available_after,
    )


@router.post("/apply", response_model=ApplyResponse)
def apply_banked(
    data: ApplyRequest,
    service: BankingService = Depends(get_banking_service),
) -> ApplyResponse:
    """Apply banked surplus to a deficit year."""
    input_data = ApplyBankedInput(
        route_id=data.route_id,
        apply_year=data.apply_year,
        amount=data.amount,
    )
    try:
        result = run_apply(input_data, service)
    except ComplianceError as e:
        raise to_http_exception(e) from e

    return ApplyResponse(
        message="Banked surplus applied successfully.",
        route_id=result.route_id,
        apply_year=result.apply_year,
        requested=result.requested,
        consumed_total=result.consumed_total,
        consumed=[BankEntryResponse.model_validate(entry) for entry in result.consumed],
        available_after=result.available_after,
    )
