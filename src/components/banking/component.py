"""
Banking component - Compliance balance and surplus banking.

Shell Layer - maps component inputs onto BankingService calls.
Domain errors (src.domain.errors) propagate to the caller.
"""

from __future__ import annotations

from ._impl import BankingService
from .models import (
    ApplyBankedInput,
    ApplyOutput,
    BalanceSnapshot,
    BankOutput,
    BankSurplusInput,
    GetBalanceInput,
    LedgerOutput,
    ListEntriesInput,
)


def run_get_balance(input_data: GetBalanceInput, service: BankingService) -> BalanceSnapshot:
    """Current compliance balance of a route."""
    return service.get_balance(input_data.route_id)


def run_bank(input_data: BankSurplusInput, service: BankingService) -> BankOutput:
    """Bank part of a route's surplus."""
    entry = service.bank_surplus(input_data.route_id, input_data.amount)
    return BankOutput(
        entry=entry,
        available_after=service.available_surplus(input_data.route_id),
    )


def run_apply(input_data: ApplyBankedInput, service: BankingService) -> ApplyOutput:
    """Apply banked surplus against a deficit year."""
    return service.apply_banked_surplus(
        input_data.route_id,
        input_data.apply_year,
        input_data.amount,
    )


def run_list_entries(input_data: ListEntriesInput, service: BankingService) -> LedgerOutput:
    """List a route's bank entries, optionally for one vintage."""
    entries = service.list_entries(input_data.route_id, input_data.year)
    return LedgerOutput(
        route_id=input_data.route_id,
        entries=tuple(entries),
        available=service.available_surplus(input_data.route_id),
    )
