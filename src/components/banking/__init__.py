"""
Banking component - Compliance balance and banked surplus ledger.
"""

from ._impl import BankingService, OwnerLocks, validate_amount
from .component import (
    run_apply,
    run_bank,
    run_get_balance,
    run_list_entries,
)
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
from .ports import LedgerRepoPort, RouteRepoPort

__all__ = [
    # Entry points
    "run_get_balance",
    "run_bank",
    "run_apply",
    "run_list_entries",
    # Input models
    "GetBalanceInput",
    "BankSurplusInput",
    "ApplyBankedInput",
    "ListEntriesInput",
    # Output models
    "BalanceSnapshot",
    "BankOutput",
    "ApplyOutput",
    "LedgerOutput",
    # Ports
    "LedgerRepoPort",
    "RouteRepoPort",
    # Service
    "BankingService",
    "OwnerLocks",
    "validate_amount",
]
