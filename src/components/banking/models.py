"""
Banking component - Data models.
"""

from __future__ import annotations

from dataclasses import dataclass

from src.domain.entities import BalanceStatus, BankEntry

# --- Input Models ---


@dataclass(frozen=True)
class GetBalanceInput:
    """Input for reading a route's compliance balance."""

    route_id: str


@dataclass(frozen=True)
class BankSurplusInput:
    """Input for banking part of a surplus."""

    route_id: str
    amount: float


@dataclass(frozen=True)
class ApplyBankedInput:
    """Input for applying banked surplus to a deficit year."""

    route_id: str
    apply_year: int
    amount: float


@dataclass(frozen=True)
class ListEntriesInput:
    """Input for listing a route's ledger."""

    route_id: str
    year: int | None = None


# --- Output Models ---


@dataclass(frozen=True)
class BalanceSnapshot:
    """Compliance balance of one route for its reporting year."""

    route_id: str
    year: int
    balance: float
    status: BalanceStatus


@dataclass(frozen=True)
class BankOutput:
    """Output from bank operation."""

    entry: BankEntry
    available_after: float


@dataclass(frozen=True)
class ApplyOutput:
    """
    Output from apply operation.

    consumed_total can exceed requested: entries are consumed whole.
    """

    route_id: str
    apply_year: int
    requested: float
    consumed: tuple[BankEntry, ...]
    consumed_total: float
    available_after: float


@dataclass(frozen=True)
class LedgerOutput:
    """Output from ledger listing."""

    route_id: str
    entries: tuple[BankEntry, ...]
    available: float
