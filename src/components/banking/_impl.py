"""
BankingService - Banked surplus ledger.

Banks part of a route's positive compliance balance and applies banked
surplus, oldest vintage first, against a later deficit.

Functional Core - business rules are checked before any write.

Key behaviors:
- Surplus can only be banked from a strictly positive CB, up to the CB
- Entries are consumed whole in ascending vintage order; the last one may
  overshoot the requested amount
- All entries consumed by one apply call are written as one batch
- Bank/apply calls for the same owner are serialized
"""

from __future__ import annotations

import logging
import math
import threading
from collections.abc import Iterator
from contextlib import contextmanager

from src.domain.compliance import BalanceCalculator, balance_status
from src.domain.entities import BankEntry, Route
from src.domain.errors import (
    AllocationShortfallError,
    DeficitError,
    ExceedsAvailableError,
    ExceedsSurplusError,
    InvalidInputError,
    NotFoundError,
)

from .models import ApplyOutput, BalanceSnapshot
from .ports import LedgerRepoPort, RouteRepoPort

logger = logging.getLogger(__name__)


def validate_amount(amount: float) -> None:
    """Amounts must be finite and strictly positive."""
    if not isinstance(amount, int | float) or isinstance(amount, bool):
        raise InvalidInputError("Amount must be a number", field="amount")
    if not math.isfinite(amount) or amount <= 0:
        raise InvalidInputError("Amount must be a positive number", field="amount")


def available_in_vintage_order(entries: list[BankEntry]) -> list[BankEntry]:
    """Unapplied entries, oldest vintage first. Equal vintages keep their stored order."""
    return sorted((e for e in entries if e.is_available), key=lambda e: e.year)


def sum_available(entries: list[BankEntry]) -> float:
    # Same order as the apply loop accumulates in
    return sum(e.amount for e in available_in_vintage_order(entries))


class OwnerLocks:
    """One lock per ledger owner."""

    def __init__(self) -> None:
        self._guard = threading.Lock()
        self._locks: dict[str, threading.Lock] = {}

    @contextmanager
    def hold(self, owner_id: str) -> Iterator[None]:
        with self._guard:
            lock = self._locks.setdefault(owner_id, threading.Lock())
        with lock:
            yield


class BankingService:
    """
    Banking service.

    Ledger writes go through this service so per-owner locking holds.
    """

    def __init__(
        self,
        route_repo: RouteRepoPort,
        ledger_repo: LedgerRepoPort,
        calculator: BalanceCalculator | None = None,
        locks: OwnerLocks | None = None,
    ) -> None:
        self._routes = route_repo
        self._ledger = ledger_repo
        self._calc = calculator or BalanceCalculator()
        self._locks = locks or OwnerLocks()

    def _require_route(self, route_id: str) -> Route:
        route = self._routes.get_by_id(route_id)
        if route is None:
            raise NotFoundError(route_id)
        return route

    # --- Reads ---

    def get_balance(self, route_id: str) -> BalanceSnapshot:
        route = self._require_route(route_id)
        balance = self._calc.balance(route)
        return BalanceSnapshot(
            route_id=route.id,
            year=route.year,
            balance=balance,
            status=balance_status(balance),
        )

    def available_surplus(self, owner_id: str) -> float:
        """Sum of all unapplied banked amounts for the owner."""
        self._require_route(owner_id)
        return sum_available(self._ledger.get_entries(owner_id))

    def list_entries(self, owner_id: str, year: int | None = None) -> list[BankEntry]:
        self._require_route(owner_id)
        return self._ledger.get_entries(owner_id, year)

    # --- Writes ---

    def bank_surplus(self, route_id: str, amount: float) -> BankEntry:
        """
        Bank part of the route's current surplus.

        Raises:
            InvalidInputError: amount is not a positive number
            NotFoundError: unknown route
            DeficitError: CB is zero or negative
            ExceedsSurplusError: amount is larger than CB
        """
        validate_amount(amount)

        with self._locks.hold(route_id):
            route = self._require_route(route_id)
            balance = self._calc.balance(route)

            if balance <= 0:
                logger.warning("Bank rejected for %s: CB %.2f is not a surplus", route_id, balance)
                raise DeficitError(route_id, balance)

            if amount > balance:
                logger.warning(
                    "Bank rejected for %s: amount %.2f exceeds CB %.2f", route_id, amount, balance
                )
                raise ExceedsSurplusError(amount, balance)

            entry = BankEntry(route_id=route.id, year=route.year, amount=amount)
            self._ledger.save_entry(entry)

        logger.info("Banked %.2f for %s (vintage %d) as %s", amount, route_id, route.year, entry.id)
        return entry

    def apply_banked_surplus(self, owner_id: str, apply_year: int, amount: float) -> ApplyOutput:
        """
        Apply banked surplus to a deficit year, oldest vintage first.

        Entries are consumed whole, so the total consumed may exceed amount.

        Raises:
            InvalidInputError: amount is not a positive number
            NotFoundError: unknown route
            ExceedsAvailableError: amount is larger than the unapplied total
            AllocationShortfallError: entries ran out after passing the ceiling check
        """
        validate_amount(amount)
        if isinstance(apply_year, bool) or not isinstance(apply_year, int):
            raise InvalidInputError("Apply year must be an integer", field="apply_year")

        with self._locks.hold(owner_id):
            self._require_route(owner_id)
            entries = self._ledger.get_entries(owner_id)
            available = sum_available(entries)

            if amount > available:
                logger.warning(
                    "Apply rejected for %s: amount %.2f exceeds available %.2f",
                    owner_id,
                    amount,
                    available,
                )
                raise ExceedsAvailableError(amount, available)

            candidates = available_in_vintage_order(entries)

            consumed: list[BankEntry] = []
            consumed_total = 0.0
            for entry in candidates:
                if consumed_total >= amount:
                    break
                consumed.append(entry.mark_applied(apply_year))
                consumed_total += entry.amount

            if consumed_total < amount:
                remaining = amount - consumed_total
                logger.critical(
                    "Ledger inconsistency for %s: %.2f uncovered after ceiling check passed",
                    owner_id,
                    remaining,
                )
                raise AllocationShortfallError(owner_id, remaining)

            self._ledger.save_entries(consumed)
            left_over = candidates[len(consumed):]

        logger.info(
            "Applied %d bank entries (%.2f) for %s to %d, requested %.2f",
            len(consumed),
            consumed_total,
            owner_id,
            apply_year,
            amount,
        )
        return ApplyOutput(
            route_id=owner_id,
            apply_year=apply_year,
            requested=amount,
            consumed=tuple(consumed),
            consumed_total=consumed_total,
            available_after=sum(e.amount for e in left_over),
        )
