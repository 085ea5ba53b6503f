"""
Unit tests for BankingService.

Tests the functional core business logic without HTTP concerns.
"""

import math
import threading

import pytest

from src.components.banking import BankingService, OwnerLocks, validate_amount
from src.domain.entities import BankEntry
from src.domain.errors import (
    AllocationShortfallError,
    DeficitError,
    ExceedsAvailableError,
    ExceedsSurplusError,
    InvalidInputError,
    NotFoundError,
)

SURPLUS_CB = 1.3368 * 4800 * 41000


@pytest.fixture
def surplus_route(route_repo, make_route):
    route = make_route("R002", ghg_intensity=88.0, fuel_consumption=4800)
    route_repo.save(route)
    return route


@pytest.fixture
def deficit_route(route_repo, make_route):
    route = make_route("R001", ghg_intensity=91.0, fuel_consumption=5000)
    route_repo.save(route)
    return route


# --- validate_amount ---


@pytest.mark.parametrize("amount", [0, -1, -0.5, math.inf, math.nan, "10", None, True])
def test_validate_amount_rejects(amount):
    with pytest.raises(InvalidInputError) as exc:
        validate_amount(amount)
    assert exc.value.field == "amount"


def test_validate_amount_accepts_positive():
    validate_amount(1)
    validate_amount(0.01)


# --- get_balance ---


def test_get_balance_surplus(banking_service: BankingService, surplus_route):
    snapshot = banking_service.get_balance("R002")
    assert snapshot.route_id == "R002"
    assert snapshot.year == 2024
    assert snapshot.balance == pytest.approx(SURPLUS_CB)
    assert snapshot.status == "Surplus"


def test_get_balance_deficit(banking_service: BankingService, deficit_route):
    snapshot = banking_service.get_balance("R001")
    assert snapshot.status == "Deficit"
    assert snapshot.balance < 0


def test_get_balance_unknown_route(banking_service: BankingService):
    with pytest.raises(NotFoundError) as exc:
        banking_service.get_balance("NOPE")
    assert exc.value.code == "route_not_found"


# --- bank_surplus ---


def test_bank_surplus_success(banking_service: BankingService, surplus_route, ledger_repo):
    entry = banking_service.bank_surplus("R002", 1_000_000)

    assert entry.route_id == "R002"
    assert entry.year == 2024
    assert entry.amount == 1_000_000
    assert entry.applied_year is None
    assert [e.id for e in ledger_repo.get_entries("R002")] == [entry.id]
    assert banking_service.available_surplus("R002") == 1_000_000


def test_bank_full_surplus_allowed(banking_service: BankingService, surplus_route):
    balance = banking_service.get_balance("R002").balance
    entry = banking_service.bank_surplus("R002", balance)
    assert entry.amount == balance


def test_bank_exceeds_surplus_creates_nothing(
    banking_service: BankingService, surplus_route, ledger_repo
):
    with pytest.raises(ExceedsSurplusError):
        banking_service.bank_surplus("R002", SURPLUS_CB * 2)
    assert ledger_repo.get_entries("R002") == []


def test_bank_from_deficit_rejected(banking_service: BankingService, deficit_route, ledger_repo):
    with pytest.raises(DeficitError) as exc:
        banking_service.bank_surplus("R001", 100)
    assert exc.value.code == "cb_not_positive"
    assert ledger_repo.get_entries("R001") == []


def test_bank_from_zero_balance_rejected(banking_service: BankingService, route_repo, make_route):
    route_repo.save(make_route("R0", ghg_intensity=89.3368))
    with pytest.raises(DeficitError):
        banking_service.bank_surplus("R0", 1)


def test_bank_invalid_amount(banking_service: BankingService, surplus_route):
    with pytest.raises(InvalidInputError):
        banking_service.bank_surplus("R002", 0)


def test_bank_unknown_route(banking_service: BankingService):
    with pytest.raises(NotFoundError):
        banking_service.bank_surplus("NOPE", 10)


def test_repeated_banking_is_not_capped_cumulatively(
    banking_service: BankingService, surplus_route
):
    """Each bank is checked against the current CB, not against what is already banked."""
    amount = SURPLUS_CB * 0.75
    banking_service.bank_surplus("R002", amount)
    banking_service.bank_surplus("R002", amount)
    assert banking_service.available_surplus("R002") == pytest.approx(2 * amount)


# --- apply_banked_surplus ---


def _seed_entries(ledger_repo, *entries):
    for entry_id, year, amount in entries:
        ledger_repo.save_entry(BankEntry(id=entry_id, route_id="R002", year=year, amount=amount))


def test_apply_consumes_whole_entry(banking_service: BankingService, surplus_route, ledger_repo):
    _seed_entries(ledger_repo, ("B1", 2024, 10_000_000))

    result = banking_service.apply_banked_surplus("R002", 2025, 3_000_000)

    assert result.requested == 3_000_000
    assert result.consumed_total == 10_000_000
    assert [e.id for e in result.consumed] == ["B1"]
    assert result.available_after == 0
    assert banking_service.available_surplus("R002") == 0
    stored = ledger_repo.get_entries("R002")
    assert stored[0].applied_year == 2025


def test_apply_oldest_vintage_first(banking_service: BankingService, surplus_route, ledger_repo):
    _seed_entries(
        ledger_repo,
        ("B2025", 2025, 500),
        ("B2023", 2023, 300),
        ("B2024", 2024, 400),
    )

    result = banking_service.apply_banked_surplus("R002", 2026, 600)

    assert [e.id for e in result.consumed] == ["B2023", "B2024"]
    assert result.consumed_total == 700
    assert result.available_after == 500

    by_id = {e.id: e for e in ledger_repo.get_entries("R002")}
    assert by_id["B2025"].applied_year is None
    assert by_id["B2023"].applied_year == 2026
    assert by_id["B2024"].applied_year == 2026


def test_apply_equal_vintage_keeps_stored_order(
    banking_service: BankingService, surplus_route, ledger_repo
):
    _seed_entries(ledger_repo, ("first", 2024, 100), ("second", 2024, 100))
    result = banking_service.apply_banked_surplus("R002", 2025, 50)
    assert [e.id for e in result.consumed] == ["first"]


def test_apply_skips_applied_entries(banking_service: BankingService, surplus_route, ledger_repo):
    _seed_entries(ledger_repo, ("old", 2023, 100), ("new", 2024, 100))
    banking_service.apply_banked_surplus("R002", 2025, 100)

    result = banking_service.apply_banked_surplus("R002", 2026, 100)
    assert [e.id for e in result.consumed] == ["new"]
    assert banking_service.available_surplus("R002") == 0


def test_apply_exactly_available_with_newest_vintage_stored_first(
    banking_service: BankingService, surplus_route, ledger_repo
):
    _seed_entries(ledger_repo, ("B2025", 2025, 0.2), ("B2024", 2024, 0.1))

    available = banking_service.available_surplus("R002")
    result = banking_service.apply_banked_surplus("R002", 2026, available)

    assert [e.id for e in result.consumed] == ["B2024", "B2025"]
    assert result.consumed_total == available
    assert result.available_after == 0
    assert banking_service.available_surplus("R002") == 0


@pytest.mark.parametrize(
    "amounts",
    [
        [(2026, 2.7e7), (2023, 1.3e6), (2025, 3.3333333e6), (2024, 1.1e7 / 3)],
        [(2025, 0.7), (2024, 0.1), (2023, 0.2), (2025, 0.3)],
        [(2030, 1e-3), (2020, 29999999.9), (2025, 1234567.891)],
    ],
)
def test_apply_all_available_never_falls_short(
    banking_service: BankingService, surplus_route, ledger_repo, amounts
):
    for i, (year, amount) in enumerate(amounts):
        ledger_repo.save_entry(BankEntry(id=f"B{i}", route_id="R002", year=year, amount=amount))

    available = banking_service.available_surplus("R002")
    result = banking_service.apply_banked_surplus("R002", 2031, available)

    assert len(result.consumed) == len(amounts)
    assert banking_service.available_surplus("R002") == 0


def test_apply_exceeds_available(banking_service: BankingService, surplus_route, ledger_repo):
    _seed_entries(ledger_repo, ("B1", 2024, 100))

    with pytest.raises(ExceedsAvailableError) as exc:
        banking_service.apply_banked_surplus("R002", 2025, 101)

    assert exc.value.available == 100
    assert ledger_repo.get_entries("R002")[0].applied_year is None


def test_apply_with_empty_ledger(banking_service: BankingService, surplus_route):
    with pytest.raises(ExceedsAvailableError):
        banking_service.apply_banked_surplus("R002", 2025, 1)


def test_apply_invalid_inputs(banking_service: BankingService, surplus_route):
    with pytest.raises(InvalidInputError):
        banking_service.apply_banked_surplus("R002", 2025, -5)
    with pytest.raises(InvalidInputError) as exc:
        banking_service.apply_banked_surplus("R002", "2025", 5)  # type: ignore[arg-type]
    assert exc.value.field == "apply_year"


def test_apply_unknown_route(banking_service: BankingService):
    with pytest.raises(NotFoundError):
        banking_service.apply_banked_surplus("NOPE", 2025, 1)


class InconsistentLedgerRepo:
    """Ledger whose only unapplied entry is smaller than the request."""

    def __init__(self) -> None:
        self.saved: list[BankEntry] = []

    def get_entries(self, route_id, year=None):
        return [
            BankEntry(id="B1", route_id=route_id, year=2024, amount=100),
            BankEntry(id="B2", route_id=route_id, year=2024, amount=100, applied_year=2024),
        ]

    def save_entry(self, entry):
        self.saved.append(entry)
        return entry

    def save_entries(self, entries):
        self.saved.extend(entries)
        return entries


def test_apply_shortfall_writes_nothing(route_repo, make_route, monkeypatch):
    route_repo.save(make_route("R002", ghg_intensity=88.0, fuel_consumption=4800))
    ledger = InconsistentLedgerRepo()
    service = BankingService(route_repo=route_repo, ledger_repo=ledger)

    # Make the ceiling check see more than the candidates can cover
    monkeypatch.setattr(
        "src.components.banking._impl.sum_available", lambda entries: 1_000.0
    )

    with pytest.raises(AllocationShortfallError) as exc:
        service.apply_banked_surplus("R002", 2025, 500)

    assert exc.value.is_defect
    assert exc.value.remaining == pytest.approx(400)
    assert ledger.saved == []


# --- list_entries ---


def test_list_entries_filters_by_year(banking_service: BankingService, surplus_route, ledger_repo):
    _seed_entries(ledger_repo, ("A", 2023, 1), ("B", 2024, 2))
    assert [e.id for e in banking_service.list_entries("R002")] == ["A", "B"]
    assert [e.id for e in banking_service.list_entries("R002", 2024)] == ["B"]


def test_list_entries_unknown_route(banking_service: BankingService):
    with pytest.raises(NotFoundError):
        banking_service.list_entries("NOPE")


# --- locking ---


def test_owner_locks_reuse_lock_per_owner():
    locks = OwnerLocks()
    with locks.hold("A"):
        pass
    with locks.hold("A"):
        pass
    assert set(locks._locks) == {"A"}


def test_concurrent_applies_never_double_spend(route_repo, ledger_repo, make_route):
    route_repo.save(make_route("R002", ghg_intensity=88.0, fuel_consumption=4800))
    for i in range(5):
        ledger_repo.save_entry(BankEntry(id=f"B{i}", route_id="R002", year=2024, amount=100))

    service = BankingService(route_repo=route_repo, ledger_repo=ledger_repo)
    results: list[str] = []
    errors: list[Exception] = []

    def worker():
        try:
            out = service.apply_banked_surplus("R002", 2025, 100)
            results.extend(e.id for e in out.consumed)
        except ExceedsAvailableError as e:
            errors.append(e)

    threads = [threading.Thread(target=worker) for _ in range(8)]
    for t in threads:
        t.start()
    for t in threads:
        t.join()

    assert sorted(results) == [f"B{i}" for i in range(5)]
    assert len(errors) == 3
