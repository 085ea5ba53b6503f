"""
Shared fixtures for HTTP tests: the real app wired to in-memory repos.
"""

from __future__ import annotations

from collections.abc import Iterator

import pytest
from fastapi.testclient import TestClient

from src.api.deps import get_ledger_repo, get_pool_repo, get_route_repo, get_rules
from src.api.main import app
from src.domain.entities import BankEntry
from src.rules.loader import default_rules


@pytest.fixture
def client(route_repo, ledger_repo, pool_repo, make_route) -> Iterator[TestClient]:
    """Test client over seeded in-memory stores. Lifespan is not run."""
    route_repo.save(make_route("R001", ghg_intensity=91.0, is_baseline=True))
    route_repo.save(
        make_route("R002", vessel_type="BulkCarrier", fuel_type="LNG",
                   ghg_intensity=88.0, fuel_consumption=4800)
    )
    route_repo.save(make_route("R005", ghg_intensity=90.5, fuel_consumption=4950, year=2025))
    ledger_repo.save_entry(
        BankEntry(id="BANK-SEED-R002-2024", route_id="R002", year=2024, amount=10_000_000)
    )

    app.dependency_overrides[get_route_repo] = lambda: route_repo
    app.dependency_overrides[get_ledger_repo] = lambda: ledger_repo
    app.dependency_overrides[get_pool_repo] = lambda: pool_repo
    app.dependency_overrides[get_rules] = default_rules

    yield TestClient(app)

    app.dependency_overrides.clear()
