import os
from pathlib import Path

import pytest

from src.adapters.memory.repos import InMemoryLedgerRepo, InMemoryPoolRepo, InMemoryRouteRepo
from src.adapters.sqlite.migrator import SQLiteMigrator
from src.components.banking import BankingService
from src.components.pooling import PoolingService
from src.components.routes import RouteService
from src.domain.entities import Route

MIGRATIONS_DIR = str(Path(__file__).resolve().parent.parent / "migrations")
RULES_PATH = Path(__file__).resolve().parent.parent / "rules.yaml"


def build_route(
    route_id: str = "R001",
    ghg_intensity: float = 91.0,
    fuel_consumption: float = 5000,
    year: int = 2024,
    **overrides,
) -> Route:
    data = {
        "id": route_id,
        "vessel_type": "Container",
        "fuel_type": "HFO",
        "year": year,
        "ghg_intensity": ghg_intensity,
        "fuel_consumption": fuel_consumption,
        "distance": 12000,
    }
    data.update(overrides)
    return Route(**data)


@pytest.fixture
def route_repo():
    return InMemoryRouteRepo()


@pytest.fixture
def ledger_repo():
    return InMemoryLedgerRepo()


@pytest.fixture
def pool_repo():
    return InMemoryPoolRepo()


@pytest.fixture
def route_service(route_repo):
    return RouteService(repo=route_repo)


@pytest.fixture
def banking_service(route_repo, ledger_repo):
    return BankingService(route_repo=route_repo, ledger_repo=ledger_repo)


@pytest.fixture
def pooling_service(route_repo, pool_repo):
    return PoolingService(route_repo=route_repo, pool_repo=pool_repo)


@pytest.fixture
def test_db(tmp_path):
    """
    Creates a migrated SQLite database in a temporary directory.
    """
    db_path = os.path.join(str(tmp_path), "fueleu.db")
    SQLiteMigrator(db_path, MIGRATIONS_DIR).run_migrations()
    return db_path


@pytest.fixture
def make_route():
    """Factory for Route records with the R001 defaults."""
    return build_route
