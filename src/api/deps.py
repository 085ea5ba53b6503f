import os
from dataclasses import dataclass, field
from functools import lru_cache
from pathlib import Path

from fastapi import Depends

from src.adapters.memory.repos import InMemoryLedgerRepo, InMemoryPoolRepo, InMemoryRouteRepo
from src.adapters.sqlite.repos import SQLiteLedgerRepo, SQLitePoolRepo, SQLiteRouteRepo
from src.components.banking import BankingService, OwnerLocks
from src.components.pooling import PoolingService
from src.components.routes import RouteService
from src.domain.compliance import BalanceCalculator
from src.ports.repo import LedgerRepoPort, PoolRepoPort, RouteRepoPort
from src.rules.loader import load_rules
from src.rules.models import Rules


# --- Settings ---
class Settings:
    def __init__(self) -> None:
        self.base_dir = Path(os.getcwd())
        self.data_dir = Path(os.environ.get("FUELEU_DATA_DIR", "./data"))
        self.db_path = str(self.data_dir / "fueleu.db")
        self.storage = os.environ.get("FUELEU_STORAGE", "sqlite")
        self.rules_path = Path(
            os.environ.get("FUELEU_RULES_PATH", str(self.base_dir / "rules.yaml"))
        )
        self.migrations_dir = str(self.base_dir / "migrations")


@lru_cache
def get_settings() -> Settings:
    return Settings()


# --- Rules ---
@lru_cache
def get_rules() -> Rules:
    return load_rules(get_settings().rules_path)


def get_calculator(rules: Rules = Depends(get_rules)) -> BalanceCalculator:
    return BalanceCalculator(
        target_intensity=rules.compliance.target_intensity,
        mj_per_tonne=rules.compliance.energy_mj_per_tonne,
    )


# --- Repos ---
@dataclass
class MemoryStores:
    routes: InMemoryRouteRepo = field(default_factory=InMemoryRouteRepo)
    ledger: InMemoryLedgerRepo = field(default_factory=InMemoryLedgerRepo)
    pools: InMemoryPoolRepo = field(default_factory=InMemoryPoolRepo)


_memory_stores: MemoryStores | None = None


def get_memory_stores() -> MemoryStores:
    """In-memory stores singleton (FUELEU_STORAGE=memory)."""
    global _memory_stores
    if _memory_stores is None:
        _memory_stores = MemoryStores()
    return _memory_stores


def get_route_repo(settings: Settings = Depends(get_settings)) -> RouteRepoPort:
    if settings.storage == "memory":
        return get_memory_stores().routes
    return SQLiteRouteRepo(settings.db_path)


def get_ledger_repo(settings: Settings = Depends(get_settings)) -> LedgerRepoPort:
    if settings.storage == "memory":
        return get_memory_stores().ledger
    return SQLiteLedgerRepo(settings.db_path)


def get_pool_repo(settings: Settings = Depends(get_settings)) -> PoolRepoPort:
    if settings.storage == "memory":
        return get_memory_stores().pools
    return SQLitePoolRepo(settings.db_path)


# Ledger writes for one owner are serialized across requests
_owner_locks_instance: OwnerLocks | None = None


def get_owner_locks() -> OwnerLocks:
    """Get owner lock registry singleton."""
    global _owner_locks_instance
    if _owner_locks_instance is None:
        _owner_locks_instance = OwnerLocks()
    return _owner_locks_instance


# --- Component Services ---
def get_route_service(
    repo: RouteRepoPort = Depends(get_route_repo),
    calculator: BalanceCalculator = Depends(get_calculator),
) -> RouteService:
    return RouteService(repo=repo, calculator=calculator)


def get_banking_service(
    route_repo: RouteRepoPort = Depends(get_route_repo),
    ledger_repo: LedgerRepoPort = Depends(get_ledger_repo),
    calculator: BalanceCalculator = Depends(get_calculator),
) -> BankingService:
    return BankingService(
        route_repo=route_repo,
        ledger_repo=ledger_repo,
        calculator=calculator,
        locks=get_owner_locks(),
    )


def get_pooling_service(
    route_repo: RouteRepoPort = Depends(get_route_repo),
    pool_repo: PoolRepoPort = Depends(get_pool_repo),
    calculator: BalanceCalculator = Depends(get_calculator),
    rules: Rules = Depends(get_rules),
) -> PoolingService:
    return PoolingService(
        route_repo=route_repo,
        pool_repo=pool_repo,
        calculator=calculator,
        min_members=rules.pooling.min_members,
    )
