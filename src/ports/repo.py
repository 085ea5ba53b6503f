from typing import Protocol

from src.domain.entities import BankEntry, Pool, Route


class RouteRepoPort(Protocol):
    def save(self, route: Route) -> Route:
        ...

    def get_by_id(self, route_id: str) -> Route | None:
        ...

    def list_all(self) -> list[Route]:
        ...


class LedgerRepoPort(Protocol):
    """Banked surplus records. Entries are upserted, never deleted."""

    def get_entries(self, route_id: str, year: int | None = None) -> list[BankEntry]:
        ...

    def save_entry(self, entry: BankEntry) -> BankEntry:
        """Insert or update a single entry by id."""
        ...

    def save_entries(self, entries: list[BankEntry]) -> list[BankEntry]:
        """Upsert several entries as one atomic write."""
        ...


class PoolRepoPort(Protocol):
    def save_pool(self, pool: Pool) -> Pool:
        """Persist a pool and its members atomically."""
        ...

    def list_by_year(self, year: int) -> list[Pool]:
        ...
