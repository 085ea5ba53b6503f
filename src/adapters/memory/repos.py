"""In-memory repository adapters.

Implement RouteRepoPort, LedgerRepoPort and PoolRepoPort for tests and
single-process deployments. Records are copied on the way in and out so
callers can never mutate stored state by reference.
"""

import threading

from src.domain.entities import BankEntry, Pool, Route


class InMemoryRouteRepo:
    """Route store backed by an insertion-ordered dict."""

    def __init__(self) -> None:
        self._routes: dict[str, Route] = {}

    def save(self, route: Route) -> Route:
        self._routes[route.id] = route.model_copy()
        return route

    def get_by_id(self, route_id: str) -> Route | None:
        route = self._routes.get(route_id)
        return route.model_copy() if route else None

    def list_all(self) -> list[Route]:
        return [r.model_copy() for r in self._routes.values()]

    def clear(self) -> None:
        """Clear all routes - useful for testing."""
        self._routes.clear()


class InMemoryLedgerRepo:
    """Bank entry arena indexed by entry id."""

    def __init__(self) -> None:
        self._entries: dict[str, BankEntry] = {}
        self._lock = threading.Lock()

    def get_entries(self, route_id: str, year: int | None = None) -> list[BankEntry]:
        with self._lock:
            entries = [e for e in self._entries.values() if e.route_id == route_id]
        if year is not None:
            entries = [e for e in entries if e.year == year]
        return [e.model_copy() for e in entries]

    def save_entry(self, entry: BankEntry) -> BankEntry:
        with self._lock:
            self._entries[entry.id] = entry.model_copy()
        return entry

    def save_entries(self, entries: list[BankEntry]) -> list[BankEntry]:
        with self._lock:
            for entry in entries:
                self._entries[entry.id] = entry.model_copy()
        return entries

    def clear(self) -> None:
        self._entries.clear()


class InMemoryPoolRepo:
    def __init__(self) -> None:
        self._pools: dict[str, Pool] = {}

    def save_pool(self, pool: Pool) -> Pool:
        self._pools[pool.id] = pool.model_copy(deep=True)
        return pool

    def list_by_year(self, year: int) -> list[Pool]:
        return [p.model_copy(deep=True) for p in self._pools.values() if p.year == year]

    def clear(self) -> None:
        self._pools.clear()
