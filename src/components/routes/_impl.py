"""
RouteService - Route catalogue and compliance comparison.

Functional Core - reads routes, derives balances, keeps a single baseline.
"""

from __future__ import annotations

import logging

from src.domain.compliance import BalanceCalculator
from src.domain.entities import Route
from src.domain.errors import NotFoundError

from .models import RouteComparison, RouteView
from .ports import RouteRepoPort

logger = logging.getLogger(__name__)


class RouteService:
    """
    Route service.

    Lists routes with derived figures and maintains the baseline flag.
    """

    def __init__(
        self,
        repo: RouteRepoPort,
        calculator: BalanceCalculator | None = None,
    ) -> None:
        """Initialize service."""
        self._repo = repo
        self._calc = calculator or BalanceCalculator()

    @property
    def target_intensity(self) -> float:
        return self._calc.target_intensity

    def list_routes(self) -> list[Route]:
        return self._repo.list_all()

    def get_route(self, route_id: str) -> Route:
        route = self._repo.get_by_id(route_id)
        if route is None:
            raise NotFoundError(route_id)
        return route

    def save_route(self, route: Route) -> Route:
        """Insert or replace a route."""
        return self._repo.save(route)

    def describe(self, route: Route) -> RouteView:
        return RouteView(
            route=route,
            energy_in_scope=self._calc.energy_in_scope(route),
            total_emissions=self._calc.total_emissions(route),
            compliance_balance=self._calc.balance(route),
        )

    def compare_routes(self) -> list[RouteComparison]:
        rows = []
        for route in self._repo.list_all():
            balance = self._calc.balance(route)
            rows.append(
                RouteComparison(
                    route_id=route.id,
                    ghg_intensity=route.ghg_intensity,
                    compliance_balance=balance,
                    is_compliant=balance >= 0,
                    percent_diff=self._calc.percent_diff(route),
                )
            )
        return rows

    def get_baseline(self) -> Route | None:
        return next((r for r in self._repo.list_all() if r.is_baseline), None)

    def set_baseline(self, route_id: str) -> Route:
        """Mark one route as baseline and clear the flag everywhere else."""
        target = self.get_route(route_id)

        for route in self._repo.list_all():
            if route.is_baseline and route.id != route_id:
                self._repo.save(route.model_copy(update={"is_baseline": False}))

        updated = target.model_copy(update={"is_baseline": True})
        self._repo.save(updated)
        logger.info("Baseline set to route %s", route_id)
        return updated
