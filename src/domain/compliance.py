"""
FuelEU compliance balance arithmetic.

Pure functions over Route records. Nothing here touches a repository.

    energy_in_scope    = fuel_consumption * 41000            (MJ)
    compliance_balance = (target - ghg_intensity) * energy   (gCO2e)

A positive balance is a surplus, a negative one a deficit.
"""

from __future__ import annotations

from src.domain.entities import BalanceStatus, Route

# Target GHG intensity for reporting period 2025 (gCO2e/MJ).
TARGET_INTENSITY_2025 = 89.3368

# Lower calorific conversion, MJ per tonne of fuel.
ENERGY_MJ_PER_TONNE = 41000


def energy_in_scope(route: Route, mj_per_tonne: float = ENERGY_MJ_PER_TONNE) -> float:
    return route.fuel_consumption * mj_per_tonne


def total_emissions(route: Route, mj_per_tonne: float = ENERGY_MJ_PER_TONNE) -> float:
    """Total emissions in tonnes CO2e."""
    return (route.ghg_intensity * energy_in_scope(route, mj_per_tonne)) / 1_000_000


def calculate_balance(
    route: Route,
    target_intensity: float = TARGET_INTENSITY_2025,
    mj_per_tonne: float = ENERGY_MJ_PER_TONNE,
) -> float:
    return (target_intensity - route.ghg_intensity) * energy_in_scope(route, mj_per_tonne)


def is_compliant(
    route: Route,
    target_intensity: float = TARGET_INTENSITY_2025,
    mj_per_tonne: float = ENERGY_MJ_PER_TONNE,
) -> bool:
    return calculate_balance(route, target_intensity, mj_per_tonne) >= 0


def balance_status(balance: float) -> BalanceStatus:
    return "Surplus" if balance >= 0 else "Deficit"


def percent_diff(route: Route, target_intensity: float = TARGET_INTENSITY_2025) -> float:
    """Intensity relative to target, in percent. Positive means above target."""
    return ((route.ghg_intensity / target_intensity) - 1) * 100


class BalanceCalculator:
    """Balance functions bound to a configured target and conversion factor."""

    def __init__(
        self,
        target_intensity: float = TARGET_INTENSITY_2025,
        mj_per_tonne: float = ENERGY_MJ_PER_TONNE,
    ) -> None:
        self.target_intensity = target_intensity
        self.mj_per_tonne = mj_per_tonne

    def balance(self, route: Route) -> float:
        return calculate_balance(route, self.target_intensity, self.mj_per_tonne)

    def is_compliant(self, route: Route) -> bool:
        return self.balance(route) >= 0

    def energy_in_scope(self, route: Route) -> float:
        return energy_in_scope(route, self.mj_per_tonne)

    def total_emissions(self, route: Route) -> float:
        return total_emissions(route, self.mj_per_tonne)

    def percent_diff(self, route: Route) -> float:
        return percent_diff(route, self.target_intensity)
