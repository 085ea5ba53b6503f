from datetime import datetime

from pydantic import BaseModel, ConfigDict

from src.domain.entities import BalanceStatus


# --- Routes ---
class RouteResponse(BaseModel):
    id: str
    vessel_type: str
    fuel_type: str
    year: int
    ghg_intensity: float
    fuel_consumption: float
    distance: float
    is_baseline: bool
    energy_in_scope: float
    total_emissions: float
    compliance_balance: float


class RouteComparisonResponse(BaseModel):
    route_id: str
    ghg_intensity: float
    compliance_balance: float
    is_compliant: bool
    percent_diff: float


class ComparisonResponse(BaseModel):
    target_intensity: float
    baseline_id: str | None
    rows: list[RouteComparisonResponse]


# --- Compliance / Banking ---
class BalanceResponse(BaseModel):
    route_id: str
    year: int
    balance: float
    status: BalanceStatus


class BankEntryResponse(BaseModel):
    id: str
    route_id: str
    year: int
    amount: float
    applied_year: int | None

    model_config = ConfigDict(from_attributes=True)


class BankResponse(BaseModel):
    message: str
    entry: BankEntryResponse
    available_after: float


class ApplyResponse(BaseModel):
    message: str
    route_id: str
    apply_year: int
    requested: float
    consumed_total: float
    consumed: list[BankEntryResponse]
    available_after: float


class LedgerResponse(BaseModel):
    route_id: str
    available: float
    entries: list[BankEntryResponse]


# --- Pools ---
class PoolMemberResponse(BaseModel):
    route_id: str
    initial_cb: float
    adjusted_cb: float
    allocation_used: float

    model_config = ConfigDict(from_attributes=True)


class PoolAllocationResponse(BaseModel):
    message: str
    pool_id: str
    pool_name: str
    year: int
    is_compliant: bool
    initial_sum_cb: float
    total_adjusted_cb: float
    members: list[PoolMemberResponse]


class PoolResponse(BaseModel):
    id: str
    name: str
    year: int
    created_at: datetime
    members: list[PoolMemberResponse]

    model_config = ConfigDict(from_attributes=True)
