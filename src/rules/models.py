from typing import Literal

from pydantic import BaseModel, Field

from src.domain.compliance import ENERGY_MJ_PER_TONNE, TARGET_INTENSITY_2025


class ProjectRules(BaseModel):
    slug: str
    rules_version: str


class ComplianceRules(BaseModel):
    target_intensity: float = TARGET_INTENSITY_2025
    energy_mj_per_tonne: float = Field(default=ENERGY_MJ_PER_TONNE, gt=0)


class BankingRules(BaseModel):
    # Whole-entry consumption: the last entry taken may exceed the remaining need.
    consumption_order: Literal["vintage_asc"] = "vintage_asc"


class PoolingRules(BaseModel):
    min_members: int = Field(default=2, ge=2)


class SeedRoute(BaseModel):
    id: str
    vessel_type: str
    fuel_type: str
    year: int
    ghg_intensity: float
    fuel_consumption: float
    distance: float
    is_baseline: bool = False


class SeedBankEntry(BaseModel):
    id: str
    route_id: str
    year: int
    amount: float = Field(gt=0)


class SeedRules(BaseModel):
    enabled: bool = False
    routes: list[SeedRoute] = Field(default_factory=list)
    bank_entries: list[SeedBankEntry] = Field(default_factory=list)


class OpsRules(BaseModel):
    required_env: list[str] = Field(default_factory=list)


class Rules(BaseModel):
    project: ProjectRules
    compliance: ComplianceRules = Field(default_factory=ComplianceRules)
    banking: BankingRules = Field(default_factory=BankingRules)
    pooling: PoolingRules = Field(default_factory=PoolingRules)
    seed: SeedRules = Field(default_factory=SeedRules)
    ops: OpsRules = Field(default_factory=OpsRules)
